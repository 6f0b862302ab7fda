import logging
from client.markdown_render import render_markdown
from client.store import TaskStoreClient, TaskStoreError
from client.task_list import TaskListView

logger = logging.getLogger(__name__)

NOTES_PLACEHOLDER = '*No notes yet. Click the "Raw mode" button to start editing.*'
RAW_PLACEHOLDER = "Add your notes here... Supports Markdown!"


class NotesEditor:
    """Raw / rendered view of the selected task's notes"""

    def __init__(self, store: TaskStoreClient, task_list: TaskListView):
        self.store = store
        self.task_list = task_list
        self.show_raw = False

    def toggle_mode(self) -> None:
        self.show_raw = not self.show_raw

    @property
    def mode_label(self) -> str:
        return "Render mode" if self.show_raw else "Raw mode"

    @property
    def raw_text(self) -> str:
        return self.task_list.notes

    def rendered(self) -> str:
        return render_markdown(self.task_list.notes or NOTES_PLACEHOLDER)

    def update_notes(self, notes: str) -> bool:
        """Persist a change straight away; the buffer follows the store"""
        selected = self.task_list.selected
        if not selected:
            return False

        try:
            self.store.update_task(selected.id, notes=notes)
        except TaskStoreError:
            logger.exception("Error updating notes")
            return False

        self.task_list.notes = notes
        self.task_list.replace_task(selected.model_copy(update={"notes": notes}))
        return True
