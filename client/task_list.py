import logging
from datetime import datetime
from typing import List, Optional, Sequence, TypeVar
from client.age import format_task_age
from client.sorting import SortController
from client.store import TaskStoreClient, TaskStoreError
from schemas import TaskResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")

SEQUENTIAL = "sequential"
BATCH = "batch"

NO_TASKS_MESSAGE = "No tasks yet. Add some tasks to get started!"
NO_SELECTION_MESSAGE = "Select a task to view and edit notes"


def move_item(items: Sequence[T], old_index: int, new_index: int) -> List[T]:
    """Relocate one element; everything else keeps its relative order"""
    moved = list(items)
    moved.insert(new_index, moved.pop(old_index))
    return moved


class TaskListView:
    """
    Ordered cache of the signed-in user's tasks plus the current selection

    The cache only changes after the store confirms a change, so a failed
    call leaves `tasks` exactly as it was.
    """

    def __init__(self, store: TaskStoreClient, sort: SortController,
                 reorder_strategy: str = SEQUENTIAL):
        if reorder_strategy not in (SEQUENTIAL, BATCH):
            raise ValueError(f"Unknown reorder strategy: {reorder_strategy}")
        self.store = store
        self.sort = sort
        self.reorder_strategy = reorder_strategy
        self.tasks: List[TaskResponse] = []
        self.selected: Optional[TaskResponse] = None
        self.notes = ""

    def index_of(self, task_id: str) -> int:
        for index, task in enumerate(self.tasks):
            if task.id == task_id:
                return index
        return -1

    def fetch(self) -> bool:
        try:
            tasks = self.store.list_tasks(self.sort.order_field, self.sort.ascending)
        except TaskStoreError:
            logger.exception("Error fetching tasks")
            return False

        self.tasks = tasks
        if self.selected:
            index = self.index_of(self.selected.id)
            if index == -1:
                self.clear_selection()
            else:
                self.selected = self.tasks[index]
        return True

    def add_task(self, text: str) -> Optional[TaskResponse]:
        if not text.strip():
            return None

        try:
            task = self.store.insert_task(text, priority=len(self.tasks))
        except TaskStoreError:
            logger.exception("Error adding task")
            return None

        self.tasks = [*self.tasks, task]
        return task

    def remove_task(self, task_id: str) -> bool:
        try:
            self.store.delete_task(task_id)
        except TaskStoreError:
            logger.exception("Error removing task")
            return False

        self.tasks = [task for task in self.tasks if task.id != task_id]
        if self.selected and self.selected.id == task_id:
            self.clear_selection()
        return True

    def reorder(self, active_id: str, over_id: str) -> bool:
        """
        Move the dragged task onto the drop target's position

        Every task's priority is rewritten to its new index. In sequential
        mode the first failed update stops the run; updates already sent
        stay applied remotely while the local order is left untouched.
        """
        if self.sort.sort_type != "priority":
            logger.warning("Reorder ignored while sorted by %s", self.sort.sort_type)
            return False
        if active_id == over_id:
            return False

        old_index = self.index_of(active_id)
        new_index = self.index_of(over_id)
        if old_index == -1 or new_index == -1:
            logger.warning("Reorder references unknown task %s -> %s", active_id, over_id)
            return False

        moved = move_item(self.tasks, old_index, new_index)
        try:
            if self.reorder_strategy == BATCH:
                self.store.update_priorities((task.id, index) for index, task in enumerate(moved))
            else:
                for index, task in enumerate(moved):
                    self.store.update_task(task.id, priority=index)
        except TaskStoreError:
            logger.exception("Error updating priorities")
            return False

        self.tasks = [task.model_copy(update={"priority": index})
                      for index, task in enumerate(moved)]
        if self.selected:
            index = self.index_of(self.selected.id)
            if index == -1:
                self.clear_selection()
            else:
                self.selected = self.tasks[index]
        return True

    def replace_task(self, updated: TaskResponse) -> None:
        self.tasks = [updated if task.id == updated.id else task for task in self.tasks]
        if self.selected and self.selected.id == updated.id:
            self.selected = updated

    def select(self, task: TaskResponse) -> None:
        self.selected = task
        self.notes = task.notes

    def clear_selection(self) -> None:
        self.selected = None
        self.notes = ""

    def adjacent(self, direction: str) -> Optional[TaskResponse]:
        """Neighbour of the selection, wrapping at both ends"""
        if not self.selected or not self.tasks:
            return None
        current = self.index_of(self.selected.id)
        if current == -1:
            return None
        step = 1 if direction == "next" else -1
        return self.tasks[(current + step) % len(self.tasks)]

    def select_adjacent(self, direction: str) -> Optional[TaskResponse]:
        task = self.adjacent(direction)
        if task:
            self.select(task)
        return task

    @property
    def position_label(self) -> str:
        if not self.selected:
            return ""
        return f"Task #{self.index_of(self.selected.id) + 1} of {len(self.tasks)}"

    @property
    def empty_message(self) -> str:
        return NO_TASKS_MESSAGE if not self.tasks else NO_SELECTION_MESSAGE

    @staticmethod
    def age_label(task: TaskResponse, now: Optional[datetime] = None) -> str:
        return format_task_age(task.created_at, now)
