import httpx
import logging
import os
from typing import Optional
from dotenv import load_dotenv
from client.auth import AuthGate, AuthSession, SIGNED_OUT
from client.notes import NotesEditor
from client.sorting import SortController
from client.store import TaskStoreClient
from client.task_list import TaskListView, SEQUENTIAL

load_dotenv()

logger = logging.getLogger(__name__)

VIEW_MODES = ("split", "list", "notes")
VIEW_MODE_LABELS = {
    "split": "To List View",
    "list": "To Note View",
    "notes": "To Split View",
}


class AppState:
    """
    Everything the interface needs for one process

    Task components only exist while someone is signed in; they are
    rebuilt on every sign-in and dropped on sign-out.
    """

    def __init__(self, http: httpx.Client, reorder_strategy: Optional[str] = None,
                 access_token: Optional[str] = None):
        self.http = http
        self.reorder_strategy = reorder_strategy or os.getenv("REORDER_STRATEGY", SEQUENTIAL)
        self.auth = AuthGate(http)
        self.sort = SortController()
        self.view_mode = "split"
        self.task_list: Optional[TaskListView] = None
        self.notes: Optional[NotesEditor] = None
        self._unsubscribe = self.auth.on_auth_state_change(self._on_auth_change)
        self.auth.initialize(access_token)

    def _on_auth_change(self, event: str, session: Optional[AuthSession]) -> None:
        logger.info("Auth state changed: %s", event)
        if session is None or event == SIGNED_OUT:
            self.task_list = None
            self.notes = None
            return

        store = TaskStoreClient(self.http, session.access_token)
        self.task_list = TaskListView(store, self.sort, self.reorder_strategy)
        self.notes = NotesEditor(store, self.task_list)
        self.task_list.fetch()

    @property
    def signed_in(self) -> bool:
        return self.auth.session is not None

    def toggle_sort(self) -> None:
        self.sort.toggle()
        self._refetch()

    def select_priority_sort(self) -> None:
        self.sort.select_priority()
        self._refetch()

    def _refetch(self) -> None:
        if self.task_list:
            self.task_list.fetch()

    def cycle_view_mode(self) -> str:
        position = VIEW_MODES.index(self.view_mode)
        self.view_mode = VIEW_MODES[(position + 1) % len(VIEW_MODES)]
        return self.view_mode

    @property
    def view_mode_label(self) -> str:
        return VIEW_MODE_LABELS[self.view_mode]

    def close(self) -> None:
        self._unsubscribe()


def create_app_state(base_url: Optional[str] = None,
                     access_token: Optional[str] = None) -> AppState:
    """AppState talking to the API at TODO_API_URL"""
    base_url = base_url or os.getenv("TODO_API_URL", "http://localhost:8000")
    # No client-side timeout: a hung call only stalls its own operation
    return AppState(httpx.Client(base_url=base_url, timeout=None), access_token=access_token)
