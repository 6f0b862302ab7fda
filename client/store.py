import httpx
import logging
from typing import Any, Iterable, List, Optional, Tuple
from schemas import TaskResponse

logger = logging.getLogger(__name__)


class TaskStoreError(Exception):
    """A remote task operation failed"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def error_detail(response: httpx.Response) -> str:
    """Best human-readable message from an error response"""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, str):
        return detail
    if isinstance(detail, list) and detail:
        # FastAPI validation errors
        return detail[0].get("msg", response.reason_phrase)
    return response.reason_phrase


class TaskStoreClient:
    """
    Remote CRUD against the caller's `tasks` resource

    Every call is a single blocking request; the caller decides what
    to do with local state once it returns or raises TaskStoreError.
    """

    def __init__(self, http: httpx.Client, access_token: str):
        self._http = http
        self._headers = {"Authorization": f"Bearer {access_token}"}

    def _request(self, method: str, url: str, **kwargs) -> Any:
        try:
            response = self._http.request(method, url, headers=self._headers, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TaskStoreError(error_detail(exc.response), exc.response.status_code) from exc
        except httpx.HTTPError as exc:
            raise TaskStoreError(str(exc)) from exc
        return response.json().get("data")

    def list_tasks(self, order: str = "priority", ascending: bool = True) -> List[TaskResponse]:
        params = {"order": order, "direction": "asc" if ascending else "desc"}
        rows = self._request("GET", "/api/tasks", params=params)
        return [TaskResponse.model_validate(row) for row in rows]

    def insert_task(self, text: str, priority: int, user_id: Optional[str] = None) -> TaskResponse:
        payload = {"text": text, "notes": "", "priority": priority}
        if user_id is not None:
            payload["user_id"] = user_id
        return TaskResponse.model_validate(self._request("POST", "/api/tasks", json=payload))

    def update_task(self, task_id: str, *, notes: Optional[str] = None,
                    priority: Optional[int] = None) -> None:
        payload = {}
        if notes is not None:
            payload["notes"] = notes
        if priority is not None:
            payload["priority"] = priority
        self._request("PATCH", f"/api/tasks/{task_id}", json=payload)

    def delete_task(self, task_id: str) -> None:
        self._request("DELETE", f"/api/tasks/{task_id}")

    def update_priorities(self, assignments: Iterable[Tuple[str, int]]) -> None:
        """Apply all (id, priority) pairs in one transaction"""
        payload = {"assignments": [{"id": task_id, "priority": priority}
                                   for task_id, priority in assignments]}
        self._request("PUT", "/api/tasks/priorities", json=payload)
