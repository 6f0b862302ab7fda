from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlmodel import Session, select
import logging
from database import get_session
from models import Task
from schemas import (
    TaskCreate, TaskUpdate, TaskResponse, PriorityUpdate, ApiResponse,
    SortField, SortDirection,
)
from middleware.auth import verify_jwt_middleware

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(verify_jwt_middleware)])


def _get_owned_task(session: Session, task_id: str, user_id: str) -> Task:
    """Load a task, hiding rows that belong to other users"""
    task = session.get(Task, task_id)

    if not task or task.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )

    return task


@router.get("/tasks")
async def list_tasks(
    request: Request,
    session: Session = Depends(get_session),
    order: SortField = "priority",
    direction: SortDirection = "asc"
) -> ApiResponse:
    """
    Get all tasks for authenticated user

    Args:
        request: FastAPI request (contains authenticated user info)
        session: Database session
        order: Column to sort by (priority, created_at)
        direction: Sort direction (asc, desc)

    Returns:
        ApiResponse with list of tasks
    """
    column = Task.priority if order == "priority" else Task.created_at
    primary = column.asc() if direction == "asc" else column.desc()

    query = (
        select(Task)
        .where(Task.user_id == request.state.user_id)
        .order_by(primary, Task.created_at.asc(), Task.id)
    )

    tasks = session.exec(query).all()

    return ApiResponse(
        success=True,
        data=[TaskResponse.model_validate(task).model_dump(mode="json") for task in tasks]
    )


@router.post("/tasks", status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate,
    request: Request,
    session: Session = Depends(get_session)
) -> ApiResponse:
    """
    Create a new task

    Args:
        task_data: Task creation data
        request: FastAPI request
        session: Database session

    Returns:
        ApiResponse with created task
    """
    user_id = request.state.user_id

    if task_data.user_id is not None and task_data.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot create tasks for other users"
        )

    if not task_data.text.strip():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Task text must not be empty"
        )

    task = Task(
        user_id=user_id,
        text=task_data.text,
        notes=task_data.notes,
        priority=task_data.priority
    )

    session.add(task)
    session.commit()
    session.refresh(task)

    return ApiResponse(
        success=True,
        data=TaskResponse.model_validate(task).model_dump(mode="json")
    )


@router.put("/tasks/priorities")
async def update_priorities(
    update: PriorityUpdate,
    request: Request,
    session: Session = Depends(get_session)
) -> ApiResponse:
    """
    Rewrite the priority of several tasks atomically

    Either every assignment is applied or none is.

    Args:
        update: List of (id, priority) assignments
        request: FastAPI request
        session: Database session

    Returns:
        ApiResponse with the number of updated tasks
    """
    tasks = [
        (_get_owned_task(session, assignment.id, request.state.user_id), assignment.priority)
        for assignment in update.assignments
    ]

    for task, priority in tasks:
        task.priority = priority
        session.add(task)

    session.commit()

    logger.debug("Reassigned %d priorities for %s", len(tasks), request.state.user_id)
    return ApiResponse(
        success=True,
        data={"updated": len(tasks)}
    )


@router.get("/tasks/{task_id}")
async def get_task(
    task_id: str,
    request: Request,
    session: Session = Depends(get_session)
) -> ApiResponse:
    """
    Get task details

    Args:
        task_id: Task ID
        request: FastAPI request
        session: Database session

    Returns:
        ApiResponse with task details
    """
    task = _get_owned_task(session, task_id, request.state.user_id)

    return ApiResponse(
        success=True,
        data=TaskResponse.model_validate(task).model_dump(mode="json")
    )


@router.patch("/tasks/{task_id}")
async def update_task(
    task_id: str,
    task_data: TaskUpdate,
    request: Request,
    session: Session = Depends(get_session)
) -> ApiResponse:
    """
    Update a task's notes and/or priority

    Args:
        task_id: Task ID
        task_data: Task update data
        request: FastAPI request
        session: Database session

    Returns:
        ApiResponse with updated task
    """
    task = _get_owned_task(session, task_id, request.state.user_id)

    # Update fields
    if task_data.notes is not None:
        task.notes = task_data.notes
    if task_data.priority is not None:
        task.priority = task_data.priority

    session.add(task)
    session.commit()
    session.refresh(task)

    return ApiResponse(
        success=True,
        data=TaskResponse.model_validate(task).model_dump(mode="json")
    )


@router.delete("/tasks/{task_id}")
async def delete_task(
    task_id: str,
    request: Request,
    session: Session = Depends(get_session)
) -> ApiResponse:
    """
    Delete a task

    Args:
        task_id: Task ID
        request: FastAPI request
        session: Database session

    Returns:
        ApiResponse with success message
    """
    task = _get_owned_task(session, task_id, request.state.user_id)

    session.delete(task)
    session.commit()

    return ApiResponse(
        success=True,
        data={"message": "Task deleted successfully"}
    )
