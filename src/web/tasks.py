"""
Task routes. All operations are scoped to the authenticated user.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Request

from ..database.models import TaskStatusEnum
from ..models import MessageResponse, TaskCreate, TaskResponse, TaskUpdate
from ..services import TaskService
from .dependencies import get_task_service

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _submitted_fields(body: Dict[str, Any]) -> Dict[str, Any]:
    """Keep the known task fields of a request body, keys and values untouched."""
    known = set()
    for name, field in TaskUpdate.model_fields.items():
        known.add(name)
        if field.alias:
            known.add(field.alias)
    return {key: value for key, value in body.items() if key in known}


@router.get("", response_model=List[TaskResponse])
async def list_tasks(
    status: Optional[TaskStatusEnum] = Query(None),
    employee_id: Optional[int] = Query(None, alias="employeeId"),
    search: Optional[str] = Query(None, max_length=200),
    service: TaskService = Depends(get_task_service),
):
    """Caller's tasks with assignees, newest first."""
    return await service.list(
        status=status.value if status else None,
        employee_id=employee_id,
        search=search.strip() if search else None,
    )


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: int, service: TaskService = Depends(get_task_service)):
    return await service.get(task_id)


@router.post("", response_model=TaskResponse, status_code=201)
async def create_task(
    payload: TaskCreate,
    service: TaskService = Depends(get_task_service),
):
    """Create a task; announces it on Telegram when configured."""
    return await service.create(payload.model_dump())


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    payload: TaskUpdate,
    request: Request,
    service: TaskService = Depends(get_task_service),
):
    """
    Apply the fields present in the body and append a history entry.

    The entry's ``changes`` is the body as submitted.
    """
    return await service.update(
        task_id,
        changes=payload.model_dump(exclude_unset=True),
        submitted=_submitted_fields(await request.json()),
    )


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(task_id: int, service: TaskService = Depends(get_task_service)):
    await service.delete(task_id)
    return MessageResponse(message="Task deleted")
