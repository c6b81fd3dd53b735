from fastapi import APIRouter, Depends, Query, status

from devtrack.dependencies import get_current_user, get_task_repository
from devtrack.models.user import User as UserModel
from devtrack.repositories import TaskRepository
from devtrack.schemas.task import Task as TaskSchema, TaskCreate, TaskUpdate
from devtrack.services import tasks as task_service

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

@router.post("", response_model=TaskSchema, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate,
    tasks: TaskRepository = Depends(get_task_repository),
    current_user: UserModel = Depends(get_current_user)
):
    return await task_service.create_task(tasks, task_data, current_user.id)

@router.get("", response_model=list[TaskSchema])
async def list_tasks(
    status_filter: str | None = Query(None, alias="status"),
    priority: str | None = None,
    tasks: TaskRepository = Depends(get_task_repository),
    current_user: UserModel = Depends(get_current_user)
):
    return await task_service.list_tasks(tasks, current_user.id, status=status_filter, priority=priority)

@router.patch("/{task_id}", response_model=TaskSchema)
async def update_task(
    task_id: str,
    update_data: TaskUpdate,
    tasks: TaskRepository = Depends(get_task_repository),
    current_user: UserModel = Depends(get_current_user)
):
    return await task_service.update_task(tasks, task_id, update_data, current_user.id)

@router.delete("/{task_id}", response_model=TaskSchema)
async def delete_task(
    task_id: str,
    tasks: TaskRepository = Depends(get_task_repository),
    current_user: UserModel = Depends(get_current_user)
):
    return await task_service.delete_task(tasks, task_id, current_user.id)
