import logging

from devtrack.exceptions import NotFoundError, ValidationError
from devtrack.constants import TASK_PRIORITIES, TASK_STATUSES
from devtrack.repositories.base import TaskRepository
from devtrack.schemas.task import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)


async def create_task(tasks: TaskRepository, task_data: TaskCreate, current_user_id: str):
    fields = task_data.model_dump()
    task = await tasks.add(current_user_id, fields)
    logger.info("Created task %s for user %s", task.id, current_user_id)
    return task


async def list_tasks(
    tasks: TaskRepository,
    current_user_id: str,
    status: str | None = None,
    priority: str | None = None,
):
    if status is not None and status not in TASK_STATUSES:
        raise ValidationError(f"Invalid status filter '{status}'")
    if priority is not None and priority not in TASK_PRIORITIES:
        raise ValidationError(f"Invalid priority filter '{priority}'")
    return await tasks.list_for_owner(current_user_id, status=status, priority=priority)


async def update_task(tasks: TaskRepository, task_id: str, update_data: TaskUpdate, current_user_id: str):
    # A task owned by someone else is reported exactly like a missing one
    task = await tasks.update_owned(task_id, current_user_id, update_data.changes())
    if task is None:
        raise NotFoundError("Task not found")
    return task


async def delete_task(tasks: TaskRepository, task_id: str, current_user_id: str):
    task = await tasks.delete_owned(task_id, current_user_id)
    if task is None:
        raise NotFoundError("Task not found")
    logger.info("Deleted task %s for user %s", task_id, current_user_id)
    return task
