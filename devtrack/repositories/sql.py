import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from devtrack.exceptions import ValidationError
from devtrack.models.task import Task as TaskModel
from devtrack.models.user import User as UserModel
from devtrack.repositories.base import TaskRepository, UserRepository

logger = logging.getLogger(__name__)

# Columns a partial update may touch
TASK_MUTABLE_FIELDS = ("title", "status", "priority", "notes", "time_spent", "tags")


class SqlUserRepository(UserRepository):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, name, email, hashed_password):
        user = UserModel(name=name, email=email, hashed_password=hashed_password)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ValidationError("Email already registered")
        await self.db.refresh(user)
        return user

    async def get_by_email(self, email):
        result = await self.db.execute(select(UserModel).filter(UserModel.email == email))
        return result.scalars().first()

    async def get_by_id(self, user_id):
        result = await self.db.execute(select(UserModel).filter(UserModel.id == user_id))
        return result.scalars().first()

    async def update(self, user_id, changes):
        user = await self.get_by_id(user_id)
        if not user:
            return None
        for key, value in changes.items():
            setattr(user, key, value)
        await self.db.commit()
        await self.db.refresh(user)
        return user


class SqlTaskRepository(TaskRepository):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, owner_id, fields):
        task = TaskModel(**fields, user_id=owner_id)
        self.db.add(task)
        await self.db.commit()
        await self.db.refresh(task)
        return task

    async def list_for_owner(self, owner_id, status=None, priority=None):
        query = select(TaskModel).filter(TaskModel.user_id == owner_id)
        if status:
            query = query.filter(TaskModel.status == status)
        if priority:
            query = query.filter(TaskModel.priority == priority)
        query = query.order_by(TaskModel.created_at.desc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def _get_owned(self, task_id, owner_id):
        result = await self.db.execute(
            select(TaskModel).filter(TaskModel.id == task_id, TaskModel.user_id == owner_id)
        )
        return result.scalars().first()

    async def update_owned(self, task_id, owner_id, changes):
        task = await self._get_owned(task_id, owner_id)
        if not task:
            return None
        for key, value in changes.items():
            if key in TASK_MUTABLE_FIELDS:
                setattr(task, key, value)
        await self.db.commit()
        await self.db.refresh(task)
        return task

    async def delete_owned(self, task_id, owner_id):
        task = await self._get_owned(task_id, owner_id)
        if not task:
            return None
        await self.db.delete(task)
        await self.db.commit()
        logger.debug("Deleted task %s for user %s", task_id, owner_id)
        return task
