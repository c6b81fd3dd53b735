"""Storage interfaces used by the services.

Services only talk to these; ``devtrack.repositories.sql`` binds them to
SQLAlchemy. Records returned are objects exposing the attributes of
``devtrack.models`` (the response schemas read them with ``from_attributes``).
"""

from abc import ABC, abstractmethod
from typing import Any


class UserRepository(ABC):
    @abstractmethod
    async def add(self, name: str, email: str, hashed_password: str) -> Any:
        """Persist a new user. Raises ``ValidationError`` when the email is taken."""

    @abstractmethod
    async def get_by_email(self, email: str) -> Any | None: ...

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Any | None: ...

    @abstractmethod
    async def update(self, user_id: str, changes: dict) -> Any | None: ...


class TaskRepository(ABC):
    @abstractmethod
    async def add(self, owner_id: str, fields: dict) -> Any: ...

    @abstractmethod
    async def list_for_owner(
        self,
        owner_id: str,
        status: str | None = None,
        priority: str | None = None,
    ) -> list:
        """The owner's tasks, most recent first."""

    @abstractmethod
    async def update_owned(self, task_id: str, owner_id: str, changes: dict) -> Any | None:
        """Apply ``changes`` to the task when ``owner_id`` owns it; ``None`` otherwise."""

    @abstractmethod
    async def delete_owned(self, task_id: str, owner_id: str) -> Any | None:
        """Remove and return the owned task; ``None`` when absent or not owned."""
