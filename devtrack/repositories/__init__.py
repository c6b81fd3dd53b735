from devtrack.repositories.base import TaskRepository, UserRepository
from devtrack.repositories.sql import SqlTaskRepository, SqlUserRepository

__all__ = [
    "SqlTaskRepository",
    "SqlUserRepository",
    "TaskRepository",
    "UserRepository",
]
