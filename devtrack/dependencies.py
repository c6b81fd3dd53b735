from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
from devtrack.database import get_db as db_session
from devtrack.models.user import User as UserModel
from devtrack.repositories import SqlTaskRepository, SqlUserRepository
from devtrack.services import auth as auth_service

# auto_error is off so a missing header surfaces as our AuthError
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

def get_db(db: AsyncSession = Depends(db_session)):
    return db

def get_user_repository(db: AsyncSession = Depends(get_db)) -> SqlUserRepository:
    return SqlUserRepository(db)

def get_task_repository(db: AsyncSession = Depends(get_db)) -> SqlTaskRepository:
    return SqlTaskRepository(db)

async def get_current_user(
    users: SqlUserRepository = Depends(get_user_repository),
    token: str | None = Depends(oauth2_scheme),
) -> UserModel:
    return await auth_service.authenticate(users, token)
