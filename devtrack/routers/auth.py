from fastapi import APIRouter, Depends, status

from devtrack.dependencies import get_user_repository
from devtrack.repositories import UserRepository
from devtrack.schemas.user import AuthResponse, UserCreate, UserLogin
from devtrack.services import auth as auth_service

router = APIRouter(prefix="/api/auth", tags=["auth"])

@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(data: UserCreate, users: UserRepository = Depends(get_user_repository)):
    user, token = await auth_service.signup(users, data)
    return {"user": user, "token": token}

@router.post("/login", response_model=AuthResponse)
async def login(data: UserLogin, users: UserRepository = Depends(get_user_repository)):
    user, token = await auth_service.login(users, data)
    return {"user": user, "token": token}
