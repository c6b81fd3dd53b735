from fastapi import APIRouter, Depends

from devtrack.dependencies import get_current_user, get_user_repository
from devtrack.exceptions import NotFoundError
from devtrack.models.user import User as UserModel
from devtrack.repositories import UserRepository
from devtrack.schemas.user import UserResponse, UserUpdate

router = APIRouter(prefix="/api/users", tags=["users"])

@router.get("/me", response_model=UserResponse)
async def get_me(current_user: UserModel = Depends(get_current_user)):
    return current_user

@router.patch("/me", response_model=UserResponse)
async def update_me(
    user_update: UserUpdate,
    current_user: UserModel = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    update_data = user_update.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        return current_user

    user = await users.update(current_user.id, update_data)
    if not user:
        raise NotFoundError("User not found")
    return user
