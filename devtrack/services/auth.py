import logging

from devtrack.exceptions import AuthError, InvalidCredentialsError, ValidationError
from devtrack.repositories.base import UserRepository
from devtrack.schemas.user import UserCreate, UserLogin
from devtrack.utils.security import (
    JWTError,
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)

logger = logging.getLogger(__name__)


def issue_token(user) -> str:
    return create_access_token(data={"sub": user.id})


async def signup(users: UserRepository, data: UserCreate):
    """Register a user and return ``(user, token)``."""
    if await users.get_by_email(data.email):
        raise ValidationError("Email already registered")

    user = await users.add(
        name=data.name,
        email=data.email,
        hashed_password=get_password_hash(data.password),
    )
    logger.info("Registered user %s", user.id)
    return user, issue_token(user)


async def login(users: UserRepository, data: UserLogin):
    user = await users.get_by_email(data.email.strip().lower())
    if not user or not verify_password(data.password, user.hashed_password):
        logger.info("Rejected login for %s", data.email)
        raise InvalidCredentialsError()
    return user, issue_token(user)


async def authenticate(users: UserRepository, token: str | None):
    """Resolve a bearer token to its user or raise ``AuthError``."""
    if not token:
        raise AuthError()
    try:
        payload = decode_access_token(token)
    except JWTError:
        raise AuthError()

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise AuthError()

    user = await users.get_by_id(user_id)
    if user is None:
        raise AuthError()
    return user
