from datetime import datetime

from pydantic import EmailStr, Field, field_validator
from devtrack.schemas.base import CamelModel
from devtrack.utils.sanitization import sanitize_string


class UserCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("name", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v):
        return v.lower()


class UserLogin(CamelModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=100)

    @field_validator("name", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)


class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    created_at: datetime | None = None


class AuthResponse(CamelModel):
    user: UserResponse
    token: str
