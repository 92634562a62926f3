from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from skillswap.constants import Availability, NAME_MAX_LENGTH, NAME_MIN_LENGTH, PASSWORD_MIN_LENGTH


def validate_email_like(v: str) -> str:
    value = (v or "").strip()
    if "@" not in value:
        raise ValueError("email must contain '@'")
    left, right = value.split("@", 1)
    if not left or not right:
        raise ValueError("email must have text before and after '@'")
    return value.lower()


class UserCreate(BaseModel):
    name: str = Field(min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    email: str
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)
    location: Optional[str] = None
    availability: list[Availability] = Field(default_factory=list)

    @field_validator("email")
    @classmethod
    def _validate_email_like(cls, v: str) -> str:
        return validate_email_like(v)


class UserLogin(BaseModel):
    email: str
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)

    @field_validator("email")
    @classmethod
    def _validate_email_like(cls, v: str) -> str:
        return validate_email_like(v)


class UserRead(BaseModel):
    id: int
    email: str
    name: str
    location: Optional[str] = None
    profile_photo: Optional[str] = None
    availability: list[str] = Field(default_factory=list)
    is_public: bool = True
    role: str = "USER"
    is_admin: bool = False
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    user: UserRead
    access_token: str
    token_type: str = "bearer"
