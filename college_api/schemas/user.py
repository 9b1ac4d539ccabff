from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import EmailStr, StringConstraints

from .base import CamelModel, NonEmptyStr


Role = Literal["admin", "student"]

UsernameStr = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=3, max_length=30, pattern=r"^[A-Za-z0-9]+$")
]
PasswordStr = Annotated[str, StringConstraints(min_length=6)]


class UserCreate(CamelModel):
    username: UsernameStr
    email: EmailStr
    password: PasswordStr
    first_name: NonEmptyStr
    last_name: NonEmptyStr
    role: Role


class UserLogin(CamelModel):
    email: EmailStr
    password: NonEmptyStr


class ProfileUpdate(CamelModel):
    first_name: Optional[NonEmptyStr] = None
    last_name: Optional[NonEmptyStr] = None
    email: Optional[EmailStr] = None


class PasswordChange(CamelModel):
    current_password: NonEmptyStr
    new_password: PasswordStr


class UserUpdate(ProfileUpdate):
    role: Optional[Role] = None
    is_active: Optional[bool] = None


class UserResponse(CamelModel):
    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    full_name: str
    role: str
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserSummary(CamelModel):
    """Owning user as embedded in student payloads"""
    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    is_active: bool
    created_at: Optional[datetime] = None
