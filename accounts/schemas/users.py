"""Request/response schemas for user registration and management."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Role = Literal["admin", "user"]

# bcrypt ignores input past 72 bytes, so longer passwords are refused outright.
PASSWORD_MAX_BYTES = 72


def check_password_bytes(password: str) -> str:
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes when UTF-8 encoded")
    return password


class UserCreate(BaseModel):
    """Registration payload."""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=8, max_length=PASSWORD_MAX_BYTES)

    @field_validator("password")
    @classmethod
    def validate_password_bytes(cls, v: str) -> str:
        return check_password_bytes(v)


class UserCreated(BaseModel):
    """Response for POST /users (no password, no role)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class UserOut(BaseModel):
    """User entry for admin list and update (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: str


class UserUpdate(BaseModel):
    """Admin update payload; all fields required."""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=1, max_length=255)
    role: Role


class PasswordChange(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    new_password: str = Field(
        ..., alias="newPassword", min_length=8, max_length=PASSWORD_MAX_BYTES
    )

    @field_validator("new_password")
    @classmethod
    def validate_password_bytes(cls, v: str) -> str:
        return check_password_bytes(v)


class MessageResponse(BaseModel):
    message: str
