"""Pydantic request/response schemas."""

from accounts.schemas.auth import LoginRequest, LoginResponse, TokenClaims
from accounts.schemas.health import HealthResponse
from accounts.schemas.users import (
    MessageResponse,
    PasswordChange,
    Role,
    UserCreate,
    UserCreated,
    UserOut,
    UserUpdate,
)

__all__ = [
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "PasswordChange",
    "Role",
    "TokenClaims",
    "UserCreate",
    "UserCreated",
    "UserOut",
    "UserUpdate",
]
