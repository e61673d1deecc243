"""User routes: registration, own password change, and admin management."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session

from accounts.api.auth import authenticate, require_admin
from accounts.core.database import get_db
from accounts.core.security import PasswordHasher, get_password_hasher
from accounts.schemas.auth import TokenClaims
from accounts.schemas.users import (
    MessageResponse,
    PasswordChange,
    UserCreate,
    UserCreated,
    UserOut,
    UserUpdate,
)
from accounts.services import users as user_store

router = APIRouter()

# users.id is a 32-bit INTEGER column.
UserId = Annotated[int, Path(ge=1, le=2_147_483_647)]


@router.post("", response_model=UserCreated, status_code=status.HTTP_201_CREATED)
def register(
    body: UserCreate,
    db: Annotated[Session, Depends(get_db)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
) -> UserCreated:
    """Register a new (non-admin) account. 409 if the email is already taken."""
    user = user_store.register_user(db, hasher, body.name, body.email, body.password)
    return UserCreated.model_validate(user)


@router.put("/me/password", response_model=MessageResponse)
def change_own_password(
    body: PasswordChange,
    claims: Annotated[TokenClaims, Depends(authenticate)],
    db: Annotated[Session, Depends(get_db)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
) -> MessageResponse:
    user_store.change_password(db, hasher, claims.id, body.new_password)
    return MessageResponse(message="Password updated.")


@router.get("", response_model=list[UserOut])
def list_users(
    _admin: Annotated[TokenClaims, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserOut]:
    """List all users (admin only). Password hashes are never included."""
    return [UserOut.model_validate(u) for u in user_store.list_users(db)]


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: UserId,
    body: UserUpdate,
    _admin: Annotated[TokenClaims, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserOut:
    user = user_store.update_user(db, user_id, body.name, body.email, body.role)
    return UserOut.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: UserId,
    _admin: Annotated[TokenClaims, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    user_store.delete_user(db, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
