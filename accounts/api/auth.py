"""JWT login and the auth gate dependencies (authenticate, authorize, require_admin)."""

from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from accounts.core.database import get_db
from accounts.core.errors import Forbidden, Unauthenticated
from accounts.core.security import (
    PasswordHasher,
    TokenService,
    get_password_hasher,
    get_token_service,
)
from accounts.models.user import ROLE_ADMIN
from accounts.schemas.auth import LoginRequest, LoginResponse, TokenClaims
from accounts.services.users import authenticate_user

router = APIRouter()
security = HTTPBearer(auto_error=False)


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> LoginResponse:
    """
    Authenticate with email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    """
    user = authenticate_user(db, hasher, body.email, body.password)
    return LoginResponse(message="Login successful.", token=tokens.issue(user))


def authenticate(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> TokenClaims:
    """
    Dependency: require a valid Bearer JWT and return its claims.
    401 if no bearer credential was sent, 403 if the token is invalid or expired.
    """
    if credentials is None or not credentials.credentials:
        raise Unauthenticated(headers={"WWW-Authenticate": "Bearer"})
    claims = tokens.verify(credentials.credentials)
    request.state.claims = claims
    return claims


def authorize(*roles: str) -> Callable[[TokenClaims], TokenClaims]:
    """Build a dependency that admits only identities whose role is in roles."""
    allowed = frozenset(roles)

    def check_role(
        claims: Annotated[TokenClaims, Depends(authenticate)],
    ) -> TokenClaims:
        if claims.role not in allowed:
            raise Forbidden()
        return claims

    return check_role


require_admin = authorize(ROLE_ADMIN)
