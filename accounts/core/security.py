"""Password hashing and JWT issuance/verification for authentication."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt
from fastapi import Request
from pydantic import ValidationError as PydanticValidationError

from accounts.core.errors import Forbidden, InternalError
from accounts.schemas.auth import TokenClaims

if TYPE_CHECKING:
    from accounts.core.config import Settings
    from accounts.models.user import User

# bcrypt only looks at the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72

NAME_MAX_LEN = 255
EMAIL_MAX_LEN = 255
PASSWORD_MIN_LEN = 8


def _utcnow() -> datetime:
    return datetime.now(UTC)


class PasswordHasher:
    """
    One-way salted bcrypt hashing with a fixed cost factor.

    bcrypt only reads the first 72 bytes of its input, so hash() refuses longer
    passwords and verify() rejects them instead of comparing a truncated prefix.
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def hash(self, plain_password: str) -> str:
        """Hash a plain-text password for storage. Do not store plain passwords."""
        pw_bytes = plain_password.encode("utf-8")
        if len(pw_bytes) > BCRYPT_MAX_BYTES:
            raise ValueError(f"Password exceeds {BCRYPT_MAX_BYTES} bytes")
        return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plain_password: str, hashed: str) -> bool:
        """Verify a plain password against a stored hash. Raises InternalError on a corrupt hash."""
        pw_bytes = plain_password.encode("utf-8")
        if len(pw_bytes) > BCRYPT_MAX_BYTES:
            return False
        try:
            return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
        except (ValueError, TypeError) as e:
            raise InternalError(f"Stored password hash is malformed: {e!s}") from e


class TokenService:
    """Issues and verifies signed, time-limited bearer tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenService":
        return cls(
            secret=settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
            expire_minutes=settings.JWT_EXPIRE_MINUTES,
        )

    def issue(self, user: "User") -> str:
        """Create a JWT carrying id, email, role, iat and exp."""
        now = self._clock()
        payload: dict[str, Any] = {
            "id": user.id,
            "email": user.email,
            "role": user.role,
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Decode and validate a JWT; return its claims.
        Raises Forbidden for malformed, tampered, expired or incomplete tokens.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
            return TokenClaims.model_validate(payload)
        except (jwt.PyJWTError, PydanticValidationError) as e:
            raise Forbidden() from e


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service
