"""Request/response schemas for login and token claims."""

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Credentials for login. Presence only; length policy applies at registration."""

    email: str = Field(..., min_length=1, max_length=255, description="Account email")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class LoginResponse(BaseModel):
    """JWT bearer token returned after successful login."""

    message: str = Field(default="Login successful.")
    token: str = Field(..., description="JWT access token; send as 'Authorization: Bearer <token>'")


class TokenClaims(BaseModel):
    """Identity carried by a verified token (id, email, role, iat, exp)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    email: str
    role: str
    iat: int
    exp: int
