"""Schema for GET /health."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness plus database reachability for the accounts store."""

    status: Literal["ok"] = "ok"
    environment: Literal["dev", "prod"] = Field(description="APP_ENV the process runs under")
    database: Literal["connected", "disconnected"] = Field(
        description="Whether a SELECT 1 against the users database succeeded",
    )
