from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(
        description="Name to remember in the session",
        min_length=1,
    )


class SessionInfoResponse(BaseModel):
    session_type: Literal["authenticated", "anonymous"] = Field(
        description="Whether a user has logged in on this session"
    )
    username: Optional[str] = Field(
        description="Logged in user, if any",
        default=None,
    )
    expires_in_seconds: Optional[int] = Field(
        description="Seconds until the session expires, or null if it never does",
        default=None,
    )


class StatusResponse(BaseModel):
    status: Literal["ok"] = "ok"
    session_store: str = Field(
        description="Name of the configured session store"
    )
    details: dict[str, Any] = Field(default_factory=dict)
