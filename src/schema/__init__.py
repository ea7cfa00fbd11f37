from schema.schema import (
    LoginRequest,
    SessionInfoResponse,
    StatusResponse,
)

__all__ = [
    "LoginRequest",
    "SessionInfoResponse",
    "StatusResponse",
]
