from .session import router as session_router

__all__ = ["session_router"]
