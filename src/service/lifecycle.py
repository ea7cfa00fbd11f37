import logging
import asyncio
from typing import AsyncGenerator
from fastapi import FastAPI
from contextlib import asynccontextmanager

from session import MemoryStore
from .redis_client import close_redis_clients

logger = logging.getLogger("sigil.service.lifecycle")

SESSION_CLEANUP_INTERVAL_SECONDS = 600


async def periodic_session_cleanup(store: MemoryStore, interval_seconds: int = SESSION_CLEANUP_INTERVAL_SECONDS):
    """Periodically drop expired sessions from an in-memory store"""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            removed = await store.cleanup()
            logger.debug(f"Session cleanup completed: removed {removed} expired sessions")
        except Exception as e:
            logger.error(f"Error during session cleanup: {e}", exc_info=True)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    store = app.state.session_config.store

    # Stores backed by external systems expire sessions themselves
    cleanup_task = None
    if isinstance(store, MemoryStore):
        cleanup_task = asyncio.create_task(periodic_session_cleanup(store))

    try:
        yield
    finally:
        if cleanup_task is not None:
            cleanup_task.cancel()
            try:
                await cleanup_task
            except asyncio.CancelledError:
                pass
        await close_redis_clients()
        logger.info("Session service shut down")
