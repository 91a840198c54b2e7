import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError

from status_tracker.config import settings

T = TypeVar("T")

# Failures a service converts into a STORAGE_FAILURE result
STORAGE_ERRORS = (SQLAlchemyError, asyncio.TimeoutError)


async def bounded(awaitable: Awaitable[T]) -> T:
    """Await a store call, failing with asyncio.TimeoutError after DB_TIMEOUT_SECONDS."""
    return await asyncio.wait_for(awaitable, timeout=settings.DB_TIMEOUT_SECONDS)
