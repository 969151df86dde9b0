"""Shared request dependencies."""

from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from functools import lru_cache

from ward_handover.core.config import settings
from ward_handover.models.base import async_session_maker
from ward_handover.services.storage import (
    JsonKeyValueStore,
    Storage,
    create_local_storage,
    create_sql_storage,
)


@lru_cache
def get_kv_store() -> JsonKeyValueStore:
    """Process-wide key-value file for the local backend."""
    return JsonKeyValueStore(settings.storage.local_path)


@asynccontextmanager
async def open_storage() -> AsyncIterator[Storage]:
    """Stores of the configured backend, for use outside a request."""
    if settings.storage.backend == "local":
        yield create_local_storage(get_kv_store())
        return

    async with async_session_maker() as session:
        yield create_sql_storage(session)


async def get_storage() -> AsyncGenerator[Storage, None]:
    """FastAPI dependency that yields the configured backend's stores."""
    async with open_storage() as storage:
        yield storage
