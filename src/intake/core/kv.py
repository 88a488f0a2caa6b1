"""
Key/Value Store

Persistence for the simulated backend. Collections are stored as JSON text
under namespaced keys, so any string key/value backend works:

- MemoryKeyValueStore: process-local dict, used by default and in tests
- RedisKeyValueStore: async Redis client (redis.asyncio)

Stores have an explicit lifecycle: create one with init_store() and close it
with close() when the process (or test) is done with it.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Generic, Protocol, TypeVar

from pydantic import BaseModel, TypeAdapter
from redis.asyncio import Redis, from_url

from intake.core.config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class KeyValueStore(Protocol):
    """String key/value storage used by the application and audit collections."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def close(self) -> None: ...


class MemoryKeyValueStore:
    """
    In-memory key/value store.

    Note: data lives only as long as this instance; nothing is shared
    between instances or processes.
    """

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def close(self) -> None:
        self._data.clear()


class RedisKeyValueStore:
    """Key/value store backed by an async Redis client."""

    def __init__(self, client: Redis) -> None:
        self._client = client

    async def get(self, key: str) -> str | None:
        return await self._client.get(key)

    async def set(self, key: str, value: str) -> None:
        await self._client.set(key, value)

    async def delete(self, key: str) -> None:
        await self._client.delete(key)

    async def close(self) -> None:
        await self._client.aclose()


async def init_store(settings: Settings) -> KeyValueStore:
    """
    Create the key/value store configured by settings.

    Uses Redis when settings.redis_url is set (the connection is checked with
    a PING), otherwise an in-memory store.

    Args:
        settings: Application settings

    Returns:
        A ready-to-use store. The caller owns it and must close() it.
    """
    if not settings.redis_url:
        logger.info("No redis_url configured - using in-memory store")
        return MemoryKeyValueStore()

    client = from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
    )
    # Test connection
    try:
        await client.ping()
    except Exception as e:
        logger.error(f"Failed to connect to Redis: {e}")
        await client.aclose()
        raise
    logger.info("Redis store connected")
    return RedisKeyValueStore(client)


class JsonCollection(Generic[T]):
    """
    An ordered list of pydantic models stored as one JSON array under a key.

    Reads tolerate an absent or empty value as an empty list. Edits are
    read-modify-write and serialised by a per-collection lock.
    """

    def __init__(self, store: KeyValueStore, key: str, item_type: type[T]) -> None:
        self._store = store
        self.key = key
        self._adapter = TypeAdapter(list[item_type])
        self._lock = asyncio.Lock()

    async def load(self) -> list[T]:
        raw = await self._store.get(self.key)
        if not raw:
            return []
        return self._adapter.validate_json(raw)

    async def save(self, items: list[T]) -> None:
        await self._store.set(self.key, self._adapter.dump_json(items, by_alias=True).decode())

    @asynccontextmanager
    async def edit(self) -> AsyncIterator[list[T]]:
        """
        Load the collection for modification and save it on exit.

        Nothing is written if the block raises.
        """
        async with self._lock:
            items = await self.load()
            yield items
            await self.save(items)
