# freshcart/domain/repositories/kv_store.py
from __future__ import annotations

import json
from typing import Any, Optional, Protocol

from redis.asyncio import Redis


class KeyValueStore(Protocol):
    """
    Persisted key-value collaborator holding JSON-serialized blobs.
    Keys are plain names ("cartItems", "appData"); adapters add their own namespace.
    """

    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...

    def namespace(self, prefix: str) -> "KeyValueStore": ...


class RedisKVStore:
    """Key-value store backed by Redis strings under `<prefix>:<key>`."""

    def __init__(self, redis: Redis, prefix: str = "freshcart"):
        self.redis = redis
        self.prefix = prefix

    def _k(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    async def get(self, key: str) -> Optional[str]:
        return await self.redis.get(self._k(key))

    async def set(self, key: str, value: str) -> None:
        await self.redis.set(self._k(key), value)

    async def delete(self, key: str) -> None:
        await self.redis.delete(self._k(key))

    def namespace(self, prefix: str) -> "RedisKVStore":
        return RedisKVStore(self.redis, prefix=f"{self.prefix}:{prefix}")


class InMemoryKVStore:
    """
    Process-local store. Used when Redis is not configured and in tests.
    Namespaces share the same backing dict.
    """

    def __init__(self, prefix: str = "freshcart", data: Optional[dict[str, str]] = None):
        self.prefix = prefix
        self.data: dict[str, str] = data if data is not None else {}

    def _k(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(self._k(key))

    async def set(self, key: str, value: str) -> None:
        self.data[self._k(key)] = value

    async def delete(self, key: str) -> None:
        self.data.pop(self._k(key), None)

    def namespace(self, prefix: str) -> "InMemoryKVStore":
        return InMemoryKVStore(prefix=f"{self.prefix}:{prefix}", data=self.data)


async def get_json(store: KeyValueStore, key: str, default: Any) -> Any:
    """
    Read a JSON blob; missing keys and undecodable values both yield `default`
    (a corrupt blob is treated like an empty one).
    """
    raw = await store.get(key)
    if not raw:
        return default
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        return default


async def set_json(store: KeyValueStore, key: str, value: Any) -> None:
    await store.set(key, json.dumps(value, ensure_ascii=False))
