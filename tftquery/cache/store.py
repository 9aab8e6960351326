# =============================================================
# tftquery/cache/store.py
# -------------------------------------------------------------
# Backends de cache pour les réponses Riot :
#   RedisCache   – redis.asyncio, valeurs JSON
#   MemoryCache  – dict local (dev / tests)
# =============================================================

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Protocol

import redis.asyncio as aioredis
import redis.exceptions as _redis_exc

from tftquery.config import settings
from tftquery.errors import CacheError

log = logging.getLogger(__name__)

_GLOB_SPECIALS = str.maketrans({c: f"\\{c}" for c in "*?[]\\"})


class CachePort(Protocol):
    """Key/value store used by the query session. Absent keys read as None."""

    async def get(self, key: str) -> Any: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def flush(self) -> None: ...

    async def close(self) -> None: ...


# =============================================================
# ------------------------ Redis ------------------------------
# =============================================================
class RedisCache:
    """Redis-backed cache, shared safely by any number of sessions."""

    def __init__(
        self,
        url: Optional[str] = None,
        ttl: Optional[int] = None,
        prefix: str = "",
        client: Optional[aioredis.Redis] = None,
    ):
        self.url = url or settings.REDIS_URL
        self.ttl = ttl if ttl is not None else settings.CACHE_TTL
        self.prefix = prefix
        self.redis = client if client is not None else aioredis.from_url(
            self.url, encoding="utf-8", decode_responses=True
        )

    def _k(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get(self, key: str) -> Any:
        try:
            raw = await self.redis.get(self._k(key))
        except _redis_exc.RedisError as e:
            raise CacheError(f"GET {key} failed: {e}") from e
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            # entrée corrompue → on la traite comme absente
            log.warning(f"Dropping undecodable cache entry {key}")
            return None

    async def set(self, key: str, value: Any) -> None:
        data = json.dumps(value)
        try:
            await self.redis.set(self._k(key), data, ex=self.ttl)
        except _redis_exc.RedisError as e:
            raise CacheError(f"SET {key} failed: {e}") from e

    async def flush(self) -> None:
        try:
            if not self.prefix:
                await self.redis.flushdb()
                return
            async for k in self.redis.scan_iter(match=f"{self.prefix.translate(_GLOB_SPECIALS)}*"):
                await self.redis.delete(k)
        except _redis_exc.RedisError as e:
            raise CacheError(f"FLUSH failed: {e}") from e

    async def close(self) -> None:
        await self.redis.aclose()


# =============================================================
# ------------------------ Mémoire ----------------------------
# =============================================================
class MemoryCache:
    """In-process cache; stores JSON copies so callers can't mutate entries."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    async def get(self, key: str) -> Any:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    async def flush(self) -> None:
        self._data.clear()

    async def close(self) -> None:
        pass

    def __len__(self) -> int:
        return len(self._data)


def build_cache(cache_config: Optional[Dict[str, Any]] = None) -> CachePort:
    """
    Build a cache backend from a config mapping.

    Args:
        cache_config: ``{"backend": "memory"}`` or Redis options
                      (``url``, ``ttl``, ``prefix``). None means Redis
                      with the settings defaults.
    """
    cfg = dict(cache_config or {})
    backend = cfg.pop("backend", "redis")
    if backend == "memory":
        return MemoryCache()
    if backend != "redis":
        raise ValueError(f"Unknown cache backend: {backend}")
    return RedisCache(
        url=cfg.get("url"),
        ttl=cfg.get("ttl"),
        prefix=cfg.get("prefix", ""),
    )
