"""
Short-TTL cache in front of the provider chain.

Values are JSON-serialized canonical records. A value that no longer
parses or validates is deleted and reported as a miss, so a poisoned
entry costs one extra resolution instead of a failed request.
"""
import logging
import time
from typing import Callable, Dict, Optional, Protocol, Tuple, Union

from pydantic import ValidationError
from redis import asyncio as aioredis

from flight_data.canonical import CanonicalFlightRecord, FlightQuery

logger = logging.getLogger("EligibilityCache")

DEFAULT_TTL_SECONDS = 600


class CacheStore(Protocol):
    async def get(self, key: str) -> Optional[Union[str, bytes]]:
        ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        ...

    async def delete(self, key: str) -> None:
        ...


class InMemoryCacheStore:
    """Process-local TTL store for single-instance deployments and tests."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[float, str]] = {}

    async def get(self, key: str) -> Optional[str]:
        hit = self._entries.get(key)
        if hit is None:
            return None
        expires_at, value = hit
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        now = self._clock()
        self._sweep(now)
        self._entries[key] = (now + ttl_seconds, value)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def _sweep(self, now: float) -> None:
        expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
        for k in expired:
            del self._entries[k]

    def __len__(self) -> int:
        return len(self._entries)


class RedisCacheStore:
    """get() returns raw bytes; EligibilityCache decodes them."""

    def __init__(self, url: str):
        self._redis = aioredis.from_url(url)

    async def get(self, key: str) -> Optional[bytes]:
        return await self._redis.get(key)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._redis.set(key, value, ex=ttl_seconds)

    async def delete(self, key: str) -> None:
        await self._redis.delete(key)

    async def close(self) -> None:
        await self._redis.aclose()


class EligibilityCache:
    def __init__(self, store: CacheStore, ttl_seconds: int = DEFAULT_TTL_SECONDS):
        self._store = store
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def key_for(query: FlightQuery) -> str:
        return f"eligibility:{query.carrier_code.upper()}{query.flight_code.upper()}:{query.date.isoformat()}"

    async def get(self, key: str) -> Optional[CanonicalFlightRecord]:
        try:
            raw = await self._store.get(key)
        except Exception as e:
            logger.error(f"Cache read failed for {key}: {e}")
            return None

        if raw is None:
            return None

        try:
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8")
            return CanonicalFlightRecord.model_validate_json(raw)
        except (ValidationError, UnicodeDecodeError):
            logger.warning(f"Poisoned cache entry {key}. Deleting.")
            await self.delete(key)
            return None

    async def set(self, key: str, record: CanonicalFlightRecord) -> None:
        try:
            await self._store.set(key, record.model_dump_json(by_alias=True), self.ttl_seconds)
        except Exception as e:
            logger.error(f"Cache write failed for {key}: {e}")

    async def delete(self, key: str) -> None:
        try:
            await self._store.delete(key)
        except Exception as e:
            logger.error(f"Cache delete failed for {key}: {e}")

    async def aclose(self) -> None:
        close = getattr(self._store, "close", None)
        if close is not None:
            await close()
