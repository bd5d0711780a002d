"""
Redis-backed record store
"""

from typing import Any, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError
import structlog

from .base import (
    RecordStore,
    StorageReadError,
    StorageWriteError,
    decode_value,
    encode_value,
)

logger = structlog.get_logger(__name__)


class RedisRecordStore(RecordStore):
    """
    One Redis string per logical key, no TTL

    The client connects lazily on first use.
    """

    def __init__(
        self,
        url: str,
        key_prefix: str = "",
        client: Optional[aioredis.Redis] = None,
    ):
        self.url = url
        self.key_prefix = key_prefix
        self.redis: Optional[aioredis.Redis] = client
        self._initialized = client is not None

    async def connect(self) -> None:
        """Connect to Redis"""
        if self._initialized:
            return

        try:
            self.redis = aioredis.from_url(
                self.url,
                encoding="utf-8",
                decode_responses=True
            )
            await self.redis.ping()
            self._initialized = True
            logger.info("redis_connected", url=self.url)
        except RedisError as e:
            logger.error("redis_connection_error", error=str(e), exc_info=True)
            raise StorageReadError(f"Cannot connect to Redis: {e}") from e

    async def close(self) -> None:
        """Disconnect from Redis"""
        if self.redis is not None:
            await self.redis.aclose()
            self._initialized = False
            logger.info("redis_disconnected")

    def _redis_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def read(self, key: str) -> Optional[Any]:
        if not self._initialized:
            await self.connect()

        try:
            raw = await self.redis.get(self._redis_key(key))
        except RedisError as e:
            raise StorageReadError(f"Redis read failed for {key}: {e}", key=key) from e

        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return decode_value(key, raw)

    async def write(self, key: str, value: Any) -> None:
        data = encode_value(key, value)
        try:
            if not self._initialized:
                await self.connect()
            await self.redis.set(self._redis_key(key), data)
        except StorageReadError as e:
            raise StorageWriteError(str(e), key=key) from e
        except RedisError as e:
            raise StorageWriteError(f"Redis write failed for {key}: {e}", key=key) from e

    async def remove(self, key: str) -> None:
        try:
            if not self._initialized:
                await self.connect()
            await self.redis.delete(self._redis_key(key))
        except StorageReadError as e:
            raise StorageWriteError(str(e), key=key) from e
        except RedisError as e:
            raise StorageWriteError(f"Redis delete failed for {key}: {e}", key=key) from e

    async def health_check(self) -> bool:
        try:
            if not self._initialized:
                await self.connect()
            await self.redis.ping()
            return True
        except (RedisError, StorageReadError) as e:
            logger.error("redis_health_check_failed", error=str(e))
            return False
