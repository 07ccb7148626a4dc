# groupchat/infrastructure/redis_client.py
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Set

import redis.asyncio as redis
from redis.asyncio.client import Pipeline

from groupchat.domain.exceptions import StoreError


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Re-raise driver failures as StoreError so callers stay store-agnostic."""
    try:
        yield
    except redis.RedisError as e:
        raise StoreError(f"Store operation '{operation}' failed: {e!s}") from e


class RedisClient:
    def __init__(self, host: str, port: int, logger: logging.Logger, db: int = 0):
        self.host = host
        self.port = port
        self.db = db
        self.client: redis.Redis | None = None
        self.logger = logger

    async def connect(self):
        self.client = redis.Redis(
            host=self.host,
            port=self.port,
            db=self.db,
            decode_responses=True,
        )
        try:
            await self.client.ping()
            self.logger.info(
                f"Successfully connected to Redis at {self.host}:{self.port}"
            )
        except redis.ConnectionError as e:
            self.logger.error(f"Failed to connect to Redis: {e!s}")
            self.logger.error(f"Redis host: {self.host}, Redis port: {self.port}")
            raise e

    async def disconnect(self):
        if self.client:
            await self.client.aclose()
            self.logger.info("Disconnected from Redis")

    def _require_client(self) -> redis.Redis:
        if self.client is None:
            raise RuntimeError("Redis client not connected")
        return self.client

    async def get(self, key: str) -> str | None:
        client = self._require_client()
        with store_errors("get"):
            return await client.get(key)

    async def set(self, key: str, value: str) -> None:
        client = self._require_client()
        with store_errors("set"):
            await client.set(key, value)

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        client = self._require_client()
        with store_errors("delete"):
            return await client.delete(*keys)

    async def sadd(self, key: str, *members: str) -> None:
        client = self._require_client()
        with store_errors("sadd"):
            await client.sadd(key, *members)

    async def srem(self, key: str, *members: str) -> None:
        client = self._require_client()
        with store_errors("srem"):
            await client.srem(key, *members)

    async def smembers(self, key: str) -> Set[str]:
        client = self._require_client()
        with store_errors("smembers"):
            return set(await client.smembers(key))

    async def keys(self, pattern: str) -> list[str]:
        # SCAN instead of KEYS so large keyspaces do not block the server
        client = self._require_client()
        with store_errors("scan"):
            return [key async for key in client.scan_iter(match=pattern)]

    def pipeline(self) -> Pipeline:
        return self._require_client().pipeline(transaction=True)

    async def publish(self, channel: str, message: str) -> None:
        client = self._require_client()
        with store_errors("publish"):
            await client.publish(channel, message)
        self.logger.debug(f"Published message to channel {channel}")
