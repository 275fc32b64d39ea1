"""Redis 캐시 백엔드 - 여러 프로세스가 공유하는 원격 캐시

TTL은 Redis의 SETEX 만료에 맡기고, 읽을 때도 엔트리 타임스탬프로 한 번 더
검사합니다. 연결/타임아웃/역직렬화 오류는 모두 여기서 흡수합니다.
"""
from __future__ import annotations

from time import time
from typing import Callable, Optional

from pydantic import ValidationError
from redis.asyncio import Redis

from metasearch.core.config import settings
from metasearch.core.exceptions import (
    CacheConnectionException,
    CacheException,
    CacheSerializationException,
)
from metasearch.core.logging import logger
from metasearch.schemas import CacheEntry
from metasearch.utils.hash_utils import namespaced_key

from .base import CacheBackend


class RedisCache(CacheBackend):
    """Redis 원격 캐시"""

    name = "redis"

    def __init__(
        self,
        redis_url: Optional[str] = None,
        key_prefix: Optional[str] = None,
        socket_timeout_s: Optional[float] = None,
        client: Optional[Redis] = None,
        clock: Callable[[], float] = time,
    ):
        """Redis 클라이언트 초기화

        연결은 첫 명령 시점에 맺어지므로 여기서는 실패하지 않습니다.

        Args:
            redis_url: Redis URL (기본값: settings.redis_url)
            key_prefix: 키 네임스페이스 (기본값: settings.redis_key_prefix)
            socket_timeout_s: 소켓 타임아웃 (기본값: settings.redis_socket_timeout_s)
            client: 이미 생성된 클라이언트 (테스트용)
            clock: 현재 시각 함수
        """
        timeout = socket_timeout_s or settings.redis_socket_timeout_s
        self.redis_client = client or Redis.from_url(
            redis_url or settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=timeout,
            socket_timeout=timeout,
        )
        self.key_prefix = settings.redis_key_prefix if key_prefix is None else key_prefix
        self._clock = clock

    def _key(self, key: str) -> str:
        return namespaced_key(self.key_prefix, key)

    @staticmethod
    def _deserialize(key: str, cached_data: str) -> CacheEntry:
        try:
            return CacheEntry.model_validate_json(cached_data)
        except (ValidationError, ValueError) as e:
            raise CacheSerializationException(
                operation="deserialize",
                reason=str(e),
                details={"key": key},
            ) from e

    async def get(self, key: str) -> Optional[CacheEntry]:
        cache_key = self._key(key)
        try:
            try:
                cached_data = await self.redis_client.get(cache_key)
            except Exception as e:
                raise CacheConnectionException(f"GET failed: {type(e).__name__}: {e}") from e

            if not cached_data:
                logger.debug(f"Redis cache miss for key: {cache_key}")
                return None

            entry = self._deserialize(cache_key, cached_data)
            if entry.is_expired(self._clock()):
                logger.debug(f"Redis cache entry expired for key: {cache_key}")
                return None

            logger.debug(f"Redis cache hit for key: {cache_key}")
            return entry

        except CacheException as e:
            logger.warning(f"Redis cache read degraded to miss: {e}")
            return None

    async def set(self, key: str, entry: CacheEntry) -> bool:
        cache_key = self._key(key)
        ttl = entry.remaining_ttl(self._clock())
        if ttl <= 0:
            logger.debug(f"Skip Redis write for already expired entry: {cache_key}")
            return False

        try:
            cached_value = entry.model_dump_json()
            try:
                await self.redis_client.setex(cache_key, ttl, cached_value)
            except Exception as e:
                raise CacheConnectionException(f"SETEX failed: {type(e).__name__}: {e}") from e

            logger.debug(f"Redis cache set for key: {cache_key}, TTL: {ttl}s")
            return True

        except CacheException as e:
            logger.warning(f"Redis cache write skipped: {e}")
            return False

    async def delete(self, key: str) -> bool:
        try:
            result = await self.redis_client.delete(self._key(key))
            return result > 0
        except Exception as e:
            logger.warning(f"Redis cache delete error: {type(e).__name__}: {e}")
            return False

    async def health_check(self) -> bool:
        """Redis 연결 상태 확인"""
        try:
            return bool(await self.redis_client.ping())
        except Exception:
            return False

    async def close(self) -> None:
        try:
            await self.redis_client.aclose()
        except Exception as e:
            logger.debug(f"Redis close failed: {type(e).__name__}: {e}")
