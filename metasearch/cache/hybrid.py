"""Two-tier cache backend: Memory (tier 1) in front of Redis (tier 2)

- get: Memory → Redis, Redis 히트는 같은 엔트리(같은 저장 시각/TTL)로 Memory에 적재
- set: Memory에 먼저 쓰고 Redis에 씀. Redis 실패는 로그만 남기고 성공으로 처리
- Memory 연산은 Redis 연산을 기다리지 않음
"""

from __future__ import annotations

from typing import Optional

from metasearch.core.logging import logger
from metasearch.schemas import CacheEntry

from .base import CacheBackend
from .memory import MemoryCache


class HybridCache(CacheBackend):
    name = "hybrid"

    def __init__(self, memory: MemoryCache, remote: CacheBackend):
        if memory is None or remote is None:
            raise ValueError("memory and remote tiers must not be None")
        self.memory = memory
        self.remote = remote

    async def get(self, key: str) -> Optional[CacheEntry]:
        entry = await self.memory.get(key)
        if entry is not None:
            return entry

        entry = await self.remote.get(key)
        if entry is None:
            return None

        await self.memory.set(key, entry)
        logger.debug(f"Hybrid cache promoted remote hit to memory: {key}")
        return entry

    async def set(self, key: str, entry: CacheEntry) -> bool:
        stored = await self.memory.set(key, entry)

        try:
            remote_ok = await self.remote.set(key, entry)
        except Exception as e:
            logger.warning(f"Hybrid cache remote write failed: {type(e).__name__}: {e}")
            remote_ok = False

        if not remote_ok:
            logger.warning(f"Hybrid cache remote tier not updated for key: {key}")
        return stored

    async def delete(self, key: str) -> bool:
        in_memory = await self.memory.delete(key)
        in_remote = await self.remote.delete(key)
        return in_memory or in_remote

    async def health_check(self) -> bool:
        # Memory 계층은 항상 사용 가능하므로 원격 상태만 보고
        return await self.remote.health_check()

    async def close(self) -> None:
        await self.remote.close()
