"""Cache Backend - backend-agnostic caching contract"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from metasearch.schemas import CacheEntry


class CacheBackend(ABC):
    """캐시 백엔드 인터페이스

    모든 구현은 동시 호출에 안전해야 하며, get은 만료된 엔트리를 절대
    반환하지 않습니다 (백엔드 eviction 정책과 무관하게 타임스탬프로 판정).
    원격 저장소 오류는 구현 내부에서 흡수합니다 (get → 미스, set → False).
    """

    name: str = "base"

    @abstractmethod
    async def get(self, key: str) -> Optional[CacheEntry]:
        """캐시 조회

        Args:
            key: 캐시 키

        Returns:
            만료되지 않은 CacheEntry 또는 None
        """
        ...

    @abstractmethod
    async def set(self, key: str, entry: CacheEntry) -> bool:
        """캐시 저장

        Args:
            key: 캐시 키
            entry: 저장할 엔트리 (TTL 포함)

        Returns:
            저장 성공 여부
        """
        ...

    async def delete(self, key: str) -> bool:
        return False

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        return None


class DisabledCache(CacheBackend):
    """캐시 비활성화 (항상 미스)"""

    name = "disabled"

    async def get(self, key: str) -> Optional[CacheEntry]:
        return None

    async def set(self, key: str, entry: CacheEntry) -> bool:
        return False
