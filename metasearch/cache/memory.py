"""In-process LRU cache backend"""

from __future__ import annotations

import threading
from collections import OrderedDict
from time import time
from typing import Callable, Optional

from metasearch.core.logging import logger
from metasearch.schemas import CacheEntry

from .base import CacheBackend


class MemoryCache(CacheBackend):
    """용량 제한 LRU 메모리 캐시

    - 용량 초과 시 가장 오래 사용되지 않은 엔트리부터 제거
    - get 시점에 TTL 검사, 만료 엔트리는 제거 후 미스 처리 (lazy expiry)
    - 모든 연산은 threading.Lock 아래에서 await 없이 수행

    저장되는 CacheEntry는 frozen 모델이므로 호출자에게 그대로 돌려줘도
    내부 저장소가 변경될 수 없습니다.
    """

    name = "memory"

    def __init__(self, capacity: int, clock: Callable[[], float] = time):
        """
        Args:
            capacity: 최대 엔트리 수
            clock: 현재 시각 (epoch 초) 함수, 테스트에서 교체

        Raises:
            ValueError: capacity가 1 미만인 경우
        """
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._clock = clock
        self._store: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._store

    async def get(self, key: str) -> Optional[CacheEntry]:
        now = self._clock()
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if entry.is_expired(now):
                del self._store[key]
                logger.debug(f"Memory cache expired: {key}")
                return None
            self._store.move_to_end(key)
            return entry

    async def set(self, key: str, entry: CacheEntry) -> bool:
        with self._lock:
            if key in self._store:
                self._store.move_to_end(key)
            else:
                while len(self._store) >= self.capacity:
                    evicted, _ = self._store.popitem(last=False)
                    logger.debug(f"Memory cache evicted (LRU): {evicted}")
            self._store[key] = entry
        return True

    async def delete(self, key: str) -> bool:
        with self._lock:
            return self._store.pop(key, None) is not None

    async def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def purge_expired(self) -> int:
        """만료 엔트리 일괄 제거 (관찰 가능한 동작은 바뀌지 않음)

        Returns:
            제거된 엔트리 수
        """
        now = self._clock()
        with self._lock:
            expired = [k for k, e in self._store.items() if e.is_expired(now)]
            for k in expired:
                del self._store[k]
        return len(expired)
