"""Cache Layer - backend-agnostic result cache

Backends:
- MemoryCache: bounded in-process LRU
- RedisCache: shared remote cache with native TTL
- HybridCache: Memory tier in front of Redis tier
- DisabledCache: always-miss backend
"""

from typing import Optional

from metasearch.core.config import Settings, settings as default_settings

from .base import CacheBackend, DisabledCache
from .hybrid import HybridCache
from .memory import MemoryCache
from .redis_cache import RedisCache


def build_cache_backend(config: Optional[Settings] = None) -> CacheBackend:
    """설정의 cache_backend 값으로 백엔드 생성

    Args:
        config: 설정 (기본값: 전역 settings)

    Returns:
        CacheBackend 구현체
    """
    config = config or default_settings
    kind = config.cache_backend

    if kind == "memory":
        return MemoryCache(capacity=config.memory_cache_capacity)
    if kind == "redis":
        return RedisCache(
            redis_url=config.redis_url,
            key_prefix=config.redis_key_prefix,
            socket_timeout_s=config.redis_socket_timeout_s,
        )
    if kind == "hybrid":
        return HybridCache(
            memory=MemoryCache(capacity=config.memory_cache_capacity),
            remote=RedisCache(
                redis_url=config.redis_url,
                key_prefix=config.redis_key_prefix,
                socket_timeout_s=config.redis_socket_timeout_s,
            ),
        )
    if kind == "disabled":
        return DisabledCache()
    raise ValueError(f"Unknown cache backend: {kind}")


__all__ = [
    "CacheBackend",
    "DisabledCache",
    "HybridCache",
    "MemoryCache",
    "RedisCache",
    "build_cache_backend",
]
