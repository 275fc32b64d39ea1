"""해싱 유틸리티"""
from metasearch.schemas import SearchQuery


def generate_cache_key(query: SearchQuery, prefix: str = "search") -> str:
    """
    검색 요청으로 캐시 키 생성

    Args:
        query: 검색 요청
        prefix: 키 prefix (Redis 네임스페이스)

    Returns:
        캐시 키
    """
    return query.cache_key(prefix=prefix)


def namespaced_key(namespace: str, key: str) -> str:
    """Redis 등 공유 저장소용 네임스페이스 키"""
    if not namespace:
        return key
    return f"{namespace}:{key}"
