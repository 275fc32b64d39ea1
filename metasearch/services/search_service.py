"""검색 서비스 - Cache-First 요청 파이프라인

1. 검색 요청으로 캐시 키 생성
2. 캐시 확인 (만료되지 않은 히트면 그대로 반환)
3. 미스 시 Aggregator 실행 후 결과 캐싱
4. 모든 엔진 실패와 잘못된 엔진 선택은 PipelineError로 변환 (캐시에 쓰지 않음)
"""
from __future__ import annotations

from time import time
from typing import Callable, Optional

from metasearch.aggregation import Aggregator, ResultFilter
from metasearch.cache import CacheBackend, build_cache_backend
from metasearch.core.config import Settings, settings as default_settings
from metasearch.core.exceptions import AggregationError, PipelineError, ValidationException
from metasearch.core.logging import logger, sanitize_for_log
from metasearch.schemas import AggregatedResponse, CacheEntry, SearchQuery
from metasearch.transport import get_shared_http_client
from metasearch.utils.hash_utils import generate_cache_key


class SearchService:
    """
    검색 서비스 - SRP: 캐시와 집계기 조율만 담당

    - 캐시 조회/저장은 CacheBackend
    - 업스트림 질의/병합은 Aggregator
    """

    def __init__(
        self,
        cache: CacheBackend,
        aggregator: Aggregator,
        cache_ttl: Optional[int] = None,
        clock: Callable[[], float] = time,
    ):
        if cache is None:
            raise ValueError("cache must not be None")
        if aggregator is None:
            raise ValueError("aggregator must not be None")

        self.cache = cache
        self.aggregator = aggregator
        self.cache_ttl = cache_ttl or default_settings.cache_ttl
        self._clock = clock

    async def handle(self, query: SearchQuery) -> AggregatedResponse:
        """
        검색 실행 (Cache-First 전략)

        Args:
            query: 검색 요청

        Returns:
            AggregatedResponse: 병합된 검색 결과

        Raises:
            PipelineError: 모든 엔진이 실패한 경우 (NO_RESULTS),
                엔진 선택이 유효하지 않은 경우 (INVALID_QUERY)
        """
        key = generate_cache_key(query)
        logger.info(f"Search request: query='{sanitize_for_log(query.text)}', page={query.page}")

        # 1. 캐시 확인
        cached = await self._cache_get(key)
        if cached is not None:
            logger.info(f"Cache hit for key: {key}")
            return cached.response

        # 2. 집계
        logger.info(f"Cache miss, aggregating for key: {key}")
        try:
            response = await self.aggregator.search(query)
        except (AggregationError, ValidationException) as e:
            logger.warning(f"Search failed: {e}")
            raise PipelineError(e) from e

        # 3. 캐싱
        entry = CacheEntry(response=response, inserted_at=self._clock(), ttl=self.cache_ttl)
        await self._cache_set(key, entry)
        return response

    async def _cache_get(self, key: str) -> Optional[CacheEntry]:
        # 백엔드가 오류를 흡수하지만, 여기서 한 번 더 막아 라이브 집계로 넘어갑니다
        try:
            entry = await self.cache.get(key)
        except Exception as e:
            logger.warning(f"Cache lookup failed: {type(e).__name__}: {e}")
            return None
        if entry is not None and entry.is_expired(self._clock()):
            return None
        return entry

    async def _cache_set(self, key: str, entry: CacheEntry) -> None:
        try:
            stored = await self.cache.set(key, entry)
        except Exception as e:
            logger.warning(f"Failed to save to cache: {type(e).__name__}: {e}")
            return
        if stored:
            logger.debug(f"Result cached: key={key}, ttl={entry.ttl}s")

    async def close(self) -> None:
        await self.cache.close()


def build_search_service(config: Optional[Settings] = None) -> SearchService:
    """설정으로 SearchService 조립 (공유 HTTP 클라이언트 사용)"""
    config = config or default_settings
    aggregator = Aggregator(
        transport=get_shared_http_client(),
        engine_timeout_s=config.engine_timeout_s,
        weights=config.engine_weights,
        result_filter=ResultFilter(config.result_blocklist, config.result_allowlist),
    )
    return SearchService(
        cache=build_cache_backend(config),
        aggregator=aggregator,
        cache_ttl=config.cache_ttl,
    )


def make_query(
    text: str,
    page: int = 1,
    safe_search: int = 1,
    engines: Optional[list[str]] = None,
    language: Optional[str] = None,
    config: Optional[Settings] = None,
) -> SearchQuery:
    """프론트엔드 입력으로 SearchQuery 생성 (엔진 미지정 시 설정의 enabled_engines)"""
    config = config or default_settings
    return SearchQuery(
        text=text,
        page=page,
        safe_search=safe_search,
        engines=engines or config.enabled_engines,
        language=language,
    )
