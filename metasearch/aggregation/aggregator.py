"""Aggregator - concurrent multi-engine dispatch

One asyncio task per selected engine: build request -> fetch -> parse, each
bounded by the per-engine timeout. Merging starts only after every task has
reached a terminal state (succeeded, timed out or errored).
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol, Sequence

from metasearch.core.config import settings
from metasearch.core.exceptions import AdapterError, AllEnginesFailed, InvalidQueryException
from metasearch.core.logging import logger, sanitize_for_log
from metasearch.engines import EngineAdapter, OutboundRequest, build_adapters
from metasearch.schemas import (
    AggregatedResponse,
    EngineId,
    EngineReport,
    EngineStatus,
    RawResult,
    SearchQuery,
)

from .filters import ResultFilter
from .merge import merge_results


class Transport(Protocol):
    """업스트림 전송 인터페이스 (SharedHttpClient가 구현)"""

    async def fetch(self, request: OutboundRequest, *, timeout_s: float) -> tuple[int, bytes]:
        ...


@dataclass
class EngineOutcome:
    """엔진 태스크 하나의 종료 결과"""

    report: EngineReport
    results: list[RawResult] = field(default_factory=list)


class Aggregator:
    """검색 집계기

    Usage:
        aggregator = Aggregator(transport=get_shared_http_client())
        response = await aggregator.search(query)
    """

    def __init__(
        self,
        transport: Transport,
        adapters: Optional[Mapping[EngineId, EngineAdapter]] = None,
        engine_timeout_s: Optional[float] = None,
        weights: Optional[Mapping[str, float]] = None,
        result_filter: Optional[ResultFilter] = None,
    ):
        """
        Args:
            transport: 업스트림 전송 (fetch 메서드 구현)
            adapters: 엔진별 어댑터 (기본값: 전체 엔진)
            engine_timeout_s: 엔진별 타임아웃 (기본값: settings.engine_timeout_s)
            weights: 엔진별 점수 가중치 (기본값: settings.engine_weights)
            result_filter: 결과 필터 (기본값: settings의 block/allow list)
        """
        if transport is None:
            raise ValueError("transport must not be None")

        self.transport = transport
        self.adapters = dict(adapters) if adapters is not None else build_adapters()
        self.engine_timeout_s = engine_timeout_s or settings.engine_timeout_s
        self.weights = dict(weights) if weights is not None else dict(settings.engine_weights)
        self.result_filter = result_filter or ResultFilter(
            settings.result_blocklist, settings.result_allowlist
        )

    async def search(
        self, query: SearchQuery, engines: Optional[Sequence[EngineId]] = None
    ) -> AggregatedResponse:
        """선택된 엔진에 동시에 질의하고 결과를 병합

        Args:
            query: 검색 요청
            engines: 질의할 엔진 (선언 순서 = 동점 처리 순서, 기본값: query.engines)

        Returns:
            AggregatedResponse: 병합/정렬된 결과와 엔진별 상태

        Raises:
            InvalidQueryException: 엔진 집합이 비었거나 어댑터가 없는 엔진 포함
            AllEnginesFailed: 모든 엔진이 실패/타임아웃
        """
        selected = self._resolve_engines(query, engines)
        logger.info(
            f"Aggregation started: query='{sanitize_for_log(query.text)}', "
            f"engines={[e.value for e in selected]}"
        )

        outcomes: list[EngineOutcome] = await asyncio.gather(
            *(self._run_engine(engine, query) for engine in selected)
        )

        reports = tuple(o.report for o in outcomes)
        failed = [r for r in reports if not r.is_success]
        if len(failed) == len(reports):
            logger.warning(f"All engines failed: {[(r.engine.value, r.status.value) for r in reports]}")
            raise AllEnginesFailed(list(reports))

        merged = merge_results(
            [(o.report.engine, o.results) for o in outcomes if o.report.is_success],
            weights=self.weights,
        )
        merged = self.result_filter.apply(merged)

        partial_failure = bool(failed)
        if partial_failure:
            logger.info(f"Partial failure: {[(r.engine.value, r.status.value) for r in failed]}")

        logger.info(f"Aggregation completed: results={len(merged)}, partial_failure={partial_failure}")
        return AggregatedResponse(
            results=tuple(merged),
            engines=reports,
            partial_failure=partial_failure,
        )

    def _resolve_engines(
        self, query: SearchQuery, engines: Optional[Sequence[EngineId]]
    ) -> list[EngineId]:
        requested = query.engines if engines is None else engines
        selected: list[EngineId] = []
        for item in requested:
            try:
                engine = EngineId(item)
            except ValueError as e:
                raise InvalidQueryException(f"unknown engine: {item}") from e
            if engine not in self.adapters:
                raise InvalidQueryException(f"engine not available: {engine.value}")
            if engine not in selected:
                selected.append(engine)

        if not selected:
            raise InvalidQueryException("no engines selected")
        return selected

    async def _call_engine(self, adapter: EngineAdapter, query: SearchQuery) -> list[RawResult]:
        request = adapter.build_request(query)
        status, body = await self.transport.fetch(request, timeout_s=self.engine_timeout_s)
        return adapter.parse_response(body, status)

    async def _run_engine(self, engine: EngineId, query: SearchQuery) -> EngineOutcome:
        """엔진 하나 실행. 예외는 모두 EngineReport로 흡수합니다."""
        adapter = self.adapters[engine]
        loop = asyncio.get_running_loop()
        started = loop.time()

        def elapsed_ms() -> float:
            return (loop.time() - started) * 1000

        try:
            results = await asyncio.wait_for(
                self._call_engine(adapter, query), timeout=self.engine_timeout_s
            )
        except asyncio.TimeoutError:
            logger.warning(f"[{engine.value}] timed out after {self.engine_timeout_s:.2f}s")
            return EngineOutcome(
                report=EngineReport(
                    engine=engine,
                    status=EngineStatus.TIMED_OUT,
                    elapsed_ms=elapsed_ms(),
                    error_kind="timeout",
                    error_message=f"no response within {self.engine_timeout_s}s",
                )
            )
        except AdapterError as e:
            logger.warning(f"[{engine.value}] {e.kind}: {e.message}")
            return EngineOutcome(
                report=EngineReport(
                    engine=engine,
                    status=EngineStatus.ERRORED,
                    elapsed_ms=elapsed_ms(),
                    error_kind=e.kind,
                    error_message=e.message,
                )
            )
        except Exception as e:
            # 어댑터 버그가 다른 엔진 결과까지 날리지 않도록 엔진 단위로 격리
            logger.error(f"[{engine.value}] unexpected error: {type(e).__name__}: {e}", exc_info=True)
            return EngineOutcome(
                report=EngineReport(
                    engine=engine,
                    status=EngineStatus.ERRORED,
                    elapsed_ms=elapsed_ms(),
                    error_kind="unexpected",
                    error_message=f"{type(e).__name__}: {e}",
                )
            )

        logger.debug(f"[{engine.value}] {len(results)} results in {elapsed_ms():.0f}ms")
        return EngineOutcome(
            report=EngineReport(
                engine=engine,
                status=EngineStatus.SUCCEEDED,
                result_count=len(results),
                elapsed_ms=elapsed_ms(),
            ),
            results=list(results),
        )
