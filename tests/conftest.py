"""전역 테스트 설정

역할:
- 테스트 환경 구성
- 공통 Fake(전송/어댑터/시계) 주입

금지:
- 실제 업스트림 엔진 호출
- 실제 Redis 연결
"""

from __future__ import annotations

import asyncio
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import pytest


# 프로젝트 루트를 경로에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "INFO")

from metasearch.engines.base import EngineAdapter, OutboundRequest  # noqa: E402
from metasearch.schemas import (  # noqa: E402
    AggregatedResponse,
    EngineId,
    EngineReport,
    EngineStatus,
    NormalizedResult,
    RawResult,
    SearchQuery,
)


@dataclass
class FakeClock:
    """수동으로 진행시키는 시계 (epoch 초)"""

    now: float = 1_700_000_000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeAdapter(EngineAdapter):
    """미리 정한 결과를 돌려주는 어댑터

    parse_response에 넘어온 본문은 무시하고 results를 그대로 반환합니다.
    error가 있으면 파싱 단계에서 그 예외를 발생시킵니다.
    """

    def __init__(self, engine: EngineId, urls: Optional[list[tuple[str, int]]] = None, error: Optional[Exception] = None):
        self.engine_id = engine
        self.error = error
        self.results = [
            RawResult(title=f"title {url}", url=url, snippet=f"about {url}", rank=rank, engine=engine)
            for url, rank in (urls or [])
        ]

    def build_request(self, query: SearchQuery) -> OutboundRequest:
        return OutboundRequest(engine=self.engine_id, method="GET", url=f"https://{self.engine_id.value}.test/?q=x")

    def parse_response(self, body: bytes, status: int) -> list[RawResult]:
        if self.error is not None:
            raise self.error
        return list(self.results)


Behavior = Union[float, Exception]


@dataclass
class FakeTransport:
    """엔진별 지연/예외를 흉내 내는 전송 계층

    behaviors[engine]:
    - float: 해당 초만큼 대기 후 (200, b"ok")
    - Exception: 즉시 발생
    """

    behaviors: dict[EngineId, Behavior] = field(default_factory=dict)
    calls: list[EngineId] = field(default_factory=list)

    async def fetch(self, request: OutboundRequest, *, timeout_s: float) -> tuple[int, bytes]:
        self.calls.append(request.engine)
        behavior = self.behaviors.get(request.engine, 0.0)
        if isinstance(behavior, Exception):
            raise behavior
        if behavior:
            await asyncio.sleep(behavior)
        return 200, b"ok"


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def sample_query() -> SearchQuery:
    return SearchQuery(text="rust ownership", engines=[EngineId.DUCKDUCKGO, EngineId.BRAVE])


def make_response(*urls: str, partial_failure: bool = False) -> AggregatedResponse:
    """캐시 테스트용 간단한 응답"""
    return AggregatedResponse(
        results=tuple(
            NormalizedResult(title=u, url=u, snippet="", engines=(EngineId.DUCKDUCKGO,), score=1.0 / (i + 1))
            for i, u in enumerate(urls)
        ),
        engines=(EngineReport(engine=EngineId.DUCKDUCKGO, status=EngineStatus.SUCCEEDED, result_count=len(urls)),),
        partial_failure=partial_failure,
    )


@pytest.fixture
def sample_response() -> AggregatedResponse:
    return make_response("https://x.com/1", "https://z.com/3")


@pytest.fixture
def adapter_factory():
    """FakeAdapter 생성기: adapter_factory(EngineId.X, urls=[(url, rank)], error=...)"""
    return FakeAdapter


@pytest.fixture
def response_factory():
    """make_response 생성기: response_factory("https://a", "https://b")"""
    return make_response
