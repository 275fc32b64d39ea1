"""Engine Adapter Protocol - Interface for upstream search engines

Every upstream engine is one adapter class implementing build_request and
parse_response. Adapters are stateless and never perform I/O themselves; the
aggregator owns the single outbound call per adapter invocation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar, Optional

from metasearch.core.config import settings
from metasearch.core.exceptions import NetworkFailure, ParseFailure
from metasearch.schemas import EngineId, RawResult, SearchQuery
from metasearch.utils.user_agent import random_user_agent


@dataclass(frozen=True)
class OutboundRequest:
    """업스트림 엔진으로 보낼 요청

    Attributes:
        engine: 요청 대상 엔진
        method: "GET" | "POST"
        url: 요청 URL (쿼리스트링 포함)
        headers: 요청 헤더 (식별 정보 없음)
        data: POST form 데이터
        cookies: 엔진 설정용 쿠키 (세이프서치 등)
    """

    engine: EngineId
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    data: Optional[dict[str, str]] = None
    cookies: dict[str, str] = field(default_factory=dict)


class EngineAdapter(ABC):
    """검색 엔진 어댑터 기본 클래스

    구현 예시:
        class MyEngine(EngineAdapter):
            engine_id = EngineId.MYENGINE

            def build_request(self, query: SearchQuery) -> OutboundRequest:
                ...

            def parse_response(self, body: bytes, status: int) -> list[RawResult]:
                ...
    """

    engine_id: ClassVar[EngineId]

    @abstractmethod
    def build_request(self, query: SearchQuery) -> OutboundRequest:
        """검색 요청 생성

        Args:
            query: 검색 요청

        Returns:
            OutboundRequest: 사용자 식별 정보가 없는 업스트림 요청
        """
        ...

    @abstractmethod
    def parse_response(self, body: bytes, status: int) -> list[RawResult]:
        """업스트림 응답 파싱

        Args:
            body: 응답 본문
            status: HTTP 상태 코드

        Returns:
            list[RawResult]: 페이지 순서대로의 결과 (결과 없음 페이지는 빈 리스트)

        Raises:
            NetworkFailure: HTTP 오류 상태
            ParseFailure: 본문을 해석할 수 없음
        """
        ...

    @property
    def name(self) -> str:
        return self.engine_id.value

    def base_headers(self, query: SearchQuery, accept: str = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8") -> dict[str, str]:
        """모든 엔진 공통 헤더: 로테이션 UA + Accept 계열만"""
        language = query.language or settings.default_language
        accept_language = language if language == "en" else f"{language},en;q=0.5"
        return {
            "User-Agent": random_user_agent(),
            "Accept": accept,
            "Accept-Language": accept_language,
        }

    def check_status(self, status: int) -> None:
        if status >= 400 or status < 100:
            raise NetworkFailure(self.name, f"upstream returned HTTP {status}", status=status)

    def decode(self, body: bytes) -> str:
        if not body:
            raise ParseFailure(self.name, "empty response body")
        try:
            return body.decode("utf-8")
        except UnicodeDecodeError:
            return body.decode("latin-1")
