"""Pydantic 스키마 정의 - 검색 요청/결과/캐시 엔트리

모든 모델은 frozen이며 컬렉션 필드는 tuple을 사용합니다.
캐시에 저장된 값을 호출자가 변경할 수 없도록 하기 위함입니다.
"""
from __future__ import annotations

import hashlib
import re
from enum import Enum, IntEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


_WHITESPACE_RE = re.compile(r"\s+")


class EngineId(str, Enum):
    """지원하는 업스트림 검색 엔진 (닫힌 집합)"""

    DUCKDUCKGO = "duckduckgo"
    BING = "bing"
    BRAVE = "brave"
    MOJEEK = "mojeek"
    SEARX = "searx"
    STARTPAGE = "startpage"
    WIKIPEDIA = "wikipedia"
    LIBREX = "librex"


class SafeSearch(IntEnum):
    """세이프서치 레벨"""

    OFF = 0
    MODERATE = 1
    STRICT = 2


class EngineStatus(str, Enum):
    """엔진 호출의 종료 상태"""

    SUCCEEDED = "succeeded"
    TIMED_OUT = "timed_out"
    ERRORED = "errored"


class SearchQuery(BaseModel):
    """검색 요청 (불변)

    Attributes:
        text: 사용자 검색어 (원문)
        page: 페이지 번호 (1부터)
        safe_search: 세이프서치 레벨
        engines: 선택된 엔진 (선언 순서 유지, 중복 제거)
        language: 언어/로케일 힌트 (예: "en", "ko-KR")
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., min_length=1, max_length=512)
    page: int = Field(1, ge=1, le=100)
    safe_search: SafeSearch = SafeSearch.MODERATE
    engines: tuple[EngineId, ...] = Field(..., min_length=1)
    language: Optional[str] = Field(None, max_length=16)

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("query text must not be blank")
        return v

    @field_validator("engines", mode="before")
    @classmethod
    def dedupe_engines(cls, v: Any) -> Any:
        if isinstance(v, (str, EngineId)):
            v = [v]
        seen: list = []
        for item in v or ():
            engine = EngineId(item)
            if engine not in seen:
                seen.append(engine)
        return tuple(seen)

    @field_validator("language")
    @classmethod
    def validate_language(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if not v:
            return None
        if not re.fullmatch(r"[A-Za-z]{2,3}(-[A-Za-z0-9]{2,8})?", v):
            raise ValueError(f"invalid language tag: {v}")
        return v

    @property
    def canonical_text(self) -> str:
        """공백 정리 + casefold 된 검색어"""
        return _WHITESPACE_RE.sub(" ", self.text.strip()).casefold()

    def cache_key(self, prefix: str = "search") -> str:
        """정규화된 필드로 결정적 캐시 키 생성

        엔진 집합은 정렬하여 선언 순서와 무관하게 같은 키가 나옵니다.
        """
        engines = ",".join(sorted(e.value for e in self.engines))
        language = (self.language or "").lower()
        fingerprint = "\x1f".join(
            [self.canonical_text, str(self.page), str(int(self.safe_search)), engines, language]
        )
        digest = hashlib.sha256(fingerprint.encode("utf-8")).hexdigest()
        return f"{prefix}:{digest}"


class RawResult(BaseModel):
    """엔진별 파싱 결과 (검증 전)"""

    model_config = ConfigDict(frozen=True)

    title: str
    url: str
    snippet: str = ""
    rank: Optional[int] = Field(None, ge=1)
    engine: EngineId


class NormalizedResult(BaseModel):
    """엔진 독립적인 병합 결과"""

    model_config = ConfigDict(frozen=True)

    title: str
    url: str
    snippet: str = ""
    engines: tuple[EngineId, ...]
    score: float = Field(..., ge=0)


class EngineReport(BaseModel):
    """엔진별 호출 결과 리포트"""

    model_config = ConfigDict(frozen=True)

    engine: EngineId
    status: EngineStatus
    result_count: int = 0
    elapsed_ms: float = 0.0
    error_kind: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == EngineStatus.SUCCEEDED


class AggregatedResponse(BaseModel):
    """병합/정렬된 최종 검색 응답"""

    model_config = ConfigDict(frozen=True)

    results: tuple[NormalizedResult, ...] = ()
    engines: tuple[EngineReport, ...] = ()
    partial_failure: bool = False

    def to_dict(self) -> dict[str, Any]:
        """프론트엔드 렌더링용 구조화 데이터 (JSON 호환)"""
        return {
            "results": [r.model_dump(mode="json") for r in self.results],
            "engines": [e.model_dump(mode="json") for e in self.engines],
            "partial_failure": self.partial_failure,
        }


class CacheEntry(BaseModel):
    """캐시 엔트리

    만료 여부는 저장 시각과 TTL로만 판단합니다 (백엔드 eviction 정책과 무관).
    """

    model_config = ConfigDict(frozen=True)

    response: AggregatedResponse
    inserted_at: float
    ttl: int = Field(..., gt=0)

    @property
    def expires_at(self) -> float:
        return self.inserted_at + self.ttl

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at

    def remaining_ttl(self, now: float) -> int:
        """남은 TTL (초, 올림). 만료되었으면 0"""
        remaining = self.expires_at - now
        if remaining <= 0:
            return 0
        return int(remaining) + (0 if remaining == int(remaining) else 1)
