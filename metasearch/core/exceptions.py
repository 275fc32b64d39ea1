"""커스텀 예외 정의 (Structured Exception Hierarchy)"""
from typing import Any, Optional


# 기본 예외 클래스
class MetaSearchException(Exception):
    """기본 예외 클래스 - 모든 커스텀 예외의 부모"""
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


# 엔진 어댑터 예외 (엔진 단위로 흡수됨)
class AdapterError(MetaSearchException):
    """엔진 어댑터 예외의 기본 클래스"""
    kind = "adapter_error"

    def __init__(self, engine: str, message: str, error_code: str = "ADAPTER_ERROR", details: Optional[dict[str, Any]] = None):
        self.engine = engine
        super().__init__(message, error_code, details or {"engine": engine})


class ParseFailure(AdapterError):
    """업스트림 응답 파싱 실패"""
    kind = "parse_failure"

    def __init__(self, engine: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Failed to parse response from {engine}: {reason}"
        super().__init__(engine, message, "PARSE_FAILURE", details or {"engine": engine, "reason": reason})


class NetworkFailure(AdapterError):
    """업스트림 요청 실패 (연결 오류, HTTP 오류 상태)"""
    kind = "network_failure"

    def __init__(self, engine: str, reason: str, status: Optional[int] = None, details: Optional[dict[str, Any]] = None):
        self.status = status
        message = f"Request to {engine} failed: {reason}"
        super().__init__(engine, message, "NETWORK_FAILURE",
                         details or {"engine": engine, "reason": reason, "status": status})


# 집계 예외
class AggregationError(MetaSearchException):
    """Aggregator 수준 예외"""
    def __init__(self, message: str, error_code: str = "AGGREGATION_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_code or "AGGREGATION_ERROR", details)


class AllEnginesFailed(AggregationError):
    """요청된 모든 엔진이 실패/타임아웃"""
    def __init__(self, reports: Optional[list] = None):
        self.reports = list(reports or [])
        engines = [getattr(r, "engine", None) for r in self.reports]
        message = f"All {len(self.reports)} engines failed"
        super().__init__(message, "ALL_ENGINES_FAILED", {"engines": engines})


# 캐시 관련 예외 (백엔드 내부에서 흡수됨)
class CacheException(MetaSearchException):
    """캐시 관련 예외"""
    def __init__(self, message: str, error_code: str = "CACHE_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_code or "CACHE_ERROR", details)


class CacheConnectionException(CacheException):
    """캐시 연결 실패"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Failed to connect to cache: {reason}"
        super().__init__(message, "CACHE_CONNECTION_ERROR", details)


class CacheSerializationException(CacheException):
    """캐시 직렬화/역직렬화 오류"""
    def __init__(self, operation: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Cache {operation} failed: {reason}"
        super().__init__(message, "CACHE_SERIALIZATION_ERROR",
                        details or {"operation": operation, "reason": reason})


# 파이프라인 예외 (외부 호출자에게 노출되는 유일한 예외)
class PipelineError(MetaSearchException):
    """검색 파이프라인 실패

    - 집계 실패 (AggregationError): "No results available" / NO_RESULTS
    - 잘못된 요청 (ValidationException): "Invalid search request" / INVALID_QUERY
    """
    def __init__(self, cause: MetaSearchException, details: Optional[dict[str, Any]] = None):
        self.cause = cause
        if isinstance(cause, ValidationException):
            message, error_code = "Invalid search request", "INVALID_QUERY"
        else:
            message, error_code = "No results available", "NO_RESULTS"
        super().__init__(message, error_code,
                         details or {"cause": cause.error_code})


# 유효성 검증 관련 예외
class ValidationException(MetaSearchException):
    """유효성 검증 예외"""
    def __init__(self, field: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Validation failed for '{field}': {reason}"
        super().__init__(message, "VALIDATION_ERROR",
                        details or {"field": field, "reason": reason})


class InvalidQueryException(ValidationException):
    """유효하지 않은 검색 요청"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        super().__init__("query", reason, details)
