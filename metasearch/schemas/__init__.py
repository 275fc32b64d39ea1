from .search_schema import (
    AggregatedResponse,
    CacheEntry,
    EngineId,
    EngineReport,
    EngineStatus,
    NormalizedResult,
    RawResult,
    SafeSearch,
    SearchQuery,
)

__all__ = [
    "AggregatedResponse",
    "CacheEntry",
    "EngineId",
    "EngineReport",
    "EngineStatus",
    "NormalizedResult",
    "RawResult",
    "SafeSearch",
    "SearchQuery",
]
