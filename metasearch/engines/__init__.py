"""Upstream search engine adapters

Every EngineId member is wired to exactly one adapter class here; importing
this package fails if a member is left unwired.
"""

from metasearch.schemas import EngineId

from .base import EngineAdapter, OutboundRequest
from .bing import BingEngine
from .brave import BraveEngine
from .duckduckgo import DuckDuckGoEngine
from .librex import LibreXEngine
from .mojeek import MojeekEngine
from .searx import SearxEngine
from .startpage import StartpageEngine
from .wikipedia import WikipediaEngine


ENGINE_ADAPTERS: dict[EngineId, type[EngineAdapter]] = {
    adapter.engine_id: adapter
    for adapter in (
        DuckDuckGoEngine,
        BingEngine,
        BraveEngine,
        MojeekEngine,
        SearxEngine,
        StartpageEngine,
        WikipediaEngine,
        LibreXEngine,
    )
}

_unwired = set(EngineId) - set(ENGINE_ADAPTERS)
if _unwired:
    raise RuntimeError(f"Engines without adapter: {sorted(e.value for e in _unwired)}")


def build_adapters() -> dict[EngineId, EngineAdapter]:
    """엔진별 어댑터 인스턴스 생성 (stateless이므로 프로세스당 1회)"""
    return {engine: adapter_cls() for engine, adapter_cls in ENGINE_ADAPTERS.items()}


__all__ = [
    "ENGINE_ADAPTERS",
    "EngineAdapter",
    "OutboundRequest",
    "build_adapters",
    "BingEngine",
    "BraveEngine",
    "DuckDuckGoEngine",
    "LibreXEngine",
    "MojeekEngine",
    "SearxEngine",
    "StartpageEngine",
    "WikipediaEngine",
]
