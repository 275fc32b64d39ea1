"""Searx/SearXNG public instance adapter."""

from __future__ import annotations

from urllib.parse import urlencode

from metasearch.schemas import EngineId, RawResult, SearchQuery

from .base import EngineAdapter, OutboundRequest
from .parsing import ResultSelectors, parse_html_results


_BASE_URL = "https://searx.work/search"

SELECTORS = ResultSelectors(
    results="#urls .result",
    title="h3 > a",
    url="h3 > a",
    snippet=".content",
    no_results="#urls > .dialog-error",
)


class SearxEngine(EngineAdapter):
    engine_id = EngineId.SEARX

    def __init__(self, base_url: str = _BASE_URL):
        self.base_url = base_url

    def build_request(self, query: SearchQuery) -> OutboundRequest:
        params = {
            "q": query.text.strip(),
            "pageno": str(query.page),
            "safesearch": str(int(query.safe_search)),
            "categories": "general",
        }
        return OutboundRequest(
            engine=self.engine_id,
            method="GET",
            url=f"{self.base_url}?{urlencode(params)}",
            headers=self.base_headers(query),
        )

    def parse_response(self, body: bytes, status: int) -> list[RawResult]:
        self.check_status(status)
        html = self.decode(body)
        return parse_html_results(self.engine_id, html, SELECTORS)
