"""Brave Search adapter."""

from __future__ import annotations

from urllib.parse import urlencode

from metasearch.schemas import EngineId, RawResult, SafeSearch, SearchQuery

from .base import EngineAdapter, OutboundRequest
from .parsing import ResultSelectors, parse_html_results


_BASE_URL = "https://search.brave.com/search"

_SAFE_SEARCH = {
    SafeSearch.OFF: "off",
    SafeSearch.MODERATE: "moderate",
    SafeSearch.STRICT: "strict",
}

SELECTORS = ResultSelectors(
    results="#results > .snippet[data-pos]",
    title=".title",
    url="a",
    snippet=".snippet-description",
    no_results="#results .no-results",
)


class BraveEngine(EngineAdapter):
    engine_id = EngineId.BRAVE

    def build_request(self, query: SearchQuery) -> OutboundRequest:
        params = {"q": query.text.strip(), "offset": str(query.page - 1)}
        return OutboundRequest(
            engine=self.engine_id,
            method="GET",
            url=f"{_BASE_URL}?{urlencode(params)}",
            headers=self.base_headers(query),
            # useLocation=0: 위치 기반 결과 비활성화
            cookies={"safesearch": _SAFE_SEARCH[query.safe_search], "useLocation": "0"},
        )

    def parse_response(self, body: bytes, status: int) -> list[RawResult]:
        self.check_status(status)
        html = self.decode(body)
        return parse_html_results(self.engine_id, html, SELECTORS)
