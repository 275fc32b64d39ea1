"""Startpage adapter."""

from __future__ import annotations

from urllib.parse import urlencode

from metasearch.schemas import EngineId, RawResult, SafeSearch, SearchQuery

from .base import EngineAdapter, OutboundRequest
from .parsing import ResultSelectors, parse_html_results


_BASE_URL = "https://www.startpage.com/do/dsearch"

_SAFE_SEARCH = {
    SafeSearch.OFF: "none",
    SafeSearch.MODERATE: "moderate",
    SafeSearch.STRICT: "heavy",
}

SELECTORS = ResultSelectors(
    results=".w-gl__result",
    title=".w-gl__result-title h3",
    url="a.w-gl__result-url",
    snippet=".w-gl__description",
    no_results=".show-results__no-results",
)


class StartpageEngine(EngineAdapter):
    engine_id = EngineId.STARTPAGE

    def build_request(self, query: SearchQuery) -> OutboundRequest:
        params = {
            "query": query.text.strip(),
            "cat": "web",
            "page": str(query.page),
            "qadf": _SAFE_SEARCH[query.safe_search],
        }
        return OutboundRequest(
            engine=self.engine_id,
            method="GET",
            url=f"{_BASE_URL}?{urlencode(params)}",
            headers=self.base_headers(query),
        )

    def parse_response(self, body: bytes, status: int) -> list[RawResult]:
        self.check_status(status)
        html = self.decode(body)
        return parse_html_results(self.engine_id, html, SELECTORS)
