"""DuckDuckGo (HTML endpoint) adapter."""

from __future__ import annotations

from urllib.parse import urlencode

from metasearch.schemas import EngineId, RawResult, SafeSearch, SearchQuery
from metasearch.utils.url_utils import unwrap_redirect

from .base import EngineAdapter, OutboundRequest
from .parsing import ResultSelectors, parse_html_results


_BASE_URL = "https://html.duckduckgo.com/html/"
_PAGE_SIZE = 30

# kp: -2 off, -1 moderate, 1 strict
_SAFE_SEARCH = {
    SafeSearch.OFF: "-2",
    SafeSearch.MODERATE: "-1",
    SafeSearch.STRICT: "1",
}

SELECTORS = ResultSelectors(
    results=".result",
    title=".result__a",
    url=".result__a",
    snippet=".result__snippet",
    no_results=".no-results",
)


class DuckDuckGoEngine(EngineAdapter):
    """DuckDuckGo HTML 결과 페이지 어댑터

    결과 링크는 "//duckduckgo.com/l/?uddg=..." 리다이렉트로 감싸져 있어
    실제 대상 URL로 풀어서 반환합니다.
    """

    engine_id = EngineId.DUCKDUCKGO

    def build_request(self, query: SearchQuery) -> OutboundRequest:
        params = {"q": query.text.strip(), "kp": _SAFE_SEARCH[query.safe_search]}
        if query.page > 1:
            offset = (query.page - 1) * _PAGE_SIZE
            params.update({"s": str(offset), "dc": str(offset + 1), "v": "l", "o": "json", "api": "d.js"})
        return OutboundRequest(
            engine=self.engine_id,
            method="GET",
            url=f"{_BASE_URL}?{urlencode(params)}",
            headers=self.base_headers(query),
        )

    def parse_response(self, body: bytes, status: int) -> list[RawResult]:
        self.check_status(status)
        html = self.decode(body)
        return parse_html_results(
            self.engine_id,
            html,
            SELECTORS,
            base_url="https://duckduckgo.com",
            url_transform=unwrap_redirect,
        )
