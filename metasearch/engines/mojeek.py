"""Mojeek adapter."""

from __future__ import annotations

from urllib.parse import urlencode

from metasearch.schemas import EngineId, RawResult, SafeSearch, SearchQuery

from .base import EngineAdapter, OutboundRequest
from .parsing import ResultSelectors, parse_html_results


_BASE_URL = "https://www.mojeek.com/search"
_PAGE_SIZE = 10

SELECTORS = ResultSelectors(
    results="ul.results-standard > li",
    title="h2 > a.title",
    url="a.ob",
    snippet="p.s",
    no_results=".no-results",
)


class MojeekEngine(EngineAdapter):
    engine_id = EngineId.MOJEEK

    def build_request(self, query: SearchQuery) -> OutboundRequest:
        params = {
            "q": query.text.strip(),
            "s": str((query.page - 1) * _PAGE_SIZE + 1),
            # Mojeek은 on/off 두 단계만 지원
            "safe": "0" if query.safe_search == SafeSearch.OFF else "1",
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
