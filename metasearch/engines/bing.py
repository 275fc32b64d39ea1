"""Bing adapter."""

from __future__ import annotations

import base64
import binascii
from urllib.parse import parse_qs, urlencode, urlparse

from metasearch.schemas import EngineId, RawResult, SafeSearch, SearchQuery

from .base import EngineAdapter, OutboundRequest
from .parsing import ResultSelectors, parse_html_results


_BASE_URL = "https://www.bing.com/search"
_PAGE_SIZE = 10

_SAFE_SEARCH = {
    SafeSearch.OFF: "OFF",
    SafeSearch.MODERATE: "DEMOTE",
    SafeSearch.STRICT: "STRICT",
}

SELECTORS = ResultSelectors(
    results="ol#b_results > li.b_algo",
    title="h2 a",
    url="h2 a",
    snippet=".b_caption p",
    no_results="ol#b_results > li.b_no",
)


def decode_bing_link(href: str) -> str:
    """bing.com/ck/a?...&u=a1<base64url> 트래킹 링크를 실제 URL로 복원

    복원할 수 없으면 원본을 그대로 반환합니다.
    """
    parsed = urlparse(href)
    if not parsed.netloc.endswith("bing.com") or not parsed.path.startswith("/ck/"):
        return href
    encoded = (parse_qs(parsed.query).get("u") or [""])[0]
    if not encoded.startswith("a1"):
        return href
    payload = encoded[2:]
    payload += "=" * (-len(payload) % 4)
    try:
        return base64.urlsafe_b64decode(payload).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return href


class BingEngine(EngineAdapter):
    engine_id = EngineId.BING

    def build_request(self, query: SearchQuery) -> OutboundRequest:
        params = {"q": query.text.strip(), "first": str((query.page - 1) * _PAGE_SIZE + 1)}
        return OutboundRequest(
            engine=self.engine_id,
            method="GET",
            url=f"{_BASE_URL}?{urlencode(params)}",
            headers=self.base_headers(query),
            cookies={"SRCHHPGUSR": f"ADLT={_SAFE_SEARCH[query.safe_search]}"},
        )

    def parse_response(self, body: bytes, status: int) -> list[RawResult]:
        self.check_status(status)
        html = self.decode(body)
        return parse_html_results(self.engine_id, html, SELECTORS, url_transform=decode_bing_link)
