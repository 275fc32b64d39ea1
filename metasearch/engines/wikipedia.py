"""Wikipedia adapter (MediaWiki Action API, JSON)."""

from __future__ import annotations

import json
from urllib.parse import urlencode

from metasearch.core.config import settings
from metasearch.core.exceptions import ParseFailure
from metasearch.schemas import EngineId, RawResult, SearchQuery

from .base import EngineAdapter, OutboundRequest
from .parsing import clean_text


_PAGE_SIZE = 10


class WikipediaEngine(EngineAdapter):
    """Wikipedia 검색 어댑터

    generator=search + prop=info|extracts 조합으로 한 번의 호출에서
    문서 URL(fullurl)과 요약(extract)을 같이 받습니다. 결과 순위는
    각 페이지의 index 필드입니다.
    """

    engine_id = EngineId.WIKIPEDIA

    def build_request(self, query: SearchQuery) -> OutboundRequest:
        language = (query.language or settings.default_language).split("-")[0].lower()
        params = {
            "action": "query",
            "format": "json",
            "generator": "search",
            "gsrsearch": query.text.strip(),
            "gsrlimit": str(_PAGE_SIZE),
            "gsroffset": str((query.page - 1) * _PAGE_SIZE),
            "prop": "info|extracts",
            "inprop": "url",
            "exintro": "1",
            "explaintext": "1",
            "exsentences": "2",
            "exlimit": "max",
        }
        return OutboundRequest(
            engine=self.engine_id,
            method="GET",
            url=f"https://{language}.wikipedia.org/w/api.php?{urlencode(params)}",
            headers=self.base_headers(query, accept="application/json"),
        )

    def parse_response(self, body: bytes, status: int) -> list[RawResult]:
        self.check_status(status)
        text = self.decode(body)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseFailure(self.name, f"invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ParseFailure(self.name, f"unexpected payload type: {type(data).__name__}")
        if "error" in data:
            info = data["error"].get("info") if isinstance(data["error"], dict) else data["error"]
            raise ParseFailure(self.name, f"api error: {info}")

        # 결과가 없으면 "query" 키 자체가 없음
        pages = (data.get("query") or {}).get("pages") or {}
        if isinstance(pages, dict):
            pages = list(pages.values())

        entries = []
        for page in pages:
            if not isinstance(page, dict):
                continue
            title = clean_text(page.get("title"))
            url = page.get("fullurl") or page.get("canonicalurl")
            if not title or not url:
                continue
            entries.append((page.get("index") or 0, title, url, clean_text(page.get("extract"))))

        entries.sort(key=lambda e: e[0])
        return [
            RawResult(title=title, url=url, snippet=snippet, rank=i + 1, engine=self.engine_id)
            for i, (_, title, url, snippet) in enumerate(entries)
        ]
