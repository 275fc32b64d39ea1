"""LibreX instance adapter (JSON API)."""

from __future__ import annotations

import json
from urllib.parse import urlencode

from metasearch.core.exceptions import ParseFailure
from metasearch.schemas import EngineId, RawResult, SearchQuery

from .base import EngineAdapter, OutboundRequest
from .parsing import clean_text, strip_tags


_BASE_URL = "https://search.ahwx.org/api.php"


class LibreXEngine(EngineAdapter):
    engine_id = EngineId.LIBREX

    def __init__(self, base_url: str = _BASE_URL):
        self.base_url = base_url

    def build_request(self, query: SearchQuery) -> OutboundRequest:
        # p: 0부터 시작하는 페이지, t=0: 일반 웹 검색
        params = {"q": query.text.strip(), "p": str(query.page - 1), "t": "0"}
        return OutboundRequest(
            engine=self.engine_id,
            method="GET",
            url=f"{self.base_url}?{urlencode(params)}",
            headers=self.base_headers(query, accept="application/json"),
        )

    def parse_response(self, body: bytes, status: int) -> list[RawResult]:
        self.check_status(status)
        text = self.decode(body)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseFailure(self.name, f"invalid JSON: {e}") from e

        # 일부 인스턴스는 {"results": [...]}로 감싸서 반환
        if isinstance(data, dict):
            data = data.get("results")
        if not isinstance(data, list):
            raise ParseFailure(self.name, "expected a list of results")

        results: list[RawResult] = []
        for item in data:
            if not isinstance(item, dict):
                continue
            title = clean_text(item.get("title"))
            url = (item.get("url") or "").strip()
            if not title or not url:
                # 위젯/특수 결과 (special response) 등
                continue
            results.append(
                RawResult(
                    title=title,
                    url=url,
                    snippet=strip_tags(item.get("description") or ""),
                    rank=len(results) + 1,
                    engine=self.engine_id,
                )
            )
        return results
