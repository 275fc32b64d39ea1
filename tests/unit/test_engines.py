"""엔진 어댑터 테스트 (네트워크 없음, 샘플 응답 파싱)"""

from __future__ import annotations

from urllib.parse import parse_qs, urlparse

import pytest

from metasearch.core.exceptions import NetworkFailure, ParseFailure
from metasearch.engines import ENGINE_ADAPTERS, build_adapters
from metasearch.engines.bing import decode_bing_link
from metasearch.engines.searx import SearxEngine
from metasearch.engines.parsing import get_blocked_keyword, strip_tags
from metasearch.schemas import EngineId, SafeSearch, SearchQuery
from metasearch.utils.user_agent import USER_AGENTS
from tests.fixtures.engine_pages import CAPTCHA_HTML, ENGINE_PAGES, NO_RESULT_PAGES


ADAPTERS = build_adapters()


def _query(**overrides) -> SearchQuery:
    data = {"text": "rust ownership", "engines": list(EngineId)}
    data.update(overrides)
    return SearchQuery(**data)


def _params(url: str) -> dict[str, list[str]]:
    return parse_qs(urlparse(url).query)


def test_every_engine_has_adapter():
    assert set(ENGINE_ADAPTERS) == set(EngineId)
    for engine, adapter in ADAPTERS.items():
        assert adapter.engine_id == engine


class TestBuildRequest:
    """요청 생성: 검색어 전달 + 식별 정보 없음"""

    @pytest.mark.parametrize("engine", list(EngineId))
    def test_query_text_reaches_upstream(self, engine):
        request = ADAPTERS[engine].build_request(_query())
        assert request.engine == engine
        assert request.method == "GET"
        assert "rust ownership" in [v for values in _params(request.url).values() for v in values]

    @pytest.mark.parametrize("engine", list(EngineId))
    def test_no_identifying_headers(self, engine):
        request = ADAPTERS[engine].build_request(_query())
        assert set(request.headers) == {"User-Agent", "Accept", "Accept-Language"}
        assert request.headers["User-Agent"] in USER_AGENTS
        assert "Cookie" not in request.headers

    def test_language_hint(self):
        request = ADAPTERS[EngineId.BRAVE].build_request(_query(language="de"))
        assert request.headers["Accept-Language"] == "de,en;q=0.5"

    def test_wikipedia_uses_language_subdomain(self):
        request = ADAPTERS[EngineId.WIKIPEDIA].build_request(_query(language="ko-KR"))
        assert urlparse(request.url).netloc == "ko.wikipedia.org"

    def test_duckduckgo_safe_search_and_paging(self):
        request = ADAPTERS[EngineId.DUCKDUCKGO].build_request(_query(page=2, safe_search=SafeSearch.STRICT))
        params = _params(request.url)
        assert params["kp"] == ["1"]
        assert params["s"] == ["30"]

    def test_bing_safe_search_cookie(self):
        request = ADAPTERS[EngineId.BING].build_request(_query(safe_search=SafeSearch.OFF, page=3))
        assert request.cookies == {"SRCHHPGUSR": "ADLT=OFF"}
        assert _params(request.url)["first"] == ["21"]

    def test_brave_disables_location(self):
        request = ADAPTERS[EngineId.BRAVE].build_request(_query())
        assert request.cookies["useLocation"] == "0"
        assert request.cookies["safesearch"] == "moderate"

    def test_searx_custom_instance(self):
        adapter = SearxEngine(base_url="https://searx.example/search")
        request = adapter.build_request(_query(page=4))
        assert request.url.startswith("https://searx.example/search?")
        assert _params(request.url)["pageno"] == ["4"]


class TestParseResponse:
    def test_duckduckgo(self):
        results = ADAPTERS[EngineId.DUCKDUCKGO].parse_response(ENGINE_PAGES["duckduckgo"].encode(), 200)
        assert [r.url for r in results] == [
            "https://doc.rust-lang.org/book/ch04-01-what-is-ownership.html",
            "https://example.com/rust?utm_source=ddg",
        ]
        assert results[0].title == "What is Ownership? - The Rust Programming Language"
        assert results[0].snippet.startswith("Ownership is a set of rules")
        assert [r.rank for r in results] == [1, 2]
        assert all(r.engine == EngineId.DUCKDUCKGO for r in results)

    def test_brave_missing_snippet_is_empty(self):
        results = ADAPTERS[EngineId.BRAVE].parse_response(ENGINE_PAGES["brave"].encode(), 200)
        assert len(results) == 2
        assert results[0].snippet == "Ownership is Rust's most unique feature."
        assert results[1].title == "Understanding ownership"
        assert results[1].snippet == ""

    def test_mojeek(self):
        results = ADAPTERS[EngineId.MOJEEK].parse_response(ENGINE_PAGES["mojeek"].encode(), 200)
        assert [r.title for r in results] == ["Mojeek result A", "Mojeek result B"]
        assert results[0].url == "https://www.mojeek-result.com/a"

    def test_searx(self):
        results = ADAPTERS[EngineId.SEARX].parse_response(ENGINE_PAGES["searx"].encode(), 200)
        assert len(results) == 1
        assert results[0].url == "https://searx-result.net/page"
        assert results[0].snippet == "Searx snippet"

    def test_startpage(self):
        results = ADAPTERS[EngineId.STARTPAGE].parse_response(ENGINE_PAGES["startpage"].encode(), 200)
        assert len(results) == 1
        assert results[0].title == "Startpage result"

    def test_bing_unwraps_tracking_link(self):
        results = ADAPTERS[EngineId.BING].parse_response(ENGINE_PAGES["bing"].encode(), 200)
        assert [r.url for r in results] == ["https://example.com/bing", "https://plain.example.net/"]
        assert results[0].snippet == "Bing snippet"

    def test_wikipedia_ordered_by_index(self):
        results = ADAPTERS[EngineId.WIKIPEDIA].parse_response(ENGINE_PAGES["wikipedia"].encode(), 200)
        assert [r.title for r in results] == ["Rust (programming language)", "Ownership"]
        assert results[1].snippet == ""

    def test_librex_skips_special_responses(self):
        results = ADAPTERS[EngineId.LIBREX].parse_response(ENGINE_PAGES["librex"].encode(), 200)
        assert [r.title for r in results] == ["LibreX result", "Second"]
        assert results[0].snippet == "A bold snippet"

    @pytest.mark.parametrize("engine", sorted(NO_RESULT_PAGES))
    def test_no_results_page_is_empty(self, engine):
        adapter = ADAPTERS[EngineId(engine)]
        assert adapter.parse_response(NO_RESULT_PAGES[engine].encode(), 200) == []


class TestParseFailures:
    @pytest.mark.parametrize("engine", list(EngineId))
    def test_http_error_status(self, engine):
        with pytest.raises(NetworkFailure) as exc_info:
            ADAPTERS[engine].parse_response(b"Service Unavailable", 503)
        assert exc_info.value.status == 503
        assert exc_info.value.kind == "network_failure"

    @pytest.mark.parametrize("engine", list(EngineId))
    def test_empty_body(self, engine):
        with pytest.raises(ParseFailure):
            ADAPTERS[engine].parse_response(b"", 200)

    def test_captcha_page(self):
        with pytest.raises(ParseFailure, match="captcha"):
            ADAPTERS[EngineId.DUCKDUCKGO].parse_response(CAPTCHA_HTML.encode(), 200)

    def test_unrecognized_html(self):
        with pytest.raises(ParseFailure, match="no result nodes"):
            ADAPTERS[EngineId.MOJEEK].parse_response(b"<html><body><p>redesigned</p></body></html>", 200)

    @pytest.mark.parametrize("engine", [EngineId.WIKIPEDIA, EngineId.LIBREX])
    def test_malformed_json(self, engine):
        with pytest.raises(ParseFailure, match="invalid JSON"):
            ADAPTERS[engine].parse_response(b"{not json", 200)

    def test_wikipedia_api_error(self):
        body = b'{"error": {"code": "badvalue", "info": "bad gsrsearch"}}'
        with pytest.raises(ParseFailure, match="bad gsrsearch"):
            ADAPTERS[EngineId.WIKIPEDIA].parse_response(body, 200)

    def test_librex_unexpected_shape(self):
        with pytest.raises(ParseFailure):
            ADAPTERS[EngineId.LIBREX].parse_response(b'{"message": "rate limited"}', 200)


def test_decode_bing_link_passthrough():
    assert decode_bing_link("https://example.com/a") == "https://example.com/a"
    assert decode_bing_link("https://www.bing.com/ck/a?u=zz") == "https://www.bing.com/ck/a?u=zz"


def test_parsing_helpers():
    assert strip_tags("A <b>bold</b>   move") == "A bold move"
    assert get_blocked_keyword("<p>Verify you are human</p>") == "verify you are human"
    assert get_blocked_keyword("<p>ordinary</p>") is None
