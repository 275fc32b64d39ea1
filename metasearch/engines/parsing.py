"""HTML 결과 페이지 파싱 유틸 (selectolax)

네트워크와 분리된 순수 파싱 로직입니다. HTML 기반 엔진은 CSS selector 묶음만
선언하고 실제 추출은 parse_html_results에 맡깁니다.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional

from selectolax.parser import HTMLParser, Node

from metasearch.core.exceptions import ParseFailure
from metasearch.core.logging import logger
from metasearch.schemas import EngineId, RawResult
from metasearch.utils.url_utils import normalize_href


_BLOCK_KEYWORDS = (
    # 결과가 하나도 없을 때만 검사합니다 (스니펫 오탐 방지)
    "captcha",
    "unusual traffic",
    "verify you are human",
    "are you a robot",
    "access denied",
    "just a moment",
)

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class ResultSelectors:
    """결과 페이지 CSS selector 묶음

    Attributes:
        results: 결과 하나를 감싸는 노드
        title: 결과 노드 내부의 제목 노드
        url: 결과 노드 내부의 링크 노드
        snippet: 결과 노드 내부의 설명 노드 (선택)
        no_results: "결과 없음" 안내 노드 (선택)
        url_attr: 링크를 담은 속성 (None이면 노드 텍스트 사용)
    """

    results: str
    title: str
    url: str
    snippet: Optional[str] = None
    no_results: Optional[str] = None
    url_attr: Optional[str] = "href"


def clean_text(value: Optional[str]) -> str:
    if not value:
        return ""
    return _WHITESPACE_RE.sub(" ", value).strip()


def node_text(node: Optional[Node]) -> str:
    if node is None:
        return ""
    return clean_text(node.text(separator=" "))


def strip_tags(fragment: str) -> str:
    """HTML 조각에서 텍스트만 추출 (JSON API의 하이라이트 마크업 등)"""
    if not fragment:
        return ""
    tree = HTMLParser(f"<div>{fragment}</div>")
    root = tree.css_first("div")
    return node_text(root)


def get_blocked_keyword(html: str) -> Optional[str]:
    if not html:
        return None
    lowered = html.lower()
    for k in _BLOCK_KEYWORDS:
        if k in lowered:
            return k
    return None


def parse_html_results(
    engine: EngineId,
    html: str,
    selectors: ResultSelectors,
    base_url: str = "",
    url_transform: Optional[Callable[[str], str]] = None,
) -> list[RawResult]:
    """결과 페이지 HTML에서 RawResult 목록 추출

    - 제목/링크가 없는 결과 노드는 건너뜁니다.
    - 설명이 없으면 빈 문자열입니다.
    - "결과 없음" 페이지는 빈 리스트입니다.
    - 결과 노드가 하나도 없으면 (차단/구조 변경) ParseFailure.

    Args:
        engine: 결과를 낸 엔진
        html: 응답 HTML
        selectors: selector 묶음
        base_url: 상대 링크 보정용 base URL
        url_transform: 링크 후처리 (리다이렉트 래퍼 해제 등)

    Raises:
        ParseFailure: 결과 구조를 찾지 못함
    """
    if not html or not html.strip():
        raise ParseFailure(engine.value, "empty document")

    tree = HTMLParser(html)

    if selectors.no_results and tree.css_first(selectors.no_results) is not None:
        logger.debug(f"[{engine.value}] no results page")
        return []

    nodes = tree.css(selectors.results)
    if not nodes:
        blocked = get_blocked_keyword(html)
        if blocked:
            raise ParseFailure(engine.value, f"blocked by upstream ({blocked})")
        raise ParseFailure(engine.value, f"no result nodes matched '{selectors.results}'")

    results: list[RawResult] = []
    for node in nodes:
        title = node_text(node.css_first(selectors.title))

        link_node = node.css_first(selectors.url)
        if link_node is None:
            continue
        if selectors.url_attr:
            href = link_node.attributes.get(selectors.url_attr) or ""
        else:
            href = node_text(link_node)
        href = normalize_href(href, base_url)
        if url_transform is not None:
            href = url_transform(href)

        if not title or not href:
            continue

        snippet = ""
        if selectors.snippet:
            snippet = node_text(node.css_first(selectors.snippet))

        results.append(
            RawResult(
                title=title,
                url=href,
                snippet=snippet,
                rank=len(results) + 1,
                engine=engine,
            )
        )

    logger.debug(f"[{engine.value}] parsed {len(results)}/{len(nodes)} result nodes")
    return results
