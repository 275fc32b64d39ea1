"""Result block/allow-list filtering

blocklist 정규식에 걸린 결과는 제거하되, allowlist에도 걸리면 살립니다.
"""

from __future__ import annotations

import re
from typing import Iterable, Sequence

from metasearch.core.logging import logger
from metasearch.schemas import NormalizedResult


def _compile(patterns: Iterable[str], label: str) -> list[re.Pattern[str]]:
    compiled = []
    for pattern in patterns:
        if not pattern or not pattern.strip():
            continue
        try:
            compiled.append(re.compile(pattern, re.IGNORECASE))
        except re.error as e:
            raise ValueError(f"invalid {label} pattern '{pattern}': {e}") from e
    return compiled


class ResultFilter:
    """URL 정규식 기반 결과 필터"""

    def __init__(self, blocklist: Iterable[str] = (), allowlist: Iterable[str] = ()):
        self._blocklist = _compile(blocklist, "blocklist")
        self._allowlist = _compile(allowlist, "allowlist")

    @property
    def enabled(self) -> bool:
        return bool(self._blocklist)

    def is_blocked(self, url: str) -> bool:
        if not any(p.search(url) for p in self._blocklist):
            return False
        return not any(p.search(url) for p in self._allowlist)

    def apply(self, results: Sequence[NormalizedResult]) -> list[NormalizedResult]:
        if not self.enabled:
            return list(results)
        kept = [r for r in results if not self.is_blocked(r.url)]
        if len(kept) != len(results):
            logger.debug(f"Result filter removed {len(results) - len(kept)} results")
        return kept
