"""테스트 자산(데이터) 레이어

규칙:
- 로직 없음 (단순 str/bytes/dict)
- 엔진/네트워크 의존 없음
"""

from .engine_pages import ENGINE_PAGES, NO_RESULT_PAGES

__all__ = [
    "ENGINE_PAGES",
    "NO_RESULT_PAGES",
]
