"""Result merge & ranking

엔진별 결과 목록을 정규 URL 기준으로 접어서 하나의 순위 목록으로 만듭니다.

점수 정책:
- 엔진 하나의 기여도 = 엔진 가중치 / 원래 순위 (순위가 높을수록 큰 기여)
- 같은 URL을 확인한 엔진이 늘어날 때마다 기여도가 더해집니다 (단조 증가)
- 한 엔진이 같은 URL을 여러 번 내면 가장 좋은 순위 한 번만 셉니다
- 동점은 가장 먼저 선언된 기여 엔진 → 그 엔진에서의 순위 순으로 정렬
"""

from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Mapping, Optional, Sequence

from metasearch.schemas import EngineId, NormalizedResult, RawResult
from metasearch.utils.url_utils import canonicalize_url


def score_contribution(rank: int, weight: float = 1.0) -> Fraction:
    """엔진 하나가 결과 하나에 주는 점수

    동점 비교가 정확하도록 Fraction으로 반환합니다 (float 변환은 최종 결과에서만).
    """
    return Fraction(weight).limit_denominator() / max(rank, 1)


@dataclass
class _Bucket:
    url: str
    title: str
    snippet: str
    first_engine_index: int
    first_rank: int
    score: Fraction = Fraction(0)
    engines: list[EngineId] = field(default_factory=list)


def merge_results(
    result_sets: Sequence[tuple[EngineId, Sequence[RawResult]]],
    weights: Optional[Mapping[str, float]] = None,
) -> list[NormalizedResult]:
    """엔진별 결과를 병합/중복 제거/정렬

    Args:
        result_sets: (엔진, 결과 목록) 쌍. 엔진 선언 순서대로 전달해야 합니다.
        weights: 엔진 이름별 가중치 (없으면 1.0)

    Returns:
        점수 내림차순으로 정렬된 NormalizedResult 목록
    """
    weights = weights or {}
    buckets: dict[str, _Bucket] = {}

    for engine_index, (engine, results) in enumerate(result_sets):
        weight = weights.get(engine.value, 1.0)
        ranked = sorted(
            ((raw.rank or position, raw) for position, raw in enumerate(results, start=1)),
            key=lambda item: item[0],
        )

        seen: set[str] = set()
        for rank, raw in ranked:
            url = canonicalize_url(raw.url)
            if url is None or url in seen:
                continue
            seen.add(url)

            bucket = buckets.get(url)
            if bucket is None:
                bucket = _Bucket(
                    url=url,
                    title=raw.title,
                    snippet=raw.snippet,
                    first_engine_index=engine_index,
                    first_rank=rank,
                )
                buckets[url] = bucket
            else:
                if not bucket.title:
                    bucket.title = raw.title
                if not bucket.snippet:
                    bucket.snippet = raw.snippet

            bucket.score += score_contribution(rank, weight)
            bucket.engines.append(engine)

    ordered = sorted(
        buckets.values(),
        key=lambda b: (-b.score, b.first_engine_index, b.first_rank),
    )
    return [
        NormalizedResult(
            title=b.title,
            url=b.url,
            snippet=b.snippet,
            engines=tuple(b.engines),
            score=float(b.score),
        )
        for b in ordered
    ]
