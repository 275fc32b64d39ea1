"""Aggregation Layer - concurrent dispatch, merge and ranking

- Aggregator: fans a query out to the selected engines and merges the results
- merge_results: canonical-URL dedupe and score ordering
- ResultFilter: block/allow-list filtering of merged results
"""

from .aggregator import Aggregator, EngineOutcome, Transport
from .filters import ResultFilter
from .merge import merge_results, score_contribution

__all__ = [
    "Aggregator",
    "EngineOutcome",
    "Transport",
    "ResultFilter",
    "merge_results",
    "score_contribution",
]
