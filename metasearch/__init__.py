"""metasearch - privacy-preserving meta-search core

Aggregation engine (concurrent multi-engine dispatch, merge, ranking) and
cache layer (memory, redis, hybrid) behind a single request pipeline.
"""

__version__ = "0.1.0"
