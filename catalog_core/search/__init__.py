"""Omni-search services"""

from .aggregator import QueryAggregator
from .normalizers import DEFAULT_NORMALIZERS, make_normalizer, safe_normalize
from .query_cache import QueryCache
from .sources import HttpJsonSource, SourceSpec, build_http_sources, with_timeout

__all__ = [
    "QueryAggregator",
    "QueryCache",
    "SourceSpec",
    "HttpJsonSource",
    "DEFAULT_NORMALIZERS",
    "build_http_sources",
    "make_normalizer",
    "safe_normalize",
    "with_timeout",
]
