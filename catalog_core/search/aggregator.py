"""
Query aggregator - debounces input, fans out to sources, merges and caches.

Every submission is tagged with a monotonically increasing sequence number;
a merge is only published when its sequence number is still the latest.
"""

import asyncio
import logging
from typing import Any, Callable, List, Optional, Sequence, Tuple

from catalog_core.config import AggregatorConfig
from catalog_core.error_handling import MalformedPayloadError
from catalog_core.models import AggregationResult, ResultRecord
from catalog_core.search.normalizers import safe_normalize
from catalog_core.search.query_cache import QueryCache
from catalog_core.search.sources import SourceSpec
from catalog_core.timing import Debouncer


logger = logging.getLogger(__name__)

ResultListener = Callable[[AggregationResult], None]


class QueryAggregator:
    """
    Turns rapid keystrokes into a small number of fan-outs.

    Queries shorter than ``min_query_length`` clear the results without any
    network call. Valid queries are debounced, served from the cache when
    possible, and otherwise sent concurrently to every source. A failing
    source contributes no records and is reported on the result as degraded.

    Attributes:
        sources: Registered sources, in merge order
        config: Aggregator configuration
        cache: Query cache owned by this aggregator
        current: Last published result
    """

    def __init__(
        self,
        sources: Sequence[SourceSpec],
        config: Optional[AggregatorConfig] = None,
        cache: Optional[QueryCache] = None,
        on_results: Optional[ResultListener] = None
    ):
        self.config = config or AggregatorConfig()
        self.sources: Tuple[SourceSpec, ...] = tuple(sources)
        self.cache = cache or QueryCache(
            max_entries=self.config.cache_max_entries,
            ttl_seconds=self.config.cache_ttl_seconds,
        )
        self.current = AggregationResult(query="")
        self.fan_out_count = 0

        self._debouncer = Debouncer(self.config.debounce_ms)
        self._sequence = 0
        self._listeners: List[ResultListener] = []
        self._normalizers = tuple(
            safe_normalize(spec.kind, spec.normalizer) for spec in self.sources
        )
        if on_results is not None:
            self.subscribe(on_results)

    @property
    def results(self) -> Tuple[ResultRecord, ...]:
        return self.current.records

    @property
    def sequence(self) -> int:
        return self._sequence

    def subscribe(self, listener: ResultListener) -> None:
        """Register a callback invoked with every published result."""
        self._listeners.append(listener)

    def submit(self, query: str) -> None:
        """
        Submit a raw query. Fire-and-forget.

        A short query clears the results and cancels any pending fan-out.
        Otherwise the debounce timer is restarted; only the last query of a
        burst is dispatched.

        Args:
            query: Raw user input
        """
        trimmed = (query or "").strip()
        if len(trimmed) < self.config.min_query_length:
            self.clear()
            return

        self._sequence += 1
        sequence = self._sequence
        self._debouncer.schedule(lambda: self._dispatch(trimmed, sequence))

    def clear(self) -> None:
        """Empty the current results and cancel any pending timer. The cache is kept."""
        self._debouncer.cancel()
        self._sequence += 1
        self._publish(AggregationResult(query="", sequence=self._sequence))

    async def search(self, query: str) -> AggregationResult:
        """
        Run one undebounced lookup: cache check, then fan-out and merge.

        Args:
            query: Query string, trimmed before lookup

        Returns:
            AggregationResult for the query; empty for queries that are too short
        """
        trimmed = (query or "").strip()
        if len(trimmed) < self.config.min_query_length:
            return AggregationResult(query=trimmed)

        cached = self.cache.get(trimmed)
        if cached is not None:
            logger.info(f"Cache hit for query: {trimmed}")
            return AggregationResult(
                query=trimmed,
                records=cached,
                source_count=len(self.sources),
                from_cache=True,
            )

        return await self._fan_out(trimmed)

    async def wait_idle(self) -> None:
        """Wait until no debounce timer is pending and no fan-out is running."""
        await self._debouncer.wait_idle()

    async def _dispatch(self, query: str, sequence: int) -> None:
        result = await self.search(query)
        if sequence != self._sequence:
            logger.debug(
                f"Discarding stale result for '{query}' "
                f"(sequence {sequence}, latest {self._sequence})"
            )
            return
        self._publish(
            AggregationResult(
                query=result.query,
                records=result.records,
                degraded_sources=result.degraded_sources,
                source_count=result.source_count,
                from_cache=result.from_cache,
                sequence=sequence,
            )
        )

    async def _fan_out(self, query: str) -> AggregationResult:
        self.fan_out_count += 1
        outcomes = await asyncio.gather(
            *(self._query_source(spec, query) for spec in self.sources)
        )

        records: List[ResultRecord] = []
        degraded: List[str] = []
        for spec, normalize, native in zip(self.sources, self._normalizers, outcomes):
            if native is None:
                degraded.append(spec.kind)
                continue
            records.extend(normalize(record) for record in native)

        merged = tuple(records)
        if degraded:
            logger.warning(
                f"Query '{query}' degraded: {len(degraded)}/{len(self.sources)} sources failed "
                f"({', '.join(degraded)})"
            )
        if not degraded or self.config.cache_degraded:
            self.cache.put(query, merged)

        logger.info(f"Merged {len(merged)} results for '{query}' from {len(self.sources)} sources")
        return AggregationResult(
            query=query,
            records=merged,
            degraded_sources=tuple(degraded),
            source_count=len(self.sources),
        )

    async def _query_source(self, spec: SourceSpec, query: str) -> Optional[List[Any]]:
        """Run one fan-out leg. Returns None when the leg failed."""
        try:
            native = await spec.adapter(query)
            if not isinstance(native, (list, tuple)):
                raise MalformedPayloadError(
                    f"Source {spec.kind} returned {type(native).__name__}, expected a list"
                )
            return list(native)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"Source {spec.kind} failed for '{query}': {type(e).__name__}: {e}")
            return None

    def _publish(self, result: AggregationResult) -> None:
        self.current = result
        for listener in self._listeners:
            try:
                listener(result)
            except Exception:
                logger.exception("Result listener failed")
