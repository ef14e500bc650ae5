"""
Record sources for the query aggregator.

A source adapter is an async callable ``(query) -> list of native records``.
Timeouts and retries are the adapter's concern, not the aggregator's.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional

import aiohttp

from catalog_core.config import EngineSettings, SourceConfig
from catalog_core.error_handling import ErrorHandler, MalformedPayloadError, RetryConfig
from catalog_core.search.normalizers import Normalizer, get_normalizer, make_normalizer


logger = logging.getLogger(__name__)

SourceAdapter = Callable[[str], Awaitable[List[Any]]]


@dataclass(frozen=True)
class SourceSpec:
    """One registered source: its kind, adapter and normalizer."""
    kind: str
    adapter: SourceAdapter
    normalizer: Normalizer


def with_timeout(adapter: SourceAdapter, timeout_seconds: float) -> SourceAdapter:
    """Wrap an adapter so a slow call raises ``asyncio.TimeoutError``."""
    async def timed(query: str) -> List[Any]:
        return await asyncio.wait_for(adapter(query), timeout=timeout_seconds)

    timed.__name__ = getattr(adapter, '__name__', 'adapter')
    timed.__wrapped__ = adapter
    return timed


def extract_records(payload: Any) -> List[Any]:
    """
    Pull the record list out of a backend response body.

    Accepts ``{"data": {"items": [...]}}``, ``{"data": [...]}``,
    ``{"items": [...]}`` or a bare list.

    Raises:
        MalformedPayloadError: If no record list can be found
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        data = payload.get('data', payload)
        if isinstance(data, list):
            return data
        if isinstance(data, dict) and isinstance(data.get('items'), list):
            return data['items']
    raise MalformedPayloadError(f"Expected a record list, got {type(payload).__name__}")


class HttpJsonSource:
    """
    Source adapter backed by a JSON list endpoint.

    Issues ``GET {base_url}{path}?search=<query>`` and returns the record list.

    Attributes:
        url: Full endpoint URL
        timeout_seconds: Total timeout per request
    """

    def __init__(
        self,
        base_url: str,
        path: str,
        timeout_seconds: float = 8.0,
        max_retries: int = 1,
        headers: Optional[dict] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        self.url = base_url.rstrip('/') + '/' + path.lstrip('/')
        self.timeout_seconds = timeout_seconds
        self.headers = headers or {}
        self.error_handler = ErrorHandler(max_retries=max_retries)
        self._session = session

    async def __call__(self, query: str) -> List[Any]:
        return await self.error_handler.retry_with_backoff(self.fetch, query)

    async def fetch(self, query: str) -> List[Any]:
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        if self._session is not None:
            return await self._get(self._session, query, timeout)
        async with aiohttp.ClientSession() as session:
            return await self._get(session, query, timeout)

    async def _get(
        self,
        session: aiohttp.ClientSession,
        query: str,
        timeout: aiohttp.ClientTimeout
    ) -> List[Any]:
        async with session.get(
            self.url,
            params={'search': query},
            headers=self.headers,
            timeout=timeout
        ) as response:
            response.raise_for_status()
            payload = await response.json()
        records = extract_records(payload)
        logger.debug(f"{self.url} returned {len(records)} records for '{query}'")
        return records


def build_http_sources(
    settings: EngineSettings,
    session: Optional[aiohttp.ClientSession] = None
) -> List[SourceSpec]:
    """Build the configured HTTP sources in result order."""
    specs = []
    for source in settings.sources:
        specs.append(_http_source_spec(settings.api_base_url, source, session))
    return specs


def _http_source_spec(
    base_url: str,
    source: SourceConfig,
    session: Optional[aiohttp.ClientSession]
) -> SourceSpec:
    normalizer = get_normalizer(source.kind) or make_normalizer(
        source.kind, title_keys=("name", "title")
    )
    adapter = HttpJsonSource(
        base_url,
        source.path,
        timeout_seconds=source.timeout_seconds,
        max_retries=source.max_retries,
        session=session,
    )
    return SourceSpec(
        kind=source.kind,
        adapter=with_timeout(adapter, leg_timeout(source)),
        normalizer=normalizer,
    )


def leg_timeout(source: SourceConfig) -> float:
    """Upper bound for one fan-out leg: every attempt plus the backoff between them."""
    retry = RetryConfig(max_retries=source.max_retries)
    backoff = sum(retry.get_backoff_delay(attempt) for attempt in range(source.max_retries - 1))
    return source.timeout_seconds * source.max_retries + backoff
