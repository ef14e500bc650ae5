"""
Omni-search routes.
"""

import logging
import time

from fastapi import APIRouter, Query, Request

from catalog_core.api.schemas import ResultRecordOut, SearchResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/search", response_model=SearchResponse)
async def search(request: Request, q: str = Query(default="")):
    """
    Search every registered source.

    1. Ignores queries shorter than the minimum length
    2. Serves repeated queries from the query cache
    3. Otherwise fans out to all sources and merges in source order
    4. Reports sources that failed instead of failing the request
    """
    start_time = time.time()
    aggregator = request.app.state.aggregator

    result = await aggregator.search(q)
    if result.degraded:
        logger.warning(f"All sources failed for query: {result.query}")

    return SearchResponse(
        query=result.query,
        results=[ResultRecordOut(**record.to_dict()) for record in result.records],
        total_count=len(result.records),
        degraded_sources=list(result.degraded_sources),
        degraded=result.degraded,
        cached=result.from_cache,
        search_time_ms=(time.time() - start_time) * 1000,
    )
