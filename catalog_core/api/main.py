"""
FastAPI application for the Catalog Query & Selection Core.

Run with: uvicorn catalog_core.api.main:build_default_app --factory
"""

# Load environment variables before settings are read
from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager
from typing import Any, Optional
import logging

import aiohttp
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalog_core import __version__
from catalog_core.api.routers import search, selection
from catalog_core.config import get_engine_settings
from catalog_core.search import QueryAggregator, build_http_sources
from catalog_core.selection import HttpCatalogLoader, build_plans

logger = logging.getLogger(__name__)


def create_app(
    aggregator: Optional[QueryAggregator] = None,
    catalog_loader: Optional[Any] = None,
) -> FastAPI:
    """
    Build the API application.

    Collaborators that are not passed in are built from the engine settings
    when the application starts.

    Args:
        aggregator: Query aggregator serving /api/search
        catalog_loader: Object with async load_items() and load_categories()
    """
    settings = get_engine_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events"""
        logger.info("Starting Catalog Core API...")
        session = None
        if app.state.aggregator is None:
            session = aiohttp.ClientSession()
            app.state.aggregator = QueryAggregator(
                build_http_sources(settings, session=session),
                config=settings.aggregator,
            )
            logger.info(f"Search sources: {[s.kind for s in app.state.aggregator.sources]}")
        if app.state.catalog_loader is None:
            app.state.catalog_loader = HttpCatalogLoader(settings.api_base_url)

        yield

        logger.info("Shutting down Catalog Core API...")
        if session is not None:
            await session.close()

    app = FastAPI(
        title="Catalog Core API",
        description="Omni-search aggregation and plan-constrained menu selection",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.aggregator = aggregator
    app.state.catalog_loader = catalog_loader
    app.state.plans = build_plans(settings.selection.plans)
    app.state.default_plan = settings.selection.default_plan

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "version": __version__}

    app.include_router(search.router, prefix="/api", tags=["search"])
    app.include_router(selection.router, prefix="/api", tags=["selection"])
    return app


def build_default_app() -> FastAPI:
    """Entry point for ASGI servers."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    return create_app()
