"""
Catalog loaders for the selection engine.

A loader pair is two async callables returning catalog items and categories.
Loader failures surface as ``CatalogUnavailable`` from ``SelectionEngine.load``.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import aiohttp

from catalog_core.error_handling import ErrorHandler
from catalog_core.models import CatalogItem, Category
from catalog_core.search.sources import extract_records


logger = logging.getLogger(__name__)


class HttpCatalogLoader:
    """Loads available menu items and categories from the backend API."""

    def __init__(
        self,
        base_url: str,
        items_path: str = "/menu/items",
        categories_path: str = "/menu/categories",
        timeout_seconds: float = 8.0,
        max_retries: int = 1
    ):
        self.base_url = base_url.rstrip('/')
        self.items_path = items_path
        self.categories_path = categories_path
        self.timeout_seconds = timeout_seconds
        self.error_handler = ErrorHandler(max_retries=max_retries)

    async def load_items(self) -> List[CatalogItem]:
        records = await self.error_handler.retry_with_backoff(
            self._get, self.items_path, {'isAvailable': 'true'}
        )
        return [CatalogItem.from_dict(record) for record in records]

    async def load_categories(self) -> List[Category]:
        records = await self.error_handler.retry_with_backoff(self._get, self.categories_path)
        return [Category.from_dict(record) for record in records]

    async def _get(self, path: str, params: Optional[dict] = None) -> List[Any]:
        url = f"{self.base_url}/{path.lstrip('/')}"
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(url, params=params) as response:
                response.raise_for_status()
                payload = await response.json()
        return extract_records(payload)


class JsonFileCatalogLoader:
    """
    Loads a catalog from a JSON file.

    The file holds ``{"items": [...], "categories": [...]}`` using either the
    backend's record shape or the shape produced by ``CatalogItem.to_dict``.
    """

    def __init__(self, path: str):
        self.path = Path(path)
        self._data: Optional[dict] = None

    async def load_items(self) -> List[CatalogItem]:
        return [CatalogItem.from_dict(record) for record in self._read().get('items', [])]

    async def load_categories(self) -> List[Category]:
        return [Category.from_dict(record) for record in self._read().get('categories', [])]

    def _read(self) -> dict:
        if self._data is None:
            with open(self.path, 'r') as f:
                self._data = json.load(f)
            logger.info(f"Loaded catalog file {self.path}")
        return self._data
