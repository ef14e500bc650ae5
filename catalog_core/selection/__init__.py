"""Selection services"""

from .engine import SelectionEngine
from .loaders import HttpCatalogLoader, JsonFileCatalogLoader
from .plans import build_plans, resolve_plan

__all__ = [
    "SelectionEngine",
    "HttpCatalogLoader",
    "JsonFileCatalogLoader",
    "build_plans",
    "resolve_plan",
]
