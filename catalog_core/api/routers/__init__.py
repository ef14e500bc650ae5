"""API routers"""

from . import search, selection

__all__ = ["search", "selection"]
