"""
Filtering module for catalog items.

This module provides functionality to filter catalog items by search term,
category and plan eligibility.
"""

from .catalog_filter import ALL_CATEGORIES, CatalogFilter

__all__ = ['ALL_CATEGORIES', 'CatalogFilter']
