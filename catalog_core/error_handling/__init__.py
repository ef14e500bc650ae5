"""
Error handling module for the catalog core.

Provides the exception taxonomy and retry logic for external collaborators.
"""

from .error_handler import ErrorHandler, RetryConfig
from .errors import (
    CatalogCoreError,
    CatalogUnavailable,
    EmptySelectionError,
    InvalidQuantityOperation,
    MalformedPayloadError,
)

__all__ = [
    'ErrorHandler',
    'RetryConfig',
    'CatalogCoreError',
    'CatalogUnavailable',
    'EmptySelectionError',
    'InvalidQuantityOperation',
    'MalformedPayloadError',
]
