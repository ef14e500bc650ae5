"""
Exception taxonomy for the Catalog Query & Selection Core.

Per-source failures and empty aggregations are not exceptions; they are
reported on ``AggregationResult``.
"""


class CatalogCoreError(Exception):
    """Base class for all engine errors."""


class CatalogUnavailable(CatalogCoreError):
    """The catalog loader failed; the selection engine cannot be built."""


class EmptySelectionError(CatalogCoreError):
    """A selection with zero lines cannot be confirmed."""

    def __init__(self, message: str = "Please select at least one item"):
        super().__init__(message)


class InvalidQuantityOperation(CatalogCoreError, AssertionError):
    """A mutation would leave a line present with quantity <= 0."""


class MalformedPayloadError(CatalogCoreError):
    """A source returned something other than a list of records."""
