"""Catalog Query & Selection Core.

Debounced multi-source query aggregation and plan-constrained item selection.
"""

__version__ = "0.1.0"
