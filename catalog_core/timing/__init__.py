"""Timing utilities for input coalescing."""

from .debouncer import Debouncer

__all__ = ['Debouncer']
