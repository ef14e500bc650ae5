"""Configuration module for the Catalog Query & Selection Core."""

from .engine_config import (
    DEFAULT_PLANS,
    DEFAULT_SOURCES,
    ENGINE_CONFIG,
    AggregatorConfig,
    EngineSettings,
    SelectionConfig,
    SourceConfig,
    get_engine_settings,
)

__all__ = [
    'DEFAULT_PLANS',
    'DEFAULT_SOURCES',
    'ENGINE_CONFIG',
    'AggregatorConfig',
    'EngineSettings',
    'SelectionConfig',
    'SourceConfig',
    'get_engine_settings',
]
