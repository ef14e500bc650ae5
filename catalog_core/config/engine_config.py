"""Engine configuration settings for the Catalog Query & Selection Core."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import os


def _optional_int(value: Optional[str]) -> Optional[int]:
    return int(value) if value else None


def _optional_float(value: Optional[str]) -> Optional[float]:
    return float(value) if value else None


@dataclass
class AggregatorConfig:
    """Query aggregator configuration."""
    debounce_ms: int = 300
    min_query_length: int = 2
    cache_max_entries: Optional[int] = None
    cache_ttl_seconds: Optional[float] = None
    cache_degraded: bool = True

    def __post_init__(self):
        if self.debounce_ms <= 0:
            raise ValueError(f"debounce_ms must be > 0, got {self.debounce_ms}")
        if self.min_query_length < 1:
            raise ValueError(f"min_query_length must be >= 1, got {self.min_query_length}")
        if self.cache_max_entries is not None and self.cache_max_entries < 1:
            raise ValueError(f"cache_max_entries must be >= 1, got {self.cache_max_entries}")
        if self.cache_ttl_seconds is not None and self.cache_ttl_seconds <= 0:
            raise ValueError(f"cache_ttl_seconds must be > 0, got {self.cache_ttl_seconds}")


@dataclass
class SourceConfig:
    """An HTTP-backed record source, queried in list order."""
    kind: str
    path: str
    timeout_seconds: float = 8.0
    max_retries: int = 1


# Plan id -> (required flags, description)
DEFAULT_PLANS: Dict[str, Tuple[Tuple[str, ...], str]] = {
    "Breakfast": (("is_breakfast",), "Breakfast items only"),
    "Half Board": (("is_breakfast", "is_dinner"), "Breakfast & Dinner"),
    "Full Board": (("is_breakfast", "is_lunch", "is_dinner"), "All meals"),
    "A la carte": ((), "Choose any items"),
}


@dataclass
class SelectionConfig:
    """Selection engine configuration."""
    default_plan: str = "A la carte"
    plans: Dict[str, Tuple[Tuple[str, ...], str]] = field(
        default_factory=lambda: dict(DEFAULT_PLANS)
    )


@dataclass
class EngineSettings:
    """Main engine configuration settings."""
    api_base_url: str = "http://localhost:5000/api"
    aggregator: AggregatorConfig = None
    sources: List[SourceConfig] = None
    selection: SelectionConfig = None

    def __post_init__(self):
        """Initialize nested configs if not provided."""
        if self.aggregator is None:
            self.aggregator = AggregatorConfig()
        if self.sources is None:
            self.sources = [SourceConfig(**source) for source in DEFAULT_SOURCES]
        if self.selection is None:
            self.selection = SelectionConfig()


# Omni-search sources in result order
DEFAULT_SOURCES = [
    {"kind": "room", "path": "/rooms"},
    {"kind": "booking", "path": "/bookings"},
    {"kind": "menu_item", "path": "/menu/items"},
    {"kind": "guest", "path": "/users"},
]


# Default engine configuration
ENGINE_CONFIG = {
    "api_base_url": os.getenv("CATALOG_API_BASE_URL", "http://localhost:5000/api"),
    "aggregator": {
        "debounce_ms": int(os.getenv("SEARCH_DEBOUNCE_MS", "300")),
        "min_query_length": int(os.getenv("SEARCH_MIN_QUERY_LENGTH", "2")),
        "cache_max_entries": _optional_int(os.getenv("SEARCH_CACHE_MAX_ENTRIES")),
        "cache_ttl_seconds": _optional_float(os.getenv("SEARCH_CACHE_TTL_SECONDS")),
        "cache_degraded": os.getenv("SEARCH_CACHE_DEGRADED", "true").lower() in ("true", "1", "yes"),
    },
    "source_defaults": {
        "timeout_seconds": float(os.getenv("SOURCE_TIMEOUT_SECONDS", "8.0")),
        "max_retries": int(os.getenv("SOURCE_MAX_RETRIES", "1")),
    },
    "selection": {
        "default_plan": os.getenv("DEFAULT_PLAN", "A la carte"),
    },
}


def get_engine_settings() -> EngineSettings:
    """Get engine settings from configuration."""
    sources = [
        SourceConfig(**source, **ENGINE_CONFIG["source_defaults"])
        for source in DEFAULT_SOURCES
    ]
    return EngineSettings(
        api_base_url=ENGINE_CONFIG["api_base_url"],
        aggregator=AggregatorConfig(**ENGINE_CONFIG["aggregator"]),
        sources=sources,
        selection=SelectionConfig(**ENGINE_CONFIG["selection"]),
    )
