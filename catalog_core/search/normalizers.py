"""
Record normalizers for omni-search sources.

A normalizer maps one native record to a ResultRecord. Normalizers handed to
the aggregator are wrapped with ``safe_normalize`` so a malformed record
degrades to a placeholder instead of raising.
"""

import logging
from typing import Any, Callable, Dict, Optional, Sequence

from catalog_core.models import ResultRecord


logger = logging.getLogger(__name__)

Normalizer = Callable[[Any], ResultRecord]


def _first_present(record: dict, keys: Sequence[str]) -> str:
    for key in keys:
        value = record.get(key)
        if value not in (None, ""):
            return str(value)
    return ""


def _record_id(record: Any) -> str:
    if isinstance(record, dict):
        return str(record.get('_id') or record.get('id') or "")
    return ""


def make_normalizer(
    kind: str,
    title_keys: Sequence[str],
    subtitle_keys: Sequence[str] = (),
    icon: str = "",
    route: str = "/{kind}/{id}"
) -> Normalizer:
    """
    Build a normalizer for dictionary records.

    Title and subtitle are taken from the first key present in the record.
    The navigation target is ``route`` formatted with ``kind`` and ``id``.

    Args:
        kind: Source kind stamped on every record
        title_keys: Candidate keys for the title, in priority order
        subtitle_keys: Candidate keys for the subtitle, in priority order
        icon: Icon name for the source kind
        route: Navigation target template

    Returns:
        Callable mapping a native record to a ResultRecord
    """
    def normalize(record: Any) -> ResultRecord:
        if not isinstance(record, dict):
            raise TypeError(f"Expected a mapping for {kind} record, got {type(record).__name__}")
        record_id = _record_id(record)
        if not record_id:
            raise KeyError(f"{kind} record has no id")
        return ResultRecord(
            source_kind=kind,
            id=record_id,
            title=_first_present(record, title_keys) or f"Untitled {kind}",
            subtitle=_first_present(record, subtitle_keys),
            icon=icon,
            raw_payload=record,
            navigation_target=route.format(kind=kind, id=record_id),
        )

    normalize.__name__ = f"normalize_{kind}"
    return normalize


def degraded_record(kind: str, record: Any) -> ResultRecord:
    """Placeholder for a record its normalizer could not read."""
    return ResultRecord(
        source_kind=kind,
        id=_record_id(record),
        title=f"Unknown {kind}",
        raw_payload=record,
    )


def safe_normalize(kind: str, normalizer: Normalizer) -> Normalizer:
    """Wrap a normalizer so it never raises."""
    def normalize(record: Any) -> ResultRecord:
        try:
            return normalizer(record)
        except Exception as e:
            logger.warning(f"Malformed {kind} record degraded: {type(e).__name__}: {e}")
            return degraded_record(kind, record)

    return normalize


DEFAULT_NORMALIZERS: Dict[str, Normalizer] = {
    "room": make_normalizer(
        "room",
        title_keys=("title", "name", "roomNumber"),
        subtitle_keys=("type", "category", "status"),
        icon="bed",
        route="/rooms/{id}",
    ),
    "booking": make_normalizer(
        "booking",
        title_keys=("bookingNumber", "guestName", "reference"),
        subtitle_keys=("status", "checkIn"),
        icon="calendar",
        route="/bookings/{id}",
    ),
    "menu_item": make_normalizer(
        "menu_item",
        title_keys=("name", "name_eng", "title"),
        subtitle_keys=("description", "price"),
        icon="utensils",
        route="/menu/{id}",
    ),
    "guest": make_normalizer(
        "guest",
        title_keys=("name", "email"),
        subtitle_keys=("email", "phone", "role"),
        icon="user",
        route="/guests/{id}",
    ),
}


def get_normalizer(kind: str) -> Optional[Normalizer]:
    return DEFAULT_NORMALIZERS.get(kind)
