"""
Data models for the Catalog Query & Selection Core.

This module defines the core data structures shared by the query aggregator
and the selection engine.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, FrozenSet, List, Optional, Tuple


# Backend record keys mapped onto eligibility flag names
FLAG_FIELDS = {
    'isBreakfast': 'is_breakfast',
    'isLunch': 'is_lunch',
    'isDinner': 'is_dinner',
    'isSnacks': 'is_snacks',
}


def _require_id(data: dict, kind: str) -> str:
    """Read ``id`` or ``_id`` from a backend record; records without one are rejected."""
    record_id = data.get('id')
    if record_id in (None, ''):
        record_id = data.get('_id')
    if record_id in (None, ''):
        raise ValueError(f"{kind} record has no id: {data!r}")
    return str(record_id)


@dataclass(frozen=True)
class ResultRecord:
    """A normalized search hit produced by a source's normalizer.

    Attributes:
        source_kind: Kind of the source that produced the record
        id: Record identifier within its source
        title: Primary display text
        subtitle: Secondary display text
        icon: Icon name for the source kind
        raw_payload: The native record as returned by the source
        navigation_target: Opaque route the host uses to open the record
    """
    source_kind: str
    id: str
    title: str
    subtitle: str = ""
    icon: str = ""
    raw_payload: Any = None
    navigation_target: str = ""

    def to_dict(self) -> dict:
        """Convert record to dictionary for JSON serialization."""
        return asdict(self)


@dataclass(frozen=True)
class AggregationResult:
    """Outcome of one fan-out, published to subscribers.

    Attributes:
        query: Trimmed query the records belong to
        records: Merged records in configured source order
        degraded_sources: Kinds of the sources whose leg failed
        source_count: Number of sources the query was sent to
        from_cache: Whether the records were served from the query cache
        sequence: Submission sequence number the result was produced for
    """
    query: str
    records: Tuple[ResultRecord, ...] = ()
    degraded_sources: Tuple[str, ...] = ()
    source_count: int = 0
    from_cache: bool = False
    sequence: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.records

    @property
    def degraded_count(self) -> int:
        return len(self.degraded_sources)

    @property
    def degraded(self) -> bool:
        """True when every source leg failed (aggregation degraded signal)."""
        return self.source_count > 0 and self.degraded_count == self.source_count


@dataclass(frozen=True)
class Category:
    """A catalog category used for grouping and filtering."""
    id: str
    name: str

    @classmethod
    def from_dict(cls, data: dict) -> 'Category':
        return cls(id=_require_id(data, "category"), name=data.get('name', ''))


@dataclass(frozen=True)
class CatalogItem:
    """A selectable catalog item.

    Items are immutable, so a line holding an item holds a snapshot of its
    price at the time it was selected.

    Attributes:
        id: Unique item identifier
        name: Display name
        price: Unit price (non-negative)
        category_id: Category the item belongs to, None when uncategorized
        eligibility_flags: Names of the plan slots the item is valid under
        available: Whether the item can currently be selected
        description: Free-text description searched alongside the name
    """
    id: str
    name: str
    price: float
    category_id: Optional[str] = None
    eligibility_flags: FrozenSet[str] = frozenset()
    available: bool = True
    description: str = ""

    def __post_init__(self):
        if self.price < 0:
            raise ValueError(f"Item {self.id} has a negative price: {self.price}")
        if not isinstance(self.eligibility_flags, frozenset):
            object.__setattr__(self, 'eligibility_flags', frozenset(self.eligibility_flags))

    @classmethod
    def from_dict(cls, data: dict) -> 'CatalogItem':
        """Create a CatalogItem from a backend menu item record.

        Accepts both the snake_case shape produced by ``to_dict`` and the
        backend's shape (``_id``, ``category`` as an id or an object with
        ``_id``, ``isBreakfast``-style flags, ``isAvailable``).

        Args:
            data: Dictionary containing item data

        Returns:
            CatalogItem instance

        Raises:
            ValueError: If the record has neither ``id`` nor ``_id``
        """
        category = data.get('category_id', data.get('category'))
        if isinstance(category, dict):
            category = category.get('_id') or category.get('id')

        flags = set(data.get('eligibility_flags') or ())
        for source_key, flag in FLAG_FIELDS.items():
            if data.get(source_key) is True:
                flags.add(flag)

        available = data.get('available', data.get('isAvailable', True))

        return cls(
            id=_require_id(data, "menu item"),
            name=data.get('name', ''),
            price=float(data.get('price') or 0),
            category_id=str(category) if category else None,
            eligibility_flags=frozenset(flags),
            available=bool(available),
            description=data.get('description') or '',
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data['eligibility_flags'] = sorted(self.eligibility_flags)
        return data


@dataclass(frozen=True)
class SelectionPlan:
    """A named eligibility rule.

    An empty ``required_flags`` means the plan places no restriction.
    """
    plan_id: str
    required_flags: Tuple[str, ...] = ()
    description: str = ""

    @property
    def unrestricted(self) -> bool:
        return not self.required_flags


@dataclass
class SelectionLine:
    """One (item, quantity) pair in the current selection."""
    item: CatalogItem
    quantity: int = 1

    @property
    def line_total(self) -> float:
        return self.item.price * self.quantity

    def to_dict(self) -> dict:
        return {
            'item': self.item.to_dict(),
            'quantity': self.quantity,
            'line_total': self.line_total,
        }


@dataclass(frozen=True)
class Totals:
    """Monetary summary of a selection for a stay.

    Attributes:
        items_total: Sum of price x quantity over all lines
        per_night_total: Charge per night (flat, equal to items_total)
        whole_stay_total: items_total x nights x guests
    """
    items_total: float
    per_night_total: float
    whole_stay_total: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class CatalogView:
    """Filtered catalog snapshot returned to the host."""
    items: List[CatalogItem] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)
