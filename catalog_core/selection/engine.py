"""
Selection engine - plan-constrained item selection and stay pricing.

Holds a catalog, the user's filters and a running selection. Derived views
(filtered items, available categories, totals) are recomputed on every read.
Mutations are synchronous; callers in a multi-threaded host must serialize
access to one engine.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from catalog_core.error_handling import (
    CatalogUnavailable,
    EmptySelectionError,
    InvalidQuantityOperation,
)
from catalog_core.filtering import ALL_CATEGORIES, CatalogFilter
from catalog_core.models import (
    CatalogItem,
    CatalogView,
    Category,
    SelectionLine,
    SelectionPlan,
    Totals,
)
from catalog_core.selection.plans import build_plans, resolve_plan


logger = logging.getLogger(__name__)

ItemLoader = Callable[[], Awaitable[List[CatalogItem]]]
CategoryLoader = Callable[[], Awaitable[List[Category]]]


class SelectionEngine:
    """
    Catalog filtering plus a running item -> quantity selection.

    Per item the selection moves between Absent and Present(qty >= 1);
    no line with quantity <= 0 is ever kept.

    Attributes:
        items: Catalog items in catalog order
        categories: Configured categories in display order
        plans: Known plans by id
        plan: Active plan
        search_term: Active free-text filter
        category_id: Active category filter, or "all"
    """

    def __init__(
        self,
        items: Sequence[CatalogItem],
        categories: Sequence[Category] = (),
        plans: Optional[Mapping[str, SelectionPlan]] = None,
        plan_id: str = "A la carte",
        initial_lines: Iterable[SelectionLine] = ()
    ):
        self.items: List[CatalogItem] = list(items)
        self.categories: List[Category] = list(categories)
        self.plans: Dict[str, SelectionPlan] = dict(plans) if plans is not None else build_plans()
        self.plan: SelectionPlan = resolve_plan(self.plans, plan_id)
        self.search_term: str = ""
        self.category_id: str = ALL_CATEGORIES
        self.catalog_filter = CatalogFilter()

        self._lines: Dict[str, SelectionLine] = {}
        for line in initial_lines:
            if line.quantity < 1:
                raise InvalidQuantityOperation(
                    f"Initial line for {line.item.id} has quantity {line.quantity}"
                )
            self._lines[line.item.id] = SelectionLine(item=line.item, quantity=line.quantity)

    @classmethod
    async def load(
        cls,
        item_loader: ItemLoader,
        category_loader: CategoryLoader,
        **kwargs
    ) -> 'SelectionEngine':
        """
        Build an engine from the catalog loaders.

        Both loaders are awaited concurrently. The engine does not retry.

        Args:
            item_loader: Async callable returning catalog items
            category_loader: Async callable returning categories
            **kwargs: Passed through to the constructor

        Returns:
            A new SelectionEngine

        Raises:
            CatalogUnavailable: If either loader fails
        """
        try:
            items, categories = await asyncio.gather(item_loader(), category_loader())
        except Exception as e:
            logger.error(f"Failed to load catalog: {type(e).__name__}: {e}")
            raise CatalogUnavailable(f"Failed to load menu items: {e}") from e

        logger.info(f"Loaded catalog with {len(items)} items and {len(categories)} categories")
        return cls(items, categories, **kwargs)

    # Filters

    def set_search_term(self, term: Optional[str]) -> None:
        self.search_term = term or ""

    def set_category(self, category_id: Optional[str]) -> None:
        self.category_id = category_id or ALL_CATEGORIES

    def set_plan(self, plan_id: str) -> None:
        self.plan = resolve_plan(self.plans, plan_id)

    @property
    def filtered_items(self) -> List[CatalogItem]:
        return self.catalog_filter.filter_items(
            self.items, self.plan, self.search_term, self.category_id
        )

    @property
    def available_categories(self) -> List[Category]:
        return self.catalog_filter.available_categories(self.items, self.categories, self.plan)

    def view(self) -> CatalogView:
        return CatalogView(items=self.filtered_items, categories=self.available_categories)

    # Selection

    @property
    def lines(self) -> List[SelectionLine]:
        """Current lines in the order their items were first added."""
        return list(self._lines.values())

    def quantity_of(self, item_id: str) -> int:
        line = self._lines.get(item_id)
        return line.quantity if line else 0

    def increment(self, item: CatalogItem, count: int = 1) -> None:
        """
        Add ``count`` units of an item.

        A new line captures the item as it is now, so later catalog price
        changes do not alter it.

        Args:
            item: Item to add
            count: Units to add (>= 1)

        Raises:
            InvalidQuantityOperation: If count is below 1
        """
        if count < 1:
            raise InvalidQuantityOperation(f"Cannot add {count} units of {item.id}")
        line = self._lines.get(item.id)
        if line is None:
            self._lines[item.id] = SelectionLine(item=item, quantity=count)
        else:
            self._set_quantity(line, line.quantity + count)

    def decrement(self, item_id: str) -> None:
        """Remove one unit; the line disappears at zero. Absent items are a no-op."""
        line = self._lines.get(item_id)
        if line is None:
            return
        if line.quantity > 1:
            self._set_quantity(line, line.quantity - 1)
        else:
            del self._lines[item_id]

    def remove_all(self, item_id: str) -> None:
        self._lines.pop(item_id, None)

    def reset(self) -> None:
        self._lines.clear()

    def totals(self, nights: int = 1, guests: int = 1) -> Totals:
        """
        Compute the selection's totals for a stay.

        Args:
            nights: Number of nights (>= 1)
            guests: Number of guests (>= 1)

        Returns:
            Totals with items, per-night and whole-stay amounts
        """
        if nights < 1 or guests < 1:
            raise ValueError(f"nights and guests must be >= 1, got {nights} and {guests}")
        items_total = sum(line.line_total for line in self._lines.values())
        return Totals(
            items_total=items_total,
            per_night_total=items_total,
            whole_stay_total=items_total * nights * guests,
        )

    def confirm(self) -> List[SelectionLine]:
        """
        Return the selection for confirmation.

        Raises:
            EmptySelectionError: If nothing is selected
        """
        if not self._lines:
            raise EmptySelectionError()
        return [SelectionLine(item=line.item, quantity=line.quantity) for line in self._lines.values()]

    def _set_quantity(self, line: SelectionLine, quantity: int) -> None:
        if quantity <= 0:
            raise InvalidQuantityOperation(
                f"Line for {line.item.id} would keep quantity {quantity}"
            )
        line.quantity = quantity
