"""
Catalog filter implementation for the selection engine.

This module provides the predicates that decide which catalog items are
shown for a given search term, category and plan.
"""

from typing import Iterable, List, Optional, Sequence

from catalog_core.models import CatalogItem, Category, SelectionPlan


ALL_CATEGORIES = "all"


class CatalogFilter:
    """Filters catalog items by free text, category and plan eligibility.

    An item is shown when all three predicates hold. Plan eligibility is an
    "any slot" rule: one matching flag is enough.
    """

    def matches_text(self, item: CatalogItem, term: Optional[str]) -> bool:
        """Case-insensitive substring match against name or description.

        Args:
            item: Item to test
            term: Search term; empty or None matches everything

        Returns:
            True if the item matches the term
        """
        if not term:
            return True
        needle = term.lower()
        return needle in item.name.lower() or needle in (item.description or "").lower()

    def matches_plan(self, item: CatalogItem, plan: SelectionPlan) -> bool:
        """True if the plan is unrestricted or the item has any required flag."""
        if plan.unrestricted:
            return True
        return any(flag in item.eligibility_flags for flag in plan.required_flags)

    def matches_category(self, item: CatalogItem, category_id: Optional[str]) -> bool:
        if not category_id or category_id == ALL_CATEGORIES:
            return True
        return item.category_id == category_id

    def filter_items(
        self,
        items: Iterable[CatalogItem],
        plan: SelectionPlan,
        term: Optional[str] = None,
        category_id: Optional[str] = ALL_CATEGORIES
    ) -> List[CatalogItem]:
        """Filter items by availability, plan, text and category.

        Args:
            items: Catalog items in catalog order
            plan: Active selection plan
            term: Free-text search term
            category_id: Selected category id, or "all"

        Returns:
            Matching items, in catalog order
        """
        return [
            item for item in items
            if item.available
            and self.matches_plan(item, plan)
            and self.matches_text(item, term)
            and self.matches_category(item, category_id)
        ]

    def available_categories(
        self,
        items: Sequence[CatalogItem],
        categories: Sequence[Category],
        plan: SelectionPlan
    ) -> List[Category]:
        """Categories holding at least one available item eligible for the plan.

        Text and category filters are not applied. With an unrestricted plan
        every configured category is available, unless the catalog is empty.

        Args:
            items: Catalog items
            categories: Configured categories, in display order
            plan: Active selection plan

        Returns:
            Available categories, in configured order
        """
        if not items:
            return []
        if plan.unrestricted:
            return list(categories)

        category_ids = {
            item.category_id
            for item in items
            if item.available and item.category_id and self.matches_plan(item, plan)
        }
        return [category for category in categories if category.id in category_ids]
