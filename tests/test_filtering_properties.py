"""
Property-based tests for catalog filtering.

These tests verify universal properties that should hold across all valid
executions of the filtering operations.
"""

import pytest
from hypothesis import given, settings, strategies as st
from catalog_core.models import CatalogItem, Category, SelectionPlan
from catalog_core.filtering import ALL_CATEGORIES, CatalogFilter
from catalog_core.selection import build_plans


FLAGS = ("is_breakfast", "is_lunch", "is_dinner", "is_snacks")
CATEGORY_IDS = ("starters", "mains", "desserts", "drinks")

PLANS = build_plans()

# Strategy for generating catalog items
catalog_items = st.builds(
    CatalogItem,
    id=st.uuids().map(str),
    name=st.text(alphabet="abcdefghijklmnopqrstuvwxyz ", min_size=1, max_size=20),
    price=st.floats(min_value=0, max_value=10000, allow_nan=False),
    category_id=st.one_of(st.none(), st.sampled_from(CATEGORY_IDS)),
    eligibility_flags=st.frozensets(st.sampled_from(FLAGS)),
    available=st.booleans(),
    description=st.text(alphabet="abcdefghijklmnopqrstuvwxyz ", max_size=30),
)

plans = st.sampled_from(sorted(PLANS.values(), key=lambda p: p.plan_id))


def item(item_id, flags=(), category="mains", name=None, description="", available=True):
    return CatalogItem(
        id=item_id,
        name=name or item_id,
        price=100,
        category_id=category,
        eligibility_flags=frozenset(flags),
        available=available,
        description=description,
    )


CATEGORIES = [Category(id=cid, name=cid.title()) for cid in CATEGORY_IDS]


@given(items=st.lists(catalog_items, max_size=30), plan=plans)
@settings(max_examples=100)
def test_plan_eligibility_uses_any_slot(items, plan):
    """
    **Property: Plan eligibility (OR semantics)**

    An item is shown under a restricted plan iff it carries at least one of
    the plan's flags and is available.
    """
    catalog_filter = CatalogFilter()

    shown = catalog_filter.filter_items(items, plan)

    expected = [
        i for i in items
        if i.available and (plan.unrestricted or set(plan.required_flags) & i.eligibility_flags)
    ]
    assert shown == expected


@given(items=st.lists(catalog_items, max_size=30), plan=plans)
@settings(max_examples=100)
def test_filtered_items_is_a_subsequence_of_catalog(items, plan):
    """Filtering never reorders or invents items."""
    shown = CatalogFilter().filter_items(items, plan, term="a", category_id="mains")

    remaining = iter(items)
    assert all(any(s is candidate for candidate in remaining) for s in shown)
    assert all(s.category_id == "mains" for s in shown)


@given(items=st.lists(catalog_items, min_size=1, max_size=30), plan=plans)
@settings(max_examples=100)
def test_available_categories_follow_eligible_items(items, plan):
    """
    **Property: Category availability**

    Under a restricted plan a category is offered iff it holds at least one
    available item eligible for the plan. Under an unrestricted plan every
    configured category is offered.
    """
    categories = CatalogFilter().available_categories(items, CATEGORIES, plan)

    if plan.unrestricted:
        assert categories == CATEGORIES
        return

    expected_ids = {
        i.category_id for i in items
        if i.available and i.category_id and set(plan.required_flags) & i.eligibility_flags
    }
    assert [c.id for c in categories] == [c.id for c in CATEGORIES if c.id in expected_ids]


def test_half_board_accepts_dinner_only_item():
    catalog_filter = CatalogFilter()
    half_board = PLANS["Half Board"]

    dinner_only = item("steak", flags=("is_dinner",))
    lunch_only = item("sandwich", flags=("is_lunch",))

    assert catalog_filter.filter_items([dinner_only, lunch_only], half_board) == [dinner_only]


def test_plan_without_matching_items_shows_nothing():
    catalog_filter = CatalogFilter()
    breakfast = PLANS["Breakfast"]
    items = [item("soup", flags=("is_lunch",)), item("wine", flags=("is_dinner",))]

    assert catalog_filter.filter_items(items, breakfast) == []
    assert catalog_filter.available_categories(items, CATEGORIES, breakfast) == []


@pytest.mark.parametrize("term,expected", [
    ("", ["pancakes", "omelette", "salad"]),
    ("PAN", ["pancakes"]),
    ("egg", ["omelette"]),
    ("xyz", []),
])
def test_text_matches_name_or_description(term, expected):
    items = [
        item("pancakes", name="Pancakes", description="With maple syrup"),
        item("omelette", name="Omelette", description="Three eggs"),
        item("salad", name="Salad"),
    ]

    shown = CatalogFilter().filter_items(items, PLANS["A la carte"], term=term)

    assert [i.id for i in shown] == expected


@pytest.mark.parametrize("category_id", [None, "", ALL_CATEGORIES])
def test_all_categories_sentinel_matches_everything(category_id):
    items = [item("a", category="mains"), item("b", category="drinks"), item("c", category=None)]

    shown = CatalogFilter().filter_items(items, PLANS["A la carte"], category_id=category_id)

    assert len(shown) == 3


def test_category_filter_is_exact():
    items = [item("a", category="mains"), item("b", category="drinks"), item("c", category=None)]

    shown = CatalogFilter().filter_items(items, PLANS["A la carte"], category_id="drinks")

    assert [i.id for i in shown] == ["b"]


def test_unavailable_items_are_hidden():
    items = [item("a"), item("b", available=False)]

    assert [i.id for i in CatalogFilter().filter_items(items, PLANS["A la carte"])] == ["a"]


def test_empty_catalog_has_no_categories_even_unrestricted():
    assert CatalogFilter().available_categories([], CATEGORIES, PLANS["A la carte"]) == []


def test_items_without_category_do_not_offer_a_category():
    items = [item("toast", flags=("is_breakfast",), category=None)]

    assert CatalogFilter().available_categories(items, CATEGORIES, PLANS["Breakfast"]) == []


def test_unrestricted_plan_has_no_required_flags():
    assert SelectionPlan(plan_id="anything").unrestricted
    assert not PLANS["Full Board"].unrestricted
