"""
Main entry point and CLI for the Catalog Query & Selection Core.

Provides command-line access to omni-search across the configured sources and
to menu selection pricing for a stay.
"""

# Load environment variables before settings are read
from dotenv import load_dotenv
load_dotenv()

import asyncio
import argparse
import logging
import sys
from typing import List, Optional

from catalog_core.config import get_engine_settings
from catalog_core.error_handling import CatalogUnavailable, EmptySelectionError
from catalog_core.models import AggregationResult, CatalogItem, Totals
from catalog_core.search import QueryAggregator, build_http_sources
from catalog_core.selection import JsonFileCatalogLoader, SelectionEngine


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def format_search_result(result: AggregationResult) -> str:
    """
    Format merged search results for console output.

    Args:
        result: AggregationResult to format

    Returns:
        Formatted string representation of the results
    """
    lines = []
    if result.degraded:
        lines.append("All sources failed. Try again.")
    elif result.is_empty:
        lines.append(f"No results for '{result.query}'.")

    for record in result.records:
        line = f"[{record.source_kind}] {record.title}"
        if record.subtitle:
            line += f" - {record.subtitle}"
        lines.append(line)
        lines.append(f"   -> {record.navigation_target}")

    if result.degraded_sources and not result.degraded:
        lines.append(f"Unavailable sources: {', '.join(result.degraded_sources)}")

    return "\n".join(lines) + "\n"


def format_catalog(items: List[CatalogItem], engine: SelectionEngine) -> str:
    if not items:
        return "No items match your filters.\n"

    lines = [f"{engine.plan.plan_id}: {engine.plan.description or 'all items'}"]
    for item in items:
        quantity = engine.quantity_of(item.id)
        marker = f" x{quantity}" if quantity else ""
        lines.append(f"  {item.id:<12} {item.name:<30} {item.price:>10.2f}{marker}")
    return "\n".join(lines) + "\n"


def format_totals(totals: Totals, nights: int, guests: int) -> str:
    night_label = "night" if nights == 1 else "nights"
    guest_label = "guest" if guests == 1 else "guests"
    return (
        f"Items total:      {totals.items_total:>10.2f}\n"
        f"Per night:        {totals.per_night_total:>10.2f}\n"
        f"Whole stay ({nights} {night_label}, {guests} {guest_label}): {totals.whole_stay_total:.2f}\n"
    )


async def run_search(query: str) -> AggregationResult:
    """Run one undebounced search against the configured HTTP sources."""
    settings = get_engine_settings()
    aggregator = QueryAggregator(build_http_sources(settings), config=settings.aggregator)
    return await aggregator.search(query)


async def run_quote(
    catalog_path: str,
    plan_id: Optional[str],
    nights: int,
    guests: int,
    add: List[str],
    term: Optional[str] = None,
    category: Optional[str] = None,
    confirm: bool = False
) -> str:
    """Load a catalog file, apply filters and selections, and render the quote."""
    settings = get_engine_settings()
    loader = JsonFileCatalogLoader(catalog_path)
    engine = await SelectionEngine.load(
        loader.load_items,
        loader.load_categories,
        plan_id=plan_id or settings.selection.default_plan,
    )
    engine.set_search_term(term)
    engine.set_category(category)

    by_id = {item.id: item for item in engine.filtered_items}
    for item_id in add:
        item = by_id.get(item_id)
        if item is None:
            logger.warning(f"Item {item_id} is not selectable under the current filters")
            continue
        engine.increment(item)

    output = format_catalog(engine.filtered_items, engine)
    if confirm:
        engine.confirm()
        output += f"Confirmed {len(engine.lines)} item(s).\n"
    return output + format_totals(engine.totals(nights, guests), nights, guests)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Omni-search and menu selection for the hotel catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  catalog-core search "deluxe"
  catalog-core quote --catalog menu.json --plan "Half Board" --nights 3 --guests 2 --add m1 --add m1
        """
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    search_parser = subparsers.add_parser("search", help="Search all sources")
    search_parser.add_argument("query", help="Search text")

    quote_parser = subparsers.add_parser("quote", help="Price a menu selection")
    quote_parser.add_argument("--catalog", required=True, help="Path to a catalog JSON file")
    quote_parser.add_argument("--plan", default=None, help="Plan id, e.g. 'Half Board'")
    quote_parser.add_argument("--nights", type=int, default=1)
    quote_parser.add_argument("--guests", type=int, default=1)
    quote_parser.add_argument("--add", action="append", default=[], metavar="ITEM_ID",
                              help="Add one unit of an item (repeatable)")
    quote_parser.add_argument("--search", default=None, help="Free-text filter")
    quote_parser.add_argument("--category", default=None, help="Category id filter")
    quote_parser.add_argument("--confirm", action="store_true", help="Confirm the selection")

    args = parser.parse_args(argv)
    if args.command == "quote" and (args.nights < 1 or args.guests < 1):
        parser.error("--nights and --guests must be at least 1")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)

    try:
        if args.command == "search":
            result = asyncio.run(run_search(args.query))
            print(format_search_result(result))
            return 1 if result.degraded else 0

        output = asyncio.run(run_quote(
            args.catalog,
            args.plan,
            args.nights,
            args.guests,
            args.add,
            term=args.search,
            category=args.category,
            confirm=args.confirm,
        ))
        print(output)
        return 0
    except CatalogUnavailable as e:
        logger.error(f"Catalog unavailable: {e}")
        return 2
    except EmptySelectionError as e:
        logger.error(str(e))
        return 3
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
