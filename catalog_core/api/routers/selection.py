"""
Catalog and selection routes for plan-constrained menu selection.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request

from catalog_core.api.schemas import (
    CatalogItemOut,
    CatalogResponse,
    CategoryOut,
    LineOut,
    QuoteResponse,
    SelectionRequest,
    TotalsOut,
)
from catalog_core.error_handling import CatalogUnavailable, EmptySelectionError
from catalog_core.filtering import ALL_CATEGORIES
from catalog_core.models import CatalogItem, SelectionLine
from catalog_core.selection import SelectionEngine

logger = logging.getLogger(__name__)

router = APIRouter()


def _item_out(item: CatalogItem) -> CatalogItemOut:
    return CatalogItemOut(**item.to_dict())


def _line_out(line: SelectionLine) -> LineOut:
    return LineOut(item=_item_out(line.item), quantity=line.quantity, line_total=line.line_total)


async def _load_engine(request: Request, plan_id: Optional[str]) -> SelectionEngine:
    loader = request.app.state.catalog_loader
    plan_id = plan_id or request.app.state.default_plan
    try:
        return await SelectionEngine.load(
            loader.load_items,
            loader.load_categories,
            plans=request.app.state.plans,
            plan_id=plan_id,
        )
    except CatalogUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))


async def _engine_with_lines(request: Request, body: SelectionRequest) -> SelectionEngine:
    engine = await _load_engine(request, body.plan_id)
    eligible = {item.id: item for item in engine.filtered_items}
    known = {item.id for item in engine.items}

    for line in body.lines:
        item = eligible.get(line.item_id)
        if item is None:
            if line.item_id not in known:
                raise HTTPException(status_code=404, detail=f"Menu item not found: {line.item_id}")
            raise HTTPException(
                status_code=422,
                detail=f"Menu item {line.item_id} is not available for plan {engine.plan.plan_id}",
            )
        engine.increment(item, line.quantity)
    return engine


@router.get("/catalog", response_model=CatalogResponse)
async def get_catalog(
    request: Request,
    plan: Optional[str] = Query(default=None),
    category: str = Query(default=ALL_CATEGORIES),
    q: Optional[str] = Query(default=None),
):
    """Filtered catalog plus the categories that hold eligible items."""
    engine = await _load_engine(request, plan)
    engine.set_search_term(q)
    engine.set_category(category)
    view = engine.view()

    return CatalogResponse(
        plan_id=engine.plan.plan_id,
        plan_description=engine.plan.description,
        items=[_item_out(item) for item in view.items],
        categories=[CategoryOut(id=c.id, name=c.name) for c in view.categories],
    )


@router.post("/selection/quote", response_model=QuoteResponse)
async def quote_selection(request: Request, body: SelectionRequest):
    """Price a selection for a stay."""
    engine = await _engine_with_lines(request, body)
    totals = engine.totals(body.nights, body.guests)

    return QuoteResponse(
        plan_id=engine.plan.plan_id,
        nights=body.nights,
        guests=body.guests,
        lines=[_line_out(line) for line in engine.lines],
        totals=TotalsOut(**totals.to_dict()),
    )


@router.post("/selection/confirm", response_model=QuoteResponse)
async def confirm_selection(request: Request, body: SelectionRequest):
    """Confirm a non-empty selection."""
    engine = await _engine_with_lines(request, body)
    try:
        lines = engine.confirm()
    except EmptySelectionError as e:
        raise HTTPException(status_code=422, detail=str(e))

    totals = engine.totals(body.nights, body.guests)
    logger.info(
        f"Confirmed {len(lines)} lines for plan {engine.plan.plan_id}: "
        f"{totals.whole_stay_total:.2f} for the stay"
    )
    return QuoteResponse(
        plan_id=engine.plan.plan_id,
        nights=body.nights,
        guests=body.guests,
        lines=[_line_out(line) for line in lines],
        totals=TotalsOut(**totals.to_dict()),
    )
