"""Selection plans: which eligibility flags each board type accepts."""

import logging
from typing import Dict, Mapping, Optional, Sequence, Tuple, Union

from catalog_core.config import DEFAULT_PLANS
from catalog_core.models import SelectionPlan


logger = logging.getLogger(__name__)

PlanDefinition = Union[Sequence[str], Tuple[Sequence[str], str]]


def build_plans(definitions: Optional[Mapping[str, PlanDefinition]] = None) -> Dict[str, SelectionPlan]:
    """Build plans from ``plan_id -> flags`` or ``plan_id -> (flags, description)``."""
    plans = {}
    for plan_id, definition in (definitions if definitions is not None else DEFAULT_PLANS).items():
        if isinstance(definition, tuple) and len(definition) == 2 and not isinstance(definition[0], str):
            flags, description = definition
        else:
            flags, description = definition, ""
        plans[plan_id] = SelectionPlan(
            plan_id=plan_id,
            required_flags=tuple(flags),
            description=description,
        )
    return plans


def resolve_plan(plans: Mapping[str, SelectionPlan], plan_id: str) -> SelectionPlan:
    """Look up a plan; unknown ids fall back to an unrestricted plan."""
    plan = plans.get(plan_id)
    if plan is None:
        logger.warning(f"Unknown plan '{plan_id}', showing all items")
        return SelectionPlan(plan_id=plan_id)
    return plan
