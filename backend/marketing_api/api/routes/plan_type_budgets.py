"""Plan Type Budget Routes - per-activity-type allocations inside a plan.

Invariants:
    - One row per (plan, activity type); posting the same activity type again updates it
    - A batch is applied in one transaction: any unknown activity type rejects the whole batch
    - type_id always mirrors activity_type_id
    - Listed budgets carry actualAmount (expenses of that plan and type) and remainingAmount
    - Reads and writes follow the caller's plan scope
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from marketing_api.core.domain_types import ScopeEntity, ScopeVerb
from marketing_api.core.errors import ResourceNotFoundError
from marketing_api.infrastructure.database import get_db
from marketing_api.models.catalog_type import ActivityType
from marketing_api.models.plan import Plan
from marketing_api.models.plan_type_budget import PlanTypeBudget
from marketing_api.schemas.base import ItemList
from marketing_api.schemas.catalog_type import TypeRef
from marketing_api.schemas.plan import (
    TypeBudgetResponse, TypeBudgetsUpsert, TypeBudgetWithSpend,
)
from marketing_api.services import spend
from marketing_api.services.scope import ScopeGrant
from marketing_api.api.dependencies import scope_for
from marketing_api.api.routes.crud_helpers import get_or_404, get_visible_or_404

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/plans", tags=["plans"])


async def _budgets_for(db: AsyncSession, plan_id: UUID) -> list[PlanTypeBudget]:
    result = await db.execute(
        select(PlanTypeBudget)
        .where(PlanTypeBudget.plan_id == plan_id)
        .order_by(PlanTypeBudget.created_at.asc())
        .execution_options(populate_existing=True),
    )
    return list(result.scalars().all())


@router.get("/{plan_id}/type-budgets", response_model=ItemList[TypeBudgetWithSpend])
async def list_type_budgets(
    plan_id: UUID,
    scope: ScopeGrant = Depends(scope_for(ScopeEntity.PLANS, ScopeVerb.READ)),
    db: AsyncSession = Depends(get_db),
):
    await get_visible_or_404(db, Plan, plan_id, "Plan", scope)
    budgets = await _budgets_for(db, plan_id)
    actuals = await spend.spend_by_activity_type(db, plan_id)
    items = []
    for budget in budgets:
        actual = actuals.get(budget.activity_type_id, 0.0)
        items.append(TypeBudgetWithSpend(
            **TypeBudgetResponse.model_validate(budget).model_dump(),
            actual_amount=actual,
            remaining_amount=float(budget.planned_amount) - actual,
            type=TypeRef.model_validate(budget.type) if budget.type else None,
        ))
    return {"items": items}


@router.post(
    "/{plan_id}/type-budgets",
    response_model=ItemList[TypeBudgetResponse],
    status_code=status.HTTP_201_CREATED,
)
async def upsert_type_budgets(
    plan_id: UUID,
    body: TypeBudgetsUpsert,
    scope: ScopeGrant = Depends(scope_for(ScopeEntity.PLANS, ScopeVerb.WRITE)),
    db: AsyncSession = Depends(get_db),
):
    plan = await get_or_404(db, Plan, plan_id, "Plan")
    scope.ensure_writable(plan)

    planned = {entry.activity_type_id: entry.planned_amount for entry in body.type_budgets}
    result = await db.execute(
        select(ActivityType.id).where(ActivityType.id.in_(list(planned))),
    )
    known = set(result.scalars().all())
    missing = [str(type_id) for type_id in planned if type_id not in known]
    if missing:
        raise ResourceNotFoundError("Activity type", ", ".join(missing))

    existing = {b.activity_type_id: b for b in await _budgets_for(db, plan_id)}
    touched = []
    for activity_type_id, amount in planned.items():
        budget = existing.get(activity_type_id)
        if budget is None:
            budget = PlanTypeBudget(
                plan_id=plan_id,
                activity_type_id=activity_type_id,
                type_id=activity_type_id,
                planned_amount=amount,
            )
            db.add(budget)
        else:
            budget.planned_amount = amount
        touched.append(budget)
    await db.commit()
    logger.info(
        f"Upserted {len(touched)} type budgets",
        extra={"entity_id": str(plan_id), "entity_type": "plan"},
    )
    return {"items": touched}
