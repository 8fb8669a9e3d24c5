"""Plan Routes - plan CRUD with spend rollups and optional project linking.

Invariants:
    - Listing hides archived plans unless includeArchived=true
    - monthSpendAmount covers the current UTC month only
    - {endDate: null} clears endDate and leaves every other field alone
    - DELETE archives; DELETE ?hard=true removes the plan, its type budgets and its links
    - When project linking is required, a plan cannot be created or left without a project
    - Plans carry no owner: scope mode own behaves like none (hidden, read-only)

Design Decisions:
    - Detail view sums spend from expenses instead of trusting plan.spend_amount
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from marketing_api.core.domain_types import (
    AuthUser, MarketingEntityType, MarketingOptions, ScopeEntity, ScopeVerb,
)
from marketing_api.core.errors import RequestValidationFailed
from marketing_api.core.month_window import current_month_bounds
from marketing_api.infrastructure.database import get_db
from marketing_api.models.catalog_type import PlanType
from marketing_api.models.expense import Expense
from marketing_api.models.plan import Plan
from marketing_api.models.plan_type_budget import PlanTypeBudget
from marketing_api.schemas.base import Page
from marketing_api.schemas.common import SuccessResponse
from marketing_api.schemas.expense import ExpenseResponse
from marketing_api.schemas.plan import (
    PlanCreate, PlanDetailResponse, PlanListItem, PlanResponse, PlanUpdate,
)
from marketing_api.services import spend
from marketing_api.services.scope import ScopeGrant
from marketing_api.services.project_linking import (
    delete_entity_links, get_linked_project_id, set_linked_project_id,
)
from marketing_api.api.dependencies import (
    PageParams, get_current_user, get_marketing_options, page_params, scope_for,
)
from marketing_api.api.routes.crud_helpers import (
    apply_changes, empty_page, ensure_exists, get_or_404, get_visible_or_404,
    order_clause, parse_query_datetime, parse_sort_order, pick_sort_column, reload,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/plans", tags=["plans"])

_SORT_COLUMNS = {
    "title": Plan.title,
    "createdAt": Plan.created_at,
    "updatedAt": Plan.updated_at,
    "budgetAmount": Plan.budget_amount,
    "isArchived": Plan.is_archived,
}
_UPDATABLE = (
    "title", "type_id", "budget_amount", "start_date", "end_date",
    "allocate_by_type", "is_archived",
)


def _project_required() -> RequestValidationFailed:
    return RequestValidationFailed(
        "projectId is required when project linking is required", field="projectId",
    )


@router.get("", response_model=Page[PlanListItem])
async def list_plans(
    include_archived: bool = Query(False, alias="includeArchived"),
    search: str | None = Query(None),
    sort_by: str | None = Query(None, alias="sortBy"),
    sort_order: str | None = Query(None, alias="sortOrder"),
    page: PageParams = Depends(page_params),
    scope: ScopeGrant = Depends(scope_for(ScopeEntity.PLANS, ScopeVerb.READ)),
    db: AsyncSession = Depends(get_db),
):
    conditions = scope.conditions()
    if conditions is None:
        return empty_page(page.limit, page.offset)
    if not include_archived:
        conditions.append(Plan.is_archived.is_(False))
    if search:
        conditions.append(Plan.title.ilike(f"%{search}%"))

    total = await db.scalar(select(func.count()).select_from(Plan).where(*conditions))
    column = pick_sort_column(sort_by, _SORT_COLUMNS, "createdAt")
    result = await db.execute(
        select(Plan).where(*conditions)
        .order_by(order_clause(column, parse_sort_order(sort_order)), Plan.id.asc())
        .limit(page.limit).offset(page.offset),
    )
    plans = result.scalars().all()

    start, end = current_month_bounds()
    month_spend = await spend.spend_by_plan(db, [p.id for p in plans], start, end)
    items = [
        PlanListItem(
            **PlanResponse.model_validate(p).model_dump(),
            month_spend_amount=month_spend.get(p.id, 0.0),
        )
        for p in plans
    ]
    return {"items": items, "total": int(total or 0), "limit": page.limit, "offset": page.offset}


@router.post("", response_model=PlanResponse, status_code=status.HTTP_201_CREATED)
async def create_plan(
    body: PlanCreate,
    user: AuthUser | None = Depends(get_current_user),
    options: MarketingOptions = Depends(get_marketing_options),
    scope: ScopeGrant = Depends(scope_for(ScopeEntity.PLANS, ScopeVerb.WRITE)),
    db: AsyncSession = Depends(get_db),
):
    scope.ensure_writable()
    if options.linking_required and body.project_id is None:
        raise _project_required()
    await ensure_exists(db, PlanType, body.type_id, "Plan type")

    plan = Plan(
        title=body.title,
        type_id=body.type_id,
        budget_amount=body.budget_amount,
        start_date=body.start_date,
        end_date=body.end_date,
        allocate_by_type=bool(body.allocate_by_type),
    )
    db.add(plan)
    await db.flush()
    if options.enable_project_linking and body.project_id is not None:
        await set_linked_project_id(
            db, MarketingEntityType.PLAN, plan.id, body.project_id,
            created_by=user.sub if user else None,
        )
    await db.commit()
    logger.info("Plan created", extra={"entity_id": str(plan.id), "entity_type": "plan"})
    return await reload(db, Plan, plan.id)


@router.get("/{plan_id}", response_model=PlanDetailResponse)
async def get_plan(
    plan_id: UUID,
    from_date: str | None = Query(None, alias="fromDate"),
    to_date: str | None = Query(None, alias="toDate"),
    options: MarketingOptions = Depends(get_marketing_options),
    scope: ScopeGrant = Depends(scope_for(ScopeEntity.PLANS, ScopeVerb.READ)),
    db: AsyncSession = Depends(get_db),
):
    plan = await get_visible_or_404(db, Plan, plan_id, "Plan", scope)
    conditions = [Expense.plan_id == plan_id]
    start = parse_query_datetime(from_date, "fromDate")
    end = parse_query_datetime(to_date, "toDate")
    if start is not None:
        conditions.append(Expense.occurred_at >= start)
    if end is not None:
        conditions.append(Expense.occurred_at <= end)
    result = await db.execute(
        select(Expense).where(*conditions).order_by(Expense.occurred_at.desc()),
    )
    expenses = result.scalars().all()

    actual = (await spend.spend_by_plan(db, [plan_id])).get(plan_id, 0.0)
    project_id = None
    if options.enable_project_linking:
        project_id = await get_linked_project_id(db, MarketingEntityType.PLAN, plan_id)
    return PlanDetailResponse(
        **PlanResponse.model_validate(plan).model_dump(),
        actual_spend_amount=actual,
        remaining_amount=float(plan.budget_amount) - actual,
        expenses=[ExpenseResponse.model_validate(e) for e in expenses],
        project_id=project_id,
    )


@router.put("/{plan_id}", response_model=PlanResponse)
async def update_plan(
    plan_id: UUID,
    body: PlanUpdate,
    user: AuthUser | None = Depends(get_current_user),
    options: MarketingOptions = Depends(get_marketing_options),
    scope: ScopeGrant = Depends(scope_for(ScopeEntity.PLANS, ScopeVerb.WRITE)),
    db: AsyncSession = Depends(get_db),
):
    plan = await get_or_404(db, Plan, plan_id, "Plan")
    scope.ensure_writable(plan)
    changes = body.changes()
    if changes.get("type_id") is not None:
        await ensure_exists(db, PlanType, changes["type_id"], "Plan type")

    if options.enable_project_linking and "project_id" in changes:
        if options.linking_required and changes["project_id"] is None:
            raise _project_required()
        await set_linked_project_id(
            db, MarketingEntityType.PLAN, plan_id, changes["project_id"],
            created_by=user.sub if user else None,
        )

    applied = apply_changes(plan, changes, _UPDATABLE)
    await db.commit()
    logger.info(
        f"Plan updated: {', '.join(applied) or 'no fields'}",
        extra={"entity_id": str(plan_id), "entity_type": "plan"},
    )
    return await reload(db, Plan, plan_id)


@router.delete("/{plan_id}", response_model=SuccessResponse)
async def delete_plan(
    plan_id: UUID,
    hard: bool = Query(False),
    scope: ScopeGrant = Depends(scope_for(ScopeEntity.PLANS, ScopeVerb.DELETE)),
    db: AsyncSession = Depends(get_db),
):
    plan = await get_or_404(db, Plan, plan_id, "Plan")
    scope.ensure_writable(plan)
    if not hard:
        plan.is_archived = True
        await db.commit()
        logger.info("Plan archived", extra={"entity_id": str(plan_id), "entity_type": "plan"})
        return SuccessResponse()

    await db.execute(delete(PlanTypeBudget).where(PlanTypeBudget.plan_id == plan_id))
    await db.execute(
        update(Expense).where(Expense.plan_id == plan_id).values(plan_id=None),
    )
    await delete_entity_links(db, MarketingEntityType.PLAN, plan_id)
    await db.delete(plan)
    await db.commit()
    logger.info("Plan deleted", extra={"entity_id": str(plan_id), "entity_type": "plan"})
    return SuccessResponse()
