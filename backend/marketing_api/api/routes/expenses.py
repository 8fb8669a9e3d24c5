"""Expense Routes - spend entries with filtering, totals and optional project linking.

Invariants:
    - amount > 0 and occurredAt are enforced by the schemas before any query
    - plan / type / vendor references must resolve when given (404 otherwise)
    - unassignedOnly=true selects expenses without a plan and overrides planId
    - createdBy is taken from the caller identity, never from the body
    - Scope mode own limits reads and writes to expenses the caller created
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from marketing_api.core.domain_types import (
    AuthUser, MarketingEntityType, MarketingOptions, ScopeEntity, ScopeVerb,
)
from marketing_api.core.errors import RequestValidationFailed
from marketing_api.infrastructure.database import get_db
from marketing_api.models.catalog_type import ActivityType
from marketing_api.models.expense import Expense
from marketing_api.models.plan import Plan
from marketing_api.models.vendor import Vendor
from marketing_api.schemas.common import SuccessResponse
from marketing_api.schemas.expense import (
    ExpenseCreate, ExpenseDetailResponse, ExpensePage, ExpenseResponse, ExpenseUpdate,
)
from marketing_api.services.project_linking import (
    delete_entity_links, get_linked_project_id, set_linked_project_id,
)
from marketing_api.services.scope import ScopeGrant
from marketing_api.api.dependencies import (
    PageParams, get_current_user, get_marketing_options, page_params, scope_for,
)
from marketing_api.api.routes.crud_helpers import (
    apply_changes, empty_page, ensure_exists, get_or_404, get_visible_or_404,
    order_clause, parse_query_datetime, parse_query_uuid, parse_sort_order,
    pick_sort_column, reload,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/expenses", tags=["expenses"])

_SORT_COLUMNS = {
    "occurredAt": Expense.occurred_at,
    "amount": Expense.amount,
    "createdAt": Expense.created_at,
}
_UPDATABLE = (
    "plan_id", "type_id", "vendor_id", "occurred_at", "amount", "notes", "attachment_url",
)
_OWNER_ATTRS = ("created_by",)


async def _check_references(db: AsyncSession, values: dict) -> None:
    await ensure_exists(db, Plan, values.get("plan_id"), "Plan")
    await ensure_exists(db, ActivityType, values.get("type_id"), "Activity type")
    await ensure_exists(db, Vendor, values.get("vendor_id"), "Vendor")


def _project_required() -> RequestValidationFailed:
    return RequestValidationFailed("projectId is required", field="projectId")


@router.get("", response_model=ExpensePage)
async def list_expenses(
    plan_id: str | None = Query(None, alias="planId"),
    type_id: str | None = Query(None, alias="typeId"),
    vendor_id: str | None = Query(None, alias="vendorId"),
    unassigned_only: bool = Query(False, alias="unassignedOnly"),
    from_date: str | None = Query(None, alias="fromDate"),
    to_date: str | None = Query(None, alias="toDate"),
    search: str | None = Query(None),
    sort_by: str | None = Query(None, alias="sortBy"),
    sort_order: str | None = Query(None, alias="sortOrder"),
    include_totals: bool = Query(False, alias="includeTotals"),
    page: PageParams = Depends(page_params),
    scope: ScopeGrant = Depends(scope_for(ScopeEntity.EXPENSES, ScopeVerb.READ)),
    db: AsyncSession = Depends(get_db),
):
    conditions = scope.conditions(Expense.created_by)
    if conditions is None:
        response = empty_page(page.limit, page.offset)
        if include_totals:
            response["totals"] = {"total_amount": 0.0, "count": 0}
        return response
    plan_filter = parse_query_uuid(plan_id, "planId")
    type_filter = parse_query_uuid(type_id, "typeId")
    vendor_filter = parse_query_uuid(vendor_id, "vendorId")
    start = parse_query_datetime(from_date, "fromDate")
    end = parse_query_datetime(to_date, "toDate")
    if unassigned_only:
        conditions.append(Expense.plan_id.is_(None))
    elif plan_filter:
        conditions.append(Expense.plan_id == plan_filter)
    if type_filter:
        conditions.append(Expense.type_id == type_filter)
    if vendor_filter:
        conditions.append(Expense.vendor_id == vendor_filter)
    if start is not None:
        conditions.append(Expense.occurred_at >= start)
    if end is not None:
        conditions.append(Expense.occurred_at <= end)
    search = (search or "").strip()
    if search:
        pattern = f"%{search}%"
        conditions.append(or_(
            Expense.notes.ilike(pattern),
            Plan.title.ilike(pattern),
            Vendor.name.ilike(pattern),
            ActivityType.name.ilike(pattern),
        ))

    def scoped(query):
        return (
            query
            .outerjoin(Plan, Expense.plan_id == Plan.id)
            .outerjoin(Vendor, Expense.vendor_id == Vendor.id)
            .outerjoin(ActivityType, Expense.type_id == ActivityType.id)
            .where(*conditions)
        )

    total = await db.scalar(scoped(select(func.count(Expense.id)).select_from(Expense)))
    column = pick_sort_column(sort_by, _SORT_COLUMNS, "occurredAt")
    result = await db.execute(
        scoped(select(Expense))
        .order_by(order_clause(column, parse_sort_order(sort_order)), Expense.id.asc())
        .limit(page.limit).offset(page.offset),
    )
    response = {
        "items": result.scalars().all(),
        "total": int(total or 0),
        "limit": page.limit,
        "offset": page.offset,
    }
    if include_totals:
        amount = await db.scalar(
            scoped(select(func.coalesce(func.sum(Expense.amount), 0)).select_from(Expense)),
        )
        response["totals"] = {"total_amount": float(amount or 0), "count": int(total or 0)}
    return response


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    body: ExpenseCreate,
    user: AuthUser | None = Depends(get_current_user),
    options: MarketingOptions = Depends(get_marketing_options),
    scope: ScopeGrant = Depends(scope_for(ScopeEntity.EXPENSES, ScopeVerb.WRITE)),
    db: AsyncSession = Depends(get_db),
):
    scope.ensure_writable(None, *_OWNER_ATTRS)
    if options.linking_required and body.project_id is None:
        raise _project_required()
    values = body.model_dump(exclude={"project_id"})
    await _check_references(db, values)

    expense = Expense(**values, created_by=user.sub if user else None)
    db.add(expense)
    await db.flush()
    if options.enable_project_linking and body.project_id is not None:
        await set_linked_project_id(
            db, MarketingEntityType.EXPENSE, expense.id, body.project_id,
            created_by=user.sub if user else None,
        )
    await db.commit()
    logger.info(
        "Expense created",
        extra={"entity_id": str(expense.id), "entity_type": "expense"},
    )
    return await reload(db, Expense, expense.id)


@router.get("/{expense_id}", response_model=ExpenseDetailResponse)
async def get_expense(
    expense_id: UUID,
    options: MarketingOptions = Depends(get_marketing_options),
    scope: ScopeGrant = Depends(scope_for(ScopeEntity.EXPENSES, ScopeVerb.READ)),
    db: AsyncSession = Depends(get_db),
):
    expense = await get_visible_or_404(
        db, Expense, expense_id, "Expense", scope, *_OWNER_ATTRS,
    )
    project_id = None
    if options.enable_project_linking:
        project_id = await get_linked_project_id(
            db, MarketingEntityType.EXPENSE, expense_id,
        )
    return ExpenseDetailResponse(
        **ExpenseResponse.model_validate(expense).model_dump(),
        project_id=project_id,
    )


@router.put("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: UUID,
    body: ExpenseUpdate,
    user: AuthUser | None = Depends(get_current_user),
    options: MarketingOptions = Depends(get_marketing_options),
    scope: ScopeGrant = Depends(scope_for(ScopeEntity.EXPENSES, ScopeVerb.WRITE)),
    db: AsyncSession = Depends(get_db),
):
    expense = await get_or_404(db, Expense, expense_id, "Expense")
    scope.ensure_writable(expense, *_OWNER_ATTRS)
    changes = body.changes()
    await _check_references(db, changes)

    if options.enable_project_linking and "project_id" in changes:
        if options.linking_required and changes["project_id"] is None:
            raise _project_required()
        await set_linked_project_id(
            db, MarketingEntityType.EXPENSE, expense_id, changes["project_id"],
            created_by=user.sub if user else None,
        )

    apply_changes(expense, changes, _UPDATABLE)
    await db.commit()
    return await reload(db, Expense, expense_id)


@router.delete("/{expense_id}", response_model=SuccessResponse)
async def delete_expense(
    expense_id: UUID,
    scope: ScopeGrant = Depends(scope_for(ScopeEntity.EXPENSES, ScopeVerb.DELETE)),
    db: AsyncSession = Depends(get_db),
):
    expense = await get_or_404(db, Expense, expense_id, "Expense")
    scope.ensure_writable(expense, *_OWNER_ATTRS)
    await delete_entity_links(db, MarketingEntityType.EXPENSE, expense_id)
    await db.delete(expense)
    await db.commit()
    logger.info("Expense deleted", extra={"entity_id": str(expense_id), "entity_type": "expense"})
    return SuccessResponse()
