"""Spend Aggregation - actual spend rollups for plans, type budgets and the monthly summary.

Invariants:
    - Spend is always summed from expenses (plan.spend_amount is informational)
    - Month windows are half-open UTC ranges [start, end)
    - Expenses without a plan land in an "Unassigned" bucket in the summary
    - The summary only counts plans and expenses the caller may read; hidden rows
      contribute nothing to totals or breakdowns
"""

from datetime import datetime
from typing import Iterable
from uuid import UUID

from sqlalchemy import and_, false, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from marketing_api.core.month_window import format_month, month_bounds
from marketing_api.models.expense import Expense
from marketing_api.models.plan import Plan

UNASSIGNED_TITLE = "Unassigned"


def _window(start: datetime | None, end: datetime | None) -> list:
    conditions = []
    if start is not None:
        conditions.append(Expense.occurred_at >= start)
    if end is not None:
        conditions.append(Expense.occurred_at < end)
    return conditions


async def spend_by_plan(
    db: AsyncSession,
    plan_ids: Iterable[UUID],
    start: datetime | None = None,
    end: datetime | None = None,
) -> dict[UUID, float]:
    """Sum of expense amounts per plan, optionally inside [start, end)."""
    ids = list(plan_ids)
    if not ids:
        return {}
    result = await db.execute(
        select(Expense.plan_id, func.coalesce(func.sum(Expense.amount), 0))
        .where(Expense.plan_id.in_(ids), *_window(start, end))
        .group_by(Expense.plan_id),
    )
    return {plan_id: float(total) for plan_id, total in result.all()}


async def spend_by_activity_type(
    db: AsyncSession, plan_id: UUID,
) -> dict[UUID, float]:
    result = await db.execute(
        select(Expense.type_id, func.coalesce(func.sum(Expense.amount), 0))
        .where(Expense.plan_id == plan_id, Expense.type_id.is_not(None))
        .group_by(Expense.type_id),
    )
    return {type_id: float(total) for type_id, total in result.all()}


async def monthly_summary(
    db: AsyncSession,
    year: int,
    month: int,
    include_plans: bool = True,
    expense_filter: list | None = None,
    include_expenses: bool = True,
) -> dict:
    """Planned vs actual spend for one calendar month (UTC).

    `expense_filter` narrows which expenses count (scope own); `include_plans` and
    `include_expenses` drop a whole side when the caller may not read it.
    """
    start, end = month_bounds(year, month)
    overlaps_month = and_(
        Plan.is_archived.is_(False),
        or_(Plan.start_date.is_(None), Plan.start_date < end),
        or_(Plan.end_date.is_(None), Plan.end_date >= start),
    )
    if not include_plans:
        overlaps_month = and_(overlaps_month, false())
    in_month = _window(start, end) + list(expense_filter or [])
    if not include_expenses:
        in_month.append(false())

    planned = await db.scalar(
        select(func.coalesce(func.sum(Plan.budget_amount), 0)).where(overlaps_month),
    )
    actual = await db.scalar(
        select(func.coalesce(func.sum(Expense.amount), 0)).where(*in_month),
    )
    planned, actual = float(planned or 0), float(actual or 0)

    month_spend = func.coalesce(func.sum(Expense.amount), 0)
    rows = await db.execute(
        select(Plan.id, Plan.title, Plan.budget_amount, month_spend)
        .outerjoin(Expense, and_(Expense.plan_id == Plan.id, *in_month))
        .where(overlaps_month)
        .group_by(Plan.id, Plan.title, Plan.budget_amount)
        .order_by(month_spend.desc(), Plan.title.asc()),
    )
    by_plan = [
        {
            "plan_id": plan_id,
            "title": title or "",
            "budget_amount": float(budget or 0),
            "spend_amount": float(spend or 0),
        }
        for plan_id, title, budget, spend in rows.all()
    ]

    unassigned = await db.scalar(
        select(func.coalesce(func.sum(Expense.amount), 0))
        .where(Expense.plan_id.is_(None), *in_month),
    )
    unassigned = float(unassigned or 0)
    if unassigned > 0:
        by_plan.append({
            "plan_id": None,
            "title": UNASSIGNED_TITLE,
            "budget_amount": 0.0,
            "spend_amount": unassigned,
        })

    return {
        "month": format_month(year, month),
        "range": {"start": start, "end": end},
        "totals": {
            "planned_budget": planned,
            "actual_spend": actual,
            "remaining": planned - actual,
            "variance": actual - planned,
        },
        "by_plan": by_plan,
    }
