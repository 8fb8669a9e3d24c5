"""Spend aggregation - per-plan sums, per-type sums and the monthly rollup.

Invariants:
    - Month windows are half-open: the first instant of the next month is excluded
    - Archived plans and plans outside the month contribute no planned budget
"""

from datetime import datetime, timezone

import pytest

from marketing_api.models.catalog_type import ActivityType
from marketing_api.models.expense import Expense
from marketing_api.models.plan import Plan
from marketing_api.services import spend


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
async def seeded(test_db):
    ads = ActivityType(key="ads", name="Ads", sort_order=0)
    march = Plan(
        title="March", budget_amount=1000,
        start_date=_utc(2026, 3, 1), end_date=_utc(2026, 3, 31),
    )
    open_ended = Plan(title="Always On", budget_amount=200)
    archived = Plan(title="Old", budget_amount=5000, is_archived=True)
    test_db.add_all([ads, march, open_ended, archived])
    await test_db.flush()

    test_db.add_all([
        Expense(plan_id=march.id, type_id=ads.id, amount=100, occurred_at=_utc(2026, 3, 2)),
        Expense(plan_id=march.id, amount=40, occurred_at=_utc(2026, 3, 31, 23, 59)),
        Expense(plan_id=march.id, type_id=ads.id, amount=7, occurred_at=_utc(2026, 4, 1)),
        Expense(plan_id=open_ended.id, amount=60, occurred_at=_utc(2026, 3, 15)),
        Expense(amount=25, occurred_at=_utc(2026, 3, 20)),
    ])
    await test_db.commit()
    return {"ads": ads, "march": march, "open_ended": open_ended}


async def test_spend_by_plan_respects_window(test_db, seeded):
    march = seeded["march"]

    all_time = await spend.spend_by_plan(test_db, [march.id])
    in_march = await spend.spend_by_plan(
        test_db, [march.id], _utc(2026, 3, 1), _utc(2026, 4, 1),
    )

    assert all_time == {march.id: 147.0}
    assert in_march == {march.id: 140.0}


async def test_spend_by_plan_with_no_ids(test_db):
    assert await spend.spend_by_plan(test_db, []) == {}


async def test_spend_by_activity_type_skips_untyped(test_db, seeded):
    totals = await spend.spend_by_activity_type(test_db, seeded["march"].id)
    assert totals == {seeded["ads"].id: 107.0}


async def test_monthly_summary(test_db, seeded):
    summary = await spend.monthly_summary(test_db, 2026, 3)

    assert summary["month"] == "2026-03"
    assert summary["totals"] == {
        "planned_budget": 1200.0,
        "actual_spend": 225.0,
        "remaining": 975.0,
        "variance": -975.0,
    }
    rows = [(row["title"], row["spend_amount"]) for row in summary["by_plan"]]
    assert rows == [("March", 140.0), ("Always On", 60.0), ("Unassigned", 25.0)]


async def test_monthly_summary_december_rolls_into_next_year(test_db):
    summary = await spend.monthly_summary(test_db, 2026, 12)
    assert summary["range"]["end"] == _utc(2027, 1, 1)
    assert summary["by_plan"] == []


async def test_monthly_summary_applies_expense_filter(test_db, seeded):
    summary = await spend.monthly_summary(
        test_db, 2026, 3, expense_filter=[Expense.amount > 50],
    )

    assert summary["totals"]["actual_spend"] == 160.0
    rows = [(row["title"], row["spend_amount"]) for row in summary["by_plan"]]
    assert rows == [("March", 100.0), ("Always On", 60.0)]


async def test_monthly_summary_without_plans_or_expenses(test_db, seeded):
    no_plans = await spend.monthly_summary(test_db, 2026, 3, include_plans=False)
    nothing = await spend.monthly_summary(
        test_db, 2026, 3, include_plans=False, include_expenses=False,
    )

    assert no_plans["totals"]["planned_budget"] == 0.0
    assert no_plans["totals"]["actual_spend"] == 225.0
    assert [row["title"] for row in no_plans["by_plan"]] == ["Unassigned"]
    assert nothing["totals"]["actual_spend"] == 0.0
    assert nothing["by_plan"] == []
    assert nothing["month"] == "2026-03"
