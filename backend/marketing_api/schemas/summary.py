"""Summary Schemas - monthly planned vs actual rollup."""

from datetime import datetime
from uuid import UUID

from marketing_api.schemas.base import ApiModel


class MonthRange(ApiModel):
    start: datetime
    end: datetime


class SummaryTotals(ApiModel):
    planned_budget: float
    actual_spend: float
    remaining: float
    variance: float


class SummaryPlanRow(ApiModel):
    plan_id: UUID | None = None
    title: str
    budget_amount: float
    spend_amount: float


class SummaryResponse(ApiModel):
    month: str
    range: MonthRange
    totals: SummaryTotals
    by_plan: list[SummaryPlanRow]
