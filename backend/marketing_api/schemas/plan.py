"""Plan Schemas - plan bodies, type-budget batches and plan responses.

Invariants:
    - budgetAmount and plannedAmount accept 0, reject negatives
    - PlanUpdate keeps absent / null / value apart: {"endDate": null} clears, {} changes nothing
    - typeBudgets batches carry at least one element, each naming its activity type
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from marketing_api.schemas.base import (
    ApiModel, IsoDatetime, Money, NonEmptyStr, ResponseModel, StrictFlag, non_nullable,
)
from marketing_api.schemas.catalog_type import TypeRef
from marketing_api.schemas.expense import ExpenseResponse


class PlanCreate(ApiModel):
    title: NonEmptyStr
    type_id: UUID | None = None
    budget_amount: Money
    start_date: IsoDatetime | None = None
    end_date: IsoDatetime | None = None
    allocate_by_type: StrictFlag | None = None
    project_id: UUID | None = None


class PlanUpdate(ApiModel):
    title: NonEmptyStr | None = None
    type_id: UUID | None = None
    budget_amount: Money | None = None
    start_date: IsoDatetime | None = None
    end_date: IsoDatetime | None = None
    allocate_by_type: StrictFlag | None = None
    is_archived: StrictFlag | None = None
    project_id: UUID | None = None

    reject_null = non_nullable(
        "title", "budget_amount", "allocate_by_type", "is_archived",
    )


class TypeBudgetEntry(ApiModel):
    activity_type_id: UUID
    type_id: UUID | None = None
    planned_amount: Money


class TypeBudgetsUpsert(ApiModel):
    type_budgets: list[TypeBudgetEntry] = Field(min_length=1)


# ─── Responses ───────────────────────────────────────────────────

class PlanResponse(ResponseModel):
    id: UUID
    title: str
    type_id: UUID | None = None
    budget_amount: float
    spend_amount: float
    start_date: datetime | None = None
    end_date: datetime | None = None
    allocate_by_type: bool
    is_archived: bool
    created_at: datetime
    updated_at: datetime
    type: TypeRef | None = None


class PlanListItem(PlanResponse):
    month_spend_amount: float = 0.0


class PlanDetailResponse(PlanResponse):
    actual_spend_amount: float
    remaining_amount: float
    expenses: list[ExpenseResponse] = []
    project_id: UUID | None = None


class TypeBudgetResponse(ResponseModel):
    id: UUID
    plan_id: UUID
    activity_type_id: UUID
    type_id: UUID
    planned_amount: float
    created_at: datetime
    updated_at: datetime


class TypeBudgetWithSpend(TypeBudgetResponse):
    actual_amount: float = 0.0
    remaining_amount: float = 0.0
    type: TypeRef | None = None
