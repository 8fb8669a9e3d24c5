"""Expense Schemas - expense bodies, list totals and expense responses.

Invariants:
    - amount is strictly positive; 0 and negatives are rejected
    - occurredAt is required on create and may be changed but never cleared on update
"""

from datetime import datetime
from uuid import UUID

from marketing_api.schemas.base import (
    ApiModel, IsoDatetime, PositiveMoney, ResponseModel, non_nullable,
)
from marketing_api.schemas.catalog_type import TypeRef


class ExpenseCreate(ApiModel):
    plan_id: UUID | None = None
    type_id: UUID | None = None
    vendor_id: UUID | None = None
    occurred_at: IsoDatetime
    amount: PositiveMoney
    notes: str | None = None
    attachment_url: str | None = None
    project_id: UUID | None = None


class ExpenseUpdate(ApiModel):
    plan_id: UUID | None = None
    type_id: UUID | None = None
    vendor_id: UUID | None = None
    occurred_at: IsoDatetime | None = None
    amount: PositiveMoney | None = None
    notes: str | None = None
    attachment_url: str | None = None
    project_id: UUID | None = None

    reject_null = non_nullable("occurred_at", "amount")


# ─── Responses ───────────────────────────────────────────────────

class PlanRef(ResponseModel):
    id: UUID
    title: str


class VendorRef(ResponseModel):
    id: UUID
    name: str
    kind: str


class ExpenseResponse(ResponseModel):
    id: UUID
    plan_id: UUID | None = None
    type_id: UUID | None = None
    vendor_id: UUID | None = None
    occurred_at: datetime
    amount: float
    notes: str | None = None
    attachment_url: str | None = None
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime
    plan: PlanRef | None = None
    type: TypeRef | None = None
    vendor: VendorRef | None = None


class ExpenseDetailResponse(ExpenseResponse):
    project_id: UUID | None = None


class ExpenseTotals(ApiModel):
    total_amount: float
    count: int


class ExpensePage(ApiModel):
    items: list[ExpenseResponse]
    total: int
    limit: int
    offset: int
    totals: ExpenseTotals | None = None
