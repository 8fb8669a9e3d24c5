"""Summary Route - monthly planned budget vs actual spend.

Invariants:
    - Plans count only when plan read scope allows every row (plans carry no owner)
    - Expense read scope own counts only expenses the caller created
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from marketing_api.core.domain_types import ScopeEntity, ScopeVerb
from marketing_api.core.errors import RequestValidationFailed
from marketing_api.core.month_window import parse_month
from marketing_api.db.base import utcnow
from marketing_api.infrastructure.database import get_db
from marketing_api.models.expense import Expense
from marketing_api.schemas.summary import SummaryResponse
from marketing_api.services import spend
from marketing_api.services.scope import ScopeGrant
from marketing_api.api.dependencies import scope_for

router = APIRouter(prefix="/summary", tags=["summary"])


@router.get("", response_model=SummaryResponse)
async def get_summary(
    month: str | None = Query(None),
    plans_scope: ScopeGrant = Depends(scope_for(ScopeEntity.PLANS, ScopeVerb.READ)),
    expenses_scope: ScopeGrant = Depends(scope_for(ScopeEntity.EXPENSES, ScopeVerb.READ)),
    db: AsyncSession = Depends(get_db),
):
    """Totals for `month` (YYYY-MM, default current UTC month) plus spend by plan."""
    if month:
        parsed = parse_month(month)
        if parsed is None:
            raise RequestValidationFailed("month must be YYYY-MM", field="month")
        year, month_number = parsed
    else:
        now = utcnow()
        year, month_number = now.year, now.month
    expense_filter = expenses_scope.conditions(Expense.created_by)
    return await spend.monthly_summary(
        db,
        year,
        month_number,
        include_plans=plans_scope.conditions() is not None,
        expense_filter=expense_filter,
        include_expenses=expense_filter is not None,
    )
