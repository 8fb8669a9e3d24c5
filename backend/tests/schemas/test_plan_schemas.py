"""Plan and type-budget schemas - amount signs, partial updates and batch rules."""

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from pydantic import ValidationError

from marketing_api.schemas.plan import PlanCreate, PlanUpdate, TypeBudgetsUpsert


def test_plan_budget_accepts_zero():
    body = PlanCreate.model_validate({"title": "Q3", "budgetAmount": 0})
    assert body.budget_amount == 0


def test_plan_budget_rejects_negative():
    with pytest.raises(ValidationError) as exc_info:
        PlanCreate.model_validate({"title": "Q3", "budgetAmount": -1})
    assert exc_info.value.errors()[0]["loc"] == ("budgetAmount",)


def test_plan_budget_rejects_numeric_string():
    with pytest.raises(ValidationError):
        PlanCreate.model_validate({"title": "Q3", "budgetAmount": "12"})


def test_plan_create_requires_title_and_budget():
    with pytest.raises(ValidationError) as exc_info:
        PlanCreate.model_validate({})
    missing = {e["loc"][0] for e in exc_info.value.errors()}
    assert missing == {"title", "budgetAmount"}


def test_plan_dates_are_normalized_to_utc():
    body = PlanCreate.model_validate({
        "title": "Q3", "budgetAmount": 10, "startDate": "2026-07-01T02:00:00+02:00",
    })
    assert body.start_date == datetime(2026, 7, 1, tzinfo=timezone.utc)


def test_plan_dates_must_carry_a_timezone():
    with pytest.raises(ValidationError):
        PlanCreate.model_validate({
            "title": "Q3", "budgetAmount": 10, "startDate": "2026-07-01T00:00:00",
        })


def test_plan_dates_reject_non_strings():
    with pytest.raises(ValidationError):
        PlanCreate.model_validate({"title": "Q3", "budgetAmount": 10, "startDate": 1751328000})


def test_plan_update_every_field_is_optional():
    assert PlanUpdate.model_validate({"isArchived": True}).changes() == {"is_archived": True}


def test_plan_update_end_date_null_is_a_change():
    assert PlanUpdate.model_validate({"endDate": None}).changes() == {"end_date": None}


def test_plan_update_rejects_null_title():
    with pytest.raises(ValidationError):
        PlanUpdate.model_validate({"title": None})


def test_type_budgets_reject_empty_batch():
    with pytest.raises(ValidationError):
        TypeBudgetsUpsert.model_validate({"typeBudgets": []})


def test_type_budgets_require_activity_type_id():
    with pytest.raises(ValidationError) as exc_info:
        TypeBudgetsUpsert.model_validate({"typeBudgets": [{"plannedAmount": 5}]})
    assert exc_info.value.errors()[0]["loc"] == ("typeBudgets", 0, "activityTypeId")


def test_type_budgets_reject_negative_amount():
    with pytest.raises(ValidationError):
        TypeBudgetsUpsert.model_validate({
            "typeBudgets": [{"activityTypeId": str(uuid4()), "plannedAmount": -0.01}],
        })


def test_type_budgets_reject_malformed_uuid():
    with pytest.raises(ValidationError):
        TypeBudgetsUpsert.model_validate({
            "typeBudgets": [{"activityTypeId": "not-a-uuid", "plannedAmount": 5}],
        })


def test_type_budgets_accept_zero_allocation():
    activity_type_id = uuid4()
    body = TypeBudgetsUpsert.model_validate({
        "typeBudgets": [{"activityTypeId": str(activity_type_id), "plannedAmount": 0}],
    })
    assert body.type_budgets[0].activity_type_id == activity_type_id
    assert body.type_budgets[0].planned_amount == 0
