"""Expense schemas - strictly positive amounts and required occurredAt."""

import pytest
from pydantic import ValidationError

from marketing_api.schemas.expense import ExpenseCreate, ExpenseUpdate

VALID = {"occurredAt": "2026-03-05T10:00:00Z", "amount": 25.5}


def test_expense_create_accepts_minimal_body():
    body = ExpenseCreate.model_validate(VALID)
    assert body.amount == 25.5
    assert body.plan_id is None


@pytest.mark.parametrize("amount", [0, -1, -0.5])
def test_expense_amount_must_be_positive(amount):
    with pytest.raises(ValidationError) as exc_info:
        ExpenseCreate.model_validate({**VALID, "amount": amount})
    assert exc_info.value.errors()[0]["loc"] == ("amount",)


def test_expense_amount_accepts_integers():
    assert ExpenseCreate.model_validate({**VALID, "amount": 3}).amount == 3


def test_expense_requires_occurred_at():
    with pytest.raises(ValidationError):
        ExpenseCreate.model_validate({"amount": 10})


def test_expense_rejects_malformed_datetime():
    with pytest.raises(ValidationError):
        ExpenseCreate.model_validate({**VALID, "occurredAt": "yesterday"})


def test_expense_update_clears_notes_with_null():
    assert ExpenseUpdate.model_validate({"notes": None}).changes() == {"notes": None}


def test_expense_update_leaves_notes_alone_when_absent():
    assert ExpenseUpdate.model_validate({}).changes() == {}


@pytest.mark.parametrize("field", ["amount", "occurredAt"])
def test_expense_update_rejects_null_for_required_fields(field):
    with pytest.raises(ValidationError):
        ExpenseUpdate.model_validate({field: None})


def test_expense_update_keeps_amount_constraint():
    with pytest.raises(ValidationError):
        ExpenseUpdate.model_validate({"amount": 0})
