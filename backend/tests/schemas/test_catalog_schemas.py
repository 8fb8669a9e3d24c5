"""Catalog type, campaign and link schemas."""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from marketing_api.core.domain_types import CampaignStatus
from marketing_api.schemas.campaign import CampaignCreate, CampaignUpdate
from marketing_api.schemas.catalog_type import (
    ActivityTypeCreate, CatalogTypeReorder, PlanTypeCreate, PlanTypeUpdate,
)
from marketing_api.schemas.link import LinkCreate


def test_catalog_create_requires_key_and_name():
    with pytest.raises(ValidationError):
        PlanTypeCreate.model_validate({"name": "Paid"})


def test_catalog_create_rejects_system_flag():
    with pytest.raises(ValidationError):
        PlanTypeCreate.model_validate({"key": "paid", "name": "Paid", "isSystem": True})


def test_activity_type_create_keeps_category():
    body = ActivityTypeCreate.model_validate({"key": "ads", "name": "Ads", "category": "paid"})
    assert body.category == "paid"


@pytest.mark.parametrize("raw, expected", [(3, 3), ("4", 4), ("0", 0)])
def test_catalog_update_sort_order_accepts_int_or_digit_string(raw, expected):
    assert PlanTypeUpdate.model_validate({"sortOrder": raw}).sort_order == expected


@pytest.mark.parametrize("raw", ["-1", "abc", -2, 1.5])
def test_catalog_update_sort_order_rejects_garbage(raw):
    with pytest.raises(ValidationError):
        PlanTypeUpdate.model_validate({"sortOrder": raw})


def test_catalog_update_clears_description_with_null():
    assert PlanTypeUpdate.model_validate({"description": None}).changes() == {"description": None}


def test_reorder_requires_at_least_one_entry():
    with pytest.raises(ValidationError):
        CatalogTypeReorder.model_validate({"types": []})


def test_reorder_rejects_negative_order():
    with pytest.raises(ValidationError):
        CatalogTypeReorder.model_validate({"types": [{"id": str(uuid4()), "order": -1}]})


def test_campaign_create_defaults():
    body = CampaignCreate.model_validate({"name": "Launch"})
    assert body.status is None
    assert body.campaign_type_id is None


def test_campaign_status_is_a_closed_set():
    assert CampaignCreate.model_validate(
        {"name": "Launch", "status": "active"},
    ).status is CampaignStatus.ACTIVE
    with pytest.raises(ValidationError):
        CampaignCreate.model_validate({"name": "Launch", "status": "archived"})


def test_campaign_update_budget_null_clears():
    assert CampaignUpdate.model_validate({"budgetAmount": None}).changes() == {
        "budget_amount": None,
    }


def test_link_requires_all_four_fields():
    with pytest.raises(ValidationError) as exc_info:
        LinkCreate.model_validate({"marketingEntityType": "plan", "marketingEntityId": "1"})
    missing = {e["loc"][0] for e in exc_info.value.errors()}
    assert missing == {"linkedEntityKind", "linkedEntityId"}


def test_link_rejects_empty_strings():
    with pytest.raises(ValidationError):
        LinkCreate.model_validate({
            "marketingEntityType": "plan", "marketingEntityId": "",
            "linkedEntityKind": "project", "linkedEntityId": "p1",
        })
