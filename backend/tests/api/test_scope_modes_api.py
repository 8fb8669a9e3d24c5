"""Scope modes - own and none narrow which rows a caller reads and changes."""

import pytest

from marketing_api.api.dependencies import get_permission_checker
from marketing_api.core.domain_types import ScopeMode
from marketing_api.infrastructure.auth import ClaimsPermissionChecker
from marketing_api.main import app

API = "/api/marketing"
ALICE = {"x-user-id": "alice"}
BOB = {"x-user-id": "bob"}


@pytest.fixture
def own_mode(settings):
    def switch():
        settings.default_scope_mode = ScopeMode.OWN
    return switch


@pytest.fixture
def can_create(permissions):
    permissions.granted.add("marketing.campaigns.create")
    return permissions


async def _post(client, path, body, headers=None):
    res = await client.post(f"{API}/{path}", json=body, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()


async def test_default_own_refuses_ownerless_writes(client, own_mode):
    own_mode()

    anonymous_plan = await client.post(f"{API}/plans", json={"title": "Q3"})
    named_plan = await client.post(f"{API}/plans", json={"title": "Q3"}, headers=ALICE)
    vendor = await client.post(f"{API}/vendors", json={"name": "Acme", "kind": "Agency"})

    assert anonymous_plan.status_code == 401
    assert named_plan.status_code == 403
    assert named_plan.json()["code"] == "FORBIDDEN"
    assert vendor.status_code == 401


async def test_own_hides_plans_and_vendors(client, own_mode):
    plan = await _post(client, "plans", {"title": "Q3"})
    vendor = await _post(client, "vendors", {"name": "Acme", "kind": "Agency"})
    own_mode()

    plans = (await client.get(f"{API}/plans", headers=ALICE)).json()
    vendors = (await client.get(f"{API}/vendors", headers=ALICE)).json()

    assert plans["items"] == [] and plans["total"] == 0
    assert vendors == {"items": []}
    assert (await client.get(f"{API}/plans/{plan['id']}", headers=ALICE)).status_code == 404
    assert (await client.get(f"{API}/vendors/{vendor['id']}", headers=ALICE)).status_code == 404
    update = await client.put(f"{API}/plans/{plan['id']}", json={"title": "X"}, headers=ALICE)
    assert update.status_code == 403
    delete = await client.delete(
        f"{API}/plans/{plan['id']}", params={"hard": "true"}, headers=ALICE,
    )
    assert delete.status_code == 403


async def test_own_limits_campaigns_to_owner_or_creator(client, can_create, own_mode):
    mine = await _post(client, "campaigns", {"name": "Mine"}, ALICE)
    assigned = await _post(client, "campaigns", {"name": "Assigned", "ownerUserId": "alice"}, BOB)
    theirs = await _post(client, "campaigns", {"name": "Theirs"}, BOB)
    own_mode()

    listed = (await client.get(
        f"{API}/campaigns", params={"sortBy": "name", "sortOrder": "asc"}, headers=ALICE,
    )).json()

    assert listed["total"] == 2
    assert [c["id"] for c in listed["items"]] == [assigned["id"], mine["id"]]
    assert (await client.get(f"{API}/campaigns/{theirs['id']}", headers=ALICE)).status_code == 404
    refused = await client.put(
        f"{API}/campaigns/{theirs['id']}", json={"name": "Taken"}, headers=ALICE,
    )
    assert refused.status_code == 403
    allowed = await client.put(
        f"{API}/campaigns/{assigned['id']}", json={"name": "Renamed"}, headers=ALICE,
    )
    assert allowed.status_code == 200
    assert allowed.json()["name"] == "Renamed"


async def test_own_limits_expenses_to_creator(client, own_mode):
    body = {"occurredAt": "2026-03-05T10:00:00Z", "amount": 10}
    mine = await _post(client, "expenses", body, ALICE)
    theirs = await _post(client, "expenses", {**body, "amount": 99}, BOB)
    own_mode()

    listed = (await client.get(
        f"{API}/expenses", params={"includeTotals": "true"}, headers=ALICE,
    )).json()

    assert [e["id"] for e in listed["items"]] == [mine["id"]]
    assert listed["totals"]["totalAmount"] == 10.0
    assert (await client.get(f"{API}/expenses/{theirs['id']}", headers=ALICE)).status_code == 404
    assert (await client.delete(f"{API}/expenses/{theirs['id']}", headers=ALICE)).status_code == 403
    assert (await client.delete(f"{API}/expenses/{mine['id']}", headers=ALICE)).status_code == 200


async def test_own_expenses_hidden_from_anonymous_callers(client, own_mode):
    await _post(client, "expenses", {"occurredAt": "2026-03-05T10:00:00Z", "amount": 10}, ALICE)
    own_mode()

    listed = (await client.get(f"{API}/expenses")).json()

    assert listed["items"] == []
    assert listed["total"] == 0


async def test_none_hides_rows_and_refuses_writes(client, permissions):
    plan = await _post(client, "plans", {"title": "Q3"})
    permissions.granted.update({
        "marketing.plans.read.scope.none",
        "marketing.plans.write.scope.none",
    })

    listed = (await client.get(f"{API}/plans", headers=ALICE)).json()
    detail = await client.get(f"{API}/plans/{plan['id']}", headers=ALICE)
    create = await client.post(f"{API}/plans", json={"title": "Q4"}, headers=ALICE)

    assert listed["items"] == []
    assert detail.status_code == 404
    assert create.status_code == 403
    assert (await client.get(f"{API}/plans/{plan['id']}")).status_code == 200


async def test_entity_grant_overrides_marketing_wide_grant(client, permissions):
    await _post(client, "plans", {"title": "Q3"})
    await _post(client, "vendors", {"name": "Acme", "kind": "Agency"})
    permissions.granted.update({
        "marketing.read.scope.none",
        "marketing.vendors.read.scope.any",
    })

    plans = (await client.get(f"{API}/plans", headers=ALICE)).json()
    vendors = (await client.get(f"{API}/vendors", headers=ALICE)).json()

    assert plans["items"] == []
    assert [v["name"] for v in vendors["items"]] == ["Acme"]


async def test_admin_role_resolves_scope_any(client, own_mode, make_token):
    own_mode()
    app.dependency_overrides[get_permission_checker] = lambda: ClaimsPermissionChecker()
    admin = make_token({"sub": "root", "roles": ["admin"]})
    member = make_token({"sub": "member", "roles": ["viewer"]})

    as_admin = await client.post(
        f"{API}/plans", json={"title": "Q3"}, headers={"authorization": f"Bearer {admin}"},
    )
    as_member = await client.post(
        f"{API}/plans", json={"title": "Q3"}, headers={"authorization": f"Bearer {member}"},
    )

    assert as_admin.status_code == 201
    assert as_member.status_code == 403


async def _march(client):
    plan = await _post(client, "plans", {
        "title": "March Push",
        "budgetAmount": 1000,
        "startDate": "2026-03-01T00:00:00Z",
        "endDate": "2026-03-31T23:59:59Z",
    })
    await _post(client, "expenses", {
        "planId": plan["id"], "amount": 300, "occurredAt": "2026-03-10T12:00:00Z",
    }, ALICE)
    await _post(client, "expenses", {"amount": 50, "occurredAt": "2026-03-11T12:00:00Z"}, ALICE)
    await _post(client, "expenses", {"amount": 70, "occurredAt": "2026-03-12T12:00:00Z"}, BOB)


async def test_summary_under_own_counts_only_callers_expenses(client, own_mode):
    await _march(client)
    own_mode()

    body = (await client.get(f"{API}/summary", params={"month": "2026-03"}, headers=ALICE)).json()

    assert body["month"] == "2026-03"
    assert body["totals"]["plannedBudget"] == 0.0
    assert body["totals"]["actualSpend"] == 350.0
    assert [(row["title"], row["spendAmount"]) for row in body["byPlan"]] == [
        ("Unassigned", 50.0),
    ]


async def test_summary_is_empty_when_both_reads_are_none(client, permissions):
    await _march(client)
    permissions.granted.update({
        "marketing.plans.read.scope.none",
        "marketing.expenses.read.scope.none",
    })

    body = (await client.get(f"{API}/summary", params={"month": "2026-03"}, headers=ALICE)).json()

    assert body["totals"] == {
        "plannedBudget": 0.0,
        "actualSpend": 0.0,
        "remaining": 0.0,
        "variance": 0.0,
    }
    assert body["byPlan"] == []
