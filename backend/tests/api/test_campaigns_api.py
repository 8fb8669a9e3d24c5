"""Campaign routes - permission gates, type embedding, filters and updates."""

from uuid import uuid4

import pytest

CAMPAIGNS = "/api/marketing/campaigns"
USER_HEADERS = {"x-user-id": "user-1"}


@pytest.fixture
def can_create(permissions):
    permissions.granted.add("marketing.campaigns.create")
    return permissions


@pytest.fixture
async def campaign_type(client, permissions):
    permissions.granted.add("marketing.setup.campaign-types.access")
    res = await client.post(
        "/api/marketing/campaign-types",
        json={"key": "launch", "name": "Launch", "color": "#ff0000"},
        headers=USER_HEADERS,
    )
    return res.json()


async def _campaign(client, **fields):
    res = await client.post(CAMPAIGNS, json={"name": "Spring", **fields}, headers=USER_HEADERS)
    assert res.status_code == 201, res.text
    return res.json()


async def test_create_requires_identity(client):
    res = await client.post(CAMPAIGNS, json={"name": "Spring"})
    assert res.status_code == 401


async def test_create_requires_permission(client):
    res = await client.post(CAMPAIGNS, json={"name": "Spring"}, headers=USER_HEADERS)
    assert res.status_code == 403


async def test_create_records_creator_and_defaults(client, can_create):
    campaign = await _campaign(client)

    assert campaign["status"] == "planned"
    assert campaign["createdByUserId"] == "user-1"
    assert campaign["campaignType"] is None
    assert campaign["campaignTypeName"] is None


async def test_create_embeds_campaign_type(client, can_create, campaign_type):
    campaign = await _campaign(client, campaignTypeId=campaign_type["id"], status="active")

    assert campaign["campaignType"]["name"] == "Launch"
    assert campaign["campaignType"]["color"] == "#ff0000"
    assert campaign["campaignTypeName"] == "Launch"


async def test_create_with_unknown_type_returns_404(client, can_create):
    res = await client.post(
        CAMPAIGNS, json={"name": "Spring", "campaignTypeId": str(uuid4())}, headers=USER_HEADERS,
    )
    assert res.status_code == 404


async def test_create_rejects_unknown_status(client, can_create):
    res = await client.post(CAMPAIGNS, json={"name": "Spring", "status": "draft"}, headers=USER_HEADERS)
    assert res.status_code == 400
    assert res.json()["details"][0]["field"] == "status"


async def test_list_filters_by_status_and_search(client, can_create):
    await _campaign(client, name="Spring Sale", status="active")
    await _campaign(client, name="Autumn", status="paused", description="sale leftovers")

    active = (await client.get(CAMPAIGNS, params={"status": "active"})).json()
    sale = (await client.get(
        CAMPAIGNS, params={"search": "sale", "sortBy": "name", "sortOrder": "asc"},
    )).json()

    assert [c["name"] for c in active["items"]] == ["Spring Sale"]
    assert sale["total"] == 2
    assert [c["name"] for c in sale["items"]] == ["Autumn", "Spring Sale"]


async def test_list_rejects_unknown_status_filter(client):
    res = await client.get(CAMPAIGNS, params={"status": "draft"})
    assert res.status_code == 400


async def test_update_requires_identity(client, can_create):
    campaign = await _campaign(client)
    res = await client.put(f"{CAMPAIGNS}/{campaign['id']}", json={"name": "Renamed"})
    assert res.status_code == 401


async def test_update_applies_partial_changes(client, can_create):
    campaign = await _campaign(client, goals="Awareness", budgetAmount=1000)

    res = await client.put(
        f"{CAMPAIGNS}/{campaign['id']}",
        json={"status": "completed", "goals": None},
        headers={"x-user-id": "user-2"},
    )

    body = res.json()
    assert body["status"] == "completed"
    assert body["goals"] is None
    assert body["budgetAmount"] == 1000
    assert body["lastUpdatedByUserId"] == "user-2"


async def test_update_rejects_null_name(client, can_create):
    campaign = await _campaign(client)
    res = await client.put(f"{CAMPAIGNS}/{campaign['id']}", json={"name": None}, headers=USER_HEADERS)
    assert res.status_code == 400


async def test_delete_is_gated(client, can_create):
    campaign = await _campaign(client)

    denied = await client.delete(f"{CAMPAIGNS}/{campaign['id']}", headers=USER_HEADERS)
    assert denied.status_code == 403

    can_create.granted.add("marketing.campaigns.delete")
    allowed = await client.delete(f"{CAMPAIGNS}/{campaign['id']}", headers=USER_HEADERS)
    assert allowed.json() == {"success": True}
    assert (await client.get(f"{CAMPAIGNS}/{campaign['id']}")).status_code == 404
