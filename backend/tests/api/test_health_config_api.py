"""Health checks and the linking-options config endpoint."""

import time

from marketing_api import __version__

CONFIG = "/api/marketing/config"


async def test_health_reports_version(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json() == {"status": "healthy", "service": "marketing-api", "version": __version__}


async def test_ready_when_database_reachable(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"]["database"] == "healthy"


async def test_config_uses_settings_defaults(client):
    res = await client.get(CONFIG)
    assert res.json() == {
        "options": {"enable_project_linking": False, "require_project_linking": False},
        "projectsInstalled": False,
    }


async def test_config_reads_token_feature_packs(client, make_token):
    token = make_token({
        "sub": "user-1",
        "featurePacks": {
            "projects": {"options": {}},
            "marketing": {"options": {
                "enable_project_linking": True,
                "require_project_linking": True,
            }},
        },
    })

    res = await client.get(CONFIG, headers={"cookie": f"hit_token={token}"})

    assert res.json() == {
        "options": {"enable_project_linking": True, "require_project_linking": True},
        "projectsInstalled": True,
    }


async def test_expired_token_falls_back_to_defaults(client, make_token):
    token = make_token({
        "sub": "user-1",
        "exp": int(time.time()) - 60,
        "featurePacks": {"marketing": {"options": {"enable_project_linking": True}}},
    })
    res = await client.get(CONFIG, headers={"authorization": f"Bearer {token}"})
    assert res.json()["options"]["enable_project_linking"] is False


async def test_malformed_feature_packs_fall_back_to_defaults(client, make_token):
    token = make_token({"sub": "user-1", "featurePacks": ["marketing", "projects"]})
    res = await client.get(CONFIG, headers={"authorization": f"Bearer {token}"})
    assert res.status_code == 200
    assert res.json() == {
        "options": {"enable_project_linking": False, "require_project_linking": False},
        "projectsInstalled": False,
    }


async def test_non_dict_marketing_pack_is_ignored_on_plan_detail(client, make_token):
    token = make_token({
        "sub": "user-1",
        "roles": "admin",
        "actions": "marketing.*",
        "featurePacks": {"marketing": "on"},
    })
    headers = {"authorization": f"Bearer {token}"}
    created = await client.post(
        "/api/marketing/plans", json={"title": "Q3"}, headers=headers,
    )
    assert created.status_code == 201

    res = await client.get(f"/api/marketing/plans/{created.json()['id']}", headers=headers)

    assert res.status_code == 200
    assert res.json()["projectId"] is None
