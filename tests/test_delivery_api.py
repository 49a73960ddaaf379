import pytest
from fastapi.testclient import TestClient

from app.api.delivery.adapters.cache_adapter import NullCacheAdapter
from app.api.delivery.dependencies import get_delivery_cache, get_pincode_directory
from app.core.admin_dependencies import get_current_user
from app.core.security import create_access_token
from app.main import app

ZONES_URL = "/api/delivery/admin/zones"
REGIONS_URL = "/api/delivery/admin/regions"


@pytest.fixture
def client(fake_directory):
    app.dependency_overrides[get_pincode_directory] = lambda: fake_directory
    app.dependency_overrides[get_delivery_cache] = lambda: NullCacheAdapter()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client):
    app.dependency_overrides[get_current_user] = lambda: {"sub": "1", "role": "admin"}
    return client


def _zone(number, **overrides):
    body = {
        "zone_number": number,
        "zone_name": f"Zone {number}",
        "delivery_days_min": 2,
        "delivery_days_max": 3,
        "delivery_charge": "50.00",
    }
    body.update(overrides)
    return body


def _create_zone(client, number, **overrides):
    resp = client.post(ZONES_URL, json=_zone(number, **overrides))
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_ping(client):
    assert client.get("/ping").json() == {"ok": True}


def test_admin_routes_require_token(client):
    assert client.get(ZONES_URL).status_code == 401


def test_admin_routes_require_admin_role(client):
    token = create_access_token({"sub": "7", "role": "customer"})
    resp = client.get(ZONES_URL, headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403


def test_admin_token_is_accepted(client):
    token = create_access_token({"sub": "1", "role": "admin"})
    resp = client.get(ZONES_URL, headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json() == []


def test_invalid_token_is_rejected(client):
    resp = client.get(ZONES_URL, headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


def test_zone_crud(admin_client):
    zone = _create_zone(admin_client, 1)
    assert zone["delivery_charge"] == "50.00"
    assert zone["is_active"] is True

    resp = admin_client.put(f"{ZONES_URL}/{zone['id']}", json={"zone_name": "Metro", "delivery_charge": "40"})
    assert resp.status_code == 200
    assert resp.json()["zone_name"] == "Metro"

    resp = admin_client.patch(f"{ZONES_URL}/{zone['id']}/status", json={"is_active": False})
    assert resp.json()["is_active"] is False

    resp = admin_client.get(ZONES_URL, params={"only_active": True})
    assert resp.json() == []

    resp = admin_client.put(ZONES_URL, json=_zone(2))
    assert resp.status_code == 200
    assert [z["zone_number"] for z in admin_client.get(ZONES_URL).json()] == [1, 2]

    assert admin_client.get(f"{ZONES_URL}/999").status_code == 404


def test_zone_validation_errors(admin_client):
    resp = admin_client.post(ZONES_URL, json=_zone(1, delivery_days_min=4, delivery_days_max=2))
    assert resp.status_code == 422

    _create_zone(admin_client, 1)
    resp = admin_client.post(ZONES_URL, json=_zone(1))
    assert resp.status_code == 409
    assert resp.json()["error_code"] == "duplicate_zone_number"


def test_zone_update_rejects_nulls(admin_client):
    zone = _create_zone(admin_client, 1)

    for body in ({"zone_name": None}, {"delivery_days_min": None}, {"is_active": None}):
        resp = admin_client.put(f"{ZONES_URL}/{zone['id']}", json=body)
        assert resp.status_code == 422, body

    assert admin_client.get(f"{ZONES_URL}/{zone['id']}").json()["zone_name"] == "Zone 1"


def test_delete_zone_in_use(admin_client):
    zone = _create_zone(admin_client, 1)
    resp = admin_client.post(REGIONS_URL, json={"delivery_zone_id": zone["id"], "state_name": "Goa"})
    assert resp.status_code == 201

    resp = admin_client.delete(f"{ZONES_URL}/{zone['id']}")
    assert resp.status_code == 409
    assert resp.json()["error_code"] == "zone_in_use"

    resp = admin_client.delete(f"{ZONES_URL}/{zone['id']}", params={"cascade": True})
    assert resp.status_code == 200
    assert resp.json()["regions_removed"] == 1
    assert admin_client.get(REGIONS_URL).json()["total"] == 0


def test_region_endpoints(admin_client):
    zone_1 = _create_zone(admin_client, 1)
    zone_2 = _create_zone(admin_client, 2)

    resp = admin_client.post(
        REGIONS_URL,
        json={"delivery_zone_id": zone_1["id"], "region_type": "district", "state_name": "Tamil Nadu - Vellore"},
    )
    assert resp.status_code == 201
    region = resp.json()
    assert region["district_name"] == "Vellore"
    assert region["display_name"] == "Tamil Nadu - Vellore"
    assert region["delivery_zone"]["zone_number"] == 1

    resp = admin_client.post(
        REGIONS_URL,
        json={"delivery_zone_id": zone_2["id"], "state_name": "Tamil Nadu", "district_name": "vellore"},
    )
    assert resp.status_code == 409
    assert resp.json()["error_code"] == "region_conflict"

    resp = admin_client.post(REGIONS_URL, json={"delivery_zone_id": zone_1["id"], "pincode": "12"})
    assert resp.status_code == 422

    resp = admin_client.post(
        f"{REGIONS_URL}/bulk",
        json=[
            {"delivery_zone_id": zone_2["id"], "pincode": "600001", "state_name": "Tamil Nadu"},
            {"delivery_zone_id": zone_2["id"], "pincode": "6000O1"},
        ],
    )
    assert resp.status_code == 200
    result = resp.json()
    assert result["succeeded"] == 1
    assert result["failed"][0]["index"] == 1

    page = admin_client.get(REGIONS_URL, params={"zone_id": zone_2["id"]}).json()
    assert page["total"] == 1
    assert page["items"][0]["pincode"] == "600001"

    assert admin_client.delete(f"{REGIONS_URL}/{region['id']}").status_code == 204
    assert admin_client.delete(f"{REGIONS_URL}/{region['id']}").status_code == 404


def test_directory_endpoints(admin_client):
    assert admin_client.get("/api/delivery/admin/directory/states").json() == ["Karnataka", "Tamil Nadu"]
    assert admin_client.get(
        "/api/delivery/admin/directory/districts", params={"state": "Tamil Nadu"}
    ).json() == ["Chennai", "Vellore"]

    preview = admin_client.get(
        "/api/delivery/admin/directory/pincodes", params={"state": "Tamil Nadu", "district": "Vellore"}
    ).json()
    assert preview["total"] == 1

    zone = _create_zone(admin_client, 1)
    resp = admin_client.post(
        "/api/delivery/admin/directory/import",
        json={"delivery_zone_id": zone["id"], "state_name": "Tamil Nadu"},
    )
    assert resp.status_code == 200
    assert resp.json()["created"] == 2

    resp = admin_client.delete("/api/delivery/admin/cache")
    assert resp.status_code == 200


def test_public_check_and_quote(admin_client):
    zone_1 = _create_zone(admin_client, 1)
    zone_2 = _create_zone(admin_client, 2, delivery_days_min=1, delivery_days_max=1, delivery_charge="30.00")
    admin_client.post(REGIONS_URL, json={"delivery_zone_id": zone_1["id"], "state_name": "Tamil Nadu"})
    admin_client.post(
        REGIONS_URL,
        json={"delivery_zone_id": zone_2["id"], "state_name": "Tamil Nadu", "district_name": "Vellore"},
    )

    body = admin_client.get("/api/delivery/public/check/632001").json()
    assert body["available"] is True
    assert body["delivery"]["zone_number"] == 2
    assert body["delivery"]["delivery_charge"] == "30.00"

    body = admin_client.get("/api/delivery/public/check/600001").json()
    assert body["delivery"]["zone_number"] == 1

    resp = admin_client.post("/api/delivery/public/quote", json={"pincode": "600001", "cart_total": "1000"})
    assert resp.status_code == 200
    quote = resp.json()
    assert quote["delivery_charge"] == "50.00"
    assert quote["order_total"] == "1050.00"
    assert quote["delivery_days_label"] == "2-3 days"

    zones = admin_client.get("/api/delivery/public/zones").json()
    assert [z["zone_number"] for z in zones] == [1, 2]


def test_public_check_not_serviceable(client):
    resp = client.get("/api/delivery/public/check/560001")
    assert resp.status_code == 200
    assert resp.json()["available"] is False
    assert resp.json()["reason"] == "not_serviceable"


def test_public_check_invalid_pincode(client, fake_directory):
    resp = client.get("/api/delivery/public/check/63200")
    assert resp.status_code == 400
    assert resp.json()["error_code"] == "invalid_input"
    assert fake_directory.lookups == []


def test_public_check_directory_outage(client, fake_directory):
    fake_directory.unavailable = True
    resp = client.get("/api/delivery/public/check/632001")
    assert resp.status_code == 503
    assert resp.json()["error_code"] == "upstream_unavailable"


def test_quote_not_serviceable(client):
    resp = client.post("/api/delivery/public/quote", json={"pincode": "560001", "cart_total": "10"})
    assert resp.status_code == 404
    assert resp.json()["error_code"] == "not_serviceable"


def test_metrics_endpoint(client):
    client.get("/ping")
    resp = client.get("/api/monitoring/metrics")
    assert resp.status_code == 200
    assert "http_requests_total" in resp.text
    assert "delivery_resolutions_total" in resp.text
    assert "pincode_directory_requests_total" in resp.text


def test_log_tail(admin_client):
    resp = admin_client.get("/api/monitoring/logs", params={"lines": 5, "level": "info"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == len(body["lines"])
    assert body["total"] <= 5
