from __future__ import annotations

from app.core.config import settings

SHIPPER = {"X-User-Id": "1", "X-User-Role": "shipper"}
OTHER_SHIPPER = {"X-User-Id": "2", "X-User-Role": "shipper"}
FORWARDER = {"X-User-Id": "5", "X-User-Role": "forwarder"}
ADMIN = {"X-User-Id": "9", "X-User-Role": "admin"}


def _create_shipment(client, headers=SHIPPER):
    response = client.post(
        "/api/v1/shipments",
        headers=headers,
        json={"origin": "Rotterdam", "destination": "New York"},
    )
    assert response.status_code == 201
    return response.json()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "up"}


def test_requests_without_identity_are_rejected(client, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "legacy_header")
    response = client.get("/api/v1/shipments")
    assert response.status_code == 401
    assert response.json()["detail"]["code"] == "UNAUTHORIZED"


def test_create_and_fetch_shipment(client, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "legacy_header")
    created = _create_shipment(client)
    assert created["status"] == "draft"
    assert created["shipper_id"] == 1

    response = client.get(f"/api/v1/shipments/{created['id']}", headers=SHIPPER)
    assert response.status_code == 200
    assert response.json()["shipment_number"] == created["shipment_number"]

    response = client.get(f"/api/v1/shipments/{created['id']}", headers=OTHER_SHIPPER)
    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "FORBIDDEN"


def test_status_update_requires_status(client, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "legacy_header")
    created = _create_shipment(client)

    response = client.put(f"/api/v1/shipments/{created['id']}/status", headers=ADMIN, json={})
    assert response.status_code == 400
    assert response.json()["detail"]["message"] == "Status is required"


def test_lifecycle_over_http(client, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "legacy_header")
    created = _create_shipment(client)
    base = f"/api/v1/shipments/{created['id']}"

    response = client.put(f"{base}/assign-forwarder", headers=ADMIN, json={"forwarderId": 5})
    assert response.status_code == 200
    assert response.json()["status"] == "submitted"

    response = client.put(f"{base}/status", headers=FORWARDER, json={"status": "in_progress"})
    assert response.status_code == 200
    assert response.json()["status"] == "in_progress"

    response = client.put(f"{base}/status", headers=FORWARDER, json={"status": "draft"})
    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "TRANSITION_NOT_ALLOWED"

    response = client.delete(base, headers=FORWARDER)
    assert response.status_code == 403


def test_delete_draft_shipment(client, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "legacy_header")
    created = _create_shipment(client)

    response = client.delete(f"/api/v1/shipments/{created['id']}", headers=SHIPPER)
    assert response.status_code == 204

    response = client.get(f"/api/v1/shipments/{created['id']}", headers=SHIPPER)
    assert response.status_code == 404


def test_nested_load_and_item_routes(client, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "legacy_header")
    created = _create_shipment(client)
    other = _create_shipment(client)
    loads_url = f"/api/v1/shipments/{created['id']}/loads"

    response = client.post(loads_url, headers=SHIPPER, json={"reference": "PO-778", "transportMode": "RORO"})
    assert response.status_code == 201
    load = response.json()
    assert load["pickup_address"] == "Rotterdam"
    assert load["load_number"].endswith("-L01")

    items_url = f"{loads_url}/{load['id']}/items"
    response = client.post(
        items_url,
        headers=SHIPPER,
        json={"type": "RORO", "description": "Tractors", "specifications": {"quantity": 3}},
    )
    assert response.status_code == 201
    item = response.json()
    assert item["specifications"] == {"quantity": 3, "unit_type": "Vehicle"}

    response = client.get(f"{items_url}/{item['id']}", headers=SHIPPER)
    assert response.status_code == 200

    response = client.get(
        f"/api/v1/shipments/{other['id']}/loads/{load['id']}/items/{item['id']}",
        headers=SHIPPER,
    )
    assert response.status_code == 404

    response = client.post(items_url, headers=SHIPPER, json={"description": "No type"})
    assert response.status_code == 400
    assert response.json()["detail"]["message"] == "Type is required"

    response = client.get(loads_url, headers=OTHER_SHIPPER)
    assert response.status_code == 403


def test_missing_or_non_object_bodies_are_bad_requests(client, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "legacy_header")
    created = _create_shipment(client)
    base = f"/api/v1/shipments/{created['id']}"

    response = client.put(f"{base}/status", headers=ADMIN)
    assert response.status_code == 400
    assert response.json()["detail"] == {"code": "BAD_REQUEST", "message": "Status is required"}

    response = client.post("/api/v1/shipments", headers=SHIPPER)
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "BAD_REQUEST"

    response = client.post(f"{base}/loads", headers=SHIPPER, json={"reference": "PO-1"})
    load = response.json()
    response = client.post(f"{base}/loads/{load['id']}/items", headers=SHIPPER, json=[1])
    assert response.status_code == 400
    assert response.json()["detail"] == {
        "code": "BAD_REQUEST",
        "message": "Request body must be a JSON object",
    }

    response = client.put(f"{base}/loads/{load['id']}", headers=SHIPPER, json=["weight", 4])
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "BAD_REQUEST"
