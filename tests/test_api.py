import json

import pytest
from fastapi.testclient import TestClient

from geofence.db import supabase
from geofence.main import create_app
from geofence.persistence import database

DHA8_POLYGON = {
    "type": "Polygon",
    "coordinates": [[[74.35, 31.50], [74.35, 31.51], [74.36, 31.51], [74.36, 31.50], [74.35, 31.50]]],
}
FLAT_ZONE = {
    "feeStructure": {"type": "flat", "fee": 149},
    "minOrderAmount": 500,
    "estimatedTime": "30-45 min",
    "freeDeliveryAbove": 2000,
}


@pytest.fixture
def catalog_file(tmp_path, monkeypatch):
    monkeypatch.setattr(supabase, "get_supabase_client", lambda: None)
    monkeypatch.setattr(database, "get_supabase_client", lambda: None)
    return tmp_path / "catalog.json"


@pytest.fixture
def client(catalog_file):
    return TestClient(create_app(catalog_file=catalog_file))


def _create_live_area(client: TestClient) -> str:
    response = client.post(
        "/api/admin/areas",
        json={"name": "DHA Phase 8", "city": "Lahore", "polygon": DHA8_POLYGON},
    )
    assert response.status_code == 201
    area_id = response.json()["id"]

    response = client.put(f"/api/admin/delivery-zones/{area_id}", json=FLAT_ZONE)
    assert response.status_code == 200

    response = client.patch(f"/api/admin/delivery-zones/{area_id}/active", json={"isActive": True})
    assert response.status_code == 200
    assert response.json()["deliveryZone"]["isActive"] is True
    return area_id


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["areas"] == 0


def test_database_health_without_supabase(client):
    response = client.get("/api/health/database")

    assert response.status_code == 200
    assert response.json()["configured"] is False


def test_create_area_defaults_center_to_vertex_mean(client):
    response = client.post("/api/admin/areas", json={"name": "DHA Phase 8", "city": "Lahore", "polygon": DHA8_POLYGON})

    body = response.json()
    assert body["center"]["lat"] == pytest.approx(31.505)
    assert body["center"]["lng"] == pytest.approx(74.355)
    assert body["stats"]["vertexCount"] == 4
    assert body["stats"]["isSimple"] is True
    assert body["polygon"]["coordinates"][0][0] == body["polygon"]["coordinates"][0][-1]


def test_area_check_and_delivery_calculation(client):
    area_id = _create_live_area(client)

    inside = client.get("/api/areas/check", params={"lat": 31.505, "lng": 74.355}).json()
    assert inside["inService"] is True
    assert inside["area"]["id"] == area_id
    assert inside["deliveryFee"] == 149
    assert inside["minOrderAmount"] == 500

    outside = client.get("/api/areas/check", params={"lat": 31.60, "lng": 74.35}).json()
    assert outside["inService"] is False
    assert outside["reason"] == "not_in_service"

    below_minimum = client.post("/api/delivery/calculate", json={"lat": 31.505, "lng": 74.355, "orderAmount": 300})
    assert below_minimum.json()["meetsMinimumOrder"] is False
    assert below_minimum.json()["deliverable"] is False

    free = client.post("/api/delivery/calculate", json={"lat": 31.505, "lng": 74.355, "orderAmount": 2500})
    assert free.json()["deliveryFee"] == 0
    assert free.json()["deliverable"] is True


def test_public_areas_list_only_active(client):
    area_id = _create_live_area(client)
    client.post("/api/admin/areas", json={"name": "Gulberg", "city": "Lahore", "center": {"lat": 31.52, "lng": 74.34}})
    client.post(
        "/api/admin/areas",
        json={"name": "Closed", "city": "Lahore", "center": {"lat": 31.53, "lng": 74.33}, "isActive": False},
    )

    areas = client.get("/api/areas").json()["areas"]

    assert {area["name"] for area in areas} == {"DHA Phase 8", "Gulberg"}
    live = next(area for area in areas if area["id"] == area_id)
    assert live["hasDeliveryZone"] is True
    assert live["deliveryZone"]["feeStructure"]["fee"] == 149


def test_check_rejects_coordinate_outside_deployment(client):
    response = client.get("/api/areas/check", params={"lat": 51.5, "lng": -0.12})

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "invalid_coordinate"


def test_activating_zone_without_boundary_is_rejected(client):
    area_id = client.post(
        "/api/admin/areas",
        json={"name": "Gulberg", "city": "Lahore", "center": {"lat": 31.52, "lng": 74.34}, "deliveryZone": FLAT_ZONE},
    ).json()["id"]

    response = client.patch(f"/api/admin/delivery-zones/{area_id}/active", json={"isActive": True})

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "no_boundary"


def test_activating_missing_zone_is_rejected(client):
    area_id = client.post("/api/admin/areas", json={"name": "Gulberg", "polygon": DHA8_POLYGON}).json()["id"]

    response = client.patch(f"/api/admin/delivery-zones/{area_id}/active", json={"isActive": True})

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "no_delivery_zone"


def test_unknown_area_is_404(client):
    assert client.get("/api/admin/areas/nope").status_code == 404
    assert client.delete("/api/admin/areas/nope").json()["detail"]["error"] == "area_not_found"


def test_deactivating_area_stops_service(client):
    area_id = _create_live_area(client)

    client.patch(f"/api/admin/areas/{area_id}/active", json={"isActive": False})

    assert client.get("/api/areas/check", params={"lat": 31.505, "lng": 74.355}).json()["inService"] is False


def test_delete_area_removes_zone(client):
    area_id = _create_live_area(client)

    response = client.delete(f"/api/admin/areas/{area_id}")

    assert response.status_code == 200
    assert client.get("/api/areas/check", params={"lat": 31.505, "lng": 74.355}).json()["inService"] is False
    assert client.get("/api/admin/areas").json()["total"] == 0


def test_list_areas_filters_by_city(client):
    client.post("/api/admin/areas", json={"name": "DHA Phase 8", "city": "Lahore", "polygon": DHA8_POLYGON})
    client.post("/api/admin/areas", json={"name": "Clifton", "city": "Karachi", "center": {"lat": 24.81, "lng": 67.03}})

    response = client.get("/api/admin/areas", params={"city": "karachi"})

    assert [area["name"] for area in response.json()["areas"]] == ["Clifton"]


def test_update_area_boundary(client):
    area_id = _create_live_area(client)
    moved = {
        "type": "Polygon",
        "coordinates": [[[74.40, 31.40], [74.40, 31.41], [74.41, 31.41], [74.41, 31.40], [74.40, 31.40]]],
    }

    response = client.put(f"/api/admin/areas/{area_id}", json={"polygon": moved, "center": {"lat": 31.405, "lng": 74.405}})

    assert response.status_code == 200
    assert client.get("/api/areas/check", params={"lat": 31.505, "lng": 74.355}).json()["inService"] is False
    assert client.get("/api/areas/check", params={"lat": 31.405, "lng": 74.405}).json()["inService"] is True


def test_catalog_survives_restart(catalog_file, client):
    area_id = _create_live_area(client)

    reloaded = TestClient(create_app(catalog_file=catalog_file))

    check = reloaded.get("/api/areas/check", params={"lat": 31.505, "lng": 74.355}).json()
    assert check["inService"] is True
    assert check["area"]["id"] == area_id


def test_export_writes_geojson(client, catalog_file):
    _create_live_area(client)

    response = client.get("/api/admin/areas/export")

    assert response.status_code == 200
    assert len(response.json()["features"]) == 1
    exported = list((catalog_file.parent / "outputs").glob("areas_*/areas.geojson"))
    assert len(exported) == 1


def test_parse_pasted_coordinates(client):
    text = "31.50, 74.35\n31.51 74.35\n\n31.51;74.36\n31.50, 74.36\n31.50, 74.35\n"

    response = client.post("/api/admin/polygons/parse", json={"text": text})

    body = response.json()
    assert response.status_code == 200
    assert body["pointCount"] == 4
    assert body["polygon"]["coordinates"][0][0] == [74.35, 31.50]
    assert body["center"]["lat"] == pytest.approx(31.505)


def test_parse_reports_malformed_line(client):
    response = client.post("/api/admin/polygons/parse", json={"text": "31.50, 74.35\nnorth, 74.35\n31.51, 74.36"})

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "malformed_line"
    assert response.json()["detail"]["line"] == 2


def test_parse_rejects_points_outside_deployment(client):
    response = client.post("/api/admin/polygons/parse", json={"text": "31.50, 74.35\n51.5, -0.12\n31.51, 74.36"})

    assert response.json()["detail"]["error"] == "out_of_bounds"


def test_edit_builds_polygon_from_clicks(client):
    operations = [
        {"op": "begin"},
        {"op": "append", "point": {"lat": 31.50, "lng": 74.35}},
        {"op": "append", "point": {"lat": 31.51, "lng": 74.35}},
        {"op": "append", "point": {"lat": 31.51, "lng": 74.36}},
    ]

    response = client.post("/api/admin/polygons/edit", json={"operations": operations, "commit": True})

    body = response.json()
    assert response.status_code == 200
    assert body["state"] == "closed"
    assert body["vertexCount"] == 3
    assert body["stats"]["vertexCount"] == 3


def test_edit_refuses_to_drop_below_triangle(client):
    triangle = {
        "type": "Polygon",
        "coordinates": [[[74.35, 31.50], [74.35, 31.51], [74.36, 31.51], [74.35, 31.50]]],
    }

    response = client.post(
        "/api/admin/polygons/edit",
        json={"polygon": triangle, "operations": [{"op": "delete", "index": 1}]},
    )

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "minimum_vertex_count"


def test_edit_commit_requires_closed_ring(client):
    response = client.post(
        "/api/admin/polygons/edit",
        json={"operations": [{"op": "append", "point": {"lat": 31.50, "lng": 74.35}}], "commit": True},
    )

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "incomplete_ring"


def test_stats_endpoint(client):
    response = client.post("/api/admin/polygons/stats", json={"polygon": DHA8_POLYGON})

    body = response.json()
    assert body["vertexCount"] == 4
    assert body["areaKm2"] == pytest.approx(1.05, abs=0.01)


def test_active_zone_under_inactive_area_is_rejected(client):
    response = client.post(
        "/api/admin/areas",
        json={
            "name": "Closed",
            "city": "Lahore",
            "polygon": DHA8_POLYGON,
            "isActive": False,
            "deliveryZone": {**FLAT_ZONE, "isActive": True},
        },
    )

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "area_inactive"
    assert client.get("/api/admin/areas").json()["total"] == 0


def test_app_starts_when_persisted_area_is_outside_bounds(catalog_file, client):
    area_id = _create_live_area(client)
    payload = json.loads(catalog_file.read_text(encoding="utf-8"))
    stale = json.loads(json.dumps(payload["areas"][0]))
    stale["id"] = "stale"
    stale["center"] = {"type": "Point", "coordinates": [74.0, 40.0]}
    payload["areas"].append(stale)
    catalog_file.write_text(json.dumps(payload), encoding="utf-8")

    reloaded = TestClient(create_app(catalog_file=catalog_file))

    areas = reloaded.get("/api/admin/areas").json()["areas"]
    assert [area["id"] for area in areas] == [area_id]
