"""
자재 관리 API 테스트
"""

import pytest

COLLECTION = "materials"

ROSE = {
    "name": "장미",
    "mainCategory": "생화",
    "midCategory": "장미",
    "price": 3000,
    "supplier": "꽃시장",
    "size": "1단",
    "color": "빨강",
    "branch": "강남점",
}


@pytest.fixture(autouse=True)
def clean_materials(store):
    for record in store.list_all(COLLECTION):
        store.delete_by_id(COLLECTION, record["id"])
    yield


def create(client, headers, **overrides):
    return client.post("/api/materials/", json=dict(ROSE, **overrides), headers=headers)


def test_create_and_get(client, admin_headers):
    response = create(client, admin_headers)
    assert response.status_code == 200
    material = response.json()
    assert material["stock"] == 0

    fetched = client.get(f"/api/materials/{material['id']}", headers=admin_headers).json()
    assert fetched == material


@pytest.mark.parametrize("overrides", [{"price": -1}, {"name": ""}, {"stock": -3}])
def test_create_validation(client, admin_headers, overrides):
    assert create(client, admin_headers, **overrides).status_code == 422


def test_staff_cannot_create(client, staff_headers):
    assert create(client, staff_headers).status_code == 403


def test_list_sorted_and_filtered(client, admin_headers, staff_headers):
    create(client, admin_headers, name="튤립", branch="서초점")
    create(client, admin_headers, name="안개꽃")
    create(client, admin_headers, name="국화")

    names = [m["name"] for m in client.get("/api/materials/", headers=staff_headers).json()]
    assert names == ["국화", "안개꽃", "튤립"]

    gangnam = client.get("/api/materials/?branch=강남점", headers=staff_headers).json()
    assert sorted(m["name"] for m in gangnam) == ["국화", "안개꽃"]


def test_update_only_given_fields(client, admin_headers):
    material_id = create(client, admin_headers).json()["id"]
    response = client.put(f"/api/materials/{material_id}", json={"stock": 20}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["stock"] == 20
    assert response.json()["price"] == 3000


def test_delete(client, admin_headers):
    material_id = create(client, admin_headers).json()["id"]
    assert client.delete(f"/api/materials/{material_id}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/materials/{material_id}", headers=admin_headers).status_code == 404


def test_barcode_svg(client, admin_headers):
    material_id = create(client, admin_headers).json()["id"]
    response = client.get(f"/api/materials/{material_id}/barcode", headers=admin_headers)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert b"<svg" in response.content


def test_barcode_missing_material(client, admin_headers):
    assert client.get("/api/materials/missing/barcode", headers=admin_headers).status_code == 404
