"""
배송비 관리 API 테스트
"""

import pytest
from fastapi.testclient import TestClient

from flowershop.main import app

COLLECTION = "deliveryFees"


@pytest.fixture(autouse=True)
def clean_fees(store):
    """테스트마다 배송비 컬렉션 비우기"""
    for record in store.list_all(COLLECTION):
        store.delete_by_id(COLLECTION, record["id"])
    yield


def add(client, headers, district, fee):
    return client.post("/api/delivery-fees/", json={"district": district, "fee": fee}, headers=headers)


def test_list_requires_login(client):
    fresh_client = TestClient(app)
    response = fresh_client.get("/api/delivery-fees/")
    assert response.status_code == 401


def test_add_and_list(client, admin_headers):
    assert add(client, admin_headers, "서초구", 15000).status_code == 200
    assert add(client, admin_headers, "강남구", 12000).status_code == 200

    response = client.get("/api/delivery-fees/", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert [i["district"] for i in data["items"]] == ["강남구", "서초구"]
    assert data["items"][0]["fee_display"] == "₩12,000"
    assert data["duplicates"] == []
    assert data["summary"]["total_districts"] == 2
    assert data["summary"]["average_fee"] == 13500


def test_staff_cannot_write(client, staff_headers):
    response = add(client, staff_headers, "강남구", 1000)
    assert response.status_code == 403


def test_staff_can_read(client, staff_headers):
    assert client.get("/api/delivery-fees/", headers=staff_headers).status_code == 200


@pytest.mark.parametrize("district,fee", [("", 1000), ("강남구", -5), ("강남구", "abc"), ("강남구", "²"), ("강남구", "9" * 5000)])
def test_add_rejects_invalid_input(client, admin_headers, district, fee):
    response = add(client, admin_headers, district, fee)
    assert response.status_code == 400
    assert client.get("/api/delivery-fees/", headers=admin_headers).json()["items"] == []


def test_duplicates_are_flagged_and_merged(client, admin_headers):
    add(client, admin_headers, "강남구", 1000)
    add(client, admin_headers, "강남구", 2000)
    add(client, admin_headers, "서초구", 1500)

    data = client.get("/api/delivery-fees/", headers=admin_headers).json()
    assert len(data["duplicates"]) == 1
    assert data["duplicates"][0]["district"] == "강남구"
    assert data["duplicates"][0]["count"] == 2
    assert [i["is_duplicate"] for i in data["items"]] == [True, True, False]
    assert data["summary"]["duplicate_items"] == 2

    response = client.post("/api/delivery-fees/merge-duplicates", headers=admin_headers)
    assert response.status_code == 200
    merged = response.json()
    assert merged["policy"] == "keep_first"
    assert len(merged["removed_ids"]) == 1
    assert [(i["district"], i["fee"]) for i in merged["items"]] == [("강남구", 1000), ("서초구", 1500)]

    again = client.post("/api/delivery-fees/merge-duplicates", headers=admin_headers).json()
    assert again["removed_ids"] == []
    assert len(again["items"]) == 2


def test_merge_with_lowest_fee_policy(client, admin_headers):
    add(client, admin_headers, "마포구", 3000)
    add(client, admin_headers, "마포구", 1000)
    response = client.post(
        "/api/delivery-fees/merge-duplicates?policy=keep_lowest_fee", headers=admin_headers
    )
    assert [i["fee"] for i in response.json()["items"]] == [1000]


def test_merge_with_unknown_policy(client, admin_headers):
    response = client.post("/api/delivery-fees/merge-duplicates?policy=nope", headers=admin_headers)
    assert response.status_code == 400


def test_duplicates_endpoint(client, admin_headers):
    add(client, admin_headers, "중구", 1000)
    assert client.get("/api/delivery-fees/duplicates", headers=admin_headers).json() == []
    add(client, admin_headers, "중구", 1000)
    groups = client.get("/api/delivery-fees/duplicates", headers=admin_headers).json()
    assert [(g["district"], g["count"]) for g in groups] == [("중구", 2)]


def test_update_fee(client, admin_headers):
    fee_id = add(client, admin_headers, "강남구", 1000).json()["items"][0]["id"]

    response = client.put(f"/api/delivery-fees/{fee_id}", json={"fee": 18000}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["items"][0]["fee"] == 18000

    response = client.put(f"/api/delivery-fees/{fee_id}", json={"fee": -1}, headers=admin_headers)
    assert response.status_code == 400


def test_update_missing_record(client, admin_headers):
    response = client.put("/api/delivery-fees/missing", json={"fee": 1000}, headers=admin_headers)
    assert response.status_code == 404


def test_delete_requires_confirmation(client, admin_headers):
    fee_id = add(client, admin_headers, "강남구", 1000).json()["items"][0]["id"]

    response = client.delete(f"/api/delivery-fees/{fee_id}", headers=admin_headers)
    assert response.status_code == 400

    response = client.delete(f"/api/delivery-fees/{fee_id}?confirm=true", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["items"] == []
