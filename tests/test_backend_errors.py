"""
저장소 장애 시 API 응답 테스트
"""

import pytest

from flowershop.database import get_store
from flowershop.main import app

ADMIN_EMAIL = "testadmin@example.com"


@pytest.fixture
def failing_store(memory_store, admin_headers):
    """관리자 문서만 가진 메모리 저장소로 교체"""
    memory_store.collections["users"] = {
        ADMIN_EMAIL: {"id": ADMIN_EMAIL, "email": ADMIN_EMAIL, "role": "관리자", "franchise": "본사", "isActive": True}
    }
    app.dependency_overrides[get_store] = lambda: memory_store
    yield memory_store
    app.dependency_overrides.pop(get_store, None)


def test_order_lookup_failure(client, admin_headers, failing_store):
    failing_store.fail_on = {("get", "orders")}
    response = client.get("/api/orders/abc/message-print", headers=admin_headers)
    assert response.status_code == 503


def test_order_message_update_lookup_failure(client, admin_headers, failing_store):
    failing_store.fail_on = {("get", "orders")}
    response = client.put(
        "/api/orders/abc/message", json={"messageContent": "축하해요"}, headers=admin_headers
    )
    assert response.status_code == 503


def test_material_lookup_failure(client, admin_headers, failing_store):
    failing_store.fail_on = {("get", "materials")}
    assert client.get("/api/materials/abc", headers=admin_headers).status_code == 503
    assert client.get("/api/materials/abc/barcode", headers=admin_headers).status_code == 503


def test_current_user_lookup_failure(client, admin_headers, failing_store):
    failing_store.fail_on = {("get", "users")}
    assert client.get("/api/users/me", headers=admin_headers).status_code == 503


def test_employee_lookup_failure(client, admin_headers, failing_store):
    failing_store.fail_on = {("list_all", "employees")}
    assert client.get("/api/users/me", headers=admin_headers).status_code == 503


def test_user_list_failure(client, admin_headers, failing_store):
    failing_store.fail_on = {("list_all", "users")}
    assert client.get("/api/users/", headers=admin_headers).status_code == 503


def test_missing_order_is_still_not_found(client, admin_headers, failing_store):
    assert client.get("/api/orders/abc/message-print", headers=admin_headers).status_code == 404
