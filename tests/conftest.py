"""
테스트 공통 설정
"""

import os

os.environ.setdefault("FLOWERSHOP_DATABASE_URL", "sqlite:///./test_flowershop.db")

import pytest
from fastapi.testclient import TestClient

from flowershop.auth import AuthService, bootstrap_admin
from flowershop.config import COLLECTION_EMPLOYEES, COLLECTION_USERS, ROLE_STAFF
from flowershop.database import session_scope
from flowershop.exceptions import BackendUnavailableError
from flowershop.main import app
from flowershop.store import DocumentStore

ADMIN_EMAIL = "testadmin@example.com"
STAFF_EMAIL = "teststaff@example.com"
PASSWORD = "testpass"


class MemoryStore(DocumentStore):
    """
    호출 기록을 남기는 메모리 문서 저장소

    fail_on에 메서드 이름이나 (메서드, 컬렉션)을 넣으면 해당 호출이 실패한다.
    """

    def __init__(self):
        self.collections = {}
        self.calls = []
        self.fail_on = set()
        self._counter = 0

    def _tick(self):
        self._counter += 1
        return self._counter

    def _record(self, method, collection, *args):
        self.calls.append((method, collection) + args)
        if method in self.fail_on or (method, collection) in self.fail_on:
            raise BackendUnavailableError(f"저장소 작업에 실패했습니다: {method}")

    def seed(self, collection, fields):
        """호출 기록 없이 문서 추가"""
        tick = self._tick()
        doc_id = f"doc-{tick}"
        self.collections.setdefault(collection, {})[doc_id] = dict(
            fields, id=doc_id, updatedAt=f"2026-01-01T00:00:{tick:02d}"
        )
        return doc_id

    def list_all(self, collection):
        self._record("list_all", collection)
        return [dict(d) for d in self.collections.get(collection, {}).values()]

    def get(self, collection, doc_id):
        self._record("get", collection, doc_id)
        document = self.collections.get(collection, {}).get(doc_id)
        return dict(document) if document else None

    def insert(self, collection, fields):
        self._record("insert", collection, fields)
        tick = self._tick()
        doc_id = f"doc-{tick}"
        self.collections.setdefault(collection, {})[doc_id] = dict(
            fields, id=doc_id, updatedAt=f"2026-01-01T00:00:{tick:02d}"
        )
        return doc_id

    def set(self, collection, doc_id, fields):
        self._record("set", collection, doc_id, fields)
        self.collections.setdefault(collection, {})[doc_id] = dict(fields, id=doc_id)

    def update_fields(self, collection, doc_id, partial):
        self._record("update_fields", collection, doc_id, partial)
        document = self.collections[collection][doc_id]
        document.update(partial)
        document["updatedAt"] = f"2026-01-01T00:00:{self._tick():02d}"

    def delete_by_id(self, collection, doc_id):
        self._record("delete_by_id", collection, doc_id)
        self.collections.get(collection, {}).pop(doc_id, None)

    def methods(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture(scope="session")
def client():
    """애플리케이션 수명 주기(저장소 생성 포함)를 실행하는 테스트 클라이언트"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def store(client):
    return app.state.store


@pytest.fixture(autouse=True)
def setup_users(client):
    """테스트 전 관리자/직원 계정 준비"""
    store = app.state.store
    with session_scope() as db:
        bootstrap_admin(db, store, ADMIN_EMAIL, PASSWORD, name="테스트관리자")
        auth = AuthService(db)
        if not auth.get_principal(STAFF_EMAIL):
            auth.create_principal(STAFF_EMAIL, PASSWORD)
        if not store.get(COLLECTION_USERS, STAFF_EMAIL):
            store.set(COLLECTION_USERS, STAFF_EMAIL, {
                "email": STAFF_EMAIL, "role": ROLE_STAFF, "franchise": "메인매장", "isActive": True
            })
            store.insert(COLLECTION_EMPLOYEES, {
                "email": STAFF_EMAIL, "name": "테스트직원", "position": "플로리스트", "contact": "010-0000-0000"
            })
    yield


def get_auth_headers(client, email=ADMIN_EMAIL, password=PASSWORD):
    """로그인 후 session cookie 헤더 반환"""
    response = client.post("/api/users/login", json={"email": email, "password": password})
    headers = {}
    if response.status_code == 200 and response.json().get("success"):
        headers = {"Cookie": f"flowershop_session={response.cookies.get('flowershop_session')}"}
    client.cookies.clear()
    return headers


@pytest.fixture
def admin_headers(client):
    return get_auth_headers(client, ADMIN_EMAIL)


@pytest.fixture
def staff_headers(client):
    return get_auth_headers(client, STAFF_EMAIL)


@pytest.fixture
def login(client):
    """다른 계정으로 로그인하는 헬퍼 (실패 시 빈 헤더)"""
    def _login(email, password=PASSWORD):
        return get_auth_headers(client, email, password)
    return _login
