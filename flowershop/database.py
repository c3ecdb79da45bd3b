"""
데이터베이스 연결, 세션, 문서 저장소 의존성
"""

from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from flowershop.config import DATABASE_URL
from flowershop.models import Base

# SQLite는 요청 스레드가 바뀌어도 같은 연결을 쓰도록 허용
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db():
    """documents, principals 테이블 생성 (이미 있으면 유지)"""
    Base.metadata.create_all(bind=engine)


@contextmanager
def session_scope() -> Iterator[Session]:
    """
    스크립트와 테스트에서 쓰는 세션 범위 (끝나면 닫힘)

    사용 예:
        with session_scope() as db:
            AuthService(db).create_principal("staff@example.com", "123456")
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_db() -> Iterator[Session]:
    """인증 계정 조회용 세션 (의존성 주입)"""
    with session_scope() as db:
        yield db


def create_store():
    """
    문서 저장소 생성 (애플리케이션 시작 시 한 번 호출)

    사용 예:
        store = create_store()
    """
    from flowershop.store import SqlDocumentStore
    return SqlDocumentStore(SessionLocal)


def get_store(request: Request):
    """
    애플리케이션에 등록된 문서 저장소 (의존성 주입)

    사용 예:
        @router.get("/")
        def route(store: DocumentStore = Depends(get_store)):
            ...
    """
    return request.app.state.store
