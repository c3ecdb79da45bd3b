"""
문서 저장소

컬렉션/문서 단위의 키-값 저장소 인터페이스와 SQLAlchemy 기반 구현.
서비스 계층은 DocumentStore 인터페이스만 사용하며, 실제 인스턴스는
애플리케이션 시작 시 한 번 생성되어 의존성 주입으로 전달된다.
"""

import uuid
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from flowershop.exceptions import BackendUnavailableError, NotFoundError
from flowershop.logger import get_logger
from flowershop.models import Document, utcnow

logger = get_logger(__name__)


class DocumentStore:
    """
    문서 저장소 인터페이스

    모든 레코드는 {"id": 문서 ID, ...필드} 형태의 dict로 반환된다.
    """

    def list_all(self, collection: str) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def insert(self, collection: str, fields: Dict[str, Any]) -> str:
        raise NotImplementedError

    def set(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        raise NotImplementedError

    def update_fields(self, collection: str, doc_id: str, partial: Dict[str, Any]) -> None:
        raise NotImplementedError

    def delete_by_id(self, collection: str, doc_id: str) -> None:
        raise NotImplementedError

    def query(
        self,
        collection: str,
        field: str,
        value: Any,
        order_by: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        필드 동등 조건 조회 (정렬 키 1개 선택 가능)

        기본 구현은 list_all 결과를 걸러낸다.
        """
        records = [r for r in self.list_all(collection) if r.get(field) == value]
        if order_by:
            records.sort(key=lambda r: (r.get(order_by) is None, r.get(order_by)))
        return records


def _to_record(document: Document) -> Dict[str, Any]:
    record = dict(document.data or {})
    record["id"] = document.doc_id
    record["createdAt"] = document.created_at.isoformat() if document.created_at else None
    record["updatedAt"] = document.updated_at.isoformat() if document.updated_at else None
    return record


def _clean_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    # 메타 필드는 컬럼으로 관리
    return {k: v for k, v in fields.items() if k not in ("id", "createdAt", "updatedAt")}


class SqlDocumentStore(DocumentStore):
    """
    SQLAlchemy documents 테이블 위에 구현한 문서 저장소

    사용 예:
        from flowershop.database import SessionLocal
        store = SqlDocumentStore(SessionLocal)
        doc_id = store.insert("deliveryFees", {"district": "강남구", "fee": 15000})
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @contextmanager
    def _session(self, operation: str, collection: str):
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"저장소 작업 실패: {operation} ({collection}): {e}", exc_info=True)
            raise BackendUnavailableError(f"저장소 작업에 실패했습니다: {operation}") from e
        finally:
            db.close()

    @staticmethod
    def _find(db, collection: str, doc_id: str) -> Optional[Document]:
        return db.query(Document).filter(
            Document.collection == collection,
            Document.doc_id == doc_id
        ).first()

    def list_all(self, collection: str) -> List[Dict[str, Any]]:
        with self._session("list_all", collection) as db:
            documents = db.query(Document).filter(
                Document.collection == collection
            ).order_by(Document.id).all()
            return [_to_record(d) for d in documents]

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        with self._session("get", collection) as db:
            document = self._find(db, collection, doc_id)
            return _to_record(document) if document else None

    def insert(self, collection: str, fields: Dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex
        with self._session("insert", collection) as db:
            db.add(Document(collection=collection, doc_id=doc_id, data=_clean_fields(fields)))
            db.commit()
        logger.debug(f"문서 생성: {collection}/{doc_id}")
        return doc_id

    def set(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        with self._session("set", collection) as db:
            document = self._find(db, collection, doc_id)
            if document:
                document.data = _clean_fields(fields)
                document.updated_at = utcnow()
            else:
                db.add(Document(collection=collection, doc_id=doc_id, data=_clean_fields(fields)))
            db.commit()
        logger.debug(f"문서 저장: {collection}/{doc_id}")

    def update_fields(self, collection: str, doc_id: str, partial: Dict[str, Any]) -> None:
        with self._session("update_fields", collection) as db:
            document = self._find(db, collection, doc_id)
            if not document:
                raise NotFoundError(f"문서를 찾을 수 없습니다: {collection}/{doc_id}")
            # JSON 컬럼은 변경 추적이 안 되므로 새 dict로 교체
            data = dict(document.data or {})
            data.update(_clean_fields(partial))
            document.data = data
            document.updated_at = utcnow()
            db.commit()
        logger.debug(f"문서 수정: {collection}/{doc_id}")

    def delete_by_id(self, collection: str, doc_id: str) -> None:
        with self._session("delete_by_id", collection) as db:
            document = self._find(db, collection, doc_id)
            if document:
                db.delete(document)
                db.commit()
        logger.debug(f"문서 삭제: {collection}/{doc_id}")
