"""
데이터베이스 모델 정의
"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean, JSON, UniqueConstraint
from sqlalchemy.orm import declarative_base
from datetime import datetime, timezone

Base = declarative_base()


def utcnow():
    return datetime.now(timezone.utc)


class Document(Base):
    """문서 테이블 (컬렉션 + 문서 ID 단위로 JSON 데이터를 저장)"""
    __tablename__ = "documents"
    __table_args__ = (
        UniqueConstraint("collection", "doc_id", name="uq_documents_collection_doc_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    collection = Column(String(100), nullable=False, index=True)
    doc_id = Column(String(255), nullable=False, index=True)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class Principal(Base):
    """인증 계정 테이블 (이메일 + 비밀번호)"""
    __tablename__ = "principals"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow)
