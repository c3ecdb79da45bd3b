"""
인증 및 session 관리
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from flowershop.config import (
    COLLECTION_EMPLOYEES, COLLECTION_USER_ROLES, COLLECTION_USERS, DEFAULT_DEPARTMENT, ROLE_ADMIN,
    ROLE_CODES, SESSION_COOKIE_NAME
)
from flowershop.database import get_db, get_store
from flowershop.exceptions import BackendUnavailableError, FlowershopError, ValidationError, http_status_for
from flowershop.logger import get_logger
from flowershop.models import Principal
from flowershop.store import DocumentStore
from flowershop.utils import hash_password, verify_password

logger = get_logger(__name__)

# Session 저장소 (운영 환경에서는 Redis 등을 사용)
sessions: Dict[str, Dict] = {}


class AuthService:
    """
    이메일 + 비밀번호 인증 계정 관리

    사용 예:
        auth = AuthService(db)
        auth.create_principal("user@example.com", "secret")
        if auth.verify("user@example.com", "secret"):
            print("로그인 성공")
    """

    def __init__(self, db: Session):
        self.db = db

    def get_principal(self, email: str) -> Optional[Principal]:
        return self.db.query(Principal).filter(Principal.email == email).first()

    def create_principal(self, email: str, password: str) -> Principal:
        """
        인증 계정 생성

        Raises:
            ValidationError: 이미 등록된 이메일인 경우
            BackendUnavailableError: 저장 실패
        """
        if self.get_principal(email):
            raise ValidationError("이미 등록된 이메일입니다.")
        principal = Principal(email=email, password_hash=hash_password(password))
        try:
            self.db.add(principal)
            self.db.commit()
            self.db.refresh(principal)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"인증 계정 생성 실패: {email}: {e}", exc_info=True)
            raise BackendUnavailableError("계정 생성 중 오류가 발생했습니다.") from e
        logger.info(f"인증 계정 생성: {email}")
        return principal

    def verify(self, email: str, password: str) -> bool:
        principal = self.get_principal(email)
        if not principal or not principal.is_active:
            return False
        return verify_password(password, principal.password_hash)

    def change_password(self, email: str, password: str) -> None:
        principal = self.get_principal(email)
        if not principal:
            raise ValidationError("등록되지 않은 이메일입니다.")
        principal.password_hash = hash_password(password)
        self.db.commit()


def create_session(email: str, role: str) -> str:
    """
    session 생성

    Returns:
        str: session ID

    사용 예:
        session_id = create_session("admin@example.com", "관리자")
    """
    session_id = str(uuid.uuid4())
    sessions[session_id] = {"email": email, "role": role}
    return session_id


def get_session(session_id: Optional[str]) -> Optional[Dict]:
    if not session_id:
        return None
    return sessions.get(session_id)


def delete_session(session_id: Optional[str]):
    if session_id in sessions:
        del sessions[session_id]


def get_current_user(
    request: Request,
    store: DocumentStore = Depends(get_store)
) -> Dict[str, Any]:
    """
    현재 로그인한 사용자 (의존성 주입)

    Returns:
        dict: users 컬렉션의 사용자 문서

    Raises:
        HTTPException: 로그인하지 않았거나 사용자 문서가 없는 경우

    사용 예:
        @router.get("/api/protected")
        def protected_route(current_user: dict = Depends(get_current_user)):
            return {"email": current_user["email"]}
    """
    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    if not session_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="로그인이 필요합니다"
        )

    session_data = get_session(session_id)
    if not session_data:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session이 만료되었습니다"
        )

    try:
        user = store.get(COLLECTION_USERS, session_data["email"])
    except FlowershopError as e:
        logger.error(f"로그인 사용자 조회 실패: {session_data['email']}: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail="사용자 정보를 불러오는 중 오류가 발생했습니다.")
    if not user or not user.get("isActive", True):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="사용자가 존재하지 않습니다"
        )
    return user


def require_admin(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    """
    관리자 권한 요구 (의존성 주입)

    Raises:
        HTTPException: 관리자가 아닌 경우
    """
    if user.get("role") != ROLE_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="관리자 권한이 필요합니다"
        )
    return user


def bootstrap_admin(db: Session, store: DocumentStore, email: str, password: str, name: str = "관리자"):
    """
    초기 관리자 계정 생성 (이미 있으면 건너뜀)

    사용 예:
        bootstrap_admin(db, store, "admin@example.com", "admin123")
    """
    auth = AuthService(db)
    if not auth.get_principal(email):
        auth.create_principal(email, password)
    if not store.get(COLLECTION_USERS, email):
        store.set(COLLECTION_USERS, email, {
            "email": email, "role": ROLE_ADMIN, "franchise": "본사", "isActive": True
        })
        store.insert(COLLECTION_EMPLOYEES, {
            "email": email, "name": name, "position": "대표", "contact": "",
            "department": DEFAULT_DEPARTMENT,
            "hireDate": datetime.now(timezone.utc).date().isoformat(),
        })
        store.insert(COLLECTION_USER_ROLES, {
            "email": email, "role": ROLE_CODES[ROLE_ADMIN], "isActive": True
        })
