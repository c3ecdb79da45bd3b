"""
사용자 관리 라우터
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from flowershop.auth import AuthService, create_session, delete_session, get_current_user, require_admin
from flowershop.config import (
    COLLECTION_EMPLOYEES, COLLECTION_USER_ROLES, COLLECTION_USERS, DEFAULT_DEPARTMENT,
    DEFAULT_PASSWORD, ROLE_CODES, ROLE_STAFF, SESSION_COOKIE_NAME, SESSION_MAX_AGE
)
from flowershop.database import get_db, get_store
from flowershop.exceptions import FlowershopError, http_status_for
from flowershop.logger import get_logger
from flowershop.schemas import (
    LoginRequest, LoginResponse, PasswordUpdate, UserCreate, UserResponse, UserUpdate
)
from flowershop.store import DocumentStore

logger = get_logger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


def raise_store_error(error: FlowershopError, email: str):
    logger.error(f"사용자 정보 조회 실패: {email}: {error.message}")
    raise HTTPException(status_code=http_status_for(error), detail="사용자 정보를 불러오는 중 오류가 발생했습니다.")


def load_user(store: DocumentStore, email: str) -> Optional[Dict[str, Any]]:
    """users 문서 조회 (저장소 오류는 HTTP 오류로 변환)"""
    try:
        return store.get(COLLECTION_USERS, email)
    except FlowershopError as e:
        raise_store_error(e, email)


def find_employee(store: DocumentStore, email: str):
    try:
        employees = store.query(COLLECTION_EMPLOYEES, "email", email)
    except FlowershopError as e:
        raise_store_error(e, email)
    return employees[0] if employees else None


def build_user_response(store: DocumentStore, user: Dict[str, Any]) -> UserResponse:
    """users 문서와 employees 문서를 합쳐 응답 생성"""
    employee = find_employee(store, user["email"]) or {}
    return UserResponse(
        email=user["email"],
        role=user.get("role", ""),
        franchise=user.get("franchise", ""),
        isActive=user.get("isActive", True),
        name=employee.get("name"),
        position=employee.get("position"),
        contact=employee.get("contact"),
    )


def validate_role(role: str):
    if role not in ROLE_CODES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"유효하지 않은 권한입니다. 가능한 값: {', '.join(ROLE_CODES)}"
        )


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: LoginRequest,
    response: Response,
    request: Request,
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_store)
):
    """
    로그인

    사용 예:
        POST /api/users/login
        {
            "email": "admin@example.com",
            "password": "admin123"
        }
    """
    user = load_user(store, login_data.email)
    if not AuthService(db).verify(login_data.email, login_data.password) or not user:
        logger.warning(
            "로그인 실패: 이메일 또는 비밀번호 오류",
            extra={
                "email": login_data.email,
                "client": request.client.host if request.client else None,
            }
        )
        return LoginResponse(success=False, message="이메일 또는 비밀번호가 올바르지 않습니다")

    session_id = create_session(user["email"], user.get("role", ROLE_STAFF))
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session_id,
        max_age=SESSION_MAX_AGE,
        httponly=True,
        samesite="lax"
    )
    logger.info(f"로그인 성공: {user['email']} (권한: {user.get('role')})")
    return LoginResponse(success=True, message="로그인 성공", user=build_user_response(store, user))


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """
    로그아웃

    사용 예:
        POST /api/users/logout
    """
    delete_session(request.cookies.get(SESSION_COOKIE_NAME))
    response.delete_cookie(key=SESSION_COOKIE_NAME)
    return {"success": True, "message": "로그아웃 되었습니다"}


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: Dict[str, Any] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """
    현재 사용자 정보

    사용 예:
        GET /api/users/me
    """
    return build_user_response(store, current_user)


@router.put("/me/password")
async def update_own_password(
    password_data: PasswordUpdate,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    본인 비밀번호 변경

    사용 예:
        PUT /api/users/me/password
        {
            "password": "newpassword123"
        }
    """
    AuthService(db).change_password(current_user["email"], password_data.password)
    logger.info(f"비밀번호 변경: {current_user['email']}")
    return {"success": True, "message": "비밀번호가 변경되었습니다"}


@router.get("/", response_model=List[UserResponse])
async def list_users(
    current_user: Dict[str, Any] = Depends(require_admin),
    store: DocumentStore = Depends(get_store)
):
    """
    사용자 목록 (관리자)

    사용 예:
        GET /api/users/
    """
    try:
        users = store.list_all(COLLECTION_USERS)
    except FlowershopError as e:
        raise_store_error(e, "*")
    return [build_user_response(store, u) for u in users]


@router.get("/{email}", response_model=UserResponse)
async def get_user(
    email: str,
    current_user: Dict[str, Any] = Depends(require_admin),
    store: DocumentStore = Depends(get_store)
):
    """
    사용자 상세 (관리자)

    사용 예:
        GET /api/users/user@example.com
    """
    user = load_user(store, email)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="사용자 문서를 찾을 수 없습니다.")
    return build_user_response(store, user)


@router.post("/", response_model=UserResponse)
async def create_user(
    user_data: UserCreate,
    current_user: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_store)
):
    """
    사용자 추가 (관리자)

    인증 계정, users 문서, employees 문서를 함께 생성한다.
    비밀번호를 비우면 기본 비밀번호를 사용한다.

    사용 예:
        POST /api/users/
        {
            "email": "staff@example.com",
            "role": "직원",
            "franchise": "메인매장",
            "name": "김직원",
            "position": "플로리스트",
            "contact": "010-1234-5678"
        }
    """
    validate_role(user_data.role)
    if load_user(store, user_data.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="이미 등록된 이메일입니다.")

    try:
        AuthService(db).create_principal(user_data.email, user_data.password or DEFAULT_PASSWORD)
        store.set(COLLECTION_USERS, user_data.email, {
            "email": user_data.email,
            "role": user_data.role,
            "franchise": user_data.franchise,
            "isActive": True,
        })
        store.insert(COLLECTION_EMPLOYEES, {
            "email": user_data.email,
            "name": user_data.name,
            "position": user_data.position,
            "contact": user_data.contact,
            "department": DEFAULT_DEPARTMENT,
            "hireDate": datetime.now(timezone.utc).date().isoformat(),
        })
    except FlowershopError as e:
        logger.warning(f"사용자 추가 실패: {user_data.email}: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail=e.message)

    logger.info(f"사용자 추가: {user_data.email} ({user_data.role}), 기본 비밀번호 사용: {not user_data.password}")
    return build_user_response(store, load_user(store, user_data.email))


@router.put("/{email}", response_model=UserResponse)
async def update_user(
    email: str,
    user_data: UserUpdate,
    current_user: Dict[str, Any] = Depends(require_admin),
    store: DocumentStore = Depends(get_store)
):
    """
    사용자 수정 (관리자)

    권한/소속은 users 문서에, 이름/직위/연락처는 employees 문서에 반영한다.
    직원 문서가 없으면 새로 만든다.

    사용 예:
        PUT /api/users/staff@example.com
        {
            "role": "관리자",
            "franchise": "메인매장",
            "name": "김직원",
            "position": "점장",
            "contact": "010-1234-5678"
        }
    """
    validate_role(user_data.role)
    user = load_user(store, email)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="사용자 문서를 찾을 수 없습니다.")

    try:
        store.update_fields(COLLECTION_USERS, email, {
            "role": user_data.role,
            "franchise": user_data.franchise,
        })

        employee = find_employee(store, email)
        employee_fields = {
            "name": user_data.name,
            "position": user_data.position,
            "contact": user_data.contact,
        }
        if employee:
            store.update_fields(COLLECTION_EMPLOYEES, employee["id"], employee_fields)
        else:
            store.insert(COLLECTION_EMPLOYEES, {
                "email": email,
                **employee_fields,
                "department": DEFAULT_DEPARTMENT,
                "hireDate": datetime.now(timezone.utc).date().isoformat(),
            })

        for user_role in store.query(COLLECTION_USER_ROLES, "email", email)[:1]:
            store.update_fields(COLLECTION_USER_ROLES, user_role["id"], {
                "role": ROLE_CODES.get(user_data.role, ROLE_CODES[ROLE_STAFF])
            })
    except FlowershopError as e:
        logger.error(f"사용자 수정 실패: {email}: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail="사용자 정보 저장 중 오류가 발생했습니다.")

    logger.info(f"사용자 수정: {email} ({user_data.role})")
    return build_user_response(store, load_user(store, email))


@router.delete("/{email}")
async def deactivate_user(
    email: str,
    current_user: Dict[str, Any] = Depends(require_admin),
    store: DocumentStore = Depends(get_store)
):
    """
    사용자 비활성화 (관리자, 본인은 불가)

    사용 예:
        DELETE /api/users/staff@example.com
    """
    if email == current_user["email"]:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="본인 계정은 비활성화할 수 없습니다")
    if not load_user(store, email):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="사용자 문서를 찾을 수 없습니다.")
    try:
        store.update_fields(COLLECTION_USERS, email, {"isActive": False})
    except FlowershopError as e:
        logger.error(f"사용자 비활성화 실패: {email}: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail="사용자 정보 저장 중 오류가 발생했습니다.")
    logger.info(f"사용자 비활성화: {email}")
    return {"success": True, "message": "사용자가 비활성화되었습니다"}
