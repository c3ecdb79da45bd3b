"""
고객 관리 라우터
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from flowershop.auth import get_current_user
from flowershop.config import COLLECTION_CUSTOMERS
from flowershop.database import get_store
from flowershop.exceptions import FlowershopError, ValidationError, http_status_for
from flowershop.logger import get_logger
from flowershop.schemas import CustomerCreate, CustomerResponse, CustomerUpdate
from flowershop.store import DocumentStore
from flowershop.utils import korean_sort_key

logger = get_logger(__name__)

router = APIRouter(prefix="/api/customers", tags=["customers"])


def newest_first(customers: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """등록일 내림차순 (같은 시각이면 나중에 등록된 고객이 앞)"""
    return sorted(reversed(customers), key=lambda c: c.get("createdAt") or "", reverse=True)


def search_by_name(customers: List[Dict[str, Any]], term: str) -> List[Dict[str, Any]]:
    """이름이 검색어로 시작하는 고객 (이름 가나다순)"""
    matched = [c for c in customers if (c.get("name") or "").startswith(term)]
    return sorted(matched, key=lambda c: korean_sort_key(c.get("name")))


def ensure_not_registered(store: DocumentStore, name: str, contact: str, exclude_id: Optional[str] = None):
    """
    이름과 연락처가 모두 같은 고객이 있으면 거부

    Raises:
        ValidationError: 같은 고객이 이미 등록된 경우
    """
    for customer in store.query(COLLECTION_CUSTOMERS, "name", name):
        if customer.get("contact") == contact and customer["id"] != exclude_id:
            raise ValidationError("이미 등록된 고객입니다. 이름과 연락처가 동일한 고객이 존재합니다.")


def get_customer_or_404(store: DocumentStore, customer_id: str) -> Dict[str, Any]:
    try:
        customer = store.get(COLLECTION_CUSTOMERS, customer_id)
    except FlowershopError as e:
        logger.error(f"고객 조회 실패: {customer_id}: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail="고객 정보를 불러오는 중 오류가 발생했습니다.")
    if not customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="고객을 찾을 수 없습니다"
        )
    return customer


@router.get("/", response_model=List[CustomerResponse])
async def list_customers(
    search: Optional[str] = Query(None, description="고객명 앞부분 검색"),
    current_user: Dict[str, Any] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """
    고객 목록

    검색어가 없으면 최근 등록순, 있으면 이름이 검색어로 시작하는 고객을 가나다순으로 반환한다.

    사용 예:
        GET /api/customers/
        GET /api/customers/?search=김
    """
    try:
        customers = store.list_all(COLLECTION_CUSTOMERS)
    except FlowershopError as e:
        logger.error(f"고객 목록 조회 실패: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail="고객 목록을 불러오는 중 오류가 발생했습니다.")

    if search:
        customers = search_by_name(customers, search.strip())
    else:
        customers = newest_first(customers)
    logger.info(f"고객 목록 조회, 총 {len(customers)}명 (검색어: {search or '-'})")
    return [CustomerResponse(**c) for c in customers]


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    customer_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """
    고객 상세

    사용 예:
        GET /api/customers/abc123
    """
    return CustomerResponse(**get_customer_or_404(store, customer_id))


@router.post("/", response_model=CustomerResponse)
async def create_customer(
    data: CustomerCreate,
    current_user: Dict[str, Any] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """
    고객 등록 (이름과 연락처가 같은 고객은 중복으로 거부)

    사용 예:
        POST /api/customers/
        {
            "name": "김고객",
            "contact": "010-1234-5678",
            "address": "서울특별시 강남구"
        }
    """
    try:
        ensure_not_registered(store, data.name, data.contact)
        customer_id = store.insert(COLLECTION_CUSTOMERS, data.model_dump())
    except ValidationError as e:
        logger.warning(f"고객 등록 거부: {data.name}: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail=e.message)
    except FlowershopError as e:
        logger.error(f"고객 등록 실패: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail="고객 등록 중 오류가 발생했습니다.")
    logger.info(f"고객 등록: {data.name} id={customer_id}")
    return CustomerResponse(**get_customer_or_404(store, customer_id))


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: str,
    data: CustomerUpdate,
    current_user: Dict[str, Any] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """
    고객 수정 (입력한 항목만 변경)

    사용 예:
        PUT /api/customers/abc123
        {
            "memo": "장미 선호"
        }
    """
    customer = get_customer_or_404(store, customer_id)
    changes = data.model_dump(exclude_none=True)
    try:
        if "name" in changes or "contact" in changes:
            ensure_not_registered(
                store,
                changes.get("name", customer.get("name")),
                changes.get("contact", customer.get("contact")),
                exclude_id=customer_id
            )
        if changes:
            store.update_fields(COLLECTION_CUSTOMERS, customer_id, changes)
    except ValidationError as e:
        logger.warning(f"고객 수정 거부: {customer_id}: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail=e.message)
    except FlowershopError as e:
        logger.error(f"고객 수정 실패: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail="고객 수정 중 오류가 발생했습니다.")
    logger.info(f"고객 수정: {customer_id} {list(changes)}")
    return CustomerResponse(**get_customer_or_404(store, customer_id))


@router.delete("/{customer_id}")
async def delete_customer(
    customer_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """
    고객 삭제

    사용 예:
        DELETE /api/customers/abc123
    """
    customer = get_customer_or_404(store, customer_id)
    try:
        store.delete_by_id(COLLECTION_CUSTOMERS, customer_id)
    except FlowershopError as e:
        logger.error(f"고객 삭제 실패: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail="고객 삭제 중 오류가 발생했습니다.")
    logger.info(f"고객 삭제: {customer.get('name')} id={customer_id}")
    return {"success": True, "message": "고객이 삭제되었습니다"}
