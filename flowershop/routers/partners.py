"""
거래처 관리 라우터
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from flowershop.auth import get_current_user, require_admin
from flowershop.config import COLLECTION_PARTNERS
from flowershop.database import get_store
from flowershop.exceptions import FlowershopError, http_status_for
from flowershop.logger import get_logger
from flowershop.schemas import (
    PartnerBulkRequest, PartnerBulkResponse, PartnerCreate, PartnerResponse, PartnerUpdate
)
from flowershop.store import DocumentStore
from flowershop.utils import korean_sort_key

logger = get_logger(__name__)

router = APIRouter(prefix="/api/partners", tags=["partners"])

PARTNER_FIELDS = ("name", "type", "contact", "contactPerson", "email", "address", "branch", "memo")


def normalize_row(row: Dict[str, Any]) -> Optional[Dict[str, str]]:
    """
    일괄 등록 행을 거래처 필드로 변환

    Returns:
        dict: 거래처 필드 (거래처명이나 유형이 비어 있으면 None)
    """
    partner = {
        field: str(row.get(field) if row.get(field) is not None else "").strip()
        for field in PARTNER_FIELDS
    }
    if not partner["name"] or not partner["type"]:
        return None
    return partner


def is_registered(store: DocumentStore, partner: Dict[str, str]) -> bool:
    """거래처명이 같거나, 비어 있지 않은 연락처 또는 담당자가 같으면 이미 등록된 거래처"""
    if store.query(COLLECTION_PARTNERS, "name", partner["name"]):
        return True
    for field in ("contact", "contactPerson"):
        if partner[field] and store.query(COLLECTION_PARTNERS, field, partner[field]):
            return True
    return False


def bulk_add_partners(store: DocumentStore, rows: List[Dict[str, Any]]) -> Dict[str, int]:
    """
    거래처 일괄 등록

    행마다 중복을 확인하고 새 거래처만 추가한다. 한 행의 저장 실패는 기록만 하고
    나머지 행은 계속 처리한다. 같은 요청 안에서 앞서 추가된 거래처도 중복 확인 대상이다.

    Args:
        store: 문서 저장소
        rows: 엑셀 시트에서 읽은 행 목록

    Returns:
        dict: new_count, duplicate_count, skipped_count, error_count

    사용 예:
        counts = bulk_add_partners(store, [{"name": "꽃시장", "type": "공급업체"}])
    """
    counts = {"new_count": 0, "duplicate_count": 0, "skipped_count": 0, "error_count": 0}
    for index, row in enumerate(rows):
        partner = normalize_row(row)
        if partner is None:
            counts["skipped_count"] += 1
            continue
        try:
            if is_registered(store, partner):
                counts["duplicate_count"] += 1
                continue
            store.insert(COLLECTION_PARTNERS, partner)
            counts["new_count"] += 1
        except FlowershopError as e:
            logger.error(f"거래처 일괄 등록 중 {index + 1}번째 행 처리 실패: {e.message}")
            counts["error_count"] += 1
    return counts


def list_partner_responses(store: DocumentStore) -> List[PartnerResponse]:
    partners = store.list_all(COLLECTION_PARTNERS)
    partners.sort(key=lambda p: korean_sort_key(p.get("name")))
    return [PartnerResponse(**p) for p in partners]


def get_partner_or_404(store: DocumentStore, partner_id: str) -> Dict[str, Any]:
    try:
        partner = store.get(COLLECTION_PARTNERS, partner_id)
    except FlowershopError as e:
        logger.error(f"거래처 조회 실패: {partner_id}: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail="거래처 정보를 불러오는 중 오류가 발생했습니다.")
    if not partner:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="거래처를 찾을 수 없습니다"
        )
    return partner


@router.get("/", response_model=List[PartnerResponse])
async def list_partners(
    current_user: Dict[str, Any] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """
    거래처 목록 (거래처명 가나다순)

    사용 예:
        GET /api/partners/
    """
    try:
        partners = list_partner_responses(store)
    except FlowershopError as e:
        logger.error(f"거래처 목록 조회 실패: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail="거래처 정보를 불러오는 중 오류가 발생했습니다.")
    logger.info(f"거래처 목록 조회, 총 {len(partners)}개")
    return partners


@router.get("/{partner_id}", response_model=PartnerResponse)
async def get_partner(
    partner_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """
    거래처 상세

    사용 예:
        GET /api/partners/abc123
    """
    return PartnerResponse(**get_partner_or_404(store, partner_id))


@router.post("/", response_model=PartnerResponse)
async def create_partner(
    data: PartnerCreate,
    current_user: Dict[str, Any] = Depends(require_admin),
    store: DocumentStore = Depends(get_store)
):
    """
    거래처 추가

    사용 예:
        POST /api/partners/
        {
            "name": "양재꽃시장",
            "type": "공급업체",
            "contact": "02-123-4567",
            "contactPerson": "박담당"
        }
    """
    try:
        partner_id = store.insert(COLLECTION_PARTNERS, data.model_dump())
    except FlowershopError as e:
        logger.error(f"거래처 추가 실패: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail="거래처 추가 중 오류가 발생했습니다.")
    logger.info(f"거래처 추가: {data.name} id={partner_id}")
    return PartnerResponse(**get_partner_or_404(store, partner_id))


@router.post("/bulk", response_model=PartnerBulkResponse)
async def bulk_create_partners(
    data: PartnerBulkRequest,
    current_user: Dict[str, Any] = Depends(require_admin),
    store: DocumentStore = Depends(get_store)
):
    """
    거래처 일괄 등록

    거래처명과 유형이 없는 행은 건너뛰고, 이미 등록된 거래처는 제외한다.

    사용 예:
        POST /api/partners/bulk
        {
            "rows": [
                {"name": "양재꽃시장", "type": "공급업체", "contact": "02-123-4567"},
                {"name": "리본공방", "type": "자재"}
            ]
        }
    """
    counts = bulk_add_partners(store, data.rows)
    if counts["error_count"]:
        logger.warning(f"거래처 일괄 등록: {counts['error_count']}개 항목 처리 중 오류")
    logger.info(
        f"거래처 일괄 등록 완료: 신규 {counts['new_count']}개, 중복 {counts['duplicate_count']}개 제외"
    )
    try:
        items = list_partner_responses(store)
    except FlowershopError as e:
        logger.error(f"거래처 목록 조회 실패: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail="거래처 정보를 불러오는 중 오류가 발생했습니다.")
    return PartnerBulkResponse(items=items, **counts)


@router.put("/{partner_id}", response_model=PartnerResponse)
async def update_partner(
    partner_id: str,
    data: PartnerUpdate,
    current_user: Dict[str, Any] = Depends(require_admin),
    store: DocumentStore = Depends(get_store)
):
    """
    거래처 수정 (입력한 항목만 변경)

    사용 예:
        PUT /api/partners/abc123
        {
            "memo": "월말 정산"
        }
    """
    get_partner_or_404(store, partner_id)
    changes = data.model_dump(exclude_none=True)
    try:
        if changes:
            store.update_fields(COLLECTION_PARTNERS, partner_id, changes)
    except FlowershopError as e:
        logger.error(f"거래처 수정 실패: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail="거래처 정보 수정 중 오류가 발생했습니다.")
    logger.info(f"거래처 수정: {partner_id} {list(changes)}")
    return PartnerResponse(**get_partner_or_404(store, partner_id))


@router.delete("/{partner_id}")
async def delete_partner(
    partner_id: str,
    current_user: Dict[str, Any] = Depends(require_admin),
    store: DocumentStore = Depends(get_store)
):
    """
    거래처 삭제

    사용 예:
        DELETE /api/partners/abc123
    """
    partner = get_partner_or_404(store, partner_id)
    try:
        store.delete_by_id(COLLECTION_PARTNERS, partner_id)
    except FlowershopError as e:
        logger.error(f"거래처 삭제 실패: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail="거래처 삭제 중 오류가 발생했습니다.")
    logger.info(f"거래처 삭제: {partner.get('name')} id={partner_id}")
    return {"success": True, "message": "거래처 정보가 삭제되었습니다"}
