"""
배송비 관리 라우터
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from flowershop.auth import get_current_user, require_admin
from flowershop.config import DEFAULT_RETENTION_POLICY, REJECT_DUPLICATE_DISTRICT
from flowershop.database import get_store
from flowershop.delivery_fees import DeliveryFeeRecord, DistrictFeeRegistry
from flowershop.exceptions import FlowershopError, http_status_for
from flowershop.logger import get_logger
from flowershop.schemas import (
    DeliveryFeeCreate, DeliveryFeeListResponse, DeliveryFeeResponse, DeliveryFeeUpdate,
    DuplicateGroupResponse, MergeDuplicatesResponse
)
from flowershop.store import DocumentStore
from flowershop.utils import format_won

logger = get_logger(__name__)

router = APIRouter(prefix="/api/delivery-fees", tags=["delivery-fees"])


def get_registry(store: DocumentStore = Depends(get_store)) -> DistrictFeeRegistry:
    return DistrictFeeRegistry(store, reject_duplicate_insert=REJECT_DUPLICATE_DISTRICT)


def to_response(record: DeliveryFeeRecord, duplicate_districts=()) -> DeliveryFeeResponse:
    return DeliveryFeeResponse(
        id=record.id,
        district=record.district,
        fee=record.fee,
        fee_display=format_won(record.fee),
        is_duplicate=record.district in duplicate_districts
    )


def build_list_response(registry: DistrictFeeRegistry) -> DeliveryFeeListResponse:
    """메모리 목록으로 목록 응답 구성 (중복 묶음은 매번 새로 계산)"""
    groups = registry.detect_duplicates()
    duplicate_districts = {g.district for g in groups}
    return DeliveryFeeListResponse(
        items=[to_response(r, duplicate_districts) for r in registry.records],
        duplicates=[
            DuplicateGroupResponse(
                district=g.district,
                count=g.count,
                items=[to_response(r, duplicate_districts) for r in g.items]
            )
            for g in groups
        ],
        summary=registry.summary()
    )


def raise_for(error: FlowershopError, action: str):
    if http_status_for(error) >= 500:
        logger.error(f"{action} 실패: {error.message}")
        raise HTTPException(status_code=http_status_for(error), detail=f"{action} 중 오류가 발생했습니다.")
    logger.warning(f"{action} 거부: {error.message}")
    raise HTTPException(status_code=http_status_for(error), detail=error.message)


@router.get("/", response_model=DeliveryFeeListResponse)
async def list_delivery_fees(
    current_user: Dict[str, Any] = Depends(get_current_user),
    registry: DistrictFeeRegistry = Depends(get_registry)
):
    """
    지역별 배송비 목록 (가나다순, 중복 표시 및 통계 포함)

    사용 예:
        GET /api/delivery-fees/
    """
    try:
        registry.refresh()
    except FlowershopError as e:
        raise_for(e, "배송비 정보 조회")
    logger.info(f"배송비 목록 조회, 총 {len(registry.records)}개 지역")
    return build_list_response(registry)


@router.get("/duplicates", response_model=List[DuplicateGroupResponse])
async def list_duplicates(
    current_user: Dict[str, Any] = Depends(get_current_user),
    registry: DistrictFeeRegistry = Depends(get_registry)
):
    """
    중복 지역 목록 (중복이 없으면 빈 목록)

    사용 예:
        GET /api/delivery-fees/duplicates
    """
    try:
        registry.refresh()
    except FlowershopError as e:
        raise_for(e, "중복 지역 조회")
    return build_list_response(registry).duplicates


@router.post("/", response_model=DeliveryFeeListResponse)
async def add_district(
    data: DeliveryFeeCreate,
    current_user: Dict[str, Any] = Depends(require_admin),
    registry: DistrictFeeRegistry = Depends(get_registry)
):
    """
    새 지역 추가

    사용 예:
        POST /api/delivery-fees/
        {
            "district": "강남구",
            "fee": 15000
        }
    """
    try:
        if registry.reject_duplicate_insert:
            registry.refresh()
        registry.add_district(data.district, data.fee)
    except FlowershopError as e:
        raise_for(e, "지역 추가")
    return build_list_response(registry)


@router.put("/{fee_id}", response_model=DeliveryFeeListResponse)
async def update_delivery_fee(
    fee_id: str,
    data: DeliveryFeeUpdate,
    current_user: Dict[str, Any] = Depends(require_admin),
    registry: DistrictFeeRegistry = Depends(get_registry)
):
    """
    배송비 수정

    사용 예:
        PUT /api/delivery-fees/abc123
        {
            "fee": 18000
        }
    """
    try:
        registry.update_fee(fee_id, data.fee)
    except FlowershopError as e:
        raise_for(e, "배송비 수정")
    return build_list_response(registry)


@router.delete("/{fee_id}", response_model=DeliveryFeeListResponse)
async def delete_district(
    fee_id: str,
    confirm: bool = Query(False, description="삭제 확인"),
    current_user: Dict[str, Any] = Depends(require_admin),
    registry: DistrictFeeRegistry = Depends(get_registry)
):
    """
    지역 삭제 (confirm=true 필요)

    사용 예:
        DELETE /api/delivery-fees/abc123?confirm=true
    """
    try:
        record = registry.store.get(registry.collection, fee_id)
        name = record.get("district", fee_id) if record else fee_id
        registry.delete_district(fee_id, name, confirmed=confirm)
    except FlowershopError as e:
        raise_for(e, "지역 삭제")
    return build_list_response(registry)


@router.post("/merge-duplicates", response_model=MergeDuplicatesResponse)
async def merge_duplicates(
    policy: Optional[str] = Query(None, description="유지 정책: keep_first, keep_latest, keep_lowest_fee"),
    current_user: Dict[str, Any] = Depends(require_admin),
    registry: DistrictFeeRegistry = Depends(get_registry)
):
    """
    중복 지역 정리

    사용 예:
        POST /api/delivery-fees/merge-duplicates?policy=keep_latest
    """
    policy_name = policy or DEFAULT_RETENTION_POLICY
    try:
        registry.refresh()
        removed = registry.merge_duplicates(policy_name)
    except FlowershopError as e:
        raise_for(e, "중복 제거")
    logger.info(f"중복 제거 완료: {len(removed)}건 삭제 (정책: {policy_name})")
    return MergeDuplicatesResponse(
        removed_ids=removed,
        policy=policy_name,
        items=[to_response(r) for r in registry.records]
    )
