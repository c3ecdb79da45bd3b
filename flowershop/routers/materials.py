"""
자재 관리 라우터
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from flowershop.auth import get_current_user, require_admin
from flowershop.barcodes import render_barcode_svg
from flowershop.config import COLLECTION_MATERIALS
from flowershop.database import get_store
from flowershop.exceptions import FlowershopError, http_status_for
from flowershop.logger import get_logger
from flowershop.schemas import MaterialCreate, MaterialResponse, MaterialUpdate
from flowershop.store import DocumentStore
from flowershop.utils import korean_sort_key

logger = get_logger(__name__)

router = APIRouter(prefix="/api/materials", tags=["materials"])


def get_material_or_404(store: DocumentStore, material_id: str) -> Dict[str, Any]:
    try:
        material = store.get(COLLECTION_MATERIALS, material_id)
    except FlowershopError as e:
        logger.error(f"자재 조회 실패: {material_id}: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail="자재 정보를 불러오는 중 오류가 발생했습니다.")
    if not material:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="자재를 찾을 수 없습니다"
        )
    return material


@router.get("/", response_model=List[MaterialResponse])
async def list_materials(
    branch: Optional[str] = Query(None, description="지점 필터"),
    current_user: Dict[str, Any] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """
    자재 목록 (자재명 가나다순)

    사용 예:
        GET /api/materials/?branch=강남점
    """
    try:
        if branch:
            materials = store.query(COLLECTION_MATERIALS, "branch", branch)
        else:
            materials = store.list_all(COLLECTION_MATERIALS)
    except FlowershopError as e:
        raise HTTPException(status_code=http_status_for(e), detail="자재 정보를 불러오는 중 오류가 발생했습니다.")
    materials.sort(key=lambda m: korean_sort_key(m.get("name", "")))
    logger.info(f"자재 목록 조회, 총 {len(materials)}개")
    return [MaterialResponse(**m) for m in materials]


@router.get("/{material_id}", response_model=MaterialResponse)
async def get_material(
    material_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """
    자재 상세

    사용 예:
        GET /api/materials/abc123
    """
    return MaterialResponse(**get_material_or_404(store, material_id))


@router.post("/", response_model=MaterialResponse)
async def create_material(
    data: MaterialCreate,
    current_user: Dict[str, Any] = Depends(require_admin),
    store: DocumentStore = Depends(get_store)
):
    """
    자재 추가

    사용 예:
        POST /api/materials/
        {
            "name": "장미",
            "mainCategory": "생화",
            "midCategory": "장미",
            "price": 3000,
            "supplier": "꽃시장",
            "size": "1단",
            "color": "빨강",
            "branch": "강남점"
        }
    """
    try:
        material_id = store.insert(COLLECTION_MATERIALS, data.model_dump())
    except FlowershopError as e:
        logger.error(f"자재 추가 실패: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail="자재 추가 중 오류가 발생했습니다.")
    logger.info(f"자재 추가: {data.name} id={material_id}")
    return MaterialResponse(**get_material_or_404(store, material_id))


@router.put("/{material_id}", response_model=MaterialResponse)
async def update_material(
    material_id: str,
    data: MaterialUpdate,
    current_user: Dict[str, Any] = Depends(require_admin),
    store: DocumentStore = Depends(get_store)
):
    """
    자재 수정 (입력한 항목만 변경)

    사용 예:
        PUT /api/materials/abc123
        {
            "stock": 20
        }
    """
    get_material_or_404(store, material_id)
    changes = data.model_dump(exclude_none=True)
    try:
        if changes:
            store.update_fields(COLLECTION_MATERIALS, material_id, changes)
    except FlowershopError as e:
        logger.error(f"자재 수정 실패: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail="자재 수정 중 오류가 발생했습니다.")
    logger.info(f"자재 수정: {material_id} {list(changes)}")
    return MaterialResponse(**get_material_or_404(store, material_id))


@router.delete("/{material_id}")
async def delete_material(
    material_id: str,
    current_user: Dict[str, Any] = Depends(require_admin),
    store: DocumentStore = Depends(get_store)
):
    """
    자재 삭제

    사용 예:
        DELETE /api/materials/abc123
    """
    material = get_material_or_404(store, material_id)
    try:
        store.delete_by_id(COLLECTION_MATERIALS, material_id)
    except FlowershopError as e:
        logger.error(f"자재 삭제 실패: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail="자재 삭제 중 오류가 발생했습니다.")
    logger.info(f"자재 삭제: {material.get('name')} id={material_id}")
    return {"success": True, "message": "자재가 삭제되었습니다"}


@router.get("/{material_id}/barcode")
async def get_material_barcode(
    material_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """
    자재 바코드 (Code128 SVG)

    사용 예:
        GET /api/materials/abc123/barcode
    """
    get_material_or_404(store, material_id)
    return Response(content=render_barcode_svg(material_id), media_type="image/svg+xml")
