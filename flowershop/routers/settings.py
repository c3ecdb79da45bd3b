"""
시스템 설정 라우터
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException

from flowershop.auth import get_current_user, require_admin
from flowershop.database import get_store
from flowershop.exceptions import FlowershopError, http_status_for
from flowershop.logger import get_logger
from flowershop.settings import SettingsService
from flowershop.store import DocumentStore

logger = get_logger(__name__)

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("/")
async def get_settings(
    current_user: Dict[str, Any] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """
    시스템 설정 조회 (저장되지 않은 항목은 기본값)

    사용 예:
        GET /api/settings/
    """
    try:
        return SettingsService(store).load()
    except FlowershopError as e:
        logger.error(f"설정 로드 중 오류: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail="설정을 불러오는 중 오류가 발생했습니다.")


@router.put("/")
async def save_settings(
    settings: Dict[str, Any] = Body(...),
    current_user: Dict[str, Any] = Depends(require_admin),
    store: DocumentStore = Depends(get_store)
):
    """
    시스템 설정 저장 (관리자)

    사용 예:
        PUT /api/settings/
        {
            "defaultDeliveryFee": 4000,
            "availableFonts": ["Noto Sans KR", "Gaegu"]
        }
    """
    try:
        saved = SettingsService(store).save(settings)
    except FlowershopError as e:
        logger.error(f"설정 저장 중 오류: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail="설정 저장 중 오류가 발생했습니다.")
    logger.info(f"시스템 설정 저장: {current_user['email']}")
    return saved
