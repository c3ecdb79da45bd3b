"""
주문 메시지 인쇄 라우터
"""

from dataclasses import asdict
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, status

from flowershop.auth import get_current_user
from flowershop.config import COLLECTION_ORDERS
from flowershop.database import get_store
from flowershop.exceptions import FlowershopError, http_status_for
from flowershop.labels import LABEL_SHEETS, LabelLayoutEngine, join_message, split_message
from flowershop.logger import get_logger
from flowershop.schemas import (
    LabelSheetResponse, MessagePrintRequest, MessagePrintResponse, MessageUpdate
)
from flowershop.settings import SettingsService
from flowershop.store import DocumentStore

logger = get_logger(__name__)

router = APIRouter(prefix="/api/orders", tags=["orders"])


def get_order_or_404(store: DocumentStore, order_id: str) -> Dict[str, Any]:
    try:
        order = store.get(COLLECTION_ORDERS, order_id)
    except FlowershopError as e:
        logger.error(f"주문 조회 실패: {order_id}: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail="주문 정보를 불러오는 중 오류가 발생했습니다.")
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="주문을 찾을 수 없습니다"
        )
    return order


def open_engine(store: DocumentStore, order: Dict[str, Any]) -> LabelLayoutEngine:
    """주문 메시지로 인쇄 옵션 상태 생성"""
    message, sender = split_message(
        (order.get("message") or {}).get("content"),
        (order.get("orderer") or {}).get("name")
    )
    fonts = SettingsService(store).available_fonts()
    return LabelLayoutEngine(order["id"], message, sender, fonts=fonts)


@router.get("/label-sheets", response_model=List[LabelSheetResponse])
async def list_label_sheets(current_user: Dict[str, Any] = Depends(get_current_user)):
    """
    라벨지 규격 목록

    사용 예:
        GET /api/orders/label-sheets
    """
    return [LabelSheetResponse(**asdict(sheet)) for sheet in LABEL_SHEETS]


@router.get("/{order_id}/message-print")
async def get_message_print_options(
    order_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """
    메시지 인쇄 초기 옵션 (분리된 메시지, 기본 폰트, 라벨지, 미리보기)

    사용 예:
        GET /api/orders/abc123/message-print
    """
    order = get_order_or_404(store, order_id)
    try:
        engine = open_engine(store, order)
    except FlowershopError as e:
        logger.error(f"메시지 인쇄 옵션 조회 실패: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail=e.message)
    return {
        "ordererName": (order.get("orderer") or {}).get("name", ""),
        "fonts": engine.fonts,
        "labelSheets": [asdict(sheet) for sheet in LABEL_SHEETS],
        "options": {
            "labelType": engine.label_type,
            "startPosition": engine.start_position,
            "messageFont": engine.message_font,
            "messageFontSize": engine.message_font_size,
            "senderFont": engine.sender_font,
            "senderFontSize": engine.sender_font_size,
            "messageContent": engine.message_content,
            "senderName": engine.sender_name,
        },
        "preview": engine.preview(),
    }


@router.post("/{order_id}/message-print", response_model=MessagePrintResponse)
async def submit_message_print(
    order_id: str,
    options: MessagePrintRequest,
    current_user: Dict[str, Any] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """
    메시지 인쇄 요청 데이터 생성

    옵션을 적용한 결과로 인쇄 데이터와 미리보기를 반환한다. 주문은 변경하지 않는다.

    사용 예:
        POST /api/orders/abc123/message-print
        {
            "labelType": "formtec-3109",
            "startPosition": 5,
            "messageFont": "Nanum Gothic",
            "messageFontSize": 16
        }
    """
    order = get_order_or_404(store, order_id)
    try:
        engine = open_engine(store, order)
        engine.select_label_type(options.labelType)
        engine.select_start_position(options.startPosition)
        engine.set_message_font(options.messageFont, options.messageFontSize)
        engine.set_sender_font(options.senderFont, options.senderFontSize)
        engine.update_message(options.messageContent, options.senderName)
        payload = engine.build_print_payload()
    except FlowershopError as e:
        logger.warning(f"메시지 인쇄 옵션 거부: {e.message}", extra={"order_id": order_id})
        raise HTTPException(status_code=http_status_for(e), detail=e.message)

    logger.info(
        f"메시지 인쇄 요청: 주문 {order_id}, {payload['labelType']} {payload['startPosition']}번 칸"
    )
    return MessagePrintResponse(payload=payload, preview=engine.preview())


@router.put("/{order_id}/message")
async def update_order_message(
    order_id: str,
    data: MessageUpdate,
    current_user: Dict[str, Any] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """
    주문 메시지 수정 (메시지와 보내는 사람을 구분선으로 합쳐 저장)

    사용 예:
        PUT /api/orders/abc123/message
        {
            "messageContent": "축하합니다",
            "senderName": "홍길동"
        }
    """
    order = get_order_or_404(store, order_id)
    message = dict(order.get("message") or {})
    message["content"] = join_message(data.messageContent, data.senderName)
    try:
        store.update_fields(COLLECTION_ORDERS, order_id, {"message": message})
    except FlowershopError as e:
        logger.error(f"주문 메시지 수정 실패: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail="메시지 저장 중 오류가 발생했습니다.")
    logger.info(f"주문 메시지 수정: {order_id}")
    return {"success": True, "message": message}
