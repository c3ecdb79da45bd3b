"""
메시지 카드 라벨 레이아웃

라벨지 규격 카탈로그, 메시지/보내는 사람 분리, 라벨지 칸 배치 계산,
인쇄 옵션 상태 관리를 담당한다. 저장이나 인쇄 같은 I/O는 하지 않는다.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Sequence, Tuple

from flowershop.config import (
    DEFAULT_MESSAGE_FONT_SIZE, DEFAULT_SENDER_FONT_SIZE, FALLBACK_FONTS, MESSAGE_SEPARATOR
)
from flowershop.exceptions import ValidationError


@dataclass(frozen=True)
class LabelSheetGeometry:
    """라벨지 규격"""
    id: str
    label: str
    cell_count: int
    column_count: int
    cell_height: str
    column_gap: str

    @property
    def row_count(self) -> int:
        return -(-self.cell_count // self.column_count)


LABEL_SHEETS: Tuple[LabelSheetGeometry, ...] = (
    LabelSheetGeometry("formtec-3107", "폼텍 3107 (6칸)", 6, 2, "99.1mm", "0mm"),
    LabelSheetGeometry("formtec-3108", "폼텍 3108 (8칸)", 8, 2, "70mm", "4.5mm"),
    LabelSheetGeometry("formtec-3109", "폼텍 3109 (12칸)", 12, 2, "67.7mm", "2.5mm"),
)

DEFAULT_LABEL_TYPE = LABEL_SHEETS[0].id


def get_label_sheet(label_type: str) -> LabelSheetGeometry:
    """
    라벨지 규격 조회

    Raises:
        ValidationError: 카탈로그에 없는 라벨지인 경우
    """
    for sheet in LABEL_SHEETS:
        if sheet.id == label_type:
            return sheet
    raise ValidationError(f"지원하지 않는 라벨지입니다: {label_type}")


def split_message(raw_content: Optional[str], orderer_name: Optional[str]) -> Tuple[str, str]:
    """
    메시지 내용에서 보내는 사람 분리

    '---' 한 줄을 구분선으로 사용한다. 구분선이 없으면 전체가 메시지이고
    보내는 사람은 주문자 이름이 된다.

    사용 예:
        split_message("안녕하세요\\n---\\n홍길동", "기본발신인")  # ("안녕하세요", "홍길동")
    """
    content = raw_content or ""
    parts = content.split(MESSAGE_SEPARATOR)
    if len(parts) > 1:
        return parts[0], parts[1]
    return content, orderer_name or ""


def join_message(message: str, sender: str) -> str:
    """메시지와 보내는 사람을 저장용 문자열로 합친다 (split_message의 역)"""
    if not sender:
        return message
    return f"{message}{MESSAGE_SEPARATOR}{sender}"


@dataclass(frozen=True)
class LabelCell:
    """라벨지 한 칸"""
    position: int
    row: int
    column: int
    filled: bool


def render_grid(geometry: LabelSheetGeometry, start_position: int) -> List[LabelCell]:
    """
    라벨지 칸 배치 계산

    1부터 시작하는 칸 번호로 cell_count개의 칸을 만들고, 시작 위치 칸만
    채워진 칸으로 표시한다.

    Raises:
        ValidationError: 시작 위치가 1~cell_count 범위를 벗어난 경우
    """
    validate_start_position(geometry, start_position)
    return [
        LabelCell(
            position=position,
            row=(position - 1) // geometry.column_count + 1,
            column=(position - 1) % geometry.column_count + 1,
            filled=position == start_position,
        )
        for position in range(1, geometry.cell_count + 1)
    ]


def validate_start_position(geometry: LabelSheetGeometry, start_position: Any) -> int:
    if isinstance(start_position, bool) or not isinstance(start_position, int):
        raise ValidationError("시작 위치는 정수여야 합니다.")
    if not 1 <= start_position <= geometry.cell_count:
        raise ValidationError(f"시작 위치는 1-{geometry.cell_count} 사이여야 합니다.")
    return start_position


def _validate_font_size(size: Any) -> int:
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise ValidationError("글자 크기는 1 이상의 정수여야 합니다.")
    return size


class LabelLayoutEngine:
    """
    메시지 인쇄 옵션 상태

    라벨지 종류, 시작 위치, 폰트 설정을 보관하고 변경 시마다
    미리보기를 즉시 다시 계산한다.

    사용 예:
        message, sender = split_message(order["message"]["content"], order["orderer"]["name"])
        engine = LabelLayoutEngine(order["id"], message, sender, fonts=settings["availableFonts"])
        engine.select_label_type("formtec-3109")
        engine.select_start_position(5)
        payload = engine.build_print_payload()
    """

    def __init__(
        self,
        order_id: str,
        message_content: str = "",
        sender_name: str = "",
        fonts: Optional[Sequence[str]] = None,
        label_type: str = DEFAULT_LABEL_TYPE,
        message_font_size: int = DEFAULT_MESSAGE_FONT_SIZE,
        sender_font_size: int = DEFAULT_SENDER_FONT_SIZE,
    ):
        self.order_id = order_id
        self.fonts = list(fonts) if fonts else list(FALLBACK_FONTS)
        self.geometry = get_label_sheet(label_type)
        self.start_position = 1
        self.message_content = message_content
        self.sender_name = sender_name
        self.message_font = self.fonts[0]
        self.message_font_size = _validate_font_size(message_font_size)
        self.sender_font = self.fonts[0]
        self.sender_font_size = _validate_font_size(sender_font_size)
        self.editing = False

    @property
    def label_type(self) -> str:
        return self.geometry.id

    def select_label_type(self, label_type: str) -> None:
        """라벨지 변경, 시작 위치는 항상 1로 돌아간다"""
        self.geometry = get_label_sheet(label_type)
        self.start_position = 1

    def select_start_position(self, position: int) -> None:
        self.start_position = validate_start_position(self.geometry, position)

    def _validate_font(self, font: str) -> str:
        if font not in self.fonts:
            raise ValidationError(f"사용할 수 없는 폰트입니다: {font}")
        return font

    def set_message_font(self, font: Optional[str] = None, size: Optional[int] = None) -> None:
        if font is not None:
            self.message_font = self._validate_font(font)
        if size is not None:
            self.message_font_size = _validate_font_size(size)

    def set_sender_font(self, font: Optional[str] = None, size: Optional[int] = None) -> None:
        if font is not None:
            self.sender_font = self._validate_font(font)
        if size is not None:
            self.sender_font_size = _validate_font_size(size)

    def update_message(self, message_content: Optional[str] = None, sender_name: Optional[str] = None) -> None:
        if message_content is not None:
            self.message_content = message_content
        if sender_name is not None:
            self.sender_name = sender_name

    def toggle_editing(self) -> bool:
        """편집/미리보기 모드 전환 (다른 상태는 바꾸지 않음)"""
        self.editing = not self.editing
        return self.editing

    def render_grid(self) -> List[LabelCell]:
        return render_grid(self.geometry, self.start_position)

    def preview(self) -> Dict[str, Any]:
        """
        미리보기 정보

        Returns:
            dict: 단일 라벨 미리보기(폰트, 크기, 내용)와 전체 칸 배치
        """
        return {
            "label": {
                "labelType": self.geometry.id,
                "labelName": self.geometry.label,
                "height": self.geometry.cell_height,
                "messageContent": self.message_content or "메시지 내용이 없습니다.",
                "senderLine": f"- {self.sender_name} -",
                "messageStyle": {"fontFamily": self.message_font, "fontSize": f"{self.message_font_size}pt"},
                "senderStyle": {"fontFamily": self.sender_font, "fontSize": f"{self.sender_font_size}pt"},
            },
            "startPosition": self.start_position,
            "cellCount": self.geometry.cell_count,
            "columnCount": self.geometry.column_count,
            "cells": [asdict(cell) for cell in self.render_grid()],
        }

    def build_print_payload(self) -> Dict[str, Any]:
        """
        인쇄 요청 데이터

        Raises:
            ValidationError: 메시지 내용이 비어 있는 경우
        """
        if not self.message_content:
            raise ValidationError("메시지 내용을 입력해주세요.")
        return {
            "orderId": self.order_id,
            "labelType": self.geometry.id,
            "startPosition": self.start_position,
            "messageFont": self.message_font,
            "messageFontSize": self.message_font_size,
            "senderFont": self.sender_font,
            "senderFontSize": self.sender_font_size,
            "messageContent": self.message_content,
            "senderName": self.sender_name,
        }
