"""
메시지 라벨 레이아웃 테스트
"""

import pytest

from flowershop.exceptions import ValidationError
from flowershop.labels import (
    LABEL_SHEETS, LabelLayoutEngine, get_label_sheet, join_message, render_grid, split_message
)


def test_catalog():
    assert [(s.id, s.cell_count, s.column_count) for s in LABEL_SHEETS] == [
        ("formtec-3107", 6, 2),
        ("formtec-3108", 8, 2),
        ("formtec-3109", 12, 2),
    ]
    assert get_label_sheet("formtec-3109").row_count == 6


def test_unknown_label_sheet():
    with pytest.raises(ValidationError):
        get_label_sheet("formtec-9999")


@pytest.mark.parametrize("sheet", LABEL_SHEETS, ids=lambda s: s.id)
def test_render_grid_marks_exactly_one_cell(sheet):
    for position in range(1, sheet.cell_count + 1):
        cells = render_grid(sheet, position)
        assert [c.position for c in cells] == list(range(1, sheet.cell_count + 1))
        filled = [c for c in cells if c.filled]
        assert len(filled) == 1
        assert filled[0].position == position
        assert len([c for c in cells if not c.filled]) == sheet.cell_count - 1


def test_render_grid_is_deterministic():
    sheet = get_label_sheet("formtec-3108")
    assert render_grid(sheet, 3) == render_grid(sheet, 3)


def test_render_grid_rows_and_columns():
    cells = render_grid(get_label_sheet("formtec-3107"), 1)
    assert [(c.row, c.column) for c in cells] == [(1, 1), (1, 2), (2, 1), (2, 2), (3, 1), (3, 2)]


@pytest.mark.parametrize("position", [0, 7, -1, "1", True, None])
def test_render_grid_rejects_invalid_position(position):
    with pytest.raises(ValidationError):
        render_grid(get_label_sheet("formtec-3107"), position)


def test_split_message_with_sender():
    assert split_message("안녕하세요\n---\n홍길동", "기본발신인") == ("안녕하세요", "홍길동")


def test_split_message_without_sender():
    assert split_message("안녕하세요", "기본발신인") == ("안녕하세요", "기본발신인")


def test_split_message_empty():
    assert split_message(None, "주문자") == ("", "주문자")
    assert split_message("", None) == ("", "")


def test_split_message_dashes_inside_line_are_not_separator():
    assert split_message("a---b", "주문자") == ("a---b", "주문자")


def test_join_message_round_trip():
    raw = join_message("생일 축하해\n사랑해", "엄마가")
    assert raw == "생일 축하해\n사랑해\n---\n엄마가"
    assert split_message(raw, "주문자") == ("생일 축하해\n사랑해", "엄마가")
    assert join_message("감사합니다", "") == "감사합니다"


@pytest.fixture
def engine():
    return LabelLayoutEngine("order-1", "축하합니다", "홍길동")


def test_engine_defaults(engine):
    assert engine.label_type == "formtec-3107"
    assert engine.start_position == 1
    assert engine.message_font == "Noto Sans KR"
    assert engine.message_font_size == 14
    assert engine.sender_font_size == 12
    assert engine.editing is False


def test_changing_label_type_resets_start_position(engine):
    engine.select_start_position(6)
    engine.select_label_type("formtec-3109")
    assert engine.start_position == 1
    assert engine.geometry.cell_count == 12


def test_start_position_out_of_range_keeps_state(engine):
    engine.select_start_position(4)
    with pytest.raises(ValidationError):
        engine.select_start_position(7)
    assert engine.start_position == 4


def test_unknown_label_type_keeps_state(engine):
    engine.select_start_position(4)
    with pytest.raises(ValidationError):
        engine.select_label_type("unknown")
    assert engine.label_type == "formtec-3107"
    assert engine.start_position == 4


def test_font_settings(engine):
    engine.set_message_font("Nanum Gothic", 18)
    engine.set_sender_font(size=10)
    assert (engine.message_font, engine.message_font_size) == ("Nanum Gothic", 18)
    assert (engine.sender_font, engine.sender_font_size) == ("Noto Sans KR", 10)
    with pytest.raises(ValidationError):
        engine.set_message_font("Wingdings")
    with pytest.raises(ValidationError):
        engine.set_sender_font(size=0)


def test_fonts_from_settings():
    engine = LabelLayoutEngine("order-1", "메시지", "보낸이", fonts=["Gaegu", "Roboto"])
    assert engine.message_font == "Gaegu"
    engine.set_sender_font("Roboto")
    with pytest.raises(ValidationError):
        engine.set_sender_font("Arial")


def test_toggle_editing_changes_nothing_else(engine):
    engine.select_start_position(3)
    before = engine.build_print_payload()
    assert engine.toggle_editing() is True
    assert engine.toggle_editing() is False
    assert engine.build_print_payload() == before


def test_preview(engine):
    engine.select_label_type("formtec-3108")
    engine.select_start_position(5)
    preview = engine.preview()
    assert preview["cellCount"] == 8
    assert preview["startPosition"] == 5
    assert [c["position"] for c in preview["cells"] if c["filled"]] == [5]
    assert preview["label"]["height"] == "70mm"
    assert preview["label"]["senderLine"] == "- 홍길동 -"
    assert preview["label"]["messageStyle"] == {"fontFamily": "Noto Sans KR", "fontSize": "14pt"}


def test_preview_placeholder_for_empty_message():
    engine = LabelLayoutEngine("order-1", "", "홍길동")
    assert engine.preview()["label"]["messageContent"] == "메시지 내용이 없습니다."


def test_build_print_payload(engine):
    engine.select_label_type("formtec-3109")
    engine.select_start_position(11)
    engine.update_message(sender_name="김철수")
    assert engine.build_print_payload() == {
        "orderId": "order-1",
        "labelType": "formtec-3109",
        "startPosition": 11,
        "messageFont": "Noto Sans KR",
        "messageFontSize": 14,
        "senderFont": "Noto Sans KR",
        "senderFontSize": 12,
        "messageContent": "축하합니다",
        "senderName": "김철수",
    }


def test_build_print_payload_requires_message(engine):
    engine.update_message(message_content="")
    with pytest.raises(ValidationError):
        engine.build_print_payload()
