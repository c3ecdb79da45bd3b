"""
바코드 생성
"""

import io

from barcode import Code128
from barcode.writer import SVGWriter

from flowershop.exceptions import ValidationError


def render_barcode_svg(value: str, show_text: bool = True) -> bytes:
    """
    Code128 바코드 SVG 생성

    Args:
        value: 바코드로 표현할 문자열
        show_text: 바코드 아래에 문자열 표시 여부

    Returns:
        bytes: SVG 문서

    사용 예:
        svg = render_barcode_svg("a1b2c3")
    """
    if not value or not isinstance(value, str):
        raise ValidationError("바코드 값이 비어 있습니다.")
    buffer = io.BytesIO()
    Code128(value, writer=SVGWriter()).write(buffer, options={"write_text": show_text})
    return buffer.getvalue()
