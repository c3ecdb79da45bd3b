"""
유틸리티 함수 테스트
"""

import pytest

from flowershop.exceptions import ValidationError
from flowershop.utils import format_won, korean_sort_key, parse_fee


@pytest.mark.parametrize("value,expected", [(0, 0), (15000, 15000), ("15000", 15000), (" 3000 ", 3000)])
def test_parse_fee(value, expected):
    assert parse_fee(value) == expected


@pytest.mark.parametrize("value", ["²", "¹²³", "9" * 5000, "-1", "1e3", [], {}])
def test_parse_fee_rejects(value):
    with pytest.raises(ValidationError):
        parse_fee(value)


def test_korean_sort_hangul_before_latin():
    names = ["Rose", "장미", "baby's breath", "국화", "안개꽃"]
    assert sorted(names, key=korean_sort_key) == ["국화", "안개꽃", "장미", "baby's breath", "Rose"]


def test_korean_sort_digits_first():
    assert sorted(["중구", "2구역", "Zone"], key=korean_sort_key) == ["2구역", "중구", "Zone"]


def test_korean_sort_ignores_spaces_and_punctuation():
    names = ["강 서구", "강북구", "(강남구)"]
    assert sorted(names, key=korean_sort_key) == ["(강남구)", "강북구", "강 서구"]


def test_korean_sort_none():
    assert korean_sort_key(None) == korean_sort_key("")


def test_format_won():
    assert format_won(15000) == "₩15,000"
    assert format_won(0) == "₩0"
