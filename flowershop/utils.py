"""
유틸리티 함수
"""

import hashlib
import unicodedata
from typing import Any

from flowershop.exceptions import ValidationError


def hash_password(password: str) -> str:
    """
    비밀번호 해시

    Args:
        password: 원본 비밀번호

    Returns:
        str: 해시된 비밀번호

    사용 예:
        hashed = hash_password("mypassword")
    """
    return hashlib.sha256(password.encode()).hexdigest()


def verify_password(password: str, password_hash: str) -> bool:
    """
    비밀번호 검증

    사용 예:
        if verify_password("mypassword", stored_hash):
            print("비밀번호 일치")
    """
    return hash_password(password) == password_hash


def parse_fee(value: Any) -> int:
    """
    배송비 값 검증 및 변환

    정수 또는 십진 숫자로만 이루어진 문자열만 허용하며 0 이상이어야 한다.
    int()가 변환하지 못하는 값(위첨자 숫자, 자릿수 제한 초과)도 검증 오류로 처리한다.

    Args:
        value: 입력값

    Returns:
        int: 배송비

    Raises:
        ValidationError: 0 이상의 정수가 아닌 경우

    사용 예:
        fee = parse_fee("15000")
    """
    if isinstance(value, bool):
        raise ValidationError("올바른 배송비를 입력해주세요.")
    if isinstance(value, int):
        fee = value
    elif isinstance(value, str) and value.strip().isdecimal():
        try:
            fee = int(value.strip())
        except ValueError as e:
            raise ValidationError("올바른 배송비를 입력해주세요.") from e
    else:
        raise ValidationError("올바른 배송비를 입력해주세요.")
    if fee < 0:
        raise ValidationError("올바른 배송비를 입력해주세요.")
    return fee


def _is_hangul(ch: str) -> bool:
    return (
        "가" <= ch <= "힣"  # 음절
        or "ᄀ" <= ch <= "ᇿ"  # 자모
        or "㄰" <= ch <= "㆏"  # 호환 자모
    )


def korean_sort_key(text: str):
    """
    한국어 정렬 키 (가나다순)

    한국어 로케일 비교와 같은 결과가 나오도록 한다.
    - 공백과 문장 부호는 비교에서 제외
    - 숫자로 시작하면 맨 앞, 다음 한글, 그 다음 라틴 문자 등 나머지
    - 한글 음절은 NFC 정규화 후 코드 포인트 순서가 가나다 순서와 같음
    - 라틴 문자는 대소문자를 구분하지 않음

    Args:
        text: 정렬할 문자열 (None이면 빈 문자열)

    Returns:
        tuple: sort()의 key로 쓰는 비교용 값

    사용 예:
        sorted(["Rose", "장미", "국화"], key=korean_sort_key)  # ["국화", "장미", "Rose"]
    """
    normalized = unicodedata.normalize("NFC", text or "")
    folded = "".join(ch for ch in normalized if ch.isalnum()).casefold()
    if not folded or folded[0].isdecimal():
        group = 0
    elif _is_hangul(folded[0]):
        group = 1
    else:
        group = 2
    return (group, folded, normalized)


def format_won(amount: int) -> str:
    """
    금액을 원화 표기로 변환

    사용 예:
        format_won(15000)  # "₩15,000"
    """
    return f"₩{amount:,}"
