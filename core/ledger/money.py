"""
금액 유틸리티

모든 금액은 Decimal, 저장 시 소수점 2자리.
반올림은 ROUND_HALF_UP으로 한 번만 적용.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """금액 입력을 Decimal로 변환

    float는 str을 거쳐 변환하여 이진 부동소수점 오차 유입 방지.
    None/빈 문자열은 0.

    Raises:
        ValueError: 숫자로 해석할 수 없는 값
    """
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {value!r}") from e


def round2(value: Any) -> Decimal:
    """소수점 2자리 반올림 (half-up)"""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal | None) -> str | None:
    """저장/응답용 문자열 (소수점 2자리)"""
    if value is None:
        return None
    return str(round2(value))


def parse_amount(value: str | None) -> Decimal:
    """DB TEXT 컬럼 → Decimal (NULL은 0)"""
    if value is None:
        return ZERO
    return Decimal(value)
