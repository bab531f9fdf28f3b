"""금액 유틸리티 테스트"""

from decimal import Decimal

import pytest

from core.ledger.money import ZERO, format_amount, parse_amount, round2, to_decimal


class TestToDecimal:
    """to_decimal 테스트"""

    def test_none_and_empty_are_zero(self) -> None:
        assert to_decimal(None) == ZERO
        assert to_decimal("") == ZERO

    def test_float_goes_through_str(self) -> None:
        """float 이진 오차 유입 없음"""
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal(0.1) + to_decimal(0.2) == Decimal("0.3")

    def test_decimal_passthrough(self) -> None:
        value = Decimal("12.345")
        assert to_decimal(value) is value

    def test_int_and_str(self) -> None:
        assert to_decimal(100) == Decimal("100")
        assert to_decimal("2500.50") == Decimal("2500.50")

    def test_invalid(self) -> None:
        with pytest.raises(ValueError, match="Invalid amount"):
            to_decimal("ten rupees")


class TestRound2:
    """round2 테스트 (half-up)"""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("1.005", "1.01"),
            ("1.004", "1.00"),
            ("2.675", "2.68"),
            ("-1.005", "-1.01"),
            ("10", "10.00"),
            (0.125, "0.13"),
        ],
    )
    def test_half_up(self, raw: object, expected: str) -> None:
        assert round2(raw) == Decimal(expected)

    def test_two_places(self) -> None:
        assert round2("7").as_tuple().exponent == -2


class TestFormatParse:
    """저장 형식 변환"""

    def test_format_amount(self) -> None:
        assert format_amount(Decimal("1800")) == "1800.00"
        assert format_amount(None) is None

    def test_parse_amount(self) -> None:
        assert parse_amount("10800.00") == Decimal("10800.00")
        assert parse_amount(None) == ZERO
