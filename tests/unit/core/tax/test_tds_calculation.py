"""TDS 원천징수 계산 테스트"""

import random
from decimal import Decimal

import pytest

from core.ledger.errors import LedgerValidationError
from core.tax.tds import calculate_tds


class TestCalculateTds:
    """calculate_tds 테스트"""

    def test_basic(self) -> None:
        calc = calculate_tds("10000", "10")

        assert calc.tds_amount == Decimal("1000.00")
        assert calc.net_payable == Decimal("9000.00")

    def test_half_up_rounding(self) -> None:
        """333.33 × 1.5% = 4.99995 → 5.00"""
        calc = calculate_tds("333.33", "1.5")

        assert calc.tds_amount == Decimal("5.00")
        assert calc.net_payable == Decimal("328.33")

    def test_rounded_once_from_unrounded_product(self) -> None:
        """0.01 × 50% = 0.005 → 0.01 (half-up)"""
        calc = calculate_tds("0.01", "50")

        assert calc.tds_amount == Decimal("0.01")
        assert calc.net_payable == Decimal("0.00")

    def test_zero_rate(self) -> None:
        calc = calculate_tds("1234.56", "0")

        assert calc.tds_amount == Decimal("0.00")
        assert calc.net_payable == Decimal("1234.56")

    def test_full_rate(self) -> None:
        calc = calculate_tds("1234.56", "100")

        assert calc.tds_amount == Decimal("1234.56")
        assert calc.net_payable == Decimal("0.00")

    def test_float_input(self) -> None:
        """float 입력도 이진 오차 없이 계산"""
        calc = calculate_tds(0.1 + 0.2, 10)

        assert calc.transaction_amount == Decimal("0.30")
        assert calc.tds_amount == Decimal("0.03")

    @pytest.mark.parametrize("rate", ["-1", "100.01", "250"])
    def test_rate_out_of_range(self, rate: str) -> None:
        with pytest.raises(LedgerValidationError, match="TDS rate"):
            calculate_tds("100", rate)

    def test_negative_amount(self) -> None:
        with pytest.raises(LedgerValidationError):
            calculate_tds("-100", "10")

    def test_round_trip_over_domain(self) -> None:
        """tds + net == amount (A ∈ [0.01, 10,000,000], R ∈ [0, 100])"""
        rng = random.Random(194)
        cases = [
            (Decimal("0.01"), Decimal("0")),
            (Decimal("0.01"), Decimal("100")),
            (Decimal("10000000.00"), Decimal("0")),
            (Decimal("10000000.00"), Decimal("100")),
            (Decimal("10000000.00"), Decimal("33.333")),
        ]
        for _ in range(2000):
            amount = Decimal(rng.randint(1, 1_000_000_000)) / 100
            rate = Decimal(rng.randint(0, 100_000)) / 1000
            cases.append((amount, rate))

        for amount, rate in cases:
            calc = calculate_tds(amount, rate)
            assert calc.tds_amount + calc.net_payable == amount, (amount, rate)
            assert calc.tds_amount >= 0
            assert calc.net_payable >= 0
            assert calc.tds_amount.as_tuple().exponent == -2
