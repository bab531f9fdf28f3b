"""TaxKind / DateRange / SupplySummary 테스트"""

from datetime import date
from decimal import Decimal

import pytest

from core.ledger.errors import LedgerValidationError
from core.tax.aggregator import DateRange, Gstr3bSummary, SupplySummary, TaxKind


class TestTaxKind:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("GSTR1", TaxKind.GSTR1),
            ("gstr-1", TaxKind.GSTR1),
            ("GSTR_3B", TaxKind.GSTR3B),
            ("gstr3b", TaxKind.GSTR3B),
            ("tds", TaxKind.TDS),
        ],
    )
    def test_parse(self, raw: str, expected: TaxKind) -> None:
        assert TaxKind.parse(raw) == expected

    def test_parse_invalid(self) -> None:
        with pytest.raises(LedgerValidationError, match="Invalid tax kind"):
            TaxKind.parse("GSTR9")


class TestDateRange:
    def test_open_range_has_no_filter(self) -> None:
        clause, params = DateRange().sql_filter("invoice_date")

        assert clause == ""
        assert params == []

    def test_closed_range(self) -> None:
        clause, params = DateRange(date(2024, 4, 1), date(2024, 4, 30)).sql_filter("invoice_date")

        assert "invoice_date >= ?" in clause
        assert "substr(invoice_date, 1, 10) <= ?" in clause
        assert params == ["2024-04-01", "2024-04-30"]

    def test_reversed_range_rejected(self) -> None:
        with pytest.raises(LedgerValidationError):
            DateRange(date(2024, 5, 1), date(2024, 4, 1))

    def test_of_strings(self) -> None:
        period = DateRange.of("2024-04-01", None)

        assert period.start == date(2024, 4, 1)
        assert period.end is None


class TestSupplySummary:
    def test_net_of_returns(self) -> None:
        summary = SupplySummary.net(
            Decimal("100000"), Decimal("18000"), Decimal("20000"), Decimal("3600")
        )

        assert summary.taxable_value == Decimal("80000")
        assert summary.tax == Decimal("14400")

    def test_floored_at_zero(self) -> None:
        """환입이 매출보다 크면 0"""
        summary = SupplySummary.net(
            Decimal("1000"), Decimal("180"), Decimal("5000"), Decimal("900")
        )

        assert summary.taxable_value == Decimal("0")
        assert summary.tax == Decimal("0")


class TestGstr3bSummary:
    def test_net_tax_payable(self) -> None:
        summary = Gstr3bSummary(
            owner_id="owner-1",
            period=DateRange(),
            outward=SupplySummary(Decimal("80000"), Decimal("14400")),
            inward=SupplySummary(Decimal("30000"), Decimal("5400")),
        )

        assert summary.tax_liability == Decimal("14400")
        assert summary.itc_available == Decimal("5400")
        assert summary.net_tax_payable == Decimal("9000")

    def test_net_tax_payable_never_negative(self) -> None:
        summary = Gstr3bSummary(
            owner_id="owner-1",
            period=DateRange(),
            outward=SupplySummary(Decimal("1000"), Decimal("180")),
            inward=SupplySummary(Decimal("30000"), Decimal("5400")),
        )

        assert summary.net_tax_payable == Decimal("0")
        assert summary.to_dict()["sections"]["reverse_charge"] == "0"
