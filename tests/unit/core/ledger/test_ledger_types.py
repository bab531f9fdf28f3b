"""Ledger 타입 테스트"""

import pytest

from core.ledger.errors import InvalidAccountTypeError, LedgerValidationError
from core.ledger.types import (
    ACCOUNT_CODE_PREFIXES,
    PAYMENT_ACCOUNT_NAMES,
    AccountType,
    JournalSide,
    JournalStatus,
    PaymentMode,
)


class TestAccountType:
    """AccountType Enum 테스트"""

    def test_five_types(self) -> None:
        """5대 계정 유형"""
        assert {t.value for t in AccountType} == {
            "Asset", "Liability", "Equity", "Income", "Expense",
        }

    def test_code_prefix(self) -> None:
        """유형별 코드 접두사"""
        assert AccountType.ASSET.code_prefix == "1"
        assert AccountType.LIABILITY.code_prefix == "2"
        assert AccountType.EQUITY.code_prefix == "3"
        assert AccountType.INCOME.code_prefix == "4"
        assert AccountType.EXPENSE.code_prefix == "5"

    def test_prefix_table_covers_all_types(self) -> None:
        for t in AccountType:
            assert t.value in ACCOUNT_CODE_PREFIXES

    @pytest.mark.parametrize("raw", ["Expense", "expense", "EXPENSE", "  expense "])
    def test_parse_case_insensitive(self, raw: str) -> None:
        """대소문자 무시 파싱"""
        assert AccountType.parse(raw) == AccountType.EXPENSE

    def test_parse_enum_passthrough(self) -> None:
        assert AccountType.parse(AccountType.ASSET) is AccountType.ASSET

    @pytest.mark.parametrize("raw", ["Revenue", "", "Suspense", None, 5])
    def test_parse_invalid(self, raw: object) -> None:
        """5대 유형이 아니면 InvalidAccountTypeError"""
        with pytest.raises(InvalidAccountTypeError) as exc_info:
            AccountType.parse(raw)  # type: ignore[arg-type]

        assert isinstance(exc_info.value, LedgerValidationError)
        assert exc_info.value.value == raw

    def test_str_enum_equality(self) -> None:
        """str 상속으로 문자열 비교 가능"""
        assert AccountType.INCOME == "Income"


class TestJournalEnums:
    """JournalSide / JournalStatus 테스트"""

    def test_sides(self) -> None:
        assert JournalSide.DEBIT.value == "DEBIT"
        assert JournalSide.CREDIT.value == "CREDIT"

    def test_statuses(self) -> None:
        assert [s.value for s in JournalStatus] == ["draft", "posted", "void"]


class TestPaymentAccounts:
    """지급 수단 → 계정명"""

    def test_cash(self) -> None:
        assert PAYMENT_ACCOUNT_NAMES[PaymentMode.CASH.value] == "Cash Account"

    def test_credit_card(self) -> None:
        assert PAYMENT_ACCOUNT_NAMES[PaymentMode.CREDIT_CARD.value] == "Credit Card Account"

    @pytest.mark.parametrize("mode", ["bank", "debit_card", "upi", "cheque"])
    def test_bank_like_modes(self, mode: str) -> None:
        assert PAYMENT_ACCOUNT_NAMES[mode] == "Bank Account"
