"""
전표 / 분개 라인 / 원장 행 데이터 구조

JournalLine은 (side, amount) 태그 구조로 차변과 대변을 동시에 가질 수 없음.
저장소에는 debit/credit 두 개의 nullable 컬럼으로 기록됨.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from core.ledger.errors import InvalidJournalLineError
from core.ledger.money import ZERO, round2, to_decimal
from core.ledger.types import JournalSide, JournalStatus


@dataclass(frozen=True)
class JournalLine:
    """분개 라인

    예: 비용 10,000 지급
        - JournalLine.debit("acc-expense", Decimal("10000.00"))
        - JournalLine.credit("acc-bank", Decimal("10000.00"))
    """

    account_id: str
    side: JournalSide
    amount: Decimal
    narration: str | None = None

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise InvalidJournalLineError(
                f"Line amount must not be negative: {self.account_id} {self.amount}"
            )

    @classmethod
    def debit(cls, account_id: str, amount: Any, narration: str | None = None) -> JournalLine:
        return cls(account_id, JournalSide.DEBIT, round2(amount), narration)

    @classmethod
    def credit(cls, account_id: str, amount: Any, narration: str | None = None) -> JournalLine:
        return cls(account_id, JournalSide.CREDIT, round2(amount), narration)

    @classmethod
    def from_amounts(
        cls,
        account_id: str,
        debit: Any = None,
        credit: Any = None,
        narration: str | None = None,
    ) -> JournalLine:
        """debit/credit 두 필드 입력 → 태그 구조

        두 값이 모두 0보다 크면 거부. 둘 다 비어 있으면 0 금액 차변 라인.

        Raises:
            InvalidJournalLineError: 차변과 대변을 동시에 입력한 경우
        """
        debit_amount = to_decimal(debit)
        credit_amount = to_decimal(credit)

        if debit_amount != 0 and credit_amount != 0:
            raise InvalidJournalLineError(
                f"Line has both debit and credit: {account_id} "
                f"debit={debit_amount} credit={credit_amount}"
            )
        if credit_amount != 0:
            return cls.credit(account_id, credit_amount, narration)
        return cls.debit(account_id, debit_amount, narration)

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    @property
    def debit_amount(self) -> Decimal | None:
        return self.amount if self.side == JournalSide.DEBIT else None

    @property
    def credit_amount(self) -> Decimal | None:
        return self.amount if self.side == JournalSide.CREDIT else None


def sum_side(lines: list[JournalLine], side: JournalSide) -> Decimal:
    """한쪽 방향 합계"""
    return sum((line.amount for line in lines if line.side == side), ZERO)


@dataclass
class Journal:
    """전표

    하나의 거래에 대한 복식부기 기록.
    posted 상태에서는 차변 합계 = 대변 합계 (허용 오차 이내).
    """

    id: str
    owner_id: str
    number: str
    date: date
    narration: str
    status: JournalStatus
    lines: list[JournalLine] = field(default_factory=list)

    @property
    def total_debit(self) -> Decimal:
        return sum_side(self.lines, JournalSide.DEBIT)

    @property
    def total_credit(self) -> Decimal:
        return sum_side(self.lines, JournalSide.CREDIT)

    def is_balanced(self, tolerance: Decimal) -> bool:
        return abs(self.total_debit - self.total_credit) <= tolerance

    def to_dict(self) -> dict[str, Any]:
        """API 응답용 dict (금액은 문자열)"""
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "number": self.number,
            "date": self.date.isoformat(),
            "narration": self.narration,
            "status": self.status.value,
            "total_debit": str(self.total_debit),
            "total_credit": str(self.total_credit),
            "lines": [
                {
                    "account_id": line.account_id,
                    "debit": str(line.debit_amount) if line.debit_amount is not None else None,
                    "credit": str(line.credit_amount) if line.credit_amount is not None else None,
                    "narration": line.narration,
                }
                for line in self.lines
            ],
        }


@dataclass(frozen=True)
class LedgerBalanceRow:
    """계정 원장 행 (저장하지 않는 파생 값)

    첫 행은 기초 잔액 행 (date=None, is_opening=True).
    """

    date: date | None
    narration: str
    debit: Decimal
    credit: Decimal
    balance: Decimal
    journal_id: str | None = None
    journal_number: str | None = None
    is_opening: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat() if self.date else None,
            "narration": self.narration,
            "debit": str(self.debit),
            "credit": str(self.credit),
            "balance": str(self.balance),
            "journal_id": self.journal_id,
            "journal_number": self.journal_number,
            "is_opening": self.is_opening,
        }
