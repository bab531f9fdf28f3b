"""
보조 전기 엔진 (SubsidiaryPostingEngine)

업무 이벤트(비용 지급, TDS 원천징수)를 균형 분개로 변환하여 LedgerPoster로 전기.
계정은 AccountRegistry.find_or_create()로 해석 (없으면 생성).

원천 레코드(expenses)의 전기 완료 표시는 호출자 책임.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from core.constants import Defaults
from core.ledger.accounts import AccountRegistry
from core.ledger.errors import DegenerateEventError, SequenceConflictError
from core.ledger.journal import Journal, JournalLine
from core.ledger.money import ZERO, round2
from core.ledger.poster import LedgerPoster
from core.ledger.types import (
    DEFAULT_PAYMENT_ACCOUNT_NAME,
    PAYMENT_ACCOUNT_NAMES,
    AccountType,
    SystemAccounts,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExpenseEvent:
    """비용 지급 이벤트

    금액은 Decimal (생성 시 2자리 반올림).
    """

    date: date
    payee_name: str
    category_name: str
    gross_amount: Decimal
    tax_amount: Decimal = ZERO
    payment_mode: str = "bank"
    tds_amount: Decimal = ZERO
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "gross_amount", round2(self.gross_amount))
        object.__setattr__(self, "tax_amount", round2(self.tax_amount))
        object.__setattr__(self, "tds_amount", round2(self.tds_amount))

    @property
    def net_payment(self) -> Decimal:
        """실지급액 = 공급가 + 세액 - TDS"""
        return round2(self.gross_amount + self.tax_amount - self.tds_amount)

    @property
    def narration(self) -> str:
        return f"{self.description} - {self.payee_name}"


def payment_account_name(payment_mode: str | None) -> str:
    """지급 수단 → 지급 계정명 (알 수 없는 수단은 Bank Account)"""
    if not payment_mode:
        return DEFAULT_PAYMENT_ACCOUNT_NAME
    return PAYMENT_ACCOUNT_NAMES.get(payment_mode.strip().lower(), DEFAULT_PAYMENT_ACCOUNT_NAME)


def expense_account_name(category_name: str) -> str:
    return f"{category_name} Expense"


class SubsidiaryPostingEngine:
    """업무 이벤트 → 분개 전기

    Args:
        registry: 계정 해석용 AccountRegistry
        poster: 전기용 LedgerPoster
        retry_attempts: SequenceConflictError 재시도 횟수 (총 시도 횟수)
    """

    def __init__(
        self,
        registry: AccountRegistry,
        poster: LedgerPoster,
        retry_attempts: int = Defaults.SEQUENCE_RETRY_ATTEMPTS,
    ):
        self.registry = registry
        self.poster = poster
        self.retry_attempts = max(1, retry_attempts)

    async def post_expense(self, owner_id: str, event: ExpenseEvent) -> Journal:
        """비용 지급 전기

        분개:
            Dr <카테고리> Expense      gross
            Dr Input Tax Account       tax   (tax > 0)
            Cr <지급 계정>             net   (net > 0)
            Cr TDS Payable             tds   (tds > 0)

        Args:
            owner_id: 소유자 ID
            event: 비용 지급 이벤트

        Returns:
            전기된 Journal

        Raises:
            DegenerateEventError: 0 금액 라인 제거 후 라인이 2개 미만
            SequenceConflictError: 재시도 한도 초과
            LedgerValidationError / LedgerStorageError: 그대로 전달
        """
        last_error: SequenceConflictError | None = None
        for attempt in range(1, self.retry_attempts + 1):
            try:
                lines = await self.build_expense_lines(owner_id, event)
                journal = await self.poster.post(owner_id, event.date, event.narration, lines)
            except SequenceConflictError as e:
                last_error = e
                logger.warning(
                    f"일련번호 충돌, 재시도 {attempt}/{self.retry_attempts}: {e}",
                    extra={"owner_id": owner_id, "kind": e.kind, "value": e.value},
                )
                continue

            logger.info(
                f"비용 전기 완료: {journal.number} {event.category_name} {event.gross_amount}",
                extra={"owner_id": owner_id, "journal_id": journal.id},
            )
            return journal

        assert last_error is not None
        raise last_error

    async def build_expense_lines(self, owner_id: str, event: ExpenseEvent) -> list[JournalLine]:
        """비용 이벤트 → 분개 라인 (0 금액 라인 제외)

        필요한 계정은 없으면 생성됨.

        Raises:
            DegenerateEventError
        """
        planned: list[tuple[AccountType, str, str, Any, bool, str]] = [
            # (유형, 검색어, 생성명, 금액, 차변 여부, 라인 적요)
            (
                AccountType.EXPENSE,
                event.category_name,
                expense_account_name(event.category_name),
                event.gross_amount,
                True,
                f"{event.category_name} expense",
            ),
            (
                AccountType.ASSET,
                SystemAccounts.INPUT_TAX_PATTERN,
                SystemAccounts.INPUT_TAX_NAME,
                event.tax_amount,
                True,
                "Input tax on expense",
            ),
            (
                AccountType.ASSET,
                payment_account_name(event.payment_mode),
                payment_account_name(event.payment_mode),
                event.net_payment,
                False,
                f"Payment via {event.payment_mode}",
            ),
            (
                AccountType.LIABILITY,
                SystemAccounts.TDS_PAYABLE_PATTERN,
                SystemAccounts.TDS_PAYABLE_NAME,
                event.tds_amount,
                False,
                "TDS deducted on payment",
            ),
        ]

        non_zero = [item for item in planned if item[3] > 0]
        if len(non_zero) < 2:
            raise DegenerateEventError(
                f"Expense event leaves {len(non_zero)} non-zero line(s) "
                f"(gross={event.gross_amount} tax={event.tax_amount} tds={event.tds_amount})",
                lines=[(item[2], item[3], "DEBIT" if item[4] else "CREDIT") for item in non_zero],
            )

        lines: list[JournalLine] = []
        for account_type, hint, name, amount, is_debit, line_narration in non_zero:
            account = await self.registry.find_or_create(owner_id, account_type, hint, name)
            if is_debit:
                lines.append(JournalLine.debit(account.id, amount, line_narration))
            else:
                lines.append(JournalLine.credit(account.id, amount, line_narration))
        return lines
