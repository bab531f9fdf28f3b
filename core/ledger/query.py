"""
원장 조회 (LedgerQuery)

계정별 누적 잔액, 시산표.
읽기 전용이며 무효(void) 전표는 제외.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.constants import Defaults
from core.ledger.accounts import AccountRegistry
from core.ledger.errors import wrap_storage_errors
from core.ledger.journal import LedgerBalanceRow
from core.ledger.money import ZERO, parse_amount
from core.ledger.poster import parse_date
from core.ledger.types import AccountType, JournalStatus

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)

OPENING_NARRATION = "Opening Balance"


@dataclass(frozen=True)
class TrialBalanceRow:
    """시산표 행"""

    account_id: str
    code: str
    name: str
    type: AccountType
    opening_balance: Decimal
    total_debit: Decimal
    total_credit: Decimal

    @property
    def closing_balance(self) -> Decimal:
        return self.opening_balance + self.total_debit - self.total_credit

    def to_dict(self) -> dict[str, Any]:
        return {
            "account_id": self.account_id,
            "code": self.code,
            "name": self.name,
            "type": self.type.value,
            "opening_balance": str(self.opening_balance),
            "total_debit": str(self.total_debit),
            "total_credit": str(self.total_credit),
            "closing_balance": str(self.closing_balance),
        }


@dataclass
class TrialBalance:
    """시산표 (계정 코드 순)"""

    owner_id: str
    as_of: date | None
    rows: list[TrialBalanceRow] = field(default_factory=list)
    tolerance: Decimal = Defaults.BALANCE_TOLERANCE

    @property
    def total_debit(self) -> Decimal:
        return sum((row.total_debit for row in self.rows), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((row.total_credit for row in self.rows), ZERO)

    @property
    def balanced(self) -> bool:
        return abs(self.total_debit - self.total_credit) < self.tolerance

    def to_dict(self) -> dict[str, Any]:
        return {
            "owner_id": self.owner_id,
            "as_of": self.as_of.isoformat() if self.as_of else None,
            "rows": [row.to_dict() for row in self.rows],
            "total_debit": str(self.total_debit),
            "total_credit": str(self.total_credit),
            "balanced": self.balanced,
        }


class LedgerQuery:
    """원장 조회

    게시 중인 전표와 동시에 호출될 수 있음.
    커밋된 스냅샷만 조회하도록 읽기 전용 연결을 넘기는 것을 권장.

    Args:
        db: SQLite 어댑터
        tolerance: 시산표 균형 판정 허용 오차
    """

    def __init__(self, db: SQLiteAdapter, tolerance: Decimal = Defaults.BALANCE_TOLERANCE):
        self.db = db
        self.tolerance = tolerance
        self.registry = AccountRegistry(db)

    async def running_balance(
        self,
        account_id: str,
        as_of: date | str | None = None,
    ) -> list[LedgerBalanceRow]:
        """계정 누적 잔액

        첫 행은 기초 잔액, 이후 (전표 일자, 라인 입력 순)으로
        balance = balance + debit - credit.

        Args:
            account_id: 계정 ID
            as_of: 이 날짜까지 포함 (None이면 전체)

        Returns:
            LedgerBalanceRow 목록 (거래가 없으면 기초 잔액 행만)

        Raises:
            AccountNotFoundError
        """
        account = await self.registry.require(account_id)

        sql = """
            SELECT j.date, j.narration, jl.debit, jl.credit, jl.narration, j.id, j.number
            FROM journal_lines jl
            JOIN journals j ON j.id = jl.journal_id
            WHERE jl.account_id = ? AND j.status != ?
        """
        params: list[Any] = [account_id, JournalStatus.VOID.value]
        if as_of is not None:
            sql += " AND j.date <= ?"
            params.append(parse_date(as_of).isoformat())
        sql += " ORDER BY j.date, jl.id"

        with wrap_storage_errors("running_balance", account.owner_id):
            rows = await self.db.fetchall(sql, tuple(params))

        balance = account.opening_balance
        result = [
            LedgerBalanceRow(
                date=None,
                narration=OPENING_NARRATION,
                debit=ZERO,
                credit=ZERO,
                balance=balance,
                is_opening=True,
            )
        ]
        for row in rows:
            debit = parse_amount(row[2])
            credit = parse_amount(row[3])
            balance = balance + debit - credit
            result.append(
                LedgerBalanceRow(
                    date=parse_date(row[0]),
                    narration=row[4] or row[1],
                    debit=debit,
                    credit=credit,
                    balance=balance,
                    journal_id=row[5],
                    journal_number=row[6],
                )
            )
        return result

    async def trial_balance(
        self,
        owner_id: str,
        as_of: date | str | None = None,
    ) -> TrialBalance:
        """시산표 (비활성 계정 포함, 코드 순)"""
        as_of_date = parse_date(as_of) if as_of is not None else None

        join_filter = "j.status != ?"
        params: list[Any] = [JournalStatus.VOID.value]
        if as_of_date is not None:
            join_filter += " AND j.date <= ?"
            params.append(as_of_date.isoformat())
        params.append(owner_id)

        with wrap_storage_errors("trial_balance", owner_id):
            accounts = await self.registry.list_accounts(owner_id, include_inactive=True)
            line_rows = await self.db.fetchall(
                f"""
                SELECT jl.account_id, jl.debit, jl.credit
                FROM journal_lines jl
                JOIN journals j ON j.id = jl.journal_id AND {join_filter}
                WHERE j.owner_id = ?
                """,
                tuple(params),
            )

        # SQLite SUM은 TEXT를 REAL로 변환하므로 합계는 Decimal로 직접 계산
        debits: dict[str, Decimal] = {}
        credits: dict[str, Decimal] = {}
        for account_id, debit, credit in line_rows:
            debits[account_id] = debits.get(account_id, ZERO) + parse_amount(debit)
            credits[account_id] = credits.get(account_id, ZERO) + parse_amount(credit)

        rows = [
            TrialBalanceRow(
                account_id=account.id,
                code=account.code,
                name=account.name,
                type=account.type,
                opening_balance=account.opening_balance,
                total_debit=debits.get(account.id, ZERO),
                total_credit=credits.get(account.id, ZERO),
            )
            for account in accounts
        ]
        return TrialBalance(owner_id=owner_id, as_of=as_of_date, rows=rows, tolerance=self.tolerance)
