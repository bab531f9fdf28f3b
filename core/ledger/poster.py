"""
전표 전기 (LedgerPoster)

균형 검증 → 전표 번호 발급 → journals + journal_lines를 한 트랜잭션으로 저장.
검증 실패 시 아무것도 기록되지 않음.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import aiosqlite

from core.constants import Defaults, Sequences
from core.ledger.accounts import AccountRegistry
from core.ledger.errors import (
    InactiveAccountError,
    InsufficientLinesError,
    InvalidJournalLineError,
    JournalNotFoundError,
    SequenceConflictError,
    UnbalancedJournalError,
    is_unique_violation,
    wrap_storage_errors,
)
from core.ledger.journal import Journal, JournalLine, sum_side
from core.ledger.money import ZERO, format_amount, parse_amount, round2
from core.ledger.types import JournalSide, JournalStatus
from core.utils.locks import OwnerLockRegistry, get_owner_locks

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)

_JOURNAL_NUMBER_PATTERN = re.compile(rf"^{Sequences.JOURNAL_PREFIX}/\d+/(\d+)$")

LineInput = JournalLine | Mapping[str, Any]


def parse_date(value: date | str) -> date:
    """date 또는 ISO 문자열(YYYY-MM-DD, 시간 부분 허용) → date"""
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def format_journal_number(year: int, seq: int) -> str:
    """JV/<연도>/<4자리 일련번호>"""
    return f"{Sequences.JOURNAL_PREFIX}/{year}/{str(seq).zfill(Sequences.JOURNAL_SEQ_WIDTH)}"


def next_journal_seq(existing_numbers: Sequence[str]) -> int:
    """기존 번호 중 최대 일련번호 + 1 (없으면 1)"""
    highest = 0
    for number in existing_numbers:
        match = _JOURNAL_NUMBER_PATTERN.match(number)
        if match:
            highest = max(highest, int(match.group(1)))
    return highest + 1


def validate_lines(
    lines: Sequence[LineInput],
    tolerance: Decimal = Defaults.BALANCE_TOLERANCE,
) -> list[JournalLine]:
    """라인 검증 후 0이 아닌 라인만 반환

    금액은 먼저 2자리 반올림하므로 반올림 후 0인 라인(예: 0.004)도 제외됨.

    검증 순서:
    1. 금액이 있는 라인 2개 이상
    2. 한 라인에 차변과 대변을 동시에 입력하지 않음 (위반 시 UnbalancedJournalError)
    3. 차변 합계 = 대변 합계 (허용 오차 이내), 합계 > 0

    Raises:
        InsufficientLinesError
        InvalidJournalLineError: 음수 금액
        UnbalancedJournalError
    """
    raw: list[tuple[str, Decimal, Decimal, str | None]] = []
    for line in lines:
        if isinstance(line, JournalLine):
            raw.append((
                line.account_id,
                line.debit_amount or ZERO,
                line.credit_amount or ZERO,
                line.narration,
            ))
        else:
            raw.append((
                str(line["account_id"]),
                round2(line.get("debit")),
                round2(line.get("credit")),
                line.get("narration"),
            ))

    non_zero = [item for item in raw if item[1] != 0 or item[2] != 0]
    if len(non_zero) < 2:
        raise InsufficientLinesError(len(non_zero))

    if any(debit != 0 and credit != 0 for _, debit, credit, _ in non_zero):
        raise UnbalancedJournalError(
            sum((item[1] for item in non_zero), ZERO),
            sum((item[2] for item in non_zero), ZERO),
        )

    built: list[JournalLine] = []
    for account_id, debit, credit, narration in non_zero:
        if debit < 0 or credit < 0:
            raise InvalidJournalLineError(
                f"Line amount must not be negative: {account_id} debit={debit} credit={credit}"
            )
        built.append(JournalLine.from_amounts(account_id, debit, credit, narration))

    total_debit = sum_side(built, JournalSide.DEBIT)
    total_credit = sum_side(built, JournalSide.CREDIT)
    if total_debit <= 0 or abs(total_debit - total_credit) > tolerance:
        raise UnbalancedJournalError(total_debit, total_credit)

    return built


class LedgerPoster:
    """전표 전기

    멱등성은 보장하지 않음. 재시도 가능성이 있는 호출자는
    원천 이벤트 ID 등 자연키로 중복을 먼저 걸러야 함.

    Args:
        db: SQLite 어댑터
        tolerance: 차/대변 균형 허용 오차
        registry: 계정 검증용 AccountRegistry (None이면 생성)
        locks: 소유자 락 레지스트리
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        tolerance: Decimal = Defaults.BALANCE_TOLERANCE,
        registry: AccountRegistry | None = None,
        locks: OwnerLockRegistry | None = None,
    ):
        self.db = db
        self.tolerance = tolerance
        self.locks = locks or get_owner_locks(db)
        self.registry = registry or AccountRegistry(db, self.locks)

    async def post(
        self,
        owner_id: str,
        journal_date: date | str,
        narration: str,
        lines: Sequence[LineInput],
    ) -> Journal:
        """균형 전표 전기

        Args:
            owner_id: 소유자 ID
            journal_date: 전표 일자
            narration: 적요
            lines: JournalLine 또는 {account_id, debit|credit, narration} 목록

        Returns:
            저장된 Journal (status=posted)

        Raises:
            InsufficientLinesError / InvalidJournalLineError / UnbalancedJournalError
            AccountNotFoundError: 없는 계정 또는 다른 소유자의 계정
            InactiveAccountError
            SequenceConflictError: 전표 번호 경합
            LedgerStorageError
        """
        journal_lines = validate_lines(lines, self.tolerance)
        journal_date = parse_date(journal_date)

        journal = Journal(
            id=str(uuid4()),
            owner_id=owner_id,
            number="",
            date=journal_date,
            narration=narration,
            status=JournalStatus.POSTED,
            lines=journal_lines,
        )

        async with self.locks.hold(owner_id):
            with wrap_storage_errors("post_journal", owner_id):
                async with self.db.transaction():
                    await self._check_accounts(owner_id, journal_lines)
                    journal.number = await self.generate_journal_number(owner_id, journal_date)
                    try:
                        await self._insert_journal(journal)
                    except aiosqlite.IntegrityError as e:
                        if is_unique_violation(e):
                            logger.warning(
                                f"전표 번호 충돌: {journal.number}",
                                extra={"owner_id": owner_id},
                            )
                            raise SequenceConflictError(owner_id, "journal number", journal.number) from e
                        raise
                    await self._insert_lines(journal)

        logger.info(
            f"전표 전기: {journal.number} {journal.narration}",
            extra={
                "owner_id": owner_id,
                "journal_id": journal.id,
                "total_debit": str(journal.total_debit),
                "line_count": len(journal.lines),
            },
        )
        return journal

    async def generate_journal_number(self, owner_id: str, journal_date: date | str) -> str:
        """다음 전표 번호 계산 (저장하지 않음)

        전표 일자의 연도별로 소유자 단위 일련번호 증가.
        """
        year = parse_date(journal_date).year
        prefix = f"{Sequences.JOURNAL_PREFIX}/{year}/"
        with wrap_storage_errors("generate_journal_number", owner_id):
            rows = await self.db.fetchall(
                "SELECT number FROM journals WHERE owner_id = ? AND number LIKE ?",
                (owner_id, f"{prefix}%"),
            )
        return format_journal_number(year, next_journal_seq([row[0] for row in rows]))

    async def void(self, journal_id: str) -> Journal:
        """전표 무효화 (삭제하지 않음, 잔액 계산에서 제외)

        Raises:
            JournalNotFoundError
        """
        journal = await self.get_journal(journal_id)
        if journal is None:
            raise JournalNotFoundError(journal_id)
        if journal.status == JournalStatus.VOID:
            return journal

        async with self.locks.hold(journal.owner_id):
            with wrap_storage_errors("void_journal", journal.owner_id):
                async with self.db.transaction():
                    await self.db.execute(
                        "UPDATE journals SET status = ? WHERE id = ?",
                        (JournalStatus.VOID.value, journal_id),
                    )

        journal.status = JournalStatus.VOID
        logger.info(
            f"전표 무효화: {journal.number}",
            extra={"owner_id": journal.owner_id, "journal_id": journal_id},
        )
        return journal

    async def get_journal(self, journal_id: str) -> Journal | None:
        """전표 단건 조회 (라인 포함, 입력 순)"""
        with wrap_storage_errors("get_journal"):
            row = await self.db.fetchone(
                "SELECT id, owner_id, number, date, narration, status FROM journals WHERE id = ?",
                (journal_id,),
            )
            if row is None:
                return None
            line_rows = await self.db.fetchall(
                """
                SELECT account_id, debit, credit, narration
                FROM journal_lines
                WHERE journal_id = ?
                ORDER BY id
                """,
                (journal_id,),
            )
        return _journal_from_rows(row, line_rows)

    async def list_journals(
        self,
        owner_id: str,
        start: date | None = None,
        end: date | None = None,
    ) -> list[Journal]:
        """소유자 전표 목록 (일자, 번호 순)"""
        sql = "SELECT id, owner_id, number, date, narration, status FROM journals WHERE owner_id = ?"
        params: list[Any] = [owner_id]
        if start is not None:
            sql += " AND date >= ?"
            params.append(start.isoformat())
        if end is not None:
            sql += " AND date <= ?"
            params.append(end.isoformat())
        sql += " ORDER BY date, number"

        journals: list[Journal] = []
        with wrap_storage_errors("list_journals", owner_id):
            rows = await self.db.fetchall(sql, tuple(params))
            for row in rows:
                line_rows = await self.db.fetchall(
                    """
                    SELECT account_id, debit, credit, narration
                    FROM journal_lines
                    WHERE journal_id = ?
                    ORDER BY id
                    """,
                    (row[0],),
                )
                journals.append(_journal_from_rows(row, line_rows))
        return journals

    # -------------------------------------------------------------------------
    # 내부
    # -------------------------------------------------------------------------

    async def _check_accounts(self, owner_id: str, lines: list[JournalLine]) -> None:
        """라인의 모든 계정이 같은 소유자의 활성 계정인지 확인"""
        for account_id in dict.fromkeys(line.account_id for line in lines):
            account = await self.registry.require(account_id, owner_id)
            if not account.is_active:
                raise InactiveAccountError(account_id)

    async def _insert_journal(self, journal: Journal) -> None:
        await self.db.execute(
            """
            INSERT INTO journals (id, owner_id, number, date, narration, status)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                journal.id,
                journal.owner_id,
                journal.number,
                journal.date.isoformat(),
                journal.narration,
                journal.status.value,
            ),
        )

    async def _insert_lines(self, journal: Journal) -> None:
        await self.db.executemany(
            """
            INSERT INTO journal_lines (journal_id, account_id, debit, credit, narration, line_order)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    journal.id,
                    line.account_id,
                    format_amount(line.debit_amount),
                    format_amount(line.credit_amount),
                    line.narration,
                    i,
                )
                for i, line in enumerate(journal.lines)
            ],
        )


def _journal_from_rows(row: tuple[Any, ...], line_rows: list[tuple[Any, ...]]) -> Journal:
    lines = [
        JournalLine.from_amounts(
            account_id=line_row[0],
            debit=parse_amount(line_row[1]),
            credit=parse_amount(line_row[2]),
            narration=line_row[3],
        )
        for line_row in line_rows
    ]
    return Journal(
        id=row[0],
        owner_id=row[1],
        number=row[2],
        date=parse_date(row[3]),
        narration=row[4],
        status=JournalStatus(row[5]),
        lines=lines,
    )
