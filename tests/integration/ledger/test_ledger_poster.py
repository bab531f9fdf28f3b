"""
LedgerPoster 통합 테스트

전표 전기 / 번호 발급 / 원자성 / 무효화 검증.
"""

import random
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.accounts import Account, AccountRegistry
from core.ledger.errors import (
    AccountNotFoundError,
    InactiveAccountError,
    InsufficientLinesError,
    JournalNotFoundError,
    SequenceConflictError,
    UnbalancedJournalError,
)
from core.ledger.journal import JournalLine
from core.ledger.poster import LedgerPoster
from core.ledger.types import JournalStatus

OWNER = "owner-1"


async def _count(db: SQLiteAdapter, table: str) -> int:
    row = await db.fetchone(f"SELECT COUNT(*) FROM {table}")
    return row[0]


@pytest_asyncio.fixture
async def rent_and_bank(registry: AccountRegistry) -> tuple[Account, Account]:
    rent = await registry.create(OWNER, "5001", "Rent Expense", "Expense")
    bank = await registry.create(OWNER, "1001", "Bank Account", "Asset", "100000")
    return rent, bank


class TestPost:
    """전기"""

    @pytest.mark.asyncio
    async def test_post_balanced_journal(
        self, db: SQLiteAdapter, poster: LedgerPoster, rent_and_bank
    ) -> None:
        rent, bank = rent_and_bank

        journal = await poster.post(
            OWNER,
            "2024-04-01",
            "Office rent",
            [
                JournalLine.debit(rent.id, "25000"),
                JournalLine.credit(bank.id, "25000"),
            ],
        )

        assert journal.number == "JV/2024/0001"
        assert journal.status == JournalStatus.POSTED
        assert journal.total_debit == journal.total_credit == Decimal("25000.00")

        stored = await poster.get_journal(journal.id)
        assert stored is not None
        assert stored.number == journal.number
        assert [line.account_id for line in stored.lines] == [rent.id, bank.id]
        assert await _count(db, "journal_lines") == 2

    @pytest.mark.asyncio
    async def test_post_accepts_mapping_lines(
        self, poster: LedgerPoster, rent_and_bank
    ) -> None:
        rent, bank = rent_and_bank

        journal = await poster.post(
            OWNER,
            "2024-04-01",
            "Office rent",
            [
                {"account_id": rent.id, "debit": "1000.00"},
                {"account_id": bank.id, "credit": "1000.00", "narration": "NEFT"},
            ],
        )

        assert journal.lines[1].narration == "NEFT"

    @pytest.mark.asyncio
    async def test_unbalanced_journal_writes_nothing(
        self, db: SQLiteAdapter, poster: LedgerPoster, rent_and_bank
    ) -> None:
        """차변 1000 / 대변 999 → 거부, 저장되는 행 없음"""
        rent, bank = rent_and_bank

        with pytest.raises(UnbalancedJournalError) as exc_info:
            await poster.post(
                OWNER,
                "2024-04-01",
                "Typo",
                [
                    {"account_id": rent.id, "debit": "1000"},
                    {"account_id": bank.id, "credit": "999"},
                ],
            )

        assert exc_info.value.difference == Decimal("1.00")
        assert await _count(db, "journals") == 0
        assert await _count(db, "journal_lines") == 0

    @pytest.mark.asyncio
    async def test_single_line_rejected(self, poster: LedgerPoster, rent_and_bank) -> None:
        rent, _ = rent_and_bank

        with pytest.raises(InsufficientLinesError):
            await poster.post(OWNER, "2024-04-01", "One", [JournalLine.debit(rent.id, "10")])

    @pytest.mark.asyncio
    async def test_zero_lines_are_not_stored(
        self, db: SQLiteAdapter, poster: LedgerPoster, rent_and_bank
    ) -> None:
        rent, bank = rent_and_bank

        journal = await poster.post(
            OWNER,
            "2024-04-01",
            "With zero line",
            [
                JournalLine.debit(rent.id, "10"),
                JournalLine.debit(bank.id, "0"),
                JournalLine.credit(bank.id, "10"),
            ],
        )

        assert len(journal.lines) == 2
        assert await _count(db, "journal_lines") == 2


class TestAccountChecks:
    """라인 계정 검증"""

    @pytest.mark.asyncio
    async def test_unknown_account(self, db: SQLiteAdapter, poster: LedgerPoster, rent_and_bank) -> None:
        rent, _ = rent_and_bank

        with pytest.raises(AccountNotFoundError):
            await poster.post(
                OWNER,
                "2024-04-01",
                "Unknown",
                [JournalLine.debit(rent.id, "10"), JournalLine.credit("missing", "10")],
            )
        assert await _count(db, "journals") == 0

    @pytest.mark.asyncio
    async def test_other_owner_account(
        self, db: SQLiteAdapter, registry: AccountRegistry, poster: LedgerPoster, rent_and_bank
    ) -> None:
        rent, _ = rent_and_bank
        foreign_bank = await registry.create("owner-2", "1001", "Bank Account", "Asset")

        with pytest.raises(AccountNotFoundError) as exc_info:
            await poster.post(
                OWNER,
                "2024-04-01",
                "Foreign",
                [JournalLine.debit(rent.id, "10"), JournalLine.credit(foreign_bank.id, "10")],
            )

        assert exc_info.value.account_id == foreign_bank.id
        assert await _count(db, "journals") == 0

    @pytest.mark.asyncio
    async def test_inactive_account(
        self, db: SQLiteAdapter, registry: AccountRegistry, poster: LedgerPoster, rent_and_bank
    ) -> None:
        rent, bank = rent_and_bank
        await registry.deactivate(bank.id)

        with pytest.raises(InactiveAccountError):
            await poster.post(
                OWNER,
                "2024-04-01",
                "Inactive",
                [JournalLine.debit(rent.id, "10"), JournalLine.credit(bank.id, "10")],
            )
        assert await _count(db, "journals") == 0


class TestJournalNumbers:
    """전표 번호"""

    @pytest.mark.asyncio
    async def test_sequence_increments_per_year(
        self, poster: LedgerPoster, rent_and_bank
    ) -> None:
        rent, bank = rent_and_bank
        lines = [JournalLine.debit(rent.id, "10"), JournalLine.credit(bank.id, "10")]

        first = await poster.post(OWNER, "2024-04-01", "A", lines)
        second = await poster.post(OWNER, "2024-05-01", "B", lines)
        next_year = await poster.post(OWNER, "2025-01-02", "C", lines)

        assert first.number == "JV/2024/0001"
        assert second.number == "JV/2024/0002"
        assert next_year.number == "JV/2025/0001"

    @pytest.mark.asyncio
    async def test_sequence_is_per_owner(
        self, registry: AccountRegistry, poster: LedgerPoster, rent_and_bank
    ) -> None:
        rent, bank = rent_and_bank
        await poster.post(
            OWNER, "2024-04-01", "A",
            [JournalLine.debit(rent.id, "10"), JournalLine.credit(bank.id, "10")],
        )
        other_rent = await registry.create("owner-2", "5001", "Rent Expense", "Expense")
        other_bank = await registry.create("owner-2", "1001", "Bank Account", "Asset")

        other = await poster.post(
            "owner-2", "2024-04-01", "A",
            [JournalLine.debit(other_rent.id, "10"), JournalLine.credit(other_bank.id, "10")],
        )

        assert other.number == "JV/2024/0001"

    @pytest.mark.asyncio
    async def test_sequence_past_four_digits(
        self, db: SQLiteAdapter, poster: LedgerPoster, rent_and_bank
    ) -> None:
        """9999 다음은 10000 (숫자 기준 최댓값)"""
        rent, bank = rent_and_bank
        await db.execute(
            "INSERT INTO journals (id, owner_id, number, date) VALUES (?, ?, ?, ?)",
            ("seed", OWNER, "JV/2024/9999", "2024-04-01"),
        )
        await db.commit()

        assert await poster.generate_journal_number(OWNER, "2024-06-01") == "JV/2024/10000"

    @pytest.mark.asyncio
    async def test_number_conflict_raises_sequence_conflict(
        self, db: SQLiteAdapter, poster: LedgerPoster, rent_and_bank
    ) -> None:
        """다른 작성자가 같은 번호를 먼저 커밋한 경우"""
        rent, bank = rent_and_bank
        await db.execute(
            "INSERT INTO journals (id, owner_id, number, date) VALUES (?, ?, ?, ?)",
            ("other-writer", OWNER, "JV/2024/0001", "2024-04-01"),
        )
        await db.commit()

        with patch.object(
            poster, "generate_journal_number", AsyncMock(return_value="JV/2024/0001")
        ):
            with pytest.raises(SequenceConflictError) as exc_info:
                await poster.post(
                    OWNER,
                    "2024-04-01",
                    "Conflict",
                    [JournalLine.debit(rent.id, "10"), JournalLine.credit(bank.id, "10")],
                )

        assert exc_info.value.value == "JV/2024/0001"
        assert await _count(db, "journals") == 1
        assert await _count(db, "journal_lines") == 0


class TestAtomicity:
    """전표와 라인은 함께 저장되거나 함께 버려짐"""

    @pytest.mark.asyncio
    async def test_failure_after_header_rolls_back(
        self, db: SQLiteAdapter, poster: LedgerPoster, rent_and_bank
    ) -> None:
        rent, bank = rent_and_bank

        with patch.object(
            poster, "_insert_lines", AsyncMock(side_effect=RuntimeError("disk full"))
        ):
            with pytest.raises(RuntimeError):
                await poster.post(
                    OWNER,
                    "2024-04-01",
                    "Crash",
                    [JournalLine.debit(rent.id, "10"), JournalLine.credit(bank.id, "10")],
                )

        assert await _count(db, "journals") == 0
        assert await _count(db, "journal_lines") == 0

        # 실패한 번호는 재사용됨
        journal = await poster.post(
            OWNER,
            "2024-04-01",
            "Retry",
            [JournalLine.debit(rent.id, "10"), JournalLine.credit(bank.id, "10")],
        )
        assert journal.number == "JV/2024/0001"

    @pytest.mark.asyncio
    async def test_random_postings_keep_ledger_balanced(
        self, db: SQLiteAdapter, registry: AccountRegistry, poster: LedgerPoster
    ) -> None:
        """균형/불균형 전표를 섞어 전기해도 저장된 차/대변 합계는 항상 일치"""
        rng = random.Random(20240401)
        accounts = [
            await registry.create_next(OWNER, "Asset", f"Asset {i}") for i in range(4)
        ]

        for _ in range(40):
            amount = Decimal(rng.randint(1, 100000)) / 100
            debit_account, credit_account = rng.sample(accounts, 2)
            credit_amount = amount if rng.random() < 0.7 else amount + Decimal("1.00")
            try:
                await poster.post(
                    OWNER,
                    "2024-04-01",
                    "Random",
                    [
                        JournalLine.debit(debit_account.id, amount),
                        JournalLine.credit(credit_account.id, credit_amount),
                    ],
                )
            except UnbalancedJournalError:
                pass

        rows = await db.fetchall("SELECT debit, credit FROM journal_lines")
        total_debit = sum(Decimal(r[0]) for r in rows if r[0] is not None)
        total_credit = sum(Decimal(r[1]) for r in rows if r[1] is not None)
        assert total_debit == total_credit


class TestVoid:
    """무효화"""

    @pytest.mark.asyncio
    async def test_void_keeps_rows(
        self, db: SQLiteAdapter, poster: LedgerPoster, rent_and_bank
    ) -> None:
        rent, bank = rent_and_bank
        journal = await poster.post(
            OWNER,
            "2024-04-01",
            "To void",
            [JournalLine.debit(rent.id, "10"), JournalLine.credit(bank.id, "10")],
        )

        voided = await poster.void(journal.id)
        again = await poster.void(journal.id)

        assert voided.status == JournalStatus.VOID
        assert again.status == JournalStatus.VOID
        assert await _count(db, "journal_lines") == 2

    @pytest.mark.asyncio
    async def test_void_unknown(self, poster: LedgerPoster) -> None:
        with pytest.raises(JournalNotFoundError):
            await poster.void("missing")


class TestListJournals:
    """전표 목록"""

    @pytest.mark.asyncio
    async def test_filters_by_date(self, poster: LedgerPoster, rent_and_bank) -> None:
        rent, bank = rent_and_bank
        lines = [JournalLine.debit(rent.id, "10"), JournalLine.credit(bank.id, "10")]
        await poster.post(OWNER, "2024-04-01", "April", lines)
        await poster.post(OWNER, "2024-05-01", "May", lines)

        journals = await poster.list_journals(OWNER, start=date(2024, 4, 15))

        assert [j.narration for j in journals] == ["May"]
        assert len(journals[0].lines) == 2
