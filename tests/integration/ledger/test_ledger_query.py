"""
LedgerQuery 통합 테스트

누적 잔액과 시산표 검증.
"""

from decimal import Decimal

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.accounts import AccountRegistry
from core.ledger.errors import AccountNotFoundError
from core.ledger.journal import JournalLine
from core.ledger.poster import LedgerPoster
from core.ledger.query import OPENING_NARRATION, LedgerQuery

OWNER = "owner-1"


@pytest.fixture
def query(db: SQLiteAdapter) -> LedgerQuery:
    return LedgerQuery(db)


class TestRunningBalance:
    """계정 누적 잔액"""

    @pytest.mark.asyncio
    async def test_opening_then_lines_in_date_order(
        self, registry: AccountRegistry, poster: LedgerPoster, query: LedgerQuery
    ) -> None:
        """기초 1000, 차변 200, 대변 50 → 1000, 1200, 1150"""
        bank = await registry.create(OWNER, "1001", "Bank Account", "Asset", "1000")
        income = await registry.create(OWNER, "4001", "Sales", "Income")
        rent = await registry.create(OWNER, "5001", "Rent Expense", "Expense")

        # 입력 순서와 무관하게 일자 순으로 정렬됨
        await poster.post(
            OWNER, "2024-04-20", "Rent",
            [JournalLine.debit(rent.id, "50"), JournalLine.credit(bank.id, "50")],
        )
        await poster.post(
            OWNER, "2024-04-05", "Sale",
            [JournalLine.debit(bank.id, "200"), JournalLine.credit(income.id, "200")],
        )

        rows = await query.running_balance(bank.id)

        assert [(r.debit, r.credit, r.balance) for r in rows] == [
            (Decimal("0"), Decimal("0"), Decimal("1000.00")),
            (Decimal("200.00"), Decimal("0"), Decimal("1200.00")),
            (Decimal("0"), Decimal("50.00"), Decimal("1150.00")),
        ]
        assert rows[0].is_opening is True
        assert rows[0].narration == OPENING_NARRATION
        assert rows[0].date is None
        assert rows[1].narration == "Sale"
        assert rows[2].journal_number == "JV/2024/0001"

    @pytest.mark.asyncio
    async def test_no_activity_returns_opening_only(
        self, registry: AccountRegistry, query: LedgerQuery
    ) -> None:
        bank = await registry.create(OWNER, "1001", "Bank Account", "Asset", "500")

        rows = await query.running_balance(bank.id)

        assert len(rows) == 1
        assert rows[0].balance == Decimal("500.00")

    @pytest.mark.asyncio
    async def test_void_journal_excluded(
        self, registry: AccountRegistry, poster: LedgerPoster, query: LedgerQuery
    ) -> None:
        bank = await registry.create(OWNER, "1001", "Bank Account", "Asset")
        rent = await registry.create(OWNER, "5001", "Rent Expense", "Expense")
        journal = await poster.post(
            OWNER, "2024-04-01", "Rent",
            [JournalLine.debit(rent.id, "75"), JournalLine.credit(bank.id, "75")],
        )
        await poster.void(journal.id)

        rows = await query.running_balance(rent.id)

        assert len(rows) == 1

    @pytest.mark.asyncio
    async def test_as_of_cutoff(
        self, registry: AccountRegistry, poster: LedgerPoster, query: LedgerQuery
    ) -> None:
        bank = await registry.create(OWNER, "1001", "Bank Account", "Asset")
        rent = await registry.create(OWNER, "5001", "Rent Expense", "Expense")
        for day in ("2024-04-01", "2024-05-01", "2024-06-01"):
            await poster.post(
                OWNER, day, "Rent",
                [JournalLine.debit(rent.id, "10"), JournalLine.credit(bank.id, "10")],
            )

        rows = await query.running_balance(rent.id, as_of="2024-05-01")

        assert len(rows) == 3
        assert rows[-1].balance == Decimal("20.00")

    @pytest.mark.asyncio
    async def test_unknown_account(self, query: LedgerQuery) -> None:
        with pytest.raises(AccountNotFoundError):
            await query.running_balance("missing")


class TestTrialBalance:
    """시산표"""

    @pytest.mark.asyncio
    async def test_totals_balance(
        self, registry: AccountRegistry, poster: LedgerPoster, query: LedgerQuery
    ) -> None:
        bank = await registry.create(OWNER, "1001", "Bank Account", "Asset", "1000")
        income = await registry.create(OWNER, "4001", "Sales", "Income")
        rent = await registry.create(OWNER, "5001", "Rent Expense", "Expense")
        await poster.post(
            OWNER, "2024-04-05", "Sale",
            [JournalLine.debit(bank.id, "200"), JournalLine.credit(income.id, "200")],
        )
        await poster.post(
            OWNER, "2024-04-20", "Rent",
            [JournalLine.debit(rent.id, "50"), JournalLine.credit(bank.id, "50")],
        )

        trial = await query.trial_balance(OWNER)

        assert [row.code for row in trial.rows] == ["1001", "4001", "5001"]
        assert trial.total_debit == trial.total_credit == Decimal("250.00")
        assert trial.balanced is True

        bank_row = trial.rows[0]
        assert bank_row.total_debit == Decimal("200.00")
        assert bank_row.total_credit == Decimal("50.00")
        assert bank_row.closing_balance == Decimal("1150.00")

    @pytest.mark.asyncio
    async def test_excludes_void_and_other_owners(
        self, registry: AccountRegistry, poster: LedgerPoster, query: LedgerQuery
    ) -> None:
        bank = await registry.create(OWNER, "1001", "Bank Account", "Asset")
        rent = await registry.create(OWNER, "5001", "Rent Expense", "Expense")
        journal = await poster.post(
            OWNER, "2024-04-01", "Rent",
            [JournalLine.debit(rent.id, "75"), JournalLine.credit(bank.id, "75")],
        )
        await poster.void(journal.id)

        other_bank = await registry.create("owner-2", "1001", "Bank Account", "Asset")
        other_rent = await registry.create("owner-2", "5001", "Rent Expense", "Expense")
        await poster.post(
            "owner-2", "2024-04-01", "Rent",
            [JournalLine.debit(other_rent.id, "30"), JournalLine.credit(other_bank.id, "30")],
        )

        trial = await query.trial_balance(OWNER)

        assert len(trial.rows) == 2
        assert trial.total_debit == Decimal("0")
        assert trial.balanced is True

    @pytest.mark.asyncio
    async def test_includes_inactive_accounts(
        self, registry: AccountRegistry, poster: LedgerPoster, query: LedgerQuery
    ) -> None:
        bank = await registry.create(OWNER, "1001", "Bank Account", "Asset")
        rent = await registry.create(OWNER, "5001", "Rent Expense", "Expense")
        await poster.post(
            OWNER, "2024-04-01", "Rent",
            [JournalLine.debit(rent.id, "10"), JournalLine.credit(bank.id, "10")],
        )
        await registry.deactivate(rent.id)

        trial = await query.trial_balance(OWNER, as_of="2024-12-31")

        assert {row.account_id for row in trial.rows} == {bank.id, rent.id}
        assert trial.to_dict()["as_of"] == "2024-12-31"
