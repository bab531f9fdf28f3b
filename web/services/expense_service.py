"""
비용 전기 서비스

expenses 레코드를 SubsidiaryPostingEngine으로 전기하고
원천 레코드에 전표를 연결 (posted_to_ledger, journal_id, status).
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.constants import Defaults
from core.ledger.accounts import AccountRegistry
from core.ledger.errors import LedgerValidationError, wrap_storage_errors
from core.ledger.journal import Journal
from core.ledger.money import parse_amount
from core.ledger.poster import LedgerPoster, parse_date
from core.ledger.posting_engine import ExpenseEvent, SubsidiaryPostingEngine

logger = logging.getLogger(__name__)

POSTED_STATUS = "posted"


class ExpenseNotFoundError(LedgerValidationError):
    """비용 레코드가 없거나 다른 소유자의 레코드"""

    def __init__(self, expense_id: str, owner_id: str):
        self.expense_id = expense_id
        self.owner_id = owner_id
        super().__init__(f"Expense {expense_id} not found for owner {owner_id}")


@dataclass(frozen=True)
class ExpensePostResult:
    """비용 전기 결과"""

    expense_id: str
    journal: Journal
    already_posted: bool


class ExpenseService:
    """비용 전기 서비스

    전기 전에 expense_id(자연키)로 이미 전기된 비용을 걸러
    재시도 시 전표가 중복 생성되지 않도록 함.

    Args:
        db: SQLite 어댑터 (쓰기 가능)
        tolerance: 전표 균형 허용 오차
        retry_attempts: 일련번호 충돌 재시도 횟수
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        tolerance: Decimal = Defaults.BALANCE_TOLERANCE,
        retry_attempts: int = Defaults.SEQUENCE_RETRY_ATTEMPTS,
    ):
        self.db = db
        self.registry = AccountRegistry(db)
        self.poster = LedgerPoster(db, tolerance=tolerance, registry=self.registry)
        self.engine = SubsidiaryPostingEngine(self.registry, self.poster, retry_attempts)

    async def post_expense(self, owner_id: str, expense_id: str) -> ExpensePostResult:
        """비용 전기 + 원천 레코드 연결

        Args:
            owner_id: 소유자 ID
            expense_id: 비용 ID

        Returns:
            ExpensePostResult (이미 전기된 경우 기존 전표)

        Raises:
            ExpenseNotFoundError
            DegenerateEventError / UnbalancedJournalError 등 검증 예외
            SequenceConflictError: 재시도 한도 초과
        """
        with wrap_storage_errors("load_expense", owner_id):
            row = await self.db.fetchone(
                """
                SELECT expense_date, vendor_name, category_name, description,
                       amount, tax_amount, tds_amount, payment_mode,
                       posted_to_ledger, journal_id
                FROM expenses
                WHERE id = ? AND owner_id = ?
                """,
                (expense_id, owner_id),
            )
        if row is None:
            raise ExpenseNotFoundError(expense_id, owner_id)

        if row[8] and row[9]:
            existing = await self.poster.get_journal(row[9])
            if existing is not None:
                logger.info(
                    f"이미 전기된 비용: {expense_id} → {existing.number}",
                    extra={"owner_id": owner_id, "expense_id": expense_id},
                )
                return ExpensePostResult(expense_id, existing, already_posted=True)

        event = ExpenseEvent(
            date=parse_date(row[0]),
            payee_name=row[1] or "",
            category_name=row[2],
            description=row[3] or "",
            gross_amount=parse_amount(row[4]),
            tax_amount=parse_amount(row[5]),
            tds_amount=parse_amount(row[6]),
            payment_mode=row[7],
        )
        journal = await self.engine.post_expense(owner_id, event)

        with wrap_storage_errors("link_expense", owner_id):
            async with self.db.transaction():
                await self.db.execute(
                    """
                    UPDATE expenses
                    SET posted_to_ledger = 1, journal_id = ?, status = ?
                    WHERE id = ?
                    """,
                    (journal.id, POSTED_STATUS, expense_id),
                )

        logger.info(
            f"비용 전기 연결: {expense_id} → {journal.number}",
            extra={"owner_id": owner_id, "expense_id": expense_id, "journal_id": journal.id},
        )
        return ExpensePostResult(expense_id, journal, already_posted=False)
