"""
복식부기 (Double-Entry Bookkeeping) 원장

계정과목, 전표 전기, 업무 이벤트 자동 전기, 원장 조회.

사용 예시:
```python
from core.ledger import AccountRegistry, LedgerPoster, LedgerQuery, JournalLine

registry = AccountRegistry(db)
poster = LedgerPoster(db, registry=registry)

bank = await registry.find_or_create("owner-1", "Asset", "Bank Account")
rent = await registry.find_or_create("owner-1", "Expense", "Rent", "Rent Expense")

journal = await poster.post(
    "owner-1",
    date(2024, 4, 1),
    "April rent",
    [
        JournalLine.debit(rent.id, Decimal("25000.00")),
        JournalLine.credit(bank.id, Decimal("25000.00")),
    ],
)

rows = await LedgerQuery(db).running_balance(bank.id)
```
"""

from core.ledger.accounts import Account, AccountRegistry
from core.ledger.errors import (
    AccountNotFoundError,
    DegenerateEventError,
    DuplicateCodeError,
    InactiveAccountError,
    InsufficientLinesError,
    InvalidAccountTypeError,
    InvalidJournalLineError,
    JournalNotFoundError,
    LedgerError,
    LedgerStorageError,
    LedgerValidationError,
    SequenceConflictError,
    UnbalancedJournalError,
)
from core.ledger.journal import Journal, JournalLine, LedgerBalanceRow
from core.ledger.poster import LedgerPoster
from core.ledger.posting_engine import ExpenseEvent, SubsidiaryPostingEngine
from core.ledger.query import LedgerQuery, TrialBalance, TrialBalanceRow
from core.ledger.types import AccountType, JournalSide, JournalStatus, PaymentMode

__all__ = [
    # 핵심 클래스
    "AccountRegistry",
    "LedgerPoster",
    "SubsidiaryPostingEngine",
    "LedgerQuery",
    # 데이터
    "Account",
    "Journal",
    "JournalLine",
    "LedgerBalanceRow",
    "ExpenseEvent",
    "TrialBalance",
    "TrialBalanceRow",
    # Enum
    "AccountType",
    "JournalSide",
    "JournalStatus",
    "PaymentMode",
    # 예외
    "LedgerError",
    "LedgerValidationError",
    "UnbalancedJournalError",
    "InsufficientLinesError",
    "InvalidJournalLineError",
    "DegenerateEventError",
    "DuplicateCodeError",
    "InvalidAccountTypeError",
    "AccountNotFoundError",
    "InactiveAccountError",
    "JournalNotFoundError",
    "SequenceConflictError",
    "LedgerStorageError",
]
