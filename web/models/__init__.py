"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    AccountCreateRequest,
    JournalCreateRequest,
    JournalLineRequest,
    TdsTransactionRequest,
)
from web.models.responses import (
    AccountResponse,
    ExpensePostResponse,
    HealthResponse,
    JournalLineResponse,
    JournalResponse,
    LedgerRowResponse,
    RunningBalanceResponse,
    TaxSummaryResponse,
    TdsTransactionResponse,
    TrialBalanceResponse,
    TrialBalanceRowResponse,
)

__all__ = [
    # Requests
    "AccountCreateRequest",
    "JournalCreateRequest",
    "JournalLineRequest",
    "TdsTransactionRequest",
    # Responses
    "AccountResponse",
    "ExpensePostResponse",
    "HealthResponse",
    "JournalLineResponse",
    "JournalResponse",
    "LedgerRowResponse",
    "RunningBalanceResponse",
    "TaxSummaryResponse",
    "TdsTransactionResponse",
    "TrialBalanceResponse",
    "TrialBalanceRowResponse",
]
