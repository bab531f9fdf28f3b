"""
원장 조회 API 라우트

계정 누적 잔액, 시산표.
"""

from datetime import date

from fastapi import APIRouter, Depends, Path, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings
from core.ledger.errors import LedgerValidationError
from core.ledger.query import LedgerQuery
from web.dependencies import get_app_settings, get_db
from web.errors import to_http_exception
from web.models.responses import (
    AccountResponse,
    LedgerRowResponse,
    RunningBalanceResponse,
    TrialBalanceResponse,
)

router = APIRouter(prefix="/api/ledger", tags=["Ledger"])


@router.get("/accounts/{account_id}/running-balance", response_model=RunningBalanceResponse)
async def get_running_balance(
    account_id: str = Path(..., description="계정 ID"),
    as_of: date | None = Query(default=None, description="기준일 (포함)"),
    db: SQLiteAdapter = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> RunningBalanceResponse:
    """계정 누적 잔액

    첫 행은 기초 잔액, 이후 (전표 일자, 입력 순).
    """
    query = LedgerQuery(db, tolerance=settings.balance_tolerance)
    try:
        account = await query.registry.require(account_id)
        rows = await query.running_balance(account_id, as_of)
    except LedgerValidationError as e:
        raise to_http_exception(e) from e

    return RunningBalanceResponse(
        account=AccountResponse(**account.to_dict()),
        rows=[LedgerRowResponse(**row.to_dict()) for row in rows],
        closing_balance=str(rows[-1].balance),
    )


@router.get("/trial-balance", response_model=TrialBalanceResponse)
async def get_trial_balance(
    owner_id: str = Query(..., min_length=1, description="소유자 ID"),
    as_of: date | None = Query(default=None, description="기준일 (포함)"),
    db: SQLiteAdapter = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> TrialBalanceResponse:
    """시산표 (무효 전표 제외)"""
    query = LedgerQuery(db, tolerance=settings.balance_tolerance)
    trial_balance = await query.trial_balance(owner_id, as_of)
    return TrialBalanceResponse(**trial_balance.to_dict())
