"""
비용 전기 API 라우트
"""

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings
from core.ledger.errors import LedgerValidationError, SequenceConflictError
from web.dependencies import get_app_settings, get_db_write
from web.errors import to_http_exception
from web.models.responses import ExpensePostResponse, JournalResponse
from web.services.expense_service import ExpenseNotFoundError, ExpenseService

router = APIRouter(prefix="/api/expenses", tags=["Expenses"])


@router.post("/{expense_id}/post", response_model=ExpensePostResponse)
async def post_expense(
    expense_id: str = Path(..., description="비용 ID"),
    owner_id: str = Query(..., min_length=1, description="소유자 ID"),
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> ExpensePostResponse:
    """비용을 원장에 전기

    Dr 비용 / Dr 매입세액 / Cr 지급 계정 / Cr TDS 예수금.
    이미 전기된 비용이면 기존 전표를 반환 (already_posted=true).
    """
    service = ExpenseService(
        db,
        tolerance=settings.balance_tolerance,
        retry_attempts=settings.sequence_retry_attempts,
    )
    try:
        result = await service.post_expense(owner_id, expense_id)
    except ExpenseNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except (LedgerValidationError, SequenceConflictError) as e:
        raise to_http_exception(e) from e

    return ExpensePostResponse(
        expense_id=result.expense_id,
        already_posted=result.already_posted,
        journal=JournalResponse(**result.journal.to_dict()),
    )
