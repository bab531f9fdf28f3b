"""
전표 API 라우트

수동 전표 전기, 조회, 무효화.
"""

from fastapi import APIRouter, Depends, HTTPException, Path

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings
from core.ledger.errors import LedgerValidationError, SequenceConflictError
from core.ledger.poster import LedgerPoster
from web.dependencies import get_app_settings, get_db, get_db_write
from web.errors import to_http_exception
from web.models.requests import JournalCreateRequest
from web.models.responses import JournalResponse

router = APIRouter(prefix="/api/journals", tags=["Journals"])


@router.post("", response_model=JournalResponse, status_code=201)
async def post_journal(
    request: JournalCreateRequest,
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> JournalResponse:
    """균형 전표 전기

    차변 합계 = 대변 합계 (허용 오차 이내)가 아니면 422.
    멱등성 보장 없음: 재시도 시 호출자가 중복을 걸러야 함.
    """
    poster = LedgerPoster(db, tolerance=settings.balance_tolerance)
    lines = [line.model_dump() for line in request.lines]
    try:
        journal = await poster.post(request.owner_id, request.date, request.narration, lines)
    except (LedgerValidationError, SequenceConflictError) as e:
        raise to_http_exception(e) from e

    return JournalResponse(**journal.to_dict())


@router.get("/{journal_id}", response_model=JournalResponse)
async def get_journal(
    journal_id: str = Path(..., description="전표 ID"),
    db: SQLiteAdapter = Depends(get_db),
) -> JournalResponse:
    """전표 조회 (라인 포함)"""
    journal = await LedgerPoster(db).get_journal(journal_id)
    if journal is None:
        raise HTTPException(status_code=404, detail=f"Journal {journal_id} not found")
    return JournalResponse(**journal.to_dict())


@router.post("/{journal_id}/void", response_model=JournalResponse)
async def void_journal(
    journal_id: str = Path(..., description="전표 ID"),
    db: SQLiteAdapter = Depends(get_db_write),
) -> JournalResponse:
    """전표 무효화 (삭제하지 않음)"""
    try:
        journal = await LedgerPoster(db).void(journal_id)
    except LedgerValidationError as e:
        raise to_http_exception(e) from e

    return JournalResponse(**journal.to_dict())
