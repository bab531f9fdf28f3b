"""
세금 API 라우트

GSTR-1 / GSTR-3B / TDS 요약, TDS 거래 기록.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.errors import LedgerValidationError
from core.tax.aggregator import DateRange, TaxAggregator, TaxKind
from core.tax.tds import TdsRegister
from web.dependencies import get_db, get_db_write
from web.errors import to_http_exception
from web.models.requests import TdsTransactionRequest
from web.models.responses import TaxSummaryResponse, TdsTransactionResponse

router = APIRouter(prefix="/api/tax", tags=["Tax"])

_ENVELOPE_KEYS = ("return_type", "owner_id", "period")


@router.get("/summary", response_model=TaxSummaryResponse)
async def get_tax_summary(
    owner_id: str = Query(..., min_length=1, description="소유자 ID"),
    kind: str = Query(default=TaxKind.GSTR3B.value, description="요약 종류 (GSTR1/GSTR3B/TDS)"),
    start: date | None = Query(default=None, description="시작일 (포함)"),
    end: date | None = Query(default=None, description="종료일 (포함)"),
    db: SQLiteAdapter = Depends(get_db),
) -> TaxSummaryResponse:
    """신고용 요약

    매 호출마다 원천 문서에서 다시 계산.
    데이터가 없으면 0으로 채운 요약.
    """
    try:
        tax_kind = TaxKind.parse(kind)
        period = DateRange(start=start, end=end)
        summary = await TaxAggregator(db).summarize(owner_id, period, tax_kind)
    except LedgerValidationError as e:
        raise to_http_exception(e) from e

    data = summary.to_dict()
    return TaxSummaryResponse(
        return_type=data["return_type"],
        owner_id=data["owner_id"],
        period=data["period"],
        summary={key: value for key, value in data.items() if key not in _ENVELOPE_KEYS},
    )


@router.post("/tds", response_model=TdsTransactionResponse, status_code=201)
async def record_tds_transaction(
    request: TdsTransactionRequest,
    db: SQLiteAdapter = Depends(get_db_write),
) -> TdsTransactionResponse:
    """TDS 거래 기록 (원천징수액 / 실지급액은 서버에서 계산)"""
    try:
        transaction = await TdsRegister(db).record(
            owner_id=request.owner_id,
            transaction_date=request.transaction_date,
            vendor_name=request.vendor_name,
            transaction_amount=request.transaction_amount,
            tds_rate=request.tds_rate,
            tds_rule_id=request.tds_rule_id,
            vendor_pan=request.vendor_pan,
            description=request.description,
            certificate_number=request.certificate_number,
        )
    except LedgerValidationError as e:
        raise to_http_exception(e) from e

    return TdsTransactionResponse(**transaction.to_dict())
