"""
Ledger 예외 → HTTP 응답 변환

- 검증 예외: 422
- 코드 중복 / 일련번호 경합: 409
- 계정 / 전표 없음: 404
"""

from fastapi import HTTPException

from core.ledger.errors import (
    AccountNotFoundError,
    DuplicateCodeError,
    JournalNotFoundError,
    LedgerError,
    LedgerValidationError,
    SequenceConflictError,
    UnbalancedJournalError,
)


def to_http_exception(error: LedgerError) -> HTTPException:
    """Ledger 예외를 HTTPException으로 변환

    라우트는 검증/충돌 예외만 변환하고 저장소 예외(LedgerStorageError)는 그대로 전파.
    """
    if isinstance(error, (AccountNotFoundError, JournalNotFoundError)):
        return HTTPException(status_code=404, detail=str(error))

    if isinstance(error, (DuplicateCodeError, SequenceConflictError)):
        return HTTPException(status_code=409, detail=str(error))

    if isinstance(error, UnbalancedJournalError):
        return HTTPException(
            status_code=422,
            detail={
                "error": type(error).__name__,
                "message": str(error),
                "total_debit": str(error.total_debit),
                "total_credit": str(error.total_credit),
            },
        )

    if isinstance(error, LedgerValidationError):
        return HTTPException(
            status_code=422,
            detail={"error": type(error).__name__, "message": str(error)},
        )

    return HTTPException(status_code=500, detail=str(error))
