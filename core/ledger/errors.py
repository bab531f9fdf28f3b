"""
Ledger 예외 정의

- 검증 예외: 호출자가 입력을 고쳐야 함 (자동 재시도 금지)
- 충돌 예외: 일련번호 경합, 새 상태로 재시도 가능
- 저장소 예외: DB 드라이버 오류에 작업명/소유자 컨텍스트를 붙여 전달
"""

import logging
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Iterator

import aiosqlite

logger = logging.getLogger(__name__)


class LedgerError(Exception):
    """Ledger 예외 기본 클래스"""

    pass


# =========================================================================
# 검증 예외
# =========================================================================


class LedgerValidationError(LedgerError):
    """입력 검증 실패"""

    pass


class UnbalancedJournalError(LedgerValidationError):
    """차변 합계와 대변 합계가 허용 오차를 넘어 다름 (또는 합계가 0)"""

    def __init__(self, total_debit: Decimal, total_credit: Decimal):
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(
            f"Unbalanced journal: debit={total_debit} credit={total_credit} "
            f"difference={total_debit - total_credit}"
        )

    @property
    def difference(self) -> Decimal:
        return self.total_debit - self.total_credit


class InsufficientLinesError(LedgerValidationError):
    """금액이 있는 라인이 2개 미만"""

    def __init__(self, line_count: int):
        self.line_count = line_count
        super().__init__(f"Journal needs at least 2 non-zero lines, got {line_count}")


class InvalidJournalLineError(LedgerValidationError):
    """라인 형식 오류 (차변/대변 동시 입력, 음수 금액 등)"""

    pass


class DegenerateEventError(LedgerValidationError):
    """0 금액 라인 제거 후 분개가 성립하지 않는 업무 이벤트"""

    def __init__(self, message: str, lines: list[Any] | None = None):
        self.lines = lines or []
        super().__init__(message)


class DuplicateCodeError(LedgerValidationError):
    """동일 소유자에 이미 존재하는 계정 코드"""

    def __init__(self, owner_id: str, code: str):
        self.owner_id = owner_id
        self.code = code
        super().__init__(f"Account code already exists for owner {owner_id}: {code}")


class InvalidAccountTypeError(LedgerValidationError):
    """5대 계정 유형이 아님"""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Invalid account type: {value!r}")


class AccountNotFoundError(LedgerValidationError):
    """계정이 없거나 다른 소유자의 계정"""

    def __init__(self, account_id: str, owner_id: str | None = None):
        self.account_id = account_id
        self.owner_id = owner_id
        if owner_id:
            message = f"Account {account_id} not found for owner {owner_id}"
        else:
            message = f"Account {account_id} not found"
        super().__init__(message)


class InactiveAccountError(LedgerValidationError):
    """비활성 계정으로의 전기 시도"""

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account {account_id} is inactive")


class JournalNotFoundError(LedgerValidationError):
    """전표가 없음"""

    def __init__(self, journal_id: str):
        self.journal_id = journal_id
        super().__init__(f"Journal {journal_id} not found")


# =========================================================================
# 충돌 예외
# =========================================================================


class SequenceConflictError(LedgerError):
    """계정 코드/전표 번호 생성 경합

    같은 값이 이미 커밋됨. 번호를 다시 계산하여 재시도.
    """

    def __init__(self, owner_id: str, kind: str, value: str):
        self.owner_id = owner_id
        self.kind = kind
        self.value = value
        super().__init__(f"{kind} {value} already taken for owner {owner_id}")


# =========================================================================
# 저장소 예외
# =========================================================================


class LedgerStorageError(LedgerError):
    """DB 오류 (원본 예외는 __cause__)"""

    def __init__(self, operation: str, owner_id: str | None, cause: BaseException):
        self.operation = operation
        self.owner_id = owner_id
        super().__init__(f"{operation} failed (owner={owner_id}): {cause}")


@contextmanager
def wrap_storage_errors(operation: str, owner_id: str | None = None) -> Iterator[None]:
    """DB 드라이버 예외 → LedgerStorageError (원본은 __cause__로 보존)

    Ledger 예외는 그대로 통과.
    """
    try:
        yield
    except aiosqlite.Error as e:
        logger.error(
            f"저장소 오류: {operation}",
            extra={"operation": operation, "owner_id": owner_id},
        )
        raise LedgerStorageError(operation, owner_id, e) from e


def is_unique_violation(error: BaseException) -> bool:
    """UNIQUE 제약 위반 여부"""
    return isinstance(error, aiosqlite.IntegrityError) and "UNIQUE" in str(error).upper()
