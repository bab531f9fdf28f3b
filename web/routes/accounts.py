"""
계정과목 API 라우트
"""

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.accounts import AccountRegistry
from core.ledger.errors import LedgerValidationError, SequenceConflictError
from web.dependencies import get_db, get_db_write
from web.errors import to_http_exception
from web.models.requests import AccountCreateRequest
from web.models.responses import AccountResponse

router = APIRouter(prefix="/api/accounts", tags=["Accounts"])


@router.get("", response_model=list[AccountResponse])
async def list_accounts(
    owner_id: str = Query(..., min_length=1, description="소유자 ID"),
    include_inactive: bool = Query(default=False, description="비활성 계정 포함"),
    db: SQLiteAdapter = Depends(get_db),
) -> list[AccountResponse]:
    """소유자 계정 목록 (코드 순)"""
    accounts = await AccountRegistry(db).list_accounts(owner_id, include_inactive)
    return [AccountResponse(**account.to_dict()) for account in accounts]


@router.post("", response_model=AccountResponse, status_code=201)
async def create_account(
    request: AccountCreateRequest,
    db: SQLiteAdapter = Depends(get_db_write),
) -> AccountResponse:
    """계정 생성

    code를 지정하면 그대로 사용 (중복 시 409),
    없으면 유형 접두사 기준으로 다음 코드를 발급.
    """
    registry = AccountRegistry(db)
    try:
        if request.code:
            account = await registry.create(
                request.owner_id,
                request.code,
                request.name,
                request.type,
                request.opening_balance,
            )
        else:
            account = await registry.create_next(
                request.owner_id,
                request.type,
                request.name,
                request.opening_balance,
            )
    except (LedgerValidationError, SequenceConflictError) as e:
        raise to_http_exception(e) from e

    return AccountResponse(**account.to_dict())


@router.post("/{account_id}/deactivate", response_model=AccountResponse)
async def deactivate_account(
    account_id: str = Path(..., description="계정 ID"),
    db: SQLiteAdapter = Depends(get_db_write),
) -> AccountResponse:
    """계정 비활성화 (이력 유지)"""
    try:
        account = await AccountRegistry(db).deactivate(account_id)
    except LedgerValidationError as e:
        raise to_http_exception(e) from e

    return AccountResponse(**account.to_dict())


@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: str = Path(..., description="계정 ID"),
    db: SQLiteAdapter = Depends(get_db),
) -> AccountResponse:
    """계정 단건 조회"""
    account = await AccountRegistry(db).get(account_id)
    if account is None:
        raise HTTPException(status_code=404, detail=f"Account {account_id} not found")
    return AccountResponse(**account.to_dict())
