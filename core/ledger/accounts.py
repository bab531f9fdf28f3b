"""
계정과목 (Chart of Accounts) 레지스트리

계정 생성 / 조회 / 코드 생성 / 비활성화.
계정은 삭제되지 않고 비활성화만 가능.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import aiosqlite

from core.constants import Sequences
from core.ledger.errors import (
    AccountNotFoundError,
    DuplicateCodeError,
    SequenceConflictError,
    is_unique_violation,
    wrap_storage_errors,
)
from core.ledger.money import ZERO, format_amount, parse_amount, round2
from core.ledger.types import AccountType
from core.utils.locks import OwnerLockRegistry, get_owner_locks

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)

_LEADING_DIGITS = re.compile(r"\d+")

_ACCOUNT_COLUMNS = "id, owner_id, code, name, type, opening_balance, is_active"


@dataclass(frozen=True)
class Account:
    """원장 계정

    type과 opening_balance는 생성 시 고정.
    """

    id: str
    owner_id: str
    code: str
    name: str
    type: AccountType
    opening_balance: Decimal = ZERO
    is_active: bool = True

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> Account:
        return cls(
            id=row[0],
            owner_id=row[1],
            code=row[2],
            name=row[3],
            type=AccountType.parse(row[4]),
            opening_balance=parse_amount(row[5]),
            is_active=bool(row[6]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "code": self.code,
            "name": self.name,
            "type": self.type.value,
            "opening_balance": str(self.opening_balance),
            "is_active": self.is_active,
        }


def name_matches(name: str, hint: str) -> bool:
    """계정명 매칭 (대소문자 무시 부분 문자열)

    hint의 '%'는 와일드카드: "%input%tax%"는 "input"과 "tax"가
    이 순서로 포함된 이름과 일치.
    """
    target = name.casefold()
    position = 0
    for part in hint.casefold().split("%"):
        if not part:
            continue
        found = target.find(part, position)
        if found < 0:
            return False
        position = found + len(part)
    return True


def next_code(prefix: str, existing_codes: Sequence[str]) -> str:
    """다음 계정 코드 계산

    접두사 뒤 숫자 부분의 최댓값 + 1, 3자리 0 채움.
    사전순이 아닌 숫자 기준이므로 5999 다음 51000 이후에도 계속 증가.
    접미사가 숫자로 시작하지 않는 코드는 무시.

    Example:
        >>> next_code("5", ["5001", "5002"])
        '5003'
        >>> next_code("5", ["5999", "51000"])
        '51001'
        >>> next_code("1", [])
        '1001'
    """
    last_number = 0
    for code in existing_codes:
        if not code.startswith(prefix):
            continue
        match = _LEADING_DIGITS.match(code[len(prefix):])
        if match:
            last_number = max(last_number, int(match.group()))
    return f"{prefix}{str(last_number + 1).zfill(Sequences.ACCOUNT_CODE_WIDTH)}"


class AccountRegistry:
    """계정과목 레지스트리

    코드 생성과 INSERT는 소유자 락 + 쓰기 트랜잭션 안에서 수행되어
    동시에 호출되어도 같은 코드가 두 번 발급되지 않음.

    Args:
        db: SQLite 어댑터
        locks: 소유자 락 레지스트리 (None이면 어댑터별 공용 레지스트리)
    """

    def __init__(self, db: SQLiteAdapter, locks: OwnerLockRegistry | None = None):
        self.db = db
        self.locks = locks or get_owner_locks(db)

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    async def get(self, account_id: str) -> Account | None:
        """계정 단건 조회"""
        with wrap_storage_errors("get_account"):
            row = await self.db.fetchone(
                f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE id = ?",
                (account_id,),
            )
        return Account.from_row(row) if row else None

    async def require(self, account_id: str, owner_id: str | None = None) -> Account:
        """계정 조회 (없거나 소유자가 다르면 예외)

        Raises:
            AccountNotFoundError
        """
        account = await self.get(account_id)
        if account is None or (owner_id is not None and account.owner_id != owner_id):
            raise AccountNotFoundError(account_id, owner_id)
        return account

    async def list_accounts(
        self,
        owner_id: str,
        include_inactive: bool = False,
    ) -> list[Account]:
        """소유자 계정 목록 (코드 순)"""
        sql = f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE owner_id = ?"
        if not include_inactive:
            sql += " AND is_active = 1"
        sql += " ORDER BY code"

        with wrap_storage_errors("list_accounts", owner_id):
            rows = await self.db.fetchall(sql, (owner_id,))
        return [Account.from_row(row) for row in rows]

    async def find(
        self,
        owner_id: str,
        account_type: AccountType | str,
        match_hint: str,
    ) -> Account | None:
        """유형이 같은 활성 계정 중 이름이 일치하는 첫 계정 (코드 순)"""
        account_type = AccountType.parse(account_type)
        with wrap_storage_errors("find_account", owner_id):
            rows = await self.db.fetchall(
                f"""
                SELECT {_ACCOUNT_COLUMNS} FROM accounts
                WHERE owner_id = ? AND type = ? AND is_active = 1
                ORDER BY code
                """,
                (owner_id, account_type.value),
            )
        for row in rows:
            if name_matches(row[3], match_hint):
                return Account.from_row(row)
        return None

    # -------------------------------------------------------------------------
    # 코드 생성
    # -------------------------------------------------------------------------

    async def generate_code(self, owner_id: str, account_type: AccountType | str) -> str:
        """다음 계정 코드 미리보기 (저장하지 않음, 예약하지 않음)

        유형 접두사로 시작하는 기존 코드의 숫자 접미사 최댓값 + 1.
        계산만 하므로 동시에 호출하면 모두 같은 코드를 받음.
        고유한 코드가 필요하면 create_next() 또는 find_or_create()를 사용
        (소유자 락 + 쓰기 트랜잭션 안에서 발급과 INSERT를 함께 수행).

        Raises:
            InvalidAccountTypeError
        """
        account_type = AccountType.parse(account_type)
        prefix = account_type.code_prefix
        with wrap_storage_errors("generate_code", owner_id):
            rows = await self.db.fetchall(
                "SELECT code FROM accounts WHERE owner_id = ? AND code LIKE ?",
                (owner_id, f"{prefix}%"),
            )
        return next_code(prefix, [row[0] for row in rows])

    # -------------------------------------------------------------------------
    # 생성 / 비활성화
    # -------------------------------------------------------------------------

    async def create(
        self,
        owner_id: str,
        code: str,
        name: str,
        account_type: AccountType | str,
        opening_balance: Any = ZERO,
    ) -> Account:
        """사용자 지정 코드로 계정 생성

        Raises:
            DuplicateCodeError: 같은 소유자에 코드가 이미 있는 경우
            InvalidAccountTypeError
        """
        account_type = AccountType.parse(account_type)
        account = Account(
            id=str(uuid4()),
            owner_id=owner_id,
            code=code,
            name=name,
            type=account_type,
            opening_balance=round2(opening_balance),
        )

        async with self.locks.hold(owner_id):
            with wrap_storage_errors("create_account", owner_id):
                async with self.db.transaction():
                    existing = await self.db.fetchone(
                        "SELECT id FROM accounts WHERE owner_id = ? AND code = ?",
                        (owner_id, code),
                    )
                    if existing:
                        raise DuplicateCodeError(owner_id, code)
                    try:
                        await self._insert(account)
                    except aiosqlite.IntegrityError as e:
                        if is_unique_violation(e):
                            raise DuplicateCodeError(owner_id, code) from e
                        raise

        logger.info(
            f"계정 생성: {account.code} {account.name}",
            extra={"owner_id": owner_id, "account_id": account.id},
        )
        return account

    async def create_next(
        self,
        owner_id: str,
        account_type: AccountType | str,
        name: str,
        opening_balance: Any = ZERO,
    ) -> Account:
        """다음 코드를 발급하여 계정 생성

        Raises:
            SequenceConflictError: 다른 프로세스가 같은 코드를 먼저 커밋한 경우
            InvalidAccountTypeError
        """
        account_type = AccountType.parse(account_type)
        async with self.locks.hold(owner_id):
            return await self._create_next_locked(
                owner_id, account_type, name, round2(opening_balance)
            )

    async def find_or_create(
        self,
        owner_id: str,
        account_type: AccountType | str,
        match_hint: str,
        name: str | None = None,
    ) -> Account:
        """이름이 일치하는 활성 계정 반환, 없으면 생성

        검색과 생성이 같은 소유자 락 안에서 이루어지므로
        동시 호출에도 계정이 중복 생성되지 않음.

        Args:
            owner_id: 소유자 ID
            account_type: 계정 유형
            match_hint: 이름 검색어 (대소문자 무시, '%' 와일드카드)
            name: 생성 시 계정명 (None이면 match_hint)

        Raises:
            SequenceConflictError
            InvalidAccountTypeError
        """
        account_type = AccountType.parse(account_type)
        async with self.locks.hold(owner_id):
            existing = await self.find(owner_id, account_type, match_hint)
            if existing:
                return existing
            return await self._create_next_locked(
                owner_id, account_type, name or match_hint, ZERO
            )

    async def deactivate(self, account_id: str) -> Account:
        """계정 비활성화 (이력 유지, 신규 전기 불가)

        Raises:
            AccountNotFoundError
        """
        account = await self.require(account_id)
        async with self.locks.hold(account.owner_id):
            with wrap_storage_errors("deactivate_account", account.owner_id):
                async with self.db.transaction():
                    await self.db.execute(
                        "UPDATE accounts SET is_active = 0 WHERE id = ?",
                        (account_id,),
                    )

        logger.info(
            f"계정 비활성화: {account.code} {account.name}",
            extra={"owner_id": account.owner_id, "account_id": account_id},
        )
        return Account(
            id=account.id,
            owner_id=account.owner_id,
            code=account.code,
            name=account.name,
            type=account.type,
            opening_balance=account.opening_balance,
            is_active=False,
        )

    # -------------------------------------------------------------------------
    # 내부
    # -------------------------------------------------------------------------

    async def _create_next_locked(
        self,
        owner_id: str,
        account_type: AccountType,
        name: str,
        opening_balance: Decimal,
    ) -> Account:
        """소유자 락을 이미 잡은 상태에서 코드 발급 + INSERT"""
        with wrap_storage_errors("create_account", owner_id):
            async with self.db.transaction():
                code = await self.generate_code(owner_id, account_type)
                account = Account(
                    id=str(uuid4()),
                    owner_id=owner_id,
                    code=code,
                    name=name,
                    type=account_type,
                    opening_balance=opening_balance,
                )
                try:
                    await self._insert(account)
                except aiosqlite.IntegrityError as e:
                    if is_unique_violation(e):
                        logger.warning(
                            f"계정 코드 충돌: {code}",
                            extra={"owner_id": owner_id},
                        )
                        raise SequenceConflictError(owner_id, "account code", code) from e
                    raise

        logger.info(
            f"계정 자동 생성: {account.code} {account.name}",
            extra={"owner_id": owner_id, "account_id": account.id},
        )
        return account

    async def _insert(self, account: Account) -> None:
        await self.db.execute(
            """
            INSERT INTO accounts (
                id, owner_id, code, name, type, opening_balance, is_active
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                account.id,
                account.owner_id,
                account.code,
                account.name,
                account.type.value,
                format_amount(account.opening_balance),
                1 if account.is_active else 0,
            ),
        )
