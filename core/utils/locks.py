"""
소유자(테넌트)별 락

계정 코드와 전표 번호는 "기존 최댓값 조회 → +1 → INSERT" 방식으로 생성되므로
같은 소유자에 대한 생성은 직렬화되어야 함.

락은 DB 어댑터 단위로 분리됨 (같은 DB를 쓰는 코루틴끼리만 공유).
다른 프로세스와의 경합은 UNIQUE 제약 + SequenceConflictError로 처리.
"""

import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator
from weakref import WeakKeyDictionary


class OwnerLockRegistry:
    """소유자 ID → asyncio.Lock"""

    def __init__(self) -> None:
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def get(self, owner_id: str) -> asyncio.Lock:
        return self._locks[owner_id]

    @asynccontextmanager
    async def hold(self, owner_id: str) -> AsyncIterator[None]:
        """소유자 락 획득 컨텍스트"""
        async with self._locks[owner_id]:
            yield

    def __len__(self) -> int:
        return len(self._locks)


_registries: "WeakKeyDictionary[object, OwnerLockRegistry]" = WeakKeyDictionary()


def get_owner_locks(db: object) -> OwnerLockRegistry:
    """DB 어댑터에 묶인 락 레지스트리 반환 (없으면 생성)"""
    registry = _registries.get(db)
    if registry is None:
        registry = OwnerLockRegistry()
        _registries[db] = registry
    return registry
