"""
유틸리티 패키지

소유자별 락 등 공통 유틸리티
"""

from core.utils.locks import OwnerLockRegistry, get_owner_locks

__all__ = [
    "OwnerLockRegistry",
    "get_owner_locks",
]
