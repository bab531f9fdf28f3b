"""
Web 서비스 패키지

비즈니스 로직 처리
"""

from web.services.expense_service import ExpenseNotFoundError, ExpensePostResult, ExpenseService

__all__ = [
    "ExpenseService",
    "ExpensePostResult",
    "ExpenseNotFoundError",
]
