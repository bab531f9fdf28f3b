"""
복식부기 타입 정의

AccountType 등 Ledger 시스템에서 사용하는 Enum 정의
"""

from enum import Enum

from core.ledger.errors import InvalidAccountTypeError


class AccountType(str, Enum):
    """계정 유형

    복식부기의 5대 계정 유형.
    str을 상속하여 JSON 직렬화 가능.
    """

    ASSET = "Asset"  # 자산 (현금, 은행, 매입세액)
    LIABILITY = "Liability"  # 부채 (TDS 예수금 등)
    EQUITY = "Equity"  # 자본
    INCOME = "Income"  # 수익
    EXPENSE = "Expense"  # 비용

    @property
    def code_prefix(self) -> str:
        """계정 코드 첫 자리"""
        return ACCOUNT_CODE_PREFIXES.get(self.value, OVERFLOW_CODE_PREFIX)

    @classmethod
    def parse(cls, value: "AccountType | str") -> "AccountType":
        """문자열을 AccountType으로 변환 (대소문자 무시)

        Raises:
            InvalidAccountTypeError: 5대 유형이 아닌 경우
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        raise InvalidAccountTypeError(value)


# 유형별 코드 접두사 (목록에 없는 유형은 9)
ACCOUNT_CODE_PREFIXES: dict[str, str] = {
    "Asset": "1",
    "Liability": "2",
    "Equity": "3",
    "Income": "4",
    "Expense": "5",
}

OVERFLOW_CODE_PREFIX: str = "9"


class JournalSide(str, Enum):
    """분개 방향 (차변/대변)"""

    DEBIT = "DEBIT"  # 차변 (자산 증가, 비용 증가)
    CREDIT = "CREDIT"  # 대변 (자산 감소, 부채/수익 증가)


class JournalStatus(str, Enum):
    """전표 상태"""

    DRAFT = "draft"
    POSTED = "posted"
    VOID = "void"


class PaymentMode(str, Enum):
    """지급 수단"""

    CASH = "cash"
    BANK = "bank"
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    UPI = "upi"
    CHEQUE = "cheque"


# 지급 수단 → 지급 계정명 (목록에 없는 수단은 Bank Account)
PAYMENT_ACCOUNT_NAMES: dict[str, str] = {
    PaymentMode.CASH.value: "Cash Account",
    PaymentMode.BANK.value: "Bank Account",
    PaymentMode.CREDIT_CARD.value: "Credit Card Account",
    PaymentMode.DEBIT_CARD.value: "Bank Account",
    PaymentMode.UPI.value: "Bank Account",
    PaymentMode.CHEQUE.value: "Bank Account",
}

DEFAULT_PAYMENT_ACCOUNT_NAME: str = "Bank Account"


class SystemAccounts:
    """자동 생성되는 시스템 계정 (이름, 검색 패턴)

    검색 패턴의 '%'는 임의 문자열과 일치.
    """

    INPUT_TAX_NAME: str = "Input Tax Account"
    INPUT_TAX_PATTERN: str = "%input%tax%"

    TDS_PAYABLE_NAME: str = "TDS Payable"
    TDS_PAYABLE_PATTERN: str = "%TDS Payable%"
