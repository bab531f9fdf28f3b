"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화.
금액은 문자열 (소수점 2자리).
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    version: str = Field(..., description="API 버전")
    timestamp: datetime = Field(..., description="응답 시간 (UTC)")


class AccountResponse(BaseModel):
    """계정 응답"""

    id: str = Field(..., description="계정 ID")
    owner_id: str = Field(..., description="소유자 ID")
    code: str = Field(..., description="계정 코드")
    name: str = Field(..., description="계정명")
    type: str = Field(..., description="계정 유형")
    opening_balance: str = Field(..., description="기초 잔액")
    is_active: bool = Field(..., description="활성 여부")


class JournalLineResponse(BaseModel):
    """분개 라인 응답"""

    account_id: str = Field(..., description="계정 ID")
    debit: str | None = Field(default=None, description="차변 금액")
    credit: str | None = Field(default=None, description="대변 금액")
    narration: str | None = Field(default=None, description="라인 적요")


class JournalResponse(BaseModel):
    """전표 응답"""

    id: str = Field(..., description="전표 ID")
    owner_id: str = Field(..., description="소유자 ID")
    number: str = Field(..., description="전표 번호 (JV/<연도>/<일련번호>)")
    date: str = Field(..., description="전표 일자")
    narration: str = Field(..., description="적요")
    status: str = Field(..., description="상태 (draft/posted/void)")
    total_debit: str = Field(..., description="차변 합계")
    total_credit: str = Field(..., description="대변 합계")
    lines: list[JournalLineResponse] = Field(default_factory=list, description="분개 라인")


class ExpensePostResponse(BaseModel):
    """비용 전기 응답"""

    expense_id: str = Field(..., description="비용 ID")
    already_posted: bool = Field(..., description="이미 전기된 비용 여부")
    journal: JournalResponse = Field(..., description="연결된 전표")


class LedgerRowResponse(BaseModel):
    """계정 원장 행"""

    date: str | None = Field(default=None, description="전표 일자 (기초 잔액 행은 None)")
    narration: str = Field(..., description="적요")
    debit: str = Field(..., description="차변")
    credit: str = Field(..., description="대변")
    balance: str = Field(..., description="누적 잔액")
    journal_id: str | None = Field(default=None, description="전표 ID")
    journal_number: str | None = Field(default=None, description="전표 번호")
    is_opening: bool = Field(default=False, description="기초 잔액 행 여부")


class RunningBalanceResponse(BaseModel):
    """계정 누적 잔액 응답"""

    account: AccountResponse = Field(..., description="계정")
    rows: list[LedgerRowResponse] = Field(..., description="원장 행 (첫 행은 기초 잔액)")
    closing_balance: str = Field(..., description="마지막 잔액")


class TrialBalanceRowResponse(BaseModel):
    """시산표 행"""

    account_id: str = Field(..., description="계정 ID")
    code: str = Field(..., description="계정 코드")
    name: str = Field(..., description="계정명")
    type: str = Field(..., description="계정 유형")
    opening_balance: str = Field(..., description="기초 잔액")
    total_debit: str = Field(..., description="차변 합계")
    total_credit: str = Field(..., description="대변 합계")
    closing_balance: str = Field(..., description="기말 잔액")


class TrialBalanceResponse(BaseModel):
    """시산표 응답"""

    owner_id: str = Field(..., description="소유자 ID")
    as_of: str | None = Field(default=None, description="기준일")
    rows: list[TrialBalanceRowResponse] = Field(..., description="계정별 합계")
    total_debit: str = Field(..., description="차변 총계")
    total_credit: str = Field(..., description="대변 총계")
    balanced: bool = Field(..., description="차/대변 일치 여부")


class TdsTransactionResponse(BaseModel):
    """TDS 거래 응답"""

    id: str = Field(..., description="거래 ID")
    owner_id: str = Field(..., description="소유자 ID")
    transaction_date: str = Field(..., description="거래 일자")
    vendor_name: str = Field(..., description="거래처명")
    transaction_amount: str = Field(..., description="거래 금액")
    tds_rate: str = Field(..., description="원천징수율 (%)")
    tds_amount: str = Field(..., description="원천징수액")
    net_payable: str = Field(..., description="실지급액")
    tds_rule_id: str | None = Field(default=None, description="TDS 규칙 ID")
    vendor_pan: str | None = Field(default=None, description="거래처 PAN")
    description: str | None = Field(default=None, description="설명")
    certificate_number: str | None = Field(default=None, description="증명서 번호")


class TaxSummaryResponse(BaseModel):
    """세금 요약 응답

    return_type에 따라 summary 구조가 다름 (GSTR1 / GSTR3B / TDS).
    """

    return_type: str = Field(..., description="요약 종류")
    owner_id: str = Field(..., description="소유자 ID")
    period: dict[str, str | None] = Field(..., description="기간 (start, end)")
    summary: dict[str, Any] = Field(..., description="요약 본문")
