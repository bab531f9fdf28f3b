"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증.
금액은 Decimal로 받음 (JSON 숫자/문자열 모두 허용).
"""

import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class AccountCreateRequest(BaseModel):
    """계정 생성 요청

    code가 없으면 유형 접두사 기준으로 다음 코드를 발급.
    """

    owner_id: str = Field(..., min_length=1, description="소유자 ID")
    name: str = Field(..., min_length=1, description="계정명")
    type: str = Field(..., description="계정 유형 (Asset/Liability/Equity/Income/Expense)")
    code: str | None = Field(default=None, description="계정 코드 (None이면 자동 발급)")
    opening_balance: Decimal = Field(default=Decimal("0"), description="기초 잔액")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "owner_id": "owner-1",
                    "name": "Bank Account",
                    "type": "Asset",
                    "opening_balance": "50000.00",
                },
            ]
        }
    }


class JournalLineRequest(BaseModel):
    """분개 라인 (debit 또는 credit 중 하나)"""

    account_id: str = Field(..., description="계정 ID")
    debit: Decimal | None = Field(default=None, ge=0, description="차변 금액")
    credit: Decimal | None = Field(default=None, ge=0, description="대변 금액")
    narration: str | None = Field(default=None, description="라인 적요")


class JournalCreateRequest(BaseModel):
    """수동 전표 전기 요청"""

    owner_id: str = Field(..., min_length=1, description="소유자 ID")
    date: datetime.date = Field(..., description="전표 일자")
    narration: str = Field(default="", description="적요")
    lines: list[JournalLineRequest] = Field(..., description="분개 라인")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "owner_id": "owner-1",
                    "date": "2024-04-01",
                    "narration": "Office rent",
                    "lines": [
                        {"account_id": "acc-rent", "debit": "25000.00"},
                        {"account_id": "acc-bank", "credit": "25000.00"},
                    ],
                },
            ]
        }
    }


class TdsTransactionRequest(BaseModel):
    """TDS 거래 기록 요청 (원천징수액은 서버에서 계산)"""

    owner_id: str = Field(..., min_length=1, description="소유자 ID")
    transaction_date: datetime.date = Field(..., description="거래 일자")
    vendor_name: str = Field(..., min_length=1, description="거래처명")
    transaction_amount: Decimal = Field(..., ge=0, description="거래 금액")
    tds_rate: Decimal = Field(..., ge=0, le=100, description="원천징수율 (%)")
    tds_rule_id: str | None = Field(default=None, description="TDS 규칙 ID")
    vendor_pan: str | None = Field(default=None, description="거래처 PAN")
    description: str | None = Field(default=None, description="설명")
    certificate_number: str | None = Field(default=None, description="원천징수 증명서 번호")
