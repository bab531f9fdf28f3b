"""
TDS (원천징수) 계산 및 거래 기록
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from core.ledger.errors import LedgerValidationError, wrap_storage_errors
from core.ledger.money import format_amount, round2, to_decimal
from core.ledger.poster import parse_date

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)

MAX_TDS_RATE = Decimal("100")


@dataclass(frozen=True)
class TdsCalculation:
    """원천징수 계산 결과

    tds_amount + net_payable == transaction_amount (2자리 기준)
    """

    transaction_amount: Decimal
    rate: Decimal
    tds_amount: Decimal
    net_payable: Decimal


def calculate_tds(transaction_amount: Any, rate_percent: Any) -> TdsCalculation:
    """원천징수액 계산

    tds = round2(amount × rate / 100), net = round2(amount - tds).
    반올림은 반올림 전 곱셈 결과에 한 번만 적용.

    Args:
        transaction_amount: 거래 금액
        rate_percent: 원천징수율 (%, 0~100)

    Returns:
        TdsCalculation

    Raises:
        LedgerValidationError: 음수 금액 또는 범위 밖 세율

    Example:
        >>> calculate_tds("10000", "10").tds_amount
        Decimal('1000.00')
    """
    amount = round2(transaction_amount)
    rate = to_decimal(rate_percent)
    if amount < 0:
        raise LedgerValidationError(f"TDS transaction amount must not be negative: {amount}")
    if rate < 0 or rate > MAX_TDS_RATE:
        raise LedgerValidationError(f"TDS rate must be between 0 and 100: {rate}")

    tds_amount = round2(amount * rate / 100)
    return TdsCalculation(
        transaction_amount=amount,
        rate=rate,
        tds_amount=tds_amount,
        net_payable=round2(amount - tds_amount),
    )


@dataclass(frozen=True)
class TdsTransaction:
    """TDS 거래 기록"""

    id: str
    owner_id: str
    transaction_date: date
    vendor_name: str
    transaction_amount: Decimal
    tds_rate: Decimal
    tds_amount: Decimal
    net_payable: Decimal
    tds_rule_id: str | None = None
    vendor_pan: str | None = None
    description: str | None = None
    certificate_number: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "transaction_date": self.transaction_date.isoformat(),
            "vendor_name": self.vendor_name,
            "transaction_amount": str(self.transaction_amount),
            "tds_rate": str(self.tds_rate),
            "tds_amount": str(self.tds_amount),
            "net_payable": str(self.net_payable),
            "tds_rule_id": self.tds_rule_id,
            "vendor_pan": self.vendor_pan,
            "description": self.description,
            "certificate_number": self.certificate_number,
        }


class TdsRegister:
    """TDS 거래 기록부

    세율과 금액으로 원천징수액을 계산하여 tds_transactions에 저장.
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def record(
        self,
        owner_id: str,
        transaction_date: date | str,
        vendor_name: str,
        transaction_amount: Any,
        tds_rate: Any,
        tds_rule_id: str | None = None,
        vendor_pan: str | None = None,
        description: str | None = None,
        certificate_number: str | None = None,
    ) -> TdsTransaction:
        """TDS 거래 저장

        Raises:
            LedgerValidationError: 금액/세율 범위 오류
            LedgerStorageError
        """
        calc = calculate_tds(transaction_amount, tds_rate)
        transaction = TdsTransaction(
            id=str(uuid4()),
            owner_id=owner_id,
            transaction_date=parse_date(transaction_date),
            vendor_name=vendor_name,
            transaction_amount=calc.transaction_amount,
            tds_rate=calc.rate,
            tds_amount=calc.tds_amount,
            net_payable=calc.net_payable,
            tds_rule_id=tds_rule_id,
            vendor_pan=vendor_pan,
            description=description,
            certificate_number=certificate_number,
        )

        with wrap_storage_errors("record_tds", owner_id):
            async with self.db.transaction():
                await self.db.execute(
                    """
                    INSERT INTO tds_transactions (
                        id, owner_id, tds_rule_id, transaction_amount, tds_rate,
                        tds_amount, net_payable, transaction_date, vendor_name,
                        vendor_pan, description, certificate_number
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        transaction.id,
                        owner_id,
                        tds_rule_id,
                        format_amount(transaction.transaction_amount),
                        str(transaction.tds_rate),
                        format_amount(transaction.tds_amount),
                        format_amount(transaction.net_payable),
                        transaction.transaction_date.isoformat(),
                        vendor_name,
                        vendor_pan,
                        description,
                        certificate_number,
                    ),
                )

        logger.info(
            f"TDS 기록: {vendor_name} {transaction.transaction_amount} @ {transaction.tds_rate}%",
            extra={"owner_id": owner_id, "tds_amount": str(transaction.tds_amount)},
        )
        return transaction
