"""
세금 신고 요약 집계 (TaxAggregator)

GSTR-1 (매출), GSTR-3B (매출/매입 통합), TDS 카테고리별 요약.
매 호출마다 원천 레코드에서 다시 계산 (캐시된 합계를 신뢰하지 않음).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any

from core.ledger.errors import LedgerValidationError, wrap_storage_errors
from core.ledger.money import ZERO, parse_amount
from core.ledger.poster import parse_date

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)

CANCELLED_STATUS = "cancelled"
UNCATEGORIZED_TDS = "Other"


class TaxKind(str, Enum):
    """요약 종류"""

    GSTR1 = "GSTR1"  # 매출 (outward)
    GSTR3B = "GSTR3B"  # 매출 + 매입 세액공제
    TDS = "TDS"  # 원천징수 카테고리별

    @classmethod
    def parse(cls, value: TaxKind | str) -> TaxKind:
        if isinstance(value, cls):
            return value
        normalized = str(value).replace("-", "").replace("_", "").strip().upper()
        for member in cls:
            if member.value == normalized:
                return member
        raise LedgerValidationError(f"Invalid tax kind: {value!r}")


@dataclass(frozen=True)
class DateRange:
    """기간 (양 끝 포함, None이면 열린 구간)"""

    start: date | None = None
    end: date | None = None

    def __post_init__(self) -> None:
        if self.start and self.end and self.start > self.end:
            raise LedgerValidationError(f"Invalid date range: {self.start} > {self.end}")

    @classmethod
    def of(cls, start: date | str | None = None, end: date | str | None = None) -> DateRange:
        return cls(
            start=parse_date(start) if start else None,
            end=parse_date(end) if end else None,
        )

    def sql_filter(self, column: str) -> tuple[str, list[Any]]:
        """WHERE 조건 조각과 파라미터"""
        clause = ""
        params: list[Any] = []
        if self.start is not None:
            clause += f" AND {column} >= ?"
            params.append(self.start.isoformat())
        if self.end is not None:
            # 시간 부분이 붙은 값도 종료일 당일로 포함
            clause += f" AND substr({column}, 1, 10) <= ?"
            params.append(self.end.isoformat())
        return clause, params

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
        }


@dataclass(frozen=True)
class SupplySummary:
    """공급가액 / 세액 (환입/환출 차감 후, 0 미만 불가)"""

    taxable_value: Decimal = ZERO
    tax: Decimal = ZERO

    @classmethod
    def net(
        cls,
        gross_taxable: Decimal,
        gross_tax: Decimal,
        returned_taxable: Decimal,
        returned_tax: Decimal,
    ) -> SupplySummary:
        return cls(
            taxable_value=max(ZERO, gross_taxable - returned_taxable),
            tax=max(ZERO, gross_tax - returned_tax),
        )

    def to_dict(self) -> dict[str, str]:
        return {"taxable_value": str(self.taxable_value), "gst": str(self.tax)}


@dataclass(frozen=True)
class Gstr1Summary:
    """GSTR-1 요약 (매출)"""

    owner_id: str
    period: DateRange
    outward: SupplySummary
    invoice_count: int = 0
    credit_note_count: int = 0

    @property
    def kind(self) -> TaxKind:
        return TaxKind.GSTR1

    def to_dict(self) -> dict[str, Any]:
        return {
            "return_type": self.kind.value,
            "owner_id": self.owner_id,
            "period": self.period.to_dict(),
            "outward_supplies": self.outward.to_dict(),
            "invoice_count": self.invoice_count,
            "credit_note_count": self.credit_note_count,
        }


@dataclass(frozen=True)
class Gstr3bSummary:
    """GSTR-3B 요약

    reverse_charge / exempted / nil_rated / non_gst는 원천 데이터에
    구분 정보가 없어 항상 0.
    """

    owner_id: str
    period: DateRange
    outward: SupplySummary
    inward: SupplySummary
    reverse_charge: Decimal = ZERO
    exempted: Decimal = ZERO
    nil_rated: Decimal = ZERO
    non_gst: Decimal = ZERO

    @property
    def kind(self) -> TaxKind:
        return TaxKind.GSTR3B

    @property
    def tax_liability(self) -> Decimal:
        return self.outward.tax

    @property
    def itc_available(self) -> Decimal:
        return self.inward.tax

    @property
    def net_tax_payable(self) -> Decimal:
        return max(ZERO, self.tax_liability - self.itc_available)

    def to_dict(self) -> dict[str, Any]:
        return {
            "return_type": self.kind.value,
            "owner_id": self.owner_id,
            "period": self.period.to_dict(),
            "sections": {
                "outward_supplies": self.outward.to_dict(),
                "inward_supplies_itc": self.inward.to_dict(),
                "reverse_charge": str(self.reverse_charge),
                "exempted": str(self.exempted),
                "nil_rated": str(self.nil_rated),
                "non_gst": str(self.non_gst),
                "tax_liability": str(self.tax_liability),
                "itc_available": str(self.itc_available),
                "net_tax_payable": str(self.net_tax_payable),
            },
        }


@dataclass(frozen=True)
class TdsCategoryTotal:
    """TDS 카테고리별 합계"""

    category: str
    total_amount: Decimal
    total_tds: Decimal
    transaction_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "total_amount": str(self.total_amount),
            "total_tds": str(self.total_tds),
            "transaction_count": self.transaction_count,
        }


@dataclass(frozen=True)
class TdsSummary:
    """TDS 요약"""

    owner_id: str
    period: DateRange
    total_transaction_amount: Decimal = ZERO
    total_tds_deducted: Decimal = ZERO
    total_net_payable: Decimal = ZERO
    transaction_count: int = 0
    categories: list[TdsCategoryTotal] = field(default_factory=list)

    @property
    def kind(self) -> TaxKind:
        return TaxKind.TDS

    def category(self, name: str) -> TdsCategoryTotal | None:
        for item in self.categories:
            if item.category == name:
                return item
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "return_type": self.kind.value,
            "owner_id": self.owner_id,
            "period": self.period.to_dict(),
            "total_transaction_amount": str(self.total_transaction_amount),
            "total_tds_deducted": str(self.total_tds_deducted),
            "total_net_payable": str(self.total_net_payable),
            "transaction_count": self.transaction_count,
            "categories": [item.to_dict() for item in self.categories],
        }


TaxSummary = Gstr1Summary | Gstr3bSummary | TdsSummary


class TaxAggregator:
    """신고용 요약 계산

    읽기 전용. 결과가 없어도 예외 없이 0으로 채운 요약을 반환.
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def summarize(
        self,
        owner_id: str,
        date_range: DateRange | None,
        tax_kind: TaxKind | str,
    ) -> TaxSummary:
        """요약 계산

        Args:
            owner_id: 소유자 ID
            date_range: 기간 (None이면 전체)
            tax_kind: GSTR1 / GSTR3B / TDS

        Raises:
            LedgerValidationError: 알 수 없는 tax_kind
        """
        kind = TaxKind.parse(tax_kind)
        period = date_range or DateRange()

        if kind == TaxKind.GSTR1:
            outward, invoice_count, credit_note_count = await self._outward(owner_id, period)
            return Gstr1Summary(
                owner_id=owner_id,
                period=period,
                outward=outward,
                invoice_count=invoice_count,
                credit_note_count=credit_note_count,
            )

        if kind == TaxKind.GSTR3B:
            outward, _, _ = await self._outward(owner_id, period)
            inward = await self._inward(owner_id, period)
            return Gstr3bSummary(owner_id=owner_id, period=period, outward=outward, inward=inward)

        return await self._tds(owner_id, period)

    # -------------------------------------------------------------------------
    # 내부
    # -------------------------------------------------------------------------

    async def _outward(self, owner_id: str, period: DateRange) -> tuple[SupplySummary, int, int]:
        """매출 (세금계산서 - 유효한 Credit Note)"""
        invoices = await self._sum_documents(
            "invoices", "invoice_date", owner_id, period, exclude_cancelled=False
        )
        credit_notes = await self._sum_documents(
            "credit_notes", "credit_note_date", owner_id, period, exclude_cancelled=True
        )
        summary = SupplySummary.net(invoices[0], invoices[1], credit_notes[0], credit_notes[1])
        return summary, invoices[2], credit_notes[2]

    async def _inward(self, owner_id: str, period: DateRange) -> SupplySummary:
        """매입 세액공제 (매입 계산서 - 유효한 Debit Note)"""
        bills = await self._sum_documents(
            "purchase_bills", "bill_date", owner_id, period, exclude_cancelled=False
        )
        debit_notes = await self._sum_documents(
            "debit_notes", "debit_note_date", owner_id, period, exclude_cancelled=True
        )
        return SupplySummary.net(bills[0], bills[1], debit_notes[0], debit_notes[1])

    async def _sum_documents(
        self,
        table: str,
        date_column: str,
        owner_id: str,
        period: DateRange,
        exclude_cancelled: bool,
    ) -> tuple[Decimal, Decimal, int]:
        """(공급가액 합계, 세액 합계, 건수)"""
        clause, params = period.sql_filter(date_column)
        sql = f"SELECT amount, gst_amount FROM {table} WHERE owner_id = ?{clause}"
        if exclude_cancelled:
            sql += " AND COALESCE(status, '') != ?"
            params.append(CANCELLED_STATUS)

        with wrap_storage_errors(f"sum_{table}", owner_id):
            rows = await self.db.fetchall(sql, (owner_id, *params))

        taxable = sum((parse_amount(row[0]) for row in rows), ZERO)
        tax = sum((parse_amount(row[1]) for row in rows), ZERO)
        return taxable, tax, len(rows)

    async def _tds(self, owner_id: str, period: DateRange) -> TdsSummary:
        """TDS 거래를 규칙 카테고리별로 집계 (규칙 없음 → Other)"""
        clause, params = period.sql_filter("t.transaction_date")
        with wrap_storage_errors("sum_tds_transactions", owner_id):
            rows = await self.db.fetchall(
                f"""
                SELECT r.category, t.transaction_amount, t.tds_amount, t.net_payable
                FROM tds_transactions t
                LEFT JOIN tds_rules r ON r.id = t.tds_rule_id
                WHERE t.owner_id = ?{clause}
                ORDER BY t.transaction_date, t.created_at
                """,
                (owner_id, *params),
            )

        buckets: dict[str, list[Any]] = {}
        total_amount = ZERO
        total_tds = ZERO
        total_net = ZERO
        for category, amount_text, tds_text, net_text in rows:
            amount = parse_amount(amount_text)
            tds = parse_amount(tds_text)
            total_amount += amount
            total_tds += tds
            total_net += parse_amount(net_text)

            bucket = buckets.setdefault(category or UNCATEGORIZED_TDS, [ZERO, ZERO, 0])
            bucket[0] += amount
            bucket[1] += tds
            bucket[2] += 1

        categories = [
            TdsCategoryTotal(
                category=name,
                total_amount=values[0],
                total_tds=values[1],
                transaction_count=values[2],
            )
            for name, values in sorted(buckets.items())
        ]
        return TdsSummary(
            owner_id=owner_id,
            period=period,
            total_transaction_amount=total_amount,
            total_tds_deducted=total_tds,
            total_net_payable=total_net,
            transaction_count=len(rows),
            categories=categories,
        )
