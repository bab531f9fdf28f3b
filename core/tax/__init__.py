"""
세금 집계 (GST / TDS)

원장과 원천 문서(세금계산서, 환입/환출, TDS 거래)를 읽어 신고용 요약을 계산.
"""

from core.tax.aggregator import (
    DateRange,
    Gstr1Summary,
    Gstr3bSummary,
    SupplySummary,
    TaxAggregator,
    TaxKind,
    TdsCategoryTotal,
    TdsSummary,
)
from core.tax.tds import TdsCalculation, TdsRegister, TdsTransaction, calculate_tds

__all__ = [
    "TaxAggregator",
    "TaxKind",
    "DateRange",
    "SupplySummary",
    "Gstr1Summary",
    "Gstr3bSummary",
    "TdsSummary",
    "TdsCategoryTotal",
    "TdsRegister",
    "TdsTransaction",
    "TdsCalculation",
    "calculate_tds",
]
