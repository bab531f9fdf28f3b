"""
복식부기 스키마 초기화

Web 시작 시 / init 스크립트에서 Ledger 테이블 생성.
CREATE IF NOT EXISTS 패턴으로 안전하게 동작.

금액은 TEXT (Decimal 문자열, 소수점 2자리)로 저장.
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


async def init_ledger_schema(db: "SQLiteAdapter") -> None:
    """Ledger 스키마 초기화

    원장 테이블(accounts, journals, journal_lines)과
    집계 입력 테이블(세금계산서, TDS, 비용)을 모두 생성.
    이미 존재하는 경우 안전하게 건너뜀 (IF NOT EXISTS).

    Args:
        db: SQLiteAdapter 인스턴스
    """
    await _create_ledger_tables(db)
    await _create_source_tables(db)
    await _create_indexes(db)
    await db.commit()
    logger.info("Ledger 스키마 초기화 완료")


async def _create_ledger_tables(db: "SQLiteAdapter") -> None:
    """원장 테이블 생성"""

    # 계정과목
    await db.execute("""
        CREATE TABLE IF NOT EXISTS accounts (
            id               TEXT PRIMARY KEY,
            owner_id         TEXT NOT NULL,
            code             TEXT NOT NULL,
            name             TEXT NOT NULL,
            type             TEXT NOT NULL,
            opening_balance  TEXT NOT NULL DEFAULT '0.00',
            is_active        INTEGER NOT NULL DEFAULT 1,
            created_at       TEXT NOT NULL DEFAULT (datetime('now')),
            UNIQUE(owner_id, code)
        )
    """)

    # 전표
    await db.execute("""
        CREATE TABLE IF NOT EXISTS journals (
            id               TEXT PRIMARY KEY,
            owner_id         TEXT NOT NULL,
            number           TEXT NOT NULL,
            date             TEXT NOT NULL,
            narration        TEXT NOT NULL DEFAULT '',
            status           TEXT NOT NULL DEFAULT 'posted',
            created_at       TEXT NOT NULL DEFAULT (datetime('now')),
            UNIQUE(owner_id, number)
        )
    """)

    # 분개 라인 (id 순서 = 입력 순서)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS journal_lines (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            journal_id       TEXT NOT NULL,
            account_id       TEXT NOT NULL,
            debit            TEXT,
            credit           TEXT,
            narration        TEXT,
            line_order       INTEGER NOT NULL DEFAULT 0,
            CHECK ((debit IS NULL) <> (credit IS NULL)),
            FOREIGN KEY (journal_id) REFERENCES journals(id),
            FOREIGN KEY (account_id) REFERENCES accounts(id)
        )
    """)


async def _create_source_tables(db: "SQLiteAdapter") -> None:
    """집계 입력 테이블 생성 (다른 서브시스템이 기록, Ledger는 읽기만)"""

    # 매출 세금계산서
    await db.execute("""
        CREATE TABLE IF NOT EXISTS invoices (
            id               TEXT PRIMARY KEY,
            owner_id         TEXT NOT NULL,
            invoice_number   TEXT,
            invoice_date     TEXT NOT NULL,
            amount           TEXT NOT NULL DEFAULT '0.00',
            gst_amount       TEXT NOT NULL DEFAULT '0.00',
            status           TEXT NOT NULL DEFAULT 'draft'
        )
    """)

    # 매출 환입 (Credit Note)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS credit_notes (
            id               TEXT PRIMARY KEY,
            owner_id         TEXT NOT NULL,
            credit_note_date TEXT NOT NULL,
            amount           TEXT NOT NULL DEFAULT '0.00',
            gst_amount       TEXT NOT NULL DEFAULT '0.00',
            status           TEXT NOT NULL DEFAULT 'issued'
        )
    """)

    # 매입 계산서
    await db.execute("""
        CREATE TABLE IF NOT EXISTS purchase_bills (
            id               TEXT PRIMARY KEY,
            owner_id         TEXT NOT NULL,
            bill_number      TEXT,
            bill_date        TEXT NOT NULL,
            amount           TEXT NOT NULL DEFAULT '0.00',
            gst_amount       TEXT NOT NULL DEFAULT '0.00',
            status           TEXT NOT NULL DEFAULT 'draft'
        )
    """)

    # 매입 환출 (Debit Note)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS debit_notes (
            id               TEXT PRIMARY KEY,
            owner_id         TEXT NOT NULL,
            debit_note_date  TEXT NOT NULL,
            amount           TEXT NOT NULL DEFAULT '0.00',
            gst_amount       TEXT NOT NULL DEFAULT '0.00',
            status           TEXT NOT NULL DEFAULT 'issued'
        )
    """)

    # TDS 규칙 (섹션별 카테고리/세율)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS tds_rules (
            id               TEXT PRIMARY KEY,
            owner_id         TEXT NOT NULL,
            category         TEXT NOT NULL,
            section          TEXT,
            rate             TEXT NOT NULL DEFAULT '0'
        )
    """)

    # TDS 원천징수 거래
    await db.execute("""
        CREATE TABLE IF NOT EXISTS tds_transactions (
            id                 TEXT PRIMARY KEY,
            owner_id           TEXT NOT NULL,
            tds_rule_id        TEXT,
            transaction_amount TEXT NOT NULL,
            tds_rate           TEXT NOT NULL,
            tds_amount         TEXT NOT NULL,
            net_payable        TEXT NOT NULL,
            transaction_date   TEXT NOT NULL,
            vendor_name        TEXT NOT NULL,
            vendor_pan         TEXT,
            description        TEXT,
            certificate_number TEXT,
            created_at         TEXT NOT NULL DEFAULT (datetime('now')),
            FOREIGN KEY (tds_rule_id) REFERENCES tds_rules(id)
        )
    """)

    # 비용 (전기 시 journal_id 연결)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS expenses (
            id               TEXT PRIMARY KEY,
            owner_id         TEXT NOT NULL,
            expense_date     TEXT NOT NULL,
            vendor_name      TEXT NOT NULL DEFAULT '',
            category_name    TEXT NOT NULL,
            description      TEXT NOT NULL DEFAULT '',
            amount           TEXT NOT NULL,
            tax_amount       TEXT NOT NULL DEFAULT '0.00',
            tds_amount       TEXT NOT NULL DEFAULT '0.00',
            payment_mode     TEXT NOT NULL DEFAULT 'bank',
            status           TEXT NOT NULL DEFAULT 'draft',
            posted_to_ledger INTEGER NOT NULL DEFAULT 0,
            journal_id       TEXT,
            FOREIGN KEY (journal_id) REFERENCES journals(id)
        )
    """)


async def _create_indexes(db: "SQLiteAdapter") -> None:
    """인덱스 생성"""
    await db.execute("CREATE INDEX IF NOT EXISTS idx_accounts_owner_type ON accounts(owner_id, type)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_journals_owner_date ON journals(owner_id, date)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_journal_lines_journal ON journal_lines(journal_id)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_journal_lines_account ON journal_lines(account_id)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_invoices_owner_date ON invoices(owner_id, invoice_date)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_credit_notes_owner_date ON credit_notes(owner_id, credit_note_date)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_purchase_bills_owner_date ON purchase_bills(owner_id, bill_date)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_debit_notes_owner_date ON debit_notes(owner_id, debit_note_date)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_tds_transactions_owner_date ON tds_transactions(owner_id, transaction_date)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_expenses_owner ON expenses(owner_id)")
