"""
Ledger DB 스키마 초기화

사용법:
    python scripts/init_ledger_db.py
    python scripts/init_ledger_db.py --config config/ledger.yaml
    python scripts/init_ledger_db.py --db data/ledger_dev.db
"""

import argparse
import asyncio
import logging
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import default_config, load_config
from core.ledger.schema import init_ledger_schema
from core.logging import setup_logging

logger = logging.getLogger(__name__)

REQUIRED_TABLES = [
    "accounts",
    "journals",
    "journal_lines",
    "invoices",
    "credit_notes",
    "purchase_bills",
    "debit_notes",
    "tds_rules",
    "tds_transactions",
    "expenses",
]


async def verify_schema(db: SQLiteAdapter) -> bool:
    """필수 테이블 존재 확인"""
    for table in REQUIRED_TABLES:
        if not await db.table_exists(table):
            logger.error(f"테이블 누락: {table}")
            return False
        logger.info(f"테이블 확인: {table} ✓")
    return True


async def main(config_path: Path | None, db_path: Path | None) -> None:
    """스키마 초기화 실행

    Args:
        config_path: ledger.yaml 경로 (None이면 기본 설정)
        db_path: DB 경로 (설정 파일의 database.path보다 우선)
    """
    config = load_config(config_path) if config_path else default_config()
    setup_logging("scripts", base_dir=config.log_dir)

    target = db_path or config.db_path
    logger.info(f"스키마 초기화 시작: {target}")

    async with SQLiteAdapter(target) as db:
        await init_ledger_schema(db)

        if await verify_schema(db):
            logger.info("스키마 초기화 완료 ✓")
        else:
            logger.error("스키마 검증 실패!")
            raise RuntimeError("스키마 검증 실패")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Ledger DB 스키마 초기화"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="ledger.yaml 경로 (기본: 내장 기본값)"
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="DB 파일 경로 (기본: 설정의 database.path)"
    )
    args = parser.parse_args()

    asyncio.run(main(args.config, args.db))
