"""
pytest 공통 fixture 정의

임시 디렉토리 / 스키마가 초기화된 임시 Ledger DB
"""

import tempfile
from pathlib import Path
from typing import AsyncIterator, Iterator

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings
from core.ledger.accounts import AccountRegistry
from core.ledger.poster import LedgerPoster
from core.ledger.schema import init_ledger_schema


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def db_path(temp_dir: Path) -> Path:
    """테스트용 DB 파일 경로"""
    return temp_dir / "test_ledger.db"


@pytest_asyncio.fixture
async def db(db_path: Path) -> AsyncIterator[SQLiteAdapter]:
    """스키마가 초기화된 임시 DB (쓰기 가능)"""
    adapter = SQLiteAdapter(db_path)
    await adapter.connect()
    await init_ledger_schema(adapter)

    yield adapter

    await adapter.close()


@pytest.fixture
def registry(db: SQLiteAdapter) -> AccountRegistry:
    """AccountRegistry 인스턴스"""
    return AccountRegistry(db)


@pytest.fixture
def poster(db: SQLiteAdapter, registry: AccountRegistry) -> LedgerPoster:
    """LedgerPoster 인스턴스"""
    return LedgerPoster(db, registry=registry)


@pytest.fixture(autouse=True)
def reset_settings() -> Iterator[None]:
    """Settings 싱글턴 초기화"""
    Settings.reset()
    yield
    Settings.reset()
