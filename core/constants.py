"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from decimal import Decimal
from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값 상수"""

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    LOG_LEVEL: str = "INFO"

    # 분개 차/대변 균형 허용 오차 (최소 통화 단위의 절반)
    BALANCE_TOLERANCE: Decimal = Decimal("0.005")

    # 코드/전표번호 충돌 시 재시도 횟수
    SEQUENCE_RETRY_ATTEMPTS: int = 3


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"

    # 설정 파일
    CONFIG_FILE: Path = CONFIG_DIR / "ledger.yaml"

    # DB 파일
    LEDGER_DB: Path = DATA_DIR / "ledger.db"


class Sequences:
    """번호 체계 상수"""

    # 계정 코드: 유형 접두사 1자리 + 일련번호 3자리 (예: 5001)
    ACCOUNT_CODE_WIDTH: int = 3

    # 전표 번호: JV/<연도>/<일련번호 4자리>
    JOURNAL_PREFIX: str = "JV"
    JOURNAL_SEQ_WIDTH: int = 4
