"""
설정 로더

ledger.yaml 로드 및 Ledger 설정 생성
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path

import yaml

from core.constants import Defaults, Paths, PROJECT_ROOT


@dataclass(frozen=True)
class LedgerConfig:
    """Ledger 설정 (ledger.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    db_path: Path
    log_dir: Path
    balance_tolerance: Decimal = Defaults.BALANCE_TOLERANCE
    sequence_retry_attempts: int = Defaults.SEQUENCE_RETRY_ATTEMPTS


class ConfigLoadError(Exception):
    """설정 로드 실패 예외"""

    pass


def _resolve_path(value: str | None, default: Path) -> Path:
    """상대 경로는 프로젝트 루트 기준으로 해석"""
    if not value:
        return default
    path = Path(value)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path


def default_config() -> LedgerConfig:
    """설정 파일 없이 사용하는 기본 설정"""
    return LedgerConfig(db_path=Paths.LEDGER_DB, log_dir=Paths.LOGS_DIR)


def load_config(path: Path | None = None) -> LedgerConfig:
    """ledger.yaml 파일 로드

    Args:
        path: ledger.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        LedgerConfig 인스턴스

    Raises:
        ConfigLoadError: 파일이 없거나 형식이 잘못된 경우
    """
    if path is None:
        path = Paths.CONFIG_FILE

    if not path.exists():
        raise ConfigLoadError(f"ledger.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"ledger.yaml 파싱 실패: {e}") from e

    if data is None:
        raise ConfigLoadError("ledger.yaml이 비어 있습니다")

    if not isinstance(data, dict):
        raise ConfigLoadError("ledger.yaml 최상위는 매핑이어야 합니다")

    database = data.get("database") or {}
    ledger = data.get("ledger") or {}
    logging_config = data.get("logging") or {}

    tolerance_raw = ledger.get("balance_tolerance", str(Defaults.BALANCE_TOLERANCE))
    try:
        tolerance = Decimal(str(tolerance_raw))
    except InvalidOperation as e:
        raise ConfigLoadError(
            f"유효하지 않은 balance_tolerance입니다: '{tolerance_raw}'"
        ) from e
    if tolerance < 0:
        raise ConfigLoadError("balance_tolerance는 음수일 수 없습니다")

    retry_attempts = ledger.get("sequence_retry_attempts", Defaults.SEQUENCE_RETRY_ATTEMPTS)
    if isinstance(retry_attempts, bool) or not isinstance(retry_attempts, int) or retry_attempts < 1:
        raise ConfigLoadError(
            f"sequence_retry_attempts는 1 이상의 정수여야 합니다: {retry_attempts!r}"
        )

    return LedgerConfig(
        db_path=_resolve_path(database.get("path"), Paths.LEDGER_DB),
        log_dir=_resolve_path(logging_config.get("dir"), Paths.LOGS_DIR),
        balance_tolerance=tolerance,
        sequence_retry_attempts=retry_attempts,
    )


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    ledger.yaml을 로드하고 관련 설정을 제공.
    파일이 없으면 기본 설정 사용.
    """

    _instance: "Settings | None" = None
    _config: LedgerConfig | None = None

    def __new__(cls, config_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, config_path: Path | None = None) -> None:
        if self._config is None:
            path = config_path or Paths.CONFIG_FILE
            if config_path is None and not path.exists():
                self._config = default_config()
            else:
                self._config = load_config(path)

    @property
    def config(self) -> LedgerConfig:
        """전체 설정"""
        assert self._config is not None
        return self._config

    @property
    def db_path(self) -> Path:
        """DB 경로"""
        return self.config.db_path

    @property
    def log_dir(self) -> Path:
        """로그 디렉토리"""
        return self.config.log_dir

    @property
    def balance_tolerance(self) -> Decimal:
        """분개 균형 허용 오차"""
        return self.config.balance_tolerance

    @property
    def sequence_retry_attempts(self) -> int:
        """번호 충돌 재시도 횟수"""
        return self.config.sequence_retry_attempts

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(config_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        config_path: ledger.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(config_path)
