import logging
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import Optional

from noor.core.errors import ConfigError

STATE_BACKENDS = ("memory", "json", "sql")


class Settings(BaseSettings):
    # Environment
    ENV: str = "development"
    CONFIG_STRICT: bool = False
    LOG_LEVEL: str = "INFO"

    # Local state storage
    STATE_BACKEND: str = "json"  # memory | json | sql
    STATE_PATH: str = "~/.noor/state.json"
    DATABASE_URL: Optional[str] = None  # sql backend only; defaults to sqlite next to STATE_PATH

    # Calendar day boundaries (IANA name, None = device local)
    TIMEZONE: Optional[str] = None

    # Subscription gate
    PAYWALL_BYPASS: bool = False  # debug builds only
    PRO_ENTITLEMENT_ID: str = "Noor Pro"

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def state_path(self) -> Path:
        return Path(self.STATE_PATH).expanduser()

    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"sqlite:///{self.state_path().with_suffix('.db')}"

    def tzinfo(self) -> Optional[ZoneInfo]:
        if not self.TIMEZONE:
            return None
        try:
            return ZoneInfo(self.TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigError(f"Unknown TIMEZONE: {self.TIMEZONE}") from exc


settings = Settings()


def validate_config(strict: Optional[bool] = None, settings_obj: Optional[Settings] = None, logger: Optional[logging.Logger] = None) -> bool:
    """Validate storage and calendar configuration.

    In strict mode raise ConfigError; otherwise emit warnings only.
    Returns False when problems were found and only logged.
    """
    cfg = settings_obj or settings
    log = logger or logging.getLogger("noor")
    strict_mode = strict if strict is not None else getattr(cfg, "CONFIG_STRICT", False)

    problems = []
    backend = getattr(cfg, "STATE_BACKEND", None)
    if backend not in STATE_BACKENDS:
        problems.append(f"STATE_BACKEND must be one of {', '.join(STATE_BACKENDS)} (got {backend!r})")

    tz_name = getattr(cfg, "TIMEZONE", None)
    if tz_name:
        try:
            ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError):
            problems.append(f"Unknown TIMEZONE: {tz_name}")

    if problems:
        message = f"Invalid configuration: {'; '.join(problems)}"
        if strict_mode:
            raise ConfigError(message)
        log.warning(message)
        return False

    return True
