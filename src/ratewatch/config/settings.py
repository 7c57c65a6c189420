# src/ratewatch/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Values come from environment variables or an optional .env file.

Only the composition root reads Settings; handlers, repositories and
providers receive the values they need through their constructors.

Files that USE this module:
- ratewatch.app (build_container and main load settings)
- ratewatch.adapters.providers (build_provider reads provider settings)

Files that this module USES:
- ratewatch.domain.currency (validates FETCH_CURRENCIES)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from pathlib import Path  # Object-oriented filesystem paths
from typing import Dict, List, Optional  # Type hints for dicts, lists and optional values

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from ratewatch.domain.currency import Code, Pair, is_valid_code  # Currency validation
from ratewatch.domain.errors import ValidationError  # Raised by Pair.parse

PROVIDER_NAMES = ("unionpay", "ecb", "manual")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def is_valid_pair(value: str) -> bool:
    try:
        Pair.parse(value)
    except ValidationError:
        return False
    return True


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Database ---
    database_url: str = Field(default="sqlite:///./data/ratewatch.db", alias="DATABASE_URL")
    db_echo: bool = Field(default=False, alias="DB_ECHO")

    # --- Provider ---
    rate_provider: str = Field(default="unionpay", alias="RATE_PROVIDER")
    unionpay_base_url: str = Field(default="https://m.unionpayintl.com/jfimg", alias="UNIONPAY_BASE_URL")
    ecb_base_url: str = Field(default="https://api.frankfurter.app", alias="ECB_BASE_URL")
    # For RATE_PROVIDER=manual, e.g. "CNY/JPY=20.5,USD/JPY=150.1"
    manual_rates: str = Field(default="", alias="MANUAL_RATES")

    # --- HTTP Settings ---
    http_timeout_seconds: int = Field(default=30, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=60)
    http_retries: int = Field(default=3, alias="HTTP_RETRIES", ge=0, le=10)

    # --- Cache Settings ---
    provider_cache_minutes: int = Field(default=60, alias="PROVIDER_CACHE_MINUTES", ge=1, le=1440)
    latest_cache_ttl_seconds: int = Field(default=300, alias="LATEST_CACHE_TTL_SECONDS", ge=1, le=86400)

    # --- Fetching ---
    # Comma-separated list; every ordered pair among them is fetched
    fetch_currencies: str = Field(default="CNY,JPY,USD", alias="FETCH_CURRENCIES")

    # --- Logging ---
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="RATEWATCH_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @property
    def fetch_codes(self) -> List[Code]:
        """FETCH_CURRENCIES parsed into Code members, in the given order."""
        return [Code.parse(c) for c in self.fetch_currencies.split(",") if c.strip()]

    @property
    def manual_rate_table(self) -> Dict[str, float]:
        """MANUAL_RATES parsed into {pair string: value}."""
        table: Dict[str, float] = {}
        for item in self.manual_rates.split(","):
            if not item.strip():
                continue
            key, _, value = item.partition("=")
            table[key.strip()] = float(value)
        return table

    @property
    def sqlite_path(self) -> Optional[Path]:
        """Filesystem path of a file-backed SQLite database, else None."""
        prefix = "sqlite:///"
        if not self.database_url.startswith(prefix):
            return None
        raw = self.database_url[len(prefix):]
        if not raw or raw == ":memory:":
            return None
        return Path(raw)

    @field_validator("rate_provider")
    @classmethod
    def validate_rate_provider(cls, v: str) -> str:
        """Validate provider name."""
        v = v.strip().lower()
        if v not in PROVIDER_NAMES:
            raise ValueError(f"RATE_PROVIDER must be one of {', '.join(PROVIDER_NAMES)}")
        return v

    @field_validator("fetch_currencies")
    @classmethod
    def validate_fetch_currencies(cls, v: str) -> str:
        """Validate that at least two supported, distinct currencies are listed."""
        codes = [c.strip().upper() for c in v.split(",") if c.strip()]
        invalid = [c for c in codes if not is_valid_code(c)]
        if invalid:
            raise ValueError(f"FETCH_CURRENCIES contains unsupported codes: {', '.join(invalid)}")
        if len(set(codes)) < 2:
            raise ValueError("FETCH_CURRENCIES needs at least 2 distinct currencies")
        return ",".join(codes)

    @field_validator("manual_rates")
    @classmethod
    def validate_manual_rates(cls, v: str) -> str:
        """Validate PAIR=VALUE entries."""
        for item in v.split(","):
            if not item.strip():
                continue
            key, sep, value = item.partition("=")
            if not sep or not is_valid_pair(key):
                raise ValueError(f"MANUAL_RATES entry is not PAIR=VALUE: {item.strip()}")
            try:
                if float(value) <= 0:
                    raise ValueError
            except ValueError:
                raise ValueError(f"MANUAL_RATES value must be a positive number: {item.strip()}") from None
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name."""
        v = v.strip().upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        return v

    def model_post_init(self, __context) -> None:
        """Post-initialization setup."""
        # Ensure the SQLite data directory exists
        path = self.sqlite_path
        if path is not None:
            path.parent.mkdir(parents=True, exist_ok=True)


# Global settings instance (entry point only)
settings = Settings()
