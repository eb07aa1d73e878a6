"""Configuration loading for idxwatch.

Settings live in an optional TOML file at ``~/.config/idxwatch/config.toml``.
Every key has a default, so a missing file is not an error.
"""

from datetime import datetime, time
from pathlib import Path
from typing import Callable, Optional

import pytz
import toml
from pydantic import BaseModel, Field, ValidationError, field_validator

from idxwatch.errors import ConfigError


DEFAULT_CONFIG_PATH = Path.home() / ".config" / "idxwatch" / "config.toml"


class MarketSettings(BaseModel):
    """Exchange hours and holiday calendar settings."""

    timezone: str = Field(default="Asia/Jakarta", description="Exchange timezone")
    country_code: str = Field(
        default="ID", min_length=2, max_length=2, description="Holiday calendar country"
    )
    open_time: time = Field(default=time(9, 0), description="Session open")
    close_time: time = Field(default=time(15, 30), description="Session close")
    close_inclusive: bool = Field(default=True, description="Whether close_time counts as open")
    holiday_ttl_hours: float = Field(default=12, gt=0, description="Holiday cache lifetime")

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            pytz.timezone(value)
        except pytz.UnknownTimeZoneError as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value


class QuoteSettings(BaseModel):
    """Quote source settings."""

    exchange: str = Field(default="IDX", min_length=1, description="Exchange suffix")
    timeout: int = Field(default=10, gt=0, description="HTTP timeout in seconds")


class DisplaySettings(BaseModel):
    """Live view settings."""

    interval: int = Field(default=5, ge=1, description="Refresh interval in seconds")
    history_size: int = Field(default=30, ge=2, description="Samples kept for the chart")
    chart_height: int = Field(default=10, ge=2, description="Chart rows")


class LoggingSettings(BaseModel):
    """Logging settings."""

    level: str = Field(default="WARNING", description="Log level name")
    file: str = Field(default="", description="Optional log file path")


class AppConfig(BaseModel):
    """Complete idxwatch configuration."""

    market: MarketSettings = Field(default_factory=MarketSettings)
    quote: QuoteSettings = Field(default_factory=QuoteSettings)
    display: DisplaySettings = Field(default_factory=DisplaySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load configuration from a TOML file.

    Args:
        path: Config file path; defaults to DEFAULT_CONFIG_PATH.

    Returns:
        AppConfig with defaults for anything not set in the file.

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values.
    """
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return AppConfig()

    try:
        data = toml.load(config_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"Cannot read {config_path}: {e}") from e

    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}:\n{e}") from e


def make_clock(timezone: str) -> Callable[[], datetime]:
    """Return a clock giving naive exchange-local wall time."""
    tz = pytz.timezone(timezone)

    def now() -> datetime:
        return datetime.now(tz).replace(tzinfo=None)

    return now
