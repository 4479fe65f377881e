"""
fsnotify-reloader Configuration Module.

Centralizes all configuration settings using Pydantic Settings.
Requires Python 3.11+.
"""

from functools import lru_cache
from pathlib import Path
from signal import Signals
from typing import Annotated

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Load .env file into os.environ at module import time
# This ensures nested BaseSettings classes can read the values
_env_file = Path(__file__).parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    # Try current working directory
    load_dotenv()


def normalize_signal_name(v: str) -> str:
    """Normalize and validate a signal name (``usr1`` -> ``SIGUSR1``)."""
    name = str(v).strip().upper()
    if not name.startswith("SIG"):
        name = f"SIG{name}"
    if name not in Signals.__members__:
        raise ValueError(f"unknown signal: {v}")
    return name


def _split_csv(v: str | list[str]) -> list[str]:
    if isinstance(v, str):
        return [p.strip() for p in v.split(",") if p.strip()]
    return v


class WatcherSettings(BaseSettings):
    """Watch set and event filter settings."""

    model_config = SettingsConfigDict(env_prefix="WATCHER_")

    path: Path = Field(default=Path("."), description="Root directory to watch")
    excluded_dirs: Annotated[list[str], NoDecode] = Field(
        default=["var", "vendor"],
        description="Directory names excluded together with their subtree",
    )
    skip_hidden: bool = Field(default=True, description="Exclude directories starting with '.'")
    extensions: Annotated[list[str], NoDecode] = Field(
        default=[".php", ".twig", ".yaml", ".yml"],
        description="File suffixes whose writes request a reload",
    )

    @field_validator("excluded_dirs", "extensions", mode="before")
    @classmethod
    def parse_csv(cls, v: str | list[str]) -> list[str]:
        """Parse lists from comma-separated string or list."""
        return _split_csv(v)


class ReloadSettings(BaseSettings):
    """Monitored process and debounce settings."""

    model_config = SettingsConfigDict(env_prefix="RELOAD_")

    pid: int = Field(default=-1, description="Process id to monitor and signal")
    tick_seconds: float = Field(default=5.0, gt=0, description="Minimum duration between reloads")
    signal: str = Field(default="SIGUSR1", description="Signal sent to request a reload")
    enabled: bool = Field(default=True, description="Send signals; when off only log changes")

    @field_validator("signal", mode="before")
    @classmethod
    def parse_signal(cls, v: str) -> str:
        """Accept signal names with or without the SIG prefix."""
        return normalize_signal_name(v)

    @property
    def signal_number(self) -> Signals:
        """Resolved reload signal."""
        return Signals[self.signal]


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO")
    format: str = Field(default="console")  # "json" or "console"
    verbose: bool = Field(default=False)

    @property
    def effective_level(self) -> str:
        """Verbose mode always logs at DEBUG."""
        return "DEBUG" if self.verbose else self.level.upper()


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="fsnotify-reloader")
    app_version: str = Field(default="0.1.0")
    environment: str = Field(default="development")

    # Sub-settings
    watcher: WatcherSettings = Field(default_factory=WatcherSettings)
    reload: ReloadSettings = Field(default_factory=ReloadSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() in ("development", "dev", "local")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns singleton instance of Settings for performance.
    """
    return Settings()
