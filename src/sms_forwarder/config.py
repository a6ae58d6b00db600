"""
Runtime settings and logging setup.

Settings are read from the environment:

    SMS_FORWARDER_HOME       directory holding forwarder.json (~/.sms-forwarder)
    SMS_FORWARDER_TIMEOUT    per-request HTTP timeout in seconds, 0 disables it (30)
    SMS_FORWARDER_LOG_LEVEL  log level for the CLI (WARNING)
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from sms_forwarder.transport.http import DEFAULT_TIMEOUT

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    home: Path = Path.home() / ".sms-forwarder"
    http_timeout: float = DEFAULT_TIMEOUT
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level {v!r}, expected one of {', '.join(LOG_LEVELS)}")
        return level

    @classmethod
    def from_env(cls) -> "Settings":
        values: dict[str, Any] = {}
        if os.getenv("SMS_FORWARDER_HOME"):
            values["home"] = Path(os.environ["SMS_FORWARDER_HOME"]).expanduser()
        if os.getenv("SMS_FORWARDER_TIMEOUT"):
            values["http_timeout"] = os.environ["SMS_FORWARDER_TIMEOUT"]
        if os.getenv("SMS_FORWARDER_LOG_LEVEL"):
            values["log_level"] = os.environ["SMS_FORWARDER_LOG_LEVEL"]
        return cls(**values)

    @property
    def config_file(self) -> Path:
        return self.home / "forwarder.json"

    @property
    def timeout(self) -> Optional[float]:
        return self.http_timeout or None


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


def configure_logging(level: str = "WARNING") -> None:
    """Send library logs to stderr through rich."""
    from rich.console import Console
    from rich.logging import RichHandler

    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
