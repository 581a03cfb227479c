# ============================================================
# config.py — Environment Settings & Logging
# ============================================================

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from incident_console.errors import ConfigurationError
from incident_console.session import EnvSessionReader, FileSessionStore, SessionReader

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_SESSION_FILE = "~/.incident_console/session.json"
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class Settings:
    api_base_url: str
    timeout: float = DEFAULT_TIMEOUT
    session_file: Path = Path(DEFAULT_SESSION_FILE).expanduser()
    token: Optional[str] = None
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Build Settings from INCIDENT_CONSOLE_* environment variables"""
    base_url = (os.getenv("INCIDENT_CONSOLE_API_BASE_URL") or "").strip()

    if not base_url:
        raise ConfigurationError("INCIDENT_CONSOLE_API_BASE_URL not configured")
    if not base_url.startswith(("http://", "https://")):
        raise ConfigurationError(
            f"INCIDENT_CONSOLE_API_BASE_URL must be an http(s) URL, got {base_url!r}"
        )
    base_url = base_url.rstrip("/")

    raw_timeout = os.getenv("INCIDENT_CONSOLE_TIMEOUT", str(DEFAULT_TIMEOUT))
    try:
        timeout = float(raw_timeout)
    except ValueError:
        raise ConfigurationError(f"INCIDENT_CONSOLE_TIMEOUT is not a number: {raw_timeout!r}")
    if timeout <= 0:
        raise ConfigurationError("INCIDENT_CONSOLE_TIMEOUT must be positive")

    return Settings(
        api_base_url=base_url,
        timeout=timeout,
        session_file=Path(
            os.getenv("INCIDENT_CONSOLE_SESSION_FILE", DEFAULT_SESSION_FILE)
        ).expanduser(),
        token=os.getenv("INCIDENT_CONSOLE_TOKEN") or None,
        log_level=os.getenv("INCIDENT_CONSOLE_LOG_LEVEL", "INFO").upper(),
    )


def session_reader_for(settings: Settings) -> SessionReader:
    # An explicit token in the environment wins over the on-disk session
    if settings.token:
        return EnvSessionReader()
    return FileSessionStore(settings.session_file)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
