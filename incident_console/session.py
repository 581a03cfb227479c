# ============================================================
# session.py — Session Readers & Store
# ============================================================

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

logger = logging.getLogger(__name__)


def _clean(token: Optional[str]) -> Optional[str]:
    if token is None:
        return None
    token = token.strip()
    return token or None


class SessionReader(Protocol):
    def current_credential(self) -> Optional[str]:
        ...


class StaticSession:
    """Fixed credential, mostly for scripts and tests"""

    def __init__(self, token: Optional[str] = None):
        self.token = token

    def current_credential(self) -> Optional[str]:
        return _clean(self.token)


class EnvSessionReader:
    """Reads the token from an environment variable on every call"""

    def __init__(self, variable: str = "INCIDENT_CONSOLE_TOKEN"):
        self.variable = variable

    def current_credential(self) -> Optional[str]:
        return _clean(os.getenv(self.variable))


class FileSessionStore:
    """
    JSON file holding the signed-in session:
    - token: bearer credential sent with every API call
    - user: profile returned at sign-in (department, email, ...)
    """

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"⚠️ Unreadable session file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def current_credential(self) -> Optional[str]:
        token = self._read().get("token")
        return _clean(token) if isinstance(token, str) else None

    def current_user(self) -> Optional[Dict[str, Any]]:
        user = self._read().get("user")
        return user if isinstance(user, dict) else None

    def save(self, token: str, user: Optional[Dict[str, Any]] = None) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({"token": token, "user": user or {}}, f, indent=2)
        logger.info(f"✅ Session saved to {self.path}")

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
            logger.info(f"Session cleared: {self.path}")
