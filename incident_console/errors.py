# ============================================================
# errors.py — Console Error Taxonomy
# ============================================================

from typing import Any, Optional


class ConsoleError(Exception):
    """Base class for every error raised by the console"""


class ConfigurationError(ConsoleError):
    """Settings are missing or malformed"""


class PreconditionFailure(ConsoleError):
    """No session credential is available for the attempted operation"""


class TransportError(ConsoleError):
    """Network or backend failure, opaque beyond pass/fail"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class ConflictError(TransportError):
    """409 response; carries the server's field/message pair when present"""

    def __init__(self, message: str, payload: Any = None):
        super().__init__(message, status_code=409, payload=payload)
        body = payload if isinstance(payload, dict) else {}
        self.field: Optional[str] = body.get("field")
        self.detail: Optional[str] = body.get("message") or body.get("detail")
