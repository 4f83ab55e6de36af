"""
Token error taxonomy.
"""

from enum import Enum
from typing import Dict, Any, Optional

from shared.errors import ServiceException, ServiceError


class Rejection(str, Enum):
    """Outcome of a rejected token, mapped onto an HTTP status."""

    UNAUTHORIZED = "unauthorized"
    BAD_REQUEST = "badRequest"

    @property
    def status_code(self) -> int:
        return 401 if self is Rejection.UNAUTHORIZED else 400


class KeyLoadError(ServiceError):
    """Key material could not be read or parsed at startup."""

    def __init__(self, message: str = "Failed to load JWT keys", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.code = "KEY_LOAD_ERROR"


class UnknownKeyID(ServiceException):
    """A key identifier that is not in the configured key table."""

    status_code = 400

    def __init__(self, kid: Optional[str]):
        self.kid = kid
        super().__init__("UNKNOWN_KEY_ID", f"Unknown key id: {kid!r}", {"kid": kid})


class TokenRejected(ServiceException):
    """A bearer credential that failed verification."""

    def __init__(self, rejection: Rejection, message: str, details: Optional[Dict[str, Any]] = None):
        self.rejection = rejection
        super().__init__(
            "TOKEN_REJECTED",
            message,
            dict(details or {}, rejection=rejection.value),
            status_code=rejection.status_code
        )
