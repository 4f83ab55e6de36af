"""
Server-side session storage for typed sessions.
"""

import secrets
import threading
from typing import Any, Dict, Optional

from itsdangerous import BadSignature, Signer


class InMemorySessionStore:
    """Session data keyed by session id, held for the lifetime of the process."""

    def __init__(self):
        self._sessions: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def load(self, session_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            data = self._sessions.get(session_id)
            return dict(data) if data is not None else None

    def save(self, session_id: str, data: Dict[str, Any]) -> None:
        with self._lock:
            self._sessions[session_id] = dict(data)

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


class SessionCookie:
    """Names and signs the cookie that carries a session id."""

    def __init__(self, name: str, secret: str):
        self.name = name
        self._signer = Signer(secret, salt="session-cookie")

    def new_session_id(self) -> str:
        return secrets.token_urlsafe(24)

    def sign(self, session_id: str) -> str:
        return self._signer.sign(session_id).decode("ascii")

    def unsign(self, value: Optional[str]) -> Optional[str]:
        """Return the session id from a cookie value, or None if it was tampered with."""
        if not value:
            return None
        try:
            return self._signer.unsign(value).decode("ascii")
        except BadSignature:
            return None
