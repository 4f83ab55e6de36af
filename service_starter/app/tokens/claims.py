"""
Claim schemas and the signed token value type.
"""

from dataclasses import dataclass
from typing import Dict, Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict


class BaseClaims(BaseModel):
    """Claims every token schema must carry.

    ``iat``/``exp``/``nbf`` are NumericDate seconds. Fractional seconds are
    kept so that successive stamps from the same clock stay ordered.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    sub: str
    kid: str
    iat: Optional[float] = None
    exp: Optional[float] = None
    nbf: Optional[float] = None

    def stamped(self, issued_at: float, ttl_seconds: float) -> "BaseClaims":
        """Return a copy with fresh issued-at and expiry claims."""
        return self.model_copy(update={
            "iat": issued_at,
            "exp": issued_at + ttl_seconds,
            "nbf": None,
        })

    def to_payload(self) -> Dict[str, Any]:
        """JSON payload with unset optional claims dropped."""
        return self.model_dump(exclude_none=True)


class TokenDetails(BaseClaims):
    """Claims issued by the demo routes."""

    favourite: int


C = TypeVar("C", bound=BaseClaims)


@dataclass(frozen=True)
class Token(Generic[C]):
    """A signed token: header, claims and compact serialization."""

    header: Dict[str, Any]
    claims: C
    encoded: str

    @property
    def kid(self) -> Optional[str]:
        return self.header.get("kid")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "token": self.encoded,
            "header": self.header,
            "claims": self.claims.to_payload(),
        }

    def __str__(self) -> str:
        return self.encoded


@dataclass(frozen=True)
class AuthenticatedClaims(Generic[C]):
    """Identity produced by a successful verification."""

    claims: C
    token: Token[C]

    @property
    def subject(self) -> str:
        return self.claims.sub
