"""
Token issuance.
"""

import time
from typing import Callable, Generic

from jose import jwt

from shared.logging import get_logger
from .claims import C, Token
from .keys import KeyResolver


ALGORITHM = "RS256"
DEFAULT_TTL_SECONDS = 300


class TokenIssuer(Generic[C]):
    """Mints RS256 tokens stamped with issued-at and expiry claims."""

    def __init__(self, keys: KeyResolver, ttl_seconds: int = DEFAULT_TTL_SECONDS,
                 clock: Callable[[], float] = time.time):
        self.keys = keys
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.logger = get_logger("starter.tokens.issuer")

    def issue(self, claims: C) -> Token[C]:
        """Issue a fresh token for ``claims``.

        Incoming ``iat``/``exp`` values are overwritten. Raises
        ``UnknownKeyID`` if ``claims.kid`` is not configured.
        """
        stamped = claims.stamped(self.clock(), self.ttl_seconds)
        token = self.sign(stamped, stamped.kid)

        self.logger.info("Token issued", sub=stamped.sub, kid=stamped.kid, exp=stamped.exp)
        return token

    def sign(self, claims: C, kid: str) -> Token[C]:
        """Sign ``claims`` as-is with the key selected by ``kid``."""
        key = self.keys.signing_key(kid)
        encoded = jwt.encode(claims.to_payload(), key, algorithm=ALGORITHM, headers={"kid": kid})
        return Token(header=jwt.get_unverified_header(encoded), claims=claims, encoded=encoded)
