"""
Token refresh.
"""

import math
from typing import Generic

from shared.logging import get_logger
from .claims import C, Token
from .issuer import TokenIssuer


class TokenRefresher(Generic[C]):
    """Re-stamps the time claims of an already verified token and re-signs it.

    Identity claims (``sub``, ``kid`` and any schema-specific fields) are
    carried over unchanged and the signing key stays the one named in the
    original header, so a refresh never rotates keys.
    """

    def __init__(self, issuer: TokenIssuer[C]):
        self.issuer = issuer
        self.logger = get_logger("starter.tokens.refresher")

    def issued_at(self, token: Token[C]) -> float:
        """Refresh time, always strictly after the token's own ``iat``.

        A clock that has not ticked, or has stepped backwards, is nudged to
        the next representable instant after the previous issue time.
        """
        now = self.issuer.clock()
        if token.claims.iat is None:
            return now
        return max(now, math.nextafter(token.claims.iat, math.inf))

    def refresh(self, token: Token[C]) -> Token[C]:
        kid = token.kid or token.claims.kid
        refreshed_claims = token.claims.stamped(self.issued_at(token), self.issuer.ttl_seconds)
        refreshed = self.issuer.sign(refreshed_claims, kid)

        self.logger.info(
            "Token refreshed",
            sub=refreshed_claims.sub,
            kid=kid,
            previous_iat=token.claims.iat,
            iat=refreshed_claims.iat
        )
        return refreshed
