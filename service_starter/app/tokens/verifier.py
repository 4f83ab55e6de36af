"""
Bearer credential verification.

Failures are split in two: anything wrong with the credential itself
(scheme, structure, key id, signature, claim schema) is ``unauthorized``;
a well-formed, correctly signed token whose time claims are out of range is
``badRequest``.
"""

import time
from typing import Any, Callable, Dict, Generic, Optional, Type

from jose import jwt
from jose.exceptions import JWTError
from pydantic import ValidationError as ClaimsSchemaError

from shared.logging import get_logger
from .claims import AuthenticatedClaims, C, Token
from .errors import Rejection, TokenRejected, UnknownKeyID
from .issuer import ALGORITHM
from .keys import KeyResolver


BEARER_SCHEME = "Bearer"

# Time claims are checked separately so their failures stay distinguishable
# from signature failures.
DECODE_OPTIONS: Dict[str, Any] = {
    "verify_signature": True,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_aud": False,
}


def parse_bearer(authorization: Optional[str]) -> str:
    """Extract the credential from an ``Authorization`` header value."""
    if not authorization:
        raise TokenRejected(Rejection.UNAUTHORIZED, "Missing Authorization header")

    components = authorization.split(" ")
    if len(components) != 2 or components[0] != BEARER_SCHEME:
        raise TokenRejected(Rejection.UNAUTHORIZED, "Authorization scheme must be Bearer")

    return components[1]


def validate_time_claims(claims, now: float, leeway: float = 0) -> None:
    """Reject expired, not-yet-valid or future-issued claims."""
    if claims.exp is not None and now > claims.exp + leeway:
        raise TokenRejected(Rejection.BAD_REQUEST, "Token has expired", {"exp": claims.exp})
    if claims.nbf is not None and now + leeway < claims.nbf:
        raise TokenRejected(Rejection.BAD_REQUEST, "Token is not yet valid", {"nbf": claims.nbf})
    if claims.iat is not None and now + leeway < claims.iat:
        raise TokenRejected(Rejection.BAD_REQUEST, "Token issued in the future", {"iat": claims.iat})


class TokenVerifier(Generic[C]):
    """Verifies tokens signed with one of the resolver's keys."""

    def __init__(self, keys: KeyResolver, claims_type: Type[C], leeway_seconds: float = 0,
                 clock: Callable[[], float] = time.time):
        self.keys = keys
        self.claims_type = claims_type
        self.leeway_seconds = leeway_seconds
        self.clock = clock
        self.logger = get_logger("starter.tokens.verifier")

    def verify(self, authorization: Optional[str]) -> AuthenticatedClaims[C]:
        """Verify the raw value of an ``Authorization`` header."""
        return self.verify_token(parse_bearer(authorization))

    def verify_token(self, encoded: str) -> AuthenticatedClaims[C]:
        """Verify a compact token: signature first, then time claims."""
        token = self.decode(encoded)
        validate_time_claims(token.claims, self.clock(), self.leeway_seconds)

        self.logger.debug("Token verified", sub=token.claims.sub, kid=token.kid)
        return AuthenticatedClaims(claims=token.claims, token=token)

    def decode(self, encoded: str) -> Token[C]:
        """Check structure and signature and parse the claims."""
        try:
            header = jwt.get_unverified_header(encoded)
            kid = header.get("kid")
            if kid is None:
                raise TokenRejected(Rejection.UNAUTHORIZED, "Token header is missing a key id")

            payload = jwt.decode(
                encoded,
                self.keys.verification_key(kid),
                algorithms=[ALGORITHM],
                options=DECODE_OPTIONS
            )
            claims = self.claims_type.model_validate(payload)
        except UnknownKeyID as e:
            self.logger.warning("Token signed with unknown key", kid=e.kid)
            raise TokenRejected(Rejection.UNAUTHORIZED, "Token signed with an unknown key", {"kid": e.kid}) from e
        except JWTError as e:
            self.logger.warning("Token decode failed", error=str(e))
            raise TokenRejected(Rejection.UNAUTHORIZED, "Invalid token") from e
        except ClaimsSchemaError as e:
            self.logger.warning("Token claims do not match schema", errors=e.error_count())
            raise TokenRejected(Rejection.UNAUTHORIZED, "Invalid token claims") from e

        return Token(header=header, claims=claims, encoded=encoded)
