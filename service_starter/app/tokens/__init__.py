"""
Token package.

Issues, verifies and refreshes RS256 tokens whose signing key is chosen by
the ``kid`` header. Verification rejections keep two outcomes apart:

- unauthorized: bad scheme, malformed token, unknown key or bad signature
- badRequest: a correctly signed token whose time claims are out of range
"""

from .claims import AuthenticatedClaims, BaseClaims, Token, TokenDetails
from .errors import KeyLoadError, Rejection, TokenRejected, UnknownKeyID
from .issuer import TokenIssuer
from .keys import KeyResolver
from .refresher import TokenRefresher
from .verifier import TokenVerifier

__all__ = [
    "AuthenticatedClaims",
    "BaseClaims",
    "KeyLoadError",
    "KeyResolver",
    "Rejection",
    "Token",
    "TokenDetails",
    "TokenIssuer",
    "TokenRefresher",
    "TokenRejected",
    "TokenVerifier",
    "UnknownKeyID",
]
