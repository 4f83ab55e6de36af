"""
JWT routes: issue, protected access and refresh.
"""

from typing import Optional

from fastapi import Depends, Header, Request, Response
from pydantic import BaseModel, ValidationError as BodyValidationError

from shared.errors import ValidationError
from shared.logging import set_token_context
from .claims import AuthenticatedClaims, Token, TokenDetails
from .errors import TokenRejected
from .issuer import TokenIssuer
from .refresher import TokenRefresher
from .verifier import TokenVerifier


JWT_MEDIA_TYPE = "application/jwt"


class TokenRefreshRequest(BaseModel):
    """JSON body accepted by the refresh route."""
    token: str


def render_token(request: Request, token: Token):
    """Return the compact token for ``application/jwt`` clients, JSON otherwise."""
    if JWT_MEDIA_TYPE in request.headers.get("accept", ""):
        return Response(content=token.encoded, media_type=JWT_MEDIA_TYPE)
    return token.to_dict()


async def read_refresh_credential(request: Request) -> str:
    """Pull the token out of a refresh request body."""
    body = await request.body()
    if request.headers.get("content-type", "").startswith(JWT_MEDIA_TYPE):
        return body.decode("utf-8", errors="replace").strip()

    try:
        return TokenRefreshRequest.model_validate_json(body).token
    except BodyValidationError as e:
        raise ValidationError(
            "Refresh body must be a JWT or a JSON object with a token field",
            {"errors": e.error_count()}
        ) from e


def initialize_jwt_routes(service, issuer: TokenIssuer[TokenDetails],
                          verifier: TokenVerifier[TokenDetails],
                          refresher: TokenRefresher[TokenDetails]):
    """Register the JWT routes on ``service.app``."""
    app = service.app
    metrics = service.metrics

    def observe_verification(verify, credential) -> AuthenticatedClaims[TokenDetails]:
        with metrics.time_operation("token_verification_duration_seconds"):
            try:
                authenticated = verify(credential)
            except TokenRejected as e:
                metrics.increment_counter("token_verifications_total", outcome=e.rejection.value)
                raise

        metrics.increment_counter("token_verifications_total", outcome="ok")
        set_token_context(authenticated.subject, authenticated.token.kid)
        return authenticated

    def require_token(authorization: Optional[str] = Header(default=None)) -> AuthenticatedClaims[TokenDetails]:
        """Dependency guarding routes behind a bearer token."""
        return observe_verification(verifier.verify, authorization)

    # Sync handlers so RSA signing and verification run in the threadpool
    @app.post("/jwt/create_token")
    def create_token(claims: TokenDetails, request: Request):
        """Issue a token for the posted claims."""
        token = issuer.issue(claims)
        metrics.increment_counter("tokens_issued_total", kid=claims.kid)
        return render_token(request, token)

    @app.get("/jwt/protected")
    def protected(request: Request, auth: AuthenticatedClaims = Depends(require_token)):
        """Echo the caller's token back once it has been verified."""
        return render_token(request, auth.token)

    @app.post("/refreshJWT")
    def refresh_jwt(request: Request, credential: str = Depends(read_refresh_credential)):
        """Refresh the time claims on a valid token."""
        authenticated = observe_verification(verifier.verify_token, credential)

        refreshed = refresher.refresh(authenticated.token)
        metrics.increment_counter("tokens_refreshed_total", kid=refreshed.kid)
        return render_token(request, refreshed)
