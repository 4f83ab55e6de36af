"""
Starter service: route registration, mock database, JWT and sessions.
"""

import time
from typing import Callable, Optional

from shared.base_service import BaseService
from shared.config import ServiceConfig, get_config
from .database.connection import DummyConnection
from .database.models import GradeTable
from .database.routes import initialize_database_routes
from .sessions.routes import initialize_sessions_routes
from .sessions.store import InMemorySessionStore
from .tokens.claims import TokenDetails
from .tokens.errors import KeyLoadError
from .tokens.issuer import TokenIssuer
from .tokens.keys import KeyResolver
from .tokens.refresher import TokenRefresher
from .tokens.routes import initialize_jwt_routes
from .tokens.verifier import TokenVerifier


SERVICE_NAME = "starter"
SERVICE_PORT = 8080


class StarterService(BaseService):
    """Starter service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None, clock: Callable[[], float] = time.time):
        super().__init__(SERVICE_NAME, SERVICE_PORT, config)
        self.clock = clock
        self.connection = DummyConnection()
        self.session_store = InMemorySessionStore()
        self.keys: Optional[KeyResolver] = None

        self._setup_starter_routes()

    def _setup_starter_routes(self):
        """Set up starter-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": SERVICE_NAME,
                "message": "Starter Service - routing, JWT, database and session examples",
                "version": "1.0.0",
                "jwt_enabled": self.keys is not None
            }

        initialize_database_routes(self, GradeTable(self.connection, self.metrics))
        initialize_sessions_routes(self, self.session_store)
        self._setup_jwt_routes()

    def _setup_jwt_routes(self):
        """Load keys and register JWT routes; skipped if the keys cannot be loaded."""
        try:
            self.keys = KeyResolver.from_directory(self.config.jwt_key_dir)
        except KeyLoadError as e:
            self.logger.error("Failed to load JWT keys, JWT routes disabled", error=e.message, details=e.details)
            return

        issuer = TokenIssuer[TokenDetails](self.keys, self.config.token_ttl_seconds, self.clock)
        verifier = TokenVerifier[TokenDetails](
            self.keys,
            TokenDetails,
            leeway_seconds=self.config.token_leeway_seconds,
            clock=self.clock
        )
        initialize_jwt_routes(self, issuer, verifier, TokenRefresher(issuer))

    async def _check_dependencies(self):
        """Check starter dependencies."""
        return {
            "jwt_keys": "ok" if self.keys is not None else "unavailable",
            "database": "ok" if self.connection.is_connected else "error",
        }


def create_app(config: Optional[ServiceConfig] = None, clock: Callable[[], float] = time.time):
    """Create FastAPI application."""
    service = StarterService(config or get_config(SERVICE_NAME, SERVICE_PORT), clock)
    return service.app


if __name__ == "__main__":
    service = StarterService()
    service.run()
