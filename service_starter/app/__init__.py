"""
Starter service package.

This package exposes the FastAPI application demonstrating route
registration, a mock database plugin, JWT authentication and cookie
sessions:

- app.main: Application entrypoint that wires routes and lifecycle.
- app.tokens: Key resolution plus token issue, verify and refresh.
- app.database: In-memory connection and the grades table binding.
- app.sessions: Typed (server-side) and raw (cookie) sessions.

Design notes:
- Key material is loaded once in the service constructor and handed to
  the token components explicitly; nothing reads key files per request.
- A failure to load keys disables only the JWT routes.
- Use the shared/ utilities for logging, metrics, config and errors.
"""
