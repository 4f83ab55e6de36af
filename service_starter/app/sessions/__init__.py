"""Cookie-backed session routes and storage."""
