"""
Session routes.

``/session`` uses a typed session stored server-side behind a signed cookie.
``/rawsession`` uses the framework session middleware, which keeps the data
itself in a signed cookie.
"""

from typing import List

from fastapi import Depends, Request, Response
from starlette.middleware.sessions import SessionMiddleware

from shared.metrics import count_calls
from .models import Book, BookSession
from .store import InMemorySessionStore, SessionCookie


RAW_BOOKS_KEY = "books"


def initialize_sessions_routes(service, store: InMemorySessionStore):
    """Register typed and raw session routes on ``service.app``."""
    app = service.app
    config = service.config
    metrics = service.metrics
    cookie = SessionCookie(config.session_cookie, config.session_secret)

    app.add_middleware(
        SessionMiddleware,
        secret_key=config.session_secret,
        session_cookie=config.raw_session_cookie
    )

    def book_session(request: Request, response: Response) -> BookSession:
        return BookSession.from_request(request, response, store, cookie)

    # Typed session
    @app.get("/session", response_model=List[Book])
    @count_calls("session_operations_total", metrics, kind="typed", operation="read")
    async def get_session_books(session: BookSession = Depends(book_session)):
        return session.books

    @app.post("/session", response_model=Book, status_code=201)
    @count_calls("session_operations_total", metrics, kind="typed", operation="append")
    async def add_session_book(book: Book, session: BookSession = Depends(book_session)):
        session.books.append(book)
        session.save()
        return book

    @app.delete("/session", status_code=204)
    @count_calls("session_operations_total", metrics, kind="typed", operation="destroy")
    async def destroy_session(session: BookSession = Depends(book_session)):
        session.destroy()

    # Raw session
    @app.get("/rawsession", response_model=List[Book])
    @count_calls("session_operations_total", metrics, kind="raw", operation="read")
    async def get_raw_session_books(request: Request):
        return request.session.get(RAW_BOOKS_KEY, [])

    @app.post("/rawsession", response_model=Book, status_code=201)
    @count_calls("session_operations_total", metrics, kind="raw", operation="append")
    async def add_raw_session_book(book: Book, request: Request):
        books = list(request.session.get(RAW_BOOKS_KEY, []))
        books.append(book.model_dump())
        request.session[RAW_BOOKS_KEY] = books
        return book

    @app.delete("/rawsession", status_code=204)
    @count_calls("session_operations_total", metrics, kind="raw", operation="clear")
    async def clear_raw_session(request: Request):
        request.session.pop(RAW_BOOKS_KEY, None)
