"""
Session payloads.
"""

from typing import List

from fastapi import Request, Response
from pydantic import BaseModel

from .store import InMemorySessionStore, SessionCookie


class Book(BaseModel):
    name: str
    author: str
    rating: int


class BookSession:
    """Typed session holding a list of books.

    Changes to ``books`` are only kept once ``save()`` is called.
    """

    def __init__(self, session_id: str, books: List[Book], store: InMemorySessionStore,
                 cookie: SessionCookie, response: Response):
        self.session_id = session_id
        self.books = books
        self._store = store
        self._cookie = cookie
        self._response = response

    @classmethod
    def from_request(cls, request: Request, response: Response, store: InMemorySessionStore,
                     cookie: SessionCookie) -> "BookSession":
        session_id = cookie.unsign(request.cookies.get(cookie.name))
        data = store.load(session_id) if session_id else None
        if data is None:
            session_id = cookie.new_session_id()
            data = {}

        books = [Book.model_validate(book) for book in data.get("books", [])]
        return cls(session_id, books, store, cookie, response)

    def save(self) -> None:
        self._store.save(self.session_id, {"books": [book.model_dump() for book in self.books]})
        self._response.set_cookie(self._cookie.name, self._cookie.sign(self.session_id), httponly=True)

    def destroy(self) -> None:
        self._store.delete(self.session_id)
        self.books = []
        self._response.delete_cookie(self._cookie.name)
