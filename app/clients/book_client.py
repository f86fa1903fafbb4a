from typing import Any

import httpx

from app.clients.base import ServiceClient
from app.core.config import settings


class BookClient(ServiceClient):
    """Calls the book service."""

    def __init__(self, base_url: str | None = None, client: httpx.Client | None = None):
        super().__init__(base_url or settings.BOOK_SERVICE_URL, client)

    def create_book(self, payload: dict[str, Any]) -> str:
        return self._post("/api/book/createbook", json=payload).text

    def set_complete(self, book_id: str) -> str:
        return self._get(f"/api/book/setcomplete/{book_id}").text

    def get_books_by_author(self, author_id: str) -> list[dict[str, Any]]:
        data = self._get(f"/api/book/getbyauthid/{author_id}").json()
        return data or []
