import httpx

from app.clients.base import ServiceClient
from app.core.config import settings


class BookContentClient(ServiceClient):
    """Calls the book-content service."""

    def __init__(self, base_url: str | None = None, client: httpx.Client | None = None):
        super().__init__(base_url or settings.BOOK_CONTENT_SERVICE_URL, client)

    def is_content_valid(self, book_id: str) -> bool:
        # Body is a bare JSON boolean
        return self._get(f"/api/bookcontent/validcontent/{book_id}").json() is True
