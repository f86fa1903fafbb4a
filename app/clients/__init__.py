from .book_client import BookClient
from .book_content_client import BookContentClient
from .identity_client import IdentityClient

__all__ = ["BookClient", "BookContentClient", "IdentityClient"]
