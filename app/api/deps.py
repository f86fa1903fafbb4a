from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.clients import BookClient, BookContentClient, IdentityClient
from app.db.session import get_db
from app.services.author_service import AuthorService

# Downstream clients are created once in the app lifespan (see app.main)


def get_book_client(request: Request) -> BookClient:
    return request.app.state.book_client


def get_book_content_client(request: Request) -> BookContentClient:
    return request.app.state.book_content_client


def get_identity_client(request: Request) -> IdentityClient:
    return request.app.state.identity_client


def get_author_service(
    db: Annotated[Session, Depends(get_db)],
    book_client: Annotated[BookClient, Depends(get_book_client)],
    book_content_client: Annotated[BookContentClient, Depends(get_book_content_client)],
    identity_client: Annotated[IdentityClient, Depends(get_identity_client)],
) -> AuthorService:
    return AuthorService(db, book_client, book_content_client, identity_client)
