from fastapi import APIRouter, Depends
from app.api.deps import get_author_service
from app.services.author_service import AuthorService
from app.schemas.auth import LoginRequest, MessageResponse, TokenResponse
from app.schemas.author import AuthorCreate, AuthorRead, AuthorUpdate
from app.schemas.book import BookCreate, BookRead
from typing import Annotated
from starlette.status import HTTP_201_CREATED

router = APIRouter(prefix="/authors", tags=["authors"])

Service = Annotated[AuthorService, Depends(get_author_service)]


@router.post("/register", response_model=MessageResponse, status_code=HTTP_201_CREATED)
def register_author(data: AuthorCreate, service: Service):
    return MessageResponse(message=service.register_author(data))


@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, service: Service):
    return TokenResponse(access_token=service.login(credentials))


@router.get("", response_model=list[AuthorRead])
def list_authors(service: Service):
    return service.list_authors()


# Registered before /{author_id} so it is not captured as an id
@router.get("/unauthorized", response_model=list[AuthorRead])
def unauthorized_authors(service: Service):
    return service.unauthorized_authors()


@router.put("", response_model=AuthorRead)
def update_author(data: AuthorUpdate, service: Service):
    return service.update_author(data)


@router.post("/books", response_model=MessageResponse, status_code=HTTP_201_CREATED)
def add_book(book: BookCreate, service: Service):
    return MessageResponse(message=service.add_book(book))


@router.put("/books/{book_id}/complete", response_model=MessageResponse)
def set_book_complete(book_id: str, service: Service):
    return MessageResponse(message=service.set_book_complete(book_id))


@router.get("/{author_id}", response_model=AuthorRead)
def get_author(author_id: str, service: Service):
    return service.get_author(author_id)


@router.delete("/{author_id}", response_model=MessageResponse)
def delete_author(author_id: str, service: Service):
    return MessageResponse(message=service.delete_author(author_id))


@router.put("/{author_id}/authorize", response_model=MessageResponse)
def authorize_author(author_id: str, service: Service):
    return MessageResponse(message=service.validate_author(author_id))


@router.get("/{author_id}/books", response_model=list[BookRead])
def get_author_books(author_id: str, service: Service):
    return service.get_author_books(author_id)
