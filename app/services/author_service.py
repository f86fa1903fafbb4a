from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.clients import BookClient, BookContentClient, IdentityClient
from app.core.errors import (
    AuthorAlreadyExists,
    AuthorNotAuthorized,
    AuthorNotFound,
    BookIsEmpty,
    DownstreamServiceError,
    InvalidCredentials,
)
from app.core.logging import get_logger
from app.core.security import hash_password, verify_password
from app.models.author import Author
from app.repos.author_repo import AuthorRepository
from app.schemas.auth import LoginRequest
from app.schemas.author import AuthorCreate, AuthorUpdate
from app.schemas.book import BookCreate, BookRead

logger = get_logger(__name__)


class AuthorService:
    """
    Author registration, approval and login, plus book operations proxied
    to the book and book-content services.
    """

    def __init__(
        self,
        db: Session,
        book_client: BookClient,
        book_content_client: BookContentClient,
        identity_client: IdentityClient,
    ):
        self.db: Session = db
        self.book_client: BookClient = book_client
        self.book_content_client: BookContentClient = book_content_client
        self.identity_client: IdentityClient = identity_client

    # Get author by email
    def get_author(self, author_id: str) -> Author:
        author = AuthorRepository.get_by_id(self.db, author_id)
        if author is None:
            logger.warning("Author with this id doesn't exist")
            raise AuthorNotFound("Author doesn't exist")
        logger.info("Author with this id has been found")
        return author

    # Register a new author, always unapproved
    def register_author(self, data: AuthorCreate) -> str:
        if AuthorRepository.exists(self.db, data.email):
            logger.warning(f"Author with {data.email} already exists")
            raise AuthorAlreadyExists("Author already exists")

        author = Author(
            email=data.email,
            authorname=data.authorname,
            password=hash_password(data.password),
            is_authorised=False,
        )
        try:
            _ = AuthorRepository.create(self.db, author)
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Author with {data.email} already exists")
            raise AuthorAlreadyExists("Author already exists")
        logger.info(f"Author with {data.email} registered successfully")
        return "Author Registered Successfully"

    # List authors
    def list_authors(self) -> list[Author]:
        logger.info("Listing all authors")
        return AuthorRepository.list(self.db)

    # Delete author by email
    def delete_author(self, author_id: str) -> str:
        if not AuthorRepository.exists(self.db, author_id):
            logger.warning("Author doesn't exist with this id")
            raise AuthorNotFound("Author doesn't exist with the given id")
        AuthorRepository.delete_by_id(self.db, author_id)
        logger.info("Author deleted successfully")
        return "Author deleted successfully"

    def update_author(self, data: AuthorUpdate) -> Author:
        """
        Overwrite name and password of an existing author.

        The password is re-hashed on every update; the approval flag is kept.
        """
        author = AuthorRepository.get_by_id(self.db, data.email)
        if author is None:
            logger.warning(f"Author with email {data.email} is not found")
            raise AuthorNotFound("Author not found")

        author.authorname = data.authorname
        author.password = hash_password(data.password)
        author = AuthorRepository.save(self.db, author)
        logger.info(f"Author with email {data.email} updated successfully")
        return author

    # Approve an author so they can publish books
    def validate_author(self, author_id: str) -> str:
        author = AuthorRepository.get_by_id(self.db, author_id)
        if author is None:
            logger.warning("Author doesn't exist")
            raise AuthorNotFound("Author does not exist")

        author.is_authorised = True
        _ = AuthorRepository.save(self.db, author)
        logger.info("Author is validated successfully")
        return "User Authorized"

    # Authors still waiting for approval
    def unauthorized_authors(self) -> list[Author]:
        logger.info("Listing all unauthorised authors")
        return AuthorRepository.list(self.db, is_authorised=False)

    def add_book(self, book: BookCreate) -> str:
        """
        Forward a new book to the book service on behalf of an approved author.

        Author id and name on the payload are replaced with the stored record's.
        """
        author = AuthorRepository.get_by_id(self.db, book.author_id)
        if author is None or not author.is_authorised:
            logger.warning("Author either doesn't exist or is not yet authorised to add book")
            raise AuthorNotAuthorized("Author does not exist or is not yet authorized")

        book.author_id = author.email
        book.author_name = author.authorname
        result = self.book_client.create_book(book.to_wire())
        logger.info("Book added successfully")
        return result

    def set_book_complete(self, book_id: str) -> str:
        if not self.book_content_client.is_content_valid(book_id):
            logger.warning("Book is empty or incomplete")
            raise BookIsEmpty(book_id)

        result = self.book_client.set_complete(book_id)
        logger.info("Book is completed successfully")
        return result

    # Books owned by an author, straight from the book service
    def get_author_books(self, author_id: str) -> list[BookRead]:
        books = self.book_client.get_books_by_author(author_id)
        try:
            result = [BookRead.model_validate(book) for book in books]
        except ValidationError:
            logger.warning("Book service returned malformed books")
            raise DownstreamServiceError("Book service returned malformed books")
        logger.info("Listing all books of the author")
        return result

    def login(self, credentials: LoginRequest) -> str:
        author = AuthorRepository.get_by_id(self.db, credentials.email)
        if author is None or not verify_password(credentials.password, author.password):
            logger.warning("Invalid credentials or user does not exist")
            raise InvalidCredentials("Invalid credentials or user does not exist")

        logger.info("Login successful")
        token = self.identity_client.request_token()
        access_token = token.get("access_token") if isinstance(token, dict) else None
        if not isinstance(access_token, str) or not access_token:
            logger.warning("Identity provider response carried no access token")
            raise DownstreamServiceError("Identity provider did not return an access token")
        return access_token
