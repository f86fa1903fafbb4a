import httpx
import pytest

from app.core.errors import (
    AuthorAlreadyExists,
    AuthorNotAuthorized,
    AuthorNotFound,
    BookIsEmpty,
    DownstreamServiceError,
    InvalidCredentials,
)
from app.core.security import verify_password
from app.models.author import Author
from app.repos.author_repo import AuthorRepository
from app.schemas.auth import LoginRequest
from app.schemas.author import AuthorCreate, AuthorUpdate
from app.schemas.book import BookCreate


class TestAuthorLifecycle:
    """Test registration, lookup, update and deletion through the service."""

    def test_register_author_success(self, author_service, unique_email):
        data = AuthorCreate(authorname="Jane Doe", email=unique_email, password="secret123")

        message = author_service.register_author(data)
        author = author_service.get_author(unique_email)

        assert message == "Author Registered Successfully"
        assert author.authorname == "Jane Doe"
        assert author.password != "secret123"
        assert verify_password("secret123", author.password)
        assert author.is_authorised is False

    def test_register_duplicate_email(self, author_service, sample_author_model):
        data = AuthorCreate(
            authorname="Someone Else", email=sample_author_model.email, password="other"
        )
        with pytest.raises(AuthorAlreadyExists):
            author_service.register_author(data)

    def test_get_missing_author(self, author_service):
        with pytest.raises(AuthorNotFound):
            author_service.get_author("nobody@example.com")

    def test_list_authors(self, author_service, sample_author_model):
        authors = author_service.list_authors()
        assert [a.email for a in authors] == [sample_author_model.email]

    def test_update_rehashes_password(self, author_service, sample_author_model):
        old_hash = sample_author_model.password
        data = AuthorUpdate(
            authorname="Renamed", email=sample_author_model.email, password="newpass456"
        )

        author = author_service.update_author(data)

        assert author.authorname == "Renamed"
        assert author.password != old_hash
        assert author.password != "newpass456"
        assert verify_password("newpass456", author.password)

    def test_update_keeps_approval(self, author_service, authorised_author_model):
        data = AuthorUpdate(
            authorname="Renamed", email=authorised_author_model.email, password="newpass456"
        )
        assert author_service.update_author(data).is_authorised is True

    def test_update_missing_author(self, author_service):
        data = AuthorUpdate(authorname="Ghost", email="ghost@example.com", password="x")
        with pytest.raises(AuthorNotFound):
            author_service.update_author(data)

    def test_delete_author(self, author_service, sample_author_model):
        email = sample_author_model.email
        assert author_service.delete_author(email) == "Author deleted successfully"
        with pytest.raises(AuthorNotFound):
            author_service.get_author(email)

    def test_delete_missing_author(self, author_service):
        with pytest.raises(AuthorNotFound):
            author_service.delete_author("nobody@example.com")


class TestAuthorApproval:
    """Test the approval flag."""

    def test_validate_author_sets_flag(self, author_service, sample_author_model):
        assert author_service.validate_author(sample_author_model.email) == "User Authorized"
        assert author_service.get_author(sample_author_model.email).is_authorised is True

    def test_validate_missing_author(self, author_service):
        with pytest.raises(AuthorNotFound):
            author_service.validate_author("nobody@example.com")

    def test_unauthorized_authors(self, author_service, db_session, sample_author_model):
        author_service.register_author(
            AuthorCreate(authorname="Approved", email="approved@example.com", password="x")
        )
        author_service.validate_author("approved@example.com")

        pending = author_service.unauthorized_authors()
        assert [a.email for a in pending] == [sample_author_model.email]


class TestBookOperations:
    """Test book operations proxied to the book services."""

    def test_add_book_injects_author(self, author_service, book_client, authorised_author_model):
        book = BookCreate(
            book_name="Dune",
            author_id=authorised_author_model.email,
            author_name="Spoofed Name",
            genre="Sci-Fi",
        )

        result = author_service.add_book(book)

        assert result == "Book Created Successfully"
        book_client.create_book.assert_called_once_with({
            "bookName": "Dune",
            "authorId": authorised_author_model.email,
            "authorName": "Test Author",
            "genre": "Sci-Fi",
        })

    def test_add_book_unauthorised_author(self, author_service, book_client, sample_author_model):
        book = BookCreate(book_name="Dune", author_id=sample_author_model.email)
        with pytest.raises(AuthorNotAuthorized):
            author_service.add_book(book)
        book_client.create_book.assert_not_called()

    def test_add_book_missing_author(self, author_service, book_client):
        book = BookCreate(book_name="Dune", author_id="nobody@example.com")
        with pytest.raises(AuthorNotAuthorized):
            author_service.add_book(book)
        book_client.create_book.assert_not_called()

    def test_set_book_complete_valid_content(self, author_service, book_client, book_content_client):
        assert author_service.set_book_complete("b-1") == "Book marked as complete"
        book_content_client.is_content_valid.assert_called_once_with("b-1")
        book_client.set_complete.assert_called_once_with("b-1")

    def test_set_book_complete_empty_content(self, author_service, book_client, book_content_client):
        book_content_client.is_content_valid.return_value = False

        with pytest.raises(BookIsEmpty) as exc_info:
            author_service.set_book_complete("b-1")

        assert exc_info.value.book_id == "b-1"
        book_client.set_complete.assert_not_called()

    def test_get_author_books(self, author_service, book_client):
        book_client.get_books_by_author.return_value = [
            {"bookId": "b-1", "bookName": "Dune", "authorId": "a@example.com", "isComplete": False},
        ]

        books = author_service.get_author_books("a@example.com")

        assert len(books) == 1
        assert books[0].book_id == "b-1"
        assert books[0].book_name == "Dune"
        book_client.get_books_by_author.assert_called_once_with("a@example.com")

    def test_downstream_error_propagates(self, author_service, book_client):
        request = httpx.Request("GET", "http://books.test/api/book/getbyauthid/a@example.com")
        book_client.get_books_by_author.side_effect = httpx.HTTPStatusError(
            "boom", request=request, response=httpx.Response(500, request=request)
        )
        with pytest.raises(httpx.HTTPStatusError):
            author_service.get_author_books("a@example.com")


class TestLogin:
    """Test login and token retrieval."""

    def test_login_success(self, author_service, identity_client, sample_author_model):
        token = author_service.login(
            LoginRequest(email=sample_author_model.email, password="secret123")
        )
        assert token == "test-access-token"
        identity_client.request_token.assert_called_once_with()

    def test_login_wrong_password(self, author_service, identity_client, sample_author_model):
        with pytest.raises(InvalidCredentials):
            author_service.login(LoginRequest(email=sample_author_model.email, password="wrong"))
        identity_client.request_token.assert_not_called()

    def test_login_missing_author(self, author_service, identity_client):
        with pytest.raises(InvalidCredentials):
            author_service.login(LoginRequest(email="nobody@example.com", password="secret123"))
        identity_client.request_token.assert_not_called()

    def test_login_without_access_token(self, author_service, identity_client, sample_author_model):
        identity_client.request_token.return_value = {"error": "invalid_grant"}
        with pytest.raises(DownstreamServiceError):
            author_service.login(LoginRequest(email=sample_author_model.email, password="secret123"))

    def test_login_with_empty_access_token(self, author_service, identity_client, sample_author_model):
        identity_client.request_token.return_value = {"access_token": ""}
        with pytest.raises(DownstreamServiceError):
            author_service.login(LoginRequest(email=sample_author_model.email, password="secret123"))


class TestDownstreamBodies:
    """Test bodies from the book service that cannot be mapped."""

    def test_get_author_books_malformed(self, author_service, book_client):
        book_client.get_books_by_author.return_value = [{"bookId": ["not", "a", "string"]}]
        with pytest.raises(DownstreamServiceError):
            author_service.get_author_books("a@example.com")

    def test_book_create_ignores_unknown_fields(self):
        book = BookCreate.model_validate(
            {"bookName": "Dune", "authorId": "a@example.com", "isComplete": True}
        )
        assert book.to_wire() == {"bookName": "Dune", "authorId": "a@example.com"}


class TestConcurrentRegistration:
    """Test a duplicate that slips past the existence check."""

    def test_duplicate_insert_does_not_overwrite(
        self, author_service, db_session, sample_author_model, monkeypatch
    ):
        email = sample_author_model.email
        original_hash = sample_author_model.password
        db_session.expunge_all()
        monkeypatch.setattr(AuthorRepository, "exists", staticmethod(lambda db, author_email: False))

        with pytest.raises(AuthorAlreadyExists):
            author_service.register_author(
                AuthorCreate(authorname="Intruder", email=email, password="other456")
            )

        stored = db_session.get(Author, email)
        assert stored.password == original_hash
        assert stored.authorname == "Test Author"
