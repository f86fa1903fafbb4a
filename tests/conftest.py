import os

# Settings are read at import time; keep the app off Postgres during tests
os.environ.setdefault("DATABASE_URL", "sqlite://")

import uuid
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import (
    get_book_client,
    get_book_content_client,
    get_identity_client,
)
from app.clients import BookClient, BookContentClient, IdentityClient
from app.core.security import hash_password
from app.db.session import get_db
from app.main import app
from app.models.author import Author
from app.models.base import Base
from app.services.author_service import AuthorService

# Single shared in-memory database
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    future=True,
)
TestSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False, future=True)


@pytest.fixture
def db_session():
    """Create a fresh schema and session for each test."""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def book_client():
    client = Mock(spec=BookClient)
    client.create_book.return_value = "Book Created Successfully"
    client.set_complete.return_value = "Book marked as complete"
    client.get_books_by_author.return_value = []
    return client


@pytest.fixture
def book_content_client():
    client = Mock(spec=BookContentClient)
    client.is_content_valid.return_value = True
    return client


@pytest.fixture
def identity_client():
    client = Mock(spec=IdentityClient)
    client.request_token.return_value = {
        "access_token": "test-access-token",
        "token_type": "Bearer",
        "expires_in": 300,
    }
    return client


@pytest.fixture
def author_service(db_session, book_client, book_content_client, identity_client):
    return AuthorService(db_session, book_client, book_content_client, identity_client)


@pytest.fixture
def test_client(db_session, book_client, book_content_client, identity_client):
    """Create a test client with database and downstream services replaced."""
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_book_client] = lambda: book_client
    app.dependency_overrides[get_book_content_client] = lambda: book_content_client
    app.dependency_overrides[get_identity_client] = lambda: identity_client
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def unique_email():
    return f"author-{uuid.uuid4().hex[:8]}@example.com"


@pytest.fixture
def sample_author_model(db_session):
    """Persist an unapproved author whose password is 'secret123'."""
    author = Author(
        email=f"author-{uuid.uuid4().hex[:8]}@example.com",
        authorname="Test Author",
        password=hash_password("secret123"),
        is_authorised=False,
    )
    db_session.add(author)
    db_session.commit()
    db_session.refresh(author)
    return author


@pytest.fixture
def authorised_author_model(db_session, sample_author_model):
    sample_author_model.is_authorised = True
    db_session.commit()
    db_session.refresh(sample_author_model)
    return sample_author_model


@pytest.fixture
def headers_with_correlation():
    """HTTP headers with correlation ID."""
    return {"X-Request-ID": str(uuid.uuid4())}
