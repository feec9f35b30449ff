import pytest
import uuid
from datetime import datetime, timezone
from fastapi.testclient import TestClient

from library_api.core.config import Settings
from library_api.main import create_app


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'library_test.db'}",
        AUTO_CREATE_TABLES=True,
        SMTP_HOST=None,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def app(test_settings):
    return create_app(test_settings)


@pytest.fixture
def test_client(app):
    """Create a test client; entering it runs the lifespan (DB setup)."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def db_session(test_client, app):
    """Session bound to the same database the test client uses."""
    session = app.state.database.session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def published_date():
    return datetime(2023, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def sample_author(test_client):
    """Create a sample author through the API."""
    unique_suffix = str(uuid.uuid4())[:8]

    author_data = {
        "name": f"Test Author {unique_suffix}",
        "email": f"test-{unique_suffix}@author.com",
    }

    response = test_client.post("/api/author", json=author_data)

    assert response.status_code == 201, f"Failed to create sample author: {response.text}"
    return response.json()["data"]


@pytest.fixture
def sample_book(test_client, sample_author):
    """Create a sample book through the API."""
    unique_suffix = str(uuid.uuid4())[:8]

    book_data = {
        "title": f"Test Book {unique_suffix}",
        "isbn": f"ISBN-{unique_suffix}",
        "publishedDate": "2023-01-01T00:00:00Z",
        "authorID": sample_author["id"],
    }

    response = test_client.post("/api/book", json=book_data)

    assert response.status_code == 201, f"Failed to create sample book: {response.text}"
    return response.json()["data"]


# Fixtures for service/repository tests that need SQLAlchemy model objects
@pytest.fixture
def sample_author_model(db_session):
    from library_api.models.author import Author

    unique_suffix = str(uuid.uuid4())[:8]
    author = Author(
        name=f"Test Author {unique_suffix}",
        email=f"test-{unique_suffix}@author.com",
    )
    db_session.add(author)
    db_session.commit()
    db_session.refresh(author)
    return author


@pytest.fixture
def sample_book_model(db_session, sample_author_model, published_date):
    from library_api.models.book import Book

    unique_suffix = str(uuid.uuid4())[:8]
    book = Book(
        title=f"Test Book {unique_suffix}",
        isbn=f"ISBN-{unique_suffix}",
        published_date=published_date,
        author_id=sample_author_model.id,
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def headers_with_correlation():
    """HTTP headers with correlation ID."""
    return {"X-Request-ID": str(uuid.uuid4())}
