from __future__ import annotations

import pytest
from unittest.mock import Mock
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_405_METHOD_NOT_ALLOWED,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from library_api.core.errors import (
    BadRequestError,
    ConflictError,
    LibraryError,
    NotFoundError,
    StorageError,
    _first_validation_message,
    is_foreign_key_violation,
    register_exception_handlers,
)
from library_api.schemas.common import ErrorEnvelope


class TestErrorTaxonomy:
    """Test the error classes carry the right status."""

    @pytest.mark.parametrize(
        "error_cls, status_code",
        [
            (BadRequestError, HTTP_400_BAD_REQUEST),
            (NotFoundError, HTTP_404_NOT_FOUND),
            (ConflictError, HTTP_409_CONFLICT),
            (StorageError, HTTP_500_INTERNAL_SERVER_ERROR),
        ],
    )
    def test_status_codes(self, error_cls, status_code):
        error = error_cls("boom")

        assert isinstance(error, LibraryError)
        assert error.status_code == status_code
        assert error.message == "boom"

    def test_error_envelope_shape(self):
        assert ErrorEnvelope(message="nope").model_dump() == {"error": True, "message": "nope"}


class TestErrorHelpers:
    """Test error helper functions."""

    def test_first_validation_message_strips_value_error_prefix(self):
        errors = [{"type": "value_error", "loc": ("body", "name"), "msg": "Value error, Name is required"}]

        assert _first_validation_message(errors) == "Name is required"

    def test_first_validation_message_json_invalid(self):
        errors = [{"type": "json_invalid", "loc": ("body", 1), "msg": "JSON decode error"}]

        assert _first_validation_message(errors) == "Cannot parse JSON"

    def test_first_validation_message_prefixes_location(self):
        errors = [{"type": "int_parsing", "loc": ("body", "authorID"), "msg": "Input should be a valid integer"}]

        assert _first_validation_message(errors) == "authorID: Input should be a valid integer"

    def test_first_validation_message_empty(self):
        assert _first_validation_message([]) == "Invalid request"

    def test_foreign_key_detection(self):
        fk = IntegrityError("INSERT", {}, Exception("FOREIGN KEY constraint failed"))
        unique = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: authors.email"))

        assert is_foreign_key_violation(fk)
        assert not is_foreign_key_violation(unique)


@pytest.fixture
def error_app():
    """A bare app with the handlers and routes that raise on demand."""
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/not-found")
    def not_found():
        raise NotFoundError("Author not found")

    @app.get("/integrity/{kind}")
    def integrity(kind: str):
        message = "FOREIGN KEY constraint failed" if kind == "fk" else "UNIQUE constraint failed"
        raise IntegrityError("INSERT", {}, Exception(message))

    @app.get("/storage")
    def storage():
        raise OperationalError("SELECT 1", {}, Exception("database is gone"))

    @app.get("/crash")
    def crash():
        raise RuntimeError("unexpected")

    @app.get("/typed/{item_id}")
    def typed(item_id: int):
        return {"item_id": item_id}

    return app


class TestRegisteredHandlers:
    """Test that each failure renders the uniform envelope."""

    def test_library_error(self, error_app):
        response = TestClient(error_app).get("/not-found")

        assert response.status_code == HTTP_404_NOT_FOUND
        assert response.json() == {"error": True, "message": "Author not found"}

    def test_unknown_route(self, error_app):
        response = TestClient(error_app).get("/missing")

        assert response.status_code == HTTP_404_NOT_FOUND
        assert response.json() == {"error": True, "message": "Not Found"}

    def test_method_not_allowed(self, error_app):
        response = TestClient(error_app).post("/not-found")

        assert response.status_code == HTTP_405_METHOD_NOT_ALLOWED
        assert response.json()["error"] is True

    def test_request_validation_is_bad_request(self, error_app):
        response = TestClient(error_app).get("/typed/abc")

        assert response.status_code == HTTP_400_BAD_REQUEST
        assert response.json()["message"].startswith("item_id:")

    def test_unique_violation_is_conflict(self, error_app):
        response = TestClient(error_app).get("/integrity/unique")

        assert response.status_code == HTTP_409_CONFLICT
        assert response.json() == {"error": True, "message": "Resource already exists"}

    def test_foreign_key_violation_is_bad_request(self, error_app):
        response = TestClient(error_app).get("/integrity/fk")

        assert response.status_code == HTTP_400_BAD_REQUEST

    def test_storage_failure_is_generic_500(self, error_app):
        response = TestClient(error_app).get("/storage")

        assert response.status_code == HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"error": True, "message": "Database error"}
        assert "gone" not in response.text

    def test_unhandled_exception(self, error_app):
        client = TestClient(error_app, raise_server_exceptions=False)

        response = client.get("/crash")

        assert response.status_code == HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"error": True, "message": "Internal Server Error"}


class TestCommitHelper:
    """Test how commit failures are translated."""

    def test_unique_violation_becomes_conflict(self):
        from library_api.db.session import commit

        db = Mock()
        db.commit.side_effect = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

        with pytest.raises(ConflictError, match="Email already exists"):
            commit(db, action="create author", conflict_message="Email already exists")
        db.rollback.assert_called_once()

    def test_foreign_key_violation_becomes_bad_request(self):
        from library_api.db.session import commit

        db = Mock()
        db.commit.side_effect = IntegrityError("INSERT", {}, Exception("FOREIGN KEY constraint failed"))

        with pytest.raises(BadRequestError, match="Author not found"):
            commit(db, action="create book", conflict_message="ISBN already exists")

    def test_other_failure_becomes_storage_error(self):
        from library_api.db.session import commit

        db = Mock()
        db.commit.side_effect = OperationalError("COMMIT", {}, Exception("disk I/O error"))

        with pytest.raises(StorageError, match="Failed to update book"):
            commit(db, action="update book", conflict_message="ISBN already exists")
        db.rollback.assert_called_once()
