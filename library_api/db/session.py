from collections.abc import Generator
from typing import Any
from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session

from library_api.core.errors import BadRequestError, ConflictError, StorageError, is_foreign_key_violation
from library_api.core.logging import get_logger
from library_api.models.base import Base

logger = get_logger(__name__)


class DatabaseUnavailableError(RuntimeError):
    """Raised at startup when the database cannot be reached."""


class Database:
    """
    Owns the engine and the session factory.
    Built once at startup and shared by every request through `get_db`.
    """

    def __init__(self, url: str, echo: bool = False):
        connect_args: dict[str, Any] = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False

        self.engine: Engine = create_engine(
            url, pool_pre_ping=True, future=True, echo=echo, connect_args=connect_args
        )
        self.session_factory: sessionmaker[Session] = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False, future=True
        )

        # SQLite ignores foreign keys (and so ON DELETE CASCADE) unless asked
        if self.engine.url.get_backend_name() == "sqlite":
            @event.listens_for(self.engine, "connect")
            def _set_sqlite_pragma(dbapi_connection: Any, connection_record: Any) -> None:
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

    def verify(self) -> None:
        """Ping the database; an unusable handle must stop startup."""
        try:
            with self.engine.connect() as conn:
                _ = conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise DatabaseUnavailableError(
                f"Cannot connect to database at {self.engine.url.render_as_string(hide_password=True)}"
            ) from exc

    def create_tables(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Yield a session from the application's Database component.
    """
    database: Database = request.app.state.database
    db = database.session_factory()
    try:
        yield db
    finally:
        db.close()


def commit(db: Session, *, action: str, conflict_message: str) -> None:
    """
    Commit the unit of work.
    Unique violations become ConflictError, a vanished author reference
    becomes BadRequestError, anything else is a StorageError.
    """
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if is_foreign_key_violation(exc):
            raise BadRequestError("Author not found") from exc
        logger.warning("Constraint rejected %s: %s", action, exc.orig)
        raise ConflictError(conflict_message) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageError(f"Failed to {action}") from exc
