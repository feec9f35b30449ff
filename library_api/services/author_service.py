from collections.abc import Callable
from dataclasses import dataclass
from sqlalchemy.orm import Session

from library_api.core.errors import ConflictError, NotFoundError
from library_api.core.logging import get_logger
from library_api.db.session import commit
from library_api.models.author import Author
from library_api.repos.author_repo import AuthorRepository
from library_api.schemas.author import AuthorCreate, AuthorUpdate

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthorEmailChanged:
    """Raised as an event once an author's new email has been stored."""
    author_id: int
    name: str
    old_email: str
    new_email: str


EmailChangeCallback = Callable[[AuthorEmailChanged], None]


class AuthorService:
    @staticmethod
    # List authors
    def list_authors(db: Session) -> list[Author]:
        return AuthorRepository.list(db)

    @staticmethod
    # Get one active author
    def get_author(db: Session, author_id: int) -> Author:
        author = AuthorRepository.get(db, author_id)
        if author is None:
            raise NotFoundError("Author not found")
        return author

    @staticmethod
    # Create author
    def create_author(db: Session, data: AuthorCreate) -> Author:
        if AuthorRepository.get_by_email(db, data.email) is not None:
            raise ConflictError("Email already exists")

        # the primary key spans soft-deleted rows too
        if data.id is not None and AuthorRepository.get_any(db, data.id) is not None:
            raise ConflictError("ID already exists")

        author = Author(name=data.name, email=data.email)
        if data.id is not None:
            author.id = data.id
        AuthorRepository.add(db, author)
        commit(db, action="create author", conflict_message="Resource already exists")
        db.refresh(author)

        logger.info("Created author %s", author.id)
        return author

    @staticmethod
    # Update author; on_email_change fires only after the commit succeeded
    def update_author(
        db: Session,
        author_id: int,
        data: AuthorUpdate,
        on_email_change: EmailChangeCallback | None = None,
    ) -> Author:
        author = AuthorService.get_author(db, author_id)

        if AuthorRepository.get_by_email(db, data.email, exclude_id=author.id) is not None:
            raise ConflictError("Email already exists")

        old_email = author.email
        author.name = data.name
        author.email = data.email
        commit(db, action="update author", conflict_message="Email already exists")
        db.refresh(author)

        logger.info("Updated author %s", author.id)
        if old_email != author.email and on_email_change is not None:
            on_email_change(
                AuthorEmailChanged(
                    author_id=author.id,
                    name=author.name,
                    old_email=old_email,
                    new_email=author.email,
                )
            )
        return author

    @staticmethod
    # Permanently delete author (and its books)
    def delete_author(db: Session, author_id: int) -> None:
        author = AuthorRepository.get_any(db, author_id)
        if author is None:
            raise NotFoundError("Author not found")

        AuthorRepository.delete(db, author)
        commit(db, action="delete author", conflict_message="Author is still referenced")
        logger.info("Deleted author %s", author_id)

    @staticmethod
    # Soft delete author
    def soft_delete_author(db: Session, author_id: int) -> None:
        author = AuthorService.get_author(db, author_id)
        author.mark_deleted()
        commit(db, action="soft delete author", conflict_message="Author is still referenced")
        logger.info("Soft deleted author %s", author_id)
