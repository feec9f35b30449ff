from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from library_api.models.author import Author


class AuthorRepository:

    @staticmethod
    # List active authors
    def list(db: Session) -> list[Author]:
        stmt = select(Author).where(Author.deleted_at.is_(None)).order_by(Author.id.asc())
        return list(db.scalars(stmt).all())

    @staticmethod
    # Get an active author by ID
    def get(db: Session, author_id: int) -> Author | None:
        stmt = select(Author).where(Author.id == author_id, Author.deleted_at.is_(None))
        return db.scalars(stmt).first()

    @staticmethod
    # Get an author by ID, soft-deleted ones included
    def get_any(db: Session, author_id: int) -> Author | None:
        return db.get(Author, author_id)

    @staticmethod
    # Get the active author holding an email, optionally skipping one id
    def get_by_email(db: Session, email: str, exclude_id: int | None = None) -> Author | None:
        stmt = select(Author).where(Author.email == email, Author.deleted_at.is_(None))
        if exclude_id is not None:
            stmt = stmt.where(Author.id != exclude_id)
        return db.scalars(stmt).first()

    @staticmethod
    # Stage a new author (the service commits)
    def add(db: Session, author: Author) -> Author:
        db.add(author)
        return author

    @staticmethod
    # Stage a permanent delete; books go with it through the FK cascade
    def delete(db: Session, author: Author) -> None:
        db.delete(author)
