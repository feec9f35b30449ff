from __future__ import annotations

from sqlalchemy.orm import Session, joinedload
from sqlalchemy import select, Select

from library_api.models.book import Book


def _active_books() -> Select[tuple[Book]]:
    return (
        select(Book)
        .options(joinedload(Book.author))
        .where(Book.deleted_at.is_(None))
    )


class BookRepository:
    @staticmethod
    # List active books with their author
    def list(db: Session) -> list[Book]:
        stmt = _active_books().order_by(Book.id.asc())
        return list(db.scalars(stmt).all())

    @staticmethod
    # Get an active book by ID
    def get(db: Session, book_id: int) -> Book | None:
        stmt = _active_books().where(Book.id == book_id)
        return db.scalars(stmt).first()

    @staticmethod
    # Get a book by ID, soft-deleted ones included
    def get_any(db: Session, book_id: int) -> Book | None:
        return db.get(Book, book_id)

    @staticmethod
    # Get the active book holding an ISBN
    def get_by_isbn(db: Session, isbn: str) -> Book | None:
        stmt = select(Book).where(Book.isbn == isbn, Book.deleted_at.is_(None))
        return db.scalars(stmt).first()

    @staticmethod
    # Active books whose title contains the given text
    def search_by_title(db: Session, title: str) -> list[Book]:
        stmt = _active_books().where(Book.title.contains(title, autoescape=True)).order_by(Book.id.asc())
        return list(db.scalars(stmt).all())

    @staticmethod
    # Stage a new book (the service commits)
    def add(db: Session, book: Book) -> Book:
        db.add(book)
        return book

    @staticmethod
    # Stage a permanent delete
    def delete(db: Session, book: Book) -> None:
        db.delete(book)
