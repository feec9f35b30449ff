from __future__ import annotations
from sqlalchemy.orm import Session

from library_api.core.errors import BadRequestError, ConflictError, NotFoundError
from library_api.core.logging import get_logger
from library_api.db.session import commit
from library_api.models.author import Author
from library_api.models.book import Book
from library_api.repos.author_repo import AuthorRepository
from library_api.repos.book_repo import BookRepository
from library_api.schemas.book import BookCreate, BookUpdate

logger = get_logger(__name__)


def _resolve_author(db: Session, author_id: int | None) -> Author:
    # a dangling reference is the caller's mistake, hence 400 rather than 404
    author = AuthorRepository.get(db, author_id) if author_id is not None else None
    if author is None:
        raise BadRequestError("Author not found")
    return author


class BookService:
    @staticmethod
    # List books
    def list_books(db: Session) -> list[Book]:
        return BookRepository.list(db)

    @staticmethod
    # Get one active book
    def get_book(db: Session, book_id: int) -> Book:
        book = BookRepository.get(db, book_id)
        if book is None:
            raise NotFoundError("Book not found")
        return book

    @staticmethod
    # Create book
    def create_book(db: Session, data: BookCreate) -> Book:
        if BookRepository.get_by_isbn(db, data.isbn) is not None:
            raise ConflictError("ISBN already exists")

        author = _resolve_author(db, data.author_id)

        if data.id is not None and BookRepository.get_any(db, data.id) is not None:
            raise ConflictError("ID already exists")

        book = Book(
            title=data.title,
            isbn=data.isbn,
            published_date=data.published_date,
            author=author,
        )
        if data.id is not None:
            book.id = data.id
        BookRepository.add(db, book)
        commit(db, action="create book", conflict_message="Resource already exists")

        logger.info("Created book %s for author %s", book.id, author.id)
        return BookService.get_book(db, book.id)

    @staticmethod
    # Update book
    def update_book(db: Session, book_id: int, data: BookUpdate) -> Book:
        book = BookService.get_book(db, book_id)

        if data.isbn != book.isbn and BookRepository.get_by_isbn(db, data.isbn) is not None:
            raise ConflictError("ISBN already exists")

        # re-checked even when the reference did not change
        author = _resolve_author(db, data.author_id)

        book.title = data.title
        book.isbn = data.isbn
        book.published_date = data.published_date
        book.author = author
        commit(db, action="update book", conflict_message="ISBN already exists")

        logger.info("Updated book %s", book_id)
        return BookService.get_book(db, book_id)

    @staticmethod
    # Permanently delete book
    def delete_book(db: Session, book_id: int) -> None:
        book = BookRepository.get_any(db, book_id)
        if book is None:
            raise NotFoundError("Book not found")

        BookRepository.delete(db, book)
        commit(db, action="delete book", conflict_message="Book is still referenced")
        logger.info("Deleted book %s", book_id)

    @staticmethod
    # Soft delete book
    def soft_delete_book(db: Session, book_id: int) -> None:
        book = BookService.get_book(db, book_id)
        book.mark_deleted()
        commit(db, action="soft delete book", conflict_message="Book is still referenced")
        logger.info("Soft deleted book %s", book_id)

    @staticmethod
    # Search active books by title substring; no match is an empty list
    def search_books(db: Session, title: str) -> list[Book]:
        title = title.strip()
        if not title:
            raise BadRequestError("Title is required")
        return BookRepository.search_by_title(db, title)
