from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session
from library_api.db.session import get_db
from library_api.services.book_service import BookService
from library_api.schemas.book import BookCreate, BookRead, BookUpdate
from library_api.schemas.common import Envelope, MessageEnvelope
from library_api.utils.validators import parse_id
from typing import Annotated
from starlette.status import HTTP_201_CREATED

router = APIRouter(prefix="/book", tags=["books"])

BookId = Annotated[str, Path(description="Book ID")]


@router.get("", response_model=Envelope[list[BookRead]])
def list_books(
    db: Annotated[Session, Depends(get_db)],
):
    books = BookService.list_books(db)
    return Envelope[list[BookRead]](data=[BookRead.model_validate(b) for b in books])


# /search/ redirects here; with no title there is nothing to look for
@router.get("/search", response_model=Envelope[list[BookRead]], include_in_schema=False)
def search_books_without_title(
    db: Annotated[Session, Depends(get_db)],
):
    books = BookService.search_books(db, "")
    return Envelope[list[BookRead]](data=[BookRead.model_validate(b) for b in books])


@router.get("/search/{title}", response_model=Envelope[list[BookRead]])
def search_books(
    title: Annotated[str, Path(description="Part of the title to look for")],
    db: Annotated[Session, Depends(get_db)],
):
    books = BookService.search_books(db, title)
    return Envelope[list[BookRead]](data=[BookRead.model_validate(b) for b in books])


@router.get("/{book_id}", response_model=Envelope[BookRead])
def get_book(
    book_id: BookId,
    db: Annotated[Session, Depends(get_db)],
):
    book = BookService.get_book(db, parse_id(book_id, "Book"))
    return Envelope[BookRead](data=BookRead.model_validate(book))


@router.post("", response_model=Envelope[BookRead], status_code=HTTP_201_CREATED)
def create_book(
    data: BookCreate,
    db: Annotated[Session, Depends(get_db)],
):
    book = BookService.create_book(db, data)
    return Envelope[BookRead](data=BookRead.model_validate(book))


@router.put("/{book_id}", response_model=Envelope[BookRead])
def update_book(
    book_id: BookId,
    data: BookUpdate,
    db: Annotated[Session, Depends(get_db)],
):
    book = BookService.update_book(db, parse_id(book_id, "Book"), data)
    return Envelope[BookRead](data=BookRead.model_validate(book))


@router.delete("/softdelete/{book_id}", response_model=MessageEnvelope)
def soft_delete_book(
    book_id: BookId,
    db: Annotated[Session, Depends(get_db)],
):
    BookService.soft_delete_book(db, parse_id(book_id, "Book"))
    return MessageEnvelope(message="Book soft deleted successfully")


@router.delete("/{book_id}", response_model=MessageEnvelope)
def delete_book(
    book_id: BookId,
    db: Annotated[Session, Depends(get_db)],
):
    BookService.delete_book(db, parse_id(book_id, "Book"))
    return MessageEnvelope(message="Book deleted successfully")
