from __future__ import annotations
import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import ForeignKey, Integer, String, DateTime, Index, text
from library_api.models.base import Base, SoftDeleteMixin
from library_api.models.author import Author

#Book
class Book(SoftDeleteMixin, Base):
    __tablename__: str = "books"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    isbn: Mapped[str] = mapped_column(String(100), nullable=False)
    published_date: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("authors.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )

    author: Mapped[Author] = relationship(back_populates="books")

    __table_args__: tuple[Index, ...] = (
        # isbn is unique among active books only
        Index(
            "uq_books_isbn_active",
            "isbn",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )
