from __future__ import annotations
from typing import TYPE_CHECKING
from sqlalchemy import Integer, String, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from library_api.models.base import Base, SoftDeleteMixin

if TYPE_CHECKING:
    from library_api.models.book import Book

#Author
class Author(SoftDeleteMixin, Base):
    __tablename__: str = "authors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False)

    # the FK cascades in the database; passive_deletes leaves it to the database
    books: Mapped[list[Book]] = relationship(
        back_populates="author",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__: tuple[Index, ...] = (
        # email is unique among active authors only
        Index(
            "uq_authors_email_active",
            "email",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )
