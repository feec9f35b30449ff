"""Authors and books with soft delete."""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

revision = "0001_authors_and_books"
down_revision = None
branch_labels = None
depends_on = None

_ACTIVE = sa.text("deleted_at IS NULL")


def upgrade() -> None:
    op.create_table(
        "authors",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=100), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_authors_deleted_at", "authors", ["deleted_at"])
    op.create_index(
        "uq_authors_email_active",
        "authors",
        ["email"],
        unique=True,
        postgresql_where=_ACTIVE,
        sqlite_where=_ACTIVE,
    )

    op.create_table(
        "books",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("isbn", sa.String(length=100), nullable=False),
        sa.Column("published_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "author_id",
            sa.Integer(),
            sa.ForeignKey("authors.id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        ),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_books_author_id", "books", ["author_id"])
    op.create_index("ix_books_deleted_at", "books", ["deleted_at"])
    op.create_index(
        "uq_books_isbn_active",
        "books",
        ["isbn"],
        unique=True,
        postgresql_where=_ACTIVE,
        sqlite_where=_ACTIVE,
    )


def downgrade() -> None:
    op.drop_index("uq_books_isbn_active", table_name="books")
    op.drop_index("ix_books_deleted_at", table_name="books")
    op.drop_index("ix_books_author_id", table_name="books")
    op.drop_table("books")
    op.drop_index("uq_authors_email_active", table_name="authors")
    op.drop_index("ix_authors_deleted_at", table_name="authors")
    op.drop_table("authors")
