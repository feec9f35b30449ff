from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import ClassVar
from datetime import datetime

from library_api.schemas.author import AuthorRead
from library_api.utils.validators import MAX_ID

# Year one, midnight: what an unset timestamp decodes to
_ZERO_DATE = datetime.min


# Flat request shape shared by create and update: the author is a raw id
class BookWrite(BaseModel):
    title: str = Field(default="", validate_default=True)
    isbn: str = Field(default="", validate_default=True)
    published_date: datetime | None = Field(
        default=None, alias="publishedDate", validate_default=True
    )
    author_id: int | None = Field(default=None, alias="authorID", le=MAX_ID)

    model_config: ClassVar[ConfigDict] = ConfigDict(populate_by_name=True)

    @field_validator("title", mode="before")
    @classmethod
    def title_required(cls, v: object) -> str:
        if v is None or not str(v).strip():
            raise ValueError("Title is required")
        return str(v).strip()

    @field_validator("isbn", mode="before")
    @classmethod
    def isbn_required(cls, v: object) -> str:
        if v is None or not str(v).strip():
            raise ValueError("ISBN is required")
        return str(v).strip()

    @field_validator("published_date")
    @classmethod
    def published_date_required(cls, v: datetime | None) -> datetime:
        if v is None or v.replace(tzinfo=None) == _ZERO_DATE:
            raise ValueError("Published date is required")
        return v

# Book create schema
class BookCreate(BookWrite):
    id: int | None = Field(default=None, ge=1, le=MAX_ID)

# Book update schema
class BookUpdate(BookWrite):
    pass

# Book read schema; the author is null once it has been soft deleted
class BookRead(BaseModel):
    id: int
    title: str
    isbn: str
    published_date: datetime = Field(alias="publishedDate")
    author_id: int = Field(alias="authorID")
    author: AuthorRead | None = None

    model_config: ClassVar[ConfigDict] = ConfigDict(from_attributes=True, populate_by_name=True)

    @field_validator("author", mode="before")
    @classmethod
    def hide_soft_deleted_author(cls, v: object) -> object:
        if getattr(v, "deleted_at", None) is not None:
            return None
        return v
