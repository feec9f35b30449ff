from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import ClassVar

from library_api.utils.validators import MAX_ID, is_valid_email

# Author base schema
class AuthorBase(BaseModel):
    name: str = Field(default="", validate_default=True)
    email: str = Field(default="", validate_default=True)

    @field_validator("name", mode="before")
    @classmethod
    def name_required(cls, v: object) -> str:
        if v is None or not str(v).strip():
            raise ValueError("Name is required")
        return str(v).strip()

    @field_validator("email", mode="before")
    @classmethod
    def email_required_and_valid(cls, v: object) -> str:
        if v is None or not str(v).strip():
            raise ValueError("Email is required")
        email = str(v).strip()
        if not is_valid_email(email):
            raise ValueError("Invalid email format")
        return email

# Author create schema; a caller may pick the id
class AuthorCreate(AuthorBase):
    id: int | None = Field(default=None, ge=1, le=MAX_ID)

# Author update schema (full replacement of name and email)
class AuthorUpdate(AuthorBase):
    pass

# Author read schema
class AuthorRead(BaseModel):
    id: int
    name: str
    email: str

    model_config: ClassVar[ConfigDict] = ConfigDict(from_attributes=True)
