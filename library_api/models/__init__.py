from .base import Base
from .author import Author
from .book import Book

__all__ = ["Base", "Author", "Book"]
