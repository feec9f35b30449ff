from typing import Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


# Success envelope carrying an entity or a list of entities
class Envelope(BaseModel, Generic[T]):
    error: bool = False
    data: T


# Success envelope for operations that only report a message (deletes)
class MessageEnvelope(BaseModel):
    error: bool = False
    message: str


class ErrorEnvelope(BaseModel):
    """Uniform error body: {"error": true, "message": "..."}."""
    error: bool = True
    message: str
