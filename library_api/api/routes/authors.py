from fastapi import APIRouter, BackgroundTasks, Depends, Path
from sqlalchemy.orm import Session
from library_api.db.session import get_db
from library_api.notifications.email import EmailNotifier, get_notifier
from library_api.services.author_service import AuthorEmailChanged, AuthorService
from library_api.schemas.author import AuthorCreate, AuthorRead, AuthorUpdate
from library_api.schemas.common import Envelope, MessageEnvelope
from library_api.utils.validators import parse_id
from typing import Annotated
from starlette.status import HTTP_201_CREATED

router = APIRouter(prefix="/author", tags=["authors"])

AuthorId = Annotated[str, Path(description="Author ID")]


@router.get("", response_model=Envelope[list[AuthorRead]])
def list_authors(
    db: Annotated[Session, Depends(get_db)],
):
    authors = AuthorService.list_authors(db)
    return Envelope[list[AuthorRead]](data=[AuthorRead.model_validate(a) for a in authors])


@router.get("/{author_id}", response_model=Envelope[AuthorRead])
def get_author(
    author_id: AuthorId,
    db: Annotated[Session, Depends(get_db)],
):
    author = AuthorService.get_author(db, parse_id(author_id, "Author"))
    return Envelope[AuthorRead](data=AuthorRead.model_validate(author))


@router.post("", response_model=Envelope[AuthorRead], status_code=HTTP_201_CREATED)
def create_author(
    data: AuthorCreate,
    db: Annotated[Session, Depends(get_db)],
):
    author = AuthorService.create_author(db, data)
    return Envelope[AuthorRead](data=AuthorRead.model_validate(author))


@router.put("/{author_id}", response_model=Envelope[AuthorRead])
def update_author(
    author_id: AuthorId,
    data: AuthorUpdate,
    background_tasks: BackgroundTasks,
    db: Annotated[Session, Depends(get_db)],
    notifier: Annotated[EmailNotifier, Depends(get_notifier)],
):
    # the notice goes out after the response, outside the update's outcome
    def on_email_change(event: AuthorEmailChanged) -> None:
        background_tasks.add_task(notifier.send_author_updated, event)

    author = AuthorService.update_author(
        db, parse_id(author_id, "Author"), data, on_email_change=on_email_change
    )
    return Envelope[AuthorRead](data=AuthorRead.model_validate(author))


@router.delete("/softdelete/{author_id}", response_model=MessageEnvelope)
def soft_delete_author(
    author_id: AuthorId,
    db: Annotated[Session, Depends(get_db)],
):
    AuthorService.soft_delete_author(db, parse_id(author_id, "Author"))
    return MessageEnvelope(message="Author soft deleted successfully")


@router.delete("/{author_id}", response_model=MessageEnvelope)
def delete_author(
    author_id: AuthorId,
    db: Annotated[Session, Depends(get_db)],
):
    AuthorService.delete_author(db, parse_id(author_id, "Author"))
    return MessageEnvelope(message="Author deleted successfully")
