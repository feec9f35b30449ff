from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session
from typing import Annotated
from library_api.db.session import get_db

router = APIRouter(tags=["health"])


@router.get("/health")
def health(db: Annotated[Session, Depends(get_db)]):
    """Liveness check that also round-trips the database."""
    _ = db.execute(text("SELECT 1"))
    return {"status": "ok"}
