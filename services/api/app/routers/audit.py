from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from packages.shared.schemas.events import EventV1
from services.api.app.db.deps import get_db
from services.api.app.services import drafts
from services.api.app.services.draft_base import DraftNotFoundError
from sqlalchemy.orm import Session

router = APIRouter()


@router.get("/v1/forms/{draft_id}/events", response_model=list[EventV1])
def list_form_events(draft_id: str, db: Session = Depends(get_db)) -> list[EventV1]:
    try:
        return drafts.list_events(db, draft_id)
    except DraftNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
