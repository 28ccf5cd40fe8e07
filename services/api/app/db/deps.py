from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends, HTTPException
from services.api.app.db.database import db_session
from services.api.app.services.catalog_base import CatalogProvider
from services.api.app.services.catalog_factory import get_catalog_provider
from sqlalchemy.orm import Session


def get_db() -> Generator[Session, None, None]:
    db = db_session()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_catalog(db: Session = Depends(get_db)) -> CatalogProvider:
    try:
        return get_catalog_provider(db)
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
