from __future__ import annotations

import os

from services.api.app.services.catalog_base import CatalogProvider
from services.api.app.services.catalog_static import StaticCatalog
from sqlalchemy.orm import Session


def get_catalog_provider(db: Session | None = None) -> CatalogProvider:
    """Select the catalog source based on env vars.

    Defaults to the static catalog so tests and local dev work without seeding the
    database. Set SWEETLY_CATALOG_PROVIDER=db to read the catalog tables.
    """

    mode = os.getenv("SWEETLY_CATALOG_PROVIDER", "static").strip().lower()

    if mode == "static":
        return StaticCatalog()

    if mode in ("db", "database"):
        if db is None:
            raise ValueError("SWEETLY_CATALOG_PROVIDER=db requires a database session")

        from services.api.app.services.catalog_db import DatabaseCatalog

        return DatabaseCatalog(db)

    raise ValueError(f"Unknown SWEETLY_CATALOG_PROVIDER={mode!r}. Expected static or db.")
