"""Sweetly Dipped order form API entrypoint."""

from fastapi import FastAPI

from services.api.app.db.init_db import init_db
from services.api.app.routers.audit import router as audit_router
from services.api.app.routers.config import router as config_router
from services.api.app.routers.draft import router as draft_router

app = FastAPI(title="Sweetly Dipped API")

app.include_router(draft_router)
app.include_router(audit_router)
app.include_router(config_router)


@app.on_event("startup")
def _startup() -> None:
    init_db()


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
