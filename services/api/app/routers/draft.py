from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from packages.shared.schemas.form_v1 import DraftV1, PriceBreakdownV1, SubmitResultV1
from services.api.app.db.deps import get_catalog, get_db
from services.api.app.models.draft import DraftCreateRequest, DraftUpdateRequest
from services.api.app.services import drafts
from services.api.app.services.catalog_base import CatalogProvider
from services.api.app.services.draft_base import (
    DraftNotFoundError,
    DraftServiceError,
    DraftValidationError,
    OrderNumberConflictError,
)
from services.api.app.services.pricing import quote
from sqlalchemy.orm import Session

router = APIRouter()


def _raise_draft_http_error(e: DraftServiceError) -> None:
    if isinstance(e, DraftNotFoundError):
        raise HTTPException(status_code=404, detail=str(e)) from e

    if isinstance(e, DraftValidationError):
        raise HTTPException(status_code=400, detail=str(e)) from e

    if isinstance(e, OrderNumberConflictError):
        raise HTTPException(status_code=409, detail=str(e)) from e

    raise HTTPException(status_code=500, detail="Internal Server Error") from e


@router.get("/v1/forms", response_model=list[DraftV1])
def list_forms(db: Session = Depends(get_db)) -> list[DraftV1]:
    return drafts.list_drafts(db)


@router.post("/v1/forms", response_model=DraftV1, status_code=201)
def create_form(payload: DraftCreateRequest, db: Session = Depends(get_db)) -> DraftV1:
    try:
        return drafts.create_draft(db, payload.form_data, payload.current_step)
    except DraftServiceError as e:
        _raise_draft_http_error(e)


@router.get("/v1/forms/{draft_id}", response_model=DraftV1)
def get_form(draft_id: str, db: Session = Depends(get_db)) -> DraftV1:
    try:
        return drafts.get_draft(db, draft_id)
    except DraftServiceError as e:
        _raise_draft_http_error(e)


@router.put("/v1/forms/{draft_id}", response_model=DraftV1)
def update_form(
    draft_id: str, payload: DraftUpdateRequest, db: Session = Depends(get_db)
) -> DraftV1:
    order_number = None
    if "order_number" in payload.model_fields_set:
        order_number = payload.order_number or ""

    try:
        return drafts.update_draft(
            db,
            draft_id,
            form_data=payload.form_data,
            current_step=payload.current_step,
            order_number=order_number,
        )
    except DraftServiceError as e:
        _raise_draft_http_error(e)


@router.delete("/v1/forms/{draft_id}", status_code=204)
def delete_form(draft_id: str, db: Session = Depends(get_db)) -> Response:
    try:
        drafts.delete_draft(db, draft_id)
    except DraftServiceError as e:
        _raise_draft_http_error(e)
    return Response(status_code=204)


@router.post("/v1/forms/{draft_id}/submit", response_model=SubmitResultV1)
def submit_form(draft_id: str, db: Session = Depends(get_db)) -> SubmitResultV1:
    try:
        return drafts.submit_draft(db, draft_id)
    except DraftServiceError as e:
        _raise_draft_http_error(e)


@router.get("/v1/forms/{draft_id}/quote", response_model=PriceBreakdownV1)
def quote_form(
    draft_id: str,
    db: Session = Depends(get_db),
    catalog: CatalogProvider = Depends(get_catalog),
) -> PriceBreakdownV1:
    try:
        form = drafts.load_form(db, draft_id)
    except DraftServiceError as e:
        _raise_draft_http_error(e)

    breakdown = quote(form, catalog)
    return PriceBreakdownV1(
        package_type=breakdown.package_type,
        package_price=breakdown.package_price,
        additional_designs_price=breakdown.additional_designs_price,
        total=breakdown.total,
        deposit=breakdown.deposit,
        remaining=breakdown.remaining,
    )
