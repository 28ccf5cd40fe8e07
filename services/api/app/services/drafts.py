"""Draft persistence.

Owns the canonical draft record: normalizes incoming form data, keeps the customer link
in sync with the draft's email, and performs the one-way draft -> submitted transition.
Every mutation is a single commit; on any failure the session is rolled back and the
error re-raised.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from packages.shared.schemas.events import EntityTypeV1, EventTypeV1, EventV1
from packages.shared.schemas.form_v1 import DraftV1, SubmitResultV1
from services.api.app.db.models import Customer, Draft, EventLog, Order
from services.api.app.services.draft_base import (
    DraftNotFoundError,
    DraftValidationError,
    OrderNumberConflictError,
    generate_order_number,
)
from services.api.app.services.form_data import (
    FormData,
    FormDocument,
    normalize_form_data,
)
from sqlalchemy import select
from sqlalchemy.exc import NoResultFound
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.orm.exc import ObjectDeletedError

logger = logging.getLogger(__name__)

STATUS_DRAFT = "draft"
STATUS_SUBMITTED = "submitted"
ORDER_NUMBER_ATTEMPTS = 5

RawFormData = Mapping[str, Any] | FormData


def create_draft(db: Session, form_data: RawFormData | None, current_step: int = 0) -> DraftV1:
    if form_data is None:
        raise DraftValidationError("Form data is required")

    form = normalize_form_data(form_data)
    draft = Draft(id=uuid4().hex, status=STATUS_DRAFT)

    try:
        draft.customer = _upsert_customer(db, draft, form)
        _apply_form(draft, form, current_step)
        db.add(draft)

        _log_event(
            db,
            draft_id=draft.id,
            entity_type=EntityTypeV1.DRAFT,
            entity_id=draft.id,
            event_type=EventTypeV1.DRAFT_CREATED,
            event_payload={"current_step": max(0, current_step), "has_email": bool(form.email)},
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    return get_draft(db, draft.id)


def get_draft(db: Session, draft_id: str) -> DraftV1:
    return _to_wire(_load_draft(db, draft_id))


def list_drafts(db: Session) -> list[DraftV1]:
    rows = db.scalars(
        select(Draft)
        .options(selectinload(Draft.order))
        .order_by(Draft.created_at.desc())
    )
    return [_to_wire(row) for row in rows]


def load_form(db: Session, draft_id: str) -> FormData:
    return _row_to_form(_load_draft(db, draft_id))


def update_draft(
    db: Session,
    draft_id: str,
    form_data: RawFormData | None = None,
    current_step: int | None = None,
    order_number: str | None = None,
) -> DraftV1:
    """Apply a partial update.

    ``order_number=None`` leaves any order untouched; an empty string removes it.
    """

    draft = _load_draft(db, draft_id)

    try:
        if form_data is not None:
            form = normalize_form_data(form_data)
            step = current_step
            if step is None:
                step = FormDocument.from_stored(draft.data).current_step

            draft.customer = _upsert_customer(db, draft, form)
            _apply_form(draft, form, step)
            _log_event(
                db,
                draft_id=draft.id,
                entity_type=EntityTypeV1.DRAFT,
                entity_id=draft.id,
                event_type=EventTypeV1.DRAFT_UPDATED,
                event_payload={"current_step": step},
            )
        elif current_step is not None:
            document = FormDocument.from_stored(draft.data)
            document.current_step = max(0, current_step)
            draft.data = document.to_json()
            _log_event(
                db,
                draft_id=draft.id,
                entity_type=EntityTypeV1.DRAFT,
                entity_id=draft.id,
                event_type=EventTypeV1.DRAFT_STEP_CHANGED,
                event_payload={"current_step": document.current_step},
            )

        if order_number is not None:
            _set_order_number(db, draft, order_number.strip())

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.expire_all()
    return get_draft(db, draft_id)


def delete_draft(db: Session, draft_id: str) -> None:
    draft = _load_draft(db, draft_id)

    try:
        db.delete(draft)
        _log_event(
            db,
            draft_id=draft_id,
            entity_type=EntityTypeV1.DRAFT,
            entity_id=draft_id,
            event_type=EventTypeV1.DRAFT_DELETED,
            event_payload={},
        )
        db.commit()
    except ObjectDeletedError as e:
        db.rollback()
        raise DraftNotFoundError(draft_id) from e
    except Exception:
        db.rollback()
        raise


def submit_draft(
    db: Session,
    draft_id: str,
    *,
    now: datetime | None = None,
    generate: Callable[[datetime], str] = generate_order_number,
) -> SubmitResultV1:
    draft = _load_draft(db, draft_id)

    if draft.status != STATUS_DRAFT:
        raise DraftValidationError(f"Form already submitted (status: {draft.status})")

    if draft.customer is None:
        raise DraftValidationError("Cannot submit form without a linked customer")

    submitted_at = now or datetime.now(timezone.utc)
    order_number = _unique_order_number(db, submitted_at, generate)

    try:
        draft.status = STATUS_SUBMITTED
        draft.submitted_at = submitted_at
        if draft.order is None:
            draft.order = Order(
                id=uuid4().hex,
                customer_id=draft.customer.id,
                order_number=order_number,
                submitted_at=submitted_at,
            )
        else:
            draft.order.order_number = order_number
            draft.order.customer_id = draft.customer.id
            draft.order.submitted_at = submitted_at

        _log_event(
            db,
            draft_id=draft.id,
            entity_type=EntityTypeV1.ORDER,
            entity_id=draft.order.id,
            event_type=EventTypeV1.DRAFT_SUBMITTED,
            event_payload={"order_number": order_number, "customer_id": draft.customer.id},
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    return SubmitResultV1(order_number=order_number, submitted_at=_iso(submitted_at))


def list_events(db: Session, draft_id: str) -> list[EventV1]:
    _load_draft(db, draft_id)

    rows = db.scalars(
        select(EventLog)
        .where(EventLog.draft_id == draft_id)
        .order_by(EventLog.created_at.desc())
    )
    return [
        EventV1(
            id=r.id,
            entity_type=EntityTypeV1(r.entity_type),
            entity_id=r.entity_id,
            event_type=EventTypeV1(r.event_type),
            payload=r.event_payload_json or {},
            created_at=_iso(r.created_at),
        )
        for r in rows
    ]


def _load_draft(db: Session, draft_id: str) -> Draft:
    try:
        return db.execute(
            select(Draft)
            .where(Draft.id == draft_id)
            .options(selectinload(Draft.customer), selectinload(Draft.order))
        ).scalar_one()
    except NoResultFound as e:
        raise DraftNotFoundError(draft_id) from e


def _upsert_customer(db: Session, draft: Draft, form: FormData) -> Customer | None:
    """Return the customer for the form's email, creating or refreshing it.

    A blank email unlinks the draft; the customer row itself is left alone.
    """

    if not form.email:
        if draft.customer_id is not None:
            _log_event(
                db,
                draft_id=draft.id,
                entity_type=EntityTypeV1.CUSTOMER,
                entity_id=draft.customer_id,
                event_type=EventTypeV1.CUSTOMER_UNLINKED,
                event_payload={},
            )
        return None

    customer = db.scalar(select(Customer).where(Customer.email == form.email))
    if customer is None:
        customer = Customer(id=uuid4().hex, email=form.email)
        db.add(customer)

    customer.first_name = form.first_name
    customer.last_name = form.last_name
    customer.phone = form.phone

    _log_event(
        db,
        draft_id=draft.id,
        entity_type=EntityTypeV1.CUSTOMER,
        entity_id=customer.id,
        event_type=EventTypeV1.CUSTOMER_UPSERTED,
        event_payload={"email": form.email},
    )
    return customer


def _set_order_number(db: Session, draft: Draft, order_number: str) -> None:
    if not order_number:
        if draft.order is not None:
            _log_event(
                db,
                draft_id=draft.id,
                entity_type=EntityTypeV1.ORDER,
                entity_id=draft.order.id,
                event_type=EventTypeV1.ORDER_NUMBER_CLEARED,
                event_payload={"order_number": draft.order.order_number},
            )
            draft.order = None
        return

    if draft.customer is None:
        raise DraftValidationError("Cannot set an order number without a linked customer")

    taken = db.scalar(
        select(Order.id).where(Order.order_number == order_number, Order.draft_id != draft.id)
    )
    if taken is not None:
        raise OrderNumberConflictError(f"Order number {order_number} is already in use")

    if draft.order is None:
        draft.order = Order(
            id=uuid4().hex,
            customer_id=draft.customer.id,
            order_number=order_number,
        )
    else:
        draft.order.order_number = order_number
        draft.order.customer_id = draft.customer.id

    _log_event(
        db,
        draft_id=draft.id,
        entity_type=EntityTypeV1.ORDER,
        entity_id=draft.order.id,
        event_type=EventTypeV1.ORDER_NUMBER_SET,
        event_payload={"order_number": order_number},
    )


def _unique_order_number(
    db: Session, submitted_at: datetime, generate: Callable[[datetime], str]
) -> str:
    for attempt in range(1, ORDER_NUMBER_ATTEMPTS + 1):
        candidate = generate(submitted_at)
        if db.scalar(select(Order.id).where(Order.order_number == candidate)) is None:
            return candidate
        logger.warning("order number collision on attempt %d: %s", attempt, candidate)

    raise OrderNumberConflictError(
        f"Could not generate a unique order number after {ORDER_NUMBER_ATTEMPTS} attempts"
    )


def _apply_form(draft: Draft, form: FormData, current_step: int) -> None:
    draft.first_name = form.first_name
    draft.last_name = form.last_name
    draft.email = form.email
    draft.phone = form.phone

    draft.communication_method = form.communication_method or None
    draft.package_type = form.package_type or None
    draft.rice_krispies = form.rice_krispies
    draft.oreos = form.oreos
    draft.pretzels = form.pretzels
    draft.marshmallows = form.marshmallows

    draft.pickup_date = form.pickup_date or None
    draft.pickup_time = form.pickup_time or None
    draft.rush_order = form.rush_order
    draft.referral_source = form.referral_source or None

    draft.data = FormDocument.from_form(form, current_step).to_json()


def _row_to_form(draft: Draft) -> FormData:
    document = FormDocument.from_stored(draft.data)
    return normalize_form_data(
        {
            "first_name": draft.first_name,
            "last_name": draft.last_name,
            "email": draft.email,
            "phone": draft.phone,
            "communication_method": draft.communication_method,
            "package_type": draft.package_type,
            "rice_krispies": draft.rice_krispies,
            "oreos": draft.oreos,
            "pretzels": draft.pretzels,
            "marshmallows": draft.marshmallows,
            "pickup_date": draft.pickup_date,
            "pickup_time": draft.pickup_time,
            "rush_order": draft.rush_order,
            "referral_source": draft.referral_source,
            "color_scheme": document.color_scheme,
            "event_type": document.event_type,
            "theme": document.theme,
            "additional_designs": document.additional_designs,
            "selected_additional_designs": document.selected_additional_designs,
            "terms_accepted": document.terms_accepted,
            "visited_steps": document.visited_steps,
        }
    )


def _to_wire(draft: Draft) -> DraftV1:
    document = FormDocument.from_stored(draft.data)
    return DraftV1(
        id=draft.id,
        form_data=_row_to_form(draft).to_wire(),
        current_step=document.current_step,
        status=draft.status,
        order_number=draft.order.order_number if draft.order is not None else None,
        customer_id=draft.customer_id,
        created_at=_iso(draft.created_at),
        updated_at=_iso(draft.updated_at),
        submitted_at=_iso(draft.submitted_at) if draft.submitted_at else None,
    )


def _iso(value: datetime) -> str:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def _log_event(
    db: Session,
    *,
    draft_id: str | None,
    entity_type: EntityTypeV1,
    entity_id: str,
    event_type: EventTypeV1,
    event_payload: dict,
) -> None:
    db.add(
        EventLog(
            id=uuid4().hex,
            draft_id=draft_id,
            entity_type=entity_type.value,
            entity_id=entity_id,
            event_type=event_type.value,
            event_payload_json=event_payload,
        )
    )
