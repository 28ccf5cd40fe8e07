"""Shared event schema (v1).

The backend stores an append-only event log. Clients can consume these events to render
an order history.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EntityTypeV1(str, Enum):
    DRAFT = "Draft"
    CUSTOMER = "Customer"
    ORDER = "Order"


class EventTypeV1(str, Enum):
    DRAFT_CREATED = "DRAFT_CREATED"
    DRAFT_UPDATED = "DRAFT_UPDATED"
    DRAFT_STEP_CHANGED = "DRAFT_STEP_CHANGED"
    DRAFT_DELETED = "DRAFT_DELETED"
    DRAFT_SUBMITTED = "DRAFT_SUBMITTED"
    CUSTOMER_UPSERTED = "CUSTOMER_UPSERTED"
    CUSTOMER_UNLINKED = "CUSTOMER_UNLINKED"
    ORDER_NUMBER_SET = "ORDER_NUMBER_SET"
    ORDER_NUMBER_CLEARED = "ORDER_NUMBER_CLEARED"


class EventV1(BaseModel):
    id: str

    entity_type: EntityTypeV1
    entity_id: str

    event_type: EventTypeV1
    payload: dict[str, Any] = Field(default_factory=dict)
    created_at: str
