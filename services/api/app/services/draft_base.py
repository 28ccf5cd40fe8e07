from __future__ import annotations

import re
import secrets
import string
from datetime import datetime, timezone


class DraftServiceError(Exception):
    """Base class for draft engine errors. ``kind`` lets callers branch without isinstance."""

    kind = "error"


class DraftNotFoundError(DraftServiceError):
    kind = "not_found"

    def __init__(self, draft_id: str) -> None:
        super().__init__("Form data not found")
        self.draft_id = draft_id


class DraftValidationError(DraftServiceError):
    kind = "validation"


class OrderNumberConflictError(DraftServiceError):
    kind = "conflict"


ORDER_NUMBER_ALPHABET = string.ascii_uppercase + string.digits
ORDER_NUMBER_SUFFIX_LENGTH = 12
ORDER_NUMBER_RE = re.compile(r"^\d{8}-[A-Z0-9]{12}$")


def generate_order_number(submitted_at: datetime | None = None) -> str:
    """``YYYYMMDD-XXXXXXXXXXXX`` using the UTC submission date and a random suffix."""

    submitted_at = submitted_at or datetime.now(timezone.utc)
    if submitted_at.tzinfo is None:
        submitted_at = submitted_at.replace(tzinfo=timezone.utc)

    stamp = submitted_at.astimezone(timezone.utc).strftime("%Y%m%d")
    suffix = "".join(
        secrets.choice(ORDER_NUMBER_ALPHABET) for _ in range(ORDER_NUMBER_SUFFIX_LENGTH)
    )
    return f"{stamp}-{suffix}"
