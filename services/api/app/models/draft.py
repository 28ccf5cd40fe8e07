from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Request(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DraftCreateRequest(_Request):
    # Sanitized by the draft engine rather than rejected here.
    form_data: dict[str, Any] | None = None
    current_step: int = Field(default=0, ge=0)


class DraftUpdateRequest(_Request):
    form_data: dict[str, Any] | None = None
    current_step: int | None = Field(default=None, ge=0)

    # Omitted leaves the order alone; "" or null removes it.
    order_number: str | None = None
