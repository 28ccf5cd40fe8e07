"""Shared order form payload schema (v1).

The web client and the API exchange these payloads. Keys are camelCase on the wire;
snake_case names are accepted on input so scripts and tests can use either.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CommunicationMethodV1(str, Enum):
    UNSET = ""
    EMAIL = "email"
    TEXT = "text"


class PackageTypeV1(str, Enum):
    UNSET = ""
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    XL = "xl"
    BY_DOZEN = "by-dozen"


class DraftStatusV1(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FormDataV1(_WireModel):
    # Lead questions
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""

    communication_method: CommunicationMethodV1 = CommunicationMethodV1.UNSET
    package_type: PackageTypeV1 = PackageTypeV1.UNSET

    # By the dozen, in dozens.
    rice_krispies: int = Field(default=0, ge=0)
    oreos: int = Field(default=0, ge=0)
    pretzels: int = Field(default=0, ge=0)
    marshmallows: int = Field(default=0, ge=0)

    color_scheme: str = ""
    event_type: str = ""
    theme: str = ""
    additional_designs: str = ""
    selected_additional_designs: list[str] = Field(default_factory=list)

    pickup_date: str = ""
    pickup_time: str = ""
    rush_order: bool = False

    referral_source: str = ""
    terms_accepted: bool = False

    # A set on the server; always an array on the wire.
    visited_steps: list[str] = Field(default_factory=lambda: ["lead"], min_length=1)


class DraftV1(_WireModel):
    id: str
    form_data: FormDataV1
    current_step: int = 0
    status: DraftStatusV1 = DraftStatusV1.DRAFT
    order_number: str | None = None
    customer_id: str | None = None

    created_at: str
    updated_at: str
    submitted_at: str | None = None


class SubmitResultV1(_WireModel):
    order_number: str
    submitted_at: str


class PriceBreakdownV1(_WireModel):
    package_type: PackageTypeV1
    package_price: float
    additional_designs_price: float
    total: float
    deposit: float
    remaining: float
