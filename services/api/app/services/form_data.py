"""Canonical form data and the sanitization applied to untrusted input.

Incoming payloads come from the browser and stored JSON may predate the current schema,
so every read goes through the same coercions: strings default to "", booleans to
False, treat counts to 0, enum-like fields collapse unknown values to "" and visited
steps never end up empty.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any

from packages.shared.schemas.form_v1 import FormDataV1
from pydantic.alias_generators import to_camel
from services.api.app.services.steps import DEFAULT_STEP_ID, ordered_step_ids

COMMUNICATION_METHODS = frozenset({"", "email", "text"})
PACKAGE_TYPES = frozenset({"", "small", "medium", "large", "xl", "by-dozen"})
TREAT_FIELDS = ("rice_krispies", "oreos", "pretzels", "marshmallows")

# Largest value every supported database stores in an INTEGER column.
MAX_INT = 2**31 - 1


@dataclass(slots=True)
class FormData:
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""

    communication_method: str = ""
    package_type: str = ""

    rice_krispies: int = 0
    oreos: int = 0
    pretzels: int = 0
    marshmallows: int = 0

    color_scheme: str = ""
    event_type: str = ""
    theme: str = ""
    additional_designs: str = ""
    selected_additional_designs: list[str] = field(default_factory=list)

    pickup_date: str = ""
    pickup_time: str = ""
    rush_order: bool = False

    referral_source: str = ""
    terms_accepted: bool = False

    visited_steps: set[str] = field(default_factory=lambda: {DEFAULT_STEP_ID})

    def clone(self) -> FormData:
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values["selected_additional_designs"] = list(self.selected_additional_designs)
        values["visited_steps"] = set(self.visited_steps)
        return FormData(**values)

    def treat_quantities(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in TREAT_FIELDS}

    def to_wire(self) -> FormDataV1:
        values: dict[str, Any] = {f.name: getattr(self, f.name) for f in fields(self)}
        values["selected_additional_designs"] = list(self.selected_additional_designs)
        values["visited_steps"] = ordered_step_ids(normalize_visited_steps(self.visited_steps))
        return FormDataV1(**values)


def as_str(value: object) -> str:
    return value if isinstance(value, str) else ""


def as_bool(value: object) -> bool:
    return value if isinstance(value, bool) else False


def as_int(value: object) -> int | None:
    """An integral number within ``MAX_INT``, or None.

    Integral floats (``2.0``) are accepted; fractions, NaN and infinities are not.
    """

    # bool is an int subclass; a checkbox value is not a quantity.
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        value = int(value)
    if not isinstance(value, int) or abs(value) > MAX_INT:
        return None
    return value


def as_count(value: object) -> int:
    number = as_int(value)
    return max(0, number) if number is not None else 0


def as_choice(value: object, allowed: frozenset[str]) -> str:
    if isinstance(value, Enum):
        value = value.value
    return value if isinstance(value, str) and value in allowed else ""


def as_str_list(value: object) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [v for v in value if isinstance(v, str)]


def normalize_visited_steps(value: object) -> set[str]:
    steps: set[str] = set()
    if isinstance(value, (set, frozenset, list, tuple)):
        steps = {v.strip() for v in value if isinstance(v, str) and v.strip()}
    return steps or {DEFAULT_STEP_ID}


def _lookup(raw: Mapping[str, Any], name: str) -> object:
    if name in raw:
        return raw[name]
    return raw.get(to_camel(name))


def normalize_form_data(raw: Mapping[str, Any] | FormData | FormDataV1 | None) -> FormData:
    """Build a canonical ``FormData`` from a partial or untrusted payload."""

    if isinstance(raw, FormData):
        raw = {f.name: getattr(raw, f.name) for f in fields(raw)}
    elif isinstance(raw, FormDataV1):
        raw = raw.model_dump(mode="json")
    elif not isinstance(raw, Mapping):
        raw = {}

    form = FormData(
        first_name=as_str(_lookup(raw, "first_name")),
        last_name=as_str(_lookup(raw, "last_name")),
        email=as_str(_lookup(raw, "email")).strip(),
        phone=as_str(_lookup(raw, "phone")),
        communication_method=as_choice(_lookup(raw, "communication_method"), COMMUNICATION_METHODS),
        package_type=as_choice(_lookup(raw, "package_type"), PACKAGE_TYPES),
        color_scheme=as_str(_lookup(raw, "color_scheme")),
        event_type=as_str(_lookup(raw, "event_type")),
        theme=as_str(_lookup(raw, "theme")),
        additional_designs=as_str(_lookup(raw, "additional_designs")),
        selected_additional_designs=as_str_list(_lookup(raw, "selected_additional_designs")),
        pickup_date=as_str(_lookup(raw, "pickup_date")),
        pickup_time=as_str(_lookup(raw, "pickup_time")),
        rush_order=as_bool(_lookup(raw, "rush_order")),
        referral_source=as_str(_lookup(raw, "referral_source")),
        terms_accepted=as_bool(_lookup(raw, "terms_accepted")),
        visited_steps=normalize_visited_steps(_lookup(raw, "visited_steps")),
    )
    for name in TREAT_FIELDS:
        setattr(form, name, as_count(_lookup(raw, name)))
    return form


@dataclass(slots=True)
class FormDocument:
    """Secondary fields stored as one JSON document next to the relational columns."""

    color_scheme: str = ""
    event_type: str = ""
    theme: str = ""
    additional_designs: str = ""
    selected_additional_designs: list[str] = field(default_factory=list)
    terms_accepted: bool = False
    visited_steps: list[str] = field(default_factory=lambda: [DEFAULT_STEP_ID])
    current_step: int = 0

    @classmethod
    def from_form(cls, form: FormData, current_step: int) -> FormDocument:
        return cls(
            color_scheme=form.color_scheme,
            event_type=form.event_type,
            theme=form.theme,
            additional_designs=form.additional_designs,
            selected_additional_designs=list(form.selected_additional_designs),
            terms_accepted=form.terms_accepted,
            visited_steps=ordered_step_ids(normalize_visited_steps(form.visited_steps)),
            current_step=max(0, current_step),
        )

    @classmethod
    def from_stored(cls, raw: object) -> FormDocument:
        """Re-validate a stored document; it may have been written by an older schema."""

        if not isinstance(raw, Mapping):
            raw = {}

        current_step = as_int(_lookup(raw, "current_step")) or 0

        return cls(
            color_scheme=as_str(_lookup(raw, "color_scheme")),
            event_type=as_str(_lookup(raw, "event_type")),
            theme=as_str(_lookup(raw, "theme")),
            additional_designs=as_str(_lookup(raw, "additional_designs")),
            selected_additional_designs=as_str_list(_lookup(raw, "selected_additional_designs")),
            terms_accepted=as_bool(_lookup(raw, "terms_accepted")),
            visited_steps=ordered_step_ids(normalize_visited_steps(_lookup(raw, "visited_steps"))),
            current_step=max(0, current_step),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "colorScheme": self.color_scheme,
            "eventType": self.event_type,
            "theme": self.theme,
            "additionalDesigns": self.additional_designs,
            "selectedAdditionalDesigns": list(self.selected_additional_designs),
            "termsAccepted": self.terms_accepted,
            "visitedSteps": list(self.visited_steps),
            "currentStep": self.current_step,
        }
