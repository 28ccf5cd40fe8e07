from __future__ import annotations

import pytest
from services.api.app.services.form_data import (
    MAX_INT,
    FormData,
    FormDocument,
    normalize_form_data,
    normalize_visited_steps,
)


def test_missing_fields_get_defaults() -> None:
    form = normalize_form_data({})
    assert form.first_name == ""
    assert form.rush_order is False
    assert form.terms_accepted is False
    assert form.treat_quantities() == {
        "rice_krispies": 0,
        "oreos": 0,
        "pretzels": 0,
        "marshmallows": 0,
    }
    assert form.selected_additional_designs == []
    assert form.visited_steps == {"lead"}


def test_nulls_collapse_to_defaults() -> None:
    form = normalize_form_data(
        {"firstName": None, "oreos": None, "termsAccepted": None, "visitedSteps": None}
    )
    assert form.first_name == ""
    assert form.oreos == 0
    assert form.terms_accepted is False
    assert form.visited_steps == {"lead"}


def test_accepts_camel_and_snake_keys() -> None:
    form = normalize_form_data({"firstName": "Ada", "last_name": "Lovelace", "riceKrispies": 2})
    assert form.first_name == "Ada"
    assert form.last_name == "Lovelace"
    assert form.rice_krispies == 2


def test_email_is_trimmed() -> None:
    assert normalize_form_data({"email": "  a@b.com \n"}).email == "a@b.com"


@pytest.mark.parametrize("value", ["mega", "SMALL", 3, None, ["small"]])
def test_unknown_package_type_collapses_to_unset(value: object) -> None:
    form = normalize_form_data({"packageType": value})
    assert form.package_type == ""
    assert normalize_form_data(form).package_type == ""


def test_known_enum_values_are_kept() -> None:
    form = normalize_form_data({"packageType": "by-dozen", "communicationMethod": "text"})
    assert form.package_type == "by-dozen"
    assert form.communication_method == "text"

    assert normalize_form_data({"communicationMethod": "pigeon"}).communication_method == ""


def test_treat_counts_are_non_negative_integers() -> None:
    form = normalize_form_data(
        {"oreos": -3, "pretzels": "4", "marshmallows": True, "riceKrispies": 2.0}
    )
    assert form.oreos == 0
    assert form.pretzels == 0
    assert form.marshmallows == 0
    assert form.rice_krispies == 2


@pytest.mark.parametrize(
    "value", [float("nan"), float("inf"), float("-inf"), 10**30, -(10**30), float(10**30)]
)
def test_non_finite_and_oversized_counts_become_zero(value: object) -> None:
    assert normalize_form_data({"oreos": value}).oreos == 0


def test_count_at_the_integer_limit_is_kept() -> None:
    assert normalize_form_data({"oreos": MAX_INT}).oreos == MAX_INT
    assert normalize_form_data({"oreos": MAX_INT + 1}).oreos == 0


def test_fractional_counts_are_rejected_not_truncated() -> None:
    form = normalize_form_data({"oreos": 2.7, "pretzels": 0.5, "riceKrispies": 3.0})
    assert form.oreos == 0
    assert form.pretzels == 0
    assert form.rice_krispies == 3


def test_selected_designs_keep_only_strings() -> None:
    form = normalize_form_data(
        {"selectedAdditionalDesigns": ["sprinkles", 7, None, {"id": "x"}, "wrapped"]}
    )
    assert form.selected_additional_designs == ["sprinkles", "wrapped"]

    as_string = normalize_form_data({"selectedAdditionalDesigns": "sprinkles"})
    assert as_string.selected_additional_designs == []


@pytest.mark.parametrize("value", [[], set(), None, "lead", {"lead": True}, ["", "   ", 5]])
def test_visited_steps_never_empty(value: object) -> None:
    assert normalize_visited_steps(value) == {"lead"}


def test_visited_steps_accept_sets_and_lists() -> None:
    assert normalize_visited_steps({"lead", "color"}) == {"lead", "color"}
    assert normalize_visited_steps(["package", "package", " color "]) == {"package", "color"}


def test_visited_steps_round_trip_through_the_wire() -> None:
    form = normalize_form_data(
        {"packageType": "medium", "visitedSteps": ["pickup", "lead", "color", "lead"]}
    )
    wire = form.to_wire()
    assert wire.visited_steps == ["lead", "color", "pickup"]

    again = normalize_form_data(wire.model_dump(by_alias=True))
    assert again == form
    assert normalize_form_data(wire) == form


def test_normalizing_is_idempotent() -> None:
    raw = {
        "firstName": "Ada",
        "email": " ada@example.com ",
        "packageType": "nope",
        "oreos": 3,
        "visitedSteps": [],
        "selectedAdditionalDesigns": ["sprinkles", 1],
    }
    once = normalize_form_data(raw)
    twice = normalize_form_data(once)
    assert once == twice


def test_clone_is_independent() -> None:
    form = FormData(selected_additional_designs=["sprinkles"])
    copy = form.clone()
    copy.visited_steps.add("color")
    copy.selected_additional_designs.append("wrapped")

    assert form.visited_steps == {"lead"}
    assert form.selected_additional_designs == ["sprinkles"]


def test_document_round_trip() -> None:
    form = normalize_form_data(
        {
            "colorScheme": "blush",
            "theme": "bridal",
            "termsAccepted": True,
            "selectedAdditionalDesigns": ["sprinkles"],
            "visitedSteps": ["color", "lead"],
        }
    )
    stored = FormDocument.from_form(form, current_step=4).to_json()
    assert stored["visitedSteps"] == ["lead", "color"]

    document = FormDocument.from_stored(stored)
    assert document.color_scheme == "blush"
    assert document.theme == "bridal"
    assert document.terms_accepted is True
    assert document.selected_additional_designs == ["sprinkles"]
    assert document.current_step == 4


def test_document_from_legacy_or_corrupt_storage() -> None:
    document = FormDocument.from_stored(
        {
            "colorScheme": 12,
            "termsAccepted": "yes",
            "visitedSteps": [],
            "selectedAdditionalDesigns": "sprinkles",
            "currentStep": "3",
        }
    )
    assert document.color_scheme == ""
    assert document.terms_accepted is False
    assert document.visited_steps == ["lead"]
    assert document.selected_additional_designs == []
    assert document.current_step == 0

    assert FormDocument.from_stored(None) == FormDocument()


@pytest.mark.parametrize(
    ("stored", "expected"),
    [(2.0, 2), (2, 2), (2.5, 0), (float("nan"), 0), (-1, 0), (True, 0), (10**30, 0)],
)
def test_document_current_step_accepts_integral_numbers(stored: object, expected: int) -> None:
    assert FormDocument.from_stored({"currentStep": stored}).current_step == expected
