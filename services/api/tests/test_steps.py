from __future__ import annotations

import pytest
from services.api.app.services.form_data import normalize_form_data
from services.api.app.services.steps import (
    FORM_STEPS,
    StepStatus,
    completed_steps_count,
    go_to_step,
    has_step_data,
    is_step_completed,
    is_step_reachable,
    next_step,
    prev_step,
    step_index,
    step_status,
    step_summary,
    to_full_index,
    to_visible_index,
    visible_steps,
)


def _ids(steps) -> list[str]:
    return [s.id for s in steps]


def test_visible_steps_hide_by_dozen_unless_selected() -> None:
    small = visible_steps("small")
    assert len(small) == 7
    assert "by-dozen" not in _ids(small)

    assert len(visible_steps("")) == 7
    assert _ids(visible_steps("by-dozen")) == _ids(FORM_STEPS)


def test_step_status_compares_visible_positions() -> None:
    assert step_status(1, 3) == StepStatus.COMPLETED
    assert step_status(3, 3) == StepStatus.CURRENT
    assert step_status(4, 3) == StepStatus.PENDING


@pytest.mark.parametrize(
    ("step_id", "empty", "filled"),
    [
        ("lead", {}, {"phone": "555-123-4567"}),
        ("communication", {}, {"communicationMethod": "text"}),
        ("package", {}, {"packageType": "medium"}),
        ("by-dozen", {"oreos": 2}, {"packageType": "by-dozen", "oreos": 2}),
        ("color", {}, {"colorScheme": "pink and gold"}),
        ("event", {}, {"theme": "garden party"}),
        (
            "designs",
            {"selectedAdditionalDesigns": ["sprinkles"]},
            {"additionalDesigns": "a tiny crown on each"},
        ),
        (
            "pickup",
            {"pickupDate": "2025-06-01"},
            {"pickupDate": "2025-06-01", "pickupTime": "8:15 AM"},
        ),
    ],
)
def test_has_step_data_per_step(step_id: str, empty: dict, filled: dict) -> None:
    assert has_step_data(step_id, normalize_form_data(empty)) is False
    assert has_step_data(step_id, normalize_form_data(filled)) is True


def test_designs_step_ignores_catalog_selections() -> None:
    form = normalize_form_data(
        {"selectedAdditionalDesigns": ["sprinkles", "gold-silver"], "additionalDesigns": ""}
    )
    assert has_step_data("designs", form) is False
    assert is_step_completed("designs", form) is False


def test_unknown_step_has_no_data() -> None:
    assert has_step_data("nope", normalize_form_data({"firstName": "Ada"})) is False


def test_visited_step_counts_as_completed_without_data() -> None:
    form = normalize_form_data({"visitedSteps": ["lead", "designs"]})
    assert has_step_data("designs", form) is False
    assert is_step_completed("designs", form) is True
    assert is_step_completed("color", form) is False


def test_completed_steps_count() -> None:
    form = normalize_form_data(
        {"firstName": "Ada", "packageType": "small", "visitedSteps": ["lead", "color"]}
    )
    # lead (data + visited), package (data), color (visited)
    assert completed_steps_count(visible_steps("small"), form) == 3


def test_reachability_requires_unbroken_chain() -> None:
    steps = visible_steps("small")
    form = normalize_form_data(
        {
            "packageType": "small",
            "colorScheme": "blue",
            "visitedSteps": ["lead", "communication"],
        }
    )
    # [package, color, event, designs] -> event and designs missing
    assert is_step_reachable(5, 2, steps, form) is False

    form.visited_steps.add("event")
    assert is_step_reachable(5, 2, steps, form) is False

    form.visited_steps.add("designs")
    assert is_step_reachable(5, 2, steps, form) is True


def test_reachability_of_current_and_earlier_steps() -> None:
    steps = visible_steps("small")
    form = normalize_form_data({})
    assert is_step_reachable(0, 3, steps, form) is True
    assert is_step_reachable(3, 3, steps, form) is True
    assert is_step_reachable(4, 3, steps, form) is False


def test_reachability_rejects_out_of_range_targets() -> None:
    steps = visible_steps("small")
    form = normalize_form_data({})
    assert is_step_reachable(len(steps), 0, steps, form) is False
    assert is_step_reachable(-1, 0, steps, form) is False


def test_index_translation_uses_step_ids() -> None:
    visible = visible_steps("small")
    assert to_full_index(3, visible) == step_index("color")
    assert to_visible_index(step_index("color"), visible) == 3
    assert to_visible_index(step_index("by-dozen"), visible) == 2

    full = visible_steps("by-dozen")
    assert to_full_index(3, full) == 3
    assert to_visible_index(3, full) == 3


def test_index_translation_clamps() -> None:
    visible = visible_steps("small")
    assert to_full_index(99, visible) == step_index("pickup")
    assert to_full_index(-4, visible) == 0
    assert to_visible_index(99, visible) == len(visible) - 1
    assert to_visible_index(-1, visible) == 0


def test_next_from_package_skips_by_dozen() -> None:
    form = normalize_form_data({"packageType": "large"})
    transition = next_step(step_index("package"), form)

    assert transition.to_index == step_index("color")
    assert {"package", "color"} <= transition.form.visited_steps
    assert "color" not in form.visited_steps


def test_next_from_package_enters_by_dozen_when_chosen() -> None:
    form = normalize_form_data({"packageType": "by-dozen"})
    transition = next_step(step_index("package"), form)
    assert transition.to_index == step_index("by-dozen")
    assert "by-dozen" in transition.form.visited_steps


def test_prev_from_color_honours_package_type() -> None:
    color = step_index("color")
    assert prev_step(color, normalize_form_data({"packageType": "xl"})).to_index == step_index(
        "package"
    )
    assert prev_step(color, normalize_form_data({"packageType": "by-dozen"})).to_index == (
        step_index("by-dozen")
    )


def test_prev_from_stale_by_dozen_returns_to_package() -> None:
    transition = prev_step(step_index("by-dozen"), normalize_form_data({"packageType": "small"}))
    assert transition.to_index == step_index("package")
    assert "package" in transition.form.visited_steps


def test_transitions_at_edges_are_no_ops() -> None:
    form = normalize_form_data({})
    last = len(FORM_STEPS) - 1

    assert next_step(last, form).moved is False
    assert prev_step(0, form).moved is False
    assert next_step(-3, form).to_index == -3
    assert prev_step(42, form).to_index == 42


def test_go_to_step_marks_destination_visited() -> None:
    form = normalize_form_data({})
    transition = go_to_step(0, step_index("event"), form)
    assert transition.to_index == step_index("event")
    assert "event" in transition.form.visited_steps

    assert go_to_step(2, 2, form).moved is False
    assert go_to_step(2, 99, form).moved is False


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ({"firstName": "John", "lastName": "Doe"}, "John Doe"),
        ({"firstName": "John"}, "John"),
        ({"email": "john@example.com"}, "john@example.com"),
        ({"phone": "555-123-4567"}, "Contact info provided"),
        ({}, None),
    ],
)
def test_lead_summary(raw: dict, expected: str | None) -> None:
    assert step_summary("lead", normalize_form_data(raw)) == expected


def test_communication_summary() -> None:
    assert step_summary("communication", normalize_form_data({"communicationMethod": "email"})) == (
        "Email"
    )
    assert step_summary("communication", normalize_form_data({"communicationMethod": "text"})) == (
        "Text"
    )
    assert step_summary("communication", normalize_form_data({})) is None


@pytest.mark.parametrize(
    ("package_type", "expected"),
    [
        ("small", "Small Package (3 dozen)"),
        ("medium", "Medium Package (5 dozen)"),
        ("large", "Large Package (8 dozen)"),
        ("xl", "XL Package (12 dozen)"),
        ("by-dozen", "By The Dozen"),
        ("", None),
    ],
)
def test_package_summary_names(package_type: str, expected: str | None) -> None:
    form = normalize_form_data({"packageType": package_type})
    assert step_summary("package", form) == expected


def test_by_dozen_summary_lists_chosen_treats() -> None:
    form = normalize_form_data(
        {"packageType": "by-dozen", "riceKrispies": 2, "oreos": 1, "pretzels": 0, "marshmallows": 4}
    )
    assert step_summary("by-dozen", form) == "2 Rice Krispies, 1 Oreos, 4 Marshmallows"

    assert step_summary("by-dozen", normalize_form_data({"packageType": "by-dozen"})) is None
    # Quantities left over from an abandoned by-dozen order are not summarized.
    stale = normalize_form_data({"packageType": "large", "oreos": 3})
    assert step_summary("by-dozen", stale) is None


def test_color_event_and_design_summaries() -> None:
    form = normalize_form_data(
        {
            "colorScheme": "Pink and Gold",
            "eventType": "Wedding",
            "theme": "Garden Party",
            "additionalDesigns": "Gold leaf accents",
            "selectedAdditionalDesigns": ["sprinkles"],
        }
    )
    assert step_summary("color", form) == "Pink and Gold"
    assert step_summary("event", form) == "Wedding, Garden Party"
    assert step_summary("designs", form) == "Gold leaf accents"

    assert step_summary("event", normalize_form_data({"theme": "Rustic"})) == "Rustic"
    empty = normalize_form_data({"selectedAdditionalDesigns": ["sprinkles"]})
    assert step_summary("color", empty) is None
    assert step_summary("event", empty) is None
    assert step_summary("designs", empty) is None


def test_pickup_summary_needs_date_and_time() -> None:
    form = normalize_form_data({"pickupDate": "2024-01-15", "pickupTime": "5:00 PM"})
    assert step_summary("pickup", form) == "Jan 15, 2024 at 5:00 PM"

    assert step_summary("pickup", normalize_form_data({"pickupDate": "2024-01-15"})) is None
    assert step_summary("pickup", normalize_form_data({"pickupTime": "5:00 PM"})) is None


def test_unknown_step_has_no_summary() -> None:
    assert step_summary("nope", normalize_form_data({"firstName": "Ada"})) is None
