"""Wizard step sequencing.

Pure functions over the canonical step list and a form snapshot. Two numberings exist:
the *full* index into ``FORM_STEPS`` (what gets persisted as ``current_step``) and the
*visible* index into the list actually rendered, which drops ``by-dozen`` unless that
package was chosen. Nothing here raises on bad indices; out-of-range input clamps or
leaves the position unchanged.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

from services.api.app.services.pickup import format_display_date

if TYPE_CHECKING:
    from services.api.app.services.form_data import FormData


@dataclass(frozen=True, slots=True)
class FormStep:
    id: str
    title: str


FORM_STEPS: tuple[FormStep, ...] = (
    FormStep(id="lead", title="Contact Information"),
    FormStep(id="communication", title="Communication Preference"),
    FormStep(id="package", title="Package Selection"),
    FormStep(id="by-dozen", title="By The Dozen"),
    FormStep(id="color", title="Color Scheme"),
    FormStep(id="event", title="Event Details"),
    FormStep(id="designs", title="Additional Designs"),
    FormStep(id="pickup", title="Pickup Details"),
)

DEFAULT_STEP_ID = FORM_STEPS[0].id
BY_DOZEN_STEP_ID = "by-dozen"


class StepStatus(str, Enum):
    COMPLETED = "completed"
    CURRENT = "current"
    PENDING = "pending"


def step_index(step_id: str, steps: Sequence[FormStep] = FORM_STEPS) -> int:
    """Position of ``step_id`` in ``steps``, or -1."""
    for i, step in enumerate(steps):
        if step.id == step_id:
            return i
    return -1


def ordered_step_ids(step_ids: Iterable[str], steps: Sequence[FormStep] = FORM_STEPS) -> list[str]:
    """Known ids in declared step order, then unknown ids alphabetically."""
    order = {step.id: i for i, step in enumerate(steps)}
    return sorted(set(step_ids), key=lambda sid: (order.get(sid, len(order)), sid))


def visible_steps(package_type: str, steps: Sequence[FormStep] = FORM_STEPS) -> list[FormStep]:
    if package_type == BY_DOZEN_STEP_ID:
        return list(steps)
    return [step for step in steps if step.id != BY_DOZEN_STEP_ID]


def step_status(visible_index: int, current_visible_index: int) -> StepStatus:
    if visible_index < current_visible_index:
        return StepStatus.COMPLETED
    if visible_index == current_visible_index:
        return StepStatus.CURRENT
    return StepStatus.PENDING


def has_step_data(step_id: str, form: FormData) -> bool:
    if step_id == "lead":
        return bool(form.first_name or form.last_name or form.email or form.phone)
    if step_id == "communication":
        return bool(form.communication_method)
    if step_id == "package":
        return bool(form.package_type)
    if step_id == "by-dozen":
        return form.package_type == BY_DOZEN_STEP_ID and any(
            qty > 0 for qty in form.treat_quantities().values()
        )
    if step_id == "color":
        return bool(form.color_scheme)
    if step_id == "event":
        return bool(form.event_type or form.theme)
    if step_id == "designs":
        return bool(form.additional_designs)
    if step_id == "pickup":
        return bool(form.pickup_date and form.pickup_time)
    return False


PACKAGE_STEP_NAMES = {
    "small": "Small Package (3 dozen)",
    "medium": "Medium Package (5 dozen)",
    "large": "Large Package (8 dozen)",
    "xl": "XL Package (12 dozen)",
    BY_DOZEN_STEP_ID: "By The Dozen",
}

TREAT_STEP_NAMES = (
    ("rice_krispies", "Rice Krispies"),
    ("oreos", "Oreos"),
    ("pretzels", "Pretzels"),
    ("marshmallows", "Marshmallows"),
)


def step_summary(step_id: str, form: FormData) -> str | None:
    """One-line sidebar summary of what a step holds, or None when it holds nothing."""

    if step_id == "lead":
        if not (form.first_name or form.last_name or form.email or form.phone):
            return None
        name = f"{form.first_name} {form.last_name}".strip()
        return name or form.email or "Contact info provided"
    if step_id == "communication":
        if not form.communication_method:
            return None
        return "Email" if form.communication_method == "email" else "Text"
    if step_id == "package":
        return PACKAGE_STEP_NAMES.get(form.package_type)
    if step_id == "by-dozen":
        if form.package_type != BY_DOZEN_STEP_ID:
            return None
        items = [
            f"{getattr(form, name)} {label}"
            for name, label in TREAT_STEP_NAMES
            if getattr(form, name) > 0
        ]
        return ", ".join(items) or None
    if step_id == "color":
        return form.color_scheme or None
    if step_id == "event":
        return ", ".join(part for part in (form.event_type, form.theme) if part) or None
    if step_id == "designs":
        return form.additional_designs or None
    if step_id == "pickup":
        if not (form.pickup_date and form.pickup_time):
            return None
        return f"{format_display_date(form.pickup_date, abbreviated=True)} at {form.pickup_time}"
    return None


def is_step_completed(step_id: str, form: FormData) -> bool:
    # Visiting a step counts even when it was skipped without data.
    return has_step_data(step_id, form) or step_id in form.visited_steps


def completed_steps_count(steps: Sequence[FormStep], form: FormData) -> int:
    return sum(1 for step in steps if is_step_completed(step.id, form))


def is_step_reachable(
    target_visible_index: int,
    current_visible_index: int,
    steps: Sequence[FormStep],
    form: FormData,
) -> bool:
    """Whether the sidebar may jump from the current visible step to the target.

    Earlier and current steps are always reachable. A later step is reachable only
    through an unbroken chain of completed steps, current step included.
    """

    if target_visible_index < 0 or target_visible_index >= len(steps):
        return False

    current = max(0, current_visible_index)
    if target_visible_index <= current:
        return True

    return all(
        is_step_completed(steps[i].id, form) for i in range(current, target_visible_index + 1)
    )


def to_full_index(
    visible_index: int,
    visible: Sequence[FormStep],
    steps: Sequence[FormStep] = FORM_STEPS,
) -> int:
    if not visible:
        return 0
    visible_index = min(max(visible_index, 0), len(visible) - 1)
    full = step_index(visible[visible_index].id, steps)
    return full if full != -1 else visible_index


def to_visible_index(
    full_index: int,
    visible: Sequence[FormStep],
    steps: Sequence[FormStep] = FORM_STEPS,
) -> int:
    """Visible position of a full step; a hidden step maps to the nearest visible one before it."""
    if not steps or not visible:
        return 0
    full_index = min(max(full_index, 0), len(steps) - 1)

    visible_ids = [step.id for step in visible]
    for i in range(full_index, -1, -1):
        sid = steps[i].id
        if sid in visible_ids:
            return visible_ids.index(sid)
    return 0


@dataclass(frozen=True, slots=True)
class StepTransition:
    from_index: int
    to_index: int
    form: FormData

    @property
    def moved(self) -> bool:
        return self.from_index != self.to_index


def next_step(
    current_index: int, form: FormData, steps: Sequence[FormStep] = FORM_STEPS
) -> StepTransition:
    if current_index < 0 or current_index >= len(steps):
        return StepTransition(current_index, current_index, form)

    current_id = steps[current_index].id
    by_dozen = form.package_type == BY_DOZEN_STEP_ID

    if current_id == "package" and not by_dozen:
        target = step_index("color", steps)
    elif current_index < len(steps) - 1:
        target = current_index + 1
    else:
        target = -1

    if target < 0 or target == current_index:
        return StepTransition(current_index, current_index, form)

    visited = set(form.visited_steps)
    visited.add(current_id)
    visited.add(steps[target].id)
    return StepTransition(current_index, target, replace(form.clone(), visited_steps=visited))


def prev_step(
    current_index: int, form: FormData, steps: Sequence[FormStep] = FORM_STEPS
) -> StepTransition:
    if current_index <= 0 or current_index >= len(steps):
        return StepTransition(current_index, current_index, form)

    current_id = steps[current_index].id
    by_dozen = form.package_type == BY_DOZEN_STEP_ID

    if current_id == "color":
        target = step_index(BY_DOZEN_STEP_ID if by_dozen else "package", steps)
    elif current_id == BY_DOZEN_STEP_ID and not by_dozen:
        target = step_index("package", steps)
    else:
        target = current_index - 1

    if target < 0 or target == current_index:
        return StepTransition(current_index, current_index, form)

    visited = set(form.visited_steps)
    visited.add(steps[target].id)
    return StepTransition(current_index, target, replace(form.clone(), visited_steps=visited))


def go_to_step(
    current_index: int,
    target_index: int,
    form: FormData,
    steps: Sequence[FormStep] = FORM_STEPS,
) -> StepTransition:
    if target_index < 0 or target_index >= len(steps) or target_index == current_index:
        return StepTransition(current_index, current_index, form)

    visited = set(form.visited_steps)
    visited.add(steps[target_index].id)
    return StepTransition(current_index, target_index, replace(form.clone(), visited_steps=visited))


PersistFn = Callable[["FormData", int], object]


class StepNavigator:
    """Client-local wizard position with optimistic navigation.

    ``apply`` moves the local snapshot immediately and remembers the previous one;
    ``commit`` forgets it once persistence succeeded; ``rollback`` restores it.
    """

    def __init__(
        self,
        form: FormData,
        current_index: int = 0,
        steps: Sequence[FormStep] = FORM_STEPS,
    ) -> None:
        self.steps = tuple(steps)
        self.form = form.clone()
        self.current_index = min(max(current_index, 0), len(self.steps) - 1)
        self._previous: tuple[FormData, int] | None = None

    @property
    def visible(self) -> list[FormStep]:
        return visible_steps(self.form.package_type, self.steps)

    @property
    def current_visible_index(self) -> int:
        return to_visible_index(self.current_index, self.visible, self.steps)

    @property
    def pending(self) -> bool:
        return self._previous is not None

    def apply(self, transition: StepTransition) -> None:
        self._previous = (self.form.clone(), self.current_index)
        self.form = transition.form.clone()
        self.current_index = transition.to_index

    def commit(self) -> None:
        self._previous = None

    def rollback(self) -> None:
        if self._previous is None:
            return
        self.form, self.current_index = self._previous
        self._previous = None

    def advance(self, persist: PersistFn) -> bool:
        return self._navigate(next_step(self.current_index, self.form, self.steps), persist)

    def retreat(self, persist: PersistFn) -> bool:
        return self._navigate(prev_step(self.current_index, self.form, self.steps), persist)

    def jump_to(self, visible_index: int, persist: PersistFn) -> bool:
        visible = self.visible
        if not is_step_reachable(visible_index, self.current_visible_index, visible, self.form):
            return False
        target = to_full_index(visible_index, visible, self.steps)
        transition = go_to_step(self.current_index, target, self.form, self.steps)
        return self._navigate(transition, persist)

    def _navigate(self, transition: StepTransition, persist: PersistFn) -> bool:
        if not transition.moved:
            return False

        self.apply(transition)
        try:
            persist(self.form.clone(), self.current_index)
        except Exception:
            self.rollback()
            raise
        self.commit()
        return True
