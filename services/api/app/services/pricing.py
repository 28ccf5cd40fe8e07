"""Price calculations for the order form.

Everything here is read-only and total: a missing catalog entry prices as zero (or as
the historical default for treats) so a quote can always be rendered.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from pydantic.alias_generators import to_camel
from services.api.app.services.catalog_base import (
    AdditionalDesignOption,
    CatalogProvider,
    PackageOption,
    TreatOption,
)
from services.api.app.services.form_data import TREAT_FIELDS, FormData
from services.api.app.services.pickup import format_display_date

BY_DOZEN = "by-dozen"
LARGE_PACKAGES = frozenset({"large", "xl"})

# Per-dozen prices used when the catalog has no entry for a treat.
DEFAULT_TREAT_PRICES: dict[str, float] = {
    "rice_krispies": 40,
    "oreos": 30,
    "pretzels": 30,
    "marshmallows": 40,
}


@dataclass(frozen=True, slots=True)
class PriceBreakdown:
    package_type: str
    package_price: float
    additional_designs_price: float
    total: float
    deposit: float
    remaining: float


def package_price(package_type: str, packages: Sequence[PackageOption]) -> float:
    if not package_type or package_type == BY_DOZEN:
        return 0
    for option in packages:
        if option.id == package_type:
            return option.price or 0
    return 0


def treat_price(treat_field: str, treats: Sequence[TreatOption]) -> float:
    keys = {treat_field, to_camel(treat_field)}
    for option in treats:
        if option.key in keys:
            return option.price
    return DEFAULT_TREAT_PRICES.get(treat_field, 0)


def by_dozen_price(form: FormData, treats: Sequence[TreatOption]) -> float:
    return sum(getattr(form, name) * treat_price(name, treats) for name in TREAT_FIELDS)


def design_option_price(option: AdditionalDesignOption, package_type: str) -> float:
    if package_type == BY_DOZEN and option.per_dozen_price is not None:
        return option.per_dozen_price

    if package_type in LARGE_PACKAGES:
        return option.base_price + max(0, option.large_price_increase)

    return option.base_price


def additional_designs_total(
    selected_ids: Iterable[str],
    options: Sequence[AdditionalDesignOption],
    package_type: str,
) -> float:
    by_id = {option.id: option for option in options}
    total: float = 0
    for design_id in selected_ids:
        option = by_id.get(design_id)
        # Designs retired from the catalog no longer cost anything.
        if option is None:
            continue
        total += design_option_price(option, package_type)
    return total


def base_price(
    form: FormData, packages: Sequence[PackageOption], treats: Sequence[TreatOption]
) -> float:
    if form.package_type == BY_DOZEN:
        return by_dozen_price(form, treats)
    return package_price(form.package_type, packages)


def quote(form: FormData, catalog: CatalogProvider) -> PriceBreakdown:
    base = base_price(form, catalog.package_options(), catalog.treat_options())
    designs = additional_designs_total(
        form.selected_additional_designs,
        catalog.additional_design_options(),
        form.package_type,
    )
    total = base + designs
    return PriceBreakdown(
        package_type=form.package_type,
        package_price=base,
        additional_designs_price=designs,
        total=total,
        deposit=total / 2,
        remaining=total / 2,
    )


def package_summary(form: FormData, packages: Sequence[PackageOption]) -> str:
    if form.package_type == BY_DOZEN:
        dozens = sum(form.treat_quantities().values())
        if dozens == 0:
            return "No treats selected"
        return f"Custom Order ({dozens} dozen)"

    for option in packages:
        if option.id == form.package_type:
            return option.label
    return "Package not specified"


def pickup_summary(form: FormData) -> str:
    if not (form.pickup_date and form.pickup_time):
        return "Pickup details not specified"
    return f"Pickup: {format_display_date(form.pickup_date)} at {form.pickup_time}"


def by_dozen_breakdown(form: FormData, treats: Sequence[TreatOption]) -> list[str]:
    labels = {option.key: option.label for option in treats}
    lines: list[str] = []
    for name in TREAT_FIELDS:
        qty = getattr(form, name)
        if qty <= 0:
            continue
        label = labels.get(to_camel(name)) or labels.get(name) or name.replace("_", " ")
        lines.append(f"{qty} dozen {label}")
    return lines
