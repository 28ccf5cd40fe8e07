from __future__ import annotations

from services.api.app.services.catalog_base import (
    DAYS_OF_WEEK,
    AdditionalDesignOption,
    ClockTime,
    PackageOption,
    TimeSlot,
    TreatOption,
    UnavailablePeriod,
)


def _slot(start: tuple[int, int, str], end: tuple[int, int, str]) -> TimeSlot:
    return TimeSlot(start=ClockTime(*start), end=ClockTime(*end))


_WEEKDAY_SLOTS = [
    _slot((8, 0, "morning"), (9, 0, "morning")),
    _slot((5, 0, "evening"), (8, 0, "evening")),
]


class StaticCatalog:
    """Built-in catalog used for local dev and tests, and as the seed source."""

    source = "STATIC"

    def __init__(self) -> None:
        self._packages = [
            PackageOption(id="small", label="Small", price=110, description="3 dozen – 36 treats"),
            PackageOption(
                id="medium", label="Medium", price=180, description="5 dozen – 60 treats"
            ),
            PackageOption(id="large", label="Large", price=280, description="8 dozen – 96 treats"),
            PackageOption(
                id="xl",
                label="XL",
                price=420,
                description="12 dozen – 144 treats (Requires at least one month notice)",
            ),
            PackageOption(id="by-dozen", label="By the dozen", price=None),
        ]
        self._treats = [
            TreatOption(key="riceKrispies", label="Chocolate covered Rice Krispies", price=40),
            TreatOption(key="oreos", label="Chocolate covered Oreos", price=30),
            TreatOption(key="pretzels", label="Chocolate dipped pretzels", price=30),
            TreatOption(key="marshmallows", label="Chocolate covered marshmallow pops", price=40),
        ]
        self._designs = [
            AdditionalDesignOption(
                id="sprinkles",
                name="Sprinkles",
                description="Custom sprinkles decoration",
                base_price=10,
            ),
            AdditionalDesignOption(
                id="gold-silver",
                name="Gold or silver painted",
                description="Gold or silver painted accents",
                base_price=20,
            ),
            AdditionalDesignOption(
                id="edible-images",
                name="Edible images or logos",
                description="Custom edible images or logos printed on treats",
                base_price=40,
                large_price_increase=20,
                per_dozen_price=15,
            ),
            AdditionalDesignOption(
                id="individually-wrapped",
                name="Individually wrapped treats",
                description="Each treat individually wrapped",
                base_price=40,
                large_price_increase=20,
                per_dozen_price=15,
            ),
        ]
        self._slots = {day: list(_WEEKDAY_SLOTS) for day in DAYS_OF_WEEK[1:6]}
        self._slots["Saturday"] = [_slot((9, 0, "morning"), (12, 0, "morning"))]
        self._slots["Sunday"] = [_slot((3, 0, "evening"), (7, 0, "evening"))]
        self._periods = [
            UnavailablePeriod(start_date="2025-08-28", end_date="2025-09-03", reason="Vacation"),
            UnavailablePeriod(start_date="2025-10-09", end_date="2025-10-13", reason="Business trip"),
            UnavailablePeriod(start_date="2025-11-15", reason="Personal appointment"),
        ]

    def package_options(self) -> list[PackageOption]:
        return list(self._packages)

    def treat_options(self) -> list[TreatOption]:
        return list(self._treats)

    def additional_design_options(self) -> list[AdditionalDesignOption]:
        return list(self._designs)

    def time_slots(self) -> dict[str, list[TimeSlot]]:
        return {day: list(self._slots.get(day, [])) for day in DAYS_OF_WEEK}

    def unavailable_periods(self) -> list[UnavailablePeriod]:
        return list(self._periods)
