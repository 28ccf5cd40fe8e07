from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

DAYS_OF_WEEK = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


@dataclass(frozen=True, slots=True)
class PackageOption:
    id: str
    label: str
    price: float | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True)
class TreatOption:
    key: str
    label: str
    price: float


@dataclass(frozen=True, slots=True)
class AdditionalDesignOption:
    id: str
    name: str
    base_price: float
    large_price_increase: float = 0
    per_dozen_price: float | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True)
class ClockTime:
    hour: int
    minute: int
    time_of_day: str  # "morning" | "evening"

    def label(self) -> str:
        return f"{self.hour}:{self.minute:02d} {self._suffix()}"

    def minutes_of_day(self) -> int:
        hour = self.hour % 12 + (12 if self._suffix() == "PM" else 0)
        return hour * 60 + self.minute

    def _suffix(self) -> str:
        # 12 "morning" is how the catalog spells noon.
        return "PM" if self.time_of_day == "evening" or self.hour == 12 else "AM"


@dataclass(frozen=True, slots=True)
class TimeSlot:
    start: ClockTime
    end: ClockTime

    def window(self) -> str:
        return f"{self.start.label()} - {self.end.label()}"


@dataclass(frozen=True, slots=True)
class UnavailablePeriod:
    start_date: str  # YYYY-MM-DD
    end_date: str | None = None
    reason: str | None = None


class CatalogProvider(Protocol):
    """Read-only reference data. Every list holds active entries in sort order."""

    source: str

    def package_options(self) -> list[PackageOption]: ...

    def treat_options(self) -> list[TreatOption]: ...

    def additional_design_options(self) -> list[AdditionalDesignOption]: ...

    def time_slots(self) -> dict[str, list[TimeSlot]]: ...

    def unavailable_periods(self) -> list[UnavailablePeriod]: ...
