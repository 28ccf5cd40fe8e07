from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Out(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PackageOptionOut(_Out):
    id: str
    label: str
    description: str | None = None
    price: float | None = None


class TreatOptionOut(_Out):
    key: str
    label: str
    price: float


class AdditionalDesignOptionOut(_Out):
    id: str
    name: str
    description: str | None = None
    base_price: float
    large_price_increase: float = 0
    per_dozen_price: float | None = None


class ClockTimeOut(_Out):
    hour: int
    minute: int
    time_of_day: str


class TimeSlotOut(_Out):
    start_time: ClockTimeOut
    end_time: ClockTimeOut


class UnavailablePeriodOut(_Out):
    start_date: str
    end_date: str | None = None
    reason: str | None = None


class PickupAvailabilityOut(_Out):
    date: str
    day_of_week: str | None = None
    rush_order: bool = False
    unavailable: UnavailablePeriodOut | None = None
    windows: list[str] = Field(default_factory=list)
    times: list[str] = Field(default_factory=list)
