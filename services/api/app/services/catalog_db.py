from __future__ import annotations

from services.api.app.db import models
from services.api.app.services.catalog_base import (
    DAYS_OF_WEEK,
    AdditionalDesignOption,
    ClockTime,
    PackageOption,
    TimeSlot,
    TreatOption,
    UnavailablePeriod,
)
from sqlalchemy import select
from sqlalchemy.orm import Session


class DatabaseCatalog:
    source = "DATABASE"

    def __init__(self, db: Session) -> None:
        self._db = db

    def package_options(self) -> list[PackageOption]:
        rows = self._db.scalars(
            select(models.PackageOption)
            .where(models.PackageOption.is_active.is_(True))
            .order_by(models.PackageOption.sort_order.asc())
        )
        return [
            PackageOption(
                id=r.package_id, label=r.label, price=r.price, description=r.description
            )
            for r in rows
        ]

    def treat_options(self) -> list[TreatOption]:
        rows = self._db.scalars(
            select(models.TreatOption)
            .where(models.TreatOption.is_active.is_(True))
            .order_by(models.TreatOption.sort_order.asc())
        )
        return [TreatOption(key=r.treat_key, label=r.label, price=r.price) for r in rows]

    def additional_design_options(self) -> list[AdditionalDesignOption]:
        rows = self._db.scalars(
            select(models.AdditionalDesignOption)
            .where(models.AdditionalDesignOption.is_active.is_(True))
            .order_by(models.AdditionalDesignOption.sort_order.asc())
        )
        return [
            AdditionalDesignOption(
                id=r.id,
                name=r.name,
                description=r.description,
                base_price=r.base_price,
                large_price_increase=r.large_price_increase,
                per_dozen_price=r.per_dozen_price,
            )
            for r in rows
        ]

    def time_slots(self) -> dict[str, list[TimeSlot]]:
        rows = self._db.scalars(
            select(models.TimeSlot)
            .where(models.TimeSlot.is_active.is_(True))
            .order_by(models.TimeSlot.day_of_week.asc())
        )

        grouped: dict[str, list[TimeSlot]] = {day: [] for day in DAYS_OF_WEEK}
        for r in rows:
            if r.day_of_week not in grouped:
                continue
            grouped[r.day_of_week].append(
                TimeSlot(
                    start=ClockTime(r.start_hour, r.start_minute, r.start_time_of_day),
                    end=ClockTime(r.end_hour, r.end_minute, r.end_time_of_day),
                )
            )

        # Hours are stored on a 12-hour clock; order by time of day.
        for slots in grouped.values():
            slots.sort(key=lambda s: s.start.minutes_of_day())
        return grouped

    def unavailable_periods(self) -> list[UnavailablePeriod]:
        rows = self._db.scalars(
            select(models.UnavailablePeriod)
            .where(models.UnavailablePeriod.is_active.is_(True))
            .order_by(models.UnavailablePeriod.start_date.asc())
        )
        return [
            UnavailablePeriod(start_date=r.start_date, end_date=r.end_date, reason=r.reason)
            for r in rows
        ]
