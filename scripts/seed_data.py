from __future__ import annotations

import argparse
from uuid import uuid4

from services.api.app.db.database import db_session
from services.api.app.db.init_db import init_db
from services.api.app.db.models import (
    AdditionalDesignOption,
    PackageOption,
    TimeSlot,
    TreatOption,
    UnavailablePeriod,
)
from services.api.app.services.catalog_static import StaticCatalog
from sqlalchemy import delete, select
from sqlalchemy.orm import Session


def seed_catalog(db: Session, *, replace_calendar: bool = True) -> None:
    """Upsert the built-in catalog into the catalog tables."""

    catalog = StaticCatalog()

    for sort_order, option in enumerate(catalog.package_options(), start=1):
        row = db.scalar(select(PackageOption).where(PackageOption.package_id == option.id))
        if row is None:
            row = PackageOption(id=uuid4().hex, package_id=option.id)
            db.add(row)
        row.label = option.label
        row.description = option.description
        row.price = option.price
        row.is_active = True
        row.sort_order = sort_order

    for sort_order, treat in enumerate(catalog.treat_options(), start=1):
        row = db.scalar(select(TreatOption).where(TreatOption.treat_key == treat.key))
        if row is None:
            row = TreatOption(id=uuid4().hex, treat_key=treat.key)
            db.add(row)
        row.label = treat.label
        row.price = treat.price
        row.is_active = True
        row.sort_order = sort_order

    for sort_order, design in enumerate(catalog.additional_design_options(), start=1):
        row = db.scalar(
            select(AdditionalDesignOption).where(AdditionalDesignOption.name == design.name)
        )
        if row is None:
            row = AdditionalDesignOption(id=design.id, name=design.name)
            db.add(row)
        row.description = design.description
        row.base_price = design.base_price
        row.large_price_increase = design.large_price_increase
        row.per_dozen_price = design.per_dozen_price
        row.is_active = True
        row.sort_order = sort_order

    if replace_calendar:
        db.execute(delete(TimeSlot))
        db.execute(delete(UnavailablePeriod))

        for day, slots in catalog.time_slots().items():
            for slot in slots:
                db.add(
                    TimeSlot(
                        id=uuid4().hex,
                        day_of_week=day,
                        start_hour=slot.start.hour,
                        start_minute=slot.start.minute,
                        start_time_of_day=slot.start.time_of_day,
                        end_hour=slot.end.hour,
                        end_minute=slot.end.minute,
                        end_time_of_day=slot.end.time_of_day,
                    )
                )

        for period in catalog.unavailable_periods():
            db.add(
                UnavailablePeriod(
                    id=uuid4().hex,
                    start_date=period.start_date,
                    end_date=period.end_date,
                    reason=period.reason,
                )
            )


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the Sweetly Dipped catalog")
    parser.add_argument(
        "--keep-calendar",
        action="store_true",
        help="Leave existing time slots and unavailable periods untouched",
    )
    args = parser.parse_args()

    init_db()

    db = db_session()
    try:
        seed_catalog(db, replace_calendar=not args.keep_calendar)
        db.commit()
        print("Seeded catalog")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
