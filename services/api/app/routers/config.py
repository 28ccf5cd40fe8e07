from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from services.api.app.db.deps import get_catalog
from services.api.app.models.catalog import (
    AdditionalDesignOptionOut,
    ClockTimeOut,
    PackageOptionOut,
    PickupAvailabilityOut,
    TimeSlotOut,
    TreatOptionOut,
    UnavailablePeriodOut,
)
from services.api.app.services.catalog_base import CatalogProvider, TimeSlot, UnavailablePeriod
from services.api.app.services.pickup import (
    find_unavailable_period,
    generate_time_intervals,
    is_rush_order,
    parse_date,
    slots_for_date,
)

router = APIRouter()


@router.get("/v1/config/packages", response_model=list[PackageOptionOut])
def list_packages(catalog: CatalogProvider = Depends(get_catalog)) -> list[PackageOptionOut]:
    return [
        PackageOptionOut(id=p.id, label=p.label, description=p.description, price=p.price)
        for p in catalog.package_options()
    ]


@router.get("/v1/config/treats", response_model=list[TreatOptionOut])
def list_treats(catalog: CatalogProvider = Depends(get_catalog)) -> list[TreatOptionOut]:
    return [
        TreatOptionOut(key=t.key, label=t.label, price=t.price) for t in catalog.treat_options()
    ]


@router.get("/v1/config/designs", response_model=list[AdditionalDesignOptionOut])
def list_designs(
    catalog: CatalogProvider = Depends(get_catalog),
) -> list[AdditionalDesignOptionOut]:
    return [
        AdditionalDesignOptionOut(
            id=d.id,
            name=d.name,
            description=d.description,
            base_price=d.base_price,
            large_price_increase=d.large_price_increase,
            per_dozen_price=d.per_dozen_price,
        )
        for d in catalog.additional_design_options()
    ]


@router.get("/v1/config/time-slots", response_model=dict[str, list[TimeSlotOut]])
def list_time_slots(
    catalog: CatalogProvider = Depends(get_catalog),
) -> dict[str, list[TimeSlotOut]]:
    return {
        day: [_slot_out(slot) for slot in slots] for day, slots in catalog.time_slots().items()
    }


@router.get("/v1/config/unavailable-periods", response_model=list[UnavailablePeriodOut])
def list_unavailable_periods(
    catalog: CatalogProvider = Depends(get_catalog),
) -> list[UnavailablePeriodOut]:
    return [_period_out(p) for p in catalog.unavailable_periods()]


@router.get("/v1/config/pickup-availability", response_model=PickupAvailabilityOut)
def pickup_availability(
    date: str, catalog: CatalogProvider = Depends(get_catalog)
) -> PickupAvailabilityOut:
    picked = parse_date(date)
    if picked is None:
        raise HTTPException(status_code=400, detail="date must be YYYY-MM-DD")

    period = find_unavailable_period(date, catalog.unavailable_periods())
    if period is not None:
        return PickupAvailabilityOut(
            date=date,
            day_of_week=picked.strftime("%A"),
            rush_order=is_rush_order(date),
            unavailable=_period_out(period),
        )

    windows = [slot.window() for slot in slots_for_date(date, catalog.time_slots())]
    times: list[str] = []
    for window in windows:
        times.extend(t for t in generate_time_intervals(window) if t not in times)

    return PickupAvailabilityOut(
        date=date,
        day_of_week=picked.strftime("%A"),
        rush_order=is_rush_order(date),
        windows=windows,
        times=times,
    )


def _slot_out(slot: TimeSlot) -> TimeSlotOut:
    return TimeSlotOut(
        start_time=ClockTimeOut(
            hour=slot.start.hour, minute=slot.start.minute, time_of_day=slot.start.time_of_day
        ),
        end_time=ClockTimeOut(
            hour=slot.end.hour, minute=slot.end.minute, time_of_day=slot.end.time_of_day
        ),
    )


def _period_out(period: UnavailablePeriod) -> UnavailablePeriodOut:
    return UnavailablePeriodOut(
        start_date=period.start_date, end_date=period.end_date, reason=period.reason
    )
