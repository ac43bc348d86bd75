"""Unit tests for the availability ledger."""

from datetime import datetime, time, timedelta, timezone

import pytest

from travel_api.core.exceptions import ConflictError
from travel_api.models.target import EventTarget, PackageTarget
from travel_api.schemas.availability import (
    AvailabilityQuery,
    CreateAvailabilityRequest,
    UpdateAvailabilityRequest,
)
from travel_api.services.availability_service import AvailabilityService


@pytest.mark.asyncio
async def test_check_availability(test_session, package, package_slot, travel_date):
    service = AvailabilityService(test_session)
    target = PackageTarget(package.id)

    assert await service.check_availability(target, travel_date, 4)
    assert not await service.check_availability(target, travel_date, 5)


@pytest.mark.asyncio
async def test_date_without_row_is_not_bookable(test_session, package, package_slot, travel_date):
    service = AvailabilityService(test_session)

    assert not await service.check_availability(PackageTarget(package.id), travel_date + timedelta(days=1), 1)


@pytest.mark.asyncio
async def test_rows_are_scoped_to_their_target(test_session, package, package_slot, event, travel_date):
    service = AvailabilityService(test_session)

    assert not await service.check_availability(EventTarget(event.id), travel_date, 1)


@pytest.mark.asyncio
async def test_inactive_row_is_not_bookable(test_session, package, package_slot, travel_date):
    package_slot.active = False
    await test_session.commit()

    service = AvailabilityService(test_session)

    assert not await service.check_availability(PackageTarget(package.id), travel_date, 1)
    assert not await service.reserve_slots(PackageTarget(package.id), travel_date, 1)


@pytest.mark.asyncio
async def test_timestamps_resolve_to_their_calendar_date(test_session, package, package_slot, travel_date):
    service = AvailabilityService(test_session)
    noon = datetime.combine(travel_date, time(12, 0), tzinfo=timezone.utc)

    assert await service.check_availability(PackageTarget(package.id), noon, 2)


@pytest.mark.asyncio
async def test_reserve_slots_until_full(test_session, package, package_slot, travel_date):
    service = AvailabilityService(test_session)
    target = PackageTarget(package.id)

    assert await service.reserve_slots(target, travel_date, 3)
    await test_session.commit()

    assert not await service.reserve_slots(target, travel_date, 2)
    assert await service.reserve_slots(target, travel_date, 1)
    await test_session.commit()

    slot = await service.get_slot(target, travel_date)
    assert slot.booked_slots == 4
    assert slot.remaining_slots == 0
    assert not await service.check_availability(target, travel_date, 1)


@pytest.mark.asyncio
async def test_create_availability_rejects_duplicate_date(test_session, package, package_slot, travel_date):
    service = AvailabilityService(test_session)

    with pytest.raises(ConflictError):
        await service.create_availability(
            CreateAvailabilityRequest(package_id=package.id, date=travel_date, total_slots=10)
        )


@pytest.mark.asyncio
async def test_create_and_list_availability(test_session, package, travel_date):
    service = AvailabilityService(test_session)

    for offset in (2, 0, 1):
        await service.create_availability(
            CreateAvailabilityRequest(
                package_id=package.id,
                date=travel_date + timedelta(days=offset),
                total_slots=5,
            )
        )

    rows = await service.list_availability(
        AvailabilityQuery(package_id=package.id, from_date=travel_date + timedelta(days=1))
    )

    assert [row.date for row in rows] == [travel_date + timedelta(days=1), travel_date + timedelta(days=2)]
    assert all(row.booked_slots == 0 for row in rows)


@pytest.mark.asyncio
async def test_capacity_cannot_drop_below_booked(test_session, package, package_slot, travel_date):
    service = AvailabilityService(test_session)
    await service.reserve_slots(PackageTarget(package.id), travel_date, 3)
    await test_session.commit()

    with pytest.raises(ConflictError):
        await service.update_availability(package_slot.id, UpdateAvailabilityRequest(total_slots=2))

    updated = await service.update_availability(package_slot.id, UpdateAvailabilityRequest(total_slots=3))
    assert updated.total_slots == 3
