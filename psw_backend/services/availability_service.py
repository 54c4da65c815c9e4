"""Weekly availability schedules for PSWs.

``AvailabilitySyncEngine`` reads a profile's schedule and reconciles it
against a submitted desired state in one transaction. The submitted slots
are authoritative: stored slots that are not resubmitted are deleted.
"""

import logging
from datetime import datetime, time
from typing import Callable, Iterable

from sqlalchemy.orm import Session

from psw_backend.core import config
from psw_backend.core.exceptions import (
    AvailabilityValidationError,
    NotFoundError,
    OperationFailedError,
    ServiceError,
)
from psw_backend.database import transaction
from psw_backend.models.availability import PswAvailabilitySlot
from psw_backend.models.psw import Psw
from psw_backend.repositories.availability_repository import AvailabilityRepository
from psw_backend.repositories.psw_profile_repository import PswProfileRepository
from psw_backend.schemas.availability import DayPayload, FlatSlotPayload, SlotPayload, SyncAvailabilityRequest

logger = logging.getLogger(__name__)

STORED_TIME_FORMAT = '%H:%M:%S'


def format_stored_time(value) -> str:
    if isinstance(value, time):
        return value.strftime(STORED_TIME_FORMAT)
    return str(value)


def format_time_label(value) -> str:
    """Render a stored time as ``9:00 AM``; values that don't parse are returned as-is."""
    if isinstance(value, time):
        parsed = value
    else:
        try:
            parsed = datetime.strptime(str(value), STORED_TIME_FORMAT).time()
        except (TypeError, ValueError):
            return format_stored_time(value)

    hour = parsed.hour % 12 or 12
    suffix = 'AM' if parsed.hour < 12 else 'PM'
    return f'{hour}:{parsed.minute:02d} {suffix}'


def serialize_slot(slot: PswAvailabilitySlot) -> dict:
    return {
        'id': slot.id,
        'availability_day_id': slot.availability_day_id,
        'start_time': format_stored_time(slot.start_time),
        'end_time': format_stored_time(slot.end_time),
        'slot_duration_minutes': slot.slot_duration_minutes,
        'is_active': bool(slot.is_active),
        'start_time_formatted': format_time_label(slot.start_time),
        'end_time_formatted': format_time_label(slot.end_time),
    }


class AvailabilitySyncEngine:
    def __init__(self, db: Session, clock: Callable[[], datetime] = datetime.now):
        self.db = db
        self.clock = clock
        self.profiles = PswProfileRepository(db)
        self.availability = AvailabilityRepository(db)

    def list_schedule(self, profile_id: int) -> dict:
        profile = self.profiles.get(profile_id)
        if profile is None:
            raise NotFoundError('PSW profile not found.')

        days = []
        for day in self.availability.list_days(profile_id):
            days.append({
                'id': day.id,
                'day_of_week': day.day_of_week,
                'is_available': bool(day.is_available),
                'slots': [
                    serialize_slot(slot)
                    for slot in self.availability.list_slots_by_day(profile_id, day.id)
                ],
            })

        return {
            'min_booking_slot': profile.min_booking_slot or config.DEFAULT_MIN_BOOKING_SLOT,
            'days': days,
        }

    def sync(
        self,
        profile_id: int,
        days: Iterable[DayPayload],
        min_booking_slot: int | None = None,
        slots: Iterable[FlatSlotPayload] = (),
    ) -> dict:
        profile = self.profiles.get(profile_id)
        if profile is None:
            raise NotFoundError('PSW profile not found.')

        days = list(days)
        slots = list(slots)

        try:
            with transaction(self.db):
                created, updated, deleted = self._reconcile(profile, days, min_booking_slot, slots)
        except ServiceError:
            raise
        except Exception as exc:
            logger.exception('Availability sync failed for profile %s', profile_id)
            raise OperationFailedError('Unable to sync availability.') from exc

        logger.info(
            'Availability synced for profile %s: %s created, %s updated, %s deleted',
            profile_id,
            created,
            updated,
            deleted,
        )
        return self.list_schedule(profile_id)

    def _reconcile(
        self,
        profile,
        days: list[DayPayload],
        min_booking_slot: int | None,
        flat_slots: list[FlatSlotPayload],
    ) -> tuple[int, int, int]:
        now = self.clock()
        profile_id = profile.id

        if min_booking_slot is not None:
            self.profiles.update_min_booking_slot(profile, min_booking_slot, now)

        for day in days:
            self.availability.upsert_day(profile_id, day.day_of_week, day.is_available, now)

        submitted_days = {day.day_of_week for day in days}
        day_ids = self.availability.day_id_map(profile_id)
        existing_ids = self.availability.list_slot_ids(profile_id)
        incoming_ids: set[int] = set()
        created = updated = 0

        submitted: list[tuple[int, SlotPayload]] = [
            (day.day_of_week, slot) for day in days for slot in day.slots
        ]
        submitted.extend((slot.day_of_week, slot) for slot in flat_slots)

        for day_of_week, slot in submitted:
            if day_of_week not in submitted_days:
                raise AvailabilityValidationError(
                    'days',
                    f'Day {day_of_week} must be included in days payload.',
                )

            if slot.id is not None and slot.id not in existing_ids:
                raise AvailabilityValidationError(
                    'slots',
                    f'Slot {slot.id} does not belong to this schedule.',
                )

            if slot.id is not None and slot.id in incoming_ids:
                raise AvailabilityValidationError(
                    'slots',
                    f'Slot {slot.id} is listed more than once.',
                )

            day_id = day_ids[day_of_week]
            self._validate_slot(profile_id, day_id, day_of_week, slot)

            # Flushed on write, so the next slot in this batch is checked against it.
            slot_id = self.availability.upsert_slot(
                profile_id,
                day_id,
                slot.id,
                slot.start_time,
                slot.end_time,
                slot.slot_duration_minutes,
                slot.is_active,
                now,
            )
            if slot.id is None:
                created += 1
            else:
                updated += 1
            incoming_ids.add(slot_id)

        deleted = self.availability.delete_slots_by_ids(existing_ids - incoming_ids)
        return created, updated, deleted

    def _validate_slot(self, profile_id: int, day_id: int, day_of_week: int, slot: SlotPayload) -> None:
        if slot.end_time <= slot.start_time:
            raise AvailabilityValidationError(
                'slots',
                f'End time must be after start time for day {day_of_week}.',
            )

        if self.availability.has_duplicate_slot(profile_id, day_id, slot.start_time, slot.end_time, slot.id):
            raise AvailabilityValidationError(
                'slots',
                f'Duplicate slot time for day {day_of_week} detected.',
            )

        if self.availability.has_overlapping_slot(profile_id, day_id, slot.start_time, slot.end_time, slot.id):
            raise AvailabilityValidationError(
                'slots',
                f'Overlapping slot for day {day_of_week} detected.',
            )


class AvailabilityService:
    """Resolves the calling worker's profile, creating it on first access."""

    def __init__(self, db: Session, clock: Callable[[], datetime] = datetime.now):
        self.clock = clock
        self.profiles = PswProfileRepository(db)
        self.engine = AvailabilitySyncEngine(db, clock=clock)

    def get_for_psw(self, psw: Psw) -> dict:
        profile = self.profiles.get_or_create_for_psw(psw.id, self.clock())
        return self.engine.list_schedule(profile.id)

    def sync_for_psw(self, psw: Psw, request: SyncAvailabilityRequest) -> dict:
        profile = self.profiles.get_or_create_for_psw(psw.id, self.clock())
        return self.engine.sync(
            profile.id,
            request.days,
            min_booking_slot=request.min_booking_slot,
            slots=request.slots,
        )
