from datetime import datetime, time

from sqlalchemy.orm import Session

from psw_backend.models.availability import PswAvailabilityDay, PswAvailabilitySlot


class AvailabilityRepository:
    """Queries over the day and slot tables of one database session.

    Writes are flushed immediately so later checks in the same transaction
    see them.
    """

    def __init__(self, db: Session):
        self.db = db

    def list_days(self, profile_id: int) -> list[PswAvailabilityDay]:
        return self.db.query(PswAvailabilityDay).filter(
            PswAvailabilityDay.psw_profile_id == profile_id,
        ).order_by(PswAvailabilityDay.day_of_week.asc()).all()

    def list_slots_by_day(self, profile_id: int, day_id: int) -> list[PswAvailabilitySlot]:
        return self.db.query(PswAvailabilitySlot).filter(
            PswAvailabilitySlot.psw_profile_id == profile_id,
            PswAvailabilitySlot.availability_day_id == day_id,
        ).order_by(PswAvailabilitySlot.start_time.asc()).all()

    def find_day_by_profile_and_dow(self, profile_id: int, day_of_week: int) -> PswAvailabilityDay | None:
        return self.db.query(PswAvailabilityDay).filter(
            PswAvailabilityDay.psw_profile_id == profile_id,
            PswAvailabilityDay.day_of_week == day_of_week,
        ).first()

    def day_id_map(self, profile_id: int) -> dict[int, int]:
        rows = self.db.query(PswAvailabilityDay.day_of_week, PswAvailabilityDay.id).filter(
            PswAvailabilityDay.psw_profile_id == profile_id,
        ).all()
        return {day_of_week: day_id for day_of_week, day_id in rows}

    def upsert_day(self, profile_id: int, day_of_week: int, is_available: bool, now: datetime) -> PswAvailabilityDay:
        day = self.find_day_by_profile_and_dow(profile_id, day_of_week)
        if day is None:
            day = PswAvailabilityDay(
                psw_profile_id=profile_id,
                day_of_week=day_of_week,
                is_available=is_available,
                created_at=now,
                updated_at=now,
            )
            self.db.add(day)
        else:
            day.is_available = is_available
            day.updated_at = now

        self.db.flush()
        return day

    def list_slot_ids(self, profile_id: int) -> set[int]:
        rows = self.db.query(PswAvailabilitySlot.id).filter(
            PswAvailabilitySlot.psw_profile_id == profile_id,
        ).all()
        return {slot_id for (slot_id,) in rows}

    def has_duplicate_slot(
        self,
        profile_id: int,
        day_id: int,
        start_time: time,
        end_time: time,
        exclude_id: int | None = None,
    ) -> bool:
        query = self.db.query(PswAvailabilitySlot.id).filter(
            PswAvailabilitySlot.psw_profile_id == profile_id,
            PswAvailabilitySlot.availability_day_id == day_id,
            PswAvailabilitySlot.start_time == start_time,
            PswAvailabilitySlot.end_time == end_time,
        )
        if exclude_id is not None:
            query = query.filter(PswAvailabilitySlot.id != exclude_id)

        return query.first() is not None

    def has_overlapping_slot(
        self,
        profile_id: int,
        day_id: int,
        start_time: time,
        end_time: time,
        exclude_id: int | None = None,
    ) -> bool:
        query = self.db.query(PswAvailabilitySlot.id).filter(
            PswAvailabilitySlot.psw_profile_id == profile_id,
            PswAvailabilitySlot.availability_day_id == day_id,
            PswAvailabilitySlot.start_time < end_time,
            PswAvailabilitySlot.end_time > start_time,
        )
        if exclude_id is not None:
            query = query.filter(PswAvailabilitySlot.id != exclude_id)

        return query.first() is not None

    def upsert_slot(
        self,
        profile_id: int,
        day_id: int,
        slot_id: int | None,
        start_time: time,
        end_time: time,
        slot_duration_minutes: int,
        is_active: bool,
        now: datetime,
    ) -> int:
        slot = None
        if slot_id is not None:
            slot = self.db.query(PswAvailabilitySlot).filter(PswAvailabilitySlot.id == slot_id).first()

        if slot is None:
            slot = PswAvailabilitySlot(psw_profile_id=profile_id, created_at=now)
            self.db.add(slot)

        slot.availability_day_id = day_id
        slot.start_time = start_time
        slot.end_time = end_time
        slot.slot_duration_minutes = slot_duration_minutes
        slot.is_active = is_active
        slot.updated_at = now

        self.db.flush()
        return slot.id

    def delete_slots_by_ids(self, slot_ids: set[int]) -> int:
        if not slot_ids:
            return 0

        return self.db.query(PswAvailabilitySlot).filter(
            PswAvailabilitySlot.id.in_(sorted(slot_ids)),
        ).delete(synchronize_session=False)
