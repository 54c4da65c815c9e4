from datetime import datetime

from sqlalchemy.orm import Session

from psw_backend.core import config
from psw_backend.models.psw_profile import PswProfile


class PswProfileRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, profile_id: int) -> PswProfile | None:
        return self.db.query(PswProfile).filter(PswProfile.id == profile_id).first()

    def find_by_psw_id(self, psw_id: int) -> PswProfile | None:
        return self.db.query(PswProfile).filter(PswProfile.psw_id == psw_id).first()

    def create(self, psw_id: int, now: datetime) -> PswProfile:
        profile = PswProfile(
            psw_id=psw_id,
            min_booking_slot=config.DEFAULT_MIN_BOOKING_SLOT,
            created_at=now,
            updated_at=now,
        )
        self.db.add(profile)
        self.db.flush()
        return profile

    def get_or_create_for_psw(self, psw_id: int, now: datetime) -> PswProfile:
        """Return the worker's profile, creating and committing it on first access."""
        profile = self.find_by_psw_id(psw_id)
        if profile is None:
            profile = self.create(psw_id, now)
            self.db.commit()
            self.db.refresh(profile)
        return profile

    def update_min_booking_slot(self, profile: PswProfile, min_booking_slot: int, now: datetime) -> None:
        profile.min_booking_slot = min_booking_slot
        profile.updated_at = now
        self.db.flush()
