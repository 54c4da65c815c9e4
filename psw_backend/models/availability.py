"""Availability model definitions."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, Time, UniqueConstraint
from psw_backend.core import config
from psw_backend.database import Base


class PswAvailabilityDay(Base):
    """One weekday (0=Sunday .. 6=Saturday) of a worker's weekly schedule."""
    __tablename__ = "psw_availability_days"
    __table_args__ = (
        UniqueConstraint('psw_profile_id', 'day_of_week', name='psw_profile_day_unique'),
    )

    id = Column(Integer, primary_key=True)
    psw_profile_id = Column(Integer, ForeignKey("psw_profiles.id", ondelete="CASCADE"), index=True, nullable=False)
    day_of_week = Column(Integer, nullable=False)
    is_available = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime)
    updated_at = Column(DateTime)


class PswAvailabilitySlot(Base):
    """A bookable time window on a given day."""
    __tablename__ = "psw_availability_slots"
    __table_args__ = (
        UniqueConstraint('availability_day_id', 'start_time', 'end_time', name='day_start_end_unique'),
        Index('psw_profile_day_idx', 'psw_profile_id', 'availability_day_id'),
    )

    id = Column(Integer, primary_key=True)
    # Denormalized from the day row so a whole schedule can be read by profile.
    psw_profile_id = Column(Integer, ForeignKey("psw_profiles.id", ondelete="CASCADE"), index=True, nullable=False)
    availability_day_id = Column(
        Integer,
        ForeignKey("psw_availability_days.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    slot_duration_minutes = Column(Integer, default=config.DEFAULT_SLOT_DURATION_MINUTES, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime)
    updated_at = Column(DateTime)
