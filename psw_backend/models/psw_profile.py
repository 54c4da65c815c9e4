"""PSW profile model definitions."""

from sqlalchemy import Column, Integer, DateTime, ForeignKey
from psw_backend.core import config
from psw_backend.database import Base


class PswProfile(Base):
    """Worker-specific record that owns an availability schedule."""
    __tablename__ = "psw_profiles"

    id = Column(Integer, primary_key=True)
    psw_id = Column(Integer, ForeignKey("psws.id", ondelete="CASCADE"), unique=True, index=True, nullable=False)
    min_booking_slot = Column(Integer, nullable=False, default=config.DEFAULT_MIN_BOOKING_SLOT)
    created_at = Column(DateTime)
    updated_at = Column(DateTime)
