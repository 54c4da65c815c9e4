"""PSW account model definitions."""

from sqlalchemy import Column, Integer, String
from psw_backend.database import Base


class Psw(Base):
    """Represents a professional service worker account."""
    __tablename__ = "psws"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String)
    hashed_password = Column(String)
