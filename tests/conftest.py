import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from psw_backend.database import Base  # noqa: E402
from psw_backend.models.availability import PswAvailabilityDay, PswAvailabilitySlot  # noqa: E402
from psw_backend.models.psw import Psw  # noqa: E402
from psw_backend.models.psw_profile import PswProfile  # noqa: E402

TABLES = [Psw.__table__, PswProfile.__table__, PswAvailabilityDay.__table__, PswAvailabilitySlot.__table__]


@pytest.fixture
def db():
    engine = create_engine('sqlite:///:memory:')
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine, tables=TABLES)

    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine, tables=list(reversed(TABLES)))


@pytest.fixture
def psw(db):
    worker = Psw(id=7, email='worker@example.com', full_name='Pat Worker', hashed_password='')
    db.add(worker)
    db.commit()
    db.refresh(worker)
    return worker


@pytest.fixture
def profile(db, psw):
    psw_profile = PswProfile(id=42, psw_id=psw.id, min_booking_slot=30)
    db.add(psw_profile)
    db.commit()
    db.refresh(psw_profile)
    return psw_profile
