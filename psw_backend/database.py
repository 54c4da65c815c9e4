import os
from contextlib import contextmanager
from dotenv import load_dotenv
from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from psw_backend.core import config


load_dotenv()
DATABASE_URL = os.getenv("DATABASE_URL")

engine = create_engine(DATABASE_URL, echo=config.SQL_ECHO)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_availability_schema_checked = False


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session):
    """Commit when the block finishes, roll back and re-raise on any error."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def ensure_availability_schema() -> None:
    global _availability_schema_checked

    if _availability_schema_checked:
        return

    with _schema_lock:
        if _availability_schema_checked:
            return

        inspector = inspect(engine)
        table_names = inspector.get_table_names()

        with engine.begin() as connection:
            if 'psw_profiles' in table_names:
                existing_columns = {column['name'] for column in inspector.get_columns('psw_profiles')}
                if 'min_booking_slot' not in existing_columns:
                    connection.execute(
                        text('ALTER TABLE psw_profiles ADD COLUMN min_booking_slot INTEGER NOT NULL DEFAULT 30')
                    )
            if 'psw_availability_slots' in table_names:
                connection.execute(
                    text(
                        'CREATE INDEX IF NOT EXISTS psw_profile_day_idx '
                        'ON psw_availability_slots(psw_profile_id, availability_day_id)'
                    )
                )

        _availability_schema_checked = True
