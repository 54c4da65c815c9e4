from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from psw_backend.auth.dependencies import get_current_psw
from psw_backend.core.exceptions import ServiceError
from psw_backend.database import ensure_availability_schema, get_db
from psw_backend.models.psw import Psw
from psw_backend.schemas.availability import ScheduleResponse, SyncAvailabilityRequest
from psw_backend.services.availability_service import AvailabilityService

router = APIRouter(tags=['availability'])

DATABASE_UNAVAILABLE_DETAIL = 'Database unavailable. Verify DATABASE_URL and Postgres credentials.'


def ensure_database_ready() -> None:
    try:
        ensure_availability_schema()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


def raise_service_error(exc: ServiceError) -> None:
    raise HTTPException(status_code=exc.status_code, detail=exc.to_detail()) from exc


@router.get('', response_model=ScheduleResponse)
def get_my_availability(
    current_psw: Psw = Depends(get_current_psw),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return AvailabilityService(db).get_for_psw(current_psw)
    except ServiceError as exc:
        raise_service_error(exc)
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


@router.put('', response_model=ScheduleResponse)
@router.post('/sync', response_model=ScheduleResponse)
def sync_my_availability(
    data: SyncAvailabilityRequest,
    current_psw: Psw = Depends(get_current_psw),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return AvailabilityService(db).sync_for_psw(current_psw, data)
    except ServiceError as exc:
        raise_service_error(exc)
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc
