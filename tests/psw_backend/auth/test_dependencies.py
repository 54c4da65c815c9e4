import jwt
import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from psw_backend.auth import jwt_handler
from psw_backend.auth.dependencies import get_current_psw
from psw_backend.core import config
from psw_backend.routes.auth_routes import me


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme='Bearer', credentials=token)


def test_access_token_round_trip() -> None:
    token = jwt_handler.create_access_token('worker@example.com', expires_minutes=5)

    payload = jwt_handler.decode_access_token(token)

    assert payload['sub'] == 'worker@example.com'
    assert payload['role'] == 'psw'
    assert payload['exp'] > payload['iat']


def test_get_current_psw_resolves_worker_from_token(db, psw) -> None:
    token = jwt_handler.create_access_token(psw.email)

    current = get_current_psw(credentials=_credentials(token), db=db)

    assert current.id == psw.id
    assert me(current_psw=current) == {'id': 7, 'email': 'worker@example.com', 'full_name': 'Pat Worker'}


def test_get_current_psw_rejects_invalid_token(db) -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_current_psw(credentials=_credentials('not-a-token'), db=db)

    assert exception_info.value.status_code == 401
    assert exception_info.value.detail == 'Invalid token'


def test_get_current_psw_rejects_expired_token(db, psw) -> None:
    token = jwt_handler.create_access_token(psw.email, expires_minutes=-1)

    with pytest.raises(HTTPException) as exception_info:
        get_current_psw(credentials=_credentials(token), db=db)

    assert exception_info.value.status_code == 401


def test_get_current_psw_rejects_token_without_subject(db) -> None:
    token = jwt.encode({'role': 'psw'}, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)

    with pytest.raises(HTTPException) as exception_info:
        get_current_psw(credentials=_credentials(token), db=db)

    assert exception_info.value.detail == 'Invalid token subject'


def test_get_current_psw_rejects_unknown_worker(db) -> None:
    token = jwt_handler.create_access_token('nobody@example.com')

    with pytest.raises(HTTPException) as exception_info:
        get_current_psw(credentials=_credentials(token), db=db)

    assert exception_info.value.status_code == 401
    assert exception_info.value.detail == 'PSW not authenticated'
