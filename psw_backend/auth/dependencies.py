from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWTError
from sqlalchemy.orm import Session

from psw_backend.auth import jwt_handler
from psw_backend.database import get_db
from psw_backend.models.psw import Psw

security = HTTPBearer()


def get_current_psw(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> Psw:
    token = credentials.credentials
    try:
        payload = jwt_handler.decode_access_token(token)
    except PyJWTError as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc

    email = payload.get("sub")
    if not email:
        raise HTTPException(status_code=401, detail="Invalid token subject")

    psw = db.query(Psw).filter(Psw.email == email).first()
    if psw is None:
        raise HTTPException(status_code=401, detail="PSW not authenticated")
    return psw
