from fastapi import APIRouter, Depends

from psw_backend.auth.dependencies import get_current_psw
from psw_backend.models.psw import Psw

router = APIRouter(tags=['auth'])


@router.get("/me")
def me(current_psw: Psw = Depends(get_current_psw)):
    return {"id": current_psw.id, "email": current_psw.email, "full_name": current_psw.full_name}
