from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from student_records.api.deps import get_db, get_settings
from student_records.core.config import Settings
from student_records.schemas.api import AuthOut
from student_records.services.auth import authenticate, create_access_token

router = APIRouter(prefix="/auth")


@router.post("/login", response_model=AuthOut)
def login(
    body: Any = Body(default=None),
    db: Session = Depends(get_db),
    app_settings: Settings = Depends(get_settings),
):
    # Arrays, scalars and a missing body all count as "no fields given".
    fields = body if isinstance(body, dict) else {}
    user = authenticate(db, fields.get("username"), fields.get("password"))
    token = create_access_token(user.id, user.username, secret=app_settings.auth_secret)
    return {"token": token}
