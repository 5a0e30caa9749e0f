from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from student_records.core.config import Settings, settings
from student_records.core.database import SessionLocal
from student_records.core.errors import InvalidTokenError, MissingTokenError
from student_records.services.auth import AccessClaims, verify_access_token

BEARER_PREFIX = "Bearer "


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_settings() -> Settings:
    return settings


def get_current_user(
    request: Request,
    authorization: str | None = Header(default=None),
    app_settings: Settings = Depends(get_settings),
) -> AccessClaims:
    # A header without the Bearer scheme is treated the same as no header.
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise MissingTokenError()
    claims = verify_access_token(authorization[len(BEARER_PREFIX):], secret=app_settings.auth_secret)
    if claims is None:
        raise InvalidTokenError()
    request.state.user = claims
    return claims
