import base64
import hashlib
import hmac
import json
import logging
import os
import time
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from student_records.core.errors import AuthenticationError, StoreError, ValidationError
from student_records.models.entities import User

logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 120_000
ACCESS_TOKEN_TTL_SECONDS = 60 * 60
TOKEN_TYPE = "access"
LOGIN_REQUIRED_MESSAGE = "Username and password are required."


@dataclass(frozen=True)
class AccessClaims:
    id: int
    username: str
    issued_at: datetime
    expires_at: datetime


def _b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("utf-8").rstrip("=")


def _b64url_decode(raw: str) -> bytes:
    padding = "=" * ((4 - len(raw) % 4) % 4)
    return base64.urlsafe_b64decode(raw + padding)


def hash_password(password: str) -> tuple[str, str]:
    salt = os.urandom(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        PBKDF2_ITERATIONS,
    )
    return _b64url_encode(salt), _b64url_encode(digest)


def verify_password(password: str, salt_b64: str, digest_b64: str) -> bool:
    salt = _b64url_decode(salt_b64)
    expected = _b64url_decode(digest_b64)
    actual = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        PBKDF2_ITERATIONS,
    )
    return hmac.compare_digest(actual, expected)


# Compared against when the username is unknown so both failure paths hash once.
_DUMMY_SALT, _DUMMY_DIGEST = hash_password("not-a-real-password")


def _sign(payload_b64: str, secret: str) -> str:
    sig = hmac.new(
        secret.encode("utf-8"),
        payload_b64.encode("utf-8"),
        hashlib.sha256,
    ).digest()
    return _b64url_encode(sig)


def create_access_token(
    user_id: int,
    username: str,
    *,
    secret: str,
    issued_at: int | None = None,
) -> str:
    iat = int(time.time()) if issued_at is None else int(issued_at)
    payload = {
        "sub": str(user_id),
        "username": username,
        "typ": TOKEN_TYPE,
        "iat": iat,
        "exp": iat + ACCESS_TOKEN_TTL_SECONDS,
    }
    payload_raw = json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")
    payload_b64 = _b64url_encode(payload_raw)
    return f"{payload_b64}.{_sign(payload_b64, secret)}"


def verify_access_token(token: str, *, secret: str, now: int | None = None) -> AccessClaims | None:
    try:
        payload_b64, sig_b64 = token.split(".", 1)
    except ValueError:
        return None

    expected_sig = _sign(payload_b64, secret).encode("utf-8")
    if not hmac.compare_digest(expected_sig, sig_b64.encode("utf-8")):
        return None

    try:
        payload = json.loads(_b64url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(payload, dict):
        return None

    sub = payload.get("sub")
    username = payload.get("username")
    iat = payload.get("iat")
    exp = payload.get("exp")
    if payload.get("typ") != TOKEN_TYPE:
        return None
    if not isinstance(sub, str) or not sub.isdigit() or not isinstance(username, str):
        return None
    if not isinstance(iat, int) or not isinstance(exp, int):
        return None
    current = int(time.time()) if now is None else int(now)
    if exp <= current:
        return None
    return AccessClaims(
        id=int(sub),
        username=username,
        issued_at=datetime.fromtimestamp(iat, tz=timezone.utc),
        expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
    )


def authenticate(db: Session, username, password) -> User:
    if not isinstance(username, str) or not username:
        raise ValidationError(LOGIN_REQUIRED_MESSAGE)
    if not isinstance(password, str) or not password:
        raise ValidationError(LOGIN_REQUIRED_MESSAGE)

    try:
        user = db.query(User).filter(User.username == username).one_or_none()
    except SQLAlchemyError as exc:
        raise StoreError() from exc

    if user is None:
        verify_password(password, _DUMMY_SALT, _DUMMY_DIGEST)
        logger.info("Login failed for %r: unknown user", username)
        raise AuthenticationError()
    if not verify_password(password, user.password_salt, user.password_hash):
        logger.info("Login failed for %r: bad password", username)
        raise AuthenticationError()
    return user
