import time

import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from student_records.api.deps import get_current_user
from student_records.core.errors import InvalidTokenError, MissingTokenError
from student_records.services.auth import (
    ACCESS_TOKEN_TTL_SECONDS,
    create_access_token,
    verify_access_token,
)

from conftest import TEST_SECRET

NO_TOKEN = "Access denied. No token provided."
BAD_TOKEN = "Invalid or expired token."


def test_valid_token_reaches_protected_route(client, auth_headers):
    response = client.get("/students", headers=auth_headers)
    assert response.status_code == 200


def test_missing_header_is_401(client):
    response = client.get("/students")
    assert response.status_code == 401
    assert response.json() == {"message": NO_TOKEN}


@pytest.mark.parametrize("header", ["InvalidFormat token123", "bearer abc", "Token abc", "Bearer"])
def test_non_bearer_scheme_is_treated_as_missing(client, header):
    response = client.get("/students", headers={"Authorization": header})
    assert response.status_code == 401
    assert response.json() == {"message": NO_TOKEN}


def test_garbage_token_is_400(client):
    response = client.get("/students", headers={"Authorization": "Bearer invalidtoken"})
    assert response.status_code == 400
    assert response.json() == {"message": BAD_TOKEN}


def test_token_signed_with_other_secret_is_400(client, user):
    token = create_access_token(user.id, user.username, secret="wrong-secret")
    response = client.get("/students", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 400
    assert response.json() == {"message": BAD_TOKEN}


def test_expired_token_is_400(client, user):
    issued = int(time.time()) - ACCESS_TOKEN_TTL_SECONDS - 60
    token = create_access_token(user.id, user.username, secret=TEST_SECRET, issued_at=issued)
    response = client.get("/students/1", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 400
    assert response.json() == {"message": BAD_TOKEN}


def test_tampered_payload_is_rejected():
    token = create_access_token(1, "testuser", secret=TEST_SECRET)
    forged = create_access_token(2, "admin", secret=TEST_SECRET)
    spliced = f"{forged.split('.')[0]}.{token.split('.')[1]}"
    assert verify_access_token(spliced, secret=TEST_SECRET) is None


def test_token_expires_exactly_one_hour_after_issue():
    issued = 1_700_000_000
    token = create_access_token(7, "ops", secret=TEST_SECRET, issued_at=issued)
    assert verify_access_token(token, secret=TEST_SECRET, now=issued + ACCESS_TOKEN_TTL_SECONDS - 1) is not None
    assert verify_access_token(token, secret=TEST_SECRET, now=issued + ACCESS_TOKEN_TTL_SECONDS) is None


def test_guard_attaches_identity_to_request():
    guarded_app = FastAPI()

    @guarded_app.get("/whoami")
    def whoami(request: Request, claims=Depends(get_current_user)):
        attached = request.state.user
        return {
            "id": attached.id,
            "username": attached.username,
            "same": attached is claims,
            "window": (attached.expires_at - attached.issued_at).total_seconds(),
        }

    @guarded_app.exception_handler(MissingTokenError)
    @guarded_app.exception_handler(InvalidTokenError)
    async def _translate(request, exc):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    token = create_access_token(42, "registrar", secret=TEST_SECRET)
    response = TestClient(guarded_app).get("/whoami", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json() == {"id": 42, "username": "registrar", "same": True, "window": 3600.0}
