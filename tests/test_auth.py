"""Session token verification through the real auth dependency."""

import time

import jwt
from fastapi.testclient import TestClient
from starlette import status

from promptpilot.config import settings
from promptpilot.prompts.models import PromptRecord
from tests.conftest import make_completion


def make_token(sub: str = "user_jwt", expires_in: int = 300, key: str | None = None) -> str:
    now = int(time.time())
    payload = {"sub": sub, "sid": "sess_1", "iat": now, "exp": now + expires_in}
    return jwt.encode(payload, key or settings.auth_jwt_key, algorithm="HS256")


def test_valid_bearer_token_identifies_user(anonymous_client: TestClient, db, mock_llm):
    mock_llm.generate_completion.return_value = make_completion("Just a friendly chat.", total_tokens=7)

    response = anonymous_client.post(
        "/prompt/generate",
        json={"goal": "Say hello nicely"},
        headers={"Authorization": f"Bearer {make_token()}"},
    )

    assert response.status_code == status.HTTP_200_OK
    assert db.query(PromptRecord).one().user_id == "user_jwt"


def test_session_cookie_is_accepted(anonymous_client: TestClient, db):
    anonymous_client.cookies.set("__session", make_token(sub="user_cookie"))

    response = anonymous_client.get("/prompt/history")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["total"] == 0


def test_expired_token_rejected(anonymous_client: TestClient):
    response = anonymous_client.get(
        "/prompt/history",
        headers={"Authorization": f"Bearer {make_token(expires_in=-60)}"},
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_token_signed_with_wrong_key_rejected(anonymous_client: TestClient):
    token = make_token(key="another-signing-key-that-is-long-enough-0000")

    response = anonymous_client.get(
        "/prompt/history", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["details"] == "Invalid or expired session token"
