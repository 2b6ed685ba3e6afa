"""Request authentication.

Handlers receive an ``AuthContext`` through the ``get_auth_context``
dependency instead of looking the session up themselves. The identity
provider issues signed session JWTs; we only verify them.
"""

from dataclasses import dataclass

import jwt
from fastapi import Request

from promptpilot.config import settings
from promptpilot.errors import ConfigurationError, Unauthorized
from promptpilot.logging import user_context

SESSION_COOKIE = "__session"


@dataclass(frozen=True)
class AuthContext:
    user_id: str
    session_id: str | None = None


def decode_session_token(token: str, key: str, algorithms: list[str]) -> dict:
    """Verify a session token. Raises jwt.PyJWTError on failure."""
    return jwt.decode(
        token,
        key,
        algorithms=algorithms,
        options={"require": ["sub", "exp"], "verify_aud": False},
    )


def _extract_token(request: Request) -> str | None:
    authorization = request.headers.get("authorization", "")
    if authorization.startswith("Bearer "):
        return authorization[7:].strip() or None
    return request.cookies.get(SESSION_COOKIE)


async def get_auth_context(request: Request) -> AuthContext:
    """FastAPI dependency: the authenticated caller, or 401."""
    token = _extract_token(request)
    if not token:
        raise Unauthorized(details="You must be signed in to use this API")

    if not settings.auth_jwt_key:
        raise ConfigurationError("AUTH_JWT_KEY is required to verify session tokens")

    key = settings.auth_jwt_key.replace("\\n", "\n")
    algorithms = [a.strip() for a in settings.auth_jwt_algorithms.split(",") if a.strip()]

    try:
        payload = decode_session_token(token, key, algorithms)
    except jwt.PyJWTError as e:
        raise Unauthorized(details="Invalid or expired session token") from e

    context = AuthContext(user_id=payload["sub"], session_id=payload.get("sid"))
    user_context.set(context.user_id)
    return context
