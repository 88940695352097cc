"""Session lookup for BuildRight API routes.

Sessions are issued by the identity provider in front of this service and
stored in Redis as ``session:<token>`` JSON. This module only resolves a
token to a user; it never checks passwords.
"""

from __future__ import annotations

import json
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta

import redis
from fastapi import Cookie, Header, HTTPException

from buildright.config import get_config

logger = logging.getLogger(__name__)

DEV_USER_ID = "dev-user"

# In-memory fallback for development when Redis is missing
_memory_sessions: dict[str, dict] = {}


@dataclass(slots=True)
class CurrentUser:
    user_id: str
    username: str | None = None


def get_redis_client() -> redis.Redis:
    """Get Redis client for session storage."""
    return redis.from_url(get_config().auth.redis_url, decode_responses=True)


def create_session(user_id: str, username: str | None = None) -> str:
    """Store a session for ``user_id`` and return its token.

    Used by the identity provider integration and by tests.
    """
    expiry_hours = get_config().auth.session_expiry_hours
    session_token = secrets.token_urlsafe(32)
    session_data = {
        "user_id": user_id,
        "username": username,
        "created_at": datetime.utcnow().isoformat(),
        "expires_at": (datetime.utcnow() + timedelta(hours=expiry_hours)).isoformat(),
    }

    try:
        get_redis_client().setex(
            f"session:{session_token}", expiry_hours * 3600, json.dumps(session_data)
        )
    except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError):
        logger.warning("Redis unavailable, using in-memory session storage")
        _memory_sessions[session_token] = session_data

    return session_token


def _is_expired(session_data: dict) -> bool:
    expires_at = datetime.fromisoformat(session_data["expires_at"])
    return datetime.utcnow() > expires_at


def validate_session(session_token: str | None) -> dict | None:
    """Return session data for a live token, otherwise None."""
    if not session_token:
        return None

    try:
        redis_client = get_redis_client()
        session_data_str = redis_client.get(f"session:{session_token}")
    except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError):
        session_data = _memory_sessions.get(session_token)
        if session_data is None:
            return None
        if _is_expired(session_data):
            del _memory_sessions[session_token]
            return None
        return session_data

    if not session_data_str:
        return None

    try:
        session_data = json.loads(session_data_str)
        if _is_expired(session_data):
            redis_client.delete(f"session:{session_token}")
            return None
        return session_data
    except (json.JSONDecodeError, KeyError, ValueError):
        redis_client.delete(f"session:{session_token}")
        return None


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


def require_user(
    session: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> CurrentUser:
    """Dependency resolving the caller; rejects with 401 before any query runs.

    The token is read from the ``session`` cookie or an
    ``Authorization: Bearer`` header.
    """
    if get_config().auth.disabled:
        return CurrentUser(user_id=DEV_USER_ID, username="developer")

    session_data = validate_session(session or _bearer_token(authorization))
    if not session_data or not session_data.get("user_id"):
        raise HTTPException(status_code=401, detail="Unauthorized")

    return CurrentUser(
        user_id=str(session_data["user_id"]),
        username=session_data.get("username"),
    )
