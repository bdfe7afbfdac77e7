"""Session tokens and the cookie that carries them."""
import logging
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Response

from paw_haven.core.config import Settings, settings
from paw_haven.core.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def issue_token(claims: dict, config: Settings = settings) -> str:
    """Sign the caller-supplied identity claims for ``TOKEN_TTL_DAYS``."""
    now = datetime.now(timezone.utc)
    payload = {
        **claims,
        "iat": now,
        "exp": now + timedelta(days=config.TOKEN_TTL_DAYS),
    }
    return jwt.encode(payload, config.ACCESS_TOKEN_SECRET, algorithm=ALGORITHM)


def decode_token(token: str, config: Settings = settings) -> dict:
    try:
        claims = jwt.decode(token, config.ACCESS_TOKEN_SECRET, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Session expired")
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected session token: {e}")
        raise UnauthorizedError()

    if not claims.get("email"):
        raise UnauthorizedError()
    return claims


def _cookie_flags(config: Settings) -> dict:
    return {
        "httponly": True,
        "secure": config.is_production,
        "samesite": "none" if config.is_production else "strict",
    }


def set_session_cookie(response: Response, token: str, config: Settings = settings) -> None:
    response.set_cookie(config.SESSION_COOKIE_NAME, token, **_cookie_flags(config))


def clear_session_cookie(response: Response, config: Settings = settings) -> None:
    response.delete_cookie(config.SESSION_COOKIE_NAME, **_cookie_flags(config))
