from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .errors import Unauthorized
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
ADMIN_ROLE = "admin"

_security = HTTPBearer(auto_error=False)


# PUBLIC_INTERFACE
def issue_token(settings: Settings, now: Optional[datetime] = None) -> str:
    """
    Sign a session token carrying the admin role claim.

    The token expires settings.token_ttl_hours after `now` (defaults to the
    current UTC time).
    """
    issued = now or datetime.now(timezone.utc)
    claims = {
        "role": ADMIN_ROLE,
        "iat": issued,
        "exp": issued + timedelta(hours=settings.token_ttl_hours),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=JWT_ALGORITHM)


# PUBLIC_INTERFACE
def login(password: Optional[str], settings: Settings) -> str:
    """
    Exchange the shared admin password for a session token.

    Raises:
        Unauthorized if the password does not match exactly.
    """
    if password is None or password != settings.admin_password:
        logger.warning("Rejected login attempt with wrong password")
        raise Unauthorized("Wrong password")

    logger.info("Admin logged in")
    return issue_token(settings)


# PUBLIC_INTERFACE
def decode_token(token: str, settings: Settings) -> Dict[str, Any]:
    """
    Verify signature and expiry of a session token and return its claims.

    Raises:
        Unauthorized if the token is malformed, tampered with or expired.
    """
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        logger.info("Rejected expired session token")
        raise Unauthorized("Session expired or invalid") from e
    except jwt.InvalidTokenError as e:
        logger.info("Rejected invalid session token: %s", e)
        raise Unauthorized("Session expired or invalid") from e


# PUBLIC_INTERFACE
def require_admin(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(_security),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """
    FastAPI dependency guarding write routes.

    Usage:
        @router.post("", dependencies=[Depends(require_admin)])

    Any validly signed, unexpired token passes; the role claim is not checked.

    Raises:
        Unauthorized(401) if no bearer token is sent or it fails verification.
    """
    if creds is None or not creds.credentials:
        raise Unauthorized("Not logged in")
    return decode_token(creds.credentials, settings)
