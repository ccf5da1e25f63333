from __future__ import annotations

import logging
import secrets
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from .models import Actor
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

_security = HTTPBasic(auto_error=False)


def _unauthorized(detail: str, basic: bool = True) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Basic"} if basic else None,
    )


def _actor_from_basic(settings: Settings, creds: Optional[HTTPBasicCredentials]) -> Actor:
    if creds is None or not creds.username:
        raise _unauthorized("Not authenticated")

    if not settings.auth_users:
        # Misconfiguration: basic auth selected but no users configured
        logger.warning("AUTH_MODE=basic but AUTH_USERS is empty; rejecting request")
        raise _unauthorized("Server authentication not configured")

    expected = settings.auth_users.get(creds.username)
    # Constant-time compare, also for unknown users
    candidate = expected if expected is not None else ""
    password_ok = secrets.compare_digest(creds.password.encode("utf-8"), candidate.encode("utf-8"))
    if expected is None or not password_ok:
        logger.warning("Rejected credentials for user %r", creds.username)
        raise _unauthorized("Invalid authentication credentials")
    return Actor(id=creds.username)


def _actor_from_header(settings: Settings, request: Request) -> Actor:
    value = (request.headers.get(settings.auth_header) or "").strip()
    if not value:
        logger.warning("Missing %s header", settings.auth_header)
        raise _unauthorized("Not authenticated", basic=False)
    return Actor(id=value)


# PUBLIC_INTERFACE
async def get_current_actor(
    request: Request,
    creds: Optional[HTTPBasicCredentials] = Depends(_security),
) -> Actor:
    """
    Resolve the actor a request is made on behalf of.

    Behavior depends on settings.auth_mode:
    - 'basic': HTTP Basic credentials must match an entry in AUTH_USERS; the
      username becomes the actor id.
    - 'header': the value of the AUTH_HEADER header (set by a trusted upstream
      proxy) is the actor id.

    Raises:
        HTTPException(401) if no actor can be resolved.

    Usage:
        @router.get("/", ...)
        def handler(actor: Actor = Depends(get_current_actor)): ...
    """
    settings = get_settings()
    if settings.auth_mode == "header":
        return _actor_from_header(settings, request)
    return _actor_from_basic(settings, creds)
