# src/backend/utils/auth.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request

from src.backend.config import settings
from src.backend.utils.security import decode_access_token

logger = logging.getLogger(__name__)


def _extract_bearer(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization")
    if auth_header:
        parts = auth_header.split(" ", 1)
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1].strip() or None
    return None


async def require_menu_admin(request: Request) -> Optional[Dict[str, Any]]:
    """
    Write guard for menu mutations: a valid bearer token whose `role`
    claim is one of MENU_ADMIN_ROLES. Returns the token payload.
    """
    if not settings.AUTH_ENABLED:
        return None

    token = _extract_bearer(request)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    payload = decode_access_token(token)
    role = payload.get("role")
    if role not in settings.menu_admin_roles:
        logger.warning("Menu write denied for sub=%s role=%s", payload.get("sub"), role)
        raise HTTPException(status_code=403, detail="Forbidden")

    request.state.user = payload
    return payload
