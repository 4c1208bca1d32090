"""Requester identity dependency for FastAPI."""

import logging
from typing import Optional

from fastapi import Header, HTTPException, Request
from supabase import create_client

from idea_analysis.config import Settings

logger = logging.getLogger(__name__)


async def get_current_user_id(
    request: Request,
    authorization: Optional[str] = Header(None),
    x_user_id: Optional[str] = Header(None),
) -> str:
    """Resolve the calling user's id.

    auth_mode "supabase": validate the Supabase JWT from the Authorization
    header. auth_mode "header": trust X-User-Id set by an upstream gateway.
    """
    settings: Settings = request.app.state.settings

    if settings.auth_mode == "header":
        if not x_user_id:
            raise HTTPException(status_code=401, detail="Missing X-User-Id header")
        return x_user_id

    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing or invalid token")

    token = authorization.replace("Bearer ", "")
    try:
        client = create_client(settings.supabase_url, settings.supabase_anon_key)
        user_response = client.auth.get_user(token)
    except Exception as e:
        logger.info("Token validation failed: %s", e)
        raise HTTPException(status_code=401, detail="Invalid token")

    if user_response is None or user_response.user is None:
        raise HTTPException(status_code=401, detail="Invalid token")
    return user_response.user.id
