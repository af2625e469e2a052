"""Acting-user resolution for FastAPI routes.

Authentication happens upstream: the gateway verifies the caller and
forwards the user id in ``X-User-Id``. This module only reads it.
"""

import uuid

from fastapi import Header, HTTPException, Request

USER_ID_HEADER = "X-User-Id"


async def require_user_id(
    request: Request,
    x_user_id: str | None = Header(default=None, alias=USER_ID_HEADER),
) -> uuid.UUID:
    """Return the acting user's id or reject the request with 401."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing user identity")
    try:
        user_id = uuid.UUID(x_user_id)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid user identity")

    request.state.user_id = str(user_id)
    return user_id
