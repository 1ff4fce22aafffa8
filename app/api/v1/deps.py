"""FastAPI dependencies."""

import hmac
from typing import Annotated, Optional
from fastapi import Depends, Header, HTTPException
from app.config import Settings, get_settings


async def get_bearer_token(
    authorization: Annotated[Optional[str], Header()] = None,
) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


async def require_admin(
    token: Annotated[Optional[str], Depends(get_bearer_token)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> None:
    if not settings.ADMIN_API_KEY:
        raise HTTPException(status_code=500, detail="Missing ADMIN_API_KEY")
    if token is None or not hmac.compare_digest(token.encode(), settings.ADMIN_API_KEY.encode()):
        raise HTTPException(status_code=401, detail="Unauthorized")
