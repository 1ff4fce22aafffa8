"""Admin endpoints: registered users listing and login statistics."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import require_admin
from app.crud import crud_user
from app.database import get_db
from app.schemas.user import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])

USERS_ACTIONS = ("list", "stats")


@router.get("/users")
async def list_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    action: str = "list",
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
    offset: Annotated[int, Query(ge=0)] = 0,
):
    if action not in USERS_ACTIONS:
        return JSONResponse({"ok": False, "error": "Invalid action parameter"}, status_code=400)

    try:
        if action == "stats":
            stats = await crud_user.get_stats(db)
            return {"ok": True, "stats": stats.model_dump()}

        users = await crud_user.get_multi(db, skip=offset, limit=limit)
    except SQLAlchemyError:
        logger.exception("Admin users query failed (action=%s)", action)
        return JSONResponse({"ok": False, "error": "Internal server error"}, status_code=500)

    return {
        "ok": True,
        "users": [UserResponse.model_validate(u).model_dump(mode="json") for u in users],
        "count": len(users),
    }


@router.get("/users/{telegram_id}")
async def get_user(
    telegram_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    try:
        user = await crud_user.get_by_telegram_id(db, telegram_id)
    except SQLAlchemyError:
        logger.exception("Admin user lookup failed (telegram_id=%s)", telegram_id)
        return JSONResponse({"ok": False, "error": "Internal server error"}, status_code=500)
    if user is None:
        return JSONResponse({"ok": False, "error": "User not found"}, status_code=404)
    return {"ok": True, "user": UserResponse.model_validate(user).model_dump(mode="json")}
