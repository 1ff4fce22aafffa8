"""Telegram Mini App login: verify init data, then upsert the user."""
import json
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.hmac_auth import ErrorKind, verify_init_data
from app.auth.identity import BadIdentityPayload, extract_identity
from app.auth.init_data import MalformedPayloadError
from app.config import Settings, get_settings
from app.crud import crud_user
from app.database import get_db
from app.schemas.auth import NormalizedProfile, ProfileResponse
from app.schemas.user import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

# hash_missing and invalid_signature share a message so callers get no oracle
REJECTION_MESSAGES = {
    ErrorKind.hash_missing: "Invalid initData",
    ErrorKind.invalid_signature: "Invalid initData",
    ErrorKind.expired: "auth_date expired",
}


class BadRequestBody(ValueError):
    pass


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"ok": False, "error": message}, status_code=status_code)


async def read_init_data(request: Request) -> str:
    """Accept a bare string body or a JSON body with an ``initData`` field."""
    body = await request.body()
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise BadRequestBody("Request body is not UTF-8") from exc

    if "application/json" not in request.headers.get("content-type", ""):
        return text.strip()
    if not text.strip():
        return ""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise BadRequestBody("Malformed JSON body") from exc
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("initData"), str):
        return payload["initData"]
    return ""


async def save_profile(db: AsyncSession, profile: NormalizedProfile) -> ProfileResponse:
    """Persist the profile. A store failure is reported in the response, never raised."""
    response = ProfileResponse(**profile.model_dump())
    try:
        user = await crud_user.upsert(db, profile)
        await db.commit()
    except Exception as exc:
        logger.exception("User upsert failed (telegram_id=%s)", profile.id)
        await db.rollback()
        response.database_saved = False
        # full statement and parameters stay in the log
        response.database_error = str(getattr(exc, "orig", None) or exc.__class__.__name__)
        return response

    response.database_saved = True
    response.database_row = UserResponse.model_validate(user)
    return response


@router.post("/telegram")
async def telegram_login(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    if not settings.TELEGRAM_BOT_TOKEN:
        return _error(500, "Missing TELEGRAM_BOT_TOKEN")

    try:
        init_data = await read_init_data(request)
    except BadRequestBody as exc:
        return _error(400, str(exc))
    if not init_data:
        return _error(400, "No initData provided")

    try:
        result = verify_init_data(
            init_data,
            settings.TELEGRAM_BOT_TOKEN,
            max_age_seconds=settings.INIT_DATA_MAX_AGE_SECONDS,
        )
    except MalformedPayloadError as exc:
        logger.info("Rejected malformed initData: %s", exc)
        return _error(400, "Malformed initData")

    if not result.ok:
        logger.info("Rejected initData: %s", result.reason.value)
        return _error(401, REJECTION_MESSAGES[result.reason])

    try:
        profile = extract_identity(result.identity_sub_payload)
    except BadIdentityPayload as exc:
        logger.info("Rejected initData user: %s", exc)
        return _error(400, "Bad user payload")

    response = await save_profile(db, profile)
    return {"ok": True, "profile": response.model_dump(mode="json")}
