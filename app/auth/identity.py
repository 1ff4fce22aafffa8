"""Extraction of the Telegram user profile from verified init data."""
import json
from typing import Optional

from app.auth.init_data import InitDataError
from app.schemas.auth import NormalizedProfile


class BadIdentityPayload(InitDataError):
    pass


def extract_identity(sub_payload: Optional[str]) -> NormalizedProfile:
    """Parse the ``user`` JSON into a profile. Only ``id`` is mandatory."""
    if not sub_payload:
        raise BadIdentityPayload("user field missing")
    try:
        user = json.loads(sub_payload)
    except json.JSONDecodeError as exc:
        raise BadIdentityPayload("user field is not valid JSON") from exc

    if not isinstance(user, dict):
        raise BadIdentityPayload("user field is not a JSON object")

    user_id = user.get("id")
    # bool is an int subclass; Telegram ids are never 0
    if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id == 0:
        raise BadIdentityPayload("user id missing or not an integer")

    return NormalizedProfile.model_validate(user)
