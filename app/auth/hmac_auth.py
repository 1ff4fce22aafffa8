"""HMAC-SHA256 verification of Telegram Mini App init data.

Signing scheme (fixed by Telegram):
  secret_key = HMAC_SHA256(key="WebAppData", msg=bot_token)
  hash       = hex(HMAC_SHA256(key=secret_key, msg=data_check_string))

Replay protection: ``auth_date`` must be no older than ``max_age_seconds``
(stateless, no nonce DB).
"""
import hashlib
import hmac
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from app.auth.init_data import HASH_FIELD, canonicalize

WEB_APP_DATA_KEY = b"WebAppData"
DEFAULT_MAX_AGE_SECONDS = 60 * 60 * 24


class ErrorKind(str, Enum):
    hash_missing = "hash_missing"
    invalid_signature = "invalid_signature"
    expired = "expired"


@dataclass(frozen=True)
class VerificationResult:
    ok: bool
    reason: Optional[ErrorKind] = None
    identity_sub_payload: Optional[str] = None
    auth_date: Optional[int] = None


def derive_secret_key(bot_token: str) -> bytes:
    return hmac.new(WEB_APP_DATA_KEY, bot_token.encode(), hashlib.sha256).digest()


def sign_data_check_string(data_check_string: str, bot_token: str) -> str:
    secret_key = derive_secret_key(bot_token)
    return hmac.new(secret_key, data_check_string.encode(), hashlib.sha256).hexdigest()


def _parse_auth_date(value: Optional[str]) -> Optional[int]:
    # ASCII digits only
    if not value or not (value.isascii() and value.isdigit()):
        return None
    return int(value) or None


def verify_init_data(
    raw: str,
    bot_token: str,
    max_age_seconds: int = DEFAULT_MAX_AGE_SECONDS,
    now: Optional[int] = None,
) -> VerificationResult:
    """Check the signature first, then freshness.

    Returns a failed result (rather than raising) so the caller can map it to
    a 401. Undecodable input raises MalformedPayloadError.
    """
    fields, data_check_string = canonicalize(raw)
    received = fields.get(HASH_FIELD)
    if not received:
        return VerificationResult(ok=False, reason=ErrorKind.hash_missing)

    expected = sign_data_check_string(data_check_string, bot_token)
    if not hmac.compare_digest(expected.encode(), received.encode()):
        return VerificationResult(ok=False, reason=ErrorKind.invalid_signature)

    auth_date = _parse_auth_date(fields.get("auth_date"))
    if now is None:
        now = int(time.time())
    if auth_date is None or now - auth_date > max_age_seconds:
        return VerificationResult(ok=False, reason=ErrorKind.expired)

    return VerificationResult(
        ok=True,
        identity_sub_payload=fields.get("user"),
        auth_date=auth_date,
    )
