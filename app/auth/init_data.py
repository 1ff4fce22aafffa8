"""Parsing of Telegram Mini App init data into the data-check string.

init data is a query string such as::

    query_id=AAH...&user=%7B%22id%22%3A1%7D&auth_date=1700000000&hash=ab12...

The data-check string is every field except ``hash``, sorted by key and
serialized as ``key=value`` lines joined by ``\\n``.
"""
import re
from urllib.parse import unquote

HASH_FIELD = "hash"

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class InitDataError(Exception):
    """Base class for init data that cannot be processed."""


class MalformedPayloadError(InitDataError):
    pass


def _decode(component: str) -> str:
    if _BAD_ESCAPE.search(component):
        raise MalformedPayloadError(f"Invalid percent-escape in {component!r}")
    try:
        return unquote(component, errors="strict")
    except UnicodeDecodeError as exc:
        raise MalformedPayloadError(f"Invalid UTF-8 in {component!r}") from exc


def parse_init_data(raw: str) -> dict[str, str]:
    """Decode ``raw`` into a mapping. Repeated keys: the last one wins."""
    fields: dict[str, str] = {}
    for segment in raw.split("&"):
        key, _, value = segment.partition("=")
        fields[_decode(key)] = _decode(value)
    return fields


def build_data_check_string(fields: dict[str, str]) -> str:
    return "\n".join(f"{key}={fields[key]}" for key in sorted(fields) if key != HASH_FIELD)


def canonicalize(raw: str) -> tuple[dict[str, str], str]:
    """Return the decoded mapping (``hash`` included) and its data-check string."""
    fields = parse_init_data(raw)
    return fields, build_data_check_string(fields)
