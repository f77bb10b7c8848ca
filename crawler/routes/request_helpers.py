"""Small request parsing helpers shared by the JSON blueprints."""

import re

from flask import request

from crawler.errors import ValidationError

_SIGNED_INT = re.compile(r"-?[0-9]+")


def json_body() -> dict:
    """Return the request JSON object, or an empty dict for a missing/non-object body."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def int_field(value, field: str, required: bool = True):
    """Coerce an int or ASCII digit string (optionally signed) to int.

    Returns None for a missing optional value; raises ValidationError otherwise.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise ValidationError(f"{field} is required")
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer", **{field: value})
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        s = value.strip()
        if _SIGNED_INT.fullmatch(s):
            return int(s)
    raise ValidationError(f"{field} must be an integer", **{field: str(value)})


def character_id_from(payload: dict) -> int:
    return int_field(payload.get("characterId", payload.get("character_id")), "characterId")
