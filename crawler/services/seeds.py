"""Seed normalisation for level generation requests."""

from __future__ import annotations

import hashlib
import re

from crawler.errors import ValidationError

SQLITE_MAX_INT = 9223372036854775807
SQLITE_MIN_INT = -9223372036854775808

_DIGITS = re.compile(r"[0-9]+")


def coerce_seed(payload_seed):
    """Convert provided seed (int or str) into a bounded 64-bit signed int.

    ``None`` or a blank string yields ``None`` so the generator draws its own
    seed. ASCII digit strings are used as numbers; any other string is hashed.
    """
    if payload_seed is None:
        return None
    if isinstance(payload_seed, bool):
        raise ValidationError("Seed must be an integer or string", seed=payload_seed)
    if isinstance(payload_seed, int):
        return payload_seed % SQLITE_MAX_INT
    if isinstance(payload_seed, str):
        s = payload_seed.strip()
        if not s:
            return None
        if _DIGITS.fullmatch(s):
            return int(s) % SQLITE_MAX_INT
        h = hashlib.sha256(s.encode("utf-8")).digest()
        return int.from_bytes(h[:8], "big") % SQLITE_MAX_INT
    raise ValidationError("Seed must be an integer or string", seed=repr(payload_seed))
