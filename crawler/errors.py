"""Typed failures raised by the dungeon engine.

Every error carries a human message plus keyword context (character id,
dungeon id, coordinates) so callers can render a specific message and logs
can pinpoint the request. ``user_visible`` separates rule/input rejections,
which are shown verbatim, from integrity and persistence faults, which are
logged and answered with a generic message.
"""

from __future__ import annotations

from typing import Any, Dict

GENERIC_MESSAGE = "Something went wrong. Please try again."


class CrawlerError(Exception):
    code = "error"
    status = 500
    user_visible = True

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = {k: v for k, v in context.items() if v is not None}

    def to_dict(self) -> Dict[str, Any]:
        if not self.user_visible:
            return {"error": "internal_error", "message": GENERIC_MESSAGE}
        payload: Dict[str, Any] = {"error": self.code, "message": self.message}
        payload.update(self.context)
        return payload


class ValidationError(CrawlerError):
    """Malformed or missing input: unknown character, bad grid size, bad target."""

    code = "validation_error"
    status = 400


class PreconditionError(CrawlerError):
    """Operation attempted from the wrong room type, level, or state."""

    code = "precondition_failed"
    status = 400


class BlockedPathError(CrawlerError):
    """Well-formed adjacent move rejected because a wall is in the way."""

    code = "blocked"
    status = 400


class NotFoundError(CrawlerError):
    """Referenced dungeon, room or previous level does not exist.

    ``fatal=True`` marks data corruption (a room missing from a level that was
    generated successfully); those are hidden from the user.
    """

    code = "not_found"
    status = 404

    def __init__(self, message: str, fatal: bool = False, **context: Any):
        super().__init__(message, **context)
        self.fatal = fatal
        if fatal:
            self.status = 500
            self.user_visible = False


class PersistenceError(CrawlerError):
    """A level could not be written as one unit; nothing was kept."""

    code = "persistence_error"
    status = 500
    user_visible = False


__all__ = [
    "CrawlerError",
    "ValidationError",
    "PreconditionError",
    "BlockedPathError",
    "NotFoundError",
    "PersistenceError",
    "GENERIC_MESSAGE",
]
