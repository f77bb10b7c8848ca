"""Minimal structured logging helper.

Emits one key=value line (or one JSON object) per event with a timestamp,
level and logger name, which keeps engine events grep-able without a log
pipeline.

Usage:
    from crawler.logging_utils import get_logger
    log = get_logger("crawler.navigation")
    log.info(event="move", character_id=3, x=1, y=0)

Reserved keys: level, ts, logger. ``None`` values are dropped.
Environment:
    CRAWLER_LOG_LEVEL  debug|info|warn|error (default info)
    CRAWLER_LOG_JSON   1/true/yes/on to emit JSON lines
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}


def current_level() -> int:
    return LEVELS.get(os.getenv("CRAWLER_LOG_LEVEL", "info").lower(), 20)


def json_mode() -> bool:
    return os.getenv("CRAWLER_LOG_JSON", "0").lower() in ("1", "true", "yes", "on")


def _format(level: str, fields: dict) -> str:
    if json_mode():
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = int(time.time())
        return json.dumps(rec, separators=(",", ":"), default=str)
    parts = [f"level={level}", f"ts={int(time.time())}"]
    for k, v in fields.items():
        if v is None or k in ("level", "ts"):
            continue
        if isinstance(v, bool):
            parts.append(f"{k}={str(v).lower()}")
        elif isinstance(v, (int, float)):
            parts.append(f"{k}={v}")
        else:
            s = str(v).replace(" ", "_")
            parts.append(f"{k}={s}")
    return " ".join(parts)


class _Logger:
    def __init__(self, name: str, context: dict | None = None):
        self.name = name
        self.context = dict(context or {})

    def bind(self, **context) -> "_Logger":
        """Return a child logger that adds ``context`` to every record."""
        merged = dict(self.context)
        merged.update(context)
        return _Logger(self.name, merged)

    def _log(self, lvl: str, **fields):
        if LEVELS[lvl] < current_level():
            return
        record = {"logger": self.name}
        record.update(self.context)
        record.update(fields)
        stream = sys.stderr if lvl == "error" else sys.stdout
        print(_format(lvl, record), file=stream)

    def debug(self, **fields):
        self._log("debug", **fields)

    def info(self, **fields):
        self._log("info", **fields)

    def warn(self, **fields):
        self._log("warn", **fields)

    def error(self, **fields):
        self._log("error", **fields)


_LOGGER_CACHE: dict[str, _Logger] = {}


def get_logger(name: str) -> _Logger:
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = _Logger(name)
    return _LOGGER_CACHE[name]


log = get_logger("crawler")
