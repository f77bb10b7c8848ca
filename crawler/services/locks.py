"""Per-character mutual exclusion for navigation operations.

A character's read-validate-write sequence (generate, move, descend, ascend)
runs while holding that character's lock, so two requests for the same
character cannot both pass validation against the same position. Different
characters use different locks and never contend.

Registry entries are reference-counted: an entry exists only while some
thread holds or waits for that character's lock.
"""

import threading
from contextlib import contextmanager


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


_locks = {}
_locks_guard = threading.Lock()


def _checkout(character_id) -> _Entry:
    with _locks_guard:
        entry = _locks.get(character_id)
        if entry is None:
            entry = _locks[character_id] = _Entry()
        entry.users += 1
        return entry


def _checkin(character_id, entry: _Entry) -> None:
    with _locks_guard:
        entry.users -= 1
        if entry.users <= 0 and _locks.get(character_id) is entry:
            del _locks[character_id]


@contextmanager
def character_lock(character_id):
    entry = _checkout(character_id)
    try:
        with entry.lock:
            yield entry.lock
    finally:
        _checkin(character_id, entry)


def active_count() -> int:
    """Number of characters with a lock currently held or awaited."""
    with _locks_guard:
        return len(_locks)


def clear() -> None:
    """Forget all locks (test isolation)."""
    with _locks_guard:
        _locks.clear()
