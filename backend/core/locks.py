from __future__ import annotations

import threading
from collections.abc import Hashable, Iterable, Iterator
from contextlib import ExitStack, contextmanager


class KeyedLocks:
    """Per-identity mutual exclusion within one worker process.

    Locks are created on first use and dropped once nobody holds or waits on
    them, so the registry only ever contains keys that are currently contended.
    Across worker processes the row locks taken by the services provide the
    same ordering at the database.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._guard = threading.Lock()
        self._locks: dict[Hashable, list] = {}

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = [threading.Lock(), 0]
                self._locks[key] = entry
            entry[1] += 1
        lock: threading.Lock = entry[0]
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    self._locks.pop(key, None)

    def active_keys(self) -> int:
        with self._guard:
            return len(self._locks)


room_locks = KeyedLocks("room")
session_locks = KeyedLocks("session")
assignment_locks = KeyedLocks("assignment")
course_locks = KeyedLocks("course")
personnel_locks = KeyedLocks("personnel")


@contextmanager
def hold_references(*, course_codes: Iterable[str] = (), personnel_codes: Iterable[str] = ()) -> Iterator[None]:
    """Hold the locks of every course and personnel a write is about to link.

    Courses are taken before personnel, each in sorted order; reference
    guarded deletes hold a single identity lock, so no cycle can form.
    """

    with ExitStack() as stack:
        for code in sorted({c for c in course_codes if c}):
            stack.enter_context(course_locks.hold(code))
        for code in sorted({p for p in personnel_codes if p}):
            stack.enter_context(personnel_locks.hold(code))
        yield
