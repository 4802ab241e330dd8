"""Locks that refuse to hand out state corrupted by an earlier failure."""

from __future__ import annotations

import threading
from types import TracebackType

from fluentcheck.errors import ConcurrencyInvariantViolation


class GuardedLock:
    """A mutex that becomes poisoned when an exception escapes while it is held.

    Every later ``with`` on a poisoned lock raises
    :class:`ConcurrencyInvariantViolation` instead of exposing the state the
    failed holder may have left half-updated.
    """

    def __init__(self, name: str):
        self.name = name
        self._lock = threading.Lock()
        self._poisoned_by: BaseException | None = None

    @property
    def poisoned(self) -> bool:
        return self._poisoned_by is not None

    def __enter__(self) -> GuardedLock:
        self._lock.acquire()
        if self._poisoned_by is not None:
            self._lock.release()
            raise ConcurrencyInvariantViolation(
                f"lock '{self.name}' is poisoned by an earlier failure: "
                f"{self._poisoned_by!r}"
            ) from self._poisoned_by
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc is not None:
            self._poisoned_by = exc
        self._lock.release()
