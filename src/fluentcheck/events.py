"""Process-wide publish/subscribe of assertion outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, TYPE_CHECKING, Union

from fluentcheck.sync import GuardedLock

if TYPE_CHECKING:
    from fluentcheck.assertions.chain import AssertionChain


@dataclass(frozen=True)
class Success:
    chain: AssertionChain[Any]


@dataclass(frozen=True)
class Failure:
    chain: AssertionChain[Any]


@dataclass(frozen=True)
class SessionCompleted:
    pass


AssertionEvent = Union[Success, Failure, SessionCompleted]
Handler = Callable[[Any], None]


class EventBus:
    """Synchronous multi-subscriber dispatcher.

    ``emit`` calls every handler subscribed to the event's type, in
    subscription order, on the caller's thread, before returning. Handlers run
    outside the bus lock so they may themselves subscribe or emit.
    """

    def __init__(self) -> None:
        self._lock = GuardedLock("event-bus")
        self._handlers: list[tuple[type, Handler]] = []

    def subscribe(self, event_type: type, handler: Handler) -> Handler:
        with self._lock:
            self._handlers.append((event_type, handler))
        return handler

    def on_success(self, handler: Callable[[AssertionChain[Any]], None]) -> Handler:
        return self.subscribe(Success, handler)

    def on_failure(self, handler: Callable[[AssertionChain[Any]], None]) -> Handler:
        return self.subscribe(Failure, handler)

    def on_session_completed(self, handler: Callable[[], None]) -> Handler:
        return self.subscribe(SessionCompleted, handler)

    def unsubscribe(self, handler: Handler) -> None:
        with self._lock:
            # bound methods are equal but never identical across accesses
            self._handlers = [(t, h) for t, h in self._handlers if h != handler]

    def clear(self) -> None:
        with self._lock:
            self._handlers.clear()

    def emit(self, event: AssertionEvent) -> None:
        with self._lock:
            handlers = [h for t, h in self._handlers if isinstance(event, t)]
        for handler in handlers:
            if isinstance(event, SessionCompleted):
                handler()
            else:
                handler(event.chain)


_default_bus = EventBus()


def get_event_bus() -> EventBus:
    return _default_bus


def on_success(handler: Callable[[AssertionChain[Any]], None]) -> Handler:
    return _default_bus.on_success(handler)


def on_failure(handler: Callable[[AssertionChain[Any]], None]) -> Handler:
    return _default_bus.on_failure(handler)


def on_session_completed(handler: Callable[[], None]) -> Handler:
    return _default_bus.on_session_completed(handler)


def emit(event: AssertionEvent) -> None:
    _default_bus.emit(event)
