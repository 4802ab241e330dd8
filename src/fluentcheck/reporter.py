"""Session bookkeeping and console reporting of assertion events."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, TYPE_CHECKING

from fluentcheck.config import RenderConfig, get_config
from fluentcheck.console import ConsoleRenderer
from fluentcheck.events import EventBus, SessionCompleted, get_event_bus
from fluentcheck.sync import GuardedLock

if TYPE_CHECKING:
    from fluentcheck.assertions.chain import AssertionChain

logger = logging.getLogger(__name__)


@dataclass
class TestSessionResult:
    """Pass/fail counts and captured failures for one test session."""

    __test__ = False  # not a pytest test class

    passed_count: int = 0
    failed_count: int = 0
    failures: list[AssertionChain[Any]] = field(default_factory=list)


class Reporter:
    """Counts, deduplicates and renders Success/Failure events.

    Deduplication and silent mode only gate rendering; every event is always
    counted and every failure is always captured.
    """

    def __init__(self, bus: EventBus | None = None, config: RenderConfig | None = None):
        self.bus = bus or get_event_bus()
        # None reads the process-wide config on every render
        self.config = config
        self._lock = GuardedLock("reporter")
        self._session = TestSessionResult()
        self._reported: set[str] = set()
        self._deduplicate = True
        self._silent = False
        self._subscribed = False

    def init(self) -> None:
        """Subscribe to the event bus. Calling it again is a no-op."""
        with self._lock:
            if self._subscribed:
                return
            self._subscribed = True
        self.bus.on_success(self.handle_success)
        self.bus.on_failure(self.handle_failure)

    def shutdown(self) -> None:
        with self._lock:
            if not self._subscribed:
                return
            self._subscribed = False
        self.bus.unsubscribe(self.handle_success)
        self.bus.unsubscribe(self.handle_failure)

    def renderer(self) -> ConsoleRenderer:
        return ConsoleRenderer(self.config or get_config())

    @staticmethod
    def dedup_key(chain: AssertionChain[Any]) -> str:
        """Structural, order-sensitive signature of a chain's label and steps."""
        return repr((chain.label, chain.steps))

    def _should_render(self, chain: AssertionChain[Any]) -> bool:
        # caller holds the lock
        if self._silent:
            return False
        if not self._deduplicate:
            return True
        key = self.dedup_key(chain)
        if key in self._reported:
            return False
        self._reported.add(key)
        return True

    def handle_success(self, chain: AssertionChain[Any]) -> None:
        with self._lock:
            self._session.passed_count += 1
            render = self._should_render(chain)
        if render:
            self.renderer().print_success(chain)

    def handle_failure(self, chain: AssertionChain[Any]) -> None:
        with self._lock:
            self._session.failed_count += 1
            self._session.failures.append(chain)
            render = self._should_render(chain)
        if render:
            self.renderer().print_failure(chain)

    @property
    def session(self) -> TestSessionResult:
        """Snapshot of the current session."""
        with self._lock:
            return TestSessionResult(
                passed_count=self._session.passed_count,
                failed_count=self._session.failed_count,
                failures=list(self._session.failures),
            )

    def reset_message_cache(self) -> None:
        with self._lock:
            self._reported.clear()

    def enable_deduplication(self) -> None:
        with self._lock:
            self._deduplicate = True

    def disable_deduplication(self) -> None:
        with self._lock:
            self._deduplicate = False

    def enable_silent_mode(self) -> None:
        with self._lock:
            self._silent = True

    def disable_silent_mode(self) -> None:
        with self._lock:
            self._silent = False

    @property
    def deduplication_enabled(self) -> bool:
        with self._lock:
            return self._deduplicate

    @property
    def silent(self) -> bool:
        with self._lock:
            return self._silent

    def summarize(self) -> TestSessionResult:
        """Render the session summary and start a new session.

        Emits SessionCompleted, clears the dedup cache, re-enables
        deduplication and resets the counters. Returns the finished session.
        """
        with self._lock:
            finished = self._session
            self._session = TestSessionResult()

        self.renderer().print_session_summary(finished)
        logger.debug(
            f"Session summarized: {finished.passed_count} passed, "
            f"{finished.failed_count} failed"
        )
        self.bus.emit(SessionCompleted())

        with self._lock:
            self._reported.clear()
            self._deduplicate = True
        return finished


_default_reporter: Reporter | None = None
_default_lock = GuardedLock("default-reporter")


def get_reporter() -> Reporter:
    global _default_reporter
    with _default_lock:
        if _default_reporter is None:
            _default_reporter = Reporter()
        return _default_reporter


def ensure_default_reporter() -> Reporter:
    """Return the default reporter, subscribed to the default event bus."""
    reporter = get_reporter()
    reporter.init()
    return reporter


def init() -> None:
    ensure_default_reporter()


def summarize() -> TestSessionResult:
    return get_reporter().summarize()


def enable_deduplication() -> None:
    get_reporter().enable_deduplication()


def disable_deduplication() -> None:
    get_reporter().disable_deduplication()


def enable_silent_mode() -> None:
    get_reporter().enable_silent_mode()


def disable_silent_mode() -> None:
    get_reporter().disable_silent_mode()


def reset_message_cache() -> None:
    get_reporter().reset_message_cache()
