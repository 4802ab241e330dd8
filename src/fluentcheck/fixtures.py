"""Per-scope fixture lifecycle: setup/teardown per test, before-all/after-all once.

A scope is an opaque string, normally the ``__module__`` of the test
functions it groups. Callbacks are registered at import time, either with the
``register_*`` functions or with the decorators at the bottom of this module,
and run in registration order.
"""

from __future__ import annotations

import atexit
import functools
import logging
import threading
from contextvars import ContextVar
from enum import Enum
from typing import Any, Callable, Iterable, TypeVar

from fluentcheck.assertions.scope import EvaluationScope
from fluentcheck.errors import FixtureCallbackFailure
from fluentcheck.sync import GuardedLock

logger = logging.getLogger(__name__)

Callback = Callable[[], Any]
T = TypeVar("T")

_in_fixture_test: ContextVar[bool] = ContextVar("fluentcheck_in_fixture_test", default=False)
_running_before_all: ContextVar[frozenset[str]] = ContextVar(
    "fluentcheck_running_before_all", default=frozenset()
)


class FixtureKind(str, Enum):
    SETUP = "setup"
    TEARDOWN = "teardown"
    BEFORE_ALL = "before_all"
    AFTER_ALL = "after_all"


def is_in_fixture_test() -> bool:
    """True while a fixture-wrapped test body runs in this thread/task."""
    return _in_fixture_test.get()


class FixtureRegistry:
    """Four scope-keyed callback lists plus the set of scopes that have run tests."""

    def __init__(self) -> None:
        self._lock = GuardedLock("fixtures")
        self._callbacks: dict[FixtureKind, dict[str, list[Callback]]] = {
            kind: {} for kind in FixtureKind
        }
        # scope -> set once the scope's before-all callbacks have finished
        self._executed: dict[str, threading.Event] = {}
        self._before_all_errors: dict[str, BaseException] = {}
        self._after_all_done: set[str] = set()

    def register(self, kind: FixtureKind, scope: str, callback: Callback) -> None:
        with self._lock:
            self._callbacks[kind].setdefault(scope, []).append(callback)
        logger.debug(f"Registered {kind.value} fixture {_name(callback)} for {scope!r}")

    def callbacks(self, kind: FixtureKind, scope: str) -> list[Callback]:
        with self._lock:
            return list(self._callbacks[kind].get(scope, ()))

    def has_fixtures(self, scope: str) -> bool:
        with self._lock:
            return any(scope in by_scope for by_scope in self._callbacks.values())

    @property
    def executed_scopes(self) -> list[str]:
        with self._lock:
            return list(self._executed)

    def _claim(self, scope: str) -> tuple[bool, threading.Event]:
        """Atomically mark *scope* executed. True if this caller claimed it first."""
        with self._lock:
            if scope in self._executed:
                return False, self._executed[scope]
            done = threading.Event()
            self._executed[scope] = done
            return True, done

    def _mark_executed(self, scope: str) -> None:
        with self._lock:
            if scope not in self._executed:
                done = threading.Event()
                done.set()
                self._executed[scope] = done

    def _run_callbacks(self, kind: FixtureKind, scope: str) -> None:
        for callback in self.callbacks(kind, scope):
            try:
                with EvaluationScope():
                    callback()
            except Exception as e:
                raise FixtureCallbackFailure(kind, scope) from e

    def _run_before_all_once(self, scope: str) -> None:
        if scope in _running_before_all.get():
            # a before-all callback re-entered its own scope
            return

        claimed, done = self._claim(scope)
        if claimed:
            logger.debug(f"Running before_all fixtures for {scope!r}")
            token = _running_before_all.set(_running_before_all.get() | {scope})
            try:
                self._run_callbacks(FixtureKind.BEFORE_ALL, scope)
            except BaseException as e:
                with self._lock:
                    self._before_all_errors[scope] = e
                raise
            finally:
                _running_before_all.reset(token)
                done.set()
            return

        done.wait()
        with self._lock:
            error = self._before_all_errors.get(scope)
        if error is not None:
            raise FixtureCallbackFailure(
                FixtureKind.BEFORE_ALL,
                scope,
                f"before_all fixture for scope {scope!r} failed in an earlier test",
            ) from error

    def _run_teardown_after_failure(self, scope: str, body_error: BaseException) -> None:
        try:
            self._run_callbacks(FixtureKind.TEARDOWN, scope)
        except BaseException as e:
            # pytest.fail/skip and SystemExit bypass FixtureCallbackFailure wrapping
            cause = e.__cause__ if isinstance(e, FixtureCallbackFailure) else e
            logger.error(
                f"Teardown for {scope!r} failed while a test failure was propagating: "
                f"{cause!r}"
            )
            body_error.add_note(f"teardown for scope {scope!r} also failed: {cause!r}")

    def run_with_fixtures(self, scope: str, body: Callable[[], T]) -> T:
        """Run *body* wrapped in the lifecycle of *scope*.

        Before-all runs once per scope before any body, then setup, the body
        (inside an evaluation scope), and teardown, which runs even when the
        body raises. A body failure always wins over a teardown failure.
        """
        token = _in_fixture_test.set(True)
        try:
            self._run_before_all_once(scope)
            self._run_callbacks(FixtureKind.SETUP, scope)
            try:
                with EvaluationScope():
                    result = body()
            except BaseException as e:
                self._run_teardown_after_failure(scope, e)
                raise
            self._run_callbacks(FixtureKind.TEARDOWN, scope)
            return result
        finally:
            self._mark_executed(scope)
            _in_fixture_test.reset(token)

    def run_after_all_fixtures(self) -> list[FixtureCallbackFailure]:
        """Run after-all callbacks for every executed scope not yet finalized.

        Failures are logged and returned rather than raised: after-all runs
        outside any single test. Safe to call repeatedly.
        """
        with self._lock:
            scopes = [s for s in self._executed if s not in self._after_all_done]
            self._after_all_done.update(scopes)

        failures: list[FixtureCallbackFailure] = []
        for scope in scopes:
            for callback in self.callbacks(FixtureKind.AFTER_ALL, scope):
                try:
                    with EvaluationScope():
                        callback()
                except Exception as e:
                    failure = FixtureCallbackFailure(FixtureKind.AFTER_ALL, scope)
                    failure.__cause__ = e
                    logger.exception(
                        f"after_all fixture {_name(callback)} for {scope!r} failed"
                    )
                    failures.append(failure)
        return failures


def _name(callback: Callback) -> str:
    return getattr(callback, "__qualname__", repr(callback))


_registry = FixtureRegistry()
_atexit_lock = threading.Lock()
_atexit_registered = False


def get_registry() -> FixtureRegistry:
    return _registry


def has_fixtures(scope: str) -> bool:
    return _registry.has_fixtures(scope)


def set_registry(registry: FixtureRegistry) -> FixtureRegistry:
    """Swap the process-wide registry (used for test isolation). Returns the old one."""
    global _registry
    previous, _registry = _registry, registry
    return previous


def register_setup(scope: str, callback: Callback) -> None:
    _registry.register(FixtureKind.SETUP, scope, callback)


def register_teardown(scope: str, callback: Callback) -> None:
    _registry.register(FixtureKind.TEARDOWN, scope, callback)


def register_before_all(scope: str, callback: Callback) -> None:
    _registry.register(FixtureKind.BEFORE_ALL, scope, callback)


def register_after_all(scope: str, callback: Callback) -> None:
    """Register an after-all callback; the first call also hooks process exit."""
    global _atexit_registered
    _registry.register(FixtureKind.AFTER_ALL, scope, callback)
    with _atexit_lock:
        if not _atexit_registered:
            atexit.register(run_after_all_fixtures)
            _atexit_registered = True


def register_module_fixtures(
    scope: str,
    *,
    setup: Iterable[Callback] = (),
    teardown: Iterable[Callback] = (),
    before_all: Iterable[Callback] = (),
    after_all: Iterable[Callback] = (),
) -> None:
    """Register every fixture of *scope* in one call."""
    for callback in before_all:
        register_before_all(scope, callback)
    for callback in setup:
        register_setup(scope, callback)
    for callback in teardown:
        register_teardown(scope, callback)
    for callback in after_all:
        register_after_all(scope, callback)


def run_with_fixtures(scope: str, body: Callable[[], T]) -> T:
    return _registry.run_with_fixtures(scope, body)


def run_after_all_fixtures() -> list[FixtureCallbackFailure]:
    return _registry.run_after_all_fixtures()


def _registering(register: Callable[[str, Callback], None]):
    def decorator(fn: Callback | None = None, *, scope: str | None = None):
        def apply(f: Callback) -> Callback:
            register(scope or f.__module__, f)
            return f

        return apply(fn) if fn is not None else apply

    return decorator


setup = _registering(register_setup)
tear_down = _registering(register_teardown)
before_all = _registering(register_before_all)
after_all = _registering(register_after_all)


def with_fixtures(fn: Callable[..., T] | None = None, *, scope: str | None = None):
    """Wrap a test function so each call runs inside its scope's fixtures.

    >>> @with_fixtures
    ... def test_counter():
    ...     expect(counter(), "counter").to_equal(1)
    """

    def apply(f: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(f)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            return run_with_fixtures(scope or f.__module__, lambda: f(*args, **kwargs))

        wrapper.__fluentcheck_scope__ = scope or f.__module__
        return wrapper

    return apply(fn) if fn is not None else apply
