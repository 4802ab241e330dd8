"""Exception hierarchy for fluentcheck."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from fluentcheck.assertions.chain import AssertionChain
    from fluentcheck.fixtures import FixtureKind


class FluentCheckError(Exception):
    """Base class for every error raised by fluentcheck itself."""


class AssertionFailure(FluentCheckError, AssertionError):
    """A final assertion chain evaluated to false.

    Subclasses ``AssertionError`` so test runners report it as an ordinary
    assertion failure rather than an error.
    """

    def __init__(self, message: str, chain: AssertionChain[Any] | None = None):
        super().__init__(message)
        self.message = message
        self.chain = chain


class InvalidMatcherInput(FluentCheckError, ValueError):
    """A matcher was given an argument it cannot work with (e.g. a bad regex)."""


class FixtureCallbackFailure(FluentCheckError):
    """A setup/teardown/before-all/after-all callback raised.

    The original exception is available as ``__cause__``.
    """

    def __init__(self, kind: FixtureKind, scope: str, message: str | None = None):
        self.kind = kind
        self.scope = scope
        super().__init__(message or f"{kind.value} fixture for scope {scope!r} failed")


class ConcurrencyInvariantViolation(FluentCheckError, RuntimeError):
    """Shared state was left inconsistent by an error raised while its lock was held."""


class UnscopedExpectationWarning(UserWarning):
    """``expect()`` ran with no active evaluation scope, so nothing will check it."""
