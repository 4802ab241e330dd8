"""Scoped auto-evaluation of fluent expressions.

An :class:`EvaluationScope` owns the expressions started inside it. A pending
expression is evaluated when the next ``expect()`` starts in the same scope or
when the scope exits. When the scope exits because an exception is
propagating, pending expressions are still reported but never raise: a failure
is attached to the propagating exception as a note instead.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar, Token
from types import TracebackType

from fluentcheck.assertions.chain import Expression, evaluation_in_progress

logger = logging.getLogger(__name__)

_current_scope: ContextVar[EvaluationScope | None] = ContextVar(
    "fluentcheck_scope", default=None
)


def current_scope() -> EvaluationScope | None:
    return _current_scope.get()


class EvaluationScope:
    def __init__(self) -> None:
        self._pending: list[Expression] = []
        self._tokens: list[Token[EvaluationScope | None]] = []

    def track(self, expression: Expression) -> None:
        """Take ownership of a new expression, flushing the previous ones first."""
        if evaluation_in_progress():
            # Chains built while reporting another chain never auto-evaluate
            logger.debug("Ignoring expression started during evaluation")
            return
        self.flush()
        self._pending.append(expression)

    def flush(self) -> None:
        """Auto-evaluate every pending expression, oldest first.

        Stops at the first failure; :class:`AssertionFailure` propagates and the
        remaining expressions are dropped.
        """
        while self._pending:
            expression = self._pending.pop(0)
            try:
                expression.latest.auto_evaluate()
            except BaseException:
                if self._pending:
                    logger.debug(f"Dropping {len(self._pending)} pending expression(s)")
                self._pending.clear()
                raise

    def report_pending(self, error: BaseException) -> None:
        """Report pending expressions without raising, noting failures on *error*."""
        pending, self._pending = self._pending, []
        for expression in pending:
            chain = expression.latest
            if chain.auto_evaluate(raise_on_failure=False) is False:
                error.add_note(f"fluentcheck: {chain.failure_message()}")

    def __enter__(self) -> EvaluationScope:
        self._tokens.append(_current_scope.set(self))
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            if exc is not None:
                if self._pending:
                    logger.debug(
                        f"Reporting {len(self._pending)} expression(s) without raising: "
                        f"{exc_type.__name__} in flight"
                    )
                self.report_pending(exc)
            else:
                self.flush()
        finally:
            _current_scope.reset(self._tokens.pop())


def expectations() -> EvaluationScope:
    """Open a scope whose expressions are checked on exit.

    >>> with expectations():
    ...     expect(5, "count").to_be_positive().and_().to_be_odd()
    """
    return EvaluationScope()
