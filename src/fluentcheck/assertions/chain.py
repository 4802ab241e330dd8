"""Immutable fluent assertion chains.

Every operation returns a new :class:`AssertionChain` carrying the full step
history, so earlier links are never affected by later ones. All links created
from one ``expect()`` call share an :class:`Expression` record, which knows the
most recent link and whether the expression has already been evaluated.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Generic, TypeVar

from fluentcheck.assertions.base import AssertionStep, LogicalOp
from fluentcheck.assertions.segments import evaluate_steps
from fluentcheck.assertions.sentence import Sentence
from fluentcheck.config import get_config
from fluentcheck.console import ConsoleRenderer
from fluentcheck.errors import AssertionFailure
from fluentcheck.events import Failure, Success, get_event_bus
from fluentcheck.reporter import ensure_default_reporter

logger = logging.getLogger(__name__)

V = TypeVar("V")

_evaluation_in_progress: ContextVar[bool] = ContextVar(
    "fluentcheck_evaluation_in_progress", default=False
)


def evaluation_in_progress() -> bool:
    """True while an auto-evaluation is running in the current thread/task."""
    return _evaluation_in_progress.get()


class Expression:
    """State shared by every link of one fluent expression."""

    __slots__ = ("latest", "evaluated")

    def __init__(self, latest: AssertionChain[Any]):
        self.latest = latest
        self.evaluated = False


class AssertionChain(Generic[V]):
    def __init__(
        self,
        value: V,
        label: str,
        *,
        enhanced: bool | None = None,
    ):
        self.value = value
        self.label = label
        # None defers to the process-wide config at evaluation time
        self.enhanced = enhanced
        self.pending_negation = False
        self.steps: tuple[AssertionStep, ...] = ()
        self.is_final = True
        self.expression = Expression(self)

    def _derive(self, **changes: Any) -> AssertionChain[V]:
        chain = object.__new__(type(self))
        chain.__dict__.update(self.__dict__)
        chain.__dict__.update(changes)
        self.expression.latest = chain
        return chain

    def negate(self) -> AssertionChain[V]:
        """Negate the next step only."""
        return self._derive(pending_negation=True)

    def add_step(self, sentence: Sentence, result: bool) -> AssertionChain[V]:
        negated = self.pending_negation
        sentence = sentence.with_negation(negated).with_subject(self.label.lstrip("&"))
        step = AssertionStep(sentence=sentence, passed=(not result) if negated else result)
        return self._derive(
            steps=(*self.steps, step),
            pending_negation=False,
            is_final=True,
        )

    def set_connector(self, op: LogicalOp) -> AssertionChain[V]:
        """Set the connector between the last step and the next one."""
        if not self.steps:
            return self._derive()
        *head, last = self.steps
        last = AssertionStep(sentence=last.sentence, passed=last.passed, logical_op=op)
        return self._derive(steps=(*head, last))

    def mark_intermediate(self) -> AssertionChain[V]:
        return self._derive(is_final=False)

    def mark_final(self) -> AssertionChain[V]:
        return self._derive(is_final=True)

    def and_(self) -> AssertionChain[V]:
        return self.set_connector(LogicalOp.AND).mark_intermediate()

    def or_(self) -> AssertionChain[V]:
        return self.set_connector(LogicalOp.OR).mark_intermediate()

    def not_(self) -> AssertionChain[V]:
        return self.negate()

    @property
    def passed(self) -> bool:
        """Current outcome of the chain, without reporting it."""
        return evaluate_steps(self.steps)

    def evaluate(self) -> bool:
        """Compute and report the outcome now, regardless of finality.

        Never raises on a false outcome; the caller gets the boolean instead.
        The expression is marked evaluated so it will not auto-evaluate later.
        """
        self.expression.evaluated = True
        passed = evaluate_steps(self.steps)
        self._emit(passed)
        return passed

    def auto_evaluate(self, *, raise_on_failure: bool = True) -> bool | None:
        """Evaluate at the end of the expression's lifetime.

        Returns None when nothing was evaluated: the chain has no steps, is an
        intermediate link, was already evaluated, or another evaluation is
        running in this thread/task. Raises :class:`AssertionFailure` when the
        outcome is false, unless *raise_on_failure* is off (used while another
        error is already propagating).
        """
        if not self.steps or not self.is_final or self.expression.evaluated:
            return None
        if _evaluation_in_progress.get():
            return None

        token = _evaluation_in_progress.set(True)
        try:
            self.expression.evaluated = True
            passed = evaluate_steps(self.steps)
            self._emit(passed)
            if not passed and raise_on_failure:
                raise AssertionFailure(self.failure_message(), chain=self)
            return passed
        finally:
            _evaluation_in_progress.reset(token)

    def _emit(self, passed: bool) -> None:
        ensure_default_reporter()
        event = Success(self) if passed else Failure(self)
        get_event_bus().emit(event)

    def _enhanced(self) -> bool:
        if self.enhanced is not None:
            return self.enhanced
        return get_config().enhanced_output

    def failure_message(self) -> str:
        if not self.steps:
            return f"assertion failed: {self.label}"

        if self._enhanced():
            config = get_config().model_copy(update={"use_colors": False})
            renderer = ConsoleRenderer(config)
            message = renderer.build_assertion_message(self)
            return f"{message}\n{renderer.build_failure_details(self)}"

        first = self.steps[0]
        return f"expected {self.label.lstrip('&')} to {first.sentence.format_with_actual()}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(label={self.label!r}, steps={list(self.steps)!r}, "
            f"is_final={self.is_final})"
        )
