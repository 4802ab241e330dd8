"""Entry point of the fluent assertion API."""

from __future__ import annotations

import logging
import warnings
from typing import TypeVar

from fluentcheck.assertions.matchers import Expectation
from fluentcheck.assertions.scope import current_scope
from fluentcheck.errors import UnscopedExpectationWarning

logger = logging.getLogger(__name__)

V = TypeVar("V")


def expect(value: V, label: str | None = None, *, enhanced: bool | None = None) -> Expectation[V]:
    """Start a fluent assertion about *value*.

    Args:
        value: The value under test.
        label: Name used as the subject of every step. Defaults to ``repr(value)``.
        enhanced: Render failures with every step instead of only the first.
            ``None`` uses the ``enhanced_output`` config setting.

    Inside an :func:`expectations` scope the expression is checked
    automatically. Outside one an :class:`UnscopedExpectationWarning` is
    issued and only an explicit ``evaluate()`` on the final link checks it.
    """
    chain = Expectation(value, repr(value) if label is None else label, enhanced=enhanced)
    scope = current_scope()
    if scope is None:
        logger.debug(f"expect({chain.label}) outside an evaluation scope")
        warnings.warn(
            f"expect({chain.label}) has no active evaluation scope and will not be "
            "checked automatically; use `with expectations():` or call evaluate()",
            UnscopedExpectationWarning,
            stacklevel=2,
        )
    else:
        scope.track(chain.expression)
    return chain
