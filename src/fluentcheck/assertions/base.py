"""Base data structures for the assertion system."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from fluentcheck.assertions.sentence import Sentence


class LogicalOp(str, Enum):
    AND = "and"
    OR = "or"


@dataclass(frozen=True)
class AssertionStep:
    """One evaluated matcher call within a chain.

    Attributes:
        sentence: Description of the check, with subject and negation applied.
        passed: Outcome after negation.
        logical_op: Connector between this step and the next one. ``None`` on
            the last step of a chain.
    """

    sentence: Sentence
    passed: bool
    logical_op: LogicalOp | None = None
