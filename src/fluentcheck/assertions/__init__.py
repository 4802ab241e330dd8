"""Fluent assertion chains and their evaluation."""

from fluentcheck.assertions.base import AssertionStep, LogicalOp
from fluentcheck.assertions.chain import AssertionChain
from fluentcheck.assertions.expect import expect
from fluentcheck.assertions.matchers import Expectation
from fluentcheck.assertions.scope import EvaluationScope, expectations
from fluentcheck.assertions.segments import evaluate_steps, group_steps_into_segments
from fluentcheck.assertions.sentence import Sentence

__all__ = [
    "AssertionChain",
    "AssertionStep",
    "EvaluationScope",
    "Expectation",
    "LogicalOp",
    "Sentence",
    "evaluate_steps",
    "expect",
    "expectations",
    "group_steps_into_segments",
]
