"""Reduce a sequence of assertion steps to a single outcome.

Steps are grouped into AND-runs separated at OR connectors; the chain passes
when any run passes and a run passes when all of its steps pass.
"""

from __future__ import annotations

from typing import Sequence

from fluentcheck.assertions.base import AssertionStep, LogicalOp


def group_steps_into_segments(steps: Sequence[AssertionStep]) -> list[list[int]]:
    """Return step indices grouped into maximal AND-connected runs."""
    if not steps:
        return []

    segments: list[list[int]] = []
    current = [0]
    for i in range(1, len(steps)):
        if steps[i - 1].logical_op is LogicalOp.OR:
            segments.append(current)
            current = [i]
        else:
            current.append(i)
    segments.append(current)
    return segments


def evaluate_steps(steps: Sequence[AssertionStep]) -> bool:
    if not steps:
        return True

    if len(steps) == 1:
        return steps[0].passed

    if len(steps) == 2:
        first, second = steps
        if first.logical_op is LogicalOp.OR:
            return first.passed or second.passed
        # missing connector defaults to AND
        return first.passed and second.passed

    return any(
        all(steps[i].passed for i in segment)
        for segment in group_steps_into_segments(steps)
    )
