"""Type-specific matcher predicates.

Each matcher computes a boolean, describes the check with a
:class:`Sentence`, and hands both to ``add_step``. Matchers never evaluate
the chain themselves.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sized
from typing import Any, TypeVar

from fluentcheck.assertions.chain import AssertionChain
from fluentcheck.assertions.sentence import Sentence
from fluentcheck.errors import InvalidMatcherInput

V = TypeVar("V")

# marks "report the value under test" in _check
_VALUE = object()


class _MatcherBase:
    # provided by AssertionChain
    value: Any
    add_step: Any

    def _check(self, verb: str, obj: str, result: bool, actual: Any = _VALUE) -> Any:
        observed = self.value if actual is _VALUE else actual
        return self.add_step(Sentence(verb, obj).with_actual(repr(observed)), result)


class EqualityMatchers(_MatcherBase):
    def to_equal(self, expected: Any):
        return self._check("be", f"equal to {expected!r}", self.value == expected)

    def to_be_instance_of(self, cls: type):
        return self._check(
            "be", f"an instance of {cls.__name__}", isinstance(self.value, cls),
            actual=type(self.value).__name__,
        )


class BooleanMatchers(_MatcherBase):
    def to_be_true(self):
        return self._check("be", "true", self.value is True)

    def to_be_false(self):
        return self._check("be", "false", self.value is False)


class NumericMatchers(_MatcherBase):
    def to_be_positive(self):
        return self._check("be", "positive", self.value > 0)

    def to_be_negative(self):
        return self._check("be", "negative", self.value < 0)

    def to_be_zero(self):
        return self._check("be", "zero", self.value == 0)

    def to_be_greater_than(self, expected: Any):
        return self._check("be", f"greater than {expected!r}", self.value > expected)

    def to_be_greater_than_or_equal(self, expected: Any):
        return self._check(
            "be", f"greater than or equal to {expected!r}", self.value >= expected
        )

    def to_be_less_than(self, expected: Any):
        return self._check("be", f"less than {expected!r}", self.value < expected)

    def to_be_less_than_or_equal(self, expected: Any):
        return self._check(
            "be", f"less than or equal to {expected!r}", self.value <= expected
        )

    def to_be_in_range(self, start: Any, stop: Any):
        """Half-open range check: ``start <= value < stop``."""
        return self._check(
            "be", f"in range {start!r}..{stop!r}", start <= self.value < stop
        )

    def to_be_even(self):
        return self._check("be", "even", self.value % 2 == 0)

    def to_be_odd(self):
        return self._check("be", "odd", self.value % 2 != 0)


class StringMatchers(_MatcherBase):
    def to_start_with(self, prefix: str):
        return self._check("start with", repr(prefix), self.value.startswith(prefix))

    def to_end_with(self, suffix: str):
        return self._check("end with", repr(suffix), self.value.endswith(suffix))

    def to_contain_substring(self, substring: str):
        """Like ``to_contain`` but only passes for string values."""
        return self._check(
            "contain", f"substring {substring!r}",
            isinstance(self.value, str) and substring in self.value,
        )

    def to_match(self, pattern: str):
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            raise InvalidMatcherInput(f"Invalid regex pattern '{pattern}': {e}") from e
        return self._check(
            "match", f"pattern {pattern!r}", compiled.search(self.value) is not None
        )


class CollectionMatchers(_MatcherBase):
    """Matchers for strings, sequences, sets and mappings alike."""

    def to_be_empty(self):
        return self._check("be", "empty", len(self.value) == 0)

    def to_have_length(self, expected: int):
        actual = len(self.value) if isinstance(self.value, Sized) else None
        return self._check("have", f"length {expected}", actual == expected, actual=actual)

    def to_contain(self, item: Any):
        return self._check("contain", repr(item), item in self.value)

    def to_contain_all_of(self, items: Iterable[Any]):
        items = list(items)
        return self._check(
            "contain", f"all of {items!r}", all(i in self.value for i in items)
        )

    def to_equal_collection(self, expected: Iterable[Any]):
        """Element-wise, order-sensitive comparison with any iterable."""
        expected = list(expected)
        actual = list(self.value)
        if len(actual) != len(expected):
            return self._check(
                "equal", f"collection {expected!r} (different lengths)", False, actual=actual
            )
        return self._check("equal", f"collection {expected!r}", actual == expected, actual=actual)


class MappingMatchers(_MatcherBase):
    def _mapping(self) -> Mapping[Any, Any]:
        if not isinstance(self.value, Mapping):
            raise InvalidMatcherInput(
                f"expected a mapping, got {type(self.value).__name__}"
            )
        return self.value

    def to_contain_key(self, key: Any):
        return self._check("contain", f"key {key!r}", key in self._mapping())

    def to_contain_value(self, value: Any):
        return self._check(
            "contain", f"value {value!r}", value in self._mapping().values()
        )

    def to_contain_entry(self, key: Any, value: Any):
        mapping = self._mapping()
        return self._check(
            "contain", f"entry {key!r}: {value!r}",
            key in mapping and mapping[key] == value,
        )


class OptionalMatchers(_MatcherBase):
    def to_be_none(self):
        return self._check("be", "None", self.value is None)

    def to_be_some(self):
        return self._check("be", "a value", self.value is not None)


class OutcomeMatchers(_MatcherBase):
    """Matchers for a zero-argument callable: ok if it returns, err if it raises.

    The callable is invoked once per matcher call.
    """

    def _outcome(self) -> tuple[bool, Any]:
        if not callable(self.value):
            raise InvalidMatcherInput(
                f"expected a callable, got {type(self.value).__name__}"
            )
        try:
            return True, self.value()
        except Exception as e:
            return False, e

    def to_be_ok(self):
        ok, outcome = self._outcome()
        return self._check("be", "ok", ok, actual=outcome)

    def to_be_err(self):
        ok, outcome = self._outcome()
        return self._check("be", "err", not ok, actual=outcome)

    def to_contain_ok(self, expected: Any):
        ok, outcome = self._outcome()
        return self._check(
            "contain", f"ok value {expected!r}", ok and outcome == expected, actual=outcome
        )

    def to_contain_err(self, expected: type[BaseException] | BaseException):
        """*expected* is an exception type, or an instance compared by type and args."""
        ok, outcome = self._outcome()
        if ok:
            matched = False
        elif isinstance(expected, type):
            matched = isinstance(outcome, expected)
        else:
            matched = type(outcome) is type(expected) and outcome.args == expected.args
        return self._check("contain", f"err value {expected!r}", matched, actual=outcome)


class Expectation(
    EqualityMatchers,
    BooleanMatchers,
    NumericMatchers,
    StringMatchers,
    CollectionMatchers,
    MappingMatchers,
    OptionalMatchers,
    OutcomeMatchers,
    AssertionChain[V],
):
    """An assertion chain with every built-in matcher available."""
