"""Tests for immutable assertion chains."""

import pytest

from fluentcheck.assertions.base import LogicalOp
from fluentcheck.assertions.chain import AssertionChain
from fluentcheck.assertions.sentence import Sentence
from fluentcheck.config import configure
from fluentcheck.errors import AssertionFailure


def _positive(chain, value):
    return chain.add_step(Sentence("be", "positive").with_actual(repr(value)), value > 0)


# --- construction ---


def test_new_chain_is_empty_and_final():
    chain = AssertionChain(5, "x")
    assert chain.steps == ()
    assert chain.is_final is True
    assert chain.pending_negation is False
    assert chain.expression.latest is chain
    assert chain.expression.evaluated is False


def test_empty_chain_passes_vacuously():
    chain = AssertionChain(5, "x")
    assert chain.passed is True
    assert chain.auto_evaluate() is None


# --- steps and negation ---


def test_add_step_records_sentence_and_result():
    chain = _positive(AssertionChain(5, "x"), 5)
    assert len(chain.steps) == 1
    step = chain.steps[0]
    assert step.passed is True
    assert step.logical_op is None
    assert step.sentence.subject == "x"
    assert step.sentence.negated is False


def test_negation_inverts_result_and_sentence():
    chain = _positive(AssertionChain(-5, "x").negate(), -5)
    step = chain.steps[0]
    assert step.passed is True
    assert step.sentence.negated is True
    assert chain.pending_negation is False


def test_negation_applies_to_exactly_one_step():
    chain = AssertionChain(5, "x").not_()
    chain = _positive(chain, 5)
    chain = chain.and_()
    chain = _positive(chain, 5)
    assert [s.passed for s in chain.steps] == [False, True]
    assert [s.sentence.negated for s in chain.steps] == [True, False]


def test_subject_strips_leading_reference_marker():
    chain = _positive(AssertionChain(5, "&count"), 5)
    assert chain.steps[0].sentence.subject == "count"


# --- value semantics ---


def test_earlier_links_are_unchanged():
    first = _positive(AssertionChain(5, "x"), 5)
    second = first.and_()
    third = _positive(second, 5)

    assert len(first.steps) == 1
    assert first.steps[0].logical_op is None
    assert first.is_final is True
    assert second.is_final is False
    assert len(third.steps) == 2
    assert third.steps[0].logical_op is LogicalOp.AND


def test_links_share_one_expression():
    first = _positive(AssertionChain(5, "x"), 5)
    last = _positive(first.or_(), 5)
    assert first.expression is last.expression
    assert last.expression.latest is last


# --- connectors and finality ---


def test_set_connector_without_steps_is_noop():
    chain = AssertionChain(5, "x").set_connector(LogicalOp.OR)
    assert chain.steps == ()


def test_set_connector_replaces_last_connector():
    chain = _positive(AssertionChain(5, "x"), 5)
    chain = chain.set_connector(LogicalOp.AND).set_connector(LogicalOp.OR)
    assert chain.steps[-1].logical_op is LogicalOp.OR


def test_connector_marks_intermediate_and_step_marks_final():
    chain = _positive(AssertionChain(5, "x"), 5)
    assert chain.and_().is_final is False
    assert chain.or_().is_final is False
    assert _positive(chain.and_(), 5).is_final is True
    assert chain.mark_intermediate().mark_final().is_final is True


def test_intermediate_chain_does_not_auto_evaluate(captured_events):
    chain = _positive(AssertionChain(-5, "x"), -5).and_()
    assert chain.auto_evaluate() is None
    assert captured_events == []


# --- evaluation ---


def test_evaluate_returns_outcome_without_raising(captured_events):
    chain = _positive(AssertionChain(-5, "x"), -5)
    assert chain.evaluate() is False
    assert captured_events == [("failure", chain)]
    assert chain.expression.evaluated is True


def test_evaluate_emits_success(captured_events):
    chain = _positive(AssertionChain(5, "x"), 5)
    assert chain.evaluate() is True
    assert captured_events == [("success", chain)]


def test_auto_evaluate_raises_on_failure(captured_events):
    chain = _positive(AssertionChain(-5, "x"), -5)
    with pytest.raises(AssertionFailure) as excinfo:
        chain.auto_evaluate()
    assert excinfo.value.chain is chain
    assert captured_events == [("failure", chain)]


def test_auto_evaluate_runs_at_most_once(captured_events):
    chain = _positive(AssertionChain(5, "x"), 5)
    assert chain.auto_evaluate() is True
    assert chain.auto_evaluate() is None
    assert len(captured_events) == 1


def test_explicit_evaluate_prevents_auto_evaluation(captured_events):
    chain = _positive(AssertionChain(-5, "x"), -5)
    chain.evaluate()
    assert chain.auto_evaluate() is None
    assert len(captured_events) == 1


# --- failure messages ---


def test_plain_failure_message_describes_first_step():
    chain = _positive(AssertionChain(-5, "x"), -5)
    assert chain.failure_message() == "expected x to be positive (got -5)"


def test_plain_failure_message_with_negation():
    chain = _positive(AssertionChain(5, "x").not_(), 5)
    assert chain.failure_message() == "expected x to not be positive (got 5)"


def test_enhanced_failure_message_lists_every_step():
    chain = AssertionChain(5, "number", enhanced=True)
    chain = _positive(chain, 5).and_()
    chain = chain.add_step(Sentence("be", "even").with_actual("5"), False)

    message = chain.failure_message()
    assert message.splitlines() == [
        "number is positive AND is even",
        "  ✓ is positive",
        "  ✗ is even (got 5)",
    ]


def test_enhanced_output_follows_config_when_unset():
    chain = _positive(AssertionChain(-1, "n"), -1)
    configure(enhanced_output=True)
    assert chain.failure_message().startswith("n is positive\n")
    assert AssertionChain(-1, "n", enhanced=False).enhanced is False


def test_repr_mentions_label():
    chain = _positive(AssertionChain(5, "x"), 5)
    assert "label='x'" in repr(chain)


def test_enhanced_failure_message_uses_configured_symbols():
    configure(use_unicode_symbols=False)
    chain = _positive(AssertionChain(-1, "n", enhanced=True), -1)
    assert chain.failure_message().splitlines() == ["n is positive", "  - is positive (got -1)"]
