"""Fluent ``expect(value)`` assertions with per-scope test fixtures."""

from fluentcheck.assertions import (
    AssertionChain,
    AssertionStep,
    EvaluationScope,
    Expectation,
    LogicalOp,
    Sentence,
    expect,
    expectations,
)
from fluentcheck.config import RenderConfig, configure, get_config, load_config, set_config
from fluentcheck.errors import (
    AssertionFailure,
    ConcurrencyInvariantViolation,
    FixtureCallbackFailure,
    FluentCheckError,
    InvalidMatcherInput,
    UnscopedExpectationWarning,
)
from fluentcheck.events import EventBus, on_failure, on_session_completed, on_success
from fluentcheck.fixtures import (
    FixtureKind,
    FixtureRegistry,
    after_all,
    before_all,
    is_in_fixture_test,
    register_after_all,
    register_before_all,
    register_module_fixtures,
    register_setup,
    register_teardown,
    run_after_all_fixtures,
    run_with_fixtures,
    setup,
    tear_down,
    with_fixtures,
)
from fluentcheck.reporter import (
    Reporter,
    TestSessionResult,
    disable_deduplication,
    disable_silent_mode,
    enable_deduplication,
    enable_silent_mode,
    reset_message_cache,
    summarize,
)

__all__ = [
    "AssertionChain",
    "AssertionFailure",
    "AssertionStep",
    "ConcurrencyInvariantViolation",
    "EvaluationScope",
    "EventBus",
    "Expectation",
    "FixtureCallbackFailure",
    "FixtureKind",
    "FixtureRegistry",
    "FluentCheckError",
    "InvalidMatcherInput",
    "LogicalOp",
    "RenderConfig",
    "Reporter",
    "Sentence",
    "TestSessionResult",
    "UnscopedExpectationWarning",
    "after_all",
    "before_all",
    "configure",
    "disable_deduplication",
    "disable_silent_mode",
    "enable_deduplication",
    "enable_silent_mode",
    "expect",
    "expectations",
    "get_config",
    "is_in_fixture_test",
    "load_config",
    "on_failure",
    "on_session_completed",
    "on_success",
    "register_after_all",
    "register_before_all",
    "register_module_fixtures",
    "register_setup",
    "register_teardown",
    "reset_message_cache",
    "run_after_all_fixtures",
    "run_with_fixtures",
    "set_config",
    "setup",
    "summarize",
    "tear_down",
    "with_fixtures",
]
