"""pytest integration: per-test evaluation scopes, fixtures and end-of-session hooks."""

from __future__ import annotations

import inspect
import logging
from pathlib import Path

import pytest

from fluentcheck.assertions.scope import EvaluationScope
from fluentcheck.fixtures import has_fixtures, run_after_all_fixtures, run_with_fixtures
from fluentcheck.reporter import get_reporter
from fluentcheck.verbose import close_logger, setup_logger

logger = logging.getLogger(__name__)

_debug_logger_key = pytest.StashKey[logging.Logger]()


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("fluentcheck")
    group.addoption(
        "--fluentcheck-summary",
        action="store_true",
        default=False,
        help="Print the fluentcheck assertion summary at the end of the run",
    )
    group.addoption(
        "--fluentcheck-debug-log",
        metavar="PATH",
        default=None,
        help="Write fluentcheck debug logging (fixtures, reporting) to PATH",
    )


def pytest_configure(config: pytest.Config) -> None:
    path = config.getoption("fluentcheck_debug_log")
    if path:
        config.stash[_debug_logger_key] = setup_logger(Path(path))


def pytest_unconfigure(config: pytest.Config) -> None:
    debug_logger = config.stash.get(_debug_logger_key, None)
    if debug_logger is not None:
        close_logger(debug_logger)
        del config.stash[_debug_logger_key]


@pytest.hookimpl(wrapper=True)
def pytest_runtest_call(item: pytest.Item):
    # expressions left pending at the end of a test are checked here
    with EvaluationScope():
        return (yield)


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function):
    """Run plain test functions through their module's registered fixtures."""
    testfunction = pyfuncitem.obj
    if hasattr(testfunction, "__fluentcheck_scope__"):
        # already wrapped by @with_fixtures
        return None
    if inspect.iscoroutinefunction(testfunction):
        return None

    scope = pyfuncitem.module.__name__
    if not has_fixtures(scope):
        return None

    funcargs = pyfuncitem.funcargs
    testargs = {arg: funcargs[arg] for arg in pyfuncitem._fixtureinfo.argnames}
    run_with_fixtures(scope, lambda: testfunction(**testargs))
    return True


def pytest_sessionfinish(session: pytest.Session, exitstatus: int) -> None:
    failures = run_after_all_fixtures()
    if failures:
        logger.error(f"{len(failures)} after_all fixture(s) failed")

    if session.config.getoption("fluentcheck_summary"):
        get_reporter().summarize()
