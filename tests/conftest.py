"""Pytest configuration and fixtures."""

import logging

import pytest

from fluentcheck.config import RenderConfig, set_config
from fluentcheck.events import EventBus, get_event_bus
from fluentcheck.fixtures import FixtureRegistry, set_registry
from fluentcheck.reporter import Reporter

pytest_plugins = ["pytester"]


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Detach handlers from fluentcheck loggers after each test to prevent name collisions."""
    yield

    for name in list(logging.Logger.manager.loggerDict.keys()):
        if not name.startswith("fluentcheck"):
            continue
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def plain_config():
    """Deterministic, colourless rendering for every test."""
    set_config(RenderConfig(use_colors=False))
    yield
    set_config(None)


@pytest.fixture(autouse=True)
def registry():
    """Fresh fixture registry so decorators in one test don't leak into another."""
    fresh = FixtureRegistry()
    previous = set_registry(fresh)
    yield fresh
    set_registry(previous)


@pytest.fixture
def captured_events():
    """Record every Success/Failure emitted on the default bus as (kind, chain)."""
    events = []
    bus = get_event_bus()
    handlers = [
        bus.on_success(lambda chain: events.append(("success", chain))),
        bus.on_failure(lambda chain: events.append(("failure", chain))),
    ]
    yield events
    for handler in handlers:
        bus.unsubscribe(handler)


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def reporter(bus):
    """A reporter on its own bus, initialised."""
    r = Reporter(bus=bus, config=RenderConfig(use_colors=False))
    r.init()
    return r
