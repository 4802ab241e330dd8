"""Tests for the event bus."""

from fluentcheck.assertions.chain import AssertionChain
from fluentcheck.events import EventBus, Failure, SessionCompleted, Success


def test_emit_dispatches_by_event_type(bus):
    chain = AssertionChain(1, "x")
    successes, failures, completions = [], [], []
    bus.on_success(successes.append)
    bus.on_failure(failures.append)
    bus.on_session_completed(lambda: completions.append(True))

    bus.emit(Success(chain))
    bus.emit(Failure(chain))
    bus.emit(SessionCompleted())

    assert successes == [chain]
    assert failures == [chain]
    assert completions == [True]


def test_handlers_run_in_subscription_order(bus):
    order = []
    bus.on_success(lambda chain: order.append("first"))
    bus.on_success(lambda chain: order.append("second"))
    bus.emit(Success(AssertionChain(1, "x")))
    assert order == ["first", "second"]


def test_emit_without_subscribers_is_noop(bus):
    bus.emit(Failure(AssertionChain(1, "x")))


def test_unsubscribe_and_clear(bus):
    seen = []
    handler = bus.on_failure(seen.append)
    bus.unsubscribe(handler)
    bus.emit(Failure(AssertionChain(1, "x")))
    assert seen == []

    bus.on_failure(seen.append)
    bus.clear()
    bus.emit(Failure(AssertionChain(1, "x")))
    assert seen == []


def test_handler_may_subscribe_during_emit(bus):
    """Handlers run outside the bus lock."""
    late = []

    def subscribe_more(chain):
        bus.on_success(late.append)

    bus.on_success(subscribe_more)
    bus.emit(Success(AssertionChain(1, "x")))
    assert late == []

    bus.emit(Success(AssertionChain(2, "y")))
    assert len(late) == 1


def test_buses_are_independent():
    a, b = EventBus(), EventBus()
    seen = []
    a.on_success(seen.append)
    b.emit(Success(AssertionChain(1, "x")))
    assert seen == []


def test_unsubscribe_bound_method(bus):
    """A bound method is a new object on every access but still unsubscribes."""

    class Counter:
        def __init__(self):
            self.count = 0

        def handle(self, chain):
            self.count += 1

    counter = Counter()
    bus.on_success(counter.handle)
    bus.unsubscribe(counter.handle)
    bus.emit(Success(AssertionChain(1, "x")))
    assert counter.count == 0
