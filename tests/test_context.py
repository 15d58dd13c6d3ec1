import time

import pytest

from tickengine.context import (
    Context,
    ContextBuilder,
    ControlFlow,
    Inject,
    InjectMut,
)
from tickengine.entities import Entities
from tickengine.errors import ContextError, SystemFailure
from tickengine.system import System


class EventLog:
    def __init__(self):
        self.events = []


class _Recording(System):
    def __init__(self, log, *rest):
        self.log = log
        self.rest = rest
        log.events.append(("create", self.debug_name()))

    def setup(self, log, *rest):
        log.events.append(("setup", self.debug_name()))

    def update(self, log, *rest):
        log.events.append(("update", self.debug_name()))

    def teardown(self, log, *rest):
        log.events.append(("teardown", self.debug_name()))

    def destroy(self, log, *rest):
        log.events.append(("destroy", self.debug_name()))


class First(_Recording):
    dependencies = (EventLog,)


class Second(_Recording):
    dependencies = (EventLog, First)


class BrokenCreate(System):
    @classmethod
    def create(cls):
        raise ValueError("boom")


class BrokenUpdate(System):
    def update(self):
        raise ValueError("boom")


class QuitAfterThree(System):
    dependencies = (ControlFlow,)

    def __init__(self, control_flow):
        self.count = 0
        self.seen_sleep = []

    def update(self, control_flow):
        self.seen_sleep.append(control_flow.sleep_until)
        self.count += 1
        control_flow.sleep_until = time.monotonic()
        if self.count == 3:
            control_flow.quit_requested = True


def _build():
    log = EventLog()
    context = ContextBuilder().inject_mut(log).system(First).system(Second).build()
    return log, context


def test_lifecycle_order():
    log, context = _build()
    assert log.events == [
        ("create", "first"),
        ("create", "second"),
        ("setup", "first"),
        ("setup", "second"),
    ]
    log.events.clear()
    context.step()
    assert log.events == [("update", "first"), ("update", "second")]
    log.events.clear()
    context.destroy()
    assert log.events == [
        ("teardown", "second"),
        ("teardown", "first"),
        ("destroy", "second"),
        ("destroy", "first"),
    ]


def test_dependencies_resolve_to_earlier_systems():
    log, context = _build()
    second = context.get(Second)
    assert second.log is log
    assert second.rest == (context.get(First),)


def test_control_flow_is_always_present():
    context = ContextBuilder().build()
    assert context.get(ControlFlow) == ControlFlow()


def test_injected_value_is_returned():
    marker = EventLog()
    context = ContextBuilder().inject(marker).build()
    assert context.get(EventLog) is marker


def test_inject_wrappers_hold_value():
    assert Inject(3).value == 3
    assert InjectMut("a").value == "a"


def test_missing_dependency_raises():
    with pytest.raises(LookupError):
        ContextBuilder().system(First)


def test_creation_failure_is_wrapped():
    with pytest.raises(SystemFailure) as info:
        ContextBuilder().system(BrokenCreate)
    assert info.value.stage == "creation"
    assert info.value.system_name == "broken_create"
    assert isinstance(info.value.__cause__, ValueError)


def test_update_failure_is_wrapped_twice():
    context = ContextBuilder().system(BrokenUpdate).build()
    with pytest.raises(ContextError) as info:
        context.step()
    assert info.value.stage == "update"
    cause = info.value.__cause__
    assert isinstance(cause, SystemFailure)
    assert cause.stage == "update"
    assert cause.system_name == "broken_update"
    assert isinstance(cause.__cause__, ValueError)


def test_destroy_is_idempotent():
    log, context = _build()
    context.destroy()
    count = len(log.events)
    context.destroy()
    assert len(log.events) == count


def test_use_after_destroy_raises():
    _, context = _build()
    context.destroy()
    with pytest.raises(RuntimeError):
        context.step()
    with pytest.raises(RuntimeError):
        context.get(First)


def test_run_until_quit_then_destroys():
    context = ContextBuilder().system(QuitAfterThree).build()
    system = context.get(QuitAfterThree)
    context.run()
    assert system.count == 3
    assert system.seen_sleep == [None, None, None]
    with pytest.raises(RuntimeError):
        context.get(ControlFlow)


def test_run_propagates_failure():
    context = ContextBuilder().system(BrokenUpdate).build()
    with pytest.raises(ContextError):
        context.run()


def test_context_manager_destroys():
    log = EventLog()
    with ContextBuilder().inject_mut(log).system(First).build() as context:
        assert isinstance(context, Context)
    assert log.events[-1] == ("destroy", "first")


def test_entities_system_in_context():
    context = ContextBuilder().system(Entities).build()
    entities = context.get(Entities)
    root = entities.add_root("root")
    entities.remove(root)
    context.step()
    assert root not in entities
    assert entities.last_removed() == (root,)