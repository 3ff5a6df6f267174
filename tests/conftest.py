from typing import Generator

import pytest

from behave import step_registry

from narrator.events import EventHub

from .helpers import DummyStepRunner, EventRecorder


@pytest.fixture
def hub() -> EventHub:
    return EventHub()


@pytest.fixture
def recorder(hub: EventHub) -> EventRecorder:
    return EventRecorder(hub)


@pytest.fixture
def step_runner() -> DummyStepRunner:
    return DummyStepRunner()


def _clear_behave_registry() -> None:
    # step decorators are bound to the global registry instance, clear it in place
    for step_definitions in step_registry.registry.steps.values():
        step_definitions.clear()


@pytest.fixture
def behave_registry() -> Generator[step_registry.StepRegistry, None, None]:
    _clear_behave_registry()
    try:
        yield step_registry.registry
    finally:
        _clear_behave_registry()
