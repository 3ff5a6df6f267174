from typing import Any, Dict, List, Optional, Tuple, Union

from narrator.events import Event, EventHub
from narrator.model import Row, Step
from narrator.results import Status, StepResult


Outcome = Union[Status, BaseException]


class DummyStepRunner:
    """Step runner returning scripted outcomes, keyed by step text. Unknown steps pass."""

    outcomes: Dict[str, Outcome]
    calls: List[Tuple[str, Optional[Dict[str, str]]]]
    hook_calls: List[str]
    before_error: Optional[BaseException]
    after_error: Optional[BaseException]

    def __init__(self, outcomes: Optional[Dict[str, Outcome]] = None) -> None:
        self.outcomes = outcomes if outcomes is not None else {}
        self.calls = []
        self.hook_calls = []
        self.before_error = None
        self.after_error = None

    @property
    def texts(self) -> List[str]:
        return [text for text, _ in self.calls]

    def run(self, step: Step, row: Optional[Row] = None) -> StepResult:
        self.calls.append((step.text, dict(row.values) if row is not None else None))

        key = step.text
        if row is not None:
            key = f'{step.text} {row.values_to_string()}'
            if key not in self.outcomes:
                key = step.text

        outcome = self.outcomes.get(key, Status.PASSED)

        if isinstance(outcome, BaseException):
            return StepResult.failed(step.text, outcome)
        elif outcome == Status.PENDING:
            return StepResult.pending(step.text)

        return StepResult.passed(step.text)

    def before_scenario(self) -> None:
        self.hook_calls.append('before_scenario')
        if self.before_error is not None:
            raise self.before_error

    def after_scenario(self) -> None:
        self.hook_calls.append('after_scenario')
        if self.after_error is not None:
            raise self.after_error


class EventRecorder:
    events: List[Event]

    def __init__(self, hub: EventHub) -> None:
        self.events = []
        hub.subscribe(Event, self.events.append)

    @property
    def names(self) -> List[str]:
        return [event.__class__.__name__ for event in self.events]

    def of_type(self, event_type: Any) -> List[Any]:
        return [event for event in self.events if isinstance(event, event_type)]
