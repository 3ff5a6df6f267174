from __future__ import annotations

from enum import IntEnum
from typing import Iterable, List, Optional, Sequence, Union, TYPE_CHECKING
from dataclasses import dataclass, field

if TYPE_CHECKING:  # pragma: no cover
    from narrator.model import Feature, Row, Step


class Status(IntEnum):
    """Step outcome, ordered so that the worst outcome has the highest value."""

    PASSED = 0
    PENDING = 1
    FAILED = 2

    def __str__(self) -> str:
        return self.name.lower()


def worst(statuses: Iterable[Status], default: Status = Status.PASSED) -> Status:
    result = default
    for status in statuses:
        if status > result:
            result = status

    return result


@dataclass
class StepResult:
    step: str
    status: Status = field(default=Status.PASSED)
    cause: Optional[BaseException] = field(default=None, compare=False)
    reason: Optional[str] = field(default=None)

    @classmethod
    def passed(cls, step: str) -> StepResult:
        return cls(step)

    @classmethod
    def pending(cls, step: str, reason: Optional[str] = None) -> StepResult:
        return cls(step, Status.PENDING, reason=reason)

    @classmethod
    def failed(cls, step: str, cause: BaseException) -> StepResult:
        return cls(step, Status.FAILED, cause=cause)

    @property
    def is_failed(self) -> bool:
        return self.status == Status.FAILED

    @property
    def is_pending(self) -> bool:
        return self.status == Status.PENDING

    def merge(self, other: StepResult) -> None:
        """Fold another outcome into this one, a failure is never replaced."""
        if other.status <= self.status:
            return

        self.status = other.status
        self.cause = other.cause
        self.reason = other.reason


@dataclass
class BackgroundStepResult(StepResult):
    background: str = field(default='')

    @classmethod
    def wrap(cls, background: str, result: StepResult) -> BackgroundStepResult:
        return cls(result.step, result.status, cause=result.cause, reason=result.reason, background=background)


class ScenarioResult:
    feature: Optional[Feature]
    title: str
    step_results: List[StepResult]
    failure: Optional[BaseException]

    def __init__(self, feature: Optional[Feature], title: str) -> None:
        self.feature = feature
        self.title = title
        self.step_results = []
        self.failure = None

    def __repr__(self) -> str:
        return f'ScenarioResult(title={self.title!r}, status={self.status!s}, steps={len(self.step_results)})'

    def add_step_results(self, results: Iterable[StepResult]) -> None:
        self.step_results.extend(results)

    def has_failed_steps(self) -> bool:
        return any(result.is_failed for result in self.step_results)

    def fail(self, cause: BaseException) -> None:
        if self.has_failed_steps() or self.failure is not None:
            return

        self.failure = cause

    @property
    def status(self) -> Status:
        if self.failure is not None:
            return Status.FAILED

        return worst(result.status for result in self.step_results)

    @property
    def scenarios_run(self) -> int:
        return 1

    @property
    def scenarios_failed(self) -> int:
        return int(self.status == Status.FAILED)

    @property
    def scenarios_pending(self) -> int:
        return int(self.status == Status.PENDING)

    @property
    def steps(self) -> int:
        return len(self.step_results)

    @property
    def steps_failed(self) -> int:
        return sum(1 for result in self.step_results if result.is_failed)

    @property
    def steps_pending(self) -> int:
        return sum(1 for result in self.step_results if result.is_pending)


class ScenarioExampleResult:
    """All runs of a data-driven scenario, one ScenarioResult per example row."""

    feature: Optional[Feature]
    title: str
    steps_template: Sequence[Step]
    examples: Sequence[Row]
    results: List[ScenarioResult]

    def __init__(self, feature: Optional[Feature], title: str, steps: Sequence[Step], examples: Sequence[Row]) -> None:
        self.feature = feature
        self.title = title
        self.steps_template = steps
        self.examples = examples
        self.results = []

    def __repr__(self) -> str:
        return f'ScenarioExampleResult(title={self.title!r}, status={self.status!s}, rows={len(self.results)})'

    def add_result(self, result: ScenarioResult) -> None:
        self.results.append(result)

    @property
    def step_results(self) -> List[StepResult]:
        return [step_result for result in self.results for step_result in result.step_results]

    @property
    def status(self) -> Status:
        return worst(result.status for result in self.results)

    @property
    def scenarios_run(self) -> int:
        return len(self.results)

    @property
    def scenarios_failed(self) -> int:
        return sum(result.scenarios_failed for result in self.results)

    @property
    def scenarios_pending(self) -> int:
        return sum(result.scenarios_pending for result in self.results)

    @property
    def steps(self) -> int:
        return sum(result.steps for result in self.results)

    @property
    def steps_failed(self) -> int:
        return sum(result.steps_failed for result in self.results)

    @property
    def steps_pending(self) -> int:
        return sum(result.steps_pending for result in self.results)


AnyScenarioResult = Union[ScenarioResult, ScenarioExampleResult]
