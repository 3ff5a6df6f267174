from __future__ import annotations

from typing import List

from narrator.events import EventHub, ScenarioResultEvent, Subscription
from narrator.results import AnyScenarioResult, Status


class SummaryListener:
    """Accumulates totals from published scenario results."""

    scenarios_run: int
    scenarios_failed: int
    scenarios_pending: int
    steps: int
    steps_failed: int
    steps_pending: int
    results: List[AnyScenarioResult]

    subscription: Subscription

    def __init__(self, hub: EventHub) -> None:
        self.reset()
        self.subscription = hub.subscribe(ScenarioResultEvent, self.on_scenario_result)

    def reset(self) -> None:
        self.scenarios_run = 0
        self.scenarios_failed = 0
        self.scenarios_pending = 0
        self.steps = 0
        self.steps_failed = 0
        self.steps_pending = 0
        self.results = []

    def on_scenario_result(self, event: ScenarioResultEvent) -> None:
        result = event.result

        self.results.append(result)
        self.scenarios_run += result.scenarios_run
        self.scenarios_failed += result.scenarios_failed
        self.scenarios_pending += result.scenarios_pending
        self.steps += result.steps
        self.steps_failed += result.steps_failed
        self.steps_pending += result.steps_pending

    @property
    def failed(self) -> List[AnyScenarioResult]:
        return [result for result in self.results if result.status == Status.FAILED]

    def summary(self) -> List[str]:
        return [
            f'Scenarios run: {self.scenarios_run}, Failures: {self.scenarios_failed}, Pending: {self.scenarios_pending}',
            f'Steps {self.steps}, failed {self.steps_failed}, pending {self.steps_pending}',
        ]
