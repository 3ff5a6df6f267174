from __future__ import annotations

import logging

from typing import Iterable, List, Optional, Protocol

from narrator.events import EventBus, ScenarioFinishedEvent, ScenarioResultEvent, ScenarioStartedEvent
from narrator.model import Feature, Row, Scenario, Step, StepKind
from narrator.results import BackgroundStepResult, ScenarioExampleResult, ScenarioResult, StepResult
from narrator.text import clone_steps, create_step_text, expand_steps, has_parameters, insert_row_parameters


logger = logging.getLogger(__name__)


class StepRunner(Protocol):
    """Matches step text to application code and reports the outcome."""

    def run(self, step: Step, row: Optional[Row] = None) -> StepResult: ...

    def before_scenario(self) -> None: ...

    def after_scenario(self) -> None: ...


class ScenarioRunner:
    """Runs the scenarios of a feature and publishes their lifecycle and results.

    Per scenario exactly three events are published, in order: `ScenarioStartedEvent`,
    `ScenarioResultEvent` and `ScenarioFinishedEvent`. A scenario with examples is run once
    per example row, on its own copy of the steps, but still results in one result event.

    Step failures are contained in the scenario result. An exception from
    `StepRunner.before_scenario` is not handled and aborts the rest of the feature, while an
    exception from `StepRunner.after_scenario` only fails the scenario if no step has failed.
    """

    hub: EventBus
    step_runner: StepRunner

    def __init__(self, hub: EventBus, step_runner: StepRunner) -> None:
        self.hub = hub
        self.step_runner = step_runner

    def run(self, feature: Feature) -> None:
        for scenario in feature.scenarios:
            logger.debug(f'starting scenario "{scenario.title}"')
            self.hub.publish(ScenarioStartedEvent(self, scenario))

            if scenario.is_data_driven:
                self.run_examples(scenario)
            else:
                self.run_scenario(scenario)

            self.hub.publish(ScenarioFinishedEvent(self, scenario))
            logger.debug(f'finished scenario "{scenario.title}"')

    def run_scenario(self, scenario: Scenario) -> None:
        scenario_result = self._run(scenario, scenario.steps)
        self.hub.publish(ScenarioResultEvent(self, scenario_result))

    def run_examples(self, scenario: Scenario) -> None:
        example_results = ScenarioExampleResult(scenario.feature, scenario.title, scenario.steps, scenario.examples)

        for index, example in enumerate(scenario.examples, start=1):
            logger.debug(f'running example {index} of {len(scenario.examples)} for scenario "{scenario.title}"')
            steps = expand_steps(scenario.steps, example)
            example_results.add_result(self._run(scenario, steps))

        self.hub.publish(ScenarioResultEvent(self, example_results))

    def _run(self, scenario: Scenario, steps: Iterable[Step]) -> ScenarioResult:
        feature = scenario.feature
        scenario_result = ScenarioResult(feature, scenario.title)

        self.step_runner.before_scenario()

        if feature is not None and feature.background is not None:
            scenario_result.add_step_results(self.run_background(feature.background))

        scenario_result.add_step_results(self.run_steps(steps))

        self.execute_after_scenario(scenario_result)

        return scenario_result

    def run_background(self, background: Scenario) -> List[StepResult]:
        steps = clone_steps(background.steps)

        return [BackgroundStepResult.wrap(background.title, result) for result in self.run_steps(steps)]

    def run_steps(self, steps: Iterable[Step]) -> List[StepResult]:
        step_results: List[StepResult] = []

        for step in steps:
            if step.kind == StepKind.TABLE:
                step.result = self.run_table_step(step)
            elif step.kind == StepKind.PLAIN:
                step.result = self.step_runner.run(step)
            else:  # pragma: no cover
                raise ValueError(f'unknown step kind {step.kind}')

            step_results.append(step.result)

        return step_results

    def run_table_step(self, step: Step) -> StepResult:
        step_result = StepResult.passed(create_step_text(step))
        parameterized = has_parameters(step.text)

        for row in step.rows:
            row_step = insert_row_parameters(step, row) if parameterized else step
            step_result.merge(self.step_runner.run(row_step, row))

        return step_result

    def execute_after_scenario(self, scenario_result: ScenarioResult) -> None:
        try:
            self.step_runner.after_scenario()
        except Exception as e:
            logger.warning(f'after scenario hook failed for "{scenario_result.title}": {e}', exc_info=True)
            scenario_result.fail(e)
