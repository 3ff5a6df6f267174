from __future__ import annotations

import logging
import warnings

from typing import Any, Callable, Dict, List, NamedTuple, Optional
from pathlib import Path

from behave.i18n import languages
from behave.step_registry import StepRegistry
from behave.runner_util import exec_file, load_step_modules as behave_load_step_modules

from narrator.errors import StepDefinitionError
from narrator.model import Row, Step
from narrator.results import StepResult
from narrator.text import get_step_parts


logger = logging.getLogger(__name__)

STEP_TYPES = ('given', 'when', 'then')
CONTINUATION_TYPES = ('and', 'but')
ANY_STEP_TYPE = '*'


class StepTarget(NamedTuple):
    step_type: str
    name: str


class StepContext:
    """Attribute bag shared by the step functions and hooks of one scenario run."""

    row: Optional[Dict[str, str]]

    def __init__(self) -> None:
        self.row = None

    def __repr__(self) -> str:
        return f'StepContext({vars(self)!r})'


def load_step_modules(step_paths: List[Path]) -> None:
    """Load step modules into behave's global step registry."""
    for step_path in step_paths:
        if not step_path.is_dir():
            raise StepDefinitionError(f'{step_path.as_posix()} is not a directory')

    try:
        with warnings.catch_warnings():
            warnings.simplefilter('ignore')
            behave_load_step_modules([str(step_path) for step_path in step_paths])
    except Exception as e:
        raise StepDefinitionError(f'unable to load step modules: {e}') from e


def load_environment(path: Path) -> Dict[str, Any]:
    environment: Dict[str, Any] = {}

    try:
        exec_file(str(path), environment)
    except Exception as e:
        raise StepDefinitionError(f'unable to load {path.as_posix()}: {e}') from e

    return environment


class BehaveStepRunner:
    """Runs steps against step definitions in a behave step registry."""

    registry: StepRegistry
    environment: Dict[str, Any]
    context: StepContext

    _keywords: Dict[str, str]
    _previous_step_type: Optional[str]

    def __init__(
        self,
        registry: Optional[StepRegistry] = None,
        environment: Optional[Dict[str, Any]] = None,
        language: str = 'en',
    ) -> None:
        if registry is None:
            from behave import step_registry

            registry = step_registry.registry

        self.registry = registry
        self.environment = environment if environment is not None else {}
        self.context = StepContext()
        self._keywords = self._compile_keywords(language)
        self._previous_step_type = None

    @staticmethod
    def _compile_keywords(language: str) -> Dict[str, str]:
        try:
            localization = languages[language]
        except KeyError:
            raise ValueError(f'"{language}" is not a supported language')

        keywords: Dict[str, str] = {}
        for step_type in STEP_TYPES + CONTINUATION_TYPES:
            for keyword in localization.get(step_type, []):
                keyword = keyword.strip()
                # "*" is valid for all step types
                keywords.update({keyword: ANY_STEP_TYPE if keyword == '*' else step_type})

        return keywords

    def _resolve(self, text: str) -> List[StepTarget]:
        keyword, expression = get_step_parts(text)
        step_type = self._keywords.get(keyword or '', None)

        if step_type is None or expression is None:
            return [StepTarget(step_type, text.strip()) for step_type in STEP_TYPES]

        if step_type == ANY_STEP_TYPE:
            return [StepTarget(step_type, expression) for step_type in STEP_TYPES]

        if step_type in CONTINUATION_TYPES:
            if self._previous_step_type is None:
                return [StepTarget(step_type, expression) for step_type in STEP_TYPES]

            step_type = self._previous_step_type

        self._previous_step_type = step_type

        return [StepTarget(step_type, expression)]

    def _call_hook(self, name: str) -> None:
        hook: Optional[Callable[[StepContext], None]] = self.environment.get(name, None)

        if hook is not None:
            hook(self.context)

    def before_scenario(self) -> None:
        self.context = StepContext()
        self._previous_step_type = None
        self._call_hook('before_scenario')

    def after_scenario(self) -> None:
        self._call_hook('after_scenario')

    def run(self, step: Step, row: Optional[Row] = None) -> StepResult:
        match = None
        for target in self._resolve(step.text):
            match = self.registry.find_match(target)
            if match is not None:
                break

        if match is None:
            logger.debug(f'no step definition matching "{step.text}"')
            return StepResult.pending(step.text, 'no matching step definition')

        args: List[Any] = []
        kwargs: Dict[str, Any] = {}
        for argument in match.arguments or []:
            if argument.name is not None:
                kwargs.update({argument.name: argument.value})
            else:
                args.append(argument.value)

        self.context.row = dict(row.values) if row is not None else None

        try:
            match.func(self.context, *args, **kwargs)
        except NotImplementedError as e:
            return StepResult.pending(step.text, str(e) or 'not implemented')
        except Exception as e:
            logger.debug(f'step "{step.text}" failed: {e}')
            return StepResult.failed(step.text, e)
        finally:
            self.context.row = None

        return StepResult.passed(step.text)
