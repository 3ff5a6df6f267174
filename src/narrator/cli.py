from __future__ import annotations

import logging

from typing import List, Optional
from argparse import Namespace as Arguments
from pathlib import Path

from behave.parser import ParserError
from colorama import init, Fore

from narrator.events import EventHub, ScenarioResultEvent
from narrator.listeners import SummaryListener
from narrator.loader import parse_feature_file
from narrator.results import AnyScenarioResult, Status
from narrator.runner import ScenarioRunner
from narrator.steps import BehaveStepRunner, load_environment, load_step_modules


logger = logging.getLogger(__name__)


def _get_status_color(status: Optional[Status]) -> str:
    if status == Status.FAILED:
        return Fore.RED
    elif status == Status.PENDING:
        return Fore.YELLOW
    elif status == Status.PASSED:
        return Fore.GREEN

    return Fore.RESET


def result_to_text(result: AnyScenarioResult) -> str:
    color = _get_status_color(result.status)
    feature = result.feature.title if result.feature is not None else 'unknown'
    scenario = result.title

    if result.scenarios_run > 1:
        scenario = f'{scenario} [{result.scenarios_run} examples]'

    return '\t'.join(
        [
            f'{feature} ({scenario})',
            f'{color}{str(result.status).upper()}{Fore.RESET}',
        ]
    )


def collect_feature_files(files: List[str]) -> List[Path]:
    feature_files: List[Path] = []

    for file in files:
        path = Path(file)

        if path.is_dir():
            feature_files.extend(sorted(path.rglob('*.feature')))
        else:
            feature_files.append(path)

    return feature_files


def cli(args: Arguments) -> int:
    # init colorama for ansi colors
    init()

    files = collect_feature_files(args.files)

    if len(files) < 1:
        logger.error('no feature files found')
        return 1

    steps_path = Path(args.steps) if args.steps is not None else files[0].parent / 'steps'
    load_step_modules([steps_path])

    environment_file = steps_path.parent / 'environment.py'
    environment = load_environment(environment_file) if environment_file.exists() else None

    hub = EventHub()
    summary = SummaryListener(hub)
    hub.subscribe(ScenarioResultEvent, lambda event: print(result_to_text(event.result)))

    runner = ScenarioRunner(hub, BehaveStepRunner(environment=environment, language=args.language))

    rc: int = 0
    for file in files:
        try:
            feature = parse_feature_file(file, language=args.language)
        except (ParserError, ValueError):
            logger.exception(f'unable to parse {file.as_posix()}')
            rc = 1
            continue

        try:
            runner.run(feature)
        except Exception:
            logger.exception(f'feature "{feature.title}" aborted')
            rc = 1

    for line in summary.summary():
        print(line)

    if summary.scenarios_failed > 0:
        rc = 1

    return rc
