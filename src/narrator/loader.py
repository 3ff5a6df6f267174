from __future__ import annotations

import logging

from typing import List, Optional
from pathlib import Path

from behave.parser import parse_feature
from behave import model as behave_model

from narrator.model import Feature, Row, Scenario, Step
from narrator.text import outline_to_placeholders


logger = logging.getLogger(__name__)


def _source(item: behave_model.Step) -> Optional[str]:
    filename = getattr(item, 'filename', None)
    line = getattr(item, 'line', None)

    if filename is None:
        return None

    return f'{filename}:{line}' if line is not None else str(filename)


def _rows(table: behave_model.Table, *, outline: bool) -> List[Row]:
    rows: List[Row] = []
    for row in table.rows:
        cells = [outline_to_placeholders(cell) if outline else cell for cell in row.cells]
        rows.append(Row.from_cells(table.headings, cells))

    return rows


def load_step(step: behave_model.Step, *, outline: bool = False) -> Step:
    text = f'{step.keyword} {step.name}'
    if outline:
        text = outline_to_placeholders(text)

    if step.table is None:
        return Step(text, _source(step))

    return Step.table(text, _rows(step.table, outline=outline), _source(step))


def load_scenario(scenario: behave_model.Scenario) -> Scenario:
    outline = isinstance(scenario, behave_model.ScenarioOutline)
    steps = [load_step(step, outline=outline) for step in scenario.steps]
    examples: List[Row] = []

    if outline:
        for example in scenario.examples:
            if example.table is None:
                continue

            examples.extend(_rows(example.table, outline=False))

        if len(examples) < 1:
            logger.warning(f'scenario outline "{scenario.name}" has no example rows')

    return Scenario(scenario.name, steps, examples)


def load_feature(feature: behave_model.Feature) -> Feature:
    background: Optional[Scenario] = None
    if feature.background is not None:
        background = Scenario(feature.background.name, [load_step(step) for step in feature.background.steps])

    return Feature(
        feature.name,
        '\n'.join(feature.description),
        background=background,
        scenarios=[load_scenario(scenario) for scenario in feature.scenarios],
        source=feature.filename,
    )


def parse_feature_file(path: Path, language: Optional[str] = None) -> Feature:
    parsed = parse_feature(path.read_text(encoding='utf-8'), language=language, filename=path.as_posix())

    if parsed is None:
        raise ValueError(f'unable to parse {path.as_posix()}')

    logger.debug(f'loaded feature "{parsed.name}" from {path.as_posix()}')

    return load_feature(parsed)
