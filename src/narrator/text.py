from __future__ import annotations

import re
import sys

from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Tuple

from narrator.model import Row, Step, StepKind


PARAMETER_PATTERN = re.compile(r'\[\w+\]')


@lru_cache(maxsize=256)
def placeholder_pattern(names: Tuple[str, ...], *, bracket_only: bool = False) -> re.Pattern[str]:
    """`$name` or `[name]` for any of `names`, case-insensitive. `$name` must not be followed by a word character."""
    alternatives = '|'.join(re.escape(name) for name in sorted(names, key=len, reverse=True))
    expression = rf'\[(?P<bracket>{alternatives})\]'
    if not bracket_only:
        expression = rf'\$(?P<dollar>{alternatives})(?!\w)|{expression}'

    return re.compile(expression, re.IGNORECASE)


def substitute(text: str, values: Dict[str, str], *, bracket_only: bool = False) -> str:
    """Replace placeholders in one pass, inserted values are never substituted again."""
    if len(values) < 1:
        return text

    replacements: Dict[str, str] = {}
    for name, value in values.items():
        replacements.setdefault(name.lower(), value.strip())

    def replace(match: re.Match[str]) -> str:
        name = match.group(match.lastgroup or 'bracket')
        return replacements[name.lower()]

    return placeholder_pattern(tuple(values.keys()), bracket_only=bracket_only).sub(replace, text)


def has_parameters(text: str) -> bool:
    return PARAMETER_PATTERN.search(text) is not None


def clone_steps(steps: Iterable[Step]) -> List[Step]:
    return [step.clone() for step in steps]


def insert_column_values(steps: Iterable[Step], example: Row) -> List[Step]:
    """New steps with the example row values inserted into the step text and every table cell."""
    values = {name: example.values[name] for name in example.columns}
    expanded: List[Step] = []

    for step in steps:
        rows: List[Row] = []
        if step.kind == StepKind.TABLE:
            for row in step.rows:
                rows.append(
                    Row(
                        row.columns,
                        {name: substitute(value, values) for name, value in row.values.items()},
                    )
                )

        expanded.append(Step(substitute(step.text, values), step.source, kind=step.kind, rows=rows))

    return expanded


def expand_steps(steps: Iterable[Step], example: Row) -> List[Step]:
    return insert_column_values(clone_steps(steps), example)


def insert_row_parameters(step: Step, row: Row) -> Step:
    text = substitute(step.text, dict(row.values), bracket_only=True)

    return Step(text, step.source)


def create_step_text(step: Step) -> str:
    if len(step.rows) < 1:
        return step.text

    lines = [step.text, step.rows[0].columns_to_string()]
    lines.extend(row.values_to_string() for row in step.rows)

    return '\n'.join(lines)


def get_step_parts(line: str) -> Tuple[Optional[str], Optional[str]]:
    if len(line) > 0:
        # remove multiple white spaces
        line = re.sub(r'^\s+', '', line)
        line = re.sub(r'\s{2,}', ' ', line)
        if sys.platform == 'win32':  # pragma: no cover
            line = line.replace('\r', '')

        try:
            keyword, step = line.split(' ', 1)
        except ValueError:
            keyword, step = line, None
        keyword = keyword.strip()
    else:
        keyword, step = None, None

    return keyword, step


def outline_to_placeholders(text: str) -> str:
    """Rewrite behave style `<name>` outline parameters to `[name]`."""
    return re.sub(r'<([^<>\s][^<>]*)>', r'[\1]', text)
