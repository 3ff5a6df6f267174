from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Optional, TYPE_CHECKING
from dataclasses import dataclass, field

if TYPE_CHECKING:  # pragma: no cover
    from narrator.results import StepResult


class ExampleColumns(tuple):  # type: ignore[type-arg]
    """Ordered column names, duplicates are dropped keeping the first occurrence."""

    def __new__(cls, names: Iterable[str] = ()) -> ExampleColumns:
        unique: List[str] = []
        for name in names:
            if name not in unique:
                unique.append(name)

        return super().__new__(cls, unique)

    def __repr__(self) -> str:
        return f'ExampleColumns({list(self)!r})'


@dataclass
class Row:
    columns: ExampleColumns
    values: Dict[str, str]

    def __post_init__(self) -> None:
        if not isinstance(self.columns, ExampleColumns):
            self.columns = ExampleColumns(self.columns)

        missing = [name for name in self.columns if name not in self.values]
        if len(missing) > 0:
            raise ValueError(f'row is missing values for columns: {", ".join(missing)}')

    @classmethod
    def from_cells(cls, headings: Iterable[str], cells: Iterable[str]) -> Row:
        columns = ExampleColumns(headings)
        cells = list(cells)

        if len(columns) != len(cells):
            raise ValueError(f'expected {len(columns)} cells, got {len(cells)}')

        return cls(columns, dict(zip(columns, cells)))

    def copy(self) -> Row:
        return Row(ExampleColumns(self.columns), dict(self.values))

    def cells(self) -> List[str]:
        return [self.values[name] for name in self.columns]

    def columns_to_string(self) -> str:
        return _format_cells(self.columns)

    def values_to_string(self) -> str:
        return _format_cells(self.cells())


def _format_cells(cells: Iterable[str]) -> str:
    return '| ' + ' | '.join(cells) + ' |'


class StepKind(Enum):
    PLAIN = 'plain'
    TABLE = 'table'


@dataclass
class Step:
    text: str
    source: Optional[str] = field(default=None)
    kind: StepKind = field(default=StepKind.PLAIN)
    rows: List[Row] = field(default_factory=list)
    result: Optional[StepResult] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.kind == StepKind.PLAIN and len(self.rows) > 0:
            raise ValueError(f'plain step "{self.text}" cannot have table rows')

    @classmethod
    def table(cls, text: str, rows: Iterable[Row], source: Optional[str] = None) -> Step:
        return cls(text, source, kind=StepKind.TABLE, rows=list(rows))

    @property
    def is_table(self) -> bool:
        return self.kind == StepKind.TABLE

    def add_row(self, row: Row) -> None:
        if not self.is_table:
            raise ValueError(f'plain step "{self.text}" cannot have table rows')

        self.rows.append(row)

    def clone(self) -> Step:
        """Structurally independent copy, without any result."""
        return Step(self.text, self.source, kind=self.kind, rows=[row.copy() for row in self.rows])


@dataclass
class Scenario:
    title: str
    steps: List[Step] = field(default_factory=list)
    examples: List[Row] = field(default_factory=list)
    feature: Optional[Feature] = field(default=None, repr=False, compare=False)

    @property
    def is_data_driven(self) -> bool:
        return len(self.examples) > 0

    def add_step(self, step: Step) -> None:
        self.steps.append(step)


@dataclass
class Feature:
    title: str
    narrative: str = field(default='')
    background: Optional[Scenario] = field(default=None)
    scenarios: List[Scenario] = field(default_factory=list)
    source: Optional[str] = field(default=None)

    def __post_init__(self) -> None:
        for scenario in self.scenarios:
            scenario.feature = self

        if self.background is not None:
            self.background.feature = self

    def add_scenario(self, scenario: Scenario) -> None:
        scenario.feature = self
        self.scenarios.append(scenario)
