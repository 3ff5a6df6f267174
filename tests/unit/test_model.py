import pytest

from narrator.model import ExampleColumns, Feature, Row, Scenario, Step, StepKind


class TestExampleColumns:
    def test___new__(self) -> None:
        columns = ExampleColumns(['name', 'age', 'name'])

        assert list(columns) == ['name', 'age']
        assert isinstance(columns, tuple)
        assert ExampleColumns() == ()
        assert repr(columns) == "ExampleColumns(['name', 'age'])"


class TestRow:
    def test___post_init__(self) -> None:
        row = Row(['name', 'age'], {'name': 'alice', 'age': '30'})  # type: ignore[arg-type]

        assert isinstance(row.columns, ExampleColumns)

        with pytest.raises(ValueError, match='row is missing values for columns: age'):
            Row(ExampleColumns(['name', 'age']), {'name': 'alice'})

    def test_from_cells(self) -> None:
        row = Row.from_cells(['name', 'age'], ['alice', '30'])

        assert list(row.columns) == ['name', 'age']
        assert row.values == {'name': 'alice', 'age': '30'}
        assert row.cells() == ['alice', '30']
        assert row.columns_to_string() == '| name | age |'
        assert row.values_to_string() == '| alice | 30 |'

        with pytest.raises(ValueError, match='expected 2 cells, got 1'):
            Row.from_cells(['name', 'age'], ['alice'])

    def test_copy(self) -> None:
        row = Row.from_cells(['name'], ['alice'])
        copy = row.copy()

        assert copy == row
        assert copy is not row
        assert copy.values is not row.values

        copy.values['name'] = 'bob'

        assert row.values['name'] == 'alice'


class TestStep:
    def test_plain(self) -> None:
        step = Step('Given a step', 'a.feature:3')

        assert step.kind == StepKind.PLAIN
        assert not step.is_table
        assert step.rows == []
        assert step.result is None

        with pytest.raises(ValueError, match='plain step "Given a step" cannot have table rows'):
            step.add_row(Row.from_cells(['a'], ['1']))

        with pytest.raises(ValueError, match='cannot have table rows'):
            Step('Given a step', rows=[Row.from_cells(['a'], ['1'])])

    def test_table(self) -> None:
        step = Step.table('Given users', [Row.from_cells(['name'], ['alice'])], 'a.feature:4')

        assert step.kind == StepKind.TABLE
        assert step.is_table
        assert step.source == 'a.feature:4'

        step.add_row(Row.from_cells(['name'], ['bob']))

        assert [row.values['name'] for row in step.rows] == ['alice', 'bob']

    def test_clone(self) -> None:
        step = Step.table('Given users', [Row.from_cells(['name'], ['alice'])], 'a.feature:4')
        clone = step.clone()

        assert clone == step
        assert clone.rows is not step.rows
        assert clone.rows[0] is not step.rows[0]


class TestFeature:
    def test___post_init__(self) -> None:
        background = Scenario('background', [Step('Given a greeter')])
        scenario = Scenario('greeting', [Step('Given my name is Morgan')])

        feature = Feature('Greeting system', 'As a project member', background=background, scenarios=[scenario])

        assert scenario.feature is feature
        assert background.feature is feature
        assert not scenario.is_data_driven

    def test_add_scenario(self) -> None:
        feature = Feature('Greeting system')
        scenario = Scenario('greeting', examples=[Row.from_cells(['name'], ['Morgan'])])
        scenario.add_step(Step('Given my name is [name]'))

        feature.add_scenario(scenario)

        assert feature.scenarios == [scenario]
        assert scenario.feature is feature
        assert scenario.is_data_driven
        assert feature.narrative == ''
        assert feature.background is None
