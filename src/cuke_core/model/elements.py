"""Specification elements of a feature aggregate.

Elements wrap the parsed statements of a document and own their steps.
Backgrounds, scenarios and scenario outlines all share the step
container capability: steps are appended while the document is parsed
and run, in order, against a formatter, a reporter and a runtime.

Outlines are not run directly: every row of every examples table is
materialized into an `ExampleScenario` whose steps have the row values
substituted for their `<placeholders>`.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING

from cuke_core.errors import ErrorContext, PlaceholderResolutionError
from cuke_core.names import ID_SEPARATOR, PLACEHOLDER_PATTERN
from cuke_core.schema import Row, Scenario

if TYPE_CHECKING:
    from re import Match

if TYPE_CHECKING:
    from cuke_core.runner.protocols import Formatter, Reporter, Runtime
    from cuke_core.schema import Background, Examples, ScenarioOutline, Statement, Step, TagStatement

    from .feature import Feature


class StepContainer[T: 'Statement']:
    """Element owning an ordered sequence of steps."""

    def __init__(self, feature: 'Feature', statement: T) -> None:
        """Initialize an empty container.

        Args:
            feature: Feature aggregate owning the element.
            statement: Parsed statement of the element.
        """
        self.feature = feature
        self.statement = statement
        self.steps: list['Step'] = []

    def __repr__(self) -> str:
        """String representation."""
        return f'<{type(self).__name__} {self.statement.name!r} steps={len(self.steps)}>'

    @property
    def name(self) -> str:
        """Return the display name of the element."""
        return self.statement.name

    def step(self, step: 'Step') -> None:
        """Append a step declared in the document."""
        self.steps.append(step)

    def format_steps(self, formatter: 'Formatter') -> None:
        """Describe every step to the formatter."""
        for step in self.steps:
            formatter.step(step)

    def run_steps(self, reporter: 'Reporter', runtime: 'Runtime') -> None:
        """Run every step in declaration order."""
        for step in self.steps:
            runtime.run_step(self.feature.uri, step, reporter, self.feature.language)


class BackgroundElement(StepContainer['Background']):
    """Shared setup steps run ahead of the scenarios referencing them."""

    def format(self, formatter: 'Formatter') -> None:
        """Describe the background and its steps."""
        formatter.background(self.statement)
        self.format_steps(formatter)

    def run(self, formatter: 'Formatter', reporter: 'Reporter', runtime: 'Runtime') -> None:
        """Describe, then run the background steps."""
        self.format(formatter)
        self.run_steps(reporter, runtime)


class TagStatementElement[T: 'TagStatement'](StepContainer[T], ABC):
    """Top-level element of a feature: a scenario or an outline."""

    def __init__(self, feature: 'Feature', statement: T,
                 background: BackgroundElement | None = None) -> None:
        """Initialize a top-level element.

        Args:
            feature: Feature aggregate owning the element.
            statement: Parsed statement of the element.
            background: Background active when the element was declared.
        """
        super().__init__(feature, statement)

        self.background = background

    @property
    def id(self) -> str:
        """Return the element identifier."""
        return self.statement.id

    @property
    def tags(self) -> tuple[str, ...]:
        """Return the feature tags followed by the element's own tags."""
        return tuple(dict.fromkeys((*self.feature.tags, *self.statement.tags)))

    @abstractmethod
    def run(self, formatter: 'Formatter', reporter: 'Reporter', runtime: 'Runtime') -> None:
        """Run the element."""


class ScenarioElement(TagStatementElement['Scenario']):
    """Concrete scenario."""

    def run(self, formatter: 'Formatter', reporter: 'Reporter', runtime: 'Runtime') -> None:
        """Run the scenario with its hooks and background.

        The world is built before and disposed after the scenario, even
        when a step, a hook or a formatter raises. Errors propagate
        unchanged.
        """
        tags = self.tags

        runtime.build_world(tags)
        try:
            formatter.start_of_scenario_lifecycle(self.statement)
            runtime.run_before_hooks(reporter, tags)

            if self.background is not None:
                self.background.run(formatter, reporter, runtime)

            formatter.scenario(self.statement)
            self.format_steps(formatter)
            self.run_steps(reporter, runtime)

            runtime.run_after_hooks(reporter, tags)
            formatter.end_of_scenario_lifecycle(self.statement)

        finally:
            runtime.dispose_world()


class ExampleScenario(ScenarioElement):
    """Scenario materialized from one row of an examples table."""

    def __init__(self, outline: 'OutlineElement', table: 'ExamplesTable',
                 row: Row, number: int) -> None:
        """Materialize an outline for a single row.

        Args:
            outline: Outline being expanded.
            table: Examples table the row belongs to.
            row: Row of values.
            number: One-based position of the row, the header being row 1.

        Raises:
            PlaceholderResolutionError: If an outline step references
                a column missing from the table.
        """
        values = table.values(row)
        statement = Scenario.model_validate({
            'keyword': outline.statement.keyword,
            'name': substitute(outline.name, values, strict=False),
            'description': outline.statement.description,
            'id': ID_SEPARATOR.join((outline.id, table.id, f'{number}')),
            'line': row.line,
            'tags': tuple(dict.fromkeys((*outline.statement.tags, *table.statement.tags))),
        })

        super().__init__(outline.feature, statement, outline.background)

        self.outline = outline
        self.table = table
        self.row = row
        self.values = values

        for step in outline.steps:
            self.step(substitute_step(step, values, filename=outline.feature.uri))


class ExamplesTable:
    """Examples table attached to a scenario outline."""

    def __init__(self, outline: 'OutlineElement', statement: 'Examples') -> None:
        """Initialize an examples table.

        Args:
            outline: Outline owning the table.
            statement: Parsed examples statement.
        """
        self.outline = outline
        self.statement = statement

    def __repr__(self) -> str:
        """String representation."""
        return f'<{type(self).__name__} {self.statement.name!r} rows={len(self.statement.body)}>'

    @property
    def id(self) -> str:
        """Return the table identifier segment."""
        return self.statement.id

    @property
    def columns(self) -> tuple[str, ...]:
        """Return the column names."""
        return self.statement.header

    def values(self, row: Row) -> dict[str, str]:
        """Map column names to the cells of a row."""
        return dict(zip(self.columns, row.cells, strict=True))

    def scenarios(self) -> Iterator[ExampleScenario]:
        """Materialize one scenario per row, in declaration order."""
        for number, row in enumerate(self.statement.body, start=2):
            yield ExampleScenario(self.outline, self, row, number)


class OutlineElement(TagStatementElement['ScenarioOutline']):
    """Scenario outline with its examples tables."""

    def __init__(self, feature: 'Feature', statement: 'ScenarioOutline',
                 background: BackgroundElement | None = None) -> None:
        """Initialize an outline without examples."""
        super().__init__(feature, statement, background)

        self.tables: list[ExamplesTable] = []

    def examples(self, examples: 'Examples') -> None:
        """Append an examples table declared in the document."""
        self.tables.append(ExamplesTable(self, examples))

    def materialize(self) -> Iterator[ExampleScenario]:
        """Expand the outline: tables in order, rows in order.

        Raises:
            PlaceholderResolutionError: If a step placeholder has no
                matching column in a table.
        """
        for table in self.tables:
            yield from table.scenarios()

    def check(self) -> None:
        """Ensure every step placeholder has a column in every table.

        Raises:
            PlaceholderResolutionError: If a step placeholder has no
                matching column in a table.
        """
        for table in self.tables:
            values = dict.fromkeys(table.columns, '')
            for step in self.steps:
                substitute_step(step, values, filename=self.feature.uri)

    def run(self, formatter: 'Formatter', reporter: 'Reporter', runtime: 'Runtime') -> None:
        """Describe the outline, then run every materialized scenario."""
        formatter.scenario_outline(self.statement)
        self.format_steps(formatter)

        for table in self.tables:
            formatter.examples(table.statement)
            for scenario in table.scenarios():
                scenario.run(formatter, reporter, runtime)


def substitute(text: str, values: Mapping[str, str], *,
               strict: bool = True,
               context: ErrorContext | None = None) -> str:
    """Replace `<name>` placeholders with values in a single pass.

    Values are never scanned again, so a value that looks like a
    placeholder is kept as is.

    Args:
        text: Template text.
        values: Placeholder values by column name.
        strict: Whether an unknown placeholder is an error. Otherwise
            it is left untouched.
        context: Error context for unresolved placeholders.

    Returns:
        The rendered text.

    Raises:
        PlaceholderResolutionError: If `strict` and a placeholder has
            no value.
    """
    def replace(match: 'Match[str]') -> str:
        name = match['name']
        if name in values:
            return values[name]
        if strict:
            raise PlaceholderResolutionError(name, text, context=context)
        return match[0]

    return PLACEHOLDER_PATTERN.sub(replace, text)


def substitute_step(step: 'Step', values: Mapping[str, str], *,
                    filename: str | None = None) -> 'Step':
    """Render a template step for a row of values.

    The step text, its doc string and every cell of its data table are
    rendered.

    Args:
        step: Outline step.
        values: Placeholder values by column name.
        filename: Uri of the document, used in errors.

    Returns:
        A new step with every placeholder replaced.

    Raises:
        PlaceholderResolutionError: If a placeholder has no value.
    """
    context = ErrorContext(
        filename=filename,
        line_num=step.line - 1 if step.line else None,
        element=step.line_text,
    )

    update: dict[str, object] = {
        'text': substitute(step.text, values, context=context),
    }

    if step.docstring is not None:
        update['docstring'] = substitute(step.docstring, values, context=context)

    if step.table is not None:
        update['table'] = tuple(
            row.model_copy(update={
                'cells': tuple(substitute(cell, values, context=context) for cell in row.cells),
            })
            for row in step.table
        )

    return step.model_copy(update=update)
