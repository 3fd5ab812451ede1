"""Console formatter printing the structure of a run."""

from typing import TYPE_CHECKING

from click import echo, style

if TYPE_CHECKING:
    from collections.abc import Callable

    from cuke_core.schema import Background, Examples, FeatureHeader, Scenario, ScenarioOutline, Step

INDENT = '  '


class ConsoleFormatter:
    """Formatter echoing features, elements and steps as indented text."""

    def __init__(self, output: 'Callable[[str], None]' = echo) -> None:
        """Initialize the formatter.

        Args:
            output: Line printer, `click.echo` by default.
        """
        self.output = output

    def uri(self, uri: str) -> None:
        """Print the document uri."""
        self.output(style(f'# {uri}', dim=True))

    def feature(self, feature: 'FeatureHeader') -> None:
        """Print the feature header."""
        if feature.tags:
            self.output(style(' '.join(feature.tags), fg='cyan'))
        self.output(f'{feature.keyword}: {feature.name}')

    def background(self, background: 'Background') -> None:
        """Print a background title."""
        self.output(f'{INDENT}{background.keyword}: {background.name}'.rstrip())

    def scenario(self, scenario: 'Scenario') -> None:
        """Print a scenario title."""
        if scenario.tags:
            self.output(INDENT + style(' '.join(scenario.tags), fg='cyan'))
        self.output(f'{INDENT}{scenario.keyword}: {scenario.name}')

    def scenario_outline(self, outline: 'ScenarioOutline') -> None:
        """Print an outline title."""
        if outline.tags:
            self.output(INDENT + style(' '.join(outline.tags), fg='cyan'))
        self.output(f'{INDENT}{outline.keyword}: {outline.name}')

    def examples(self, examples: 'Examples') -> None:
        """Print an examples table."""
        self.output(f'{INDENT * 2}{examples.keyword}: {examples.name}'.rstrip())

        widths = [max(len(row.cells[column]) for row in examples.table) for column in range(len(examples.header))]
        for row in examples.table:
            cells = ' | '.join(cell.ljust(width) for cell, width in zip(row.cells, widths, strict=True))
            self.output(f'{INDENT * 3}| {cells} |')

    def step(self, step: 'Step') -> None:
        """Print a step."""
        self.output(f'{INDENT * 2}{step.keyword} {step.text}')

    def start_of_scenario_lifecycle(self, scenario: 'Scenario') -> None:
        """Nothing to print."""

    def end_of_scenario_lifecycle(self, scenario: 'Scenario') -> None:
        """Separate scenarios with an empty line."""
        self.output('')

    def eof(self) -> None:
        """Nothing to print."""
