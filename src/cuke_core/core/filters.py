"""Element filters applied while feature documents are parsed.

Filters decide which scenarios and outlines of a document are kept.
Backgrounds are never filtered. Outlines are filtered per examples
table (and, for line filters, per row): an outline is dropped when none
of its tables survive.

Three kinds exist, mirroring the usual runner options:
- `TagFilter`: tag expressions, `@a,@b` is an OR, several expressions
  are combined with AND, a `~` prefix negates a tag;
- `NameFilter`: regular expressions searched in element names;
- `LineFilter`: document lines falling inside an element.
"""

from abc import ABC, abstractmethod
from re import compile as regexp
from typing import TYPE_CHECKING

from cuke_core.names import TAG_PATTERN
from cuke_core.schema import BackgroundDocument, OutlineDocument

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable
    from re import Pattern

if TYPE_CHECKING:
    from cuke_core.schema import Examples, FeatureHeader, ScenarioDocument

    type Element = BackgroundDocument | ScenarioDocument | OutlineDocument


class Filter(ABC):
    """Decides whether an element of a document is kept."""

    def select(self, header: 'FeatureHeader', element: 'Element') -> 'Element | None':
        """Filter a single element document.

        Args:
            header: Header of the document being parsed.
            element: Element document.

        Returns:
            The element, possibly with fewer examples, or None
                if it is excluded.
        """
        if isinstance(element, BackgroundDocument):
            return element

        if not isinstance(element, OutlineDocument):
            return element if self.match_scenario(header, element) else None

        if self.match_outline(header, element):
            return element

        examples = tuple(
            kept
            for table in element.examples
            if (kept := self.select_examples(header, element, table)) is not None
        )
        if not examples:
            return None

        return element.model_copy(update={'examples': examples})

    @abstractmethod
    def match_scenario(self, header: 'FeatureHeader', scenario: 'ScenarioDocument') -> bool:
        """Return whether a scenario is kept."""

    @abstractmethod
    def match_outline(self, header: 'FeatureHeader', outline: OutlineDocument) -> bool:
        """Return whether an outline is kept with all of its examples."""

    @abstractmethod
    def select_examples(self, header: 'FeatureHeader', outline: OutlineDocument,
                        examples: 'Examples') -> 'Examples | None':
        """Return the part of an examples table that is kept, if any."""


class TagExpression:
    """Conjunction of disjunctions of (possibly negated) tags."""

    def __init__(self, expressions: 'Iterable[str]') -> None:
        """Parse tag expressions.

        Args:
            expressions: Expressions such as `@a,~@b`; all of them
                must hold for a set of tags to match.

        Raises:
            ValueError: If a term is not a tag.
        """
        self.expressions = tuple(expressions)
        self.clauses: list[list[tuple[str, bool]]] = []

        for expression in self.expressions:
            clause = []
            for term in expression.split(','):
                term = term.strip()
                negated = term.startswith('~')
                tag = term.removeprefix('~')
                if not TAG_PATTERN.match(tag):
                    raise ValueError(f'Invalid tag {term!r} in expression {expression!r}')
                clause.append((tag, negated))
            self.clauses.append(clause)

    def evaluate(self, tags: 'Collection[str]') -> bool:
        """Return whether a set of tags satisfies every expression."""
        return all(
            any((tag in tags) != negated for tag, negated in clause)
            for clause in self.clauses
        )


class TagFilter(Filter):
    """Keeps elements whose inherited tags match tag expressions."""

    def __init__(self, expressions: 'Iterable[str]') -> None:
        """Initialize a tag filter.

        Args:
            expressions: Tag expressions combined with AND.
        """
        self.expression = TagExpression(expressions)

    def __repr__(self) -> str:
        """String representation."""
        return f'{type(self).__name__}({list(self.expression.expressions)!r})'

    def match_scenario(self, header: 'FeatureHeader', scenario: 'ScenarioDocument') -> bool:
        """Match feature and scenario tags."""
        return self.expression.evaluate({*header.tags, *scenario.tags})

    def match_outline(self, header: 'FeatureHeader', outline: OutlineDocument) -> bool:
        """Match outlines without examples on their own tags only."""
        if outline.examples:
            return False

        return self.expression.evaluate({*header.tags, *outline.tags})

    def select_examples(self, header: 'FeatureHeader', outline: OutlineDocument,
                        examples: 'Examples') -> 'Examples | None':
        """Match feature, outline and examples tags."""
        if self.expression.evaluate({*header.tags, *outline.tags, *examples.tags}):
            return examples

        return None


class NameFilter(Filter):
    """Keeps elements whose name matches any of the patterns."""

    def __init__(self, patterns: 'Iterable[str | Pattern[str]]') -> None:
        """Initialize a name filter.

        Args:
            patterns: Regular expressions searched in names.
        """
        self.patterns = tuple(regexp(pattern) for pattern in patterns)

    def __repr__(self) -> str:
        """String representation."""
        return f'{type(self).__name__}({[pattern.pattern for pattern in self.patterns]!r})'

    def _match(self, name: str) -> bool:
        return any(pattern.search(name) for pattern in self.patterns)

    def match_scenario(self, header: 'FeatureHeader', scenario: 'ScenarioDocument') -> bool:
        """Match the scenario name."""
        return self._match(scenario.name)

    def match_outline(self, header: 'FeatureHeader', outline: OutlineDocument) -> bool:
        """Match the outline name."""
        return self._match(outline.name)

    def select_examples(self, header: 'FeatureHeader', outline: OutlineDocument,
                        examples: 'Examples') -> 'Examples | None':
        """Match the examples table name."""
        return examples if self._match(examples.name) else None


class LineFilter(Filter):
    """Keeps elements spanning any of the given document lines.

    A line inside an examples row keeps only that row; a line on the
    examples header keeps the whole table.
    """

    def __init__(self, lines: 'Iterable[int]') -> None:
        """Initialize a line filter.

        Args:
            lines: One-based document lines.
        """
        self.lines = frozenset(lines)

    def __repr__(self) -> str:
        """String representation."""
        return f'{type(self).__name__}({sorted(self.lines)!r})'

    def _span(self, element: 'ScenarioDocument | OutlineDocument') -> bool:
        lines = [line for line in (element.line, *(step.line for step in element.steps)) if line]
        if not lines:
            return False

        return any(min(lines) <= line <= max(lines) for line in self.lines)

    def match_scenario(self, header: 'FeatureHeader', scenario: 'ScenarioDocument') -> bool:
        """Match lines from the scenario line to its last step."""
        return self._span(scenario)

    def match_outline(self, header: 'FeatureHeader', outline: OutlineDocument) -> bool:
        """Match lines from the outline line to its last step."""
        return self._span(outline)

    def select_examples(self, header: 'FeatureHeader', outline: OutlineDocument,
                        examples: 'Examples') -> 'Examples | None':
        """Keep the table or the selected rows."""
        if examples.line in self.lines or examples.table[0].line in self.lines:
            return examples

        rows = tuple(row for row in examples.body if row.line in self.lines)
        if not rows:
            return None

        return examples.model_copy(update={'table': (examples.table[0], *rows)})
