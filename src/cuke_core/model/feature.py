"""Feature aggregate: the per-document element builder and driver.

The parser calls one method per statement, in document order:
`background`, `scenario`, `scenario_outline`, `examples` and `step`.
The aggregate turns those calls into an ordered list of top-level
elements, attaching to every scenario and outline the background that
is current when it is declared.

A background stops being inherited as soon as a scenario name repeats:
when a scenario or outline is declared with a name key already seen in
the document, the current background is cleared before it is attached,
so the repeated scenario and everything after it run without it until
another background is declared.

The legal call order is enforced by a small state machine; illegal
calls raise `ProtocolViolationError` and leave the aggregate unchanged.
"""

from enum import StrEnum
from typing import TYPE_CHECKING

from cuke_core.errors import ProtocolViolationError
from cuke_core.i18n import get_language
from cuke_core.names import scenario_key

from .elements import BackgroundElement, OutlineElement, ScenarioElement

if TYPE_CHECKING:
    from cuke_core.i18n import Language
    from cuke_core.runner.protocols import Formatter, Reporter, Runtime
    from cuke_core.schema import Background, Examples, FeatureHeader, Scenario, ScenarioOutline, Step

    from .elements import StepContainer, TagStatementElement


class BuilderState(StrEnum):
    """Position of the builder in the callback sequence."""

    START = 'start'
    IN_BACKGROUND = 'in background'
    IN_SCENARIO = 'in scenario'
    IN_OUTLINE = 'in outline'
    CLOSED = 'closed'


#: States from which each callback is accepted.
TRANSITIONS: dict[str, frozenset[BuilderState]] = {
    'background': frozenset({
        BuilderState.START,
        BuilderState.IN_BACKGROUND,
        BuilderState.IN_SCENARIO,
        BuilderState.IN_OUTLINE,
    }),
    'scenario': frozenset({
        BuilderState.START,
        BuilderState.IN_BACKGROUND,
        BuilderState.IN_SCENARIO,
        BuilderState.IN_OUTLINE,
    }),
    'scenario_outline': frozenset({
        BuilderState.START,
        BuilderState.IN_BACKGROUND,
        BuilderState.IN_SCENARIO,
        BuilderState.IN_OUTLINE,
    }),
    'examples': frozenset({
        BuilderState.IN_OUTLINE,
    }),
    'step': frozenset({
        BuilderState.IN_BACKGROUND,
        BuilderState.IN_SCENARIO,
        BuilderState.IN_OUTLINE,
    }),
}


class BackgroundScope:
    """Background inheritance state of a document being built.

    Attributes:
        current: Background attached to the next declared element.
        seen: Name keys of the elements declared so far.
    """

    def __init__(self) -> None:
        """Initialize an empty scope."""
        self.current: BackgroundElement | None = None
        self.seen: set[str] = set()

    def declare(self, identifier: str) -> BackgroundElement | None:
        """Register an element declaration.

        Clears the current background if the element name key was seen
        before, then records the key.

        Args:
            identifier: Identifier of the declared element.

        Returns:
            The background the element inherits, if any.
        """
        key = scenario_key(identifier)
        if key in self.seen:
            self.current = None

        self.seen.add(key)

        return self.current


class Feature:
    """Aggregate of a single feature document.

    Attributes:
        uri: Identifier of the source document.
        header: Parsed feature header.
        state: Position in the callback sequence.
    """

    def __init__(self, header: 'FeatureHeader', uri: str) -> None:
        """Initialize an empty feature.

        Args:
            header: Parsed feature header.
            uri: Identifier of the source document.

        Raises:
            KeyError: If the header names an unsupported language.
        """
        self.uri = uri
        self.header = header
        self.state = BuilderState.START

        self._language = get_language(header.language)
        self._elements: list[TagStatementElement] = []
        self._backgrounds: list[BackgroundElement] = []
        self._scope = BackgroundScope()

        self._current_container: StepContainer | None = None
        self._current_outline: OutlineElement | None = None

    def __repr__(self) -> str:
        """String representation."""
        return f'<{type(self).__name__} {self.uri!r} elements={len(self._elements)}>'

    @property
    def name(self) -> str:
        """Return the feature name."""
        return self.header.name

    @property
    def tags(self) -> tuple[str, ...]:
        """Return the feature tags, inherited by every element."""
        return self.header.tags

    @property
    def language(self) -> 'Language':
        """Return the language used to interpret keywords."""
        return self._language

    @language.setter
    def language(self, language: 'Language') -> None:
        if self.state is BuilderState.CLOSED:
            raise ProtocolViolationError(f'Feature {self.uri!r} is closed')

        self._language = language

    @property
    def elements(self) -> tuple['TagStatementElement', ...]:
        """Return the top-level elements in declaration order."""
        return tuple(self._elements)

    @property
    def backgrounds(self) -> tuple[BackgroundElement, ...]:
        """Return every declared background in declaration order."""
        return tuple(self._backgrounds)

    @property
    def current_background(self) -> BackgroundElement | None:
        """Return the background the next element would inherit."""
        return self._scope.current

    def _enter(self, event: str, state: BuilderState | None = None) -> None:
        """Check a callback against the current state and move on.

        Args:
            event: Name of the callback.
            state: State after the callback, unchanged if omitted.

        Raises:
            ProtocolViolationError: If the callback is not allowed.
        """
        if self.state not in TRANSITIONS[event]:
            raise ProtocolViolationError(
                f'Unexpected {event} in feature {self.uri!r} ({self.state})',
            )

        if state is not None:
            self.state = state

    def background(self, background: 'Background') -> None:
        """Declare a background.

        The background becomes current for the elements declared after
        it and collects the steps that follow. It is not a top-level
        element.
        """
        self._enter('background', BuilderState.IN_BACKGROUND)

        element = BackgroundElement(self, background)

        self._backgrounds.append(element)
        self._scope.current = element
        self._current_container = element
        self._current_outline = None

    def scenario(self, scenario: 'Scenario') -> None:
        """Declare a scenario."""
        self._enter('scenario', BuilderState.IN_SCENARIO)

        element = ScenarioElement(self, scenario, self._scope.declare(scenario.id))

        self._elements.append(element)
        self._current_container = element
        self._current_outline = None

    def scenario_outline(self, outline: 'ScenarioOutline') -> None:
        """Declare a scenario outline; examples that follow attach to it."""
        self._enter('scenario_outline', BuilderState.IN_OUTLINE)

        element = OutlineElement(self, outline, self._scope.declare(outline.id))

        self._elements.append(element)
        self._current_container = element
        self._current_outline = element

    def examples(self, examples: 'Examples') -> None:
        """Attach an examples table to the open outline.

        Raises:
            ProtocolViolationError: If no outline is open.
        """
        self._enter('examples')

        self._current_outline.examples(examples)  # type: ignore[union-attr]

    def step(self, step: 'Step') -> None:
        """Append a step to the current background, scenario or outline.

        Raises:
            ProtocolViolationError: If nothing was declared yet.
        """
        self._enter('step')

        self._current_container.step(step)  # type: ignore[union-attr]

    def close(self) -> None:
        """Finish building; any later callback is a protocol violation.

        Raises:
            ProtocolViolationError: If the feature is already closed.
            PlaceholderResolutionError: If an outline step references
                a column missing from one of its tables.
        """
        if self.state is BuilderState.CLOSED:
            raise ProtocolViolationError(f'Feature {self.uri!r} is already closed')

        for element in self._elements:
            if isinstance(element, OutlineElement):
                element.check()

        self.state = BuilderState.CLOSED
        self._current_container = None
        self._current_outline = None

    def run(self, formatter: 'Formatter', reporter: 'Reporter', runtime: 'Runtime') -> None:
        """Run every element in declaration order.

        The document boundaries (`uri`, `feature`, `eof`) are reported
        around the elements. Errors raised by an element propagate
        unchanged and end the run.
        """
        formatter.uri(self.uri)
        formatter.feature(self.header)

        for element in self._elements:
            element.run(formatter, reporter, runtime)

        formatter.eof()
