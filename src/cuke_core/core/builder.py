"""Feature builder: turns parsed documents into feature aggregates.

The builder is the listener of the parser callbacks. It creates one
`Feature` per document, forwards every statement to it and appends the
closed feature to the list it was given.
"""

from logging import getLogger
from typing import TYPE_CHECKING
from warnings import warn

from cuke_core.errors import FeatureWarning, ProtocolViolationError
from cuke_core.model import Feature

from .parser import FeatureParser

if TYPE_CHECKING:
    from collections.abc import Iterable

if TYPE_CHECKING:
    from cuke_core.schema import Background, Examples, FeatureHeader, Scenario, ScenarioOutline, Step

    from .filters import Filter
    from .resources import Resource

logger = getLogger(__name__)


class FeatureBuilder:
    """Builds features from resources into a shared list.

    Documents whose uri was already parsed by this builder, such as a
    file reached through overlapping paths, are skipped with a warning.
    When filters are active, a document with no element left is dropped.
    """

    def __init__(self, features: list[Feature], parser: FeatureParser | None = None) -> None:
        """Initialize a builder.

        Args:
            features: List receiving the built features.
            parser: Document parser; a default YAML parser if omitted.
        """
        self.features = features
        self.parser = parser or FeatureParser()

        self._uris: set[str] = set()
        self._uri: str | None = None
        self._filtered = False
        self._current: Feature | None = None

    def parse(self, resource: 'Resource', filters: 'Iterable[Filter]' = ()) -> Feature | None:
        """Parse a resource into a feature.

        Args:
            resource: Document to parse.
            filters: Filters every kept element must pass.

        Returns:
            The built feature, or None if the document was already parsed
                or every element was filtered out.

        Raises:
            FeatureSchemaError: If the document is malformed.
        """
        if resource.uri in self._uris:
            warn(
                f'Feature {resource.uri!r} was already loaded and was skipped',
                category=FeatureWarning,
                stacklevel=2,
            )
            return None

        self._uris.add(resource.uri)

        with resource.open() as stream:
            content = stream.read()

        filters = tuple(filters)
        source = self.parser.parse(content, uri=resource.uri, filters=filters)

        self._uri = resource.uri
        self._filtered = bool(filters)
        try:
            self.parser.replay(source, self)
            return self._current
        finally:
            self._current = None
            self._uri = None

    @property
    def current(self) -> Feature:
        """Return the feature being built.

        Raises:
            ProtocolViolationError: If no feature was started.
        """
        if self._current is None:
            raise ProtocolViolationError('No feature is being built')

        return self._current

    def feature(self, header: 'FeatureHeader') -> None:
        """Start a feature for the resource being parsed."""
        if self._current is not None:
            raise ProtocolViolationError(f'Feature {self._current.uri!r} was not finished')

        self._current = Feature(header, self._uri or header.id)

    def background(self, background: 'Background') -> None:
        """Forward a background."""
        self.current.background(background)

    def scenario(self, scenario: 'Scenario') -> None:
        """Forward a scenario."""
        self.current.scenario(scenario)

    def scenario_outline(self, outline: 'ScenarioOutline') -> None:
        """Forward a scenario outline."""
        self.current.scenario_outline(outline)

    def examples(self, examples: 'Examples') -> None:
        """Forward an examples table."""
        self.current.examples(examples)

    def step(self, step: 'Step') -> None:
        """Forward a step."""
        self.current.step(step)

    def eof(self) -> None:
        """Close the feature and keep it unless filtered out entirely."""
        feature = self.current
        feature.close()

        if self._filtered and not feature.elements:
            logger.info('Feature %r dropped: no element matched the filters', feature.uri)
            self._current = None
            return

        logger.debug('Feature %r built with %d elements', feature.uri, len(feature.elements))
        self.features.append(feature)
