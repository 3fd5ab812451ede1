"""Statement factories and recording helpers shared by tests."""

from io import StringIO
from typing import TYPE_CHECKING

from cuke_core.schema import Background, Examples, FeatureHeader, Scenario, ScenarioOutline, Step

if TYPE_CHECKING:
    from collections.abc import Iterable

if TYPE_CHECKING:
    from pytest_mock import MockType


class StringResource:
    """In-memory feature document."""

    def __init__(self, uri: str, content: str) -> None:
        self.uri = uri
        self.content = content

    def open(self) -> StringIO:
        return StringIO(self.content)


def call_names(mock: 'MockType') -> list[str]:
    """Return the qualified names of the calls recorded by a mock."""
    return [name for name, _, _ in mock.mock_calls]


def header(name: str = 'Test feature', **kwargs: object) -> FeatureHeader:
    """Build a feature header statement."""
    return FeatureHeader.model_validate({'feature': name, **kwargs})


def background(name: str = '', **kwargs: object) -> Background:
    """Build a background statement."""
    return Background.model_validate({'background': name, **kwargs})


def scenario(name: str, **kwargs: object) -> Scenario:
    """Build a scenario statement."""
    return Scenario.model_validate({'scenario': name, **kwargs})


def outline(name: str, **kwargs: object) -> ScenarioOutline:
    """Build a scenario outline statement."""
    return ScenarioOutline.model_validate({'outline': name, **kwargs})


def examples(*rows: 'Iterable[object]', **kwargs: object) -> Examples:
    """Build an examples statement from rows, header first."""
    return Examples.model_validate({'table': [list(row) for row in rows], **kwargs})


def step(text: str, /, **kwargs: object) -> Step:
    """Build a step statement from a `Keyword text` line."""
    return Step.model_validate({'step': text, **kwargs})
