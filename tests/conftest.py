"""Tests configurations and fixtures."""

from typing import TYPE_CHECKING

import pytest
import yaml

from cuke_core.core import FeatureBuilder, FeatureParser

from .helpers import StringResource

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

if TYPE_CHECKING:
    from pytest_mock import MockerFixture, MockType

if TYPE_CHECKING:
    from cuke_core.core import Filter
    from cuke_core.model import Feature


@pytest.fixture
def loader() -> type[yaml.SafeLoader]:
    """Provide an isolated YAML SafeLoader class for tests.

    Creates a dedicated subclass of `yaml.SafeLoader` so that anything
    registered on it during a test does not leak into other tests.
    """
    class Loader(yaml.SafeLoader):
        pass

    return Loader


@pytest.fixture
def parser(loader: type[yaml.SafeLoader]) -> FeatureParser:
    """Provide a feature parser using the isolated loader."""
    return FeatureParser(loader)


@pytest.fixture
def build_feature(parser: FeatureParser) -> 'Callable[..., Feature | None]':
    """Provide a factory building a feature from YAML content.

    The factory accepts the document content, an optional uri and
    optional filters, and returns the built feature (None when every
    element was filtered out).
    """
    def build(content: str, uri: str = 'features/test.feature.yaml',
              filters: 'Iterable[Filter]' = ()) -> 'Feature | None':
        features: list[Feature] = []

        return FeatureBuilder(features, parser).parse(StringResource(uri, content), filters)

    return build


@pytest.fixture
def sinks(mocker: 'MockerFixture') -> 'MockType':
    """Provide a mock recording formatter, reporter and runtime calls.

    The formatter, reporter and runtime are children of a single mock,
    so `sinks.mock_calls` holds every call in the order it was made.
    """
    return mocker.MagicMock(name='sinks')
