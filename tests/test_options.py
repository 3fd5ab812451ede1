"""Tests for runtime options."""

import os
from typing import TYPE_CHECKING

import pydantic
import pytest

from cuke_core.core import NameFilter, TagFilter
from cuke_core.errors import ConfigurationError
from cuke_core.options import RuntimeOptions

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


def test_defaults(mocker: 'MockerFixture') -> None:
    """Look for features in the default directory without filters."""
    mocker.patch.dict(os.environ, {}, clear=True)

    options = RuntimeOptions()

    assert options.features == ['features']
    assert options.tags == []
    assert options.names == []
    assert options.dry_run is False
    assert options.strict is False
    assert options.filters() == []


def test_environment(mocker: 'MockerFixture') -> None:
    """Read prefixed environment variables."""
    mocker.patch.dict(os.environ, {
        'CUKE_FEATURES': '["specs", "more/specs"]',
        'CUKE_TAGS': '["@smoke"]',
        'CUKE_DRY_RUN': 'true',
        'UNRELATED': 'value',
    }, clear=True)

    options = RuntimeOptions()

    assert options.features == ['specs', 'more/specs']
    assert options.dry_run is True

    (item,) = options.filters()

    assert isinstance(item, TagFilter)


def test_explicit_values_override_environment(mocker: 'MockerFixture') -> None:
    """Prefer explicit values over environment variables."""
    mocker.patch.dict(os.environ, {'CUKE_STRICT': 'false'}, clear=True)

    options = RuntimeOptions(strict=True, names=['^Login'])

    assert options.strict is True
    assert isinstance(options.filters()[0], NameFilter)


@pytest.mark.parametrize(('values', 'message'), (
    pytest.param({'tags': ['@a'], 'names': ['b']}, r'^Inconsistent filters', id='tags and names'),
    pytest.param({'tags': ['smoke']}, r"^Invalid filter: Invalid tag 'smoke'", id='invalid tag'),
    pytest.param({'names': ['(unclosed']}, r'^Invalid filter', id='invalid pattern'),
))
def test_invalid_filters(mocker: 'MockerFixture', values: dict, message: str) -> None:
    """Reject filters that cannot be built."""
    mocker.patch.dict(os.environ, {}, clear=True)

    with pytest.raises(ConfigurationError, match=message):
        RuntimeOptions(**values).filters()


def test_no_features(mocker: 'MockerFixture') -> None:
    """Require at least one feature path."""
    mocker.patch.dict(os.environ, {}, clear=True)

    with pytest.raises(pydantic.ValidationError, match=r'At least one feature path is required'):
        RuntimeOptions(features=[])


def test_frozen(mocker: 'MockerFixture') -> None:
    """Keep options unchanged during a run."""
    mocker.patch.dict(os.environ, {}, clear=True)

    options = RuntimeOptions()

    with pytest.raises(pydantic.ValidationError):
        options.strict = True
