"""Loading of feature collections.

`load_features` resolves path specifications through a resource loader,
builds one feature per document and returns them sorted by uri. The two
ways a load can come back empty are reported with distinct errors:
nothing found at the paths (`ConfigurationError`), or documents found
but every element filtered out (`FilterMismatchError`).
"""

from logging import getLogger
from re import compile as regexp
from typing import TYPE_CHECKING

from cuke_core.errors import ConfigurationError, FilterMismatchError
from cuke_core.model import FeatureCollection

from .builder import FeatureBuilder
from .filters import LineFilter
from .resources import FEATURE_SUFFIXES

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

if TYPE_CHECKING:
    from cuke_core.model import Feature

    from .filters import Filter
    from .parser import FeatureParser
    from .resources import ResourceLoader

logger = getLogger(__name__)

#: Path specification with trailing line numbers, e.g. `a.feature.yaml:3:12`.
PATH_LINES_PATTERN = regexp(r'^(?P<path>.+?)(?P<lines>(?::\d+)+)$')


def split_path(spec: str) -> tuple[str, tuple[int, ...]]:
    """Split a path specification into a path and line numbers.

    Args:
        spec: Path, optionally followed by `:line` suffixes.

    Returns:
        A tuple of (path, lines); lines are empty when none were given.
    """
    if match := PATH_LINES_PATTERN.match(spec):
        lines = tuple(int(line) for line in match['lines'].split(':') if line)
        return match['path'], lines

    return spec, ()


def load_features(resource_loader: 'ResourceLoader',
                  feature_paths: 'Sequence[str]',
                  filters: 'Iterable[Filter]' = (), *,
                  parser: 'FeatureParser | None' = None) -> FeatureCollection:
    """Load and sort the features found at the given paths.

    A path carrying line numbers is filtered by those lines only; the
    caller filters apply to the other paths.

    Args:
        resource_loader: Capability resolving paths to documents.
        feature_paths: Path specifications.
        filters: Filters every kept element must pass.
        parser: Document parser; a default YAML parser if omitted.

    Returns:
        A non-empty collection sorted by uri.

    Raises:
        ConfigurationError: If no document exists at any path.
        FilterMismatchError: If documents exist but no element
            passed the filters.
        FeatureSchemaError: If a document is malformed.
    """
    filters = tuple(filters)
    features: list[Feature] = []
    builder = FeatureBuilder(features, parser)
    resource_found = False

    for spec in feature_paths:
        path, lines = split_path(spec)
        path_filters = (LineFilter(lines),) if lines else filters

        for resource in resource_loader.resources(path, FEATURE_SUFFIXES):
            resource_found = True
            builder.parse(resource, path_filters)

    if not features:
        if resource_found:
            raise FilterMismatchError(feature_paths, filters)
        raise ConfigurationError.not_found(feature_paths)

    logger.debug('Loaded %d features from %r', len(features), list(feature_paths))

    return FeatureCollection(features)
