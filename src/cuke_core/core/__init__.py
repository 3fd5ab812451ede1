"""Document discovery, parsing and feature loading.

The primary public entry point is `load_features`, which resolves path
specifications through a resource loader, parses every document with a
`FeatureParser` and returns a sorted `FeatureCollection`.
"""

from .builder import FeatureBuilder
from .filters import Filter, LineFilter, NameFilter, TagExpression, TagFilter
from .loader import load_features, split_path
from .parser import FeatureListener, FeatureParser
from .resources import FEATURE_SUFFIXES, FileResource, FileResourceLoader, Resource, ResourceLoader

__all__ = (
    'FEATURE_SUFFIXES',
    'FeatureBuilder',
    'FeatureListener',
    'FeatureParser',
    'FileResource',
    'FileResourceLoader',
    'Filter',
    'LineFilter',
    'NameFilter',
    'Resource',
    'ResourceLoader',
    'TagExpression',
    'TagFilter',
    'load_features',
    'split_path',
)
