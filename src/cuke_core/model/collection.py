"""Ordered collection of feature aggregates."""

from collections.abc import Sequence
from operator import attrgetter
from typing import TYPE_CHECKING, overload

if TYPE_CHECKING:
    from collections.abc import Iterable

if TYPE_CHECKING:
    from cuke_core.runner.protocols import Formatter, Reporter, Runtime

    from .feature import Feature


class FeatureCollection(Sequence['Feature']):
    """Read-only sequence of features sorted by uri.

    Sorting happens once, after every feature has been built, so the
    execution order never depends on discovery order.
    """

    def __init__(self, features: 'Iterable[Feature]' = ()) -> None:
        """Sort and freeze features.

        Args:
            features: Features in any order.
        """
        self._features = tuple(sorted(features, key=attrgetter('uri')))

    def __repr__(self) -> str:
        """String representation."""
        return f'{type(self).__name__}({list(self.uris)!r})'

    @overload
    def __getitem__(self, index: int) -> 'Feature': ...

    @overload
    def __getitem__(self, index: slice) -> 'FeatureCollection': ...

    def __getitem__(self, index: int | slice) -> 'Feature | FeatureCollection':
        """Return a feature, or a sub-collection for slices."""
        if isinstance(index, slice):
            return FeatureCollection(self._features[index])

        return self._features[index]

    def __len__(self) -> int:
        """Return the number of features."""
        return len(self._features)

    @property
    def uris(self) -> tuple[str, ...]:
        """Return the feature uris in collection order."""
        return tuple(feature.uri for feature in self._features)

    def run(self, formatter: 'Formatter', reporter: 'Reporter', runtime: 'Runtime') -> None:
        """Run every feature in collection order.

        No event wraps the whole collection; each feature reports its
        own boundaries. The first error raised stops the run.
        """
        for feature in self._features:
            feature.run(formatter, reporter, runtime)
