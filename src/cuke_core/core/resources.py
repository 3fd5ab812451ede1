"""Discovery of feature documents.

A resource loader turns a path specification into the documents found
under it. The default implementation walks the local filesystem; any
object with the same `resources` method can be injected instead (for
example a loader reading documents bundled inside a package).
"""

from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from io import TextIOBase

#: Suffixes of feature documents.
FEATURE_SUFFIXES = ('.feature.yaml', '.feature.yml')


class Resource(Protocol):
    """Readable feature document."""

    @property
    def uri(self) -> str:
        """Return the document identifier."""
        ...  # pragma: no cover

    def open(self) -> 'TextIOBase':
        """Open the document content as text."""
        ...  # pragma: no cover


class ResourceLoader(Protocol):
    """Capability resolving path specifications to documents."""

    def resources(self, path: str, suffixes: 'Iterable[str]') -> 'Iterable[Resource]':
        """Return the documents found at a path, lazily."""
        ...  # pragma: no cover


class FileResource:
    """Feature document stored on the local filesystem."""

    def __init__(self, path: Path) -> None:
        """Initialize a file resource.

        Args:
            path: Path to the document.
        """
        self.path = path

    def __repr__(self) -> str:
        """String representation."""
        return f'<{type(self).__name__} {self.uri!r}>'

    @property
    def uri(self) -> str:
        """Return the document path in POSIX form."""
        return self.path.as_posix()

    def open(self) -> 'TextIOBase':
        """Open the document as UTF-8 text."""
        return self.path.open('rt', encoding='utf-8')  # type: ignore[return-value]


class FileResourceLoader:
    """Resource loader walking the local filesystem.

    A file path yields that file; a directory yields every document with
    a matching suffix below it, recursively and in sorted order; a path
    that does not exist yields nothing.
    """

    def resources(self, path: str, suffixes: 'Iterable[str]') -> 'Iterator[FileResource]':
        """Yield the documents found at a path.

        Args:
            path: File or directory path.
            suffixes: Accepted document suffixes.

        Yields:
            File resources, lazily.
        """
        root = Path(path)
        suffixes = tuple(suffixes)

        if root.is_file():
            yield FileResource(root)
            return

        if not root.is_dir():
            return

        for candidate in sorted(root.rglob('*')):
            if candidate.is_file() and candidate.name.endswith(suffixes):
                yield FileResource(candidate)
