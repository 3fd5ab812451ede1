"""Core exception hierarchy.

This module defines the error and warning types raised while loading
feature documents, building feature aggregates and expanding scenario
outlines. Every error is fatal to the current load or run and is
propagated unchanged to the caller, which owns presentation.
"""

from os import linesep
from typing import TYPE_CHECKING, Any, TypedDict

from yaml import safe_dump

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from typing import Self

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails, ValidationError
    from yaml.error import MarkedYAMLError

FORMAT_FILENAME = '<unicode string>'
FORMAT_INDENT = 4


class ErrorContext(TypedDict, total=False):
    """Location and data describing where an error occurred.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Uri of the feature document.
    filename: str | None

    #: Zero-based line number in the document.
    line_num: int | None
    #: Zero-based column number in the document.
    column_num: int | None

    #: Underlying exception that triggered formatting.
    error: Exception | None

    #: Data of the element associated with the error.
    element: Any


class ErrorFormatter:
    """Formatting helpers shared by all errors.

    Produces a message followed by an indented location line and, when
    available, a YAML snippet of the failing element.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location and data.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        message += linesep
        message += cls.get_location_string(context, indent=FORMAT_INDENT)
        message += cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)

        return message

    @staticmethod
    def get_location_string(context: ErrorContext, *, indent: int = 0) -> str:
        """Format the document location of an error.

        Args:
            context: Error context containing location metadata.
            indent: Number of spaces to prefix the line with.

        Returns:
            A single line naming the document and, when known,
            the one-based line and column.
        """
        filename = context.get('filename') or FORMAT_FILENAME

        location = f'{" " * indent}in "{filename}"'
        if (line_num := context.get('line_num')) is not None:
            location += f', line {line_num + 1}'
            if (column_num := context.get('column_num')) is not None:
                location += f', column {column_num + 1}'

        return location + linesep

    @staticmethod
    def get_snippet_string(context: ErrorContext, *, indent: int = 0) -> str:
        """Render the failing element as an indented YAML snippet.

        Args:
            context: Error context containing element data.
            indent: Number of spaces to prefix every line with.

        Returns:
            A multi-line snippet, or an empty string if no element
            data is available.
        """
        element = context.get('element')
        if element is None:
            return ''

        snippet = safe_dump(
            element,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )

        return ''.join(
            f'{" " * indent}{line}{linesep}'
            for line in snippet.splitlines()
        )


class FeatureWarning(UserWarning):
    """Warning emitted for non-fatal feature loading issues.

    Used, for example, when the same document content is found twice
    and the second copy is skipped.
    """


class CukeError(Exception, ErrorFormatter):
    """Base exception for all cuke-core errors.

    All custom exceptions raised by the library inherit from this class
    to allow unified error handling by callers.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context with optional location data.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String representation."""
        return self.format(self.message, self.context)


class ConfigurationError(CukeError):
    """Error raised when a run is misconfigured.

    Raised when no feature documents exist at the requested paths, or
    when runtime options are inconsistent.
    """

    @classmethod
    def not_found(cls, paths: 'Sequence[str]') -> 'Self':
        """Create an error for paths matching no feature document.

        Args:
            paths: Requested path specifications.

        Returns:
            ConfigurationError naming the paths.
        """
        return cls(f'No features found at {list(paths)!r}')


class FilterMismatchError(CukeError):
    """Error raised when documents were found but nothing passed the filters."""

    def __init__(self, paths: 'Sequence[str]', filters: 'Iterable[object]') -> None:
        """Initialize a filter mismatch error.

        Args:
            paths: Requested path specifications.
            filters: Filters that excluded every element.
        """
        self.paths = list(paths)
        self.filters = list(filters)

        super().__init__(
            f'None of the features at {self.paths!r} matched the filters: {self.filters!r}',
        )


class ProtocolViolationError(CukeError):
    """Error raised when builder callbacks arrive out of order.

    Examples declared with no open outline, steps with no owning
    element, and any callback on an already closed feature are
    all protocol violations.
    """


class PlaceholderResolutionError(CukeError):
    """Error raised when an outline placeholder has no examples column."""

    def __init__(self, placeholder: str, text: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize a placeholder resolution error.

        Args:
            placeholder: Placeholder name without angle brackets.
            text: Text where the placeholder was left unresolved.
            context: Error context with optional location data.
        """
        self.placeholder = placeholder
        self.text = text

        super().__init__(
            f'Unresolved placeholder <{placeholder}> in {text!r}',
            context=context,
        )


class FeatureSchemaError(CukeError):
    """Error raised when a feature document is malformed.

    Wraps YAML syntax errors and Pydantic validation failures with the
    document location where they happened.
    """

    @classmethod
    def from_yaml_error(cls, error: 'MarkedYAMLError', *,
                        filename: str | None = None) -> 'Self':
        """Create a schema error from a YAML parsing failure.

        Args:
            error: Exception raised by the YAML parser.
            filename: Uri of the document being parsed.

        Returns:
            FeatureSchemaError with the problem position.
        """
        mark = error.problem_mark or error.context_mark

        error_context = ErrorContext(
            filename=filename or (mark.name if mark else None),
            line_num=mark.line if mark else None,
            column_num=mark.column if mark else None,
            error=error,
        )

        message = 'Invalid YAML'
        if error.problem:
            message += f': {error.problem}'

        return cls(message, context=error_context)

    @classmethod
    def from_pydantic_error(cls, error: 'ValidationError', *,
                            data: Any = None,  # noqa: ANN401
                            filename: str | None = None,
                            line_num: int | None = None) -> 'Self':
        """Create a schema error from a Pydantic validation failure.

        The first error pointing into the document is used for the
        message, and the smallest failing fragment becomes the snippet.

        Args:
            error: ValidationError raised by Pydantic.
            data: Raw document data.
            filename: Uri of the document being parsed.
            line_num: Zero-based line where the document starts.

        Returns:
            FeatureSchemaError representing the validation failure.
        """
        error_context = ErrorContext(
            filename=filename,
            line_num=line_num,
            error=error,
            element=data if isinstance(data, (dict, list)) else None,
        )

        for item in error.errors(include_url=False, include_input=False):
            if located := cls._locate(data, item):
                message, element = located
                return cls(message, context=ErrorContext({**error_context, 'element': element}))

        return cls('Validation error', context=error_context)

    @staticmethod
    def _locate(value: Any, error: 'ErrorDetails') -> tuple[str, Any] | None:  # noqa: ANN401
        """Walk an error location down to the failing fragment.

        Args:
            value: Raw document data.
            error: Pydantic error details including location path.

        Returns:
            A tuple of (message, fragment) or None if the location
            does not point into the data.
        """
        fragment: Any = value
        key: int | str | None = None

        for part in error['loc']:
            if isinstance(fragment, list) and isinstance(part, int) and 0 <= part < len(fragment):
                fragment, key = fragment[part], part
            elif isinstance(fragment, dict) and part in fragment:
                fragment, key = fragment[part], part

        message = (error.get('msg') or '').strip()
        if not message:
            return None

        if key is None:
            return message, value

        return message, {key: fragment} if isinstance(key, str) else [fragment]
