"""YAML feature document parser.

Reads a multi-document YAML stream, validates every document against
the feature schema and replays the result as the ordered statement
callbacks a feature builder consumes:

- `feature(header)` once;
- `background`, `scenario` or `scenario_outline` per element document,
  each followed by its `step` callbacks and, for outlines, by its
  `examples` callbacks;
- `eof()` once.

The whole document is validated and filtered before the first callback
is made, so a malformed document never produces a partial feature.
Document line numbers are recovered from the YAML nodes and attached to
statements, steps and table rows.
"""

from contextlib import closing
from typing import TYPE_CHECKING, Any, Protocol

from pydantic import ValidationError
from yaml import SafeLoader
from yaml.error import MarkedYAMLError
from yaml.nodes import MappingNode, ScalarNode, SequenceNode

from cuke_core.errors import ErrorContext, FeatureSchemaError
from cuke_core.i18n import get_language
from cuke_core.schema import (
    LANGUAGE_CONTEXT,
    BackgroundDocument,
    ElementDocument,
    FeatureHeader,
    OutlineDocument,
    ScenarioDocument,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from io import TextIOBase

if TYPE_CHECKING:
    from yaml import BaseLoader
    from yaml.nodes import Node

if TYPE_CHECKING:
    from cuke_core.i18n import Language
    from cuke_core.schema import Background, Examples, Scenario, ScenarioOutline, Step

    from .filters import Element, Filter

#: Fully validated document: header and the elements kept by filters.
type Source = tuple[FeatureHeader, tuple['Element', ...]]


class FeatureListener(Protocol):
    """Receiver of the statement callbacks of a parsed document."""

    def feature(self, header: FeatureHeader) -> None:
        """Start a feature."""

    def background(self, background: 'Background') -> None:
        """Declare a background."""

    def scenario(self, scenario: 'Scenario') -> None:
        """Declare a scenario."""

    def scenario_outline(self, outline: 'ScenarioOutline') -> None:
        """Declare a scenario outline."""

    def examples(self, examples: 'Examples') -> None:
        """Declare an examples table of the last outline."""

    def step(self, step: 'Step') -> None:
        """Declare a step of the last statement."""

    def eof(self) -> None:
        """End the feature."""


class FeatureParser:
    """Parser of YAML feature documents.

    The parser is stateless between documents and may be shared by
    every load of a run.
    """

    def __init__(self, loader: type['BaseLoader'] = SafeLoader) -> None:
        """Initialize the parser.

        Args:
            loader: YAML loader class used to read documents.
        """
        self.loader = loader

    def documents(self, content: 'TextIOBase | str', *,
                  uri: str | None = None) -> 'Iterator[tuple[Node, Any]]':
        """Read the YAML documents of a stream with their nodes.

        Args:
            content: YAML content as a string or file-like object.
            uri: Uri of the document, used in errors.

        Yields:
            Tuples of (document node, constructed data); empty
                documents are skipped.

        Raises:
            FeatureSchemaError: If the stream is not valid YAML.
        """
        loader = self.loader(content)
        try:
            while loader.check_node():
                node = loader.get_node()
                if node is None:  # pragma: no cover
                    continue
                data = loader.construct_document(node)
                if data is not None:
                    yield node, data

        except MarkedYAMLError as base:
            raise FeatureSchemaError.from_yaml_error(base, filename=uri) from base

        finally:
            loader.dispose()

    def parse(self, content: 'TextIOBase | str', *,
              uri: str | None = None,
              filters: 'Iterable[Filter]' = ()) -> Source:
        """Validate a feature document and apply filters to its elements.

        Args:
            content: YAML content as a string or file-like object.
            uri: Uri of the document, used in errors.
            filters: Filters every kept element must pass.

        Returns:
            The feature header and the kept element documents,
                in document order.

        Raises:
            FeatureSchemaError: If the document is empty, is not valid
                YAML or fails validation.
        """
        filters = tuple(filters)
        elements = []

        with closing(self.documents(content, uri=uri)) as documents:
            try:
                node, data = next(documents)
            except StopIteration:
                raise FeatureSchemaError(
                    'Feature document is empty',
                    context=ErrorContext(filename=uri),
                ) from None

            language = self._language(data, node, uri)
            header = self._validate(FeatureHeader, self._locate(data, node), node, uri, language)

            for node, data in documents:
                data = self._locate_element(data, node)
                element = self._validate(ElementDocument, data, node, uri, language).root
                for item in filters:
                    element = item.select(header, element)
                    if element is None:
                        break
                else:
                    elements.append(element)

        return header, tuple(elements)

    def replay(self, source: Source, listener: FeatureListener) -> None:
        """Emit the statement callbacks of a parsed document.

        Args:
            source: Parsed header and elements.
            listener: Receiver of the callbacks.
        """
        header, elements = source

        listener.feature(header)

        for element in elements:
            match element:
                case BackgroundDocument():
                    listener.background(element.statement())  # type: ignore[arg-type]
                case ScenarioDocument():
                    listener.scenario(element.statement())  # type: ignore[arg-type]
                case OutlineDocument():
                    listener.scenario_outline(element.statement())  # type: ignore[arg-type]

            for step in element.steps:
                listener.step(step)

            if isinstance(element, OutlineDocument):
                for examples in element.examples:
                    listener.examples(examples)

        listener.eof()

    @staticmethod
    def _language(data: Any, node: 'Node', uri: str | None) -> 'Language':  # noqa: ANN401
        """Select the keyword table declared by the header."""
        code = data.get('language') if isinstance(data, dict) else None

        try:
            return get_language(code)
        except KeyError:
            raise FeatureSchemaError(
                f'Unsupported language {code!r}',
                context=ErrorContext(
                    filename=uri,
                    line_num=node.start_mark.line,
                    element=data,
                ),
            ) from None

    @staticmethod
    def _validate[T](model: type[T], data: Any, node: 'Node',  # noqa: ANN401
                     uri: str | None, language: 'Language') -> T:
        """Validate a document with its language in context."""
        try:
            return model.model_validate(  # type: ignore[attr-defined,no-any-return]
                data,
                context={LANGUAGE_CONTEXT: language},
            )

        except ValidationError as base:
            raise FeatureSchemaError.from_pydantic_error(
                base,
                data=data,
                filename=uri,
                line_num=node.start_mark.line,
            ) from base

    @staticmethod
    def _child(node: 'Node', key: str) -> 'Node | None':
        """Return the value node of a mapping key."""
        if isinstance(node, MappingNode):
            for key_node, value_node in node.value:
                if isinstance(key_node, ScalarNode) and key_node.value == key:
                    return value_node

        return None

    @classmethod
    def _locate(cls, data: Any, node: 'Node') -> Any:  # noqa: ANN401
        """Attach the one-based line of a node to a mapping."""
        if isinstance(data, dict) and 'line' not in data:
            return {**data, 'line': node.start_mark.line + 1}

        return data

    @classmethod
    def _locate_items(cls, data: Any, node: 'Node | None', key: str, locate: Any) -> Any:  # noqa: ANN401
        """Locate every item of the sequence stored under a key."""
        items, items_node = data.get(key), cls._child(node, key) if node else None
        if not isinstance(items, list) or not isinstance(items_node, SequenceNode):
            return data

        return {
            **data,
            key: [
                locate(item, item_node)
                for item, item_node in zip(items, items_node.value, strict=False)
            ],
        }

    @staticmethod
    def _written(data: Any, node: 'Node | None') -> Any:  # noqa: ANN401
        """Return a scalar exactly as written in the document.

        Resolved YAML types are discarded: `12:30`, `yes`, `1.50` and
        `~` stay the text they were written as.
        """
        if isinstance(node, ScalarNode):
            return node.value

        return data

    @classmethod
    def _written_cells(cls, cells: Any, node: 'Node | None') -> Any:  # noqa: ANN401
        """Return the cells of a row as written in the document."""
        if not isinstance(cells, list) or not isinstance(node, SequenceNode):
            return cells

        return [
            cls._written(cell, cell_node)
            for cell, cell_node in zip(cells, node.value, strict=False)
        ]

    @classmethod
    def _locate_row(cls, data: Any, node: 'Node') -> Any:  # noqa: ANN401
        """Turn a bare row into a located row of written cells."""
        if isinstance(data, list):
            return {'cells': cls._written_cells(data, node), 'line': node.start_mark.line + 1}

        data = cls._locate(data, node)
        if isinstance(data, dict) and 'cells' in data:
            return {**data, 'cells': cls._written_cells(data['cells'], cls._child(node, 'cells'))}

        return data

    @classmethod
    def _locate_table(cls, data: Any, node: 'Node') -> Any:  # noqa: ANN401
        """Locate a step or an examples table and its rows."""
        data = cls._locate(data, node)
        if not isinstance(data, dict):
            return data

        return cls._locate_items(data, node, 'table', cls._locate_row)

    @classmethod
    def _locate_step(cls, data: Any, node: 'Node') -> Any:  # noqa: ANN401
        """Locate a step written as a string or as a mapping."""
        if isinstance(data, str):
            return {'step': data, 'line': node.start_mark.line + 1}

        data = cls._locate_table(data, node)
        if isinstance(data, dict) and data.get('docstring') is not None:
            return {**data, 'docstring': cls._written(data['docstring'], cls._child(node, 'docstring'))}

        return data

    @classmethod
    def _locate_element(cls, data: Any, node: 'Node') -> Any:  # noqa: ANN401
        """Locate an element document, its steps and its examples."""
        data = cls._locate(data, node)
        if not isinstance(data, dict):
            return data

        data = cls._locate_items(data, node, 'steps', cls._locate_step)

        return cls._locate_items(data, node, 'examples', cls._locate_table)
