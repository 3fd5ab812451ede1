"""Parsed statements of a feature document.

Statements are the immutable payloads the parser hands to the feature
builder: the feature header, backgrounds, scenarios, scenario outlines,
examples tables and steps. They carry everything formatters need
(keyword, name, description, tags, line) and nothing about execution.

Raw YAML values are accepted in a relaxed form (a step may be a plain
`Given something` string, a table row a plain list of scalars) and
normalized during validation. Step keywords are split using the
language passed in the validation context under `LANGUAGE_CONTEXT`.
"""

from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import Field, ValidationInfo, model_validator

from cuke_core.i18n import get_language
from cuke_core.models import DescribedMixin, SchemaModel
from cuke_core.names import Tag, slugify

if TYPE_CHECKING:
    from cuke_core.i18n import Language

#: Validation context key holding the document language.
LANGUAGE_CONTEXT = 'language'


def _language(info: ValidationInfo) -> 'Language':
    """Return the language from the validation context."""
    context = info.context or {}

    return context.get(LANGUAGE_CONTEXT) or get_language()


class Row(SchemaModel):
    """Single row of a data table or an examples table."""

    cells: tuple[str, ...] = Field(
        min_length=1,
        title='Row cells',
    )

    line: int | None = Field(
        default=None,
        title='Line of the row in the document',
    )

    @model_validator(mode='before')
    @classmethod
    def from_sequence(cls, data: Any) -> Any:  # noqa: ANN401
        """Accept a bare list of cells."""
        if isinstance(data, (list, tuple)):
            return {'cells': data}

        return data


def _check_widths(rows: tuple[Row, ...]) -> tuple[Row, ...]:
    """Ensure every row has as many cells as the first one."""
    if rows:
        width = len(rows[0].cells)
        for position, row in enumerate(rows):
            if len(row.cells) != width:
                raise ValueError(
                    f'Row {position + 1} has {len(row.cells)} cells, expected {width}',
                )

    return rows


class Step(SchemaModel):
    """Single step of a background, a scenario or an outline.

    A step is either written as a string (`When the user logs in`) or as
    a mapping with a `step` line and an optional `table` or `docstring`
    argument.
    """

    keyword: str = Field(title='Step keyword')
    text: str = Field(title='Step text without the keyword')

    table: tuple[Row, ...] | None = Field(
        default=None,
        title='Data table argument',
    )

    docstring: str | None = Field(
        default=None,
        title='Doc string argument',
    )

    line: int | None = Field(
        default=None,
        title='Line of the step in the document',
    )

    @model_validator(mode='before')
    @classmethod
    def split_keyword(cls, data: Any, info: ValidationInfo) -> Any:  # noqa: ANN401
        """Split a `step` line into its keyword and text."""
        if isinstance(data, str):
            data = {'step': data}

        if not isinstance(data, dict) or 'step' not in data:
            return data

        data = dict(data)
        line = f'{data.pop("step")}'.strip()

        try:
            data['keyword'], data['text'] = _language(info).split_step(line)
        except KeyError:
            raise ValueError(f'Unknown step keyword in {line!r}') from None

        return data

    @model_validator(mode='after')
    def check_arguments(self) -> 'Step':
        """Allow at most one argument and rectangular tables."""
        if self.table is not None and self.docstring is not None:
            raise ValueError('A step can have either a table or a docstring')

        if self.table is not None:
            _check_widths(self.table)

        return self

    @property
    def line_text(self) -> str:
        """Return the step as written, keyword included."""
        return f'{self.keyword} {self.text}'


class Statement(DescribedMixin, SchemaModel):
    """Common fields of the named statements of a document.

    The keyword defaults to the first title the document language
    defines for the statement kind named by `keyword_kind`.
    """

    #: Attribute of `Language` holding the localized titles.
    keyword_kind: ClassVar[str]

    keyword: str = Field(
        default='',
        title='Localized keyword',
    )

    name: str = Field(
        default='',
        title='Display name',
    )

    line: int | None = Field(
        default=None,
        title='Line of the statement in the document',
    )

    @model_validator(mode='before')
    @classmethod
    def localize(cls, data: Any, info: ValidationInfo) -> Any:  # noqa: ANN401
        """Fill the localized keyword."""
        if isinstance(data, dict) and not data.get('keyword'):
            titles = getattr(_language(info), cls.keyword_kind)
            return {**data, 'keyword': titles[0]}

        return data


class TagStatement(Statement):
    """Statement that carries an identifier and tags."""

    id: str = Field(
        default='',
        title='Identifier',
        description='Identifier derived from the name unless given explicitly.',
    )

    tags: tuple[Tag, ...] = Field(
        default=(),
        title='Tags',
    )

    @model_validator(mode='after')
    def default_id(self) -> 'TagStatement':
        """Derive the identifier from the name when not given."""
        if not self.id:
            object.__setattr__(self, 'id', slugify(self.name or self.keyword))

        return self


class FeatureHeader(TagStatement):
    """Header of a feature document.

    The header is the first YAML document of a feature file.
    """

    keyword_kind = 'feature'

    name: str = Field(alias='feature', title='Feature name')

    language: str | None = Field(
        default=None,
        title='Language tag',
        description='Language used to interpret keywords, English by default.',
    )


class Background(Statement):
    """Shared setup block prefixed to the scenarios that follow it."""

    keyword_kind = 'background'

    name: str = Field(default='', alias='background', title='Background name')


class Scenario(TagStatement):
    """Concrete scenario."""

    keyword_kind = 'scenario'

    name: str = Field(alias='scenario', title='Scenario name')


class ScenarioOutline(TagStatement):
    """Parameterized scenario template."""

    keyword_kind = 'scenario_outline'

    name: str = Field(alias='outline', title='Outline name')


class Examples(TagStatement):
    """Examples table of a scenario outline.

    The first row of the table names the columns; every other row is
    one set of values expanded into a scenario.
    """

    keyword_kind = 'examples'

    name: str = Field(default='', title='Examples name')

    table: tuple[Row, ...] = Field(
        min_length=2,
        title='Examples table',
        description='Header row followed by at least one row of values.',
    )

    @model_validator(mode='after')
    def check_table(self) -> 'Examples':
        """Reject ragged tables and duplicated column names."""
        _check_widths(self.table)

        if len(set(self.header)) != len(self.header):
            raise ValueError(f'Duplicated column names in {list(self.header)!r}')

        return self

    @property
    def header(self) -> tuple[str, ...]:
        """Return the column names."""
        return self.table[0].cells

    @property
    def body(self) -> tuple[Row, ...]:
        """Return the rows of values."""
        return self.table[1:]
