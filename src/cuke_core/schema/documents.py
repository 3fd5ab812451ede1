"""YAML document models of the feature file format.

A feature file is a multi-document YAML stream. The first document is
the feature header; every following document declares exactly one
element: a `background`, a `scenario` or an `outline`. Elements nest
their steps (and, for outlines, their examples tables); the parser
splits them back into the flat statement events the feature builder
consumes.
"""

from typing import Annotated, Any, ClassVar

from pydantic import Discriminator, Field, RootModel, Tag

from cuke_core.models import SchemaModel

from .statements import Background, Examples, Scenario, ScenarioOutline, Statement, Step

#: Document keys discriminating element kinds.
ELEMENT_KEYS = ('background', 'scenario', 'outline')


class StepsMixin(SchemaModel):
    """Document fields shared by every element with steps."""

    #: Statement model emitted for the element itself.
    statement_model: ClassVar[type[Statement]]

    steps: tuple[Step, ...] = Field(
        default=(),
        title='Steps',
        description=(
            'Ordered steps of the element. A step is a string starting '
            'with a step keyword, or a mapping with a `step` line and an '
            'optional `table` or `docstring` argument.'
        ),
    )

    def statement(self) -> 'Statement':
        """Return the element statement without its nested children."""
        data = self.model_dump(exclude={'steps', 'examples'})

        return self.statement_model.model_validate(data)


class BackgroundDocument(StepsMixin, Background):
    """Background element document."""

    statement_model = Background


class ScenarioDocument(StepsMixin, Scenario):
    """Scenario element document."""

    statement_model = Scenario


class OutlineDocument(StepsMixin, ScenarioOutline):
    """Scenario outline element document."""

    statement_model = ScenarioOutline

    examples: tuple[Examples, ...] = Field(
        default=(),
        title='Examples tables',
        description='Tables of values the outline is expanded with.',
    )


def element_kind(value: Any) -> str | None:  # noqa: ANN401
    """Return the element kind declared by a raw document."""
    if isinstance(value, dict):
        for key in ELEMENT_KEYS:
            if key in value:
                return key
        return None

    for key, model in zip(ELEMENT_KEYS, (BackgroundDocument, ScenarioDocument, OutlineDocument), strict=True):
        if isinstance(value, model):
            return key

    return None


class ElementDocument(RootModel[Annotated[
    Annotated[BackgroundDocument, Tag('background')]
    | Annotated[ScenarioDocument, Tag('scenario')]
    | Annotated[OutlineDocument, Tag('outline')],
    Discriminator(
        element_kind,
        custom_error_type='element_kind',
        custom_error_message='Document must declare a background, a scenario or an outline',
    ),
]]):
    """Any element document, discriminated by its declaring key."""
