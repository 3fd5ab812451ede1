"""Base Pydantic models for feature document statements.

Parsed statements (feature headers, backgrounds, scenarios, outlines,
examples and steps) are immutable once validated: the builder only ever
references them, and the element tree wraps them without copying.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Base immutable model for all parsed statements.

    Design principles enforced by this model:
        - Immutability: statements cannot be modified after validation,
          so an element shared by reference (a background attached to
          several scenarios) can never be changed through one of them.
        - Strict schema validation: unknown fields are rejected to avoid
          silently ignoring typos in feature documents.
    """

    model_config = ConfigDict(
        frozen=True,
        extra='forbid',
        populate_by_name=True,
    )


class DescribedMixin(SchemaModel):
    """Mixin providing free-form documentation for a statement.

    The description does not affect execution and is only forwarded
    to formatters.
    """

    description: str | None = Field(
        default=None,
        title='Description',
        description='Detailed human-readable description of the statement.',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for runtime settings.

    Settings are resolved from the environment and never change during
    a run. Unknown variables are ignored so that the surrounding
    environment does not break option resolution.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )
