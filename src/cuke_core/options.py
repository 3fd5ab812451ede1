"""Runtime options.

Options are read from `CUKE_`-prefixed environment variables (lists as
JSON, e.g. `CUKE_TAGS='["@smoke"]'`) and may be overridden explicitly,
typically by the command line.
"""

from re import error as PatternError
from typing import TYPE_CHECKING

from pydantic import Field, field_validator
from pydantic_settings import SettingsConfigDict

from cuke_core.core.filters import NameFilter, TagFilter
from cuke_core.errors import ConfigurationError
from cuke_core.models import SettingsModel

if TYPE_CHECKING:
    from cuke_core.core.filters import Filter


class RuntimeOptions(SettingsModel):
    """Options selecting and running features."""

    model_config = SettingsConfigDict(
        env_prefix='CUKE_',
        frozen=True,
        extra='ignore',
    )

    features: list[str] = Field(
        default_factory=lambda: ['features'],
        description='Feature paths, optionally suffixed with `:line` numbers.',
    )

    tags: list[str] = Field(
        default_factory=list,
        description='Tag expressions; all of them must match.',
    )

    names: list[str] = Field(
        default_factory=list,
        description='Regular expressions matched against element names.',
    )

    dry_run: bool = Field(
        default=False,
        description='Skip step execution and report steps as skipped.',
    )

    strict: bool = Field(
        default=False,
        description='Fail the run on undefined or skipped steps.',
    )

    @field_validator('features')
    @classmethod
    def check_features(cls, value: list[str]) -> list[str]:
        """Require at least one feature path."""
        if not value:
            raise ValueError('At least one feature path is required')

        return value

    def filters(self) -> list['Filter']:
        """Build the filters selected by the options.

        Returns:
            A tag filter or a name filter, or no filter at all.

        Raises:
            ConfigurationError: If tags and names are combined, or if
                an expression is invalid.
        """
        if self.tags and self.names:
            raise ConfigurationError(
                f'Inconsistent filters: tags {self.tags!r} and names {self.names!r}. '
                'Only one kind of filter can be used at once',
            )

        try:
            if self.tags:
                return [TagFilter(self.tags)]
            if self.names:
                return [NameFilter(self.names)]

        except (PatternError, ValueError) as base:
            raise ConfigurationError(f'Invalid filter: {base}') from base

        return []
