"""Identifier, tag and placeholder rules for feature documents.

Identifiers are derived from display names: a feature or an element id
is the slug of its name. Materialized outline rows extend the outline id
with the examples id and the row number, joined by `ID_SEPARATOR`.
Scenario identity for background inheritance is the part of an id
before the first separator.
"""

from re import ASCII
from re import compile as regexp
from typing import Annotated

from pydantic import Field

#: Separator between id segments (outline;examples;row).
ID_SEPARATOR = ';'

#: Characters that are collapsed into a single dash inside slugs.
_SLUG_PATTERN = regexp(r'[\s;]+')

#: Outline placeholder, e.g. `<name>` or `<start date>`.
PLACEHOLDER_PATTERN = regexp(r'<(?P<name>[^<>\n]+)>')

#: Tag identifier, e.g. `@smoke` or `@jira:ABC-1`.
TAG_PATTERN = regexp(r'^@[^\s@,~]+$', flags=ASCII)

Tag = Annotated[
    str, Field(
        pattern=TAG_PATTERN.pattern,
        title='Tag',
        description=(
            'Tag attached to a feature, an element or an examples table. '
            'Tags start with `@` and contain no whitespace, commas or `~`.'
        ),
        examples=[
            '@smoke',
            '@jira:ABC-1',
        ],
    ),
]


def slugify(name: str) -> str:
    """Turn a display name into an id segment.

    Args:
        name: Display name of a feature, element or examples table.

    Returns:
        Lower-cased name with whitespace and separators collapsed
        into dashes.
    """
    return _SLUG_PATTERN.sub('-', name.strip()).lower()


def scenario_key(identifier: str) -> str:
    """Return the identity key used by the background name cache.

    Args:
        identifier: Element identifier.

    Returns:
        The portion of the identifier before the first separator,
        or the separator itself when that portion is empty.
    """
    key, _, _ = identifier.partition(ID_SEPARATOR)

    return key or ID_SEPARATOR
