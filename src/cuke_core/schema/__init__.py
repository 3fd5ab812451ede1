"""Declarative schema of feature documents.

Defines immutable Pydantic models for the statements a parser emits
(feature header, background, scenario, outline, examples, step) and
for the YAML documents those statements are read from.
"""

from .documents import BackgroundDocument, ElementDocument, OutlineDocument, ScenarioDocument
from .statements import (
    LANGUAGE_CONTEXT,
    Background,
    Examples,
    FeatureHeader,
    Row,
    Scenario,
    ScenarioOutline,
    Statement,
    Step,
    TagStatement,
)

__all__ = (
    'LANGUAGE_CONTEXT',
    'Background',
    'BackgroundDocument',
    'ElementDocument',
    'Examples',
    'FeatureHeader',
    'OutlineDocument',
    'Row',
    'Scenario',
    'ScenarioDocument',
    'ScenarioOutline',
    'Statement',
    'Step',
    'TagStatement',
)
