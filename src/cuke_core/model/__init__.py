"""In-memory model of feature documents.

Features aggregate the elements declared by a document: scenarios and
scenario outlines, each referencing the background it inherits.
Collections order features deterministically for execution.
"""

from .collection import FeatureCollection
from .elements import (
    BackgroundElement,
    ExamplesTable,
    ExampleScenario,
    OutlineElement,
    ScenarioElement,
    StepContainer,
    TagStatementElement,
)
from .feature import BackgroundScope, BuilderState, Feature

__all__ = (
    'BackgroundElement',
    'BackgroundScope',
    'BuilderState',
    'ExampleScenario',
    'ExamplesTable',
    'Feature',
    'FeatureCollection',
    'OutlineElement',
    'ScenarioElement',
    'StepContainer',
    'TagStatementElement',
)
