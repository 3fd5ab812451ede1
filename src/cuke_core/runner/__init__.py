"""Execution collaborators.

Declares the formatter, reporter and runtime interfaces the execution
driver calls, and ships the console implementations used by the
command line.
"""

from .console import ConsoleFormatter
from .protocols import Formatter, Reporter, Runtime
from .results import StepResult, SummaryReporter
from .runtime import UndefinedRuntime

__all__ = (
    'ConsoleFormatter',
    'Formatter',
    'Reporter',
    'Runtime',
    'StepResult',
    'SummaryReporter',
    'UndefinedRuntime',
)
