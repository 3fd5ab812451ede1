"""Step runtime without step definitions.

Step definition lookup is owned by the projects using this library;
this runtime only knows that nothing is defined. It reports the first
step of each scenario as `undefined` and the remaining steps as
`skipped`, or every step as `skipped` in a dry run. Hooks do nothing.
"""

from typing import TYPE_CHECKING

from .results import StepResult

if TYPE_CHECKING:
    from collections.abc import Collection

    from cuke_core.i18n import Language
    from cuke_core.schema import Step

    from .protocols import Reporter


class UndefinedRuntime:
    """Runtime reporting every step as undefined or skipped."""

    def __init__(self, *, dry_run: bool = False) -> None:
        """Initialize the runtime.

        Args:
            dry_run: Whether to skip every step.
        """
        self.dry_run = dry_run
        self.skip_next = dry_run

    def build_world(self, tags: 'Collection[str]') -> None:
        """Start a scenario: its first step is not skipped."""
        self.skip_next = self.dry_run

    def run_before_hooks(self, reporter: 'Reporter', tags: 'Collection[str]') -> None:
        """No hooks are defined."""

    def run_step(self, uri: str, step: 'Step', reporter: 'Reporter', language: 'Language') -> None:
        """Report the step without running it."""
        status = 'skipped' if self.skip_next else 'undefined'
        self.skip_next = True

        reporter.result(StepResult(status=status, uri=uri, step=step))

    def run_after_hooks(self, reporter: 'Reporter', tags: 'Collection[str]') -> None:
        """No hooks are defined."""

    def dispose_world(self) -> None:
        """Nothing to dispose."""
