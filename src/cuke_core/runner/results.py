"""Step results and the summary reporter.

Results are produced by a step runtime and consumed by reporters; the
execution driver never looks at them.
"""

from collections import Counter
from typing import TYPE_CHECKING, Any, Literal

from pydantic import Field

from cuke_core.models import SchemaModel
from cuke_core.schema import Step  # noqa: TC001

if TYPE_CHECKING:
    from collections.abc import Iterator

#: Outcome of a step or a hook.
type Status = Literal['passed', 'failed', 'skipped', 'pending', 'undefined']

#: Statuses failing a strict run.
STRICT_FAILURES: frozenset[str] = frozenset({'skipped', 'pending', 'undefined'})


class StepResult(SchemaModel):
    """Outcome of a single step."""

    status: Status = Field(title='Outcome of the step')

    uri: str = Field(title='Uri of the feature document')
    step: Step = Field(title='Step the result belongs to')

    error: str | None = Field(
        default=None,
        title='Error message of a failed step',
    )


class SummaryReporter:
    """Reporter counting step results by status."""

    def __init__(self) -> None:
        """Initialize empty counters."""
        self.counts: Counter[str] = Counter()
        self.failures: list[StepResult] = []

    def __iter__(self) -> 'Iterator[tuple[str, int]]':
        """Iterate over (status, count) pairs in status order."""
        for status in ('passed', 'failed', 'skipped', 'pending', 'undefined'):
            if self.counts[status]:
                yield status, self.counts[status]

    def before(self, match: Any, result: Any) -> None:  # noqa: ANN401
        """Ignore hook results."""

    def after(self, match: Any, result: Any) -> None:  # noqa: ANN401
        """Ignore hook results."""

    def match(self, match: Any) -> None:  # noqa: ANN401
        """Ignore step matches."""

    def result(self, result: StepResult) -> None:
        """Count a step result."""
        self.counts[result.status] += 1
        if result.status == 'failed':
            self.failures.append(result)

    @property
    def total(self) -> int:
        """Return the number of reported steps."""
        return sum(self.counts.values())

    def exit_status(self, *, strict: bool = False) -> int:
        """Return the process exit status of the run.

        Args:
            strict: Whether skipped, pending and undefined steps fail
                the run.

        Returns:
            0 on success, 1 on failure.
        """
        if self.counts['failed']:
            return 1

        if strict and any(self.counts[status] for status in STRICT_FAILURES):
            return 1

        return 0

    def describe(self) -> str:
        """Return a one-line summary, e.g. `3 steps (2 passed, 1 undefined)`."""
        details = ', '.join(f'{count} {status}' for status, count in self)
        if not details:
            return '0 steps'

        return f'{self.total} steps ({details})'
