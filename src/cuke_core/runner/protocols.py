"""Interfaces of the collaborators the execution driver talks to.

The driver never depends on concrete formatters, reporters or step
runtimes: it only calls the methods declared here, in a fixed order.
Payloads handed to reporters are owned by the runtime and are opaque
to the driver.
"""

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Collection

if TYPE_CHECKING:
    from cuke_core.i18n import Language
    from cuke_core.schema import Background, Examples, FeatureHeader, Scenario, ScenarioOutline, Step


class Formatter(Protocol):
    """Structural event sink.

    Receives the shape of what is run: document boundaries, element
    statements and steps, in execution order.
    """

    def uri(self, uri: str) -> None:
        """Start a feature document."""

    def feature(self, feature: 'FeatureHeader') -> None:
        """Describe the feature header of the current document."""

    def background(self, background: 'Background') -> None:
        """Describe a background about to run before a scenario."""

    def scenario(self, scenario: 'Scenario') -> None:
        """Describe a scenario whose steps are about to run."""

    def scenario_outline(self, outline: 'ScenarioOutline') -> None:
        """Describe a scenario outline template."""

    def examples(self, examples: 'Examples') -> None:
        """Describe an examples table about to be expanded."""

    def step(self, step: 'Step') -> None:
        """Describe a step of the current statement."""

    def start_of_scenario_lifecycle(self, scenario: 'Scenario') -> None:
        """Mark the start of a scenario run, hooks included."""

    def end_of_scenario_lifecycle(self, scenario: 'Scenario') -> None:
        """Mark the end of a scenario run, hooks included."""

    def eof(self) -> None:
        """End the current feature document."""


class Reporter(Protocol):
    """Result event sink fed by the step runtime."""

    def before(self, match: Any, result: Any) -> None:  # noqa: ANN401
        """Report the result of a before hook."""

    def result(self, result: Any) -> None:  # noqa: ANN401
        """Report the result of a step."""

    def after(self, match: Any, result: Any) -> None:  # noqa: ANN401
        """Report the result of an after hook."""

    def match(self, match: Any) -> None:  # noqa: ANN401
        """Report the step definition matched for a step."""


class Runtime(Protocol):
    """Step execution runtime.

    Owns step definition lookup, hooks and world objects. Any exception
    it raises is propagated by the driver unchanged.
    """

    def build_world(self, tags: 'Collection[str]') -> None:
        """Create fresh world objects for a scenario."""

    def run_before_hooks(self, reporter: Reporter, tags: 'Collection[str]') -> None:
        """Run the before hooks selected by the scenario tags."""

    def run_step(self, uri: str, step: 'Step', reporter: Reporter, language: 'Language') -> None:
        """Run one step and report its result."""

    def run_after_hooks(self, reporter: Reporter, tags: 'Collection[str]') -> None:
        """Run the after hooks selected by the scenario tags."""

    def dispose_world(self) -> None:
        """Drop the world objects of the finished scenario."""
