"""Command-line utilities for loading and running feature documents."""

from functools import wraps
from logging import DEBUG, WARNING, basicConfig
from typing import TYPE_CHECKING, Any

from click import ClickException, argument, echo, group, option, pass_context
from pydantic import ValidationError

from cuke_core.core import FileResourceLoader, load_features
from cuke_core.errors import CukeError
from cuke_core.jsonschema import SchemaGenerator
from cuke_core.model import OutlineElement
from cuke_core.options import RuntimeOptions
from cuke_core.runner import ConsoleFormatter, SummaryReporter, UndefinedRuntime

if TYPE_CHECKING:
    from collections.abc import Callable

    from click import Context

    from cuke_core.model import FeatureCollection


class CommandError(ClickException):
    """Configuration, loading or expansion failure."""

    exit_code = 2


def _options(**overrides: Any) -> RuntimeOptions:  # noqa: ANN401
    """Merge command-line values over environment options.

    Empty values are left out so the environment still applies.
    """
    values = {key: value for key, value in overrides.items() if value}

    try:
        return RuntimeOptions(**values)
    except ValidationError as base:
        raise CommandError(f'Invalid options: {base}') from base


def handle_errors[**P, R](command: 'Callable[P, R]') -> 'Callable[P, R]':
    """Report library errors as command failures."""
    @wraps(command)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return command(*args, **kwargs)
        except CukeError as base:
            raise CommandError(str(base)) from base

    return wrapper


def _load(options: RuntimeOptions) -> 'FeatureCollection':
    """Load the features selected by the options."""
    return load_features(FileResourceLoader(), options.features, options.filters())


def selection_options(command: Any) -> Any:  # noqa: ANN401
    """Add the feature selection arguments to a command."""
    command = option(
        '-n', '--name', 'names',
        multiple=True,
        help='Only elements whose name matches the regular expression.',
    )(command)
    command = option(
        '-t', '--tags', 'tags',
        multiple=True,
        help='Only elements matching the tag expression, e.g. `@smoke,~@slow`.',
    )(command)

    return argument('features', nargs=-1)(command)


@group(help='Command-line utilities for feature documents.')
@option('-v', '--verbose', is_flag=True, help='Log loading details.')
def cli(verbose: bool) -> None:
    """Root CLI group."""
    basicConfig(level=DEBUG if verbose else WARNING)


@cli.command(
    name='list',
    help='Print every selected feature and its scenarios.',
)
@selection_options
@handle_errors
def list_features(features: tuple[str, ...], tags: tuple[str, ...], names: tuple[str, ...]) -> None:
    """Load features and print their elements."""
    options = _options(features=list(features), tags=list(tags), names=list(names))

    for feature in _load(options):
        echo(f'{feature.uri}: {feature.name}')

        for element in feature.elements:
            echo(f'  {element.id}: {element.name}')

            if isinstance(element, OutlineElement):
                for scenario in element.materialize():
                    echo(f'    {scenario.id}: {scenario.name}')


@cli.command(
    name='run',
    help='Run every selected scenario without step definitions.',
)
@selection_options
@option('--dry-run', is_flag=True, help='Report every step as skipped.')
@option('--strict', is_flag=True, help='Fail on undefined or skipped steps.')
@pass_context
@handle_errors
def run_features(ctx: 'Context', features: tuple[str, ...], tags: tuple[str, ...],
                 names: tuple[str, ...], dry_run: bool, strict: bool) -> None:
    """Load features and drive them with the console formatter."""
    options = _options(
        features=list(features),
        tags=list(tags),
        names=list(names),
        dry_run=dry_run,
        strict=strict,
    )

    collection = _load(options)
    reporter = SummaryReporter()

    collection.run(
        ConsoleFormatter(),
        reporter,
        UndefinedRuntime(dry_run=options.dry_run),
    )

    echo(reporter.describe())
    ctx.exit(reporter.exit_status(strict=options.strict))


@cli.command(
    name='schema',
    help='Print the feature document JSON Schema to standard output.',
)
def print_schema() -> None:
    """Generate and print the JSON Schema."""
    echo(SchemaGenerator.make_schema())


if __name__ == '__main__':
    cli()
