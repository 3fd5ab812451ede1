"""Tests for the execution order of features and elements."""

from typing import TYPE_CHECKING

import pytest

from cuke_core.model import Feature, FeatureCollection

from .helpers import background, call_names, examples, header, outline, scenario, step

if TYPE_CHECKING:
    from pytest_mock import MockType


def run(feature: Feature | FeatureCollection, sinks: 'MockType') -> None:
    """Run with the recording formatter, reporter and runtime."""
    feature.run(sinks.formatter, sinks.reporter, sinks.runtime)


def test_scenario_with_background(sinks: 'MockType') -> None:
    """Run the background inside the scenario lifecycle."""
    feature = Feature(header(), 'features/a.feature.yaml')
    feature.background(background('Setup'))
    feature.step(step('Given a database'))
    feature.scenario(scenario('First'))
    feature.step(step('When it runs'))
    feature.step(step('Then it passes'))
    feature.close()

    run(feature, sinks)

    assert call_names(sinks) == [
        'formatter.uri',
        'formatter.feature',
        'runtime.build_world',
        'formatter.start_of_scenario_lifecycle',
        'runtime.run_before_hooks',
        'formatter.background',
        'formatter.step',
        'runtime.run_step',
        'formatter.scenario',
        'formatter.step',
        'formatter.step',
        'runtime.run_step',
        'runtime.run_step',
        'runtime.run_after_hooks',
        'formatter.end_of_scenario_lifecycle',
        'runtime.dispose_world',
        'formatter.eof',
    ]

    sinks.formatter.uri.assert_called_once_with('features/a.feature.yaml')
    sinks.formatter.feature.assert_called_once_with(feature.header)
    sinks.runtime.build_world.assert_called_once_with(())


def test_step_arguments(sinks: 'MockType') -> None:
    """Pass uri, step, reporter and language to the runtime."""
    feature = Feature(header(language='de', tags=['@web']), 'features/a.feature.yaml')
    feature.scenario(scenario('First', tags=['@fast']))
    feature.step(step('Given a user', line=3))
    feature.close()

    run(feature, sinks)

    (element,) = feature.elements

    sinks.runtime.run_step.assert_called_once_with(
        'features/a.feature.yaml',
        element.steps[0],
        sinks.reporter,
        feature.language,
    )
    sinks.runtime.build_world.assert_called_once_with(('@web', '@fast'))
    sinks.runtime.run_before_hooks.assert_called_once_with(sinks.reporter, ('@web', '@fast'))
    sinks.runtime.run_after_hooks.assert_called_once_with(sinks.reporter, ('@web', '@fast'))


def test_outline(sinks: 'MockType') -> None:
    """Describe the outline once, then run one scenario per row."""
    feature = Feature(header(), 'features/a.feature.yaml')
    feature.scenario_outline(outline('Template'))
    feature.step(step('Given <x>'))
    feature.examples(examples(['x'], ['1'], ['2'], name='First'))
    feature.examples(examples(['x'], ['3'], name='Second'))
    feature.close()

    run(feature, sinks)

    unit = [
        'runtime.build_world',
        'formatter.start_of_scenario_lifecycle',
        'runtime.run_before_hooks',
        'formatter.scenario',
        'formatter.step',
        'runtime.run_step',
        'runtime.run_after_hooks',
        'formatter.end_of_scenario_lifecycle',
        'runtime.dispose_world',
    ]

    assert call_names(sinks) == [
        'formatter.uri',
        'formatter.feature',
        'formatter.scenario_outline',
        'formatter.step',
        'formatter.examples',
        *unit,
        *unit,
        'formatter.examples',
        *unit,
        'formatter.eof',
    ]

    steps = [call.args[1].text for call in sinks.runtime.run_step.call_args_list]
    assert steps == ['1', '2', '3']

    scenarios = [call.args[0].id for call in sinks.formatter.scenario.call_args_list]
    assert scenarios == ['template;first;2', 'template;first;3', 'template;second;2']


def test_world_disposed_on_error(sinks: 'MockType') -> None:
    """Dispose the world and propagate a failing step."""
    feature = Feature(header(), 'features/a.feature.yaml')
    feature.scenario(scenario('First'))
    feature.step(step('Given a failure'))
    feature.scenario(scenario('Second'))
    feature.close()

    sinks.runtime.run_step.side_effect = RuntimeError('step failed')

    with pytest.raises(RuntimeError, match=r'^step failed$'):
        run(feature, sinks)

    names = call_names(sinks)

    assert names[-1] == 'runtime.dispose_world'
    assert names.count('runtime.build_world') == 1
    assert 'runtime.run_after_hooks' not in names
    assert 'formatter.eof' not in names


def test_collection_order(sinks: 'MockType') -> None:
    """Run features sorted by uri regardless of discovery order."""
    features = []
    for uri in ('features/b.feature.yaml', 'features/a.feature.yaml', 'features/c.feature.yaml'):
        feature = Feature(header(), uri)
        feature.close()
        features.append(feature)

    collection = FeatureCollection(features)

    assert collection.uris == (
        'features/a.feature.yaml',
        'features/b.feature.yaml',
        'features/c.feature.yaml',
    )
    assert isinstance(collection[1:], FeatureCollection)
    assert collection[0].uri == 'features/a.feature.yaml'

    run(collection, sinks)

    uris = [call.args[0] for call in sinks.formatter.uri.call_args_list]
    assert uris == list(collection.uris)
