"""Tests for feature aggregate construction."""

import pytest

from cuke_core.errors import ProtocolViolationError
from cuke_core.i18n import get_language
from cuke_core.model import BuilderState, Feature, OutlineElement, ScenarioElement, TagStatementElement
from cuke_core.names import scenario_key

from .helpers import background, examples, header, outline, scenario, step


def make_feature(**kwargs: object) -> Feature:
    """Build an empty feature."""
    return Feature(header(**kwargs), 'features/test.feature.yaml')


def test_elements_in_declaration_order() -> None:
    """Keep scenarios and outlines in order, backgrounds apart."""
    feature = make_feature()

    feature.background(background('Setup'))
    feature.scenario(scenario('First'))
    feature.scenario_outline(outline('Second'))
    feature.scenario(scenario('Third'))

    assert [element.name for element in feature.elements] == ['First', 'Second', 'Third']
    assert [type(element) for element in feature.elements] == [
        ScenarioElement,
        OutlineElement,
        ScenarioElement,
    ]
    assert [element.name for element in feature.backgrounds] == ['Setup']


def test_background_inherited_by_reference() -> None:
    """Attach the same background object to every later element."""
    feature = make_feature()

    feature.background(background('Setup'))
    feature.step(step('Given a user'))
    feature.scenario(scenario('First'))
    feature.scenario_outline(outline('Second'))

    first, second = feature.elements
    (setup,) = feature.backgrounds

    assert first.background is setup
    assert second.background is setup
    assert [item.text for item in setup.steps] == ['a user']


def test_no_background() -> None:
    """Leave elements declared before any background without one."""
    feature = make_feature()

    feature.scenario(scenario('First'))
    feature.background(background('Setup'))
    feature.scenario(scenario('Second'))

    first, second = feature.elements

    assert first.background is None
    assert second.background is feature.backgrounds[0]


def test_repeated_name_clears_background() -> None:
    """Clear the current background when a scenario name repeats."""
    feature = make_feature()

    feature.background(background('Setup'))
    feature.scenario(scenario('Login'))
    feature.scenario(scenario('Other'))
    feature.scenario(scenario('Login'))
    feature.scenario(scenario('Later'))

    first, other, repeated, later = feature.elements

    assert first.background is feature.backgrounds[0]
    assert other.background is feature.backgrounds[0]
    assert repeated.background is None
    assert later.background is None
    assert feature.current_background is None


def test_new_background_after_clear() -> None:
    """Inherit a background declared after the clearing repeat."""
    feature = make_feature()

    feature.background(background('First setup'))
    feature.scenario(scenario('Login'))
    feature.scenario_outline(outline('Login'))
    feature.background(background('Second setup'))
    feature.scenario(scenario('Logout'))

    login, repeated, logout = feature.elements

    assert login.background is feature.backgrounds[0]
    assert repeated.background is None
    assert logout.background is feature.backgrounds[1]


def test_steps_attach_to_current_container() -> None:
    """Append steps to the last declared background or element."""
    feature = make_feature()

    feature.background(background())
    feature.step(step('Given a database'))
    feature.scenario(scenario('First'))
    feature.step(step('When it runs'))
    feature.step(step('Then it passes'))
    feature.scenario_outline(outline('Second'))
    feature.step(step('Given <value>'))
    feature.examples(examples(['value'], ['1']))

    first, second = feature.elements

    assert [item.line_text for item in feature.backgrounds[0].steps] == ['Given a database']
    assert [item.line_text for item in first.steps] == ['When it runs', 'Then it passes']
    assert [item.line_text for item in second.steps] == ['Given <value>']
    assert len(second.tables) == 1


def test_element_tags() -> None:
    """Prefix element tags with feature tags, without duplicates."""
    feature = make_feature(tags=['@web', '@smoke'])

    feature.scenario(scenario('First', tags=['@smoke', '@slow']))

    assert feature.elements[0].tags == ('@web', '@smoke', '@slow')


def test_language() -> None:
    """Select the keyword table declared by the header."""
    assert make_feature().language.code == 'en'
    assert make_feature(language='de').language.code == 'de'

    feature = make_feature()
    feature.language = get_language('fr')

    assert feature.language.code == 'fr'

    feature.close()

    with pytest.raises(ProtocolViolationError, match=r'is closed'):
        feature.language = get_language('en')


@pytest.mark.parametrize('calls', (
    pytest.param((
        ('examples', examples(['a'], ['1'])),
    ), id='examples at start'),
    pytest.param((
        ('scenario', scenario('First')),
        ('examples', examples(['a'], ['1'])),
    ), id='examples after scenario'),
    pytest.param((
        ('scenario_outline', outline('First')),
        ('background', background()),
        ('examples', examples(['a'], ['1'])),
    ), id='examples after background'),
    pytest.param((
        ('step', step('Given nothing')),
    ), id='step at start'),
))
def test_protocol_violation(calls: tuple[tuple[str, object], ...]) -> None:
    """Reject out-of-order callbacks and leave the aggregate unchanged."""
    feature = make_feature()

    *valid, (event, statement) = calls
    for name, item in valid:
        getattr(feature, name)(item)

    elements = feature.elements
    state = feature.state

    with pytest.raises(ProtocolViolationError, match=rf'^Unexpected {event}'):
        getattr(feature, event)(statement)

    assert feature.elements == elements
    assert feature.state is state


@pytest.mark.parametrize(('event', 'statement'), (
    pytest.param('background', background(), id='background'),
    pytest.param('scenario', scenario('First'), id='scenario'),
    pytest.param('scenario_outline', outline('First'), id='outline'),
    pytest.param('step', step('Given a user'), id='step'),
))
def test_closed_feature(event: str, statement: object) -> None:
    """Reject any callback after the feature was closed."""
    feature = make_feature()
    feature.scenario(scenario('Only'))
    feature.close()

    assert feature.state is BuilderState.CLOSED

    with pytest.raises(ProtocolViolationError):
        getattr(feature, event)(statement)

    with pytest.raises(ProtocolViolationError, match=r'already closed'):
        feature.close()

    assert len(feature.elements) == 1


@pytest.mark.parametrize(('identifier', 'expected'), (
    pytest.param('login', 'login', id='plain'),
    pytest.param('outline;examples;2', 'outline', id='run unit'),
    pytest.param(';examples', ';', id='empty first segment'),
    pytest.param('', ';', id='empty'),
))
def test_scenario_key(identifier: str, expected: str) -> None:
    """Use the first id segment as the name key."""
    assert scenario_key(identifier) == expected


def test_element_base_is_abstract() -> None:
    """Only concrete element kinds can be run."""
    with pytest.raises(TypeError, match=r'abstract'):
        TagStatementElement(make_feature(), scenario('Login'))  # type: ignore[abstract]
