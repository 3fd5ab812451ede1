"""Tests for localized keywords."""

import pytest

from cuke_core.i18n import LANGUAGES, get_language


@pytest.mark.parametrize(('code', 'line', 'expected'), (
    pytest.param('en', 'Given a user', ('Given', 'a user'), id='en'),
    pytest.param('en', '* a bullet', ('*', 'a bullet'), id='any keyword'),
    pytest.param('de', 'Gegeben seien zwei Nutzer', ('Gegeben seien', 'zwei Nutzer'), id='longest first'),
    pytest.param('fr', "Étant donné que l'utilisateur", ('Étant donné que', "l'utilisateur"), id='fr'),
    pytest.param('es', 'Dado un usuario', ('Dado', 'un usuario'), id='es'),
    pytest.param('ru', 'К тому же вход', ('К тому же', 'вход'), id='ru'),
))
def test_split_step(code: str, line: str, expected: tuple[str, str]) -> None:
    """Split step lines on the longest matching keyword."""
    assert get_language(code).split_step(line) == expected


@pytest.mark.parametrize('line', (
    pytest.param('Suppose a user', id='unknown'),
    pytest.param('Givena user', id='no separator'),
    pytest.param('', id='empty'),
))
def test_split_unknown_step(line: str) -> None:
    """Reject lines without a known keyword."""
    with pytest.raises(KeyError):
        get_language().split_step(line)


@pytest.mark.parametrize(('keyword', 'expected'), (
    pytest.param('Given', 'given', id='given'),
    pytest.param('When', 'when', id='when'),
    pytest.param('Then', 'then', id='then'),
    pytest.param('And', 'and', id='and'),
    pytest.param('But', 'but', id='but'),
    pytest.param('*', None, id='any'),
))
def test_step_kind(keyword: str, expected: str | None) -> None:
    """Classify localized keywords."""
    assert get_language('en').step_kind(keyword) == expected


def test_languages() -> None:
    """Provide the default and the supported languages."""
    assert get_language().code == 'en'
    assert set(LANGUAGES) == {'en', 'de', 'fr', 'es', 'ru'}

    for language in LANGUAGES.values():
        assert all(language.step_keywords)
        assert language.feature and language.scenario_outline and language.examples

    with pytest.raises(KeyError):
        get_language('xx')

    with pytest.raises(KeyError):
        get_language('de').step_kind('Given')
