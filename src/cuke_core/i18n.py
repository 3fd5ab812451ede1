"""Localized keywords for feature documents.

Each language maps canonical step kinds (`given`, `when`, `then`,
`and`, `but`) to the keywords that introduce them. The feature header's
language tag selects the table used to validate and classify steps.
"""

from typing import Literal

from pydantic import Field

from cuke_core.models import SchemaModel

#: Canonical step kinds.
type StepKind = Literal['given', 'when', 'then', 'and', 'but']

#: Keyword accepted by every language as a bulleted step.
ANY_KEYWORD = '*'

DEFAULT_LANGUAGE = 'en'


class Language(SchemaModel):
    """Keyword table for a single language."""

    code: str = Field(title='Language tag')
    name: str = Field(title='English name of the language')

    feature: tuple[str, ...]
    background: tuple[str, ...]
    scenario: tuple[str, ...]
    scenario_outline: tuple[str, ...]
    examples: tuple[str, ...]

    given: tuple[str, ...]
    when: tuple[str, ...]
    then: tuple[str, ...]
    and_: tuple[str, ...] = Field(alias='and')
    but: tuple[str, ...]

    @property
    def step_keywords(self) -> tuple[str, ...]:
        """Return every step keyword of the language, longest first."""
        keywords = {ANY_KEYWORD, *self.given, *self.when, *self.then, *self.and_, *self.but}

        return tuple(sorted(keywords, key=lambda keyword: (-len(keyword), keyword)))

    def step_kind(self, keyword: str) -> StepKind | None:
        """Classify a step keyword.

        Args:
            keyword: Localized keyword as written in the document.

        Returns:
            The canonical kind, or None for the bulleted `*` keyword.

        Raises:
            KeyError: If the keyword does not belong to the language.
        """
        keyword = keyword.strip()
        if keyword == ANY_KEYWORD:
            return None

        for kind, keywords in (
            ('given', self.given),
            ('when', self.when),
            ('then', self.then),
            ('and', self.and_),
            ('but', self.but),
        ):
            if keyword in keywords:
                return kind  # type: ignore[return-value]

        raise KeyError(keyword)

    def split_step(self, text: str) -> tuple[str, str]:
        """Split a step line into its keyword and its text.

        Args:
            text: Step line such as `Given a user`.

        Returns:
            A tuple of (keyword, text without the keyword).

        Raises:
            KeyError: If the line does not start with a known keyword.
        """
        for keyword in self.step_keywords:
            if text == keyword or text.startswith(f'{keyword} '):
                return keyword, text[len(keyword):].strip()

        raise KeyError(text)


LANGUAGES: dict[str, Language] = {
    language.code: language
    for language in (
        Language.model_validate({
            'code': 'en',
            'name': 'English',
            'feature': ('Feature', 'Business Need', 'Ability'),
            'background': ('Background',),
            'scenario': ('Scenario', 'Example'),
            'scenario_outline': ('Scenario Outline', 'Scenario Template'),
            'examples': ('Examples', 'Scenarios'),
            'given': ('Given',),
            'when': ('When',),
            'then': ('Then',),
            'and': ('And',),
            'but': ('But',),
        }),
        Language.model_validate({
            'code': 'de',
            'name': 'German',
            'feature': ('Funktionalität', 'Funktion'),
            'background': ('Grundlage', 'Hintergrund'),
            'scenario': ('Szenario', 'Beispiel'),
            'scenario_outline': ('Szenariogrundriss', 'Szenarien'),
            'examples': ('Beispiele',),
            'given': ('Angenommen', 'Gegeben sei', 'Gegeben seien'),
            'when': ('Wenn',),
            'then': ('Dann',),
            'and': ('Und',),
            'but': ('Aber',),
        }),
        Language.model_validate({
            'code': 'fr',
            'name': 'French',
            'feature': ('Fonctionnalité',),
            'background': ('Contexte',),
            'scenario': ('Scénario', 'Exemple'),
            'scenario_outline': ('Plan du scénario', 'Plan du Scénario'),
            'examples': ('Exemples',),
            'given': ('Soit', 'Sachant que', 'Étant donné que', 'Étant donné'),
            'when': ('Quand', 'Lorsque'),
            'then': ('Alors', 'Donc'),
            'and': ('Et', 'Et que'),
            'but': ('Mais', 'Mais que'),
        }),
        Language.model_validate({
            'code': 'es',
            'name': 'Spanish',
            'feature': ('Característica', 'Necesidad del negocio'),
            'background': ('Antecedentes',),
            'scenario': ('Escenario', 'Ejemplo'),
            'scenario_outline': ('Esquema del escenario',),
            'examples': ('Ejemplos',),
            'given': ('Dado', 'Dada', 'Dados', 'Dadas'),
            'when': ('Cuando',),
            'then': ('Entonces',),
            'and': ('Y', 'E'),
            'but': ('Pero',),
        }),
        Language.model_validate({
            'code': 'ru',
            'name': 'Russian',
            'feature': ('Функция', 'Функциональность', 'Свойство'),
            'background': ('Предыстория', 'Контекст'),
            'scenario': ('Сценарий', 'Пример'),
            'scenario_outline': ('Структура сценария', 'Шаблон сценария'),
            'examples': ('Примеры',),
            'given': ('Допустим', 'Дано', 'Пусть'),
            'when': ('Когда', 'Если'),
            'then': ('Тогда', 'То'),
            'and': ('И', 'К тому же', 'Также'),
            'but': ('Но', 'А', 'Иначе'),
        }),
    )
}


def get_language(code: str | None = None) -> Language:
    """Return the keyword table for a language tag.

    Args:
        code: Language tag; the default language when omitted.

    Returns:
        The matching language.

    Raises:
        KeyError: If the language is not supported.
    """
    return LANGUAGES[code or DEFAULT_LANGUAGE]
