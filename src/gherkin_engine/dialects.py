"""Dialect table: localized keywords for each Gherkin construct.

Pure data plus lookup. Keyword matching is longest-first so that
overlapping keywords resolve to the most specific construct
("Scenario Outline" before "Scenario", "Et que " before "Et ").
"""

import logging
from dataclasses import dataclass
from functools import cached_property
from typing import NamedTuple

from .constants import DEFAULT_LANGUAGE
from .models import KeywordType

logger = logging.getLogger(__name__)

# Header constructs, in the order their keywords are offered to the matcher
HEADER_CONSTRUCTS = ("feature", "rule", "background", "scenario_outline", "scenario", "examples")


class HeaderMatch(NamedTuple):
    construct: str
    keyword: str
    name: str


class StepMatch(NamedTuple):
    keyword: str
    keyword_type: KeywordType
    text: str


@dataclass(frozen=True)
class DialectEntry:
    """Keywords of one language.

    Step keywords keep their trailing space where the language separates
    keyword and text with one ("Given "); some languages do not ("前提").
    """

    code: str
    name: str
    native: str
    feature: tuple[str, ...]
    background: tuple[str, ...]
    rule: tuple[str, ...]
    scenario: tuple[str, ...]
    scenario_outline: tuple[str, ...]
    examples: tuple[str, ...]
    given: tuple[str, ...]
    when: tuple[str, ...]
    then: tuple[str, ...]
    and_: tuple[str, ...]
    but: tuple[str, ...]

    @cached_property
    def _headers(self) -> list[tuple[str, str]]:
        pairs = [(kw, construct) for construct in HEADER_CONSTRUCTS for kw in getattr(self, construct)]
        return sorted(pairs, key=lambda pair: len(pair[0]), reverse=True)

    @cached_property
    def _steps(self) -> list[str]:
        keywords = set(self.given + self.when + self.then + self.and_ + self.but)
        return sorted(keywords, key=len, reverse=True)

    def keyword_type(self, keyword: str) -> KeywordType:
        """Classify a step keyword; keywords shared across categories are unknown."""
        categories = [
            kind
            for kind, keywords in (
                (KeywordType.CONTEXT, self.given),
                (KeywordType.ACTION, self.when),
                (KeywordType.OUTCOME, self.then),
                (KeywordType.CONJUNCTION, self.and_ + self.but),
            )
            if keyword in keywords
        ]
        return categories[0] if len(categories) == 1 else KeywordType.UNKNOWN

    def match_header(self, text: str) -> HeaderMatch | None:
        """Match ``<keyword>:`` at the start of a left-trimmed line."""
        for keyword, construct in self._headers:
            if text.startswith(keyword + ":"):
                return HeaderMatch(construct, keyword, text[len(keyword) + 1 :].strip())
        return None

    def match_step(self, text: str) -> StepMatch | None:
        """Match a step keyword at the start of a left-trimmed line."""
        for keyword in self._steps:
            if text.startswith(keyword) or (keyword.endswith(" ") and text == keyword.rstrip()):
                return StepMatch(keyword, self.keyword_type(keyword), text[len(keyword) :].strip())
        return None


_STAR = "* "

_DIALECTS: dict[str, dict[str, tuple[str, ...] | str]] = {
    "en": {
        "name": "English",
        "native": "English",
        "feature": ("Feature", "Business Need", "Ability"),
        "background": ("Background",),
        "rule": ("Rule",),
        "scenario": ("Example", "Scenario"),
        "scenario_outline": ("Scenario Outline", "Scenario Template"),
        "examples": ("Examples", "Scenarios"),
        "given": (_STAR, "Given "),
        "when": (_STAR, "When "),
        "then": (_STAR, "Then "),
        "and_": (_STAR, "And "),
        "but": (_STAR, "But "),
    },
    "fr": {
        "name": "French",
        "native": "français",
        "feature": ("Fonctionnalité",),
        "background": ("Contexte",),
        "rule": ("Règle",),
        "scenario": ("Exemple", "Scénario"),
        "scenario_outline": ("Plan du scénario", "Plan du Scénario"),
        "examples": ("Exemples",),
        "given": (
            _STAR,
            "Soit ",
            "Sachant que ",
            "Sachant qu'",
            "Sachant ",
            "Etant donné que ",
            "Etant donné qu'",
            "Etant donné ",
            "Etant donnée ",
            "Etant donnés ",
            "Etant données ",
            "Étant donné que ",
            "Étant donné qu'",
            "Étant donné ",
            "Étant donnée ",
            "Étant donnés ",
            "Étant données ",
        ),
        "when": (_STAR, "Quand ", "Lorsque ", "Lorsqu'"),
        "then": (_STAR, "Alors ", "Donc "),
        "and_": (_STAR, "Et que ", "Et qu'", "Et "),
        "but": (_STAR, "Mais que ", "Mais qu'", "Mais "),
    },
    "de": {
        "name": "German",
        "native": "Deutsch",
        "feature": ("Funktionalität", "Funktion"),
        "background": ("Grundlage", "Hintergrund", "Voraussetzungen", "Vorbedingungen"),
        "rule": ("Rule", "Regel"),
        "scenario": ("Beispiel", "Szenario"),
        "scenario_outline": ("Szenariogrundriss", "Szenarien"),
        "examples": ("Beispiele",),
        "given": (_STAR, "Angenommen ", "Gegeben sei ", "Gegeben seien "),
        "when": (_STAR, "Wenn "),
        "then": (_STAR, "Dann "),
        "and_": (_STAR, "Und "),
        "but": (_STAR, "Aber "),
    },
    "es": {
        "name": "Spanish",
        "native": "español",
        "feature": ("Característica", "Necesidad del negocio", "Requisito"),
        "background": ("Antecedentes",),
        "rule": ("Regla", "Regla de negocio"),
        "scenario": ("Ejemplo", "Escenario"),
        "scenario_outline": ("Esquema del escenario",),
        "examples": ("Ejemplos",),
        "given": (_STAR, "Dado ", "Dada ", "Dados ", "Dadas "),
        "when": (_STAR, "Cuando "),
        "then": (_STAR, "Entonces "),
        "and_": (_STAR, "Y ", "E "),
        "but": (_STAR, "Pero "),
    },
    "it": {
        "name": "Italian",
        "native": "italiano",
        "feature": ("Funzionalità", "Esigenza di Business", "Abilità"),
        "background": ("Contesto",),
        "rule": ("Regola",),
        "scenario": ("Esempio", "Scenario"),
        "scenario_outline": ("Schema dello scenario",),
        "examples": ("Esempi",),
        "given": (_STAR, "Dato ", "Data ", "Dati ", "Date "),
        "when": (_STAR, "Quando "),
        "then": (_STAR, "Allora "),
        "and_": (_STAR, "E "),
        "but": (_STAR, "Ma "),
    },
    "nl": {
        "name": "Dutch",
        "native": "Nederlands",
        "feature": ("Functionaliteit",),
        "background": ("Achtergrond",),
        "rule": ("Regel",),
        "scenario": ("Voorbeeld", "Scenario"),
        "scenario_outline": ("Abstract Scenario",),
        "examples": ("Voorbeelden",),
        "given": (_STAR, "Gegeven ", "Stel "),
        "when": (_STAR, "Als ", "Wanneer "),
        "then": (_STAR, "Dan "),
        "and_": (_STAR, "En "),
        "but": (_STAR, "Maar "),
    },
    "pt": {
        "name": "Portuguese",
        "native": "português",
        "feature": ("Funcionalidade", "Característica", "Caracteristica"),
        "background": ("Contexto", "Cenário de Fundo", "Cenario de Fundo", "Fundo"),
        "rule": ("Regra",),
        "scenario": ("Exemplo", "Cenário", "Cenario"),
        "scenario_outline": (
            "Esquema do Cenário",
            "Esquema do Cenario",
            "Delineação do Cenário",
            "Delineacao do Cenario",
        ),
        "examples": ("Exemplos", "Cenários", "Cenarios"),
        "given": (_STAR, "Dado ", "Dada ", "Dados ", "Dadas "),
        "when": (_STAR, "Quando "),
        "then": (_STAR, "Então ", "Entao "),
        "and_": (_STAR, "E "),
        "but": (_STAR, "Mas "),
    },
    "ru": {
        "name": "Russian",
        "native": "русский",
        "feature": ("Функция", "Функциональность", "Функционал", "Свойство", "Фича"),
        "background": ("Предыстория", "Контекст"),
        "rule": ("Правило",),
        "scenario": ("Пример", "Сценарий"),
        "scenario_outline": ("Структура сценария", "Шаблон сценария"),
        "examples": ("Примеры",),
        "given": (_STAR, "Допустим ", "Дано ", "Пусть "),
        "when": (_STAR, "Когда ", "Если "),
        "then": (_STAR, "То ", "Затем ", "Тогда "),
        "and_": (_STAR, "И ", "К тому же ", "Также "),
        "but": (_STAR, "Но ", "А ", "Иначе "),
    },
    "ja": {
        "name": "Japanese",
        "native": "日本語",
        "feature": ("フィーチャ", "機能"),
        "background": ("背景",),
        "rule": ("ルール",),
        "scenario": ("シナリオ",),
        "scenario_outline": ("シナリオアウトライン", "シナリオテンプレート", "テンプレ", "シナリオテンプレ"),
        "examples": ("例", "サンプル"),
        "given": (_STAR, "前提"),
        "when": (_STAR, "もし"),
        "then": (_STAR, "ならば"),
        "and_": (_STAR, "且つ", "かつ"),
        "but": (_STAR, "然し", "しかし", "但し", "ただし"),
    },
}

DIALECTS: dict[str, DialectEntry] = {
    code: DialectEntry(code=code, **fields)  # type: ignore[arg-type]
    for code, fields in _DIALECTS.items()
}


def available_languages() -> list[str]:
    """Return the language tags the table knows, sorted."""
    return sorted(DIALECTS)


def keywords_for(language: str) -> DialectEntry:
    """Look up a dialect, falling back to English for unknown tags.

    An unrecognized tag must not abort tokenization of otherwise valid
    Gherkin, so this never raises.
    """
    entry = DIALECTS.get(language)
    if entry is None:
        logger.warning(f"Unknown Gherkin language {language!r}, using {DEFAULT_LANGUAGE!r}")
        return DIALECTS[DEFAULT_LANGUAGE]
    return entry
