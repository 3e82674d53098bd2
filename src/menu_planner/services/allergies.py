"""Keyword cross-check of meal text against children's allergies.

This is a best-effort substring match, not an allergen ontology: false
positives ("mel" inside "melancia") and misses are expected.
"""

import re
from dataclasses import dataclass
from typing import Protocol

from menu_planner.domain.allergies import AllergyConflict, ChildAllergyRecord
from menu_planner.services.text import normalize_text

ALLERGEN_KEYWORDS: dict[str, tuple[str, ...]] = {
    "leite": (
        "leite",
        "queijo",
        "iogurte",
        "manteiga",
        "nata",
        "creme de leite",
        "lactose",
        "whey",
    ),
    "ovo": ("ovo", "ovos", "gema", "clara", "maionese"),
    "gluten": (
        "trigo",
        "pao",
        "macarrao",
        "biscoito",
        "bolo",
        "farinha",
        "gluten",
        "aveia",
    ),
    "amendoim": ("amendoim", "pasta de amendoim"),
    "castanhas": ("castanha", "nozes", "amendoas", "avela", "pistache"),
    "soja": ("soja", "tofu", "edamame", "molho shoyu"),
    "peixe": ("peixe", "atum", "sardinha", "salmao", "bacalhau", "tilapia"),
    "frutos do mar": ("camarao", "lagosta", "caranguejo", "marisco", "ostra", "lula"),
    "morango": ("morango",),
    "kiwi": ("kiwi",),
    "abacaxi": ("abacaxi",),
    "mel": ("mel",),
}

_STOP_WORDS = frozenset(
    {
        "a",
        "ao",
        "as",
        "o",
        "os",
        "e",
        "de",
        "da",
        "do",
        "das",
        "dos",
        "com",
        "sem",
        "nao",
        "tem",
        "por",
        "em",
        "alergia",
        "alergias",
        "alergico",
        "alergica",
        "intolerancia",
        "intolerante",
        "leve",
        "grave",
        "nenhuma",
    }
)
_TERM_SPLIT_RE = re.compile(r"[,;/\n]|\s+e\s+|\s+")
_MIN_TERM_LENGTH = 3


class ChildrenRepository(Protocol):
    """Persistence interface for the allergy roster."""

    def list_allergies(self) -> list[ChildAllergyRecord]:
        """Return children with a non-empty allergy description."""


def allergy_terms(allergies: str) -> list[str]:
    """Split a free-text allergy description into normalised terms."""
    normalized = normalize_text(allergies)
    terms = []
    for term in _TERM_SPLIT_RE.split(normalized):
        cleaned = term.strip(" .()-")
        if len(cleaned) < _MIN_TERM_LENGTH or cleaned in _STOP_WORDS:
            continue
        if cleaned not in terms:
            terms.append(cleaned)
    return terms


def check_allergies(
    meal_text: str, roster: list[ChildAllergyRecord]
) -> list[AllergyConflict]:
    """Return one conflict per (child, allergen) found in the meal text."""
    meal = normalize_text(meal_text or "")
    if not meal:
        return []
    conflicts: list[AllergyConflict] = []
    for child in roster:
        if not child.allergies or not child.allergies.strip():
            continue
        declared = normalize_text(child.allergies)
        for allergen in _matching_allergens(declared, meal):
            conflict = AllergyConflict(child_name=child.child_name, allergen=allergen)
            if conflict not in conflicts:
                conflicts.append(conflict)
    return conflicts


def flagged_children(meal_text: str, roster: list[ChildAllergyRecord]) -> list[str]:
    """Return the names of children with at least one conflict, in roster order."""
    names: list[str] = []
    for conflict in check_allergies(meal_text, roster):
        if conflict.child_name not in names:
            names.append(conflict.child_name)
    return names


def group_by_allergen(conflicts: list[AllergyConflict]) -> dict[str, list[str]]:
    """Group conflicting children under each allergen."""
    grouped: dict[str, list[str]] = {}
    for conflict in conflicts:
        children = grouped.setdefault(conflict.allergen, [])
        if conflict.child_name not in children:
            children.append(conflict.child_name)
    return grouped


def _matching_allergens(declared: str, meal: str) -> list[str]:
    matches: list[str] = []
    for category, keywords in ALLERGEN_KEYWORDS.items():
        is_allergic = category in declared or any(kw in declared for kw in keywords)
        if is_allergic and any(kw in meal for kw in keywords):
            matches.append(category)
    covered = {kw for category in matches for kw in ALLERGEN_KEYWORDS[category]}
    # Words of a declared category name ("mar" in "frutos do mar") are not terms.
    covered.update(
        word
        for category in ALLERGEN_KEYWORDS
        if category in declared
        for word in category.split()
    )
    for term in allergy_terms(declared):
        if term in covered or term in matches:
            continue
        if term in meal:
            matches.append(term)
    return matches


@dataclass
class AllergyService:
    """Loads the allergy roster and checks meal text against it."""

    repository: ChildrenRepository

    def roster(self) -> list[ChildAllergyRecord]:
        """Return the children whose allergies should be checked."""
        return self.repository.list_allergies()
