"""Best-effort parser for free-text meal descriptions.

Meal fields are typed by hand ("Arroz 100g, Frango grelhado 80g", "Sopa de
legumes e pão"), so the parser never fails: fragments it cannot read are
passed through with a default portion and simply may not resolve later.
"""

import re

from menu_planner.domain.nutrition import ParsedIngredient
from menu_planner.services.text import normalize_text

DEFAULT_PORTION_G = 50.0

# Standard child portions used when the text gives no quantity.
_PORTION_CATEGORIES: tuple[tuple[float, tuple[str, ...]], ...] = (
    (
        60.0,
        ("arroz", "macarrao", "massa", "espaguete", "cuscuz", "polenta", "cereal"),
    ),
    (50.0, ("feijao", "lentilha", "grao de bico", "ervilha")),
    (
        50.0,
        (
            "carne",
            "frango",
            "peixe",
            "ovo",
            "file",
            "patinho",
            "tilapia",
            "sardinha",
            "atum",
            "figado",
        ),
    ),
    (
        40.0,
        (
            "cenoura",
            "batata",
            "abobora",
            "abobrinha",
            "chuchu",
            "beterraba",
            "brocolis",
            "couve",
            "espinafre",
            "alface",
            "tomate",
            "pepino",
            "vagem",
            "mandioquinha",
            "inhame",
            "repolho",
            "legume",
            "salada",
        ),
    ),
    (
        80.0,
        (
            "banana",
            "maca",
            "mamao",
            "pera",
            "laranja",
            "manga",
            "melancia",
            "melao",
            "uva",
            "abacate",
            "goiaba",
            "morango",
            "kiwi",
            "abacaxi",
            "fruta",
        ),
    ),
    (150.0, ("leite", "iogurte", "vitamina", "formula", "mingau")),
    (30.0, ("pao", "biscoito", "bolacha", "torrada", "bolo")),
    (10.0, ("manteiga", "requeijao", "margarina")),
    (150.0, ("sopa", "sopinha", "caldo", "creme")),
)

_UNIT_ALIASES = {
    "g": "g",
    "grama": "g",
    "gramas": "g",
    "kg": "kg",
    "quilo": "kg",
    "quilos": "kg",
    "mg": "mg",
    "ml": "ml",
    "l": "l",
    "litro": "l",
    "litros": "l",
    "un": "un",
    "unidade": "un",
    "unidades": "un",
}

_GRAMS_PER_UNIT = {"g": 1.0, "kg": 1000.0, "mg": 0.001, "ml": 1.0, "l": 1000.0}

# A comma between two digits is a decimal separator, not a list separator.
_SPLIT_RE = re.compile(
    r"(?<!\d),|,(?!\d)|[;+/\r\n]|\s+e\s+|\s+and\s+", re.IGNORECASE
)
_QTY = r"(?P<qty>\d+(?:[.,]\d+)?)"
_UNIT = r"(?P<unit>gramas?|quilos?|litros?|unidades?|kg|mg|ml|un|g|l)\b"
_LEADING_RE = re.compile(
    rf"^\(?\s*{_QTY}\s*(?:{_UNIT})?\s*\)?\s*(?:de\s+|of\s+)?(?P<name>.*)$",
    re.IGNORECASE,
)
_TRAILING_RE = re.compile(
    rf"^(?P<name>.*?)\s*[(:\-]?\s*{_QTY}\s*(?:{_UNIT})?\s*\)?$",
    re.IGNORECASE,
)
_LETTER_RE = re.compile(r"[^\W\d_]")


def parse_meal_text(text: str | None) -> list[ParsedIngredient]:
    """Split a meal description into ``(name, quantity, unit)`` mentions."""
    if not text or not text.strip():
        return []
    ingredients: list[ParsedIngredient] = []
    for fragment in _SPLIT_RE.split(text):
        parsed = parse_fragment(fragment)
        if parsed is not None:
            ingredients.append(parsed)
    return ingredients


def parse_fragment(fragment: str) -> ParsedIngredient | None:
    """Parse one fragment; return None when it names nothing."""
    cleaned = " ".join(fragment.split()).strip(" .-")
    if not _LETTER_RE.search(cleaned):
        return None

    match = _LEADING_RE.match(cleaned) or _TRAILING_RE.match(cleaned)
    if match is None:
        name = _clean_name(cleaned)
        portion = default_portion(name)
        return ParsedIngredient(name=name, quantity=portion, unit="g", grams=portion)

    name = _clean_name(match.group("name"))
    if not _LETTER_RE.search(name):
        return None
    quantity = float(match.group("qty").replace(",", "."))
    raw_unit = match.group("unit")
    unit = _UNIT_ALIASES[raw_unit.lower()] if raw_unit else "un"
    return ParsedIngredient(
        name=name,
        quantity=quantity,
        unit=unit,
        grams=to_grams(name, quantity, unit),
    )


def to_grams(name: str, quantity: float, unit: str) -> float:
    """Convert a parsed quantity to grams (ml counts as grams)."""
    if unit == "un":
        return quantity * default_portion(name)
    return quantity * _GRAMS_PER_UNIT.get(unit, 1.0)


def default_portion(name: str) -> float:
    """Return the standard child portion for a food name.

    The category whose keyword appears earliest in the name wins, so
    "vitamina de banana" is a drink and "banana com aveia" is a fruit.
    """
    normalized = normalize_text(name)
    best: tuple[int, int, float] | None = None
    for portion, keywords in _PORTION_CATEGORIES:
        for keyword in keywords:
            match = re.search(rf"\b{re.escape(keyword)}(?:s|es)?\b", normalized)
            if match is None:
                continue
            candidate = (match.start(), -len(keyword), portion)
            if best is None or candidate < best:
                best = candidate
    return best[2] if best else DEFAULT_PORTION_G


def _clean_name(name: str) -> str:
    return name.strip(" .:-()")
