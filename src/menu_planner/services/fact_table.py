"""Nutrient fact table loading and food name matching."""

import logging
import re
from dataclasses import dataclass, field

from menu_planner.adapters.taco_client import TacoClient
from menu_planner.domain.errors import FactTableUnavailableError
from menu_planner.domain.nutrition import FoodFact, NutritionTotals
from menu_planner.services.cache import Cache
from menu_planner.services.text import normalize_text

_CACHE_KEY = "taco:foods"

# TACO column per tracked nutrient; values are per 100 g.
_TACO_COLUMNS = {
    "energy": "energy_kcal",
    "protein": "protein_g",
    "lipid": "lipid_g",
    "carbohydrate": "carbohydrate_g",
    "fiber": "fiber_g",
    "calcium": "calcium_mg",
    "iron": "iron_mg",
    "sodium": "sodium_mg",
    "vitamin_c": "vitaminC_mg",
    "vitamin_a": "rae_mcg",
}

_DESCRIPTION_SPLIT_RE = re.compile(r"[\s,]+")

_logger = logging.getLogger(__name__)


@dataclass
class FactTable:
    """In-memory nutrient fact table with fuzzy name lookup."""

    foods: list[FoodFact]
    _normalized: list[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._normalized = [normalize_text(food.description) for food in self.foods]

    def __len__(self) -> int:
        return len(self.foods)

    def lookup(self, name: str) -> FoodFact | None:
        """Return the best matching food for a name, if any."""
        query = normalize_text(name)
        if not query:
            return None
        for food, description in zip(self.foods, self._normalized, strict=True):
            if (
                description == query
                or description.startswith(f"{query},")
                or description.startswith(f"{query} ")
            ):
                return food
        ranked = self._rank(query)
        return ranked[0][1] if ranked else None

    def search(self, name: str, limit: int = 10) -> list[FoodFact]:
        """Return foods ranked by match score, best first."""
        query = normalize_text(name)
        if not query:
            return []
        return [food for _, food in self._rank(query)[:limit]]

    def _rank(self, query: str) -> list[tuple[int, FoodFact]]:
        query_words = [word for word in query.split() if len(word) > 2]
        main_word = query_words[0] if query_words else query
        scored: list[tuple[int, int, FoodFact]] = []
        for position, (food, description) in enumerate(
            zip(self.foods, self._normalized, strict=True)
        ):
            score = _score(description, query_words, main_word)
            if score > 0:
                scored.append((score, position, food))
        scored.sort(key=lambda entry: (-entry[0], entry[1]))
        return [(score, food) for score, _, food in scored]


def _score(description: str, query_words: list[str], main_word: str) -> int:
    words = [word for word in _DESCRIPTION_SPLIT_RE.split(description) if word]
    score = 0
    if words and words[0].startswith(main_word):
        score += 10
    for query_word in query_words:
        if query_word in words:
            score += 5
        elif any(word.startswith(query_word) for word in words):
            score += 3
    if score == 0 and main_word in description:
        score = 1
    return score


def parse_number(value: object) -> float:
    """Coerce a raw TACO cell to a non-negative float."""
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        cleaned = value.strip()
        if cleaned in {"", "NA", "Tr", "*"}:
            return 0.0
        try:
            number = float(cleaned.replace(",", "."))
        except ValueError:
            return 0.0
    else:
        return 0.0
    if number != number or number < 0:  # NaN or negative
        return 0.0
    return number


def parse_taco_rows(rows: list[dict[str, object]]) -> list[FoodFact]:
    """Convert raw TACO rows into food facts, skipping unusable rows."""
    foods: list[FoodFact] = []
    for row in rows:
        description = str(row.get("description") or "").strip()
        if not description:
            continue
        nutrients = NutritionTotals(
            **{
                nutrient: parse_number(row.get(column))
                for nutrient, column in _TACO_COLUMNS.items()
            }
        )
        foods.append(
            FoodFact(
                id=int(row.get("id") or 0),
                description=description,
                category=str(row.get("category") or ""),
                nutrients=nutrients,
            )
        )
    return foods


@dataclass
class FactTableService:
    """Loads the fact table once per TTL, falling back to the last copy."""

    client: TacoClient
    cache: Cache
    ttl_seconds: int = 3600

    async def load(self) -> FactTable:
        """Return the cached fact table, downloading it when expired."""
        cached = self.cache.get(_CACHE_KEY)
        if isinstance(cached, FactTable):
            return cached
        try:
            rows = await self.client.fetch_foods()
        except Exception as exc:
            stale = self.cache.get_stale(_CACHE_KEY)
            if isinstance(stale, FactTable):
                _logger.warning("TACO refresh failed, using cached copy: %s", exc)
                return stale
            raise FactTableUnavailableError("Nutrient fact table unavailable") from exc
        table = FactTable(parse_taco_rows(rows))
        self.cache.set(_CACHE_KEY, table, ttl_seconds=self.ttl_seconds)
        _logger.info("Loaded %s foods from TACO", len(table))
        return table
