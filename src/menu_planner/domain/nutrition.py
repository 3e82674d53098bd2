"""Nutrition domain models."""

from dataclasses import asdict, dataclass, fields

NUTRIENT_FIELDS: tuple[str, ...] = (
    "energy",
    "protein",
    "lipid",
    "carbohydrate",
    "fiber",
    "calcium",
    "iron",
    "sodium",
    "vitamin_c",
    "vitamin_a",
)

NUTRIENT_UNITS: dict[str, str] = {
    "energy": "kcal",
    "protein": "g",
    "lipid": "g",
    "carbohydrate": "g",
    "fiber": "g",
    "calcium": "mg",
    "iron": "mg",
    "sodium": "mg",
    "vitamin_c": "mg",
    "vitamin_a": "µg",
}


@dataclass(frozen=True)
class NutritionTotals:
    """Aggregate of the ten tracked nutrients.

    Absent nutrition is modelled as ``None`` by callers, never as a zeroed
    record, so a present instance always means at least one food resolved.
    """

    energy: float = 0.0
    protein: float = 0.0
    lipid: float = 0.0
    carbohydrate: float = 0.0
    fiber: float = 0.0
    calcium: float = 0.0
    iron: float = 0.0
    sodium: float = 0.0
    vitamin_c: float = 0.0
    vitamin_a: float = 0.0

    def __post_init__(self) -> None:
        for item in fields(self):
            if getattr(self, item.name) < 0:
                raise ValueError(f"Nutrient {item.name} must be non-negative")

    def __add__(self, other: "NutritionTotals") -> "NutritionTotals":
        return NutritionTotals(
            **{
                name: getattr(self, name) + getattr(other, name)
                for name in NUTRIENT_FIELDS
            }
        )

    def scaled(self, factor: float) -> "NutritionTotals":
        """Return a copy with every nutrient multiplied by ``factor``."""
        if factor <= 0:
            return NutritionTotals()
        return NutritionTotals(
            **{name: getattr(self, name) * factor for name in NUTRIENT_FIELDS}
        )

    def as_dict(self) -> dict[str, float]:
        """Return the nutrients keyed by field name."""
        return asdict(self)


@dataclass(frozen=True)
class FoodFact:
    """A row of the nutrient fact table (values per ``base_qty`` grams)."""

    id: int
    description: str
    category: str
    nutrients: NutritionTotals
    base_qty: float = 100.0


@dataclass(frozen=True)
class ParsedIngredient:
    """Ingredient mention extracted from free meal text."""

    name: str
    quantity: float
    unit: str
    grams: float


@dataclass(frozen=True)
class IngredientNutrition:
    """Contribution of one parsed ingredient to a meal."""

    ingredient: ParsedIngredient
    food: FoodFact | None
    contribution: NutritionTotals

    @property
    def resolved(self) -> bool:
        """Return True when the ingredient matched the fact table."""
        return self.food is not None


@dataclass(frozen=True)
class MealNutrition:
    """Per-ingredient breakdown and totals for one meal slot."""

    items: list[IngredientNutrition]
    totals: NutritionTotals | None

    @property
    def unresolved(self) -> list[ParsedIngredient]:
        """Return the ingredients that did not match any food."""
        return [item.ingredient for item in self.items if not item.resolved]
