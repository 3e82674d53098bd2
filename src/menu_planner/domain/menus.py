"""Domain models for weekly menus."""

from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

from menu_planner.domain.nutrition import NutritionTotals
from menu_planner.meal_slots import MealSlot, MenuType, slot_fields

EDITABLE_FIELDS: frozenset[str] = frozenset(
    [*slot_fields()]
    + [slot.value.time_field for slot in MealSlot]
    + [slot.value.qty_field for slot in MealSlot]
    + ["notes"]
)


@dataclass
class MenuItem:
    """One day of a weekly menu for a menu type."""

    week_start: date
    day_of_week: int
    menu_type: MenuType
    id: UUID | None = None
    breakfast: str = ""
    breakfast_time: str = ""
    breakfast_qty: str = ""
    morning_snack: str = ""
    morning_snack_time: str = ""
    morning_snack_qty: str = ""
    lunch: str = ""
    lunch_time: str = ""
    lunch_qty: str = ""
    bottle: str = ""
    bottle_time: str = ""
    bottle_qty: str = ""
    snack: str = ""
    snack_time: str = ""
    snack_qty: str = ""
    pre_dinner: str = ""
    pre_dinner_time: str = ""
    pre_dinner_qty: str = ""
    dinner: str = ""
    dinner_time: str = ""
    dinner_qty: str = ""
    notes: str = ""

    def meal_text(self, slot: MealSlot) -> str:
        """Return the free text of a meal slot."""
        return getattr(self, slot.field)

    def is_empty(self) -> bool:
        """Return True when no meal text and no notes are filled in."""
        if self.notes.strip():
            return False
        return not any(self.meal_text(slot).strip() for slot in MealSlot)

    def combined_text(self) -> str:
        """Return every meal text of the day joined for keyword checks."""
        return " ".join(
            text for slot in MealSlot if (text := self.meal_text(slot).strip())
        )

    def copy_content_from(self, other: "MenuItem") -> None:
        """Copy every editable field from another item."""
        for name in EDITABLE_FIELDS:
            setattr(self, name, getattr(other, name))


@dataclass(frozen=True)
class DaySummary:
    """Per-day nutrition entry of the weekly summary."""

    day_of_week: int
    day_name: str
    date: date
    totals: NutritionTotals | None


@dataclass(frozen=True)
class NutrientAdequacy:
    """Average intake of a nutrient compared to its reference target."""

    nutrient: str
    average: float
    target: float
    percent: float
    status: str


@dataclass(frozen=True)
class WeekOverview:
    """Weekly view: per-day breakdown plus averages over days with data."""

    week_start: date
    menu_type: MenuType
    days: list[DaySummary]
    averages: NutritionTotals | None
    adequacy: list[NutrientAdequacy] = field(default_factory=list)

    @property
    def days_with_data(self) -> int:
        return sum(1 for day in self.days if day.totals is not None)


@dataclass(frozen=True)
class MenuSaveBatch:
    """Rows to write in one atomic save."""

    upserts: list[MenuItem]
    deletes: list[UUID]

    def is_empty(self) -> bool:
        return not self.upserts and not self.deletes
