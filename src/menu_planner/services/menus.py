"""Weekly menu editing session and planning service."""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Protocol
from uuid import UUID

from menu_planner.domain.allergies import AllergyConflict, ChildAllergyRecord
from menu_planner.domain.errors import (
    MenuSaveError,
    NoPreviousMenuError,
    UnknownMenuFieldError,
)
from menu_planner.domain.menus import (
    EDITABLE_FIELDS,
    DaySummary,
    MenuItem,
    MenuSaveBatch,
    WeekOverview,
)
from menu_planner.domain.nutrition import MealNutrition, NutritionTotals
from menu_planner.domain.suggestions import DaySuggestion
from menu_planner.meal_slots import WEEKDAYS, MealSlot, MenuType, slots_for
from menu_planner.services import aggregation
from menu_planner.services.allergies import AllergyService, check_allergies
from menu_planner.services.calculator import calculate_meal
from menu_planner.services.fact_table import FactTable, FactTableService
from menu_planner.services.parsing import parse_meal_text

_logger = logging.getLogger(__name__)


class WeeklyMenuRepository(Protocol):
    """Persistence interface for weekly menu rows."""

    def list_week(self, week_start: date, menu_type: MenuType) -> list[MenuItem]:
        """Return the saved items of a week for a menu type."""

    def save_batch(self, batch: MenuSaveBatch) -> list[MenuItem]:
        """Apply every upsert and delete atomically; return the saved rows."""


@dataclass
class MenuEditingSession:
    """In-memory view model for editing one week of one menu type."""

    week_start: date
    menu_type: MenuType
    items: dict[int, MenuItem]
    table: FactTable
    roster: list[ChildAllergyRecord] = field(default_factory=list)
    meals: dict[tuple[int, MealSlot], MealNutrition] = field(default_factory=dict)

    @property
    def entries(self) -> dict[tuple[int, MealSlot], NutritionTotals | None]:
        """Return the nutrition entry of every (day, slot)."""
        return {key: meal.totals for key, meal in self.meals.items()}

    def item(self, day_of_week: int) -> MenuItem:
        """Return the item of a weekday (1 = Monday)."""
        if day_of_week not in self.items:
            raise ValueError(f"day_of_week must be one of {WEEKDAYS}")
        return self.items[day_of_week]

    def update_field(self, day_of_week: int, field_name: str, value: str) -> None:
        """Set one field and recompute the affected meal slot."""
        if field_name not in EDITABLE_FIELDS:
            raise UnknownMenuFieldError(f"Unknown menu field: {field_name}")
        slot = _slot_of(field_name)
        if slot is not None and slot not in slots_for(self.menu_type):
            raise UnknownMenuFieldError(
                f"{slot.field} is not offered for menu type {self.menu_type.value}"
            )
        item = self.item(day_of_week)
        setattr(item, field_name, value or "")
        if slot is not None and field_name == slot.field:
            self._recompute_slot(day_of_week, slot)

    def recompute(self) -> None:
        """Rebuild every slot entry from the current meal text."""
        self.meals = {}
        for day in self.items:
            for slot in MealSlot:
                self._recompute_slot(day, slot)

    def day_total(self, day_of_week: int) -> NutritionTotals | None:
        return aggregation.day_total(self.entries, day_of_week, self.menu_type)

    def week_summary(self) -> list[DaySummary]:
        return aggregation.week_summary(self.entries, self.week_start, self.menu_type)

    def week_overview(self) -> WeekOverview:
        return aggregation.week_overview(self.entries, self.week_start, self.menu_type)

    def allergy_conflicts(self, day_of_week: int) -> list[AllergyConflict]:
        """Check the day's combined meal text against the allergy roster."""
        return check_allergies(self.item(day_of_week).combined_text(), self.roster)

    def week_allergy_conflicts(self) -> dict[int, list[AllergyConflict]]:
        return {day: self.allergy_conflicts(day) for day in sorted(self.items)}

    def apply_suggestion(self, day_of_week: int, suggestion: DaySuggestion) -> None:
        """Fill a day with a suggested menu, skipping slots not offered."""
        offered = slots_for(self.menu_type)
        for entry in suggestion.slots:
            slot = MealSlot.from_field(entry.slot)
            if slot is None or slot not in offered:
                continue
            self.update_field(day_of_week, slot.value.time_field, entry.time)
            self.update_field(day_of_week, slot.value.qty_field, entry.quantity)
            self.update_field(day_of_week, slot.field, entry.text)

    def copy_from(self, source: list[MenuItem]) -> None:
        """Copy another week's content into this session, keeping row ids."""
        for other in source:
            if other.day_of_week in self.items:
                self.items[other.day_of_week].copy_content_from(other)
        self.recompute()

    def build_save_batch(self) -> MenuSaveBatch:
        """Split items into upserts and deletes; empty new items are skipped."""
        upserts: list[MenuItem] = []
        deletes: list[UUID] = []
        for day in sorted(self.items):
            item = self.items[day]
            if item.is_empty():
                if item.id is not None:
                    deletes.append(item.id)
                continue
            upserts.append(item)
        return MenuSaveBatch(upserts=upserts, deletes=deletes)

    def mark_saved(self, batch: MenuSaveBatch, saved: list[MenuItem]) -> None:
        """Record the ids assigned by a successful save."""
        for item in self.items.values():
            if item.id in batch.deletes:
                item.id = None
        for row in saved:
            if row.day_of_week in self.items and row.id is not None:
                self.items[row.day_of_week].id = row.id

    def _recompute_slot(self, day_of_week: int, slot: MealSlot) -> None:
        text = self.items[day_of_week].meal_text(slot)
        self.meals[(day_of_week, slot)] = calculate_meal(
            parse_meal_text(text), self.table
        )


def _slot_of(field_name: str) -> MealSlot | None:
    for slot in MealSlot:
        if field_name in {
            slot.field,
            slot.value.time_field,
            slot.value.qty_field,
        }:
            return slot
    return None


@dataclass
class MenuPlanningService:
    """Loads, copies and saves weekly menu editing sessions."""

    repository: WeeklyMenuRepository
    fact_tables: FactTableService
    allergy_service: AllergyService

    async def open_session(
        self, week_start: date, menu_type: MenuType
    ) -> MenuEditingSession:
        """Load a week into a new session with nutrition computed."""
        monday = aggregation.monday_of(week_start)
        table = await self.fact_tables.load()
        saved = {
            item.day_of_week: item
            for item in self.repository.list_week(monday, menu_type)
        }
        items = {
            day: saved.get(day)
            or MenuItem(week_start=monday, day_of_week=day, menu_type=menu_type)
            for day in WEEKDAYS
        }
        session = MenuEditingSession(
            week_start=monday,
            menu_type=menu_type,
            items=items,
            table=table,
            roster=self.allergy_service.roster(),
        )
        session.recompute()
        return session

    def saved_week(self, week_start: date, menu_type: MenuType) -> list[MenuItem]:
        """Return the saved items of the week containing ``week_start``."""
        return self.repository.list_week(aggregation.monday_of(week_start), menu_type)

    def copy_previous_week(self, session: MenuEditingSession) -> None:
        """Copy last week's saved menu into the session without saving."""
        previous_start = session.week_start - timedelta(days=7)
        previous = self.repository.list_week(previous_start, session.menu_type)
        if not previous:
            raise NoPreviousMenuError(
                f"No saved menu for the week of {previous_start.isoformat()}"
            )
        session.copy_from(previous)

    def save(self, session: MenuEditingSession) -> MenuSaveBatch:
        """Persist the session as one all-or-nothing batch."""
        batch = session.build_save_batch()
        if batch.is_empty():
            return batch
        try:
            saved = self.repository.save_batch(batch)
        except Exception as exc:
            _logger.exception(
                "Failed to save menu week=%s type=%s",
                session.week_start.isoformat(),
                session.menu_type.value,
            )
            raise MenuSaveError("Failed to save weekly menu") from exc
        session.mark_saved(batch, saved)
        _logger.info(
            "Saved menu week=%s type=%s upserts=%s deletes=%s",
            session.week_start.isoformat(),
            session.menu_type.value,
            len(batch.upserts),
            len(batch.deletes),
        )
        return batch
