"""Tests for the weekly menu editing session."""

import asyncio
from datetime import date

import pytest

from menu_planner.domain.errors import (
    MenuSaveError,
    NoPreviousMenuError,
    UnknownMenuFieldError,
)
from menu_planner.domain.menus import MenuItem
from menu_planner.domain.suggestions import DaySuggestion, SlotSuggestion
from menu_planner.meal_slots import MealSlot, MenuType
from menu_planner.services.menus import MenuPlanningService
from tests.conftest import InMemoryWeeklyMenuRepository

WEEK = date(2025, 3, 10)


def _open(service: MenuPlanningService, menu_type=MenuType.PRESCHOOL):
    return asyncio.run(service.open_session(date(2025, 3, 12), menu_type))


def test_open_session_fills_missing_days(
    menu_service: MenuPlanningService,
    menu_repository: InMemoryWeeklyMenuRepository,
) -> None:
    saved = menu_repository.add(
        MenuItem(
            week_start=WEEK,
            day_of_week=2,
            menu_type=MenuType.PRESCHOOL,
            lunch="Arroz 100g",
        )
    )

    session = _open(menu_service)

    assert session.week_start == WEEK
    assert sorted(session.items) == [1, 2, 3, 4, 5]
    assert session.item(2).id == saved.id
    assert session.item(1).id is None
    assert session.day_total(1) is None
    assert session.day_total(2).energy == pytest.approx(128)
    assert [c.child_name for c in session.roster] == ["Ana"]


def test_update_field_recomputes_slot(menu_service: MenuPlanningService) -> None:
    session = _open(menu_service)

    session.update_field(1, "lunch", "Arroz 100g, Frango grelhado 80g")
    session.update_field(1, "lunch_time", "11:45")

    assert session.item(1).lunch_time == "11:45"
    assert session.meals[(1, MealSlot.LUNCH)].totals.energy == pytest.approx(255.2)
    assert session.day_total(1).energy == pytest.approx(255.2)

    session.update_field(1, "lunch", "")

    assert session.day_total(1) is None


def test_update_field_rejects_unknown_fields(menu_service: MenuPlanningService) -> None:
    session = _open(menu_service)

    with pytest.raises(UnknownMenuFieldError):
        session.update_field(1, "dessert", "Pudim")
    with pytest.raises(UnknownMenuFieldError):
        session.update_field(1, "bottle", "Leite 150ml")
    with pytest.raises(ValueError):
        session.update_field(6, "lunch", "Arroz")


def test_infant_session_accepts_bottle(menu_service: MenuPlanningService) -> None:
    session = _open(menu_service, MenuType.INFANT_6_24)

    session.update_field(1, "bottle", "Leite 150ml")

    assert session.day_total(1).calcium == pytest.approx(123 * 1.5)


def test_week_overview_and_allergy_conflicts(
    menu_service: MenuPlanningService,
) -> None:
    session = _open(menu_service)
    session.update_field(3, "snack", "Pasta de amendoim 20g")

    overview = session.week_overview()
    conflicts = session.week_allergy_conflicts()

    assert overview.days_with_data == 1
    assert [c.allergen for c in conflicts[3]] == ["amendoim"]
    assert conflicts[1] == []


def test_save_upserts_filled_days_and_skips_empty_new_days(
    menu_service: MenuPlanningService,
    menu_repository: InMemoryWeeklyMenuRepository,
) -> None:
    session = _open(menu_service)
    session.update_field(1, "lunch", "Arroz 100g")
    session.update_field(4, "notes", "Feriado municipal")

    batch = menu_service.save(session)

    assert [item.day_of_week for item in batch.upserts] == [1, 4]
    assert batch.deletes == []
    assert session.item(1).id is not None
    assert len(menu_repository.rows) == 2


def test_save_deletes_cleared_days(
    menu_service: MenuPlanningService,
    menu_repository: InMemoryWeeklyMenuRepository,
) -> None:
    saved = menu_repository.add(
        MenuItem(
            week_start=WEEK, day_of_week=2, menu_type=MenuType.PRESCHOOL, lunch="Arroz"
        )
    )
    session = _open(menu_service)
    session.update_field(2, "lunch", "")

    batch = menu_service.save(session)

    assert batch.deletes == [saved.id]
    assert menu_repository.rows == {}
    assert session.item(2).id is None


def test_save_without_changes_writes_nothing(
    menu_service: MenuPlanningService,
    menu_repository: InMemoryWeeklyMenuRepository,
) -> None:
    session = _open(menu_service)

    batch = menu_service.save(session)

    assert batch.is_empty()
    assert menu_repository.batches == []


def test_failed_save_writes_nothing(
    menu_service: MenuPlanningService,
    menu_repository: InMemoryWeeklyMenuRepository,
) -> None:
    session = _open(menu_service)
    session.update_field(1, "lunch", "Arroz 100g")
    session.update_field(2, "lunch", "Frango 80g")
    menu_repository.fail = True

    with pytest.raises(MenuSaveError):
        menu_service.save(session)

    assert menu_repository.rows == {}
    assert session.item(1).id is None


def test_copy_previous_week_keeps_current_ids(
    menu_service: MenuPlanningService,
    menu_repository: InMemoryWeeklyMenuRepository,
) -> None:
    menu_repository.add(
        MenuItem(
            week_start=date(2025, 3, 3),
            day_of_week=2,
            menu_type=MenuType.PRESCHOOL,
            lunch="Frango grelhado 80g",
            lunch_time="11:30",
            notes="Sem sal",
        )
    )
    current = menu_repository.add(
        MenuItem(
            week_start=WEEK, day_of_week=2, menu_type=MenuType.PRESCHOOL, lunch="Arroz"
        )
    )
    session = _open(menu_service)

    menu_service.copy_previous_week(session)

    item = session.item(2)
    assert item.id == current.id
    assert item.lunch == "Frango grelhado 80g"
    assert item.notes == "Sem sal"
    assert item.week_start == WEEK
    assert session.day_total(2).energy == pytest.approx(127.2)
    assert menu_repository.batches == []


def test_copy_previous_week_requires_saved_menu(
    menu_service: MenuPlanningService,
) -> None:
    session = _open(menu_service)

    with pytest.raises(NoPreviousMenuError):
        menu_service.copy_previous_week(session)


def test_apply_suggestion_skips_slots_not_offered(
    menu_service: MenuPlanningService,
) -> None:
    session = _open(menu_service)
    suggestion = DaySuggestion(
        slots=[
            SlotSuggestion(
                slot="lunch", text="Arroz 100g", quantity="150g", time="11:30"
            ),
            SlotSuggestion(
                slot="bottle", text="Leite 150ml", quantity="150ml", time="13:00"
            ),
        ]
    )

    session.apply_suggestion(5, suggestion)

    item = session.item(5)
    assert item.lunch == "Arroz 100g"
    assert item.lunch_qty == "150g"
    assert item.bottle == ""
    assert session.day_total(5).energy == pytest.approx(128)
