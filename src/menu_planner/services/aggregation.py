"""Day and week nutrition aggregation for a weekly menu."""

from collections.abc import Mapping
from datetime import date, timedelta

from menu_planner.domain.menus import DaySummary, NutrientAdequacy, WeekOverview
from menu_planner.domain.nutrition import NUTRIENT_FIELDS, NutritionTotals
from menu_planner.meal_slots import (
    WEEKDAY_NAMES,
    WEEKDAYS,
    MealSlot,
    MenuType,
    slots_for,
)

SlotEntries = Mapping[tuple[int, MealSlot], NutritionTotals | None]

ADEQUATE_LOW = 0.9
ADEQUATE_HIGH = 1.1
WARNING_LOW = 0.7

# PNAE reference values (70% of daily needs, full-time attendance).
PNAE_TARGETS: dict[MenuType, NutritionTotals] = {
    MenuType.INFANT_0_6: NutritionTotals(
        energy=500,
        protein=9,
        lipid=30,
        carbohydrate=60,
        fiber=0,
        calcium=210,
        iron=0.27,
        sodium=100,
        vitamin_c=40,
        vitamin_a=400,
    ),
    MenuType.INFANT_6_24: NutritionTotals(
        energy=700,
        protein=11,
        lipid=30,
        carbohydrate=95,
        fiber=5,
        calcium=260,
        iron=11,
        sodium=300,
        vitamin_c=50,
        vitamin_a=500,
    ),
    MenuType.PRESCHOOL: NutritionTotals(
        energy=1200,
        protein=19,
        lipid=40,
        carbohydrate=180,
        fiber=25,
        calcium=800,
        iron=10,
        sodium=1200,
        vitamin_c=25,
        vitamin_a=400,
    ),
}


def monday_of(day: date) -> date:
    """Return the Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def day_total(
    entries: SlotEntries, day_of_week: int, menu_type: MenuType
) -> NutritionTotals | None:
    """Sum the present slot entries of a day; None when every slot is absent."""
    total: NutritionTotals | None = None
    for slot in slots_for(menu_type):
        meal = entries.get((day_of_week, slot))
        if meal is None:
            continue
        total = meal if total is None else total + meal
    return total


def week_summary(
    entries: SlotEntries, week_start: date, menu_type: MenuType
) -> list[DaySummary]:
    """Return one entry per weekday, Monday to Friday, without summing days."""
    monday = monday_of(week_start)
    return [
        DaySummary(
            day_of_week=day,
            day_name=WEEKDAY_NAMES[day - 1],
            date=monday + timedelta(days=day - 1),
            totals=day_total(entries, day, menu_type),
        )
        for day in WEEKDAYS
    ]


def week_overview(
    entries: SlotEntries, week_start: date, menu_type: MenuType
) -> WeekOverview:
    """Return the weekly summary with averages over the days that have data."""
    days = week_summary(entries, week_start, menu_type)
    present = [day.totals for day in days if day.totals is not None]
    averages: NutritionTotals | None = None
    if present:
        total = present[0]
        for totals in present[1:]:
            total = total + totals
        averages = total.scaled(1 / len(present))
    return WeekOverview(
        week_start=monday_of(week_start),
        menu_type=menu_type,
        days=days,
        averages=averages,
        adequacy=adequacy(averages, PNAE_TARGETS[menu_type]) if averages else [],
    )


def adequacy(
    averages: NutritionTotals, targets: NutritionTotals
) -> list[NutrientAdequacy]:
    """Compare average intake with reference targets, skipping zero targets."""
    results: list[NutrientAdequacy] = []
    for nutrient in NUTRIENT_FIELDS:
        target = getattr(targets, nutrient)
        if target <= 0:
            continue
        average = getattr(averages, nutrient)
        ratio = average / target
        results.append(
            NutrientAdequacy(
                nutrient=nutrient,
                average=average,
                target=target,
                percent=ratio * 100,
                status=_status(ratio),
            )
        )
    return results


def _status(ratio: float) -> str:
    if ADEQUATE_LOW <= ratio <= ADEQUATE_HIGH:
        return "ok"
    if ratio >= WARNING_LOW:
        return "warning"
    return "low"
