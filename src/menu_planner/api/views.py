"""JSON views of editing sessions and nutrition results."""

from menu_planner.domain.menus import MenuItem, WeekOverview
from menu_planner.domain.nutrition import MealNutrition, NutritionTotals
from menu_planner.meal_slots import WEEKDAY_NAMES, slots_for
from menu_planner.services.allergies import group_by_allergen
from menu_planner.services.menus import MenuEditingSession


def totals_view(totals: NutritionTotals | None) -> dict[str, float] | None:
    if totals is None:
        return None
    return {name: round(value, 2) for name, value in totals.as_dict().items()}


def meal_view(meal: MealNutrition) -> dict[str, object]:
    """Return the per-ingredient breakdown of one meal."""
    return {
        "items": [
            {
                "name": item.ingredient.name,
                "quantity": item.ingredient.quantity,
                "unit": item.ingredient.unit,
                "grams": item.ingredient.grams,
                "food": item.food.description if item.food else None,
                "resolved": item.resolved,
                "nutrition": totals_view(item.contribution) if item.resolved else None,
            }
            for item in meal.items
        ],
        "totals": totals_view(meal.totals),
    }


def item_view(item: MenuItem) -> dict[str, object]:
    slots = {}
    for slot in slots_for(item.menu_type):
        slots[slot.field] = {
            "label": slot.value.label,
            "text": item.meal_text(slot),
            "time": getattr(item, slot.value.time_field),
            "quantity": getattr(item, slot.value.qty_field),
        }
    return {
        "id": str(item.id) if item.id else None,
        "day_of_week": item.day_of_week,
        "day_name": WEEKDAY_NAMES[item.day_of_week - 1],
        "slots": slots,
        "notes": item.notes,
    }


def overview_view(overview: WeekOverview) -> dict[str, object]:
    return {
        "days_with_data": overview.days_with_data,
        "averages": totals_view(overview.averages),
        "adequacy": [
            {
                "nutrient": entry.nutrient,
                "average": round(entry.average, 2),
                "target": entry.target,
                "percent": round(entry.percent, 1),
                "status": entry.status,
            }
            for entry in overview.adequacy
        ],
    }


def session_view(session: MenuEditingSession) -> dict[str, object]:
    """Return the full editing view of a week."""
    return {
        "week_start": session.week_start.isoformat(),
        "menu_type": session.menu_type.value,
        "items": [item_view(session.items[day]) for day in sorted(session.items)],
        "summary": [
            {
                "day_of_week": day.day_of_week,
                "day_name": day.day_name,
                "date": day.date.isoformat(),
                "totals": totals_view(day.totals),
            }
            for day in session.week_summary()
        ],
        "overview": overview_view(session.week_overview()),
        "allergies": {
            str(day): group_by_allergen(conflicts)
            for day, conflicts in session.week_allergy_conflicts().items()
            if conflicts
        },
    }


def export_view(session: MenuEditingSession) -> dict[str, object]:
    """Return the printable week: meal texts and nutrition per day."""
    days = []
    for summary in session.week_summary():
        item = session.item(summary.day_of_week)
        days.append(
            {
                "day_name": summary.day_name,
                "date": summary.date.isoformat(),
                "meals": [
                    {
                        "label": slot.value.label,
                        "time": getattr(item, slot.value.time_field)
                        or slot.default_time(session.menu_type),
                        "quantity": getattr(item, slot.value.qty_field),
                        "text": item.meal_text(slot),
                        "nutrition": totals_view(
                            session.meals[(summary.day_of_week, slot)].totals
                        ),
                    }
                    for slot in slots_for(session.menu_type)
                ],
                "notes": item.notes,
                "totals": totals_view(summary.totals),
            }
        )
    return {
        "week_start": session.week_start.isoformat(),
        "menu_type": session.menu_type.value,
        "days": days,
        "averages": totals_view(session.week_overview().averages),
    }
