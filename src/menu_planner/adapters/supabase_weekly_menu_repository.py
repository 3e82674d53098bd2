"""Supabase repository for weekly menus."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from menu_planner.domain.menus import EDITABLE_FIELDS, MenuItem, MenuSaveBatch
from menu_planner.meal_slots import MenuType
from menu_planner.services.menus import WeeklyMenuRepository

SAVE_BATCH_FUNCTION = "save_weekly_menu_batch"


@dataclass
class SupabaseWeeklyMenuRepository(WeeklyMenuRepository):
    """Supabase implementation for weekly menus."""

    client: Client

    def list_week(self, week_start: date, menu_type: MenuType) -> list[MenuItem]:
        """Return the saved items of a week for a menu type."""
        response = (
            self.client.table("weekly_menus")
            .select("*")
            .eq("week_start", week_start.isoformat())
            .eq("menu_type", menu_type.value)
            .order("day_of_week", desc=False)
            .execute()
        )
        return [_parse_item(row) for row in response.data or []]

    def save_batch(self, batch: MenuSaveBatch) -> list[MenuItem]:
        """Apply the batch through one database function (one transaction)."""
        response = self.client.rpc(
            SAVE_BATCH_FUNCTION,
            {
                "p_upserts": [_to_row(item) for item in batch.upserts],
                "p_deletes": [str(item_id) for item_id in batch.deletes],
            },
        ).execute()
        if batch.upserts and not response.data:
            raise RuntimeError("Failed to save weekly menu batch")
        return [_parse_item(row) for row in response.data or []]


def _to_row(item: MenuItem) -> dict[str, object]:
    row: dict[str, object] = {
        "id": str(item.id) if item.id else None,
        "week_start": item.week_start.isoformat(),
        "day_of_week": item.day_of_week,
        "menu_type": item.menu_type.value,
    }
    for name in sorted(EDITABLE_FIELDS):
        value = getattr(item, name)
        row[name] = value if value else None
    return row


def _parse_item(row: dict[str, object]) -> MenuItem:
    item = MenuItem(
        id=UUID(row["id"]) if row.get("id") else None,
        week_start=date.fromisoformat(str(row["week_start"])),
        day_of_week=int(row["day_of_week"]),
        menu_type=MenuType(row["menu_type"]),
    )
    for name in EDITABLE_FIELDS:
        setattr(item, name, str(row.get(name) or ""))
    return item
