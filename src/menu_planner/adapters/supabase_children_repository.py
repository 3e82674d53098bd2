"""Supabase repository for the children allergy roster."""

from dataclasses import dataclass

from supabase import Client

from menu_planner.domain.allergies import ChildAllergyRecord
from menu_planner.services.allergies import ChildrenRepository


@dataclass
class SupabaseChildrenRepository(ChildrenRepository):
    """Supabase implementation for children allergies."""

    client: Client

    def list_allergies(self) -> list[ChildAllergyRecord]:
        """Return children with a non-empty allergy description."""
        response = (
            self.client.table("children")
            .select("full_name, allergies")
            .neq("allergies", "")
            .order("full_name", desc=False)
            .execute()
        )
        records = []
        for row in response.data or []:
            allergies = str(row.get("allergies") or "").strip()
            if not allergies:
                continue
            records.append(
                ChildAllergyRecord(
                    child_name=str(row.get("full_name", "")),
                    allergies=allergies,
                )
            )
        return records
