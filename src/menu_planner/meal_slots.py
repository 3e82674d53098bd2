"""Meal slot and menu type configuration."""

from dataclasses import dataclass
from enum import Enum


class MenuType(str, Enum):
    """Age/stage categories that govern which meal slots apply."""

    INFANT_0_6 = "bercario_0_6"
    INFANT_6_24 = "bercario_6_24"
    PRESCHOOL = "maternal"

    @property
    def is_infant(self) -> bool:
        """Return True for the nursery (bercario) menu types."""
        return self is not MenuType.PRESCHOOL


@dataclass(frozen=True)
class MealSlotDefinition:
    """Declarative meal slot definition."""

    field: str
    label: str
    default_time: str
    infant_only: bool = False
    preschool_time: str | None = None

    @property
    def time_field(self) -> str:
        return f"{self.field}_time"

    @property
    def qty_field(self) -> str:
        return f"{self.field}_qty"


class MealSlot(Enum):
    """Enum of meal slots in daily order (single source of truth)."""

    BREAKFAST = MealSlotDefinition(
        "breakfast", "Café da manhã", "07:30", preschool_time="08:00"
    )
    MORNING_SNACK = MealSlotDefinition("morning_snack", "Lanche da manhã", "09:30")
    LUNCH = MealSlotDefinition("lunch", "Almoço", "11:00", preschool_time="11:30")
    BOTTLE = MealSlotDefinition("bottle", "Mamadeira", "13:00", infant_only=True)
    SNACK = MealSlotDefinition(
        "snack", "Lanche da tarde", "15:00", preschool_time="15:30"
    )
    PRE_DINNER = MealSlotDefinition(
        "pre_dinner", "Pré-jantar", "16:30", infant_only=True
    )
    DINNER = MealSlotDefinition("dinner", "Jantar", "17:30", preschool_time="18:00")

    @property
    def field(self) -> str:
        return self.value.field

    def default_time(self, menu_type: MenuType) -> str:
        """Return the usual serving time of the slot for a menu type."""
        if menu_type is MenuType.PRESCHOOL and self.value.preschool_time:
            return self.value.preschool_time
        return self.value.default_time

    @classmethod
    def from_field(cls, field: str) -> "MealSlot | None":
        """Return the slot whose text field is ``field``, if any."""
        for slot in cls:
            if slot.value.field == field:
                return slot
        return None


WEEKDAY_NAMES: tuple[str, ...] = (
    "Segunda-feira",
    "Terça-feira",
    "Quarta-feira",
    "Quinta-feira",
    "Sexta-feira",
)

WEEKDAYS: tuple[int, ...] = (1, 2, 3, 4, 5)


def slots_for(menu_type: MenuType) -> list[MealSlot]:
    """Return the meal slots offered for a menu type, in daily order."""
    return [
        slot for slot in MealSlot if menu_type.is_infant or not slot.value.infant_only
    ]


def slot_fields() -> list[str]:
    """Return the text field names of every meal slot."""
    return [slot.field for slot in MealSlot]
