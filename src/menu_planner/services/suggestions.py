"""Day menu suggestions using LLMs."""

import logging
import random
from dataclasses import dataclass, field
from typing import Protocol

from menu_planner.domain.menus import MenuItem
from menu_planner.domain.suggestions import DaySuggestion, SlotSuggestion
from menu_planner.meal_slots import WEEKDAY_NAMES, MealSlot, MenuType, slots_for

SUGGESTION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "slots": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "slot": {"type": "string", "enum": [s.field for s in MealSlot]},
                    "text": {"type": "string"},
                    "quantity": {"type": "string"},
                    "time": {"type": "string"},
                },
                "required": ["slot", "text", "quantity", "time"],
                "additionalProperties": False,
            },
        }
    },
    "required": ["slots"],
    "additionalProperties": False,
}

MILK_OPTIONS: tuple[tuple[str, str], ...] = (
    ("Leite materno exclusivo", "sob demanda"),
    ("Fórmula infantil de partida", "120ml"),
    ("Leite materno", "100-150ml"),
    ("Leite materno ou fórmula", "120-180ml"),
)

SEASONAL_FOODS: tuple[str, ...] = (
    "abóbora",
    "batata doce",
    "cenoura",
    "chuchu",
    "mandioquinha",
    "beterraba",
    "abobrinha",
)

_AGE_RULES: dict[MenuType, str] = {
    MenuType.INFANT_6_24: (
        "Você é uma nutricionista brasileira especializada em alimentação de "
        "bebês de 6 meses a 2 anos. Sugira papinhas e purês, proteínas bem "
        "cozidas e desfiadas, frutas amassadas e mamadeira complementar. "
        "Evite mel, açúcar, sal e alimentos com risco de engasgo. "
        "Cada descrição deve ter no máximo 50 caracteres."
    ),
    MenuType.PRESCHOOL: (
        "Você é uma nutricionista brasileira especializada em alimentação "
        "escolar para crianças de 2 a 5 anos. Siga as recomendações do PNAE: "
        "arroz, feijão, proteínas variadas, legumes e frutas, com preparações "
        "variadas (grelhado, cozido, assado, refogado). Evite ultraprocessados "
        "e frituras. Cada descrição deve ter no máximo 60 caracteres."
    ),
}

_logger = logging.getLogger(__name__)


class SuggestionClient(Protocol):
    """Interface for structured LLM completions."""

    async def complete(
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured completion data."""


@dataclass
class SuggestionService:
    """Service that prepares menu prompts and validates results."""

    client: SuggestionClient
    model: str
    reasoning_effort: str | None
    store: bool
    rng: random.Random = field(default_factory=random.Random)

    async def suggest_day(
        self,
        menu_type: MenuType,
        day_of_week: int,
        previous: list[MenuItem] | None = None,
    ) -> DaySuggestion:
        """Suggest a full day menu for the slots offered to a menu type."""
        if menu_type is MenuType.INFANT_0_6:
            return self._milk_only_day()

        prompt = build_prompt(
            menu_type, day_of_week, previous or [], self.rng.choice(SEASONAL_FOODS)
        )
        raw = await self.client.complete(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            schema=SUGGESTION_SCHEMA,
            prompt=prompt,
        )
        suggestion = DaySuggestion.model_validate(raw)
        offered = {slot.field for slot in slots_for(menu_type)}
        kept = [entry for entry in suggestion.slots if entry.slot in offered]
        if len(kept) != len(suggestion.slots):
            _logger.info(
                "Dropped %s suggested slots not offered for %s",
                len(suggestion.slots) - len(kept),
                menu_type.value,
            )
        return DaySuggestion(slots=kept)

    def _milk_only_day(self) -> DaySuggestion:
        slots = []
        for slot in slots_for(MenuType.INFANT_0_6):
            text, quantity = self.rng.choice(MILK_OPTIONS)
            slots.append(
                SlotSuggestion(
                    slot=slot.field,
                    text=text,
                    quantity=quantity,
                    time=slot.default_time(MenuType.INFANT_0_6),
                )
            )
        return DaySuggestion(slots=slots)


def build_prompt(
    menu_type: MenuType,
    day_of_week: int,
    previous: list[MenuItem],
    seasonal_food: str,
) -> str:
    """Build the suggestion prompt for a day."""
    day_name = WEEKDAY_NAMES[day_of_week - 1] if 1 <= day_of_week <= 5 else ""
    slot_lines = "\n".join(
        f"- {slot.field} ({slot.value.label}), "
        f"horário sugerido {slot.default_time(menu_type)}"
        for slot in slots_for(menu_type)
    )
    lines = [
        _AGE_RULES[menu_type],
        f"Inclua ingredientes brasileiros e sazonais como {seasonal_food}.",
        f"Gere um cardápio diferente e criativo para {day_name}.",
        "Informe a quantidade por criança (ex: 80g, 120ml) em cada refeição.",
        f"Refeições:\n{slot_lines}",
    ]
    history = [
        f"- {WEEKDAY_NAMES[item.day_of_week - 1]}: {item.combined_text()}"
        for item in previous
        if not item.is_empty() and 1 <= item.day_of_week <= 5
    ]
    if history:
        lines.append("Cardápios anteriores (evite repetir):\n" + "\n".join(history))
    return "\n\n".join(lines)
