"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import date
from uuid import UUID, uuid4

import pytest

from menu_planner.adapters.taco_client import TacoClient
from menu_planner.config import Settings
from menu_planner.containers import AppContainer
from menu_planner.domain.allergies import ChildAllergyRecord
from menu_planner.domain.menus import MenuItem, MenuSaveBatch
from menu_planner.meal_slots import MenuType
from menu_planner.services.allergies import AllergyService, ChildrenRepository
from menu_planner.services.cache import InMemoryCache
from menu_planner.services.fact_table import (
    FactTable,
    FactTableService,
    parse_taco_rows,
)
from menu_planner.services.menus import MenuPlanningService, WeeklyMenuRepository
from menu_planner.services.suggestions import SuggestionClient, SuggestionService

TACO_ROWS: list[dict[str, object]] = [
    {
        "id": 3,
        "description": "Arroz, tipo 1, cozido",
        "category": "Cereais e derivados",
        "energy_kcal": 128,
        "protein_g": 2.5,
        "lipid_g": 0.2,
        "carbohydrate_g": 28.1,
        "fiber_g": 1.6,
        "calcium_mg": 4,
        "iron_mg": 0.1,
        "sodium_mg": 1,
        "vitaminC_mg": "NA",
        "rae_mcg": "NA",
    },
    {
        "id": 411,
        "description": "Frango, peito, sem pele, grelhado",
        "category": "Carnes e derivados",
        "energy_kcal": 159,
        "protein_g": 32.0,
        "lipid_g": 2.5,
        "carbohydrate_g": 0,
        "fiber_g": "NA",
        "calcium_mg": 5,
        "iron_mg": 0.3,
        "sodium_mg": 50,
        "vitaminC_mg": "NA",
        "rae_mcg": "Tr",
    },
    {
        "id": 543,
        "description": "Amendoim, grão, cru",
        "category": "Leguminosas e derivados",
        "energy_kcal": 544,
        "protein_g": 27.2,
        "lipid_g": 43.9,
        "carbohydrate_g": 20.3,
        "fiber_g": 8.0,
        "calcium_mg": 0,
        "iron_mg": 2.5,
        "sodium_mg": 0,
        "vitaminC_mg": 0,
        "rae_mcg": 0,
    },
    {
        "id": 460,
        "description": "Leite, de vaca, integral",
        "category": "Leite e derivados",
        "energy_kcal": 61,
        "protein_g": 2.9,
        "lipid_g": 3.2,
        "carbohydrate_g": 4.6,
        "fiber_g": "NA",
        "calcium_mg": 123,
        "iron_mg": "Tr",
        "sodium_mg": 64,
        "vitaminC_mg": "Tr",
        "rae_mcg": 34,
    },
    {
        "id": 182,
        "description": "Banana, prata, crua",
        "category": "Frutas e derivados",
        "energy_kcal": 98,
        "protein_g": 1.3,
        "lipid_g": 0.1,
        "carbohydrate_g": 26.0,
        "fiber_g": 2.0,
        "calcium_mg": 8,
        "iron_mg": 0.4,
        "sodium_mg": "Tr",
        "vitaminC_mg": 21.6,
        "rae_mcg": 4,
    },
]

SUGGESTION_PAYLOAD: dict[str, object] = {
    "slots": [
        {
            "slot": "breakfast",
            "text": "Leite com banana amassada",
            "quantity": "150ml",
            "time": "07:30",
        },
        {
            "slot": "lunch",
            "text": "Arroz, feijão, frango desfiado e cenoura",
            "quantity": "180g",
            "time": "11:30",
        },
        {
            "slot": "bottle",
            "text": "Leite materno ou fórmula",
            "quantity": "150ml",
            "time": "13:00",
        },
    ]
}


def fact_table() -> FactTable:
    return FactTable(parse_taco_rows(TACO_ROWS))


@dataclass
class FakeTacoClient(TacoClient):
    """Fake TACO client returning a small food table."""

    rows: list[dict[str, object]] = field(default_factory=lambda: list(TACO_ROWS))
    fail: bool = False
    calls: int = 0

    async def fetch_foods(self) -> list[dict[str, object]]:
        self.calls += 1
        if self.fail:
            raise RuntimeError("TACO unavailable")
        return self.rows


@dataclass
class InMemoryWeeklyMenuRepository(WeeklyMenuRepository):
    """In-memory weekly menu repository for tests."""

    rows: dict[UUID, MenuItem] = field(default_factory=dict)
    batches: list[MenuSaveBatch] = field(default_factory=list)
    fail: bool = False

    def add(self, item: MenuItem) -> MenuItem:
        stored = replace(item, id=item.id or uuid4())
        self.rows[stored.id] = stored
        return replace(stored)

    def list_week(self, week_start: date, menu_type: MenuType) -> list[MenuItem]:
        items = [
            replace(item)
            for item in self.rows.values()
            if item.week_start == week_start and item.menu_type == menu_type
        ]
        return sorted(items, key=lambda item: item.day_of_week)

    def save_batch(self, batch: MenuSaveBatch) -> list[MenuItem]:
        if self.fail:
            raise RuntimeError("database unavailable")
        self.batches.append(batch)
        for item_id in batch.deletes:
            self.rows.pop(item_id, None)
        return [self.add(item) for item in batch.upserts]


@dataclass
class InMemoryChildrenRepository(ChildrenRepository):
    """In-memory allergy roster for tests."""

    records: list[ChildAllergyRecord] = field(default_factory=list)

    def list_allergies(self) -> list[ChildAllergyRecord]:
        return list(self.records)


@dataclass
class FakeSuggestionClient(SuggestionClient):
    """Fake suggestion client returning a fixed payload."""

    payload: dict[str, object] = field(default_factory=lambda: SUGGESTION_PAYLOAD)
    prompts: list[str] = field(default_factory=list)
    error: Exception | None = None

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        openai_api_key="openai-key",
        environment="test",
    )


@pytest.fixture
def menu_repository() -> InMemoryWeeklyMenuRepository:
    return InMemoryWeeklyMenuRepository()


@pytest.fixture
def children_repository() -> InMemoryChildrenRepository:
    return InMemoryChildrenRepository(
        [ChildAllergyRecord(child_name="Ana", allergies="Amendoim")]
    )


@pytest.fixture
def taco_client() -> FakeTacoClient:
    return FakeTacoClient()


@pytest.fixture
def suggestion_client() -> FakeSuggestionClient:
    return FakeSuggestionClient()


@pytest.fixture
def menu_service(
    menu_repository: InMemoryWeeklyMenuRepository,
    children_repository: InMemoryChildrenRepository,
    taco_client: FakeTacoClient,
) -> MenuPlanningService:
    return MenuPlanningService(
        repository=menu_repository,
        fact_tables=FactTableService(client=taco_client, cache=InMemoryCache()),
        allergy_service=AllergyService(children_repository),
    )


@pytest.fixture
def container(
    settings: Settings,
    menu_service: MenuPlanningService,
    suggestion_client: FakeSuggestionClient,
) -> AppContainer:
    suggestion_service = SuggestionService(
        client=suggestion_client,
        model=settings.openai_model,
        reasoning_effort=settings.openai_reasoning_effort,
        store=settings.openai_store,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        fact_table_service=menu_service.fact_tables,
        allergy_service=menu_service.allergy_service,
        menu_service=menu_service,
        suggestion_service=suggestion_service,
        close_resources=close_resources,
    )
