"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from menu_planner.adapters.openai_suggestion_client import OpenAISuggestionClient
from menu_planner.adapters.supabase_children_repository import (
    SupabaseChildrenRepository,
)
from menu_planner.adapters.supabase_weekly_menu_repository import (
    SupabaseWeeklyMenuRepository,
)
from menu_planner.adapters.taco_client import HttpxTacoClient
from menu_planner.config import Settings
from menu_planner.services.allergies import AllergyService
from menu_planner.services.cache import InMemoryCache
from menu_planner.services.fact_table import FactTableService
from menu_planner.services.menus import MenuPlanningService
from menu_planner.services.suggestions import SuggestionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    fact_table_service: FactTableService
    allergy_service: AllergyService
    menu_service: MenuPlanningService
    suggestion_service: SuggestionService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    menu_repository = SupabaseWeeklyMenuRepository(supabase_client)
    children_repository = SupabaseChildrenRepository(supabase_client)
    taco_client = HttpxTacoClient.create(resolved_settings.taco_data_url)
    fact_table_service = FactTableService(
        client=taco_client,
        cache=InMemoryCache(),
        ttl_seconds=resolved_settings.fact_table_ttl_seconds,
    )
    allergy_service = AllergyService(children_repository)
    menu_service = MenuPlanningService(
        repository=menu_repository,
        fact_tables=fact_table_service,
        allergy_service=allergy_service,
    )
    openai_client = OpenAISuggestionClient.create(resolved_settings.openai_api_key)
    suggestion_service = SuggestionService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )

    async def close_resources() -> None:
        await taco_client.close()
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        fact_table_service=fact_table_service,
        allergy_service=allergy_service,
        menu_service=menu_service,
        suggestion_service=suggestion_service,
        close_resources=close_resources,
    )
