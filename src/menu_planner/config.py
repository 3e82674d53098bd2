"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from menu_planner.adapters.taco_client import DEFAULT_TACO_URL
from menu_planner.meal_slots import MenuType

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    openai_api_key: str
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str = "low"
    openai_store: bool = False
    taco_data_url: str = DEFAULT_TACO_URL
    fact_table_ttl_seconds: int = 3600
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_menu_type(raw: str | None) -> MenuType:
    """Parse a menu type from a query value, defaulting to the preschool menu."""
    if raw is None:
        return MenuType.PRESCHOOL
    cleaned = raw.strip().lower()
    if cleaned in {"", "*"}:
        return MenuType.PRESCHOOL
    return MenuType(cleaned)
