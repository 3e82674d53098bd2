"""Models for AI day-menu suggestions."""

from pydantic import BaseModel, Field


class SlotSuggestion(BaseModel):
    """Suggested content for a single meal slot."""

    slot: str
    text: str = Field(max_length=160)
    quantity: str
    time: str = Field(pattern=r"^\d{1,2}:\d{2}$")


class DaySuggestion(BaseModel):
    """Structured output for a suggested day menu."""

    slots: list[SlotSuggestion]
