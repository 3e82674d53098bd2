"""Request models for the menu API."""

from pydantic import BaseModel, Field


class FieldEdit(BaseModel):
    day_of_week: int = Field(ge=1, le=5)
    field: str
    value: str = ""


class MenuUpdateRequest(BaseModel):
    """Field edits applied to a week before it is saved."""

    edits: list[FieldEdit] = Field(default_factory=list)


class ParseRequest(BaseModel):
    text: str = ""
