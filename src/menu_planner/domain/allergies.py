"""Domain models for allergy cross-checks."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ChildAllergyRecord:
    """A child's declared allergies as free text."""

    child_name: str
    allergies: str


@dataclass(frozen=True)
class AllergyConflict:
    """A child flagged because the meal text mentions an allergen."""

    child_name: str
    allergen: str
