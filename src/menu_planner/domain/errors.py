"""Domain errors."""


class MenuPlannerError(Exception):
    """Base class for menu planner errors."""


class UnknownMenuFieldError(MenuPlannerError):
    """Raised when editing a field that a menu item does not offer."""


class MenuSaveError(MenuPlannerError):
    """Raised when a weekly menu could not be saved; nothing was written."""


class NoPreviousMenuError(MenuPlannerError):
    """Raised when copying from a week that has no saved menu."""


class FactTableUnavailableError(MenuPlannerError):
    """Raised when the nutrient fact table cannot be loaded."""
