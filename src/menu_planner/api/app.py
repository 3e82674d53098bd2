"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from menu_planner.api.models import MenuUpdateRequest, ParseRequest
from menu_planner.api.views import export_view, meal_view, session_view
from menu_planner.app_logging import configure_logging
from menu_planner.config import parse_menu_type
from menu_planner.containers import AppContainer
from menu_planner.domain.errors import (
    FactTableUnavailableError,
    MenuPlannerError,
    MenuSaveError,
    NoPreviousMenuError,
    UnknownMenuFieldError,
)
from menu_planner.meal_slots import WEEKDAYS, MenuType
from menu_planner.services.calculator import calculate_meal
from menu_planner.services.parsing import parse_meal_text

_ERROR_STATUS: dict[type[MenuPlannerError], int] = {
    UnknownMenuFieldError: status.HTTP_422_UNPROCESSABLE_CONTENT,
    NoPreviousMenuError: status.HTTP_404_NOT_FOUND,
    MenuSaveError: status.HTTP_502_BAD_GATEWAY,
    FactTableUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(debug=container.settings.environment == "local")
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(MenuPlannerError)
    async def menu_planner_error(
        request: Request, exc: MenuPlannerError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=_ERROR_STATUS.get(
                type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR
            ),
            content={"detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/menus/{week_start}")
    async def get_menu(
        week_start: date, request: Request, menu_type: str | None = None
    ) -> dict[str, object]:
        """Return a week with nutrition summaries and allergy conflicts."""
        state_container: AppContainer = request.app.state.container
        session = await state_container.menu_service.open_session(
            week_start, _menu_type(menu_type)
        )
        return session_view(session)

    @app.put("/menus/{week_start}")
    async def save_menu(
        week_start: date,
        payload: MenuUpdateRequest,
        request: Request,
        menu_type: str | None = None,
    ) -> dict[str, object]:
        """Apply field edits and save the whole week at once."""
        state_container: AppContainer = request.app.state.container
        session = await state_container.menu_service.open_session(
            week_start, _menu_type(menu_type)
        )
        for edit in payload.edits:
            session.update_field(edit.day_of_week, edit.field, edit.value)
        state_container.menu_service.save(session)
        return session_view(session)

    @app.post("/menus/{week_start}/copy-previous")
    async def copy_previous(
        week_start: date, request: Request, menu_type: str | None = None
    ) -> dict[str, object]:
        """Return the week filled with the previous week's menu, unsaved."""
        state_container: AppContainer = request.app.state.container
        session = await state_container.menu_service.open_session(
            week_start, _menu_type(menu_type)
        )
        state_container.menu_service.copy_previous_week(session)
        return session_view(session)

    @app.post("/menus/{week_start}/days/{day_of_week}/suggestion")
    async def suggest_day(
        week_start: date,
        day_of_week: int,
        request: Request,
        menu_type: str | None = None,
    ) -> dict[str, object]:
        """Suggest a menu for one weekday."""
        if day_of_week not in WEEKDAYS:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
                detail="day_of_week must be between 1 and 5",
            )
        state_container: AppContainer = request.app.state.container
        resolved_type = _menu_type(menu_type)
        previous = [
            item
            for item in state_container.menu_service.saved_week(
                week_start, resolved_type
            )
            if item.day_of_week != day_of_week
        ]
        try:
            suggestion = await state_container.suggestion_service.suggest_day(
                resolved_type, day_of_week, previous
            )
        except Exception:
            logger.exception("Menu suggestion failed")
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Menu suggestion unavailable",
            ) from None
        return suggestion.model_dump()

    @app.post("/nutrition/parse")
    async def parse_nutrition(
        payload: ParseRequest, request: Request
    ) -> dict[str, object]:
        """Return the nutrition breakdown of a meal description."""
        state_container: AppContainer = request.app.state.container
        table = await state_container.fact_table_service.load()
        return meal_view(calculate_meal(parse_meal_text(payload.text), table))

    @app.get("/menus/{week_start}/export")
    async def export_menu(
        week_start: date, request: Request, menu_type: str | None = None
    ) -> dict[str, object]:
        """Return the printable week for PDF rendering."""
        state_container: AppContainer = request.app.state.container
        session = await state_container.menu_service.open_session(
            week_start, _menu_type(menu_type)
        )
        return export_view(session)

    return app


def _menu_type(raw: str | None) -> MenuType:
    try:
        return parse_menu_type(raw)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail=f"Unknown menu type: {raw}",
        ) from None
