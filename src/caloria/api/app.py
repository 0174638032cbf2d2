"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from caloria.api.models import (
    BodyProfilePayload,
    EntryCreate,
    EntryUpdate,
    GoalsUpdate,
    WaterPayload,
)
from caloria.app_logging import configure_logging
from caloria.containers import AppContainer
from caloria.domain.entries import FoodEntryDraft, MealType
from caloria.domain.supplements import SupplementDosage, SupplementType
from caloria.services.clock import Clock, SystemClock, is_valid_timezone
from caloria.services.filters import (
    ReportWindow,
    UnsupportedWindowError,
    parse_meal_type,
    parse_window,
)
from caloria.services.goals import build_goal_plan
from caloria.services.store import StoreUnavailableError
from caloria.services.supplements import requires_confirmation, supplement_warnings

_REQUIRED_ENTRY_FIELDS = ("quantity", "meal_type", "date")


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(UnsupportedWindowError)
    async def unsupported_window(
        request: Request, exc: UnsupportedWindowError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable(
        request: Request, exc: StoreUnavailableError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Stored data is temporarily unavailable"},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/users/{user_id}/entries", status_code=status.HTTP_201_CREATED)
    async def add_entry(
        user_id: str, payload: EntryCreate, request: Request
    ) -> dict[str, object]:
        """Log a confirmed meal."""
        state_container: AppContainer = request.app.state.container
        store = state_container.store_registry.get(user_id)
        food = payload.food.to_domain(fallback_id=f"food_{uuid4().hex[:12]}")
        nutrition = (
            payload.nutrition.to_domain()
            if payload.nutrition is not None
            else food.nutrition.scaled(payload.quantity)
        )
        entry = store.add_entry(
            FoodEntryDraft(
                user_id=user_id,
                food=food,
                quantity=payload.quantity,
                serving_size=(
                    payload.serving_size.to_domain()
                    if payload.serving_size is not None
                    else food.serving_size
                ),
                meal_type=payload.meal_type,
                date=payload.date or state_container.clock.now(),
                nutrition=nutrition,
                image_url=payload.image_url,
                notes=payload.notes,
            )
        )
        logger.info(
            "Logged entry %s (%s, %.0f kcal)",
            entry.id,
            entry.meal_type,
            entry.nutrition.calories,
        )
        return jsonable_encoder({"entry": entry, "today": store.today_stats})

    @app.patch("/users/{user_id}/entries/{entry_id}")
    async def update_entry(
        user_id: str, entry_id: str, payload: EntryUpdate, request: Request
    ) -> dict[str, object]:
        """Edit portion, meal type, date or notes of an entry."""
        state_container: AppContainer = request.app.state.container
        store = state_container.store_registry.get(user_id)
        existing = store.get_entry(entry_id)
        if existing is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        patch: dict[str, object] = payload.model_dump(
            exclude_unset=True, exclude={"serving_size", "nutrition"}
        )
        missing = sorted(
            name
            for name in _REQUIRED_ENTRY_FIELDS
            if name in patch and patch[name] is None
        )
        if missing:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Fields cannot be null: {', '.join(missing)}",
            )
        if payload.serving_size is not None:
            patch["serving_size"] = payload.serving_size.to_domain()
        if payload.nutrition is not None:
            patch["nutrition"] = payload.nutrition.to_domain()
        elif payload.quantity is not None:
            patch["nutrition"] = existing.food.nutrition.scaled(payload.quantity)
        updated = store.update_entry(entry_id, patch)
        if updated is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return jsonable_encoder({"entry": updated, "today": store.today_stats})

    @app.delete("/users/{user_id}/entries/{entry_id}")
    async def delete_entry(
        user_id: str, entry_id: str, request: Request
    ) -> dict[str, object]:
        """Delete an entry."""
        state_container: AppContainer = request.app.state.container
        store = state_container.store_registry.get(user_id)
        if not store.delete_entry(entry_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return jsonable_encoder({"status": "deleted", "today": store.today_stats})

    @app.get("/users/{user_id}/stats")
    async def stats(  # noqa: PLR0913
        user_id: str,
        request: Request,
        window: str = ReportWindow.DAILY.value,
        meal_type: str = "all",
        timezone: str | None = None,
    ) -> dict[str, object]:
        """Return totals and goal progress for a window."""
        state_container: AppContainer = request.app.state.container
        resolved_window, resolved_meal = _parse_filters(window, meal_type)
        clock = _request_clock(state_container, timezone)
        store = state_container.store_registry.get(user_id)
        daily = store.stats(resolved_window, resolved_meal, clock=clock)
        return jsonable_encoder({"window": resolved_window, "stats": daily})

    @app.get("/users/{user_id}/history")
    async def history(  # noqa: PLR0913
        user_id: str,
        request: Request,
        window: str = ReportWindow.DAILY.value,
        meal_type: str = "all",
        timezone: str | None = None,
    ) -> dict[str, object]:
        """Return filtered entries, newest first, with a summary."""
        state_container: AppContainer = request.app.state.container
        resolved_window, resolved_meal = _parse_filters(window, meal_type)
        clock = _request_clock(state_container, timezone)
        store = state_container.store_registry.get(user_id)
        entries, summary = store.history(resolved_window, resolved_meal, clock=clock)
        return jsonable_encoder({"entries": entries, "summary": summary})

    @app.get("/users/{user_id}/profile")
    async def profile(user_id: str, request: Request) -> dict[str, object]:
        """Return goals, today's water intake and streak stats."""
        state_container: AppContainer = request.app.state.container
        store = state_container.store_registry.get(user_id)
        return jsonable_encoder(
            {
                "goals": store.goals,
                "water_intake_ml": store.today_water(),
                "user_stats": store.user_stats,
            }
        )

    @app.put("/users/{user_id}/goals")
    async def update_goals(
        user_id: str, payload: GoalsUpdate, request: Request
    ) -> dict[str, object]:
        """Edit nutrition goals."""
        state_container: AppContainer = request.app.state.container
        store = state_container.store_registry.get(user_id)
        goals = store.update_goals(payload.model_dump(exclude_none=True))
        return jsonable_encoder({"goals": goals, "today": store.today_stats})

    @app.post("/goals/calculate")
    async def calculate_goals(
        payload: BodyProfilePayload, request: Request
    ) -> dict[str, object]:
        """Compute BMR, TDEE and goals from onboarding answers."""
        state_container: AppContainer = request.app.state.container
        plan = build_goal_plan(payload.to_domain(), state_container.clock)
        return jsonable_encoder({"plan": plan})

    @app.post("/users/{user_id}/water")
    async def add_water(
        user_id: str, payload: WaterPayload, request: Request
    ) -> dict[str, object]:
        """Add to today's water intake."""
        state_container: AppContainer = request.app.state.container
        store = state_container.store_registry.get(user_id)
        total = store.add_water(payload.amount_ml)
        return {"water_intake_ml": total}

    @app.delete("/users/{user_id}/water")
    async def reset_water(user_id: str, request: Request) -> dict[str, object]:
        """Reset today's water intake."""
        state_container: AppContainer = request.app.state.container
        store = state_container.store_registry.get(user_id)
        store.reset_water()
        return {"water_intake_ml": store.today_water()}

    @app.post("/users/{user_id}/recognize")
    async def recognize(user_id: str, request: Request) -> dict[str, object]:
        """Recognize the food in a raw image body."""
        state_container: AppContainer = request.app.state.container
        image_bytes = await request.body()
        if not image_bytes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Empty image"
            )
        try:
            result = await state_container.recognition_service.recognize(image_bytes)
        except Exception as exc:
            logger.exception("Food recognition failed", extra={"user_id": user_id})
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=_format_error(
                    state_container,
                    exc,
                    "Couldn't analyze that photo. Please try a clearer shot.",
                ),
            ) from exc
        return jsonable_encoder({"result": result})

    @app.get("/foods/search")
    async def search_foods(
        query: str, request: Request, limit: int = 5
    ) -> dict[str, object]:
        """Search foods for manual logging."""
        state_container: AppContainer = request.app.state.container
        try:
            foods = await state_container.food_search_service.search(
                query, limit=max(1, min(limit, 25))
            )
        except Exception as exc:
            logger.exception("Food search failed", extra={"query": query})
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=_format_error(state_container, exc, "Food search failed."),
            ) from exc
        return jsonable_encoder({"foods": foods})

    @app.get("/foods/{fdc_id}")
    async def get_food(fdc_id: int, request: Request) -> dict[str, object]:
        """Return one food with nutrition per labelled serving."""
        state_container: AppContainer = request.app.state.container
        try:
            food = await state_container.food_search_service.get_food(fdc_id)
        except Exception as exc:
            logger.exception("Food lookup failed", extra={"fdc_id": fdc_id})
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=_format_error(state_container, exc, "Food lookup failed."),
            ) from exc
        return jsonable_encoder({"food": food})

    @app.get("/supplements/{supplement_type}/warnings")
    async def warnings(
        supplement_type: SupplementType,
        amount: float | None = None,
        unit: str = "g",
    ) -> dict[str, object]:
        """Return safety warnings for a supplement."""
        dosage = (
            SupplementDosage(amount=amount, unit=unit) if amount is not None else None
        )
        items = supplement_warnings(supplement_type, dosage)
        return jsonable_encoder(
            {"warnings": items, "requires_confirmation": requires_confirmation(items)}
        )

    return app


def _parse_filters(window: str, meal_type: str) -> tuple[ReportWindow, MealType | None]:
    """Validate window and meal type query parameters."""
    resolved_window = parse_window(window)
    try:
        resolved_meal = parse_meal_type(meal_type)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unsupported meal type: {meal_type!r}",
        ) from exc
    return resolved_window, resolved_meal


def _request_clock(state_container: AppContainer, timezone: str | None) -> Clock:
    """Return a clock for the requested timezone, or the default one."""
    if timezone is None:
        return state_container.clock
    if not is_valid_timezone(timezone):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown timezone: {timezone}",
        )
    return SystemClock(timezone)


def _format_error(
    state_container: AppContainer, exc: Exception, fallback: str
) -> str:
    """Return a user-facing error message with local debug info."""
    if state_container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback
