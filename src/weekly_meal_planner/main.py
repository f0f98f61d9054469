"""FastAPI application - cron generation endpoint, suggestions, plan reads, shopping lists, health."""

import hmac
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import date

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from weekly_meal_planner.catalog import CuisineCatalog
from weekly_meal_planner.config import Settings, get_settings
from weekly_meal_planner.llm import LLMClient, OpenAIClient
from weekly_meal_planner.persistence import create_stores
from weekly_meal_planner.planning import ParseError, format_week, next_week_start, week_start
from weekly_meal_planner.services import (
    AIService,
    GenerationClient,
    GenerationError,
    InsufficientSignalError,
    MealPlanBatchService,
    PlanNotFoundError,
    ShoppingListService,
    SuggestionService,
    UserNotFoundError,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

MAX_HISTORY_PAGE = 20
MAX_PORTIONS = 20


@dataclass
class AppServices:
    """Everything the routes need, wired once at startup."""

    batch: MealPlanBatchService
    suggestions: SuggestionService
    shopping_lists: ShoppingListService
    plan_store: object


def create_services(
    user_store,
    plan_store,
    *,
    shopping_list_store=None,
    llm: LLMClient | None = None,
    catalog: CuisineCatalog | None = None,
    settings: Settings | None = None,
) -> AppServices:
    """Factory - wires dependencies."""
    settings = settings or get_settings()
    generator = GenerationClient(
        llm or OpenAIClient(),
        timeout_seconds=settings.generation_timeout_seconds,
        max_retries=settings.generation_max_retries,
        backoff_seconds=settings.generation_backoff_seconds,
        max_tokens=settings.llm_max_tokens,
    )
    ai_service = AIService(generator, catalog or CuisineCatalog())
    batch = MealPlanBatchService(
        ai_service,
        user_store,
        plan_store,
        batch_size=settings.batch_size,
        candidate_limit=settings.candidate_limit,
        history_lookback=settings.history_lookback,
    )
    suggestions = SuggestionService(
        ai_service,
        user_store,
        plan_store,
        history_lookback=settings.history_lookback,
        week_start_day=settings.week_start_day,
    )
    shopping_lists = ShoppingListService(generator, plan_store, shopping_list_store)
    return AppServices(
        batch=batch,
        suggestions=suggestions,
        shopping_lists=shopping_lists,
        plan_store=plan_store,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup."""
    stores = create_stores()
    app.state.services = create_services(stores.users, stores.plans, shopping_list_store=stores.shopping_lists)
    yield
    app.state.services = None


app = FastAPI(
    title="Weekly Meal Planner",
    description="Cron-driven AI weekly meal plan generation",
    version="0.1.0",
    lifespan=lifespan,
)


class Unauthorized(Exception):
    pass


@app.exception_handler(Unauthorized)
async def unauthorized_handler(request: Request, exc: Unauthorized) -> JSONResponse:
    return JSONResponse({"error": "Unauthorized"}, status_code=401)


def get_services(request: Request) -> AppServices:
    return request.app.state.services


def _bearer_matches(auth_header: str | None, secret: str) -> bool:
    """Constant-time compare against 'Bearer <secret>'. An unset secret never matches."""
    if not secret or not auth_header:
        return False
    return hmac.compare_digest(auth_header.encode(), f"Bearer {secret}".encode())


def require_bearer(request: Request, settings: Settings = Depends(get_settings)) -> None:
    if not _bearer_matches(request.headers.get("authorization"), settings.cron_secret):
        logger.warning("Rejected unauthorized request to %s", request.url.path)
        raise Unauthorized()


class SuggestionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    week_start_date: date = Field(..., alias="weekStartDate")
    ingredients: list[str] = Field(default_factory=list)


class ShoppingListRequest(BaseModel):
    portions: int = Field(default=1, ge=1, le=MAX_PORTIONS)


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check for load balancers."""
    return {"status": "ok"}


@app.get("/api/cron/generate-meal-plans", dependencies=[Depends(require_bearer)])
async def generate_meal_plans(
    week_start_date: date | None = Query(default=None, alias="weekStartDate"),
    settings: Settings = Depends(get_settings),
    services: AppServices = Depends(get_services),
):
    """
    Cron trigger. Targets next week unless weekStartDate is given.
    Safe to re-run: users who already have a plan for the week are skipped.
    """
    if week_start_date is not None:
        target = week_start(week_start_date, settings.week_start_day)
    else:
        target = next_week_start(date.today(), settings.week_start_day)
    logger.info("Starting AI meal plan generation batch for %s", target)
    try:
        report = await services.batch.run_batch(format_week(target))
    except Exception as e:
        logger.exception("AI generation cron job error: %s", e)
        return JSONResponse(
            {"error": "Internal server error", "details": str(e) or type(e).__name__},
            status_code=500,
        )
    return report.to_response()


@app.post("/api/users/{user_id}/suggestions", dependencies=[Depends(require_bearer)])
async def suggest_meals(
    user_id: str,
    body: SuggestionRequest,
    services: AppServices = Depends(get_services),
):
    """One-off week of suggestions for a user; nothing is stored."""
    try:
        week, meals = await services.suggestions.suggest(user_id, body.week_start_date, body.ingredients)
    except UserNotFoundError:
        return JSONResponse({"error": "User not found"}, status_code=404)
    except InsufficientSignalError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except (GenerationError, ParseError) as e:
        logger.warning("Suggestion generation failed for %s: %s", user_id, e)
        return JSONResponse({"error": "AI generation failed", "details": str(e)}, status_code=502)
    return {
        "weekStartDate": week,
        "meals": {
            day: {mt: dish.model_dump(exclude_none=True) for mt, dish in slots.items()}
            for day, slots in meals.items()
        },
    }


@app.get("/api/users/{user_id}/meal-plans/{week_start_date}", dependencies=[Depends(require_bearer)])
async def get_meal_plan(
    user_id: str,
    week_start_date: date,
    services: AppServices = Depends(get_services),
):
    plan = services.plan_store.get(user_id, format_week(week_start_date))
    if plan is None:
        return JSONResponse({"error": "Meal plan not found"}, status_code=404)
    return plan.model_dump(mode="json", by_alias=True)


@app.get("/api/users/{user_id}/meal-plans", dependencies=[Depends(require_bearer)])
async def list_meal_plans(
    user_id: str,
    before: date | None = Query(default=None),
    limit: int = Query(default=5, ge=1, le=MAX_HISTORY_PAGE),
    services: AppServices = Depends(get_services),
):
    """Stored plans before a date (default: all), newest first."""
    cutoff = format_week(before or date.max)
    plans = services.plan_store.list_before(user_id, cutoff, limit)
    return {"plans": [p.model_dump(mode="json", by_alias=True) for p in plans]}


@app.post(
    "/api/users/{user_id}/meal-plans/{week_start_date}/shopping-list",
    dependencies=[Depends(require_bearer)],
)
async def get_shopping_list(
    user_id: str,
    week_start_date: date,
    body: ShoppingListRequest | None = None,
    services: AppServices = Depends(get_services),
):
    """Ingredients for a stored plan, grouped by category. Reuses the cached list while the plan is unchanged."""
    portions = body.portions if body else 1
    try:
        shopping_list, cached = await services.shopping_lists.build(user_id, format_week(week_start_date), portions)
    except PlanNotFoundError:
        return JSONResponse({"error": "Meal plan not found"}, status_code=404)
    except (GenerationError, ParseError) as e:
        logger.warning("Shopping list generation failed for %s: %s", user_id, e)
        return JSONResponse({"error": "AI generation failed", "details": str(e)}, status_code=502)
    return {
        "weekStartDate": shopping_list.week_start_date,
        "portions": shopping_list.portions,
        "categorized": {
            category: [item.model_dump() for item in items]
            for category, items in shopping_list.categorized.items()
        },
        "cached": cached,
    }
