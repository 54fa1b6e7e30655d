"""
Menuplan Web API - FastAPI application.

Plan mutation surface plus the offer sync polling contract:
    POST /api/sync/start  -> {"accepted": bool}
    GET  /api/sync/status -> {"state", "message", "last_update"}
"""

import logging
from typing import Literal

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from menuplan import __version__
from menuplan.config import settings
from menuplan.errors import MenuplanError
from menuplan.llm.prompt_logger import enable_prompt_logging
from menuplan.models import DailyPlan, Offer, Person, SlotType, SyncStatus, WeeklyPlan
from menuplan.offers import OfferSyncJob
from menuplan.planning import PlanService
from menuplan.web.deps import get_current_person, get_service, get_sync_job

logger = logging.getLogger(__name__)

app = FastAPI(title="Menuplan", version=__version__)


@app.on_event("startup")
async def startup_event():
    """Log configuration on startup."""
    if settings.menuplan_log_prompts:
        enable_prompt_logging(True)
    logger.info("Menuplan starting up...")
    logger.info(f"  Environment: {settings.menuplan_env}")
    logger.info(f"  Data file: {settings.data_file_path}")
    logger.info(f"  Local provider: {settings.ollama_model or 'none'}")


@app.exception_handler(MenuplanError)
async def menuplan_error_handler(request: Request, exc: MenuplanError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, **exc.details})


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


# =============================================================================
# Models
# =============================================================================


class LoginRequest(BaseModel):
    person: Person


class CouplePlans(BaseModel):
    plans: dict[Person, dict[str, DailyPlan]]


class RatingRequest(BaseModel):
    rating: Literal["up", "down"] | None = None


class RecipeRequest(BaseModel):
    name: str
    description: str = ""


class PantryToggle(BaseModel):
    name: str


class FlyerRequest(BaseModel):
    url: str


# =============================================================================
# Session
# =============================================================================


@app.post("/api/login")
async def login(req: LoginRequest, response: Response):
    response.set_cookie(
        settings.session_cookie_name,
        req.person.value,
        httponly=True,
        samesite="lax",
        secure=not settings.is_development,
    )
    return {"person": req.person}


@app.post("/api/logout")
async def logout(response: Response):
    response.delete_cookie(settings.session_cookie_name)
    return {"success": True}


@app.get("/api/me")
async def get_me(person: Person = Depends(get_current_person)):
    return {"person": person}


# =============================================================================
# Plans
# =============================================================================


@app.get("/api/plan")
async def get_plan(person: Person = Depends(get_current_person), service: PlanService = Depends(get_service)):
    return service.store.load_state().profile(person).plan


@app.post("/api/plan/generate")
async def generate_plan(person: Person = Depends(get_current_person), service: PlanService = Depends(get_service)):
    """Generate a new week for the session person. Not saved."""
    return await service.generate_plan(person)


@app.put("/api/plan")
async def save_plan(
    plan: dict[str, DailyPlan],
    person: Person = Depends(get_current_person),
    service: PlanService = Depends(get_service),
):
    service.save_plan(person, plan)
    return {"success": True}


@app.post("/api/couple/preview")
async def couple_preview(
    person: Person = Depends(get_current_person), service: PlanService = Depends(get_service)
):
    plan_a, plan_b = await service.generate_couple_preview()
    return {"plans": _couple(service, plan_a, plan_b)}


@app.post("/api/couple/commit")
async def couple_commit(
    req: CouplePlans,
    person: Person = Depends(get_current_person),
    service: PlanService = Depends(get_service),
):
    person_a, person_b = service.couple_sync.person_a, service.couple_sync.person_b
    missing = [p.value for p in (person_a, person_b) if p not in req.plans]
    if missing:
        raise HTTPException(status_code=400, detail=f"Missing plans for: {', '.join(missing)}")
    service.commit_couple_plans(req.plans[person_a], req.plans[person_b])
    return {"success": True}


@app.post("/api/couple/generate")
async def couple_generate(
    person: Person = Depends(get_current_person), service: PlanService = Depends(get_service)
):
    plan_a, plan_b = await service.generate_couple_plans()
    return {"plans": _couple(service, plan_a, plan_b)}


def _couple(service: PlanService, plan_a: WeeklyPlan, plan_b: WeeklyPlan) -> dict[Person, WeeklyPlan]:
    return {service.couple_sync.person_a: plan_a, service.couple_sync.person_b: plan_b}


@app.post("/api/plan/{day}/{slot}/regenerate")
async def regenerate_slot(
    day: str,
    slot: SlotType,
    person: Person = Depends(get_current_person),
    service: PlanService = Depends(get_service),
):
    result = service.regenerate_slot(person, day, slot)
    if result is None:
        raise HTTPException(status_code=404, detail="Nothing to regenerate for that day")
    return result


@app.post("/api/plan/{day}/{slot}/eaten")
async def toggle_eaten(
    day: str,
    slot: SlotType,
    person: Person = Depends(get_current_person),
    service: PlanService = Depends(get_service),
):
    return {"eaten": service.toggle_eaten(person, day, slot)}


@app.post("/api/plan/{day}/{slot}/rating")
async def rate_meal(
    day: str,
    slot: SlotType,
    req: RatingRequest,
    person: Person = Depends(get_current_person),
    service: PlanService = Depends(get_service),
):
    return {"rating": service.rate_meal(person, day, slot, req.rating)}


@app.post("/api/recipes/narrative")
async def recipe_narrative(
    req: RecipeRequest,
    person: Person = Depends(get_current_person),
    service: PlanService = Depends(get_service),
):
    return {"text": await service.recipe_narrative(req.name, req.description, person)}


# =============================================================================
# Pantry & offers
# =============================================================================


@app.get("/api/pantry")
async def get_pantry(person: Person = Depends(get_current_person), service: PlanService = Depends(get_service)):
    return {"items": service.store.load_state().pantry_items}


@app.post("/api/pantry/toggle")
async def toggle_pantry(
    req: PantryToggle,
    person: Person = Depends(get_current_person),
    service: PlanService = Depends(get_service),
):
    return {"items": service.toggle_pantry_item(req.name)}


@app.get("/api/offers")
async def get_offers(person: Person = Depends(get_current_person), service: PlanService = Depends(get_service)):
    state = service.store.load_state()
    return {
        "offers": state.active_offers,
        "flyers": state.flyers,
        "last_update": state.last_offer_update,
    }


@app.post("/api/offers")
async def add_offers(
    offers: list[Offer],
    person: Person = Depends(get_current_person),
    service: PlanService = Depends(get_service),
):
    return {"added": service.merge_offers(offers)}


@app.delete("/api/offers")
async def clear_offers(person: Person = Depends(get_current_person), service: PlanService = Depends(get_service)):
    service.clear_offers()
    return {"success": True}


@app.post("/api/offers/flyer")
async def process_flyer(
    req: FlyerRequest,
    person: Person = Depends(get_current_person),
    job: OfferSyncJob = Depends(get_sync_job),
):
    added = await job.process_flyer_url(req.url)
    return {"added": added}


# =============================================================================
# Offer sync job
# =============================================================================


@app.post("/api/sync/start")
async def start_sync(person: Person = Depends(get_current_person), job: OfferSyncJob = Depends(get_sync_job)):
    """Trigger the background sync; returns immediately."""
    accepted = await job.start()
    return {"accepted": accepted}


@app.get("/api/sync/status", response_model=SyncStatus)
async def sync_status(job: OfferSyncJob = Depends(get_sync_job)):
    return job.get_status()
