"""
Menuplan - Plan service.

The plan mutation surface used by the web app and the CLI. Every
operation takes the person explicitly; nothing here reads an ambient
"current user".

Generation pipeline for one person:
    prompt -> provider rotation (chef pool) -> JSON parse
           -> local fallback when generation is unusable
           -> sanitize -> recipe enrichment
"""

import asyncio
import logging
import re
from datetime import datetime
from typing import Any, Literal

from menuplan.catalog import Catalog, current_season, load_catalog, seasonal_fruit, seasonal_veg
from menuplan.config import settings
from menuplan.errors import InvalidRequestError, NotFoundError
from menuplan.llm import (
    AllProvidersExhausted,
    GenerationClient,
    Pool,
    ProviderAuthError,
    ProviderRotationEngine,
)
from menuplan.llm.parsing import parse_json_text
from menuplan.llm.rotation import Sleep
from menuplan.models import (
    DAYS,
    WEEKEND,
    DailyPlan,
    MealDetails,
    Offer,
    Person,
    PersonPlanRequest,
    Season,
    SlotType,
    WeeklyPlan,
)
from menuplan.offers.merge import merge_unique
from menuplan.planning.couple_sync import CoupleSyncEngine
from menuplan.planning.enricher import RecipeEnricher, RecipeSearcher
from menuplan.planning.fallback import LocalFallbackGenerator
from menuplan.planning.prompts import RECIPE_FALLBACK_TEXT, build_plan_prompt, build_recipe_prompt
from menuplan.planning.sanitizer import TRAINING_SCHEDULE, PlanSanitizer, normalize_day_key
from menuplan.randomness import RandomSource, SystemRandomSource, choice
from menuplan.recipes import RecipeSearch
from menuplan.store import StateRecipeCache, StateStore

logger = logging.getLogger(__name__)

Rating = Literal["up", "down"]

SEASONAL_FRUIT_INGREDIENT = "Frutta di Stagione"
SEASONAL_VEG_INGREDIENT = "Verdura di Stagione"


def normalize_spacing(text: str) -> str:
    """Blank line after every line, never more than one in a row."""
    spaced = re.sub(r"\r\n|\r|\n", "\n\n", text)
    return re.sub(r"\n{3,}", "\n\n", spaced).strip()


class PlanService:
    """Plan generation, couple sync and per-slot edits over the state store."""

    def __init__(
        self,
        store: StateStore,
        *,
        catalog: Catalog | None = None,
        engine: ProviderRotationEngine | None = None,
        searcher: RecipeSearcher | None = None,
        random_source: RandomSource | None = None,
        sleep: Sleep = asyncio.sleep,
        enrich_recipes: bool = True,
    ):
        self.store = store
        self.catalog = catalog or load_catalog(
            settings.catalog_path, legacy_suffix_matching=settings.legacy_suffix_matching
        )
        self.catalog.validate_complete()

        self.random_source = random_source or SystemRandomSource()
        self.engine = engine or ProviderRotationEngine(
            GenerationClient(), random_source=self.random_source, sleep=sleep
        )
        self.sanitizer = PlanSanitizer(self.catalog, random_source=self.random_source)
        self.fallback = LocalFallbackGenerator(self.catalog, random_source=self.random_source)
        self.couple_sync = CoupleSyncEngine(self.catalog)
        self.enricher = (
            RecipeEnricher(
                self.catalog,
                searcher or RecipeSearch(),
                cache=StateRecipeCache(store),
                sleep=sleep,
            )
            if enrich_recipes
            else None
        )

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    async def generate_plan(self, person: Person, season: Season | None = None) -> WeeklyPlan:
        """Generate, repair and enrich a week for person. Not saved."""
        season = season or current_season()
        state = self.store.load_state()
        request = PersonPlanRequest(
            person=person,
            catalog=self.catalog.options_for(person),
            pantry=state.pantry_items,
            offers=state.active_offers,
            season=season,
            seasonal_fruit=seasonal_fruit(season),
            seasonal_veg=seasonal_veg(season),
        )
        logger.info(f"Generating plan for {person.value} with {len(request.offers)} current offers")

        raw = await self._generate_raw(request)
        plan = self.sanitizer.sanitize(raw, person, season)

        if self.enricher is not None:
            found = await self.enricher.enrich(plan)
            logger.info(f"[RECIPE] {found} recipes attached for {person.value}")
        return plan

    async def _generate_raw(self, request: PersonPlanRequest) -> Any:
        training_days = [day for day in DAYS if day in TRAINING_SCHEDULE.get(request.person, frozenset())]
        prompt = build_plan_prompt(request, training_days)
        try:
            text = await self.engine.invoke_pool(prompt, Pool.CHEF, call_site="plan")
            raw = parse_json_text(text)
            if not isinstance(raw, dict):
                raise ValueError(f"plan is a {type(raw).__name__}, expected an object")
            return raw
        except ProviderAuthError as e:
            logger.error(f"Plan generation aborted by authorization failure on {e.provider}; using local plan")
        except AllProvidersExhausted as e:
            logger.warning(f"All providers failed ({', '.join(e.providers)}); using local plan")
        except ValueError as e:
            logger.warning(f"Unusable plan output ({e}); using local plan")
        return self.fallback.generate(request.person, request.season)

    def save_plan(self, person: Person, plan: WeeklyPlan) -> None:
        state = self.store.load_state()
        state.profile(person).plan = plan
        self.store.save_state(state)

    async def generate_couple_preview(self) -> tuple[WeeklyPlan, WeeklyPlan]:
        """Both plans generated concurrently and reconciled on shared meals. Not saved."""
        plan_a, plan_b = await asyncio.gather(
            self.generate_plan(self.couple_sync.person_a),
            self.generate_plan(self.couple_sync.person_b),
        )
        return self.couple_sync.reconcile(plan_a, plan_b)

    def commit_couple_plans(self, plan_a: WeeklyPlan, plan_b: WeeklyPlan) -> None:
        """Persist both plans in a single write."""
        state = self.store.load_state()
        state.profile(self.couple_sync.person_a).plan = plan_a
        state.profile(self.couple_sync.person_b).plan = plan_b
        self.store.save_state(state)
        logger.info("Couple plans saved")

    async def generate_couple_plans(self) -> tuple[WeeklyPlan, WeeklyPlan]:
        plan_a, plan_b = await self.generate_couple_preview()
        self.commit_couple_plans(plan_a, plan_b)
        return plan_a, plan_b

    # -------------------------------------------------------------------------
    # Slot edits
    # -------------------------------------------------------------------------

    def regenerate_slot(
        self, person: Person, day: str, slot: SlotType, season: Season | None = None
    ) -> dict[str, str] | None:
        """
        Swap one slot for another entitled option fitting the day.

        Returns {"name": ...} of the new meal, or None when the person has
        no plan for that day or nothing fits.
        """
        season = season or current_season()
        day = self._day(day)
        state = self.store.load_state()
        daily = state.profile(person).plan.get(day)
        if daily is None:
            return None

        candidates = self.catalog.of_type(
            slot, person, training=daily.training, season=season, include_occasions=day in WEEKEND
        )
        if not candidates:
            logger.warning(f"No {slot.value} options fit {person.value} on {day}")
            return None

        current = daily.get_slot(slot)
        others = [option for option in candidates if option.id != current]
        option = choice(self.random_source, others or candidates)

        details = MealDetails(name=option.name, recipe=option.description)
        ingredient_names = [ingredient.name for ingredient in option.ingredients]
        if SEASONAL_FRUIT_INGREDIENT in ingredient_names:
            details.specific_fruit = choice(self.random_source, seasonal_fruit(season))
        if any(SEASONAL_VEG_INGREDIENT in name for name in ingredient_names):
            details.specific_veg = choice(self.random_source, seasonal_veg(season))

        daily.set_slot(slot, option.id)
        daily.set_details(slot, details)
        self.store.save_state(state)
        logger.info(f"{person.value} {day}/{slot.value}: {current or '-'} -> {option.id}")
        return {"name": option.name}

    def toggle_eaten(self, person: Person, day: str, slot: SlotType) -> bool:
        """Flip the eaten flag of a slot; returns the new value."""
        state = self.store.load_state()
        daily = self._daily(state.profile(person).plan, person, day)
        details = self._details(daily, slot)
        details.eaten = not details.eaten
        self.store.save_state(state)
        return details.eaten

    def rate_meal(self, person: Person, day: str, slot: SlotType, rating: Rating | None) -> Rating | None:
        """Set a rating; giving the same rating again clears it. Returns the stored rating."""
        state = self.store.load_state()
        daily = self._daily(state.profile(person).plan, person, day)
        details = self._details(daily, slot)
        details.rating = None if details.rating == rating else rating
        self.store.save_state(state)
        return details.rating

    def _day(self, day: str) -> str:
        canonical = normalize_day_key(day)
        if canonical is None:
            raise InvalidRequestError(f"Unknown day '{day}'", field="day")
        return canonical

    def _daily(self, plan: WeeklyPlan, person: Person, day: str) -> DailyPlan:
        canonical = self._day(day)
        daily = plan.get(canonical)
        if daily is None:
            raise NotFoundError(f"{person.value} plan day", canonical)
        return daily

    def _details(self, daily: DailyPlan, slot: SlotType) -> MealDetails:
        details = daily.get_details(slot)
        if details is not None:
            return details
        option = self.catalog.get(daily.get_slot(slot))
        if option is None:
            raise NotFoundError("meal", daily.get_slot(slot) or slot.value)
        details = MealDetails(name=option.name, recipe=option.description)
        daily.set_details(slot, details)
        return details

    # -------------------------------------------------------------------------
    # Recipes
    # -------------------------------------------------------------------------

    async def recipe_narrative(self, name: str, description: str, person: Person) -> str:
        """Step-by-step recipe text; a fixed friendly message when no provider answers."""
        state = self.store.load_state()
        prompt = build_recipe_prompt(name, description, person, state.active_offers)
        try:
            text = await self.engine.invoke_pool(prompt, Pool.CHEF, call_site="recipe")
        except (AllProvidersExhausted, ProviderAuthError) as e:
            logger.error(f"Recipe generation failed for {name!r}: {e}")
            return RECIPE_FALLBACK_TEXT
        return normalize_spacing(text)

    # -------------------------------------------------------------------------
    # Pantry & offers
    # -------------------------------------------------------------------------

    def toggle_pantry_item(self, name: str) -> list[str]:
        item = name.strip()
        if not item:
            raise InvalidRequestError("Pantry item name is empty", field="name")
        state = self.store.load_state()
        if item in state.pantry_items:
            state.pantry_items = [existing for existing in state.pantry_items if existing != item]
        else:
            state.pantry_items.append(item)
        self.store.save_state(state)
        return state.pantry_items

    def clear_offers(self) -> None:
        state = self.store.load_state()
        state.active_offers = []
        for flyer in state.flyers:
            flyer.last_sync = ""
        state.last_offer_update = None
        self.store.save_state(state)

    def merge_offers(self, offers: list[Offer]) -> int:
        """Add offers not yet present by product name; returns how many were added."""
        state = self.store.load_state()
        before = len(state.active_offers)
        state.active_offers = merge_unique(state.active_offers, offers)
        if offers:
            state.last_offer_update = datetime.now().isoformat()
        self.store.save_state(state)
        return len(state.active_offers) - before
