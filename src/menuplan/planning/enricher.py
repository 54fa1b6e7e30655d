"""
Menuplan - Recipe enrichment.

Attaches a recipe link and picture to every lunch and dinner of a plan.
Cache first, then a live search bounded by a timeout. A failed or slow
lookup simply leaves the slot without a recipe.
"""

import asyncio
import logging
from typing import Protocol

from menuplan.catalog import Catalog
from menuplan.config import settings
from menuplan.models import DAYS, MealDetails, RecipeReference, SlotType, WeeklyPlan
from menuplan.llm.rotation import Sleep

logger = logging.getLogger(__name__)

ENRICHED_SLOTS = (SlotType.LUNCH, SlotType.DINNER)


class RecipeCache(Protocol):
    def find(self, name: str) -> RecipeReference | None: ...

    def store_reference(self, name: str, reference: RecipeReference) -> None: ...


class RecipeSearcher(Protocol):
    async def search(self, name: str) -> RecipeReference | None: ...


class RecipeEnricher:
    def __init__(
        self,
        catalog: Catalog,
        searcher: RecipeSearcher,
        *,
        cache: RecipeCache | None = None,
        sleep: Sleep = asyncio.sleep,
        timeout: float | None = None,
        pause: float | None = None,
    ):
        self.catalog = catalog
        self.searcher = searcher
        self.cache = cache
        self.sleep = sleep
        self.timeout = timeout if timeout is not None else settings.recipe_lookup_timeout_seconds
        self.pause = pause if pause is not None else settings.recipe_lookup_pause_seconds

    async def enrich(self, plan: WeeklyPlan) -> int:
        """Fill recipe links in place; returns how many slots received one."""
        found = 0
        live_lookups = 0

        for day in DAYS:
            daily = plan.get(day)
            if daily is None:
                continue

            for slot in ENRICHED_SLOTS:
                option = self.catalog.get(daily.get_slot(slot))
                if option is None or option.occasion is not None:
                    continue

                details = daily.get_details(slot)
                if details is None:
                    details = MealDetails(name=option.name, recipe=option.description)
                    daily.set_details(slot, details)
                if details.recipe_url:
                    continue

                name = details.name or option.name
                reference = self._cached(name)
                if reference is None:
                    if live_lookups:
                        await self.sleep(self.pause)
                    live_lookups += 1
                    reference = await self._search(name)
                    if reference is not None:
                        self._remember(name, reference)

                if reference is None:
                    logger.info(f"[RECIPE] Not found for {name!r}")
                    continue

                details.recipe_url = reference.url
                details.image_url = reference.image_url
                found += 1
                logger.info(f"[RECIPE] {day}/{slot.value} {name!r}: {reference.url}")

        return found

    def _cached(self, name: str) -> RecipeReference | None:
        if self.cache is None:
            return None
        return self.cache.find(name)

    def _remember(self, name: str, reference: RecipeReference) -> None:
        if self.cache is None:
            return
        try:
            self.cache.store_reference(name, reference)
        except Exception as e:
            logger.warning(f"[RECIPE] Could not cache {name!r}: {e}")

    async def _search(self, name: str) -> RecipeReference | None:
        try:
            return await asyncio.wait_for(self.searcher.search(name), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"[RECIPE] Lookup for {name!r} timed out after {self.timeout}s")
        except Exception as e:
            logger.warning(f"[RECIPE] Lookup for {name!r} failed: {e}")
        return None
