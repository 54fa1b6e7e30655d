"""
Menuplan - Local fallback plan.

Builds a week straight from the catalog without any generation call.
Used when every provider failed or returned something unusable.
"""

import logging

from menuplan.catalog import Catalog, current_season
from menuplan.models import (
    DAYS,
    SLOTS,
    WEEKEND,
    DailyPlan,
    MealOption,
    Occasion,
    Person,
    Season,
    SlotType,
    WeeklyPlan,
)
from menuplan.randomness import RandomSource, SystemRandomSource, choice, sample

logger = logging.getLogger(__name__)

TRAINING_DAYS_PER_WEEK = 3


class LocalFallbackGenerator:
    """Random-but-valid plans from the catalog."""

    def __init__(self, catalog: Catalog, *, random_source: RandomSource | None = None):
        self.catalog = catalog
        self.random_source = random_source or SystemRandomSource()

    def generate(self, person: Person, season: Season | None = None) -> WeeklyPlan:
        season = season or current_season()
        training_days = set(sample(self.random_source, DAYS, TRAINING_DAYS_PER_WEEK))

        relatives_lunch = self._occasion(SlotType.LUNCH, Occasion.RELATIVES, person)
        social_dinner = self._occasion(SlotType.DINNER, Occasion.SOCIAL, person)

        plan: WeeklyPlan = {}
        for day in DAYS:
            training = day in training_days
            daily = DailyPlan(training=training)
            for slot in SLOTS:
                forced = None
                if slot == SlotType.LUNCH and day in WEEKEND:
                    forced = relatives_lunch
                elif slot == SlotType.DINNER and day == "Saturday":
                    forced = social_dinner
                option = forced or self._pick(slot, person, training, season)
                daily.set_slot(slot, option.id if option else "")
            plan[day] = daily

        logger.info(f"[FALLBACK] Local plan built for {person.value} (training: {sorted(training_days)})")
        return plan

    def _pick(self, slot: SlotType, person: Person, training: bool, season: Season) -> MealOption | None:
        options = self.catalog.of_type(slot, person, training=training, season=season, include_occasions=False)
        if not options:
            options = self.catalog.of_type(slot, person, include_occasions=False)
        if not options:
            return None
        return choice(self.random_source, options)

    def _occasion(self, slot: SlotType, occasion: Occasion, person: Person) -> MealOption | None:
        for option in self.catalog.of_type(slot, person):
            if option.occasion == occasion:
                return option
        return None
