"""
Menuplan - Plan Sanitizer.

Forces untrusted plan data into a valid WeeklyPlan for one person:
1. Day keys normalized (English/Italian, any case, with or without accents)
2. Missing days added as empty placeholders
3. Training flags forced from the person's fixed schedule
4. Each slot validated against the catalog and repaired if needed:
   variant group -> same name -> id-marker swap -> random of slot type
5. At most one relatives lunch and one social dinner per weekend

Never raises. Every slot of the result resolves to a catalog entry the
person is entitled to, unless the catalog has no entry of that slot type
for them at all.
"""

import logging
import unicodedata
from typing import Any

from pydantic import ValidationError

from menuplan.catalog import Catalog, current_season
from menuplan.models import (
    DAYS,
    SLOTS,
    WEEKDAYS,
    WEEKEND,
    DailyPlan,
    MealDetails,
    MealOption,
    Occasion,
    Person,
    Season,
    SlotType,
    WeeklyPlan,
)
from menuplan.randomness import RandomSource, SystemRandomSource, choice

logger = logging.getLogger(__name__)

DAY_ALIASES: dict[str, str] = {
    "monday": "Monday", "lunedi": "Monday",
    "tuesday": "Tuesday", "martedi": "Tuesday",
    "wednesday": "Wednesday", "mercoledi": "Wednesday",
    "thursday": "Thursday", "giovedi": "Thursday",
    "friday": "Friday", "venerdi": "Friday",
    "saturday": "Saturday", "sabato": "Saturday",
    "sunday": "Sunday", "domenica": "Sunday",
}

# Fixed training days; model-provided flags are never trusted.
TRAINING_SCHEDULE: dict[Person, frozenset[str]] = {
    Person.MICHAEL: frozenset({"Tuesday", "Thursday"}),
    Person.JESSICA: frozenset(),
}


def normalize_day_key(key: Any) -> str | None:
    """Canonical day name for an arbitrary key, or None if unrecognized."""
    if not isinstance(key, str):
        return None
    folded = unicodedata.normalize("NFKD", key.strip().casefold())
    ascii_key = "".join(ch for ch in folded if not unicodedata.combining(ch))
    return DAY_ALIASES.get(ascii_key)


def _coerce_id(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value)


def _coerce_details(value: Any) -> MealDetails | None:
    if isinstance(value, MealDetails):
        return value
    if not isinstance(value, dict):
        return None
    try:
        return MealDetails.model_validate(value)
    except ValidationError:
        return None


class PlanSanitizer:
    """Repairs generated plans against a catalog."""

    def __init__(
        self,
        catalog: Catalog,
        *,
        random_source: RandomSource | None = None,
        training_schedule: dict[Person, frozenset[str]] | None = None,
    ):
        self.catalog = catalog
        self.random_source = random_source or SystemRandomSource()
        self.training_schedule = training_schedule or TRAINING_SCHEDULE

    def sanitize(self, raw_plan: Any, person: Person, season: Season | None = None) -> WeeklyPlan:
        """Return a complete, entitlement-respecting plan for person."""
        season = season or current_season()
        days = self._normalize_days(raw_plan)

        plan: WeeklyPlan = {}
        for day in DAYS:
            raw_day = days.get(day)
            if not isinstance(raw_day, dict):
                if raw_day is not None:
                    logger.info(f"[SANITIZER] {day}: discarding non-object day value")
                raw_day = {}
            plan[day] = self._sanitize_day(day, raw_day, person, season)
        self._cap_weekend_occasions(plan, person, season)
        return plan

    def _normalize_days(self, raw_plan: Any) -> dict[str, Any]:
        if not isinstance(raw_plan, dict):
            logger.warning(f"[SANITIZER] Plan is not an object ({type(raw_plan).__name__}); rebuilding from scratch")
            return {}

        days: dict[str, Any] = {}
        for key, value in raw_plan.items():
            day = normalize_day_key(key)
            if day is None:
                logger.info(f"[SANITIZER] Dropping unrecognized day key {key!r}")
                continue
            if isinstance(value, DailyPlan):
                value = value.model_dump()
            # first occurrence wins when aliases collide
            days.setdefault(day, value)
        return days

    def _sanitize_day(self, day: str, raw_day: dict[str, Any], person: Person, season: Season) -> DailyPlan:
        training = day in self.training_schedule.get(person, frozenset())
        daily = DailyPlan(training=training)

        for slot in SLOTS:
            meal_id = _coerce_id(raw_day.get(slot.value))
            details = _coerce_details(raw_day.get(f"{slot.value}_details"))
            option = self._resolve(day, slot, meal_id, person, training, season)
            daily.set_slot(slot, option.id if option is not None else "")
            # details stay as generated even when the id was swapped
            daily.set_details(slot, details)
        return daily

    def _resolve(
        self,
        day: str,
        slot: SlotType,
        meal_id: str,
        person: Person,
        training: bool,
        season: Season,
    ) -> MealOption | None:
        """Pick the catalog entry for one slot, repairing as needed."""
        option = self.catalog.get(meal_id) if meal_id else None

        if option is None and meal_id:
            swapped = self.catalog.swap_marker(meal_id, person)
            if swapped and swapped in self.catalog:
                logger.info(f"[SANITIZER] {day}/{slot.value}: unknown id {meal_id} -> {swapped} (marker swap)")
                option = self.catalog.get(swapped)

        if option is not None and option.type != slot:
            logger.info(f"[SANITIZER] {day}/{slot.value}: {option.id} is a {option.type.value} option")
            option = None

        if option is not None and not option.is_owned_by(person):
            option = self._sibling(day, slot, option, person)

        if option is not None and option.occasion is not None and day in WEEKDAYS:
            logger.info(f"[SANITIZER] {day}/{slot.value}: removing weekday occasion {option.id}")
            return self._random_of_type(day, slot, person, training, season, include_occasions=False)

        if option is None:
            if meal_id:
                logger.info(f"[SANITIZER] {day}/{slot.value}: invalid id {meal_id!r}, picking a random option")
            return self._random_of_type(day, slot, person, training, season, include_occasions=day not in WEEKDAYS)

        return option

    def _cap_weekend_occasions(self, plan: WeeklyPlan, person: Person, season: Season) -> None:
        """At most one occasion of each kind per slot over the weekend; extras are re-picked."""
        seen: set[tuple[SlotType, Occasion]] = set()
        for day in WEEKEND:
            daily = plan[day]
            for slot in (SlotType.LUNCH, SlotType.DINNER):
                option = self.catalog.get(daily.get_slot(slot))
                if option is None or option.occasion is None:
                    continue
                if (slot, option.occasion) not in seen:
                    seen.add((slot, option.occasion))
                    continue
                logger.info(f"[SANITIZER] {day}/{slot.value}: extra {option.occasion.value} occasion {option.id}")
                replacement = self._random_of_type(
                    day, slot, person, daily.training, season, include_occasions=False
                )
                daily.set_slot(slot, replacement.id if replacement is not None else "")
                daily.set_details(slot, None)

    def _sibling(self, day: str, slot: SlotType, option: MealOption, person: Person) -> MealOption | None:
        """Entitled counterpart of an option that belongs to the other person."""
        for strategy, candidate in (
            ("variant group", self.catalog.variant_for(option, person)),
            ("same name", self.catalog.same_name_for(option, person)),
            ("marker swap", self.catalog.swapped_option_for(option.id, person)),
        ):
            if candidate is not None and candidate.type == slot:
                logger.info(
                    f"[SANITIZER] {day}/{slot.value}: {option.id} not owned by {person.value} "
                    f"-> {candidate.id} ({strategy})"
                )
                return candidate
        return None

    def _random_of_type(
        self,
        day: str,
        slot: SlotType,
        person: Person,
        training: bool,
        season: Season,
        *,
        include_occasions: bool,
    ) -> MealOption | None:
        """Uniform pick among entitled options of the slot type, preferring ones that fit the day."""
        candidates = self.catalog.of_type(
            slot, person, training=training, season=season, include_occasions=include_occasions
        )
        if not candidates:
            candidates = self.catalog.of_type(slot, person, include_occasions=include_occasions)
        if not candidates:
            logger.error(f"[SANITIZER] {day}/{slot.value}: catalog has no options for {person.value}")
            return None
        picked = choice(self.random_source, candidates)
        logger.debug(f"[SANITIZER] {day}/{slot.value}: random pick {picked.id}")
        return picked
