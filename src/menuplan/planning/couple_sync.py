"""
Menuplan - Couple Sync.

Makes two independently generated plans agree on the meals eaten together:
every dinner, plus lunch on Saturday and Sunday. Plan A is the reference;
B's shared slots are rewritten to B's version of A's dish.

Matching order for each shared slot:
0. occasion entries (weekend lunch only): copied verbatim
1. variant group
2. id-marker swap
3. identical id when A's entry is shared
4. same display name
A matched slot always takes A's display record (or a fresh one built from
the catalog entry); eaten, rating and photo stay unset on B's copy.
A slot with no match is left as generated for B.
"""

import logging
from dataclasses import dataclass, field

from menuplan.catalog import Catalog
from menuplan.models import DAYS, WEEKEND, MealDetails, MealOption, Person, SlotType, WeeklyPlan

logger = logging.getLogger(__name__)


@dataclass
class CoupleSyncResult:
    plan_a: WeeklyPlan
    plan_b: WeeklyPlan
    synced: list[tuple[str, SlotType]] = field(default_factory=list)
    unsynced: list[tuple[str, SlotType]] = field(default_factory=list)


def shared_slots(day: str) -> list[SlotType]:
    """Slots both persons eat together on a given day."""
    if day in WEEKEND:
        return [SlotType.LUNCH, SlotType.DINNER]
    return [SlotType.DINNER]


class CoupleSyncEngine:
    """Reconciles two sanitized plans on their shared slots."""

    def __init__(
        self,
        catalog: Catalog,
        *,
        person_a: Person = Person.MICHAEL,
        person_b: Person = Person.JESSICA,
    ):
        self.catalog = catalog
        self.person_a = person_a
        self.person_b = person_b

    def reconcile(self, plan_a: WeeklyPlan, plan_b: WeeklyPlan) -> tuple[WeeklyPlan, WeeklyPlan]:
        """Return (A, B) with B's shared slots aligned to A."""
        result = self.reconcile_with_report(plan_a, plan_b)
        return result.plan_a, result.plan_b

    def reconcile_with_report(self, plan_a: WeeklyPlan, plan_b: WeeklyPlan) -> CoupleSyncResult:
        synced_b = {day: daily.model_copy(deep=True) for day, daily in plan_b.items()}
        result = CoupleSyncResult(plan_a=plan_a, plan_b=synced_b)

        for day in DAYS:
            day_a = plan_a.get(day)
            day_b = synced_b.get(day)
            if day_a is None or day_b is None:
                continue

            for slot in shared_slots(day):
                meal_id = day_a.get_slot(slot)
                if not meal_id:
                    continue

                match = self._match(meal_id, slot)
                if match is None:
                    logger.info(f"[SYNC] {day}/{slot.value}: no {self.person_b.value} match for {meal_id}; left independent")
                    result.unsynced.append((day, slot))
                    continue

                if day_b.get_slot(slot) != match.id:
                    logger.info(f"[SYNC] {day}/{slot.value}: {day_b.get_slot(slot) or '-'} -> {match.id}")
                day_b.set_slot(slot, match.id)
                day_b.set_details(slot, self._shared_details(day_a.get_details(slot), match))
                result.synced.append((day, slot))

        return result

    def _match(self, meal_id: str, slot: SlotType) -> MealOption | None:
        """B's counterpart of A's meal id, or None."""
        person = self.person_b
        option = self.catalog.get(meal_id)

        if option is not None and slot == SlotType.LUNCH and option.occasion is not None:
            return option

        if option is not None:
            variant = self.catalog.variant_for(option, person)
            if variant is not None and variant.type == slot:
                return variant

        swapped = self.catalog.swapped_option_for(meal_id, person)
        if swapped is not None and swapped.type == slot:
            return swapped

        if option is None:
            return None

        if option.is_shared:
            return option

        same_name = self.catalog.same_name_for(option, person)
        if same_name is not None and same_name.type == slot:
            return same_name

        return None

    @staticmethod
    def _shared_details(details_a: MealDetails | None, match: MealOption) -> MealDetails:
        """B's copy of A's display record; feedback fields stay personal."""
        if details_a is None:
            return MealDetails(name=match.name, recipe=match.description)
        return details_a.model_copy(deep=True, update={"eaten": False, "rating": None, "photo_url": None})
