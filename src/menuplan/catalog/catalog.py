"""
Menuplan - Meal catalog.

Read-only index over the configured MealOptions. Besides plain lookups it
answers the "same dish, other person" question used by plan repair and by
couple sync:
- explicit variant groups (preferred)
- same display name
- legacy id-suffix swap (`d1_m_pollo` <-> `d1_j_pollo`) for catalogs
  that encode the owner in the id and carry no groups
"""

import json
import logging
import re
from pathlib import Path

from menuplan.models import MealOption, Person, Season, SlotType

logger = logging.getLogger(__name__)

_MARKER_PATTERN = r"_{marker}(?=$|_)"


class CatalogIncompleteError(Exception):
    """A person has no entitled option for a slot type."""

    def __init__(self, missing: list[tuple[Person, SlotType]]):
        self.missing = missing
        detail = ", ".join(f"{person.value}/{slot.value}" for person, slot in missing)
        super().__init__(f"Catalog has no options for: {detail}")


class Catalog:
    """Immutable catalog of meal options."""

    def __init__(self, options: list[MealOption], *, legacy_suffix_matching: bool = True):
        self._options = tuple(options)
        self._by_id = {option.id: option for option in self._options}
        self.legacy_suffix_matching = legacy_suffix_matching

    def __iter__(self):
        return iter(self._options)

    def __len__(self) -> int:
        return len(self._options)

    def __contains__(self, meal_id: object) -> bool:
        return meal_id in self._by_id

    def get(self, meal_id: str) -> MealOption | None:
        return self._by_id.get(meal_id)

    def options_for(self, person: Person) -> list[MealOption]:
        """The person's private options plus shared ones."""
        return [option for option in self._options if option.is_owned_by(person)]

    def of_type(
        self,
        slot: SlotType,
        person: Person,
        *,
        training: bool | None = None,
        season: Season | None = None,
        include_occasions: bool = True,
    ) -> list[MealOption]:
        """Options of a slot type the person may eat, optionally filtered by day fit."""
        result = []
        for option in self._options:
            if option.type != slot or not option.is_owned_by(person):
                continue
            if not include_occasions and option.occasion is not None:
                continue
            if training is not None and season is not None and not option.fits(training, season):
                continue
            result.append(option)
        return result

    # -------------------------------------------------------------------------
    # Cross-person matching
    # -------------------------------------------------------------------------

    def variant_for(self, option: MealOption, person: Person) -> MealOption | None:
        """Option of the same variant group owned by person."""
        if not option.variant_group:
            return None
        for candidate in self._options:
            if (
                candidate.variant_group == option.variant_group
                and candidate.type == option.type
                and candidate.is_owned_by(person)
            ):
                return candidate
        return None

    def same_name_for(self, option: MealOption, person: Person) -> MealOption | None:
        """Option with the same display name (case-insensitive) owned by person."""
        name = option.name.strip().casefold()
        for candidate in self._options:
            if candidate.name.strip().casefold() == name and candidate.is_owned_by(person):
                return candidate
        return None

    def swap_marker(self, meal_id: str, person: Person) -> str | None:
        """
        Rewrite the other person's id marker into person's marker.

        Returns None when suffix matching is disabled or the id carries no
        marker of the other person.
        """
        if not self.legacy_suffix_matching:
            return None
        pattern = _MARKER_PATTERN.format(marker=person.other.marker)
        swapped, count = re.subn(pattern, f"_{person.marker}", meal_id, count=1)
        return swapped if count else None

    def swapped_option_for(self, meal_id: str, person: Person) -> MealOption | None:
        """Catalog entry reached by swapping the marker, if person owns it."""
        swapped = self.swap_marker(meal_id, person)
        if swapped is None:
            return None
        option = self.get(swapped)
        if option is not None and option.is_owned_by(person):
            return option
        return None

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate_complete(self, persons: list[Person] | None = None) -> None:
        """Raise CatalogIncompleteError if any person lacks options for a slot type."""
        missing = [
            (person, slot)
            for person in persons or list(Person)
            for slot in SlotType
            if not self.of_type(slot, person)
        ]
        if missing:
            raise CatalogIncompleteError(missing)


def load_catalog(path: Path | None = None, *, legacy_suffix_matching: bool = True) -> Catalog:
    """Load the catalog from a JSON file, or the built-in defaults when no path is given."""
    if path is None:
        from menuplan.catalog.defaults import DEFAULT_OPTIONS

        options = DEFAULT_OPTIONS
    else:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        options = [MealOption.model_validate(item) for item in raw]
        logger.info(f"Loaded {len(options)} catalog options from {path}")
    return Catalog(options, legacy_suffix_matching=legacy_suffix_matching)
