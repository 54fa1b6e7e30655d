"""Tests for the local (no generation) plan builder."""

import pytest

from conftest import FixedRandom
from menuplan.models import DAYS, SLOTS, WEEKDAYS, Occasion, Person, Season, SlotType
from menuplan.planning import LocalFallbackGenerator


class TestLocalFallback:
    @pytest.mark.parametrize("person", list(Person))
    @pytest.mark.parametrize("seed", [0, 1, 5])
    def test_plan_is_complete_and_entitled(self, catalog, person, seed):
        plan = LocalFallbackGenerator(catalog, random_source=FixedRandom(seed)).generate(person, Season.SUMMER)

        assert list(plan) == DAYS
        for day in DAYS:
            for slot in SLOTS:
                option = catalog.get(plan[day].get_slot(slot))
                assert option is not None
                assert option.type == slot
                assert option.is_owned_by(person)

    def test_three_training_days(self, catalog):
        plan = LocalFallbackGenerator(catalog, random_source=FixedRandom(2)).generate(Person.MICHAEL, Season.WINTER)

        assert sum(1 for day in DAYS if plan[day].training) == 3

    def test_fixed_special_slots(self, catalog):
        plan = LocalFallbackGenerator(catalog, random_source=FixedRandom(0)).generate(Person.JESSICA, Season.WINTER)

        assert plan["Saturday"].lunch == "l_suoceri"
        assert plan["Sunday"].lunch == "l_suoceri"
        assert catalog.get(plan["Saturday"].dinner).occasion == Occasion.SOCIAL
        assert catalog.get(plan["Sunday"].dinner).occasion is None

    def test_weekdays_have_no_occasions(self, catalog):
        plan = LocalFallbackGenerator(catalog, random_source=FixedRandom(4)).generate(Person.MICHAEL, Season.WINTER)

        for day in WEEKDAYS:
            assert catalog.get(plan[day].lunch).occasion is None
            assert catalog.get(plan[day].dinner).occasion is None

    def test_training_days_get_training_snacks(self, catalog):
        plan = LocalFallbackGenerator(catalog, random_source=FixedRandom(0)).generate(Person.MICHAEL, Season.WINTER)

        for day in DAYS:
            expected = "sam2" if plan[day].training else "sam1"
            assert plan[day].get_slot(SlotType.SNACK_AM) == expected

    def test_without_occasion_entries_nothing_is_forced(self, legacy_catalog):
        plan = LocalFallbackGenerator(legacy_catalog, random_source=FixedRandom(0)).generate(
            Person.MICHAEL, Season.WINTER
        )

        assert plan["Saturday"].lunch == "l_m_riso"
        assert plan["Saturday"].dinner in {"d1_m_pollo", "d_m_tonno"}
