"""
Pytest configuration and fixtures for Menuplan tests.

Collaborators are replaced by small in-memory fakes:
- ScriptedTransport: per-provider queue of responses or exceptions
- RecordingSleep: records requested delays instead of waiting
- FixedRandom: deterministic RandomSource
- MemoryStore: AppState kept in memory, copied on every load/save
"""

import os

import pytest

# Set test environment before importing menuplan modules
os.environ["MENUPLAN_ENV"] = "development"
os.environ.pop("OLLAMA_MODEL", None)

from menuplan.catalog import Catalog, load_catalog  # noqa: E402
from menuplan.models import AppState, MealOption, Person, RecipeReference, SlotType  # noqa: E402
from menuplan.store import default_state  # noqa: E402


class ScriptedTransport:
    """Transport returning scripted results per provider; records every call."""

    def __init__(self, script: dict[str, list] | None = None):
        self.script = {provider: list(results) for provider, results in (script or {}).items()}
        self.calls: list[str] = []

    async def invoke(self, provider: str, prompt: str, *, call_site: str = "generate") -> str:
        self.calls.append(provider)
        results = self.script.get(provider)
        if not results:
            raise AssertionError(f"unexpected call to {provider}")
        result = results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class RecordingSleep:
    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class FixedRandom:
    """RandomSource that replays `values` (mod n), then keeps returning the last one."""

    def __init__(self, *values: int):
        self.values = list(values) or [0]
        self.calls = 0

    def pick(self, n: int) -> int:
        value = self.values[min(self.calls, len(self.values) - 1)]
        self.calls += 1
        return value % n


class MemoryStore:
    def __init__(self, state: AppState | None = None):
        self.state = state or default_state()
        self.saves = 0

    def load_state(self) -> AppState:
        return self.state.model_copy(deep=True)

    def save_state(self, state: AppState) -> None:
        self.saves += 1
        self.state = state.model_copy(deep=True)


class FakeSearcher:
    def __init__(self, results: dict[str, RecipeReference] | None = None):
        self.results = results or {}
        self.queries: list[str] = []

    async def search(self, name: str) -> RecipeReference | None:
        self.queries.append(name)
        return self.results.get(name)


class FakeEngine:
    """Stands in for ProviderRotationEngine at the service level."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls: list[tuple[str, str]] = []

    async def invoke_pool(self, prompt: str, pool, *, call_site: str = "generate") -> str:
        self.calls.append((pool, call_site))
        if not self.results:
            raise AssertionError("unexpected generation call")
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def catalog() -> Catalog:
    """The built-in household catalog."""
    return load_catalog()


@pytest.fixture
def legacy_catalog() -> Catalog:
    """Catalog without variant groups; owners encoded in the ids only."""
    m, j = (Person.MICHAEL,), (Person.JESSICA,)
    options = [
        MealOption(id="b_m", name="Colazione", type=SlotType.BREAKFAST, owners=m),
        MealOption(id="b_j", name="Colazione", type=SlotType.BREAKFAST, owners=j),
        MealOption(id="sam", name="Frutta", type=SlotType.SNACK_AM),
        MealOption(id="l_m_riso", name="Riso", type=SlotType.LUNCH, owners=m),
        MealOption(id="l_j_farro", name="Farro", type=SlotType.LUNCH, owners=j),
        MealOption(id="spm", name="Yogurt", type=SlotType.SNACK_PM),
        MealOption(id="d1_m_pollo", name="Grilled Chicken", type=SlotType.DINNER, owners=m),
        MealOption(id="d1_j_pollo", name="Grilled Chicken", type=SlotType.DINNER, owners=j),
        MealOption(id="d_m_tonno", name="Tonno", type=SlotType.DINNER, owners=m),
        MealOption(id="d_j_orata", name="Orata", type=SlotType.DINNER, owners=j),
    ]
    return Catalog(options)


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


class KeepOrder:
    """RandomSource under which shuffles keep the original order."""

    def pick(self, n: int) -> int:
        return n - 1
