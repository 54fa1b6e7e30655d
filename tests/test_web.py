"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from conftest import FakeEngine, FixedRandom, MemoryStore, RecordingSleep
from menuplan.llm import AllProvidersExhausted
from menuplan.models import DAYS, DailyPlan, Person, SyncState, SyncStatus
from menuplan.planning import PlanService
from menuplan.web.app import app
from menuplan.web.deps import get_service, get_sync_job


class FakeSyncJob:
    def __init__(self):
        self.status = SyncStatus()
        self.starts = 0

    async def start(self):
        self.starts += 1
        if self.status.state == SyncState.RUNNING:
            return False
        self.status = SyncStatus(state=SyncState.RUNNING, message="Starting offer sync...", last_update=1.0)
        return True

    def get_status(self):
        return self.status


@pytest.fixture
def memory_store() -> MemoryStore:
    store = MemoryStore()
    store.state.users[Person.JESSICA].plan = {"Monday": DailyPlan(lunch="l1_j", dinner="d1_j_pollo")}
    return store


@pytest.fixture
def service(catalog, memory_store) -> PlanService:
    return PlanService(
        memory_store,
        catalog=catalog,
        engine=FakeEngine(AllProvidersExhausted([]), AllProvidersExhausted([])),
        random_source=FixedRandom(0),
        sleep=RecordingSleep(),
        enrich_recipes=False,
    )


@pytest.fixture
def sync_job() -> FakeSyncJob:
    return FakeSyncJob()


@pytest.fixture
def client(service, sync_job):
    app.dependency_overrides[get_service] = lambda: service
    app.dependency_overrides[get_sync_job] = lambda: sync_job
    yield TestClient(app)
    app.dependency_overrides.clear()


def login(client, person="Jessica"):
    response = client.post("/api/login", json={"person": person})
    assert response.status_code == 200


class TestSession:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_requires_login(self, client):
        assert client.get("/api/plan").status_code == 401

    def test_login_sets_person(self, client):
        login(client)

        assert client.get("/api/me").json() == {"person": "Jessica"}

    def test_unknown_person_rejected(self, client):
        assert client.post("/api/login", json={"person": "Mallory"}).status_code == 422

    def test_logout(self, client):
        login(client)
        client.post("/api/logout")

        assert client.get("/api/me").status_code == 401


class TestPlanRoutes:
    def test_get_plan_is_per_person(self, client):
        login(client)

        assert client.get("/api/plan").json()["Monday"]["dinner"] == "d1_j_pollo"

        login(client, "Michael")
        assert client.get("/api/plan").json() == {}

    def test_rating_toggle(self, client, memory_store):
        login(client)

        assert client.post("/api/plan/Monday/dinner/rating", json={"rating": "up"}).json() == {"rating": "up"}
        assert client.post("/api/plan/Monday/dinner/rating", json={"rating": "up"}).json() == {"rating": None}

    def test_eaten_on_missing_day_is_404(self, client):
        login(client)

        response = client.post("/api/plan/Friday/lunch/eaten")

        assert response.status_code == 404
        assert response.json()["resource"] == "Jessica plan day"

    def test_unknown_day_is_400(self, client):
        login(client)

        response = client.post("/api/plan/Funday/lunch/eaten")

        assert response.status_code == 400
        assert response.json()["field"] == "day"

    def test_generate_uses_local_plan_without_saving(self, client, memory_store):
        login(client)

        plan = client.post("/api/plan/generate").json()

        assert list(plan) == DAYS
        assert memory_store.saves == 0

    def test_couple_commit_requires_both(self, client):
        login(client)

        response = client.post("/api/couple/commit", json={"plans": {"Michael": {}}})

        assert response.status_code == 400

    def test_couple_commit(self, client, memory_store):
        login(client)
        plans = {"Michael": {"Monday": {"dinner": "d1_m_pollo"}}, "Jessica": {"Monday": {"dinner": "d1_j_pollo"}}}

        assert client.post("/api/couple/commit", json={"plans": plans}).json() == {"success": True}
        assert memory_store.saves == 1
        assert memory_store.state.users[Person.MICHAEL].plan["Monday"].dinner == "d1_m_pollo"


class TestPantryAndOffers:
    def test_pantry_toggle(self, client):
        login(client)

        assert client.post("/api/pantry/toggle", json={"name": "Uova"}).json() == {"items": ["Uova"]}
        assert client.get("/api/pantry").json() == {"items": ["Uova"]}

    def test_add_and_clear_offers(self, client):
        login(client)

        added = client.post("/api/offers", json=[{"prodotto": "Orata", "prezzo": "9.90"}]).json()
        assert added == {"added": 1}
        assert client.get("/api/offers").json()["offers"][0]["prodotto"] == "Orata"

        client.delete("/api/offers")
        assert client.get("/api/offers").json()["offers"] == []


class TestSyncRoutes:
    def test_start_then_refused(self, client, sync_job):
        login(client)

        assert client.post("/api/sync/start").json() == {"accepted": True}
        assert client.post("/api/sync/start").json() == {"accepted": False}
        assert sync_job.starts == 2

    def test_status(self, client):
        status = client.get("/api/sync/status").json()

        assert status == {"state": "idle", "message": "", "last_update": 0.0}

    def test_start_requires_login(self, client):
        assert client.post("/api/sync/start").status_code == 401
