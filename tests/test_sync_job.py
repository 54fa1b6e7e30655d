"""Tests for the background offer sync job and its status record."""

import asyncio

import pytest

from conftest import MemoryStore, RecordingSleep
from menuplan.config import OfferStore
from menuplan.errors import FlyerFetchError
from menuplan.models import FlyerInfo, Offer, SyncState, SyncStatus
from menuplan.offers import OfferSyncJob
from menuplan.offers.sync_job import ERROR_MESSAGE, START_MESSAGE

NOW = 1_700_000_000.0
STORE = OfferStore(id="008400", name="Conad Test", url="https://www.conad.it/negozio-test")
PDF = "https://www.conad.it/assets/common/volantini/cia/2024/autunno.pdf"
PAY_PDF = "https://www.conad.it/assets/common/volantini/cia/2024/CONAD_PAY.pdf"

PAGES = {
    STORE.url: '<a href="/volantini/cia-autunno">A</a> <a href="/volantini/cia-pay">B</a> '
    '<a href="/volantini/cia-copia">C</a>',
    "https://www.conad.it/volantini/cia-autunno": f"<title>Autunno | Conad</title> {PDF}",
    "https://www.conad.it/volantini/cia-pay": f"<title>Pay | Conad</title> {PAY_PDF}",
    "https://www.conad.it/volantini/cia-copia": f"<title>Copia | Conad</title> {PDF}",
}


class FakeFlyerClient:
    def __init__(self, pages: dict[str, str], pdfs: dict[str, str]):
        self.pages = pages
        self.pdfs = pdfs
        self.pdf_requests: list[str] = []

    async def fetch_page(self, url):
        if url not in self.pages:
            raise FlyerFetchError(url, "HTTP 404")
        return self.pages[url]

    async def fetch_pdf_text(self, url):
        self.pdf_requests.append(url)
        if url not in self.pdfs:
            raise FlyerFetchError(url, "HTTP 404")
        return self.pdfs[url]


class FakeExtractor:
    def __init__(self, offers: list[Offer] | None = None):
        self.offers = offers or []
        self.texts: list[str] = []

    async def extract(self, text, store):
        self.texts.append(text)
        return [offer.model_copy(update={"negozio": store}) for offer in self.offers]


def make_job(store, *, pdf_text="x" * 300, offers=None, pages=None, sleep=None):
    return OfferSyncJob(
        store,
        FakeExtractor(offers),
        flyer_client=FakeFlyerClient(PAGES if pages is None else pages, {PDF: pdf_text}),
        offer_stores=[STORE],
        sleep=sleep or RecordingSleep(),
        clock=lambda: NOW,
        throttle=6.0,
        min_text_length=200,
        stale_after=900.0,
    )


class StatusRecordingStore(MemoryStore):
    """MemoryStore remembering every sync status it was asked to persist."""

    def __init__(self):
        super().__init__()
        self.statuses: list[SyncStatus] = []

    def save_state(self, state):
        self.statuses.append(state.sync_status.model_copy())
        super().save_state(state)


def running_store(age: float) -> MemoryStore:
    store = MemoryStore()
    store.state.sync_status = SyncStatus(state=SyncState.RUNNING, message="Reading...", last_update=NOW - age)
    return store


class TestStart:
    def test_begin_sets_running(self, store):
        assert make_job(store).try_begin() is True

        assert store.state.sync_status == SyncStatus(state=SyncState.RUNNING, message=START_MESSAGE, last_update=NOW)

    def test_refused_while_running(self):
        store = running_store(age=30)

        assert make_job(store).try_begin() is False
        assert store.saves == 0

    def test_stale_run_is_taken_over(self):
        store = running_store(age=3600)

        assert make_job(store).try_begin() is True

    @pytest.mark.parametrize("previous", [SyncState.IDLE, SyncState.SUCCESS, SyncState.ERROR])
    def test_accepted_after_finished_runs(self, previous):
        store = MemoryStore()
        store.state.sync_status = SyncStatus(state=previous, last_update=NOW)

        assert make_job(store).try_begin() is True

    def test_start_runs_in_background(self, store):
        job = make_job(store, offers=[Offer(prodotto="Orata")])

        async def start_and_poll():
            accepted = await job.start()
            while job.get_status().state == SyncState.RUNNING:
                await asyncio.sleep(0)
            return accepted

        assert asyncio.run(start_and_poll()) is True
        assert job.get_status().state == SyncState.SUCCESS


class TestRun:
    def test_offers_replace_previous_ones(self, store):
        store.state.active_offers = [Offer(prodotto="Vecchia offerta")]
        sleep = RecordingSleep()
        job = make_job(store, offers=[Offer(prodotto="Orata")], sleep=sleep)
        job.try_begin()

        outcome = asyncio.run(job.run())

        assert [offer.prodotto for offer in outcome.offers] == ["Orata"]
        assert [offer.prodotto for offer in store.state.active_offers] == ["Orata"]
        assert store.state.active_offers[0].negozio == "Conad Test"
        assert store.state.last_offer_update is not None
        assert [flyer.url for flyer in store.state.flyers] == [PDF]
        assert store.state.flyers[0].label == "Conad Test - Autunno"
        assert store.state.flyers[0].store_id == "008400"
        assert store.state.sync_status.state == SyncState.SUCCESS
        # a single document has nothing to be spaced from
        assert sleep.delays == []

    def test_progress_milestones_are_persisted(self):
        store = StatusRecordingStore()
        job = make_job(store, offers=[Offer(prodotto="Orata"), Offer(prodotto="Zucca")])
        job.try_begin()

        asyncio.run(job.run())

        states = [status.state for status in store.statuses]
        messages = [status.message for status in store.statuses]
        assert states[:-1] == [SyncState.RUNNING] * (len(states) - 1)
        assert states[-1] == SyncState.SUCCESS
        assert messages[:4] == [
            START_MESSAGE,
            "Checking Conad Test...",
            "Reading Conad Test - Autunno...",
            "Conad Test - Autunno: 2 offers",
        ]
        assert messages[-1] == "Sync complete: 1 flyers, 2 offers."

    def test_throttle_only_between_documents(self):
        second_pdf = "https://www.conad.it/assets/common/volantini/cia/2024/freschi.pdf"
        pages = {
            STORE.url: '<a href="/volantini/cia-autunno">A</a> <a href="/volantini/cia-freschi">B</a>',
            "https://www.conad.it/volantini/cia-autunno": PAGES["https://www.conad.it/volantini/cia-autunno"],
            "https://www.conad.it/volantini/cia-freschi": f"<title>Freschi | Conad</title> {second_pdf}",
        }
        sleep = RecordingSleep()
        store = MemoryStore()
        job = OfferSyncJob(
            store,
            FakeExtractor([Offer(prodotto="Orata")]),
            flyer_client=FakeFlyerClient(pages, {PDF: "x" * 300, second_pdf: "y" * 300}),
            offer_stores=[STORE],
            sleep=sleep,
            clock=lambda: NOW,
            throttle=6.0,
            min_text_length=200,
        )
        job.try_begin()

        asyncio.run(job.run())

        assert len(job.extractor.texts) == 2
        assert sleep.delays == [6.0]

    def test_irrelevant_and_duplicate_flyers_skipped(self, store):
        job = make_job(store, offers=[Offer(prodotto="Orata")])
        job.try_begin()

        asyncio.run(job.run())

        assert job.flyer_client.pdf_requests == [PDF]

    def test_no_offers_keeps_previous_ones(self, store):
        store.state.active_offers = [Offer(prodotto="Zucca")]
        job = make_job(store, offers=[])
        job.try_begin()

        asyncio.run(job.run())

        assert [offer.prodotto for offer in store.state.active_offers] == ["Zucca"]
        assert store.state.sync_status.state == SyncState.SUCCESS
        assert store.state.sync_status.message == "No new valid offers found; previous offers kept."

    def test_image_only_flyer_not_extracted(self, store):
        sleep = RecordingSleep()
        job = make_job(store, pdf_text="pagina 1", offers=[Offer(prodotto="Orata")], sleep=sleep)
        job.try_begin()

        asyncio.run(job.run())

        assert job.extractor.texts == []
        assert sleep.delays == []
        assert store.state.sync_status.state == SyncState.SUCCESS

    def test_store_page_failure_is_an_error(self, store):
        job = make_job(store, pages={})
        job.try_begin()

        assert asyncio.run(job.run()) is None
        assert store.state.sync_status.state == SyncState.ERROR
        assert store.state.sync_status.message == ERROR_MESSAGE

    def test_job_keeps_plans_saved_meanwhile(self, store):
        job = make_job(store, offers=[Offer(prodotto="Orata")])
        job.try_begin()
        store.state.pantry_items = ["Uova"]

        asyncio.run(job.run())

        assert store.state.pantry_items == ["Uova"]


class TestProcessFlyerUrl:
    def test_offers_merged_into_known_flyer(self, store):
        store.state.active_offers = [Offer(prodotto="Orata")]
        store.state.flyers = [FlyerInfo(url=PDF, last_sync="2024-10-01T10:00:00", label="Conad Test - Autunno")]
        job = make_job(store, offers=[Offer(prodotto="orata"), Offer(prodotto="Zucca")])

        added = asyncio.run(job.process_flyer_url(PDF))

        assert added == 1
        assert [offer.prodotto for offer in store.state.active_offers] == ["Orata", "Zucca"]
        assert store.state.active_offers[1].negozio == "Conad Test - Autunno"
        assert store.state.flyers[0].last_sync != "2024-10-01T10:00:00"

    def test_unknown_flyer_is_recorded(self, store):
        job = make_job(store, offers=[Offer(prodotto="Zucca")])

        assert asyncio.run(job.process_flyer_url(PDF)) == 1
        assert store.state.flyers[0].url == PDF
        assert store.state.flyers[0].label == "Volantino"

    def test_download_failure_propagates(self, store):
        with pytest.raises(FlyerFetchError):
            asyncio.run(make_job(store).process_flyer_url("https://www.conad.it/missing.pdf"))
