"""
Menuplan - Offer sync job.

Long-running refresh of the active offers from the configured stores,
observable through the persisted SyncStatus record:

    idle/success/error -> running -> success | error

`start()` flips the status to running and returns at once; the work runs
as a detached asyncio task and reports progress by rewriting the status
message. Clients poll `get_status()` until the state leaves running.

A start is refused while another run is in progress, unless that run
stopped reporting for longer than the staleness window.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from menuplan.config import OfferStore, settings
from menuplan.errors import FlyerFetchError
from menuplan.llm.rotation import Sleep
from menuplan.models import FlyerInfo, Offer, SyncState, SyncStatus
from menuplan.offers.extraction import OfferExtractor
from menuplan.offers.flyers import (
    FlyerClient,
    find_pdf_url,
    find_viewer_links,
    is_relevant_pdf,
    parse_flyer_title,
)
from menuplan.offers.merge import merge_unique
from menuplan.store import StateStore

logger = logging.getLogger(__name__)

START_MESSAGE = "Starting offer sync..."
ERROR_MESSAGE = "Offer sync failed. Please try again later."


@dataclass
class SyncOutcome:
    flyers: list[FlyerInfo] = field(default_factory=list)
    offers: list[Offer] = field(default_factory=list)


class OfferSyncJob:
    """Background refresh of store offers."""

    def __init__(
        self,
        store: StateStore,
        extractor: OfferExtractor,
        *,
        flyer_client: FlyerClient | None = None,
        offer_stores: list[OfferStore] | None = None,
        sleep: Sleep = asyncio.sleep,
        clock: Callable[[], float] = time.time,
        throttle: float | None = None,
        min_text_length: int | None = None,
        stale_after: float | None = None,
    ):
        self.store = store
        self.extractor = extractor
        self.flyer_client = flyer_client or FlyerClient()
        self.offer_stores = offer_stores if offer_stores is not None else list(settings.offer_stores)
        self.sleep = sleep
        self.clock = clock
        self.throttle = throttle if throttle is not None else settings.offer_throttle_seconds
        self.min_text_length = min_text_length if min_text_length is not None else settings.offer_min_text_length
        self.stale_after = stale_after if stale_after is not None else settings.sync_stale_after_seconds
        self._tasks: set[asyncio.Task] = set()

    # -------------------------------------------------------------------------
    # Polling contract
    # -------------------------------------------------------------------------

    def get_status(self) -> SyncStatus:
        return self.store.load_state().sync_status

    async def start(self) -> bool:
        """Flip to running and launch the job in the background. False if a run is already active."""
        if not self.try_begin():
            return False
        task = asyncio.create_task(self.run())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return True

    def try_begin(self) -> bool:
        """Check-and-set the status record to running."""
        state = self.store.load_state()
        status = state.sync_status
        if status.state == SyncState.RUNNING:
            age = self.clock() - status.last_update
            if age < self.stale_after:
                logger.info(f"[SYNC] Start refused: a run is in progress (last update {age:.0f}s ago)")
                return False
            logger.warning(f"[SYNC] Previous run silent for {age:.0f}s; taking over")

        state.sync_status = SyncStatus(state=SyncState.RUNNING, message=START_MESSAGE, last_update=self.clock())
        self.store.save_state(state)
        return True

    async def run(self) -> SyncOutcome | None:
        """Job body; the status must already be running. Never raises."""
        try:
            outcome = await self._sync()
        except Exception:
            logger.exception("[SYNC] Offer sync failed")
            self._set_status(SyncState.ERROR, ERROR_MESSAGE)
            return None
        return outcome

    # -------------------------------------------------------------------------
    # Work
    # -------------------------------------------------------------------------

    async def _sync(self) -> SyncOutcome:
        outcome = SyncOutcome()
        seen_pdfs: set[str] = set()
        extracted = 0

        for offer_store in self.offer_stores:
            self._progress(f"Checking {offer_store.name}...")
            page = await self.flyer_client.fetch_page(offer_store.url)
            links = find_viewer_links(page)
            logger.info(f"[SYNC] {offer_store.name}: {len(links)} flyer links")

            for viewer_url in links:
                flyer = await self._discover_flyer(offer_store, viewer_url)
                if flyer is None or flyer.url in seen_pdfs:
                    continue
                seen_pdfs.add(flyer.url)
                outcome.flyers.append(flyer)

                self._progress(f"Reading {flyer.label}...")
                offers = await self._read_flyer(flyer, offer_store.name, pause=extracted > 0)
                if offers is None:
                    continue
                extracted += 1
                outcome.offers.extend(offers)
                self._progress(f"{flyer.label}: {len(offers)} offers")

        self._finish(outcome)
        return outcome

    async def _discover_flyer(self, offer_store: OfferStore, viewer_url: str) -> FlyerInfo | None:
        try:
            viewer = await self.flyer_client.fetch_page(viewer_url)
        except FlyerFetchError as e:
            logger.warning(f"[SYNC] {e}")
            return None

        pdf_url = find_pdf_url(viewer)
        if pdf_url is None:
            return None
        if not is_relevant_pdf(pdf_url):
            logger.info(f"[SYNC] Skipping irrelevant flyer {pdf_url}")
            return None

        return FlyerInfo(
            url=pdf_url,
            last_sync=datetime.now().isoformat(),
            label=f"{offer_store.name} - {parse_flyer_title(viewer)}",
            store_id=offer_store.id,
        )

    async def _read_flyer(self, flyer: FlyerInfo, store_name: str, *, pause: bool = False) -> list[Offer] | None:
        """
        Offers of one flyer, or None when the document is unusable.

        With `pause`, waits the throttle before extracting so that consecutive
        extractions are spaced out; nothing waits after the last one.
        """
        try:
            text = await self.flyer_client.fetch_pdf_text(flyer.url)
        except FlyerFetchError as e:
            logger.warning(f"[SYNC] {e}")
            return None

        if len(text) < self.min_text_length:
            logger.warning(f"[SYNC] Almost no text in {flyer.url} ({len(text)} chars); image-only flyer?")
            return None

        if pause:
            await self.sleep(self.throttle)
        return await self.extractor.extract(text, store_name)

    def _finish(self, outcome: SyncOutcome) -> None:
        # reload: plans may have been saved while the job was running
        state = self.store.load_state()
        state.flyers = outcome.flyers

        if outcome.offers:
            state.active_offers = outcome.offers
            state.last_offer_update = datetime.now().isoformat()
            message = f"Sync complete: {len(outcome.flyers)} flyers, {len(outcome.offers)} offers."
        else:
            message = "No new valid offers found; previous offers kept."

        state.sync_status = SyncStatus(state=SyncState.SUCCESS, message=message, last_update=self.clock())
        self.store.save_state(state)
        logger.info(f"[SYNC] {message}")

    def _progress(self, message: str) -> None:
        self._set_status(SyncState.RUNNING, message)

    def _set_status(self, sync_state: SyncState, message: str) -> None:
        state = self.store.load_state()
        state.sync_status = SyncStatus(state=sync_state, message=message, last_update=self.clock())
        self.store.save_state(state)

    # -------------------------------------------------------------------------
    # Manual ingestion
    # -------------------------------------------------------------------------

    async def process_flyer_url(self, url: str) -> int:
        """
        Ingest one flyer PDF by URL and merge its offers into the active ones.

        Returns how many new offers were added. Raises FlyerFetchError when
        the document cannot be downloaded or read.
        """
        text = await self.flyer_client.fetch_pdf_text(url)

        state = self.store.load_state()
        known = next((flyer for flyer in state.flyers if flyer.url == url), None)
        label = known.label if known is not None and known.label else "Volantino"

        offers = await self.extractor.extract(text, label)
        if not offers:
            logger.info(f"[SYNC] No offers found in {url}")
            return 0

        state = self.store.load_state()
        now = datetime.now().isoformat()
        known = next((flyer for flyer in state.flyers if flyer.url == url), None)
        if known is not None:
            known.last_sync = now
        else:
            state.flyers.append(FlyerInfo(url=url, last_sync=now, label=label))

        before = len(state.active_offers)
        state.active_offers = merge_unique(state.active_offers, offers)
        state.last_offer_update = now
        self.store.save_state(state)
        return len(state.active_offers) - before
