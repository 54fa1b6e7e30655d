"""
Menuplan - Store offers.

Flyer discovery, offer extraction and the background sync job.
"""

from menuplan.offers.extraction import OfferExtractor
from menuplan.offers.flyers import FlyerClient
from menuplan.offers.merge import merge_unique
from menuplan.offers.sync_job import OfferSyncJob, SyncOutcome

__all__ = ["FlyerClient", "OfferExtractor", "OfferSyncJob", "SyncOutcome", "merge_unique"]
