"""
Menuplan - Plan pipeline.

Sanitizer, local fallback, couple sync and recipe enrichment, composed
by PlanService.
"""

from menuplan.planning.couple_sync import CoupleSyncEngine, CoupleSyncResult, shared_slots
from menuplan.planning.enricher import RecipeEnricher
from menuplan.planning.fallback import LocalFallbackGenerator
from menuplan.planning.sanitizer import TRAINING_SCHEDULE, PlanSanitizer, normalize_day_key
from menuplan.planning.service import PlanService

__all__ = [
    "CoupleSyncEngine",
    "CoupleSyncResult",
    "LocalFallbackGenerator",
    "PlanSanitizer",
    "PlanService",
    "RecipeEnricher",
    "TRAINING_SCHEDULE",
    "normalize_day_key",
    "shared_slots",
]
