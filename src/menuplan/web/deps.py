"""
FastAPI dependencies.

The person making a request comes from the session cookie set by
/api/login and is passed explicitly to every service call.
"""

import logging
from functools import lru_cache

from fastapi import Depends, HTTPException, Request

from menuplan.config import settings
from menuplan.models import Person
from menuplan.offers import OfferExtractor, OfferSyncJob
from menuplan.planning import PlanService
from menuplan.store import JsonStateStore

logger = logging.getLogger(__name__)


@lru_cache
def get_service() -> PlanService:
    return PlanService(JsonStateStore())


@lru_cache
def get_sync_job() -> OfferSyncJob:
    service = get_service()
    return OfferSyncJob(service.store, OfferExtractor(service.engine))


def get_optional_person(request: Request) -> Person | None:
    value = request.cookies.get(settings.session_cookie_name)
    if not value:
        return None
    try:
        return Person(value)
    except ValueError:
        logger.warning(f"Ignoring unknown session person {value!r}")
        return None


def get_current_person(person: Person | None = Depends(get_optional_person)) -> Person:
    if person is None:
        raise HTTPException(status_code=401, detail="Not logged in")
    return person
