"""
Menuplan - Offer extraction.

Turns flyer text into Offer records with the worker pool. Extraction is
best effort: any generation or parsing failure yields an empty list.
"""

import logging

from pydantic import ValidationError

from menuplan.llm import AllProvidersExhausted, Pool, ProviderAuthError, ProviderRotationEngine
from menuplan.llm.parsing import parse_json_text
from menuplan.models import Offer

logger = logging.getLogger(__name__)

OFFERS_PROMPT = """Read this text extracted from a supermarket flyer of the store: {store}.
Extract the most interesting food offers, focusing on meat, fish, vegetables, fruit and dairy.
Skip snacks, sugary drinks and alcohol.

Return ONLY a raw JSON array of objects with these keys:
  "categoria": string, "prodotto": string, "prezzo": string, "unita": string,
  "note": string (optional), "sconto": string (optional), "negozio": "{store}"

Flyer text:
---
{text}
---
"""


def build_offers_prompt(text: str, store: str) -> str:
    return OFFERS_PROMPT.format(text=text, store=store)


class OfferExtractor:
    def __init__(self, engine: ProviderRotationEngine):
        self.engine = engine

    async def extract(self, text: str, store: str) -> list[Offer]:
        prompt = build_offers_prompt(text, store)
        try:
            raw = parse_json_text(await self.engine.invoke_pool(prompt, Pool.WORKER, call_site="offers"))
        except (AllProvidersExhausted, ProviderAuthError, ValueError) as e:
            logger.error(f"[OFFERS] Extraction failed for {store}: {e}")
            return []

        if isinstance(raw, dict):
            raw = raw.get("offers", [])
        if not isinstance(raw, list):
            logger.warning(f"[OFFERS] Extraction for {store} returned {type(raw).__name__}, expected a list")
            return []

        offers: list[Offer] = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            try:
                offer = Offer.model_validate(item)
            except ValidationError:
                logger.debug(f"[OFFERS] Skipping malformed offer {item!r}")
                continue
            if not offer.negozio:
                offer.negozio = store
            offers.append(offer)

        logger.info(f"[OFFERS] {len(offers)} offers extracted for {store}")
        return offers
