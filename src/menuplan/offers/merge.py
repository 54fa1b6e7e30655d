"""Offer list helpers shared by the service and the sync job."""

from menuplan.models import Offer


def merge_unique(existing: list[Offer], incoming: list[Offer]) -> list[Offer]:
    """existing plus incoming offers whose product name (case-insensitive) is not present yet."""
    seen = {offer.prodotto.strip().lower() for offer in existing}
    merged = list(existing)
    for offer in incoming:
        key = offer.prodotto.strip().lower()
        if key in seen:
            continue
        seen.add(key)
        merged.append(offer)
    return merged
