"""
Menuplan - Recipe search.

Looks a meal name up on GialloZafferano's search page and returns the
first result card (link, title, image). Best effort: any fetch problem
or an unexpected page layout yields None.
"""

import logging
import re
import unicodedata
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

from menuplan.config import settings
from menuplan.models import RecipeReference

logger = logging.getLogger(__name__)

BASE_URL = "https://www.giallozafferano.it"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


def build_query(name: str) -> str:
    """Lowercase ASCII words joined by '+'; empty when nothing searchable is left."""
    folded = unicodedata.normalize("NFKD", name.lower())
    ascii_name = "".join(ch for ch in folded if not unicodedata.combining(ch))
    cleaned = re.sub(r"[^a-z0-9\s]", "", ascii_name).strip()
    return re.sub(r"\s+", "+", cleaned)


def parse_search_results(html: str) -> RecipeReference | None:
    """First `.gz-card` of a search results page."""
    soup = BeautifulSoup(html, "html.parser")
    card = soup.select_one(".gz-card")
    if card is None:
        return None

    anchor = card.select_one(".gz-title a")
    if anchor is None:
        return None
    link = anchor.get("href")
    title = anchor.get_text().strip()
    if not link or not title:
        return None

    image_url = None
    img = card.find("img")
    if img is not None:
        image_url = img.get("data-src") or img.get("src")

    return RecipeReference(url=urljoin(BASE_URL, link), title=title, image_url=image_url)


class RecipeSearch:
    """Live recipe search over HTTP."""

    def __init__(self, http_client: httpx.AsyncClient | None = None):
        self._http = http_client

    async def search(self, name: str) -> RecipeReference | None:
        query = build_query(name)
        if not query:
            return None

        url = settings.recipe_search_url.format(query=query)
        headers = {"User-Agent": USER_AGENT}
        try:
            if self._http is not None:
                response = await self._http.get(url, headers=headers, follow_redirects=True)
            else:
                async with httpx.AsyncClient(timeout=settings.recipe_lookup_timeout_seconds) as client:
                    response = await client.get(url, headers=headers, follow_redirects=True)
        except httpx.HTTPError as e:
            logger.warning(f"[RECIPES] Search failed for {name!r}: {type(e).__name__}")
            return None

        if response.status_code != 200:
            logger.warning(f"[RECIPES] Search for {name!r} returned HTTP {response.status_code}")
            return None

        result = parse_search_results(response.text)
        if result is None:
            logger.info(f"[RECIPES] No result card for {name!r}")
        return result
