"""
Menuplan - Store flyers.

Discovery and download of promotional flyers:
1. store page -> flyer viewer links (`/volantini/cia-...`)
2. viewer page -> flyer PDF URL and title
3. PDF -> plain text (pypdf)

Non-food flyers (payments, travel, insurance, loyalty rules) are
recognized by keywords in the PDF URL and skipped.
"""

import io
import logging
import re

import httpx
from bs4 import BeautifulSoup
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from menuplan.errors import FlyerFetchError

logger = logging.getLogger(__name__)

BASE_URL = "https://www.conad.it"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

IGNORED_KEYWORDS = [
    "CONAD_PAY", "CaseCura", "viaggi", "assicurazioni", "accumulo",
    "manuale", "regolamento", "flyer_scelte_stagione", "distributore",
    "A4_Mipremio", "A4_HeyCND", "WEB_Leaflet_CaseCura", "scelte_stagione", "A4_Distributore",
]

_VIEWER_LINK = re.compile(r"/volantini/cia-[^\"'\s<>]+")
_PDF_URL = re.compile(r"https://www\.conad\.it/assets/common/volantini/cia/[^\s\"'>]+\.pdf(?:\?[^\s\"'>/]+)?")


def find_viewer_links(html: str) -> list[str]:
    """Unique flyer viewer URLs on a store page, in page order."""
    links: list[str] = []
    for match in _VIEWER_LINK.findall(html):
        url = match if match.startswith("http") else f"{BASE_URL}{match}"
        if url not in links:
            links.append(url)
    return links


def find_pdf_url(html: str) -> str | None:
    match = _PDF_URL.search(html)
    if match is None:
        return None
    return match.group(0).replace("\\u0026", "&")


def parse_flyer_title(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    if soup.title is None or not soup.title.string:
        return "Volantino"
    return soup.title.string.split("|")[0].strip() or "Volantino"


def is_relevant_pdf(url: str) -> bool:
    """False for non-food flyers and for image renditions of a flyer."""
    if any(keyword in url for keyword in IGNORED_KEYWORDS):
        return False
    if "/renditions/" in url or "/thumbs/" in url or url.lower().endswith(".webp"):
        return False
    return True


def extract_pdf_text(data: bytes) -> str:
    """Plain text of every page. Image-only flyers give (almost) nothing."""
    reader = PdfReader(io.BytesIO(data))
    return "\n".join(page.extract_text() or "" for page in reader.pages)


class FlyerClient:
    """HTTP access to store pages and flyer documents."""

    def __init__(self, http_client: httpx.AsyncClient | None = None, timeout: float = 30.0):
        self._http = http_client
        self.timeout = timeout

    async def _get(self, url: str, accept: str) -> httpx.Response:
        headers = {"User-Agent": USER_AGENT, "Accept": accept}
        try:
            if self._http is not None:
                response = await self._http.get(url, headers=headers, follow_redirects=True)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url, headers=headers, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FlyerFetchError(url, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise FlyerFetchError(url, type(e).__name__) from e
        return response

    async def fetch_page(self, url: str) -> str:
        response = await self._get(url, "text/html")
        return response.text

    async def fetch_pdf_text(self, url: str) -> str:
        response = await self._get(url, "application/pdf")
        try:
            return extract_pdf_text(response.content)
        except (PyPdfError, ValueError) as e:
            raise FlyerFetchError(url, f"unreadable PDF ({type(e).__name__})") from e
