"""Tests for flyer discovery, PDF handling and offer extraction."""

import asyncio
import json

import httpx
import pytest

from conftest import FakeEngine
from menuplan.errors import FlyerFetchError
from menuplan.llm import AllProvidersExhausted, Pool, ProviderAuthError
from menuplan.models import Offer
from menuplan.offers import FlyerClient, OfferExtractor, merge_unique
from menuplan.offers.flyers import find_pdf_url, find_viewer_links, is_relevant_pdf, parse_flyer_title

STORE_PAGE = """
<html><body>
  <a href="/volantini/cia-autunno-2024">Volantino</a>
  <a href="https://www.conad.it/volantini/cia-pesce-fresco">Pesce</a>
  <a href="/volantini/cia-autunno-2024">Again</a>
  <a href="/negozi/altro">Other</a>
</body></html>
"""

VIEWER_PAGE = r"""
<html><head><title>Sottocosto d'autunno | Conad</title></head>
<body><script>
var flyer = {"pdf": "https://www.conad.it/assets/common/volantini/cia/2024/ott/sottocosto.pdf?v=2\u0026lang=it"};
</script></body></html>
"""


class TestFlyerParsing:
    def test_viewer_links_are_unique_and_absolute(self):
        assert find_viewer_links(STORE_PAGE) == [
            "https://www.conad.it/volantini/cia-autunno-2024",
            "https://www.conad.it/volantini/cia-pesce-fresco",
        ]

    def test_pdf_url_is_unescaped(self):
        assert find_pdf_url(VIEWER_PAGE) == (
            "https://www.conad.it/assets/common/volantini/cia/2024/ott/sottocosto.pdf?v=2&lang=it"
        )

    def test_no_pdf(self):
        assert find_pdf_url("<html></html>") is None

    def test_title(self):
        assert parse_flyer_title(VIEWER_PAGE) == "Sottocosto d'autunno"

    def test_missing_title(self):
        assert parse_flyer_title("<html><body></body></html>") == "Volantino"

    @pytest.mark.parametrize(
        "url,relevant",
        [
            ("https://www.conad.it/assets/common/volantini/cia/2024/sottocosto.pdf", True),
            ("https://www.conad.it/assets/common/volantini/cia/2024/CONAD_PAY_ottobre.pdf", False),
            ("https://www.conad.it/assets/common/volantini/cia/2024/regolamento_punti.pdf", False),
            ("https://www.conad.it/assets/common/volantini/cia/2024/renditions/page1.webp", False),
        ],
    )
    def test_relevance(self, url, relevant):
        assert is_relevant_pdf(url) is relevant


class TestFlyerClient:
    def test_page_fetch(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert "Mozilla" in request.headers["User-Agent"]
            return httpx.Response(200, text=STORE_PAGE)

        async def fetch():
            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
                return await FlyerClient(http).fetch_page("https://www.conad.it/negozio")

        assert "cia-autunno-2024" in asyncio.run(fetch())

    def test_http_error_is_wrapped(self):
        async def fetch():
            transport = httpx.MockTransport(lambda request: httpx.Response(404))
            async with httpx.AsyncClient(transport=transport) as http:
                return await FlyerClient(http).fetch_page("https://www.conad.it/missing")

        with pytest.raises(FlyerFetchError) as exc_info:
            asyncio.run(fetch())
        assert exc_info.value.status_code == 502
        assert exc_info.value.details == {"url": "https://www.conad.it/missing"}

    def test_unreadable_pdf_is_wrapped(self):
        async def fetch():
            transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"not a pdf"))
            async with httpx.AsyncClient(transport=transport) as http:
                return await FlyerClient(http).fetch_pdf_text("https://www.conad.it/x.pdf")

        with pytest.raises(FlyerFetchError):
            asyncio.run(fetch())


class TestOfferExtractor:
    def test_offers_are_parsed(self):
        text = json.dumps(
            [
                {"categoria": "Pesce", "prodotto": "Orata", "prezzo": 9.9, "unita": "kg"},
                {"categoria": "Carne", "prodotto": "Petto di Pollo", "prezzo": "7.50", "negozio": "Conad Montefiore"},
            ]
        )
        engine = FakeEngine(text)

        offers = asyncio.run(OfferExtractor(engine).extract("testo del volantino", "Conad Ponte Abbadesse"))

        assert [offer.prodotto for offer in offers] == ["Orata", "Petto di Pollo"]
        assert offers[0].prezzo == "9.9"
        assert offers[0].negozio == "Conad Ponte Abbadesse"
        assert offers[1].negozio == "Conad Montefiore"
        assert engine.calls == [(Pool.WORKER, "offers")]

    def test_wrapped_object(self):
        engine = FakeEngine('{"offers": [{"prodotto": "Zucca"}]}')

        offers = asyncio.run(OfferExtractor(engine).extract("testo", "Conad"))

        assert [offer.prodotto for offer in offers] == ["Zucca"]

    def test_malformed_items_skipped(self):
        engine = FakeEngine('[{"prodotto": "Uova"}, {"prezzo": "1.00"}, "Latte", 3]')

        offers = asyncio.run(OfferExtractor(engine).extract("testo", "Conad"))

        assert [offer.prodotto for offer in offers] == ["Uova"]

    @pytest.mark.parametrize(
        "result",
        [
            AllProvidersExhausted([]),
            ProviderAuthError("gemini-2.5-flash-lite", "API key not valid"),
            "Nessuna offerta interessante.",
            '"solo testo"',
        ],
    )
    def test_failures_give_empty_list(self, result):
        assert asyncio.run(OfferExtractor(FakeEngine(result)).extract("testo", "Conad")) == []


class TestMergeUnique:
    def test_incoming_duplicates_dropped(self):
        existing = [Offer(prodotto="Orata", prezzo="9.90")]
        incoming = [Offer(prodotto="ORATA", prezzo="8.90"), Offer(prodotto="Zucca"), Offer(prodotto="zucca")]

        merged = merge_unique(existing, incoming)

        assert [(offer.prodotto, offer.prezzo) for offer in merged] == [("Orata", "9.90"), ("Zucca", "")]
        assert existing == [Offer(prodotto="Orata", prezzo="9.90")]
