"""Tests for the recipe search scraper."""

import asyncio

import httpx
import pytest

from menuplan.recipes import RecipeSearch, build_query, parse_search_results

RESULTS_PAGE = """
<html><body>
<div class="gz-card">
  <div class="gz-card-image"><img data-src="https://ricette.giallozafferano.it/pollo.jpg" src="placeholder.gif"></div>
  <h2 class="gz-title"><a href="/ricette/Pollo-alla-piastra.html"> Pollo alla piastra </a></h2>
</div>
<div class="gz-card">
  <h2 class="gz-title"><a href="https://ricette.giallozafferano.it/Altro.html">Altro</a></h2>
</div>
</body></html>
"""


class TestQuery:
    @pytest.mark.parametrize(
        "name,query",
        [
            ("Pollo alla Piastra", "pollo+alla+piastra"),
            ("Caffè & Crème", "caffe+creme"),
            ("Toast Burro d'Arachidi (Pre-Workout)", "toast+burro+darachidi+preworkout"),
            ("!!!", ""),
        ],
    )
    def test_build_query(self, name, query):
        assert build_query(name) == query


class TestParseResults:
    def test_first_card(self):
        reference = parse_search_results(RESULTS_PAGE)

        assert reference.url == "https://www.giallozafferano.it/ricette/Pollo-alla-piastra.html"
        assert reference.title == "Pollo alla piastra"
        assert reference.image_url == "https://ricette.giallozafferano.it/pollo.jpg"

    def test_no_cards(self):
        assert parse_search_results("<html><body><p>Nessun risultato</p></body></html>") is None

    def test_card_without_link(self):
        assert parse_search_results('<div class="gz-card"><h2 class="gz-title">Solo titolo</h2></div>') is None


def search_with(handler, name="Pollo alla Piastra"):
    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            return await RecipeSearch(http).search(name)

    return asyncio.run(run())


class TestRecipeSearch:
    def test_found(self):
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, text=RESULTS_PAGE)

        reference = search_with(handler)

        assert reference.title == "Pollo alla piastra"
        assert "pollo+alla+piastra" in requested[0]

    def test_server_error(self):
        assert search_with(lambda request: httpx.Response(503)) is None

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        assert search_with(handler) is None

    def test_empty_query_makes_no_request(self):
        def handler(request):
            raise AssertionError("no request expected")

        assert search_with(handler, name="???") is None
