import httpx
import pytest

from wethelder.domain.exceptions import MissingCredentialsError, SearchProviderError
from wethelder.infrastructure.search.google_client import GoogleSearchClient


def _client(http: httpx.AsyncClient, **kwargs) -> GoogleSearchClient:
    kwargs.setdefault("backoff_multiplier", 0)
    return GoogleSearchClient(api_key="key", search_engine_id="cx", http_client=http, **kwargs)


@pytest.mark.asyncio
async def test_parses_items_and_sends_locale_hints():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(
            200,
            json={
                "items": [
                    {
                        "title": "Wegenverkeerswet 1994",
                        "link": "https://wetten.overheid.nl/BWBR0006622",
                        "snippet": "Geldend van 01-01-2025",
                        "displayLink": "wetten.overheid.nl",
                        "formattedUrl": "wetten.overheid.nl/BWBR0006622",
                    },
                    {"title": "Zonder displayLink", "link": "https://wetten.overheid.nl/x"},
                ]
            },
        )

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        records = await _client(http).search("site:wetten.overheid.nl rijbewijs", count=25)

    assert seen["q"] == "site:wetten.overheid.nl rijbewijs"
    assert seen["num"] == "10"
    assert seen["key"] == "key"
    assert seen["cx"] == "cx"
    assert seen["lr"] == "lang_nl"
    assert seen["gl"] == "nl"
    assert seen["hl"] == "nl"
    assert [r.link for r in records] == [
        "https://wetten.overheid.nl/BWBR0006622",
        "https://wetten.overheid.nl/x",
    ]
    assert records[0].display_link == "wetten.overheid.nl"
    assert records[1].display_link is None
    assert records[1].snippet == ""


@pytest.mark.asyncio
async def test_no_items_means_no_results():
    transport = httpx.MockTransport(lambda r: httpx.Response(200, json={"kind": "customsearch"}))
    async with httpx.AsyncClient(transport=transport) as http:
        assert await _client(http).search("site:cbr.nl examen") == []


@pytest.mark.asyncio
async def test_skips_items_without_link():
    payload = {"items": [{"title": "kapot"}, {"title": "ok", "link": "https://rdw.nl/a"}]}
    transport = httpx.MockTransport(lambda r: httpx.Response(200, json=payload))
    async with httpx.AsyncClient(transport=transport) as http:
        records = await _client(http).search("site:rdw.nl apk")
    assert [r.title for r in records] == ["ok"]


@pytest.mark.asyncio
async def test_error_status_is_raised():
    transport = httpx.MockTransport(lambda r: httpx.Response(403, json={"error": {}}))
    async with httpx.AsyncClient(transport=transport) as http:
        with pytest.raises(httpx.HTTPStatusError):
            await _client(http).search("site:om.nl boete")


@pytest.mark.asyncio
async def test_invalid_json_is_a_provider_error():
    transport = httpx.MockTransport(lambda r: httpx.Response(200, content=b"<html>"))
    async with httpx.AsyncClient(transport=transport) as http:
        with pytest.raises(SearchProviderError):
            await _client(http).search("site:om.nl boete")


@pytest.mark.asyncio
async def test_missing_credentials():
    transport = httpx.MockTransport(lambda r: httpx.Response(200, json={}))
    async with httpx.AsyncClient(transport=transport) as http:
        client = GoogleSearchClient(api_key=None, search_engine_id="cx", http_client=http)
        with pytest.raises(MissingCredentialsError):
            await client.search("site:om.nl boete")


@pytest.mark.asyncio
async def test_transport_errors_are_retried():
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        if calls == 1:
            raise httpx.ConnectError("connection reset", request=request)
        return httpx.Response(200, json={"items": [{"title": "A", "link": "https://cbr.nl/a"}]})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        records = await _client(http, max_attempts=2).search("site:cbr.nl a")

    assert calls == 2
    assert len(records) == 1


@pytest.mark.asyncio
async def test_gives_up_after_max_attempts():
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        raise httpx.ReadTimeout("slow", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        with pytest.raises(httpx.ReadTimeout):
            await _client(http, max_attempts=3).search("site:cbr.nl a")

    assert calls == 3


@pytest.mark.asyncio
async def test_skips_items_with_unparseable_link():
    payload = {
        "items": [
            {"title": "ipv6", "link": "http://[broken"},
            {"title": "relatief", "link": "/pad/zonder/host"},
            {"title": "ok", "link": "https://cbr.nl/rijbewijs"},
        ]
    }
    transport = httpx.MockTransport(lambda r: httpx.Response(200, json=payload))
    async with httpx.AsyncClient(transport=transport) as http:
        records = await _client(http).search("site:cbr.nl rijbewijs")
    assert [r.title for r in records] == ["ok"]
