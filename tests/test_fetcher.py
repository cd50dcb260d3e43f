"""
Tests for the HTTP candidate fetcher.

Uses httpx.MockTransport so no network access is needed.
"""

import asyncio

import httpx
import pytest

from conftest import png_bytes
from logo_agent.errors import AllSourcesFailed, SourceFetchFailed
from logo_agent.protocols import CandidateFetcher
from logo_agent.repositories import HttpLogoFetcher

pytestmark = pytest.mark.asyncio

GOOD = "https://good.example/logo.png"
ALSO_GOOD = "https://also-good.example/logo.png"


def make_fetcher(routes: dict) -> HttpLogoFetcher:
    """Build a fetcher whose client answers from ``routes`` (url -> handler or response)."""

    async def handler(request: httpx.Request) -> httpx.Response:
        route = routes.get(str(request.url))
        if route is None:
            return httpx.Response(404)
        if callable(route):
            return await route(request)
        return route

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpLogoFetcher(client=client, user_agent="test-agent", max_connections=4)


def image_response(data: bytes, content_type: str = "image/png") -> httpx.Response:
    return httpx.Response(200, headers={"content-type": content_type}, content=data)


async def test_satisfies_protocol():
    assert isinstance(make_fetcher({}), CandidateFetcher)


async def test_fetch_collects_valid_candidates():
    fetcher = make_fetcher(
        {
            GOOD: image_response(png_bytes(4096)),
            ALSO_GOOD: image_response(png_bytes(2048)),
        }
    )

    candidates = await fetcher.fetch([GOOD, ALSO_GOOD, "https://missing.example/x.png"], 1.0)

    assert sorted(c.source for c in candidates) == [ALSO_GOOD, GOOD]
    assert {c.size for c in candidates} == {4096, 2048}


async def test_fetch_sends_identity_headers():
    seen = {}

    async def capture(request: httpx.Request) -> httpx.Response:
        seen.update(request.headers)
        return image_response(png_bytes(2048))

    fetcher = make_fetcher({GOOD: capture})
    await fetcher.fetch([GOOD], 1.0)

    assert seen["user-agent"] == "test-agent"
    assert seen["accept"] == "image/*"


async def test_slow_source_is_dropped():
    async def slow(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(1.0)
        return image_response(png_bytes(2048))

    fetcher = make_fetcher({GOOD: image_response(png_bytes(2048)), ALSO_GOOD: slow})

    candidates = await fetcher.fetch([GOOD, ALSO_GOOD], 0.05)

    assert [c.source for c in candidates] == [GOOD]


async def test_all_sources_failed():
    fetcher = make_fetcher(
        {
            GOOD: httpx.Response(500),
            ALSO_GOOD: image_response(b"tiny"),
        }
    )

    with pytest.raises(AllSourcesFailed) as exc_info:
        await fetcher.fetch([GOOD, ALSO_GOOD], 1.0)

    assert exc_info.value.attempted == 2


@pytest.mark.parametrize(
    "response, reason",
    [
        (httpx.Response(503), "HTTP 503"),
        (image_response(png_bytes(2048), content_type="text/html"), "invalid content type"),
        (image_response(png_bytes(512)), "too small"),
        (image_response(b"%PDF-1.7" + b"\x00" * 2048, content_type="image/png"), "unrecognized image signature"),
        (image_response(png_bytes(10 * 1024 * 1024 + 1)), "too large"),
    ],
)
async def test_fetch_one_rejections(response, reason):
    fetcher = make_fetcher({GOOD: response})

    with pytest.raises(SourceFetchFailed) as exc_info:
        await fetcher.fetch_one(GOOD, 1.0)

    assert reason in exc_info.value.reason
    assert exc_info.value.url == GOOD


async def test_network_error_is_wrapped():
    async def broken(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    fetcher = make_fetcher({GOOD: broken})

    with pytest.raises(SourceFetchFailed) as exc_info:
        await fetcher.fetch_one(GOOD, 1.0)

    assert "http error" in exc_info.value.reason


async def test_jpeg_candidate_is_accepted():
    data = b"\xff\xd8\xff\xe0" + b"\x00" * 4096
    fetcher = make_fetcher({GOOD: image_response(data, content_type="image/jpeg")})

    candidate = await fetcher.fetch_one(GOOD, 1.0)

    assert candidate.data == data


async def test_aclose_leaves_injected_client_open():
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(404)))
    fetcher = HttpLogoFetcher(client=client)

    await fetcher.aclose()

    assert not client.is_closed
    await client.aclose()


async def test_aclose_closes_owned_client():
    fetcher = HttpLogoFetcher()
    client = fetcher.client

    await fetcher.aclose()

    assert client.is_closed


async def test_invalid_url_is_wrapped():
    fetcher = make_fetcher({})

    with pytest.raises(SourceFetchFailed) as exc_info:
        await fetcher.fetch_one("https://exa\x01mple.com/logo.png", 1.0)

    assert exc_info.value.reason == "invalid url"


async def test_invalid_url_does_not_abort_the_batch():
    fetcher = make_fetcher({GOOD: image_response(png_bytes(2048))})

    candidates = await fetcher.fetch([GOOD, "https://exa\x01mple.com/logo.png"], 1.0)

    assert [c.source for c in candidates] == [GOOD]


async def test_zero_max_connections_is_kept():
    fetcher = HttpLogoFetcher(client=httpx.AsyncClient(), max_connections=0)

    assert fetcher._max_connections == 0
    await fetcher.client.aclose()
