"""
Unit tests for the shared upstream fetch helpers.
"""
import httpx
import pytest

from app.core.errors import UpstreamDataError
from app.services.upstream import Outcome, best_effort, build_client, fetch_json
from app.core.config import settings

URL = "https://feeds.example.test/data.json"


class TestFetchJson:

    @pytest.mark.asyncio
    async def test_returns_document(self, upstream):
        upstream.set(URL, {"a": 1})
        async with upstream.client() as client:
            assert await fetch_json(client, URL) == {"a": 1}

    @pytest.mark.asyncio
    async def test_passes_query_params(self, upstream):
        upstream.set(URL, [])
        async with upstream.client() as client:
            await fetch_json(client, URL, params={"latitude": "69.6"})
        assert upstream.calls[-1].url.params["latitude"] == "69.6"

    @pytest.mark.asyncio
    async def test_http_error_status(self, upstream):
        upstream.fail(URL, status=500)
        async with upstream.client() as client:
            with pytest.raises(UpstreamDataError, match="500"):
                await fetch_json(client, URL)

    @pytest.mark.asyncio
    async def test_timeout(self, upstream):
        upstream.set(URL, error=httpx.ReadTimeout)
        async with upstream.client() as client:
            with pytest.raises(UpstreamDataError, match="Timed out"):
                await fetch_json(client, URL)

    @pytest.mark.asyncio
    async def test_connection_error(self, upstream):
        upstream.set(URL, error=httpx.ConnectError)
        async with upstream.client() as client:
            with pytest.raises(UpstreamDataError):
                await fetch_json(client, URL)

    @pytest.mark.asyncio
    async def test_invalid_json(self, upstream):
        upstream.set(URL, b"<html>maintenance</html>")
        async with upstream.client() as client:
            with pytest.raises(UpstreamDataError, match="Invalid JSON"):
                await fetch_json(client, URL)


class TestBestEffort:

    @pytest.mark.asyncio
    async def test_wraps_value(self):
        async def ok():
            return 42

        outcome = await best_effort("answer", ok())
        assert outcome.available
        assert outcome.value == 42

    @pytest.mark.asyncio
    async def test_swallows_failure(self):
        async def broken():
            raise UpstreamDataError("feed down")

        outcome = await best_effort("feed", broken())
        assert not outcome.available
        assert outcome.value is None
        assert outcome.reason == "feed down"

    def test_available_none_value(self):
        assert Outcome.ok(None).available


class TestBuildClient:

    @pytest.mark.asyncio
    async def test_applies_timeout(self):
        client = build_client()
        try:
            assert client.timeout.read == settings.UPSTREAM_TIMEOUT_SECONDS
        finally:
            await client.aclose()
