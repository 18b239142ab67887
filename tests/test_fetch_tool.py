"""Tests for the HTTP fetch tool."""

import httpx
import pytest

from regulatory_monitor.config.loader import RetryPolicy
from regulatory_monitor.tools.fetch_tool import fetch_tool

URL = "https://example.gov/guidance"
NO_WAIT = RetryPolicy(max_attempts=3, backoff_seconds=0)


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestFetchTool:
    @pytest.mark.asyncio
    async def test_success(self):
        def handler(request):
            return httpx.Response(200, html="<p>Guidance</p>")

        async with _client(handler) as client:
            result = await fetch_tool(client, URL, NO_WAIT)

        assert result.error is None
        assert result.http_status == 200
        assert result.final_url == URL
        assert "text/html" in result.content_type
        assert result.html == "<p>Guidance</p>"

    @pytest.mark.asyncio
    async def test_http_error_status_is_returned_not_raised(self):
        def handler(request):
            return httpx.Response(404, text="missing")

        async with _client(handler) as client:
            result = await fetch_tool(client, URL, NO_WAIT)

        assert result.http_status == 404
        assert result.error is None

    @pytest.mark.asyncio
    async def test_transport_error_is_retried(self):
        calls = []

        def handler(request):
            calls.append(request.url)
            if len(calls) < 3:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, text="ok")

        async with _client(handler) as client:
            result = await fetch_tool(client, URL, NO_WAIT)

        assert len(calls) == 3
        assert result.http_status == 200
        assert result.html == "ok"

    @pytest.mark.asyncio
    async def test_exhausted_retries_report_error(self):
        calls = []

        def handler(request):
            calls.append(request.url)
            raise httpx.ReadTimeout("timed out", request=request)

        async with _client(handler) as client:
            result = await fetch_tool(client, URL, RetryPolicy(max_attempts=2, backoff_seconds=0))

        assert len(calls) == 2
        assert result.http_status == 0
        assert result.html == ""
        assert "timed out" in result.error
