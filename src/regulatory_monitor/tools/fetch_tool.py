"""Fetch tool - retrieve page content via HTTP."""

import logging
from dataclasses import dataclass

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..config.loader import RetryPolicy

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """Result from fetch_tool."""

    url: str
    final_url: str
    http_status: int
    content_type: str
    html: str
    error: str | None = None


async def fetch_tool(
    client: httpx.AsyncClient,
    url: str,
    retry_policy: RetryPolicy | None = None,
) -> FetchResult:
    """
    Fetch a URL, retrying transport errors with exponential backoff.
    The client's timeout bounds each attempt. Errors that survive the retries
    are reported in FetchResult.error rather than raised.
    """
    policy = retry_policy or RetryPolicy()
    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(policy.max_attempts),
            wait=wait_exponential(multiplier=policy.backoff_seconds, min=0, max=10),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        ):
            with attempt:
                response = await client.get(url)
    except httpx.HTTPError as e:
        logger.warning("Fetch failed %s: %s", url, e)
        return FetchResult(
            url=url,
            final_url=url,
            http_status=0,
            content_type="",
            html="",
            error=str(e) or type(e).__name__,
        )

    return FetchResult(
        url=url,
        final_url=str(response.url),
        http_status=response.status_code,
        content_type=response.headers.get("content-type", "application/octet-stream"),
        html=response.text,
        error=None,
    )
