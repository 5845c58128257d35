from __future__ import annotations

import asyncio
from typing import Optional
from aiohttp import ClientSession, ClientTimeout
import aiohttp
import logging

from ..errors import FetchFailure
from .urls import host_of

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")


def retry_delay(attempt: int) -> float:
    """Seconds to sleep before retry number `attempt` (1-based)."""
    return min(2 ** (attempt - 1), 5)


def worst_case_duration(timeout: float, retries: int) -> float:
    """Longest a fetch_text call can take: every attempt times out, plus back-off."""
    return timeout * (retries + 1) + sum(retry_delay(a) for a in range(1, retries + 1))


def _same_site(host: str, other: str) -> bool:
    return host.removeprefix("www.") == other.removeprefix("www.")


async def fetch_text(
    session: ClientSession,
    url: str,
    *,
    timeout: float = 5.0,
    user_agent: Optional[str] = None,
    retries: int = 0,
) -> str:
    """
    Fetch a URL and return its HTML body.

    Any non-2xx status, a non-HTML content type, a redirect to another host,
    a timeout or a network error raises FetchFailure once the retries are
    used up.
    """
    headers = {}
    if user_agent:
        headers["User-Agent"] = user_agent

    attempt = 0
    while True:
        try:
            async with session.get(url, headers=headers, timeout=ClientTimeout(total=timeout)) as resp:
                final_url = str(resp.url)
                if resp.history and not _same_site(host_of(final_url), host_of(url)):
                    raise FetchFailure(url, f"redirected off-host to {final_url}", status=resp.status)
                if not 200 <= resp.status < 300:
                    raise FetchFailure(url, f"HTTP {resp.status}", status=resp.status)
                if resp.content_type not in HTML_CONTENT_TYPES:
                    raise FetchFailure(url, f"not HTML ({resp.content_type})", status=resp.status)
                return await resp.text(errors="replace")
        except FetchFailure as exc:
            failure = exc
        except asyncio.TimeoutError:
            failure = FetchFailure(url, f"timed out after {timeout}s")
        except aiohttp.ClientError as exc:
            failure = FetchFailure(url, repr(exc))

        if attempt >= retries:
            raise failure
        attempt += 1
        logger.debug("fetch_text attempt %s failed for %s: %s", attempt, url, failure.reason)
        await asyncio.sleep(retry_delay(attempt))


def create_session() -> ClientSession:
    """
    Create a shared aiohttp ClientSession.
    """
    # Note: caller is responsible for closing the session (await session.close()).
    connector = aiohttp.TCPConnector(limit=0)  # unlimited; concurrency bounded by the worker count
    return aiohttp.ClientSession(connector=connector)
