from __future__ import annotations

from typing import Optional

from aiohttp import ClientSession

from ..utils.http import create_session, fetch_text, worst_case_duration
from ..version import __version__

DEFAULT_USER_AGENT = f"sitecrawler/{__version__}"


class AiohttpFetcher:
    """
    HtmlFetcher backed by one shared aiohttp session.

    The session is created on first use so it binds to the running loop;
    call close() when the crawl is over.
    """

    def __init__(
        self,
        timeout: float = 5.0,
        user_agent: str = DEFAULT_USER_AGENT,
        retries: int = 0,
        session: Optional[ClientSession] = None,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.retries = retries
        self._session = session
        self._owns_session = session is None

    @property
    def max_duration(self) -> float:
        """Upper bound on one fetch() call, retries and back-off included."""
        return worst_case_duration(self.timeout, self.retries)

    def _ensure_session(self) -> ClientSession:
        if self._session is None:
            self._session = create_session()
        return self._session

    async def fetch(self, url: str) -> str:
        return await fetch_text(
            self._ensure_session(),
            url,
            timeout=self.timeout,
            user_agent=self.user_agent,
            retries=self.retries,
        )

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None
