from __future__ import annotations

from typing import Optional


class CrawlerError(Exception):
    """Base class for everything the crawler raises on purpose."""


class InvalidScheme(CrawlerError):
    def __init__(self, scheme: Optional[str]) -> None:
        super().__init__(f"Unexpected protocol: {scheme!r}")
        self.scheme = scheme


class InvalidSeed(CrawlerError):
    """
    The seed URL cannot start a crawl: unparseable, no host, or a scheme other
    than http/https. Raised before any frontier exists.
    """

    def __init__(self, seed_url: object, reason: str) -> None:
        super().__init__(f"Invalid seed {seed_url!r}: {reason}")
        self.seed_url = seed_url
        self.reason = reason


class InvalidCandidate(CrawlerError):
    """A discovered link that will not be enqueued. Never escapes the engine."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class FetchFailure(CrawlerError):
    def __init__(self, url: str, reason: str, status: Optional[int] = None) -> None:
        super().__init__(f"Fetching {url} failed: {reason}")
        self.url = url
        self.reason = reason
        self.status = status
