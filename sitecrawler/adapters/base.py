from __future__ import annotations

from typing import Protocol, Set


class HtmlFetcher(Protocol):
    """
    Retrieves page markup. Implementations apply their own timeout and raise
    errors.FetchFailure for network errors and non-success responses.
    """

    async def fetch(self, url: str) -> str:
        ...


class LinkExtractor(Protocol):
    """
    Turns markup into the set of absolute links it contains.
    Crawl logic (scope, dedup, budget) stays in the engine.
    """

    def extract(self, markup: str, base_url: str) -> Set[str]:
        ...
