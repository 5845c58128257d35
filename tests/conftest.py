import asyncio
from typing import Dict, List, Optional

import pytest

from sitecrawler.errors import FetchFailure


class FakeFetcher:
    """In-memory HtmlFetcher: serves `pages`, 404s everything else."""

    def __init__(self, pages: Dict[str, str], delay: float = 0.0, slow: Optional[Dict[str, float]] = None):
        self.pages = pages
        self.delay = delay
        self.slow = slow or {}
        self.calls: List[str] = []

    async def fetch(self, url: str) -> str:
        self.calls.append(url)
        await asyncio.sleep(self.slow.get(url, self.delay))
        if url not in self.pages:
            raise FetchFailure(url, "HTTP 404", status=404)
        return self.pages[url]


def page(*hrefs: str) -> str:
    anchors = "".join(f'<a href="{h}">link</a>' for h in hrefs)
    return f"<html><body>{anchors}</body></html>"


@pytest.fixture
def site_pages():
    return {
        "https://site.test/": page("/a", "https://other.test/x"),
        "https://site.test/a": page("/", "/a#frag"),
    }
