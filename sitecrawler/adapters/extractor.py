from __future__ import annotations

from typing import Set

from ..utils.parsing import extract_links


class SoupLinkExtractor:
    """LinkExtractor over BeautifulSoup's html.parser."""

    name = "soup"

    def extract(self, markup: str, base_url: str) -> Set[str]:
        return extract_links(markup, base_url)
