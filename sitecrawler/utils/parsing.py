from __future__ import annotations

from typing import Set
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from ..errors import InvalidScheme
from .urls import normalize_url, validate_scheme, scheme_of


def extract_links(html: str, base_url: str) -> Set[str]:
    """
    Extract absolute, normalized http(s) links from an HTML string.

    Relative hrefs resolve against the page's <base href> when present,
    otherwise against base_url.
    """
    if not html or not html.strip():
        return set()

    soup = BeautifulSoup(html, "html.parser")
    base_tag = soup.find("base", href=True)
    if base_tag:
        base_url = urljoin(base_url, base_tag["href"].strip())

    out: Set[str] = set()
    for a in soup.select("a[href]"):
        href = (a.get("href") or "").strip()
        if not href:
            continue
        link = normalize_url(urljoin(base_url, href))
        if link is None:
            continue
        try:
            validate_scheme(scheme_of(link))
        except InvalidScheme:
            continue
        out.add(link)
    return out
