from __future__ import annotations

from ..utils.urls import host_of


def is_in_scope(url: str, seed_host: str) -> bool:
    """
    True iff the URL's host is the seed host or the seed host with a literal
    "www." prefix. Other subdomains are out of scope, and a "www." seed does
    not admit the bare host.
    """
    host = host_of(url).lower()
    if not host or not seed_host:
        return False
    seed = seed_host.lower()
    return host == seed or host == f"www.{seed}"
