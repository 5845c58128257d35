from __future__ import annotations

from typing import List, Optional
from urllib.parse import urlsplit, urlunsplit

from ..errors import InvalidScheme

ALLOWED_SCHEMES = frozenset({"http", "https"})
DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_url(raw_url: Optional[str]) -> Optional[str]:
    """
    Reduce a URL to the canonical form used for frontier and visited-set keys.

    - Lower-cases scheme and host, strips the fragment.
    - Drops the port when it is the scheme default (80/http, 443/https).
    - Resolves "." and ".." path segments and strips trailing slashes,
      keeping "/" for the root. An empty path becomes "/".
    - Keeps user info and the query string verbatim.

    Returns None for blank input or when no scheme or host can be parsed.
    The scheme itself is not checked here, see validate_scheme().
    """
    if raw_url is None:
        return None
    raw = raw_url.strip()
    if not raw:
        return None

    try:
        parts = urlsplit(raw)
        port = parts.port
    except ValueError:
        # bad port or malformed IPv6 literal
        return None

    scheme = parts.scheme.lower()
    host = parts.hostname
    if not scheme or not host:
        return None
    if any(ch.isspace() for ch in parts.netloc):
        return None

    if ":" in host:
        host = f"[{host}]"
    netloc = host
    if port is not None and DEFAULT_PORTS.get(scheme) != port:
        netloc = f"{netloc}:{port}"
    if "@" in parts.netloc:
        userinfo = parts.netloc.rsplit("@", 1)[0]
        netloc = f"{userinfo}@{netloc}"

    path = _remove_dot_segments(parts.path).rstrip("/") or "/"
    return urlunsplit((scheme, netloc, path, parts.query, ""))


def validate_scheme(scheme: Optional[str]) -> None:
    if scheme is None or scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidScheme(scheme)


def host_of(url: str) -> str:
    return urlsplit(url).hostname or ""


def scheme_of(url: str) -> str:
    return urlsplit(url).scheme


def _remove_dot_segments(path: str) -> str:
    # RFC 3986 section 5.2.4, on whole segments
    if not path:
        return path
    segments = path.split("/")
    out: List[str] = []
    for seg in segments[1:] if path.startswith("/") else segments:
        if seg == ".":
            continue
        if seg == "..":
            if out:
                out.pop()
            continue
        out.append(seg)
    # "a/b/." and "a/b/.." name a directory
    if segments[-1] in (".", ".."):
        out.append("")
    resolved = "/".join(out)
    return "/" + resolved if path.startswith("/") else resolved
