from __future__ import annotations

from dataclasses import dataclass, asdict, fields
from typing import Any, Dict
import os
import json

from .version import __version__, CONFIG_SCHEMA_VERSION

DEFAULT_FETCHER = "sitecrawler.adapters.fetcher:AiohttpFetcher"
DEFAULT_EXTRACTOR = "sitecrawler.adapters.extractor:SoupLinkExtractor"


@dataclass
class CrawlConfig:
    """
    Canonical configuration object passed throughout the system.
    Keep it dataclass-only (no heavy deps) to stay upgrade-friendly.
    """
    schema_version: int = CONFIG_SCHEMA_VERSION
    # Page budget: most URLs dequeued for processing in one crawl.
    max_pages: int = 1000
    workers: int = 5
    request_timeout: float = 5.0
    # Wall-clock bound for the whole crawl, seconds.
    crawl_timeout: float = 900.0
    retries: int = 0
    user_agent: str = f"sitecrawler/{__version__}"
    # How long an idle worker waits on the frontier before re-checking for shutdown.
    poll_interval: float = 0.1
    # Dotted paths ("module:ClassName") so collaborators can be swapped without code changes.
    fetcher: str = DEFAULT_FETCHER
    extractor: str = DEFAULT_EXTRACTOR

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    # ---------- Loaders ----------

    @classmethod
    def from_env(cls) -> "CrawlConfig":
        """
        Build config from environment variables (all optional).
        """
        def _get(name: str, default: str) -> str:
            return os.getenv(name, default)

        return cls(
            max_pages=int(_get("SITECRAWLER_MAX_PAGES", "1000")),
            workers=int(_get("SITECRAWLER_WORKERS", "5")),
            request_timeout=float(_get("SITECRAWLER_REQUEST_TIMEOUT", "5.0")),
            crawl_timeout=float(_get("SITECRAWLER_CRAWL_TIMEOUT", "900.0")),
            retries=int(_get("SITECRAWLER_RETRIES", "0")),
            user_agent=_get("SITECRAWLER_USER_AGENT", f"sitecrawler/{__version__}"),
            poll_interval=float(_get("SITECRAWLER_POLL_INTERVAL", "0.1")),
            fetcher=_get("SITECRAWLER_FETCHER", DEFAULT_FETCHER),
            extractor=_get("SITECRAWLER_EXTRACTOR", DEFAULT_EXTRACTOR),
        )

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> "CrawlConfig":
        """
        Load configuration from a JSON file. Supports schema migration for future versions.
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        data = migrate_config(data)
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys in {path}: {', '.join(unknown)}")
        return cls(**data)

    # ---------- Validation ----------

    def validate(self) -> None:
        if self.max_pages < 1:
            raise ValueError("max_pages must be >= 1")
        if self.workers < 1:
            raise ValueError("workers must be >= 1")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be > 0")
        if self.crawl_timeout <= 0:
            raise ValueError("crawl_timeout must be > 0")
        if self.retries < 0:
            raise ValueError("retries must be >= 0")
        if self.poll_interval <= 0:
            raise ValueError("poll_interval must be > 0")


def migrate_config(raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Migrate config dict to the latest schema version.
    Keep this pure and additive. Add migrations here as you bump schema.
    """
    raw = dict(raw)
    # Ensure a schema_version is present
    raw.setdefault("schema_version", CONFIG_SCHEMA_VERSION)
    return raw
