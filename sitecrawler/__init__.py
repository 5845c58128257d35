"""sitecrawler: single-host web crawler."""

from .config import CrawlConfig
from .engines.base import CrawlReport, CrawlState
from .engines.site_engine import SiteCrawlEngine
from .errors import CrawlerError, FetchFailure, InvalidCandidate, InvalidScheme, InvalidSeed
from .utils.urls import normalize_url, validate_scheme
from .version import __version__

__all__ = [
    "CrawlConfig",
    "CrawlReport",
    "CrawlState",
    "SiteCrawlEngine",
    "CrawlerError",
    "FetchFailure",
    "InvalidCandidate",
    "InvalidScheme",
    "InvalidSeed",
    "normalize_url",
    "validate_scheme",
    "__version__",
]
