from __future__ import annotations

import argparse
import asyncio
import logging
from typing import List

from ..config import CrawlConfig
from ..engines.base import CrawlReport
from ..engines.site_engine import SiteCrawlEngine
from ..errors import InvalidSeed
from ..utils.logging import setup_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID_SEED = 1
EXIT_USAGE = 2


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sitecrawler",
        description="Crawl every page reachable from a seed URL on the same host",
    )
    p.add_argument("urls", nargs="*", help="Seed URL (only the first one is used)")
    p.add_argument("--config", type=str, help="Path to config JSON", default=None)
    p.add_argument("--max-pages", type=int, default=None, help="Page budget (default from config)")
    p.add_argument("--workers", type=int, default=None, help="Number of concurrent workers (default from config)")
    p.add_argument("--request-timeout", type=float, default=None, help="Per-page fetch timeout in seconds")
    p.add_argument("--crawl-timeout", type=float, default=None, help="Wall-clock limit for the whole crawl in seconds")
    p.add_argument("--log-level", type=str, default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
    return p


def _load_config(args: argparse.Namespace) -> CrawlConfig:
    if args.config:
        cfg = CrawlConfig.from_file(args.config)
    else:
        cfg = CrawlConfig.from_env()

    if args.max_pages is not None:
        cfg.max_pages = args.max_pages
    if args.workers is not None:
        cfg.workers = args.workers
    if args.request_timeout is not None:
        cfg.request_timeout = args.request_timeout
    if args.crawl_timeout is not None:
        cfg.crawl_timeout = args.crawl_timeout

    cfg.validate()
    return cfg


def _pick_seed(urls: List[str]) -> str | None:
    if not urls:
        return None
    if len(urls) != 1:
        logger.warning(
            "Expected 1 seed URL, but got %s, will pick the first one: %s", len(urls), urls[0]
        )
    return urls[0]


def run_cli(argv: List[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_level)

    seed = _pick_seed(args.urls)
    if seed is None:
        logger.error("Expected 1 seed URL, nothing to crawl.")
        return EXIT_USAGE

    try:
        cfg = _load_config(args)
    except (OSError, ValueError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return EXIT_USAGE

    try:
        engine = SiteCrawlEngine(seed, cfg)
    except InvalidSeed as exc:
        logger.error("Invalid seed %r: %s", seed, exc.reason)
        return EXIT_INVALID_SEED

    report: CrawlReport = asyncio.run(engine.crawl())

    for url in sorted(report.visited):
        logger.debug("VISITED %s", url)
    logger.info(
        "Visited: %s | Dequeued: %s | Enqueued: %s | Failed: %s | Budget hit: %s | Timed out: %s | %.2fs",
        report.visited_count,
        report.pages_dequeued,
        report.pages_enqueued,
        len(report.fetch_failures),
        report.budget_exhausted,
        report.timed_out,
        report.duration or 0.0,
    )
    return EXIT_OK
