from __future__ import annotations

import asyncio
import dataclasses
import logging
import time
from collections import Counter
from typing import Dict, FrozenSet, Iterable, List, Optional

from .base import CrawlReport, CrawlState
from .frontier import Frontier, PageCounter, VisitedSet
from .scope import is_in_scope
from ..adapters.base import HtmlFetcher, LinkExtractor
from ..config import CrawlConfig
from ..errors import FetchFailure, InvalidCandidate, InvalidScheme, InvalidSeed
from ..utils.http import worst_case_duration
from ..utils.loader import load_symbol
from ..utils.urls import host_of, normalize_url, scheme_of, validate_scheme

logger = logging.getLogger(__name__)


class SiteCrawlEngine:
    """
    Crawls every page reachable from a seed URL without leaving its host.

    - Engine owns the frontier, the visited set and the page counter.
    - Fetcher and link extractor are injected collaborators.
    - N workers (config.workers) pull from one shared frontier; one worker
      gives a sequential crawl.

    Two workers can both fetch a URL discovered twice before either marks it
    visited. The visited set still holds it once.
    """

    def __init__(
        self,
        seed_url: str,
        config: CrawlConfig | None = None,
        *,
        max_pages: int | None = None,
        workers: int | None = None,
        fetcher: HtmlFetcher | None = None,
        extractor: LinkExtractor | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self.log = log or logger
        self.state = CrawlState.IDLE

        cfg = config or CrawlConfig()
        overrides = {}
        if max_pages is not None:
            overrides["max_pages"] = max_pages
        if workers is not None:
            overrides["workers"] = workers
        self.config = dataclasses.replace(cfg, **overrides)

        self.seed_url = self._normalize_seed(seed_url)
        self.seed_host = host_of(self.seed_url)
        self.config.validate()

        self._frontier = Frontier()
        self._visited = VisitedSet()
        self._counter = PageCounter(self.config.max_pages)
        self._fetch_failures: Dict[str, str] = {}
        self._dropped: Counter[str] = Counter()
        self._budget_exhausted = False
        self._timed_out = False
        self._report: Optional[CrawlReport] = None

        self._owns_fetcher = fetcher is None
        if fetcher is None:
            fetcher_cls = load_symbol(self.config.fetcher)
            fetcher = fetcher_cls(
                timeout=self.config.request_timeout,
                user_agent=self.config.user_agent,
                retries=self.config.retries,
            )
        self.fetcher = fetcher
        self.extractor = extractor if extractor is not None else load_symbol(self.config.extractor)()

        self._frontier.put(self.seed_url)
        self.state = CrawlState.SEEDED
        self.log.info("Seeded crawl of %s (host %s)", self.seed_url, self.seed_host)

    @staticmethod
    def _normalize_seed(seed_url: str) -> str:
        seed = normalize_url(seed_url) if isinstance(seed_url, str) else None
        if seed is None:
            raise InvalidSeed(seed_url, "not a URL with a scheme and host")
        try:
            validate_scheme(scheme_of(seed))
        except InvalidScheme as exc:
            raise InvalidSeed(seed_url, str(exc)) from exc
        return seed

    # ---- Read-only views ----------------------------------------------------

    @property
    def visited(self) -> FrozenSet[str]:
        return self._visited.snapshot()

    @property
    def pages_dequeued(self) -> int:
        return self._counter.count

    @property
    def frontier_size(self) -> int:
        return len(self._frontier)

    @property
    def report(self) -> Optional[CrawlReport]:
        return self._report

    # ---- Scope & dedup policy -----------------------------------------------

    def is_in_scope(self, url: str) -> bool:
        return is_in_scope(url, self.seed_host)

    def is_new_candidate(self, url: str) -> bool:
        # Not atomic with the later visited.add(); see class docstring.
        return url not in self._visited

    def _check_crawlable(self, url: str) -> None:
        try:
            validate_scheme(scheme_of(url))
        except InvalidScheme as exc:
            raise InvalidCandidate(url, "disallowed scheme") from exc
        if not self.is_in_scope(url):
            raise InvalidCandidate(url, "out of scope")

    def _check_candidate(self, raw_url: str) -> str:
        url = normalize_url(raw_url)
        if url is None:
            raise InvalidCandidate(str(raw_url), "cannot be normalized")
        self._check_crawlable(url)
        if not self.is_new_candidate(url):
            raise InvalidCandidate(url, "already visited")
        return url

    def enqueue_links(self, links: Iterable[str]) -> int:
        """Filter discovered links and push the survivors. Returns the count added."""
        added = 0
        for link in sorted(links):
            try:
                url = self._check_candidate(link)
            except InvalidCandidate as exc:
                self._dropped[exc.reason] += 1
                self.log.debug("Not adding %s to the queue: %s", exc.url, exc.reason)
                continue
            self._frontier.put(url)
            added += 1
        self.log.debug("Queued %s new link(s), queue length %s", added, len(self._frontier))
        return added

    # ---- Crawl loop ---------------------------------------------------------

    async def crawl(self) -> CrawlReport:
        if self.state is not CrawlState.SEEDED:
            raise RuntimeError(f"crawl() needs a freshly seeded engine, state is {self.state.value}")

        cfg = self.config
        stop = asyncio.Event()
        started = time.monotonic()
        self.state = CrawlState.RUNNING
        self.log.info("Crawling %s with %s worker(s), budget %s page(s)", self.seed_url, cfg.workers, cfg.max_pages)

        workers = [asyncio.create_task(self._worker(f"worker-{i}", stop)) for i in range(cfg.workers)]
        drained = asyncio.create_task(self._frontier.join())
        stopped = asyncio.create_task(stop.wait())
        try:
            done, _ = await asyncio.wait(
                {drained, stopped},
                timeout=cfg.crawl_timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
            if not done:
                self._timed_out = True
                self.log.warning("Crawl timeout of %ss elapsed, draining", cfg.crawl_timeout)
            self.state = CrawlState.DRAINING
            stop.set()
            await self._wait_for_workers(workers)
        finally:
            drained.cancel()
            stopped.cancel()
            for task in workers:
                task.cancel()
            await asyncio.gather(drained, stopped, *workers, return_exceptions=True)
            if self._owns_fetcher and hasattr(self.fetcher, "close"):
                await self.fetcher.close()
            self.state = CrawlState.TERMINATED

        self._report = CrawlReport(
            seed_url=self.seed_url,
            state=self.state,
            visited=self._visited.snapshot(),
            pages_dequeued=self._counter.count,
            pages_enqueued=self._frontier.total_enqueued,
            fetch_failures=dict(self._fetch_failures),
            dropped_candidates=dict(self._dropped),
            budget_exhausted=self._budget_exhausted,
            timed_out=self._timed_out,
            duration=time.monotonic() - started,
        )
        self.log.info(
            "Crawl of %s finished: %s visited, %s dequeued, %s failed in %.2fs",
            self.seed_url,
            self._report.visited_count,
            self._report.pages_dequeued,
            len(self._report.fetch_failures),
            self._report.duration,
        )
        return self._report

    async def _wait_for_workers(self, workers: List[asyncio.Task]) -> None:
        grace = self._fetch_bound() + self.config.poll_interval
        done, pending = await asyncio.wait(workers, timeout=grace)
        for task in done:
            if not task.cancelled() and task.exception() is not None:
                self.log.error("Worker died: %r", task.exception())
        if pending:
            self.log.warning("Abandoning %s worker(s) still busy after %.1fs", len(pending), grace)

    def _fetch_bound(self) -> float:
        # A worker mid-fetch finishes or fails within this, retries and back-off included.
        bound = getattr(self.fetcher, "max_duration", None)
        if bound is None:
            bound = worst_case_duration(self.config.request_timeout, self.config.retries)
        return bound

    async def _worker(self, name: str, stop: asyncio.Event) -> None:
        while not stop.is_set():
            try:
                url = await asyncio.wait_for(self._frontier.get(), timeout=self.config.poll_interval)
            except asyncio.TimeoutError:
                continue

            try:
                if stop.is_set():
                    continue
                if url in self._visited:
                    self.log.debug("[%s] %s visited before, skipping", name, url)
                    continue
                if not self._counter.try_increment():
                    if not self._budget_exhausted:
                        self.log.info("Page budget of %s reached", self._counter.budget)
                    self._budget_exhausted = True
                    stop.set()
                    continue
                self.log.debug("[%s] QUEUE LENGTH: %s, DONE %s", name, len(self._frontier), self._counter.count)
                await self.crawl_url(url)
            finally:
                self._frontier.task_done()

    async def crawl_url(self, url: str) -> None:
        """
        Process one dequeued URL: fetch, extract, enqueue new links, mark visited.
        Never raises; a bad page is logged and recorded, and the crawl moves on.

        A URL that fails the scheme or scope re-check is dropped without being
        fetched or marked visited, so the visited set only ever holds in-scope
        http(s) URLs.
        """
        try:
            self._check_crawlable(url)
        except InvalidCandidate as exc:
            self.log.debug("URL %s is invalid, skipping: %s", url, exc.reason)
            return

        self.log.info("CRAWL %s", url)
        try:
            markup = await self.fetcher.fetch(url)
        except FetchFailure as exc:
            self._fetch_failures[url] = exc.reason
            self.log.warning("Unable to fetch %s: %s", url, exc.reason)
        except Exception as exc:  # broad catch to keep crawler moving
            self._fetch_failures[url] = repr(exc)
            self.log.exception("Fetcher raised on %s", url)
        else:
            try:
                links = set(self.extractor.extract(markup, url))
            except Exception:
                self.log.exception("Link extraction failed on %s", url)
                links = set()
            self.log.debug("Extracted %s link(s) from %s", len(links), url)
            self.enqueue_links(links)

        if not self._visited.add(url):
            self.log.debug("%s was fetched twice; visited entry kept once", url)
