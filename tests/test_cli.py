import json
import logging

from sitecrawler.engines.base import CrawlReport, CrawlState
from sitecrawler.engines.site_engine import SiteCrawlEngine
from sitecrawler.ui import cli


def _fake_crawl(calls):
    async def crawl(self):
        calls.append((self.seed_url, self.config))
        return CrawlReport(
            seed_url=self.seed_url,
            state=CrawlState.TERMINATED,
            visited=frozenset({self.seed_url}),
            pages_dequeued=1,
            duration=0.01,
        )

    return crawl


def test_no_arguments_is_a_usage_error(monkeypatch, caplog):
    calls = []
    monkeypatch.setattr(SiteCrawlEngine, "crawl", _fake_crawl(calls))
    with caplog.at_level(logging.ERROR):
        assert cli.run_cli([]) == cli.EXIT_USAGE
    assert calls == []
    assert "nothing to crawl" in caplog.text


def test_invalid_seed_aborts(monkeypatch, caplog):
    calls = []
    monkeypatch.setattr(SiteCrawlEngine, "crawl", _fake_crawl(calls))
    with caplog.at_level(logging.ERROR):
        assert cli.run_cli(["not a url"]) == cli.EXIT_INVALID_SEED
    assert calls == []
    assert "Invalid seed" in caplog.text


def test_extra_arguments_warn_and_use_the_first(monkeypatch, caplog):
    calls = []
    monkeypatch.setattr(SiteCrawlEngine, "crawl", _fake_crawl(calls))
    with caplog.at_level(logging.WARNING):
        assert cli.run_cli(["https://site.test/", "https://ignored.test/"]) == cli.EXIT_OK
    assert [seed for seed, _ in calls] == ["https://site.test/"]
    assert "will pick the first one" in caplog.text


def test_options_override_config(monkeypatch):
    calls = []
    monkeypatch.setattr(SiteCrawlEngine, "crawl", _fake_crawl(calls))
    code = cli.run_cli(
        ["https://site.test/", "--max-pages", "7", "--workers", "2", "--request-timeout", "1.5", "--crawl-timeout", "30"]
    )
    assert code == cli.EXIT_OK
    (_, cfg), = calls
    assert (cfg.max_pages, cfg.workers, cfg.request_timeout, cfg.crawl_timeout) == (7, 2, 1.5, 30.0)


def test_config_file_is_loaded(monkeypatch, tmp_path):
    calls = []
    monkeypatch.setattr(SiteCrawlEngine, "crawl", _fake_crawl(calls))
    path = tmp_path / "crawl.json"
    path.write_text(json.dumps({"max_pages": 3}), encoding="utf-8")
    assert cli.run_cli(["https://site.test/", "--config", str(path)]) == cli.EXIT_OK
    assert calls[0][1].max_pages == 3


def test_bad_option_value_is_a_usage_error(monkeypatch):
    calls = []
    monkeypatch.setattr(SiteCrawlEngine, "crawl", _fake_crawl(calls))
    assert cli.run_cli(["https://site.test/", "--workers", "0"]) == cli.EXIT_USAGE
    assert calls == []
