from pathlib import Path
from typing import List, Tuple

import pytest

from searchbar.services.history_service import HistoryService
from searchbar.services.measure_service import MeasureRegistry
from searchbar.services.trends_service import TrendsService


class RecordingExecutor:
    """Stands in for the sqlite command line binary."""

    def __init__(self, output: str = "") -> None:
        self.output = output
        self.calls: List[Tuple[Path, Path, str]] = []

    def __call__(self, binary: Path, database: Path, sql: str) -> str:
        self.calls.append((binary, database, sql))
        return self.output


class RecordingFeed:
    def __init__(self, online: bool = True, body: str = "") -> None:
        self.online = online
        self.body = body
        self.probed: List[str] = []
        self.fetched: List[str] = []

    async def probe(self, url: str) -> bool:
        self.probed.append(url)
        return self.online

    async def fetch(self, url: str) -> str:
        self.fetched.append(url)
        return self.body


def build_rss(*titles, channel_title: str = "Daily Search Trends") -> str:
    items = "".join(
        f"<item><title>{t}</title><ht:approx_traffic>1000+</ht:approx_traffic></item>" if t is not None
        else "<item><ht:approx_traffic>50+</ht:approx_traffic></item>"
        for t in titles
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0" xmlns:ht="https://trends.google.com/trends/trendingsearches/daily">'
        f"<channel><title>{channel_title}</title>{items}</channel></rss>"
    )


@pytest.fixture
def rss():
    return build_rss


@pytest.fixture
def history_file(tmp_path):
    path = tmp_path / "History"
    path.write_bytes(b"SQLite format 3\x00fake history")
    return path


@pytest.fixture
def sqlite_binary(tmp_path):
    path = tmp_path / "sqlite3.exe"
    path.write_bytes(b"")
    return path


@pytest.fixture
def executor():
    return RecordingExecutor()


@pytest.fixture
def history(executor, history_file, tmp_path):
    return HistoryService(executor=executor, history_path=history_file, scratch_path=tmp_path / "ChromeHistory_Copy")


@pytest.fixture
def feed():
    return RecordingFeed()


@pytest.fixture
def trends(feed):
    return TrendsService(fetcher=feed.fetch, probe=feed.probe)


@pytest.fixture
def registry():
    return MeasureRegistry()
