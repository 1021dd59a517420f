import asyncio
import logging

import aiohttp
import pytest

from searchbar.core.exceptions import FeedParseError
from searchbar.schemas.measure import MeasureOptions
from searchbar.services.trends_service import NOT_INTERNET, TRENDS_ERROR, TrendsService, parse_trend_titles


def options(limit=6):
    return MeasureOptions(type="TopTrends", limit=limit)


def test_offline_skips_feed_fetch(trends, feed):
    feed.online = False

    assert trends.get_top_trends(options()) == NOT_INTERNET
    assert len(feed.probed) == 1
    assert feed.fetched == []


def test_connectivity_exception_counts_as_offline(feed):
    async def broken_probe(url):
        raise aiohttp.ClientConnectionError("dns")

    service = TrendsService(fetcher=feed.fetch, probe=broken_probe)

    assert service.get_top_trends(options()) == NOT_INTERNET
    assert feed.fetched == []


def test_first_items_up_to_limit(trends, feed, rss):
    feed.body = rss("A", "B", "C")

    assert trends.get_top_trends(options(limit=2)) == "A|B"


def test_fewer_items_than_limit(trends, feed, rss):
    feed.body = rss("A", "B", "C")

    assert trends.get_top_trends(options(limit=10)) == "A|B|C"


def test_item_without_title_is_skipped(trends, feed, rss):
    feed.body = rss("A", None, "C")

    assert trends.get_top_trends(options(limit=3)) == "A|C"


def test_channel_title_is_not_a_trend(trends, feed, rss):
    feed.body = rss("A", channel_title="Daily Search Trends")

    assert trends.get_top_trends(options()) == "A"


def test_feed_url_includes_geography(trends, feed, rss):
    feed.body = rss("A")

    trends.get_top_trends(options())

    assert feed.fetched == ["https://trends.google.com/trends/trendingsearches/daily/rss?geo=US"]
    assert feed.probed == ["http://www.google.com"]


def test_fetch_failure_becomes_generic_error(feed, caplog):
    async def broken_fetch(url):
        raise aiohttp.ClientConnectionError("Service Unavailable")

    service = TrendsService(fetcher=broken_fetch, probe=feed.probe)

    with caplog.at_level(logging.ERROR):
        assert service.get_top_trends(options()) == TRENDS_ERROR
    assert "Service Unavailable" in caplog.text


def test_non_xml_body_becomes_generic_error(trends, feed):
    feed.body = ""

    assert trends.get_top_trends(options()) == TRENDS_ERROR


def test_truncated_feed_becomes_generic_error(trends, feed, rss):
    feed.body = rss("A", "B", "C").replace("</channel></rss>", "") + "<item><title>D"

    assert trends.get_top_trends(options()) == TRENDS_ERROR


def test_html_error_page_becomes_generic_error(trends, feed, caplog):
    feed.body = "<html><body><p>Service Unavailable<br></p></body></html>"

    with caplog.at_level(logging.ERROR):
        assert trends.get_top_trends(options()) == TRENDS_ERROR
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_async_entry_point(trends, feed, rss):
    feed.body = rss("A", "B")

    assert asyncio.run(trends.fetch_top_trends(options(limit=1))) == "A"


@pytest.mark.parametrize("limit", [0, -3])
def test_parse_non_positive_limit(rss, limit):
    assert parse_trend_titles(rss("A", "B"), limit) == []


def test_parse_ignores_nested_titles(rss):
    body = rss("A").replace(
        "<title>A</title>", "<title>A</title><source><title>Some Paper</title></source>"
    )

    assert parse_trend_titles(body, 5) == ["A"]


@pytest.mark.parametrize(
    "body",
    [
        "   ",
        "<rss><channel><item><title>A</title></item>",
        "<rss><channel><item><title>A & B</title></item></channel></rss>",
    ],
)
def test_parse_rejects_malformed_documents(body):
    with pytest.raises(FeedParseError):
        parse_trend_titles(body, 5)
