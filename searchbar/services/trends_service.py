"""
本文件用于实现“热门搜索趋势”数据源：联网探测、抓取 Google Trends RSS 并提取条目标题。
主要类/函数:
- `probe_connectivity`: 默认联网探测（aiohttp）
- `fetch_feed`: 默认 RSS 抓取（aiohttp）
- `parse_trend_titles`: 从 RSS 文本中提取前 N 个条目标题
- `TrendsService`: 热门趋势数据源实现
- `trends_service`: 全局服务单例
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List, Optional

import aiohttp
from bs4 import BeautifulSoup
from lxml import etree

from searchbar.core.config import get_settings
from searchbar.core.exceptions import FeedParseError
from searchbar.core.logger import setup_logger
from searchbar.schemas.measure import MeasureOptions
from searchbar.utils.tools import join_fields

logger = setup_logger("TrendsService")

NOT_INTERNET = "Not Internet"
TRENDS_ERROR = "Error retrieving top trends."

ConnectivityProbe = Callable[[str], Awaitable[bool]]
FeedFetcher = Callable[[str], Awaitable[str]]


def _client_timeout() -> aiohttp.ClientTimeout:
    return aiohttp.ClientTimeout(total=get_settings().HTTP_TIMEOUT_SECONDS)


def _headers() -> dict:
    return {
        "User-Agent": get_settings().USER_AGENT,
        "Accept": "application/rss+xml,application/xml;q=0.9,text/xml;q=0.8,*/*;q=0.5",
    }


async def probe_connectivity(url: str) -> bool:
    """
    输入:
    - `url`: 探测地址

    输出:
    - 能否拿到非错误响应

    作用:
    - 尽力而为的联网检测；DNS 失败、超时、拒绝连接都视为离线
    """

    try:
        async with aiohttp.ClientSession(headers=_headers(), timeout=_client_timeout()) as session:
            async with session.get(url) as resp:
                return resp.status < 400
    except Exception as e:
        logger.debug(f"联网探测失败 {url}: {e}")
        return False


async def fetch_feed(url: str) -> str:
    async with aiohttp.ClientSession(headers=_headers(), timeout=_client_timeout()) as session:
        async with session.get(url) as resp:
            resp.raise_for_status()
            try:
                return await resp.text()
            except UnicodeDecodeError:
                raw = await resp.read()
                return raw.decode("utf-8", errors="ignore")


def parse_trend_titles(rss_text: str, limit: int) -> List[str]:
    """
    输入:
    - `rss_text`: RSS/XML 文本
    - `limit`: 最多读取的 `item` 数量

    输出:
    - 标题列表（缺少 `title` 的条目直接跳过，不补位）

    作用:
    - 先用 lxml 严格校验文档格式，再按出现顺序提取条目标题；截断或非 XML 的响应抛出 `FeedParseError`
    """

    try:
        etree.fromstring((rss_text or "").encode("utf-8"), parser=etree.XMLParser(recover=False))
    except (etree.XMLSyntaxError, ValueError) as e:
        raise FeedParseError(f"RSS 不是格式良好的 XML: {e}") from e

    soup = BeautifulSoup(rss_text, "lxml-xml")

    titles: List[str] = []
    for item in soup.find_all("item")[: max(limit, 0)]:
        title_elem = item.find("title", recursive=False)
        if title_elem is not None:
            titles.append(title_elem.get_text())
    return titles


class TrendsService:
    """
    输入:
    - `fetcher`: RSS 抓取函数（测试时可替换）
    - `probe`: 联网探测函数（测试时可替换）

    输出:
    - 以 `|` 拼接的热门趋势标题

    作用:
    - 先探测网络再抓取 RSS；探测失败与抓取失败返回不同的提示文本
    """

    def __init__(self, fetcher: Optional[FeedFetcher] = None, probe: Optional[ConnectivityProbe] = None) -> None:
        self._fetcher = fetcher or fetch_feed
        self._probe = probe or probe_connectivity

    async def fetch_top_trends(self, options: MeasureOptions) -> str:
        settings = get_settings()
        try:
            online = await self._probe(settings.CONNECTIVITY_URL)
        except Exception as e:
            logger.debug(f"联网探测异常: {e}")
            online = False
        if not online:
            logger.warning(f"无法访问 {settings.CONNECTIVITY_URL}，跳过热门趋势抓取")
            return NOT_INTERNET

        url = settings.trends_url
        try:
            rss_text = await self._fetcher(url)
            titles = parse_trend_titles(rss_text, options.limit)
        except Exception as e:
            logger.error(f"获取热门趋势失败 {url}: {e}")
            return TRENDS_ERROR

        logger.debug(f"热门趋势 {len(titles)} 条")
        return join_fields(titles)

    def get_top_trends(self, options: MeasureOptions) -> str:
        """同步入口：宿主线程阻塞直到探测与抓取结束。"""

        return asyncio.run(self.fetch_top_trends(options))


trends_service = TrendsService()
