"""
本文件用于初始化并提供插件统一日志能力（根 logger 配置、内存日志缓存与命名 logger 获取）。
主要函数:
- `configure_logging`: 初始化根日志格式与等级
- `setup_logger`: 获取具备统一格式的命名 logger
- `get_cached_log_text` / `clear_cached_logs`: 读取/清空内存中的最近日志
"""

import logging
import sys
from collections import deque
from threading import Lock
from typing import Deque, Optional

from searchbar.core.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_log_lock: Lock = Lock()
_log_buffer: Deque[str] = deque(maxlen=1000)
_memory_handler: Optional[logging.Handler] = None


def _resolve_level(level: str) -> int:
    """
    输入:
    - `level`: 日志等级字符串（如 INFO/DEBUG）

    输出:
    - `logging` 对应的等级整数

    作用:
    - 将字符串日志等级转换为 `logging` 可用的等级值
    """

    return getattr(logging, (level or "").upper(), logging.INFO)


class _InMemoryLogHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
        except Exception:
            return
        with _log_lock:
            _log_buffer.append(msg)


def get_cached_log_text() -> str:
    with _log_lock:
        return "\n".join(_log_buffer)


def clear_cached_logs() -> None:
    with _log_lock:
        _log_buffer.clear()


def configure_logging() -> None:
    """
    输入:
    - 无

    输出:
    - 无

    作用:
    - 按当前配置初始化根 logger 的输出格式与等级，挂载内存日志缓存，并压低常见库的日志等级；
      配置重新加载后再次调用即可应用新的日志等级
    """

    log_level = _resolve_level(get_settings().LOG_LEVEL)
    formatter = logging.Formatter(LOG_FORMAT)
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    root.setLevel(log_level)

    global _memory_handler
    if _memory_handler is None:
        _memory_handler = _InMemoryLogHandler()
        root.addHandler(_memory_handler)
    _memory_handler.setLevel(log_level)
    _memory_handler.setFormatter(formatter)

    noisy_level = log_level
    if log_level == logging.INFO:
        noisy_level = logging.WARNING

    for name in (
        "uvicorn",
        "uvicorn.error",
        "uvicorn.access",
        "asyncio",
        "aiohttp",
    ):
        logging.getLogger(name).setLevel(noisy_level)


def setup_logger(name: str) -> logging.Logger:
    """
    输入:
    - `name`: logger 名称

    输出:
    - `logging.Logger` 实例

    作用:
    - 创建并返回指定名称的 logger（若已存在 handler 则复用）
    """

    logger = logging.getLogger(name)
    if logger.hasHandlers():
        return logger

    configure_logging()
    logger.setLevel(_resolve_level(get_settings().LOG_LEVEL))

    return logger

