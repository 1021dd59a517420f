"""
本文件用于实现“最近浏览历史”数据源：复制 Chrome 历史库、调用外部 sqlite 程序查询标题并拼接结果。
主要类/函数:
- `run_query_binary`: 默认的查询执行器（子进程方式调用 sqlite 命令行程序）
- `HistoryService`: 最近浏览历史数据源实现
- `history_service`: 全局服务单例
"""

from __future__ import annotations

import shutil
import subprocess
import sys
from pathlib import Path
from typing import Callable, Optional

from searchbar.core.config import get_settings
from searchbar.core.exceptions import QueryExecutionError
from searchbar.core.logger import setup_logger
from searchbar.schemas.measure import MeasureOptions
from searchbar.utils.tools import default_history_path, join_fields, split_lines

logger = setup_logger("HistoryService")

HISTORY_NOT_FOUND = "Chrome history not found."
BINARY_NOT_FOUND = "SQlite.exe not found."
HISTORY_ERROR = "Error retrieving history."

HISTORY_QUERY = "SELECT title FROM urls GROUP BY title ORDER BY MAX(last_visit_time) DESC LIMIT {limit};"

# (查询程序路径, 数据库路径, SQL) -> 标准输出
QueryExecutor = Callable[[Path, Path, str], str]


def build_history_query(limit: int) -> str:
    return HISTORY_QUERY.format(limit=limit)


def run_query_binary(binary: Path, database: Path, sql: str, timeout: Optional[float] = None) -> str:
    """
    输入:
    - `binary`: sqlite 命令行程序路径
    - `database`: 数据库文件路径
    - `sql`: 原始 SQL 文本
    - `timeout`: 超时秒数；None 表示一直等待

    输出:
    - 程序的标准输出文本

    作用:
    - 以两个独立参数（数据库路径、SQL）启动子进程并同步读取输出；退出码非 0 时只记录日志
    """

    # 无控制台的宿主进程中启动子进程时不弹出命令行窗口
    creationflags = subprocess.CREATE_NO_WINDOW if sys.platform == "win32" else 0

    try:
        completed = subprocess.run(
            [str(binary), str(database), sql],
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            check=False,
            creationflags=creationflags,
        )
    except subprocess.TimeoutExpired as e:
        raise QueryExecutionError(f"查询程序执行超时（{timeout}s）") from e
    except OSError as e:
        raise QueryExecutionError(f"无法启动查询程序 {binary}: {e}") from e

    if completed.returncode != 0:
        logger.warning(f"查询程序退出码 {completed.returncode}: {(completed.stderr or '').strip()}")
    return completed.stdout or ""


class HistoryService:
    """
    输入:
    - `executor`: 查询执行器（测试时可替换）
    - `history_path` / `scratch_path`: 历史库源文件与临时副本路径（默认取配置）

    输出:
    - 以 `|` 拼接的最近访问页面标题

    作用:
    - 先复制历史库避免与运行中的浏览器争抢文件锁，再对副本执行固定 SQL
    """

    def __init__(
        self,
        executor: Optional[QueryExecutor] = None,
        history_path: Optional[Path] = None,
        scratch_path: Optional[Path] = None,
    ) -> None:
        self._executor = executor
        self._history_path = history_path
        self._scratch_path = scratch_path

    @property
    def history_path(self) -> Path:
        if self._history_path is not None:
            return Path(self._history_path)
        configured = get_settings().HISTORY_PATH
        if configured and configured.strip():
            return Path(configured.strip()).expanduser()
        return default_history_path()

    @property
    def scratch_path(self) -> Path:
        if self._scratch_path is not None:
            return Path(self._scratch_path)
        return Path(get_settings().SCRATCH_PATH)

    def _execute(self, binary: Path, database: Path, sql: str) -> str:
        if self._executor is not None:
            return self._executor(binary, database, sql)
        return run_query_binary(binary, database, sql, timeout=get_settings().QUERY_TIMEOUT_SECONDS)

    def get_recent_history(self, options: MeasureOptions) -> str:
        """
        输入:
        - `options`: 当前 measure 配置（使用 `limit` 与 `sqlite_path`）

        输出:
        - 标题字符串，或固定的错误提示文本

        作用:
        - 依次检查历史库、查询程序是否存在，复制历史库后执行查询并整理输出；
          任何异常都只记录日志并返回通用错误提示
        """

        history_path = self.history_path
        if not history_path.is_file():
            logger.error(f"未找到 Chrome 历史记录文件: '{history_path}'")
            return HISTORY_NOT_FOUND

        if not options.sqlite_path or not Path(options.sqlite_path).is_file():
            logger.error(f"SQLitePath 未配置或无效: '{options.sqlite_path}'")
            return BINARY_NOT_FOUND

        try:
            scratch_path = self.scratch_path
            shutil.copyfile(history_path, scratch_path)
            output = self._execute(Path(options.sqlite_path), scratch_path, build_history_query(options.limit))
        except Exception as e:
            logger.error(f"读取最近浏览历史失败: {e}")
            return HISTORY_ERROR

        lines = split_lines(output)
        # 与 SQLite 的 LIMIT 语义一致：非负值截断，负值交给查询程序处理
        if options.limit >= 0:
            lines = lines[: options.limit]
        logger.debug(f"最近浏览历史 {len(lines)} 条")
        return join_fields(lines)


history_service = HistoryService()
