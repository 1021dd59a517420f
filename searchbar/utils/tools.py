"""
本文件用于提供通用工具函数：结果行的拆分与拼接，以及浏览器历史记录文件的定位。
主要函数:
- `split_lines`: 按换行拆分命令输出并丢弃空行
- `join_fields`: 以 `|` 拼接字段
- `default_history_path`: 按操作系统推断 Chrome 历史记录文件位置
"""

from __future__ import annotations

import os
import re
import sys
from pathlib import Path
from typing import Iterable, List, Optional

FIELD_DELIMITER = "|"


def split_lines(text: str) -> List[str]:
    """
    输入:
    - `text`: 外部程序的标准输出

    输出:
    - 非空行列表（保持原顺序）

    作用:
    - 兼容 `\\r\\n` 与 `\\n` 两种换行，空行直接丢弃，行内容不做裁剪
    """

    if not text:
        return []
    return [line for line in re.split(r"[\r\n]", text) if line]


def join_fields(fields: Iterable[str]) -> str:
    # 不做转义：字段内自带的 `|` 会与相邻字段混在一起
    return FIELD_DELIMITER.join(fields)


def default_history_path(platform: Optional[str] = None) -> Path:
    """
    输入:
    - `platform`: 平台标识（默认取 `sys.platform`）

    输出:
    - Chrome 默认用户的 `History` 文件路径

    作用:
    - Windows 使用 `%LOCALAPPDATA%`，macOS 使用 Application Support，其余平台使用 `~/.config`
    """

    platform = platform or sys.platform
    if platform.startswith("win"):
        local_app_data = os.environ.get("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
        return Path(local_app_data) / "Google" / "Chrome" / "User Data" / "Default" / "History"
    if platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "Google" / "Chrome" / "Default" / "History"
    return Path.home() / ".config" / "google-chrome" / "Default" / "History"
