"""
本文件用于定义 measure 的配置模型与类型枚举，以及 HTTP 接口的请求体/响应体。
主要类:
- `MeasureType`: measure 数据源类型（在加载配置时一次性判定）
- `MeasureOptions`: 从宿主配置读取的 measure 配置
- `MeasureValue`: measure 取值响应体
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from searchbar.core.host import HostAPI

DEFAULT_TYPE = "RecentHistory"
DEFAULT_LIMIT = 6


class MeasureType(str, Enum):
    RECENT_HISTORY = "RecentHistory"
    TOP_TRENDS = "TopTrends"
    INVALID = "Invalid"

    @classmethod
    def parse(cls, value: str) -> "MeasureType":
        """
        输入:
        - `value`: 配置中的 `Type` 字符串

        输出:
        - 对应的 `MeasureType`；无法识别时返回 `INVALID`

        作用:
        - 不区分大小写地匹配两种数据源，避免每次取值重复比较字符串
        """

        normalized = (value or "").strip().lower()
        for member in (cls.RECENT_HISTORY, cls.TOP_TRENDS):
            if member.value.lower() == normalized:
                return member
        return cls.INVALID


class MeasureOptions(BaseModel):
    """
    输入:
    - 宿主配置项 `Type` / `Limit` / `SQLitePath` / `OnCompleteAction`

    输出:
    - 不可变的 measure 配置对象

    作用:
    - 每次 Reload 时整体重建；加载阶段不做任何校验，错误在首次取值时才暴露
    """

    type: str = DEFAULT_TYPE
    limit: int = DEFAULT_LIMIT
    sqlite_path: str = ""
    on_complete_action: str = ""

    model_config = {"frozen": True}

    @property
    def measure_type(self) -> MeasureType:
        return MeasureType.parse(self.type)

    @classmethod
    def from_host(cls, api: HostAPI) -> "MeasureOptions":
        return cls(
            type=api.read_string("Type", DEFAULT_TYPE).strip(),
            limit=api.read_int("Limit", DEFAULT_LIMIT),
            sqlite_path=api.read_string("SQLitePath", "").strip(),
            on_complete_action=api.read_string("OnCompleteAction", ""),
        )


class MeasureValue(BaseModel):
    handle: int
    number: float = 0.0
    string: Optional[str] = None
