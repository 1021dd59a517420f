"""
本文件用于实现 measure 本体（按类型分发到数据源）以及宿主句柄到 measure 实例的登记表。
主要类/对象:
- `Measure`: 单个 measure，负责 Reload/Update/GetString 的实际逻辑
- `MeasureRegistry`: 句柄登记表（分配、查找、释放）
- `measure_registry`: 全局登记表单例
"""

from __future__ import annotations

import itertools
from typing import Dict, List, Optional

from searchbar.core.exceptions import UnknownHandleError
from searchbar.core.host import HostAPI, MappingHostAPI
from searchbar.core.logger import setup_logger
from searchbar.schemas.measure import MeasureOptions, MeasureType
from searchbar.services.history_service import HistoryService, history_service
from searchbar.services.trends_service import TrendsService, trends_service

logger = setup_logger("MeasureService")

INVALID_TYPE = "Invalid Type specified."


class Measure:
    """
    输入:
    - `history` / `trends`: 数据源实现（默认使用全局单例）

    输出:
    - measure 实例

    作用:
    - 保存最近一次 Reload 读到的配置，并在取值时按类型路由到对应数据源
    """

    def __init__(
        self,
        history: Optional[HistoryService] = None,
        trends: Optional[TrendsService] = None,
    ) -> None:
        self.history = history or history_service
        self.trends = trends or trends_service
        self.api: HostAPI = MappingHostAPI()
        self.options = MeasureOptions()
        self.measure_type = self.options.measure_type

    def reload(self, api: HostAPI, max_value: Optional[float] = None) -> None:
        self.api = api
        self.options = MeasureOptions.from_host(api)
        self.measure_type = self.options.measure_type
        logger.debug(f"measure 配置已加载: {self.options}")

    def update(self) -> float:
        return 0.0

    def get_string(self) -> str:
        if self.measure_type is MeasureType.RECENT_HISTORY:
            return self.history.get_recent_history(self.options)
        if self.measure_type is MeasureType.TOP_TRENDS:
            return self.trends.get_top_trends(self.options)

        logger.error(f"无效的 Type '{self.options.type}'")
        return INVALID_TYPE

    def notify_complete(self, value: Optional[str]) -> None:
        """取到非空结果且配置了 `OnCompleteAction` 时，让宿主执行该命令。"""

        action = self.options.on_complete_action
        if not value or not action:
            return
        try:
            self.api.execute(action)
        except Exception as e:
            logger.error(f"执行 OnCompleteAction 失败: {e}")


class MeasureRegistry:
    """
    输入:
    - 无

    输出:
    - 句柄登记表

    作用:
    - 用自增整数作为宿主持有的不透明句柄，独占持有 measure 实例，直到宿主显式释放
    """

    def __init__(self) -> None:
        self._measures: Dict[int, Measure] = {}
        self._names: Dict[str, int] = {}
        self._ids = itertools.count(1)

    def create(self, measure: Optional[Measure] = None) -> int:
        handle = next(self._ids)
        self._measures[handle] = measure or Measure()
        return handle

    def get(self, handle: int) -> Measure:
        try:
            return self._measures[handle]
        except KeyError:
            raise UnknownHandleError(handle) from None

    def release(self, handle: int) -> Measure:
        measure = self.get(handle)
        del self._measures[handle]
        for name, bound in list(self._names.items()):
            if bound == handle:
                del self._names[name]
        return measure

    def bind_name(self, name: str, handle: int) -> None:
        self.get(handle)
        self._names[name] = handle

    def resolve(self, name: str) -> int:
        try:
            return self._names[name]
        except KeyError:
            raise UnknownHandleError(name) from None

    def handles(self) -> List[int]:
        return sorted(self._measures)

    def names(self) -> Dict[str, int]:
        return dict(self._names)

    def clear(self) -> None:
        self._measures.clear()
        self._names.clear()


measure_registry = MeasureRegistry()
