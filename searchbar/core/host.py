"""
本文件用于描述宿主（桌面信息显示引擎）提供给插件的 API 对象，并提供基于字典的实现。
主要类:
- `HostAPI`: 宿主 API 协议（读取配置项、写日志、执行宿主命令）
- `MappingHostAPI`: 以普通映射作为配置来源的宿主 API 实现
"""

from __future__ import annotations

from typing import Any, Callable, List, Mapping, Optional, Protocol, runtime_checkable

from searchbar.core.logger import setup_logger

logger = setup_logger("HostAPI")


@runtime_checkable
class HostAPI(Protocol):
    """宿主为每个 measure 提供的回调集合。"""

    def read_string(self, key: str, default: str) -> str:
        ...

    def read_int(self, key: str, default: int) -> int:
        ...

    def log(self, level: int, message: str) -> None:
        ...

    def execute(self, command: str) -> None:
        ...


class MappingHostAPI:
    """
    输入:
    - `options`: 配置项映射（如 YAML 中的一个 measure 节点或 HTTP 请求体）
    - `executor`: 可选的宿主命令执行回调

    输出:
    - 满足 `HostAPI` 协议的对象

    作用:
    - 在没有真实宿主时模拟宿主的配置读取语义：键名不区分大小写，读取失败返回默认值
    """

    def __init__(
        self,
        options: Optional[Mapping[str, Any]] = None,
        executor: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._options = {str(k).lower(): v for k, v in (options or {}).items()}
        self._executor = executor
        self.executed: List[str] = []

    def read_string(self, key: str, default: str) -> str:
        value = self._options.get(key.lower())
        if value is None:
            return default
        return str(value)

    def read_int(self, key: str, default: int) -> int:
        value = self._options.get(key.lower())
        if value is None or isinstance(value, bool):
            return default
        try:
            return int(str(value).strip())
        except ValueError:
            logger.warning(f"配置项 {key}={value!r} 不是整数，使用默认值 {default}")
            return default

    def log(self, level: int, message: str) -> None:
        logger.log(level, message)

    def execute(self, command: str) -> None:
        self.executed.append(command)
        if self._executor is not None:
            self._executor(command)
        else:
            logger.debug(f"宿主命令未绑定执行器，已忽略: {command}")


__all__ = ["HostAPI", "MappingHostAPI"]
