"""
本文件是宿主调用插件的固定入口：Initialize / Reload / Update / GetString / Finalize。
主要函数:
- `initialize`: 分配 measure 并返回不透明句柄
- `reload`: 从宿主配置重新读取 measure 配置
- `update`: 数值输出（恒为 0）
- `get_string`: 字符串输出（空结果返回 None）
- `finalize`: 释放 measure
- `register_configured_measures` / `reload_configured_measures`: 按配置创建/重建预定义 measure

所有入口都不会向宿主抛出异常：句柄无效或内部出错时只记录日志并返回中性值。
"""

from __future__ import annotations

from typing import Dict, Optional

from searchbar.core.config import Settings, reload_settings
from searchbar.core.exceptions import UnknownHandleError
from searchbar.core.host import HostAPI, MappingHostAPI
from searchbar.core.logger import configure_logging, setup_logger
from searchbar.services.measure_service import Measure, MeasureRegistry, measure_registry

logger = setup_logger("Plugin")


def initialize(
    api: Optional[HostAPI] = None,
    registry: MeasureRegistry = measure_registry,
    measure: Optional[Measure] = None,
) -> int:
    """
    输入:
    - `api`: 宿主 API；提供时立即执行一次 Reload
    - `registry`: 句柄登记表
    - `measure`: 预先构造的 measure（测试时注入替身数据源）

    输出:
    - 新分配的句柄

    作用:
    - 对应宿主的 Initialize
    """

    handle = registry.create(measure)
    if api is not None:
        reload(handle, api, registry=registry)
    return handle


def reload(
    handle: int,
    api: HostAPI,
    max_value: Optional[float] = None,
    registry: MeasureRegistry = measure_registry,
) -> None:
    try:
        registry.get(handle).reload(api, max_value)
    except UnknownHandleError as e:
        logger.error(f"Reload 失败: {e}")
    except Exception as e:
        logger.error(f"Reload 异常 (handle={handle}): {e}")


def update(handle: int, registry: MeasureRegistry = measure_registry) -> float:
    try:
        return registry.get(handle).update()
    except UnknownHandleError as e:
        logger.error(f"Update 失败: {e}")
        return 0.0


def get_string(handle: int, registry: MeasureRegistry = measure_registry) -> Optional[str]:
    """
    输入:
    - `handle`: measure 句柄

    输出:
    - 数据源返回的字符串；为空时返回 None

    作用:
    - 对应宿主的 GetString；结果非空时触发 `OnCompleteAction`
    """

    try:
        measure = registry.get(handle)
    except UnknownHandleError as e:
        logger.error(f"GetString 失败: {e}")
        return None

    try:
        value = measure.get_string()
    except Exception as e:
        logger.error(f"GetString 异常 (handle={handle}): {e}")
        return None

    measure.notify_complete(value)
    return value or None


def finalize(handle: int, registry: MeasureRegistry = measure_registry) -> None:
    try:
        registry.release(handle)
    except UnknownHandleError as e:
        logger.error(f"Finalize 失败: {e}")


def create_measure(options: dict, registry: MeasureRegistry = measure_registry) -> int:
    """以普通字典作为配置来源创建 measure，等价于 Initialize + Reload。"""

    return initialize(MappingHostAPI(options), registry=registry)


def register_configured_measures(config: Settings, registry: MeasureRegistry = measure_registry) -> Dict[str, int]:
    """
    输入:
    - `config`: 配置对象（读取 `MEASURES`）
    - `registry`: 句柄登记表

    输出:
    - 名称到句柄的映射

    作用:
    - 为每个预定义 measure 执行 Initialize + Reload，并绑定名称
    """

    created: Dict[str, int] = {}
    for name, options in (config.MEASURES or {}).items():
        handle = create_measure(options or {}, registry=registry)
        registry.bind_name(name, handle)
        created[name] = handle
    return created


def reload_configured_measures(registry: MeasureRegistry = measure_registry) -> Dict[str, int]:
    """
    输入:
    - `registry`: 句柄登记表

    输出:
    - 重新创建后的名称到句柄映射

    作用:
    - 重新读取 `config.yaml` 与环境变量，应用新的日志等级，
      释放旧的预定义 measure 并按新配置重新创建；宿主自行创建的句柄不受影响
    """

    config = reload_settings()
    configure_logging()
    for handle in set(registry.names().values()):
        finalize(handle, registry=registry)
    created = register_configured_measures(config, registry=registry)
    logger.info(f"🔄 配置已重新加载，预定义 measure: {', '.join(created) or '无'}")
    return created


__all__ = [
    "create_measure",
    "finalize",
    "get_string",
    "initialize",
    "register_configured_measures",
    "reload",
    "reload_configured_measures",
    "update",
]
