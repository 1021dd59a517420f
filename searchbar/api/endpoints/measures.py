"""
本文件用于通过 HTTP 暴露与宿主插件入口等价的 measure 生命周期接口。
主要函数:
- `api_create_measure`: Initialize + Reload
- `api_reload_measure`: Reload
- `api_get_measure_value`: Update + GetString
- `api_finalize_measure`: Finalize
- `api_preview_measure`: 一次性取值（不登记句柄）
- `api_get_named_measure_value`: 按 `config.yaml` 中的名称取值

接口均为同步函数，由 FastAPI 放入线程池执行，数据源内部可以自行阻塞。
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from searchbar import plugin
from searchbar.core.exceptions import UnknownHandleError
from searchbar.core.host import MappingHostAPI
from searchbar.api.deps import get_registry
from searchbar.schemas.measure import MeasureValue
from searchbar.services.measure_service import Measure, MeasureRegistry

router = APIRouter(prefix="/api/measures", tags=["measures"])


def _read_value(registry: MeasureRegistry, handle: int) -> MeasureValue:
    try:
        registry.get(handle)
    except UnknownHandleError as e:
        raise HTTPException(status_code=404, detail=str(e))
    number = plugin.update(handle, registry=registry)
    string = plugin.get_string(handle, registry=registry)
    return MeasureValue(handle=handle, number=number, string=string)


@router.post("")
def api_create_measure(
    options: Optional[Dict[str, Any]] = Body(default=None),
    registry: MeasureRegistry = Depends(get_registry),
):
    """
    输入:
    - `options`: measure 配置（`Type` / `Limit` / `SQLitePath` / `OnCompleteAction`）

    输出:
    - 新分配的句柄

    作用:
    - 等价于宿主依次调用 Initialize 与 Reload
    """

    handle = plugin.create_measure(options or {}, registry=registry)
    return {"handle": handle}


@router.get("/preview", response_model=MeasureValue)
def api_preview_measure(
    type: str = "RecentHistory",
    limit: int = 6,
    sqlite_path: Optional[str] = None,
):
    measure = Measure()
    measure.reload(MappingHostAPI({"Type": type, "Limit": limit, "SQLitePath": sqlite_path}))
    value = measure.get_string()
    return MeasureValue(handle=0, number=measure.update(), string=value or None)


@router.get("/by-name/{name}/value", response_model=MeasureValue)
def api_get_named_measure_value(name: str, registry: MeasureRegistry = Depends(get_registry)):
    try:
        handle = registry.resolve(name)
    except UnknownHandleError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _read_value(registry, handle)


@router.put("/{handle}")
def api_reload_measure(
    handle: int,
    options: Optional[Dict[str, Any]] = Body(default=None),
    registry: MeasureRegistry = Depends(get_registry),
):
    try:
        registry.get(handle)
    except UnknownHandleError as e:
        raise HTTPException(status_code=404, detail=str(e))
    plugin.reload(handle, MappingHostAPI(options or {}), registry=registry)
    return {"ok": True}


@router.get("/{handle}/value", response_model=MeasureValue)
def api_get_measure_value(handle: int, registry: MeasureRegistry = Depends(get_registry)):
    return _read_value(registry, handle)


@router.delete("/{handle}")
def api_finalize_measure(handle: int, registry: MeasureRegistry = Depends(get_registry)):
    try:
        registry.get(handle)
    except UnknownHandleError as e:
        raise HTTPException(status_code=404, detail=str(e))
    plugin.finalize(handle, registry=registry)
    return {"ok": True}
