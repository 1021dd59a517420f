"""
本文件用于提供系统相关 API：运行信息、预定义 measure 状态与内存日志。
主要函数:
- `api_health`: 应用名称、版本、已登记 measure 与配置缺失项
- `api_get_logs`: 读取最近日志
- `api_clear_logs`: 清空最近日志
- `api_reload_config`: 重新加载配置并重建预定义 measure
"""

from fastapi import APIRouter, Depends

from searchbar import plugin
from searchbar.api.deps import get_registry
from searchbar.core.config import get_missing_config_keys, get_settings
from searchbar.core.logger import clear_cached_logs, get_cached_log_text
from searchbar.services.measure_service import MeasureRegistry

router = APIRouter(prefix="/api/system", tags=["system"])


@router.get("/health")
def api_health(registry: MeasureRegistry = Depends(get_registry)):
    settings = get_settings()
    return {
        "app_name": settings.APP_NAME,
        "version": settings.VERSION,
        "handles": registry.handles(),
        "measures": registry.names(),
        "missing_keys": get_missing_config_keys(settings),
    }


@router.get("/logs")
def api_get_logs():
    return {"logs": get_cached_log_text()}


@router.delete("/logs")
def api_clear_logs():
    clear_cached_logs()
    return {"ok": True}


@router.post("/reload")
def api_reload_config(registry: MeasureRegistry = Depends(get_registry)):
    """
    输入:
    - 无

    输出:
    - 重新创建后的预定义 measure 名称与句柄

    作用:
    - 修改 `config.yaml` 后无需重启服务即可生效
    """

    created = plugin.reload_configured_measures(registry=registry)
    return {"ok": True, "measures": created}
