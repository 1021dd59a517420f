"""
本文件用于启动本地 HTTP 服务，让无法直接加载 Python 插件的宿主通过 HTTP 调用 measure 生命周期。
主要函数/对象:
- `lifespan`: 应用生命周期管理（启动时创建预定义 measure，退出时释放全部句柄）
- `app`: FastAPI 应用实例
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from searchbar import plugin
from searchbar.api.api import api_router
from searchbar.api.deps import settings
from searchbar.core.config import get_missing_config_keys
from searchbar.core.logger import configure_logging, setup_logger
from searchbar.services.measure_service import measure_registry


@asynccontextmanager
async def lifespan(app: FastAPI):
    lifespan_logger = setup_logger("lifespan")
    created = plugin.register_configured_measures(settings)
    if created:
        lifespan_logger.info(f"✅ 已加载 {len(created)} 个预定义 measure: {', '.join(created)}")
    for key in get_missing_config_keys(settings):
        lifespan_logger.warning(f"⚠️ 配置缺失: {key}")
    yield
    for handle in measure_registry.handles():
        plugin.finalize(handle)


configure_logging()
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    lifespan=lifespan,
    debug=settings.DEBUG,
)
app.include_router(api_router)


if __name__ == "__main__":
    log_level = (settings.LOG_LEVEL or "info").lower()
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=settings.PORT,
        log_level=log_level,
        access_log=log_level in {"debug", "info"},
    )
