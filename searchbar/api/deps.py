"""
本文件用于提供 FastAPI 依赖注入的集中出口。
主要对象:
- `settings`: 全局配置对象
- `get_registry`: measure 句柄登记表依赖
"""

from searchbar.core.config import get_settings
from searchbar.services.measure_service import MeasureRegistry, measure_registry

settings = get_settings()


def get_registry() -> MeasureRegistry:
    return measure_registry


__all__ = ["get_registry", "settings"]
