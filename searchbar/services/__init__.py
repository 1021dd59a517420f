"""
本包用于集中导出服务层单例，便于上层直接引用。
主要导出:
- `history_service`
- `trends_service`
- `measure_registry`
"""

from searchbar.services.history_service import history_service
from searchbar.services.measure_service import measure_registry
from searchbar.services.trends_service import trends_service

__all__ = ["history_service", "measure_registry", "trends_service"]
