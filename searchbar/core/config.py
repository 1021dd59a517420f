"""
本文件用于加载插件运行配置：优先读取 `config.yaml`，其次读取环境变量与 `.env`。
主要函数/类:
- `Settings`: 运行时配置模型（支持类型校验与默认值）
- `get_settings`: 获取配置单例（带缓存）
- `reload_settings`: 清除缓存并重新加载配置
- `get_missing_config_keys`: 计算预定义 measure 的关键配置缺失项
- `_normalize_yaml_config`: 将 YAML 配置键标准化为大写
"""

from __future__ import annotations

import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from searchbar.utils.config_io import load_yaml_dict

BASE_DIR = Path(__file__).resolve().parents[2]
CONFIG_PATH = BASE_DIR / "config.yaml"


def _normalize_yaml_config(data: Dict[str, Any]) -> Dict[str, Any]:
    normalized: Dict[str, Any] = {}
    for k, v in (data or {}).items():
        if isinstance(k, str):
            normalized[k.upper()] = v
        else:
            normalized[str(k).upper()] = v
    return normalized


class Settings(BaseSettings):
    """
    输入:
    - `config.yaml`、环境变量与 `.env` 文件中的配置项

    输出:
    - 统一的运行时配置对象

    作用:
    - 集中管理插件运行所需的路径、地址与超时配置，并提供默认值
    """

    APP_NAME: str = "ModernSearchBar"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    PORT: int = 8194

    # 为空时按操作系统推断 Chrome 历史记录位置
    HISTORY_PATH: Optional[str] = None
    SCRATCH_PATH: str = str(Path(tempfile.gettempdir()) / "ChromeHistory_Copy")

    CONNECTIVITY_URL: str = "http://www.google.com"
    TRENDS_RSS_URL: str = "https://trends.google.com/trends/trendingsearches/daily/rss"
    TRENDS_GEO: str = "US"
    HTTP_TIMEOUT_SECONDS: float = 20.0
    # None 表示等待查询程序自行退出
    QUERY_TIMEOUT_SECONDS: Optional[float] = None
    USER_AGENT: str = "RainmeterPlugin"

    # 预定义 measure: 名称 -> {Type, Limit, SQLitePath, OnCompleteAction}
    MEASURES: Dict[str, Dict[str, Any]] = {}

    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        def yaml_settings():
            return _normalize_yaml_config(load_yaml_dict(CONFIG_PATH))

        return (
            init_settings,
            yaml_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )

    @property
    def trends_url(self) -> str:
        sep = "&" if "?" in self.TRENDS_RSS_URL else "?"
        return f"{self.TRENDS_RSS_URL}{sep}geo={self.TRENDS_GEO}"


def get_missing_config_keys(settings: Settings) -> List[str]:
    """
    输入:
    - `settings`: 配置对象

    输出:
    - 缺失项列表，形如 `MEASURES.<name>.SQLitePath`

    作用:
    - 找出 RecentHistory 类型但未配置查询程序路径的 measure，用于健康检查提示
    """

    missing: List[str] = []
    for name, options in (settings.MEASURES or {}).items():
        options = options or {}
        measure_type = str(options.get("Type", "RecentHistory")).strip().lower()
        if measure_type != "recenthistory":
            continue
        sqlite_path = options.get("SQLitePath")
        if sqlite_path is None or not str(sqlite_path).strip():
            missing.append(f"MEASURES.{name}.SQLitePath")
    return missing


@lru_cache()
def get_settings() -> Settings:
    """
    输入:
    - 无

    输出:
    - `Settings` 单例实例

    作用:
    - 通过缓存避免重复解析配置文件与环境变量
    """

    return Settings()


def reload_settings() -> Settings:
    get_settings.cache_clear()
    return get_settings()
