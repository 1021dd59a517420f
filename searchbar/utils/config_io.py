"""
本文件用于读取项目根目录的 `config.yaml`，并将其转换为字典。
主要函数:
- `load_yaml_dict`: 从 YAML 文件读取为字典（不存在则返回空字典）
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml


def load_yaml_dict(file_path: Path) -> Dict[str, Any]:
    if not file_path.exists():
        return {}

    raw_text = file_path.read_text(encoding="utf-8").strip()
    if not raw_text:
        return {}

    data = yaml.safe_load(raw_text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("config.yaml 顶层必须为映射（key-value）结构")
    return data
