import argparse
import os
import sys

# Add the project root to sys.path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from searchbar import plugin
from searchbar.core.host import MappingHostAPI


def show_measure(measure_type: str, limit: int, sqlite_path: str) -> None:
    """
    在命令行模拟宿主走一遍 measure 生命周期并打印结果
    作用：
    1. Initialize + Reload（读取命令行给出的配置）
    2. Update / GetString 各调用一次
    3. Finalize 释放句柄
    """
    api = MappingHostAPI({"Type": measure_type, "Limit": limit, "SQLitePath": sqlite_path})
    handle = plugin.initialize(api)
    try:
        print(f"📊 Update: {plugin.update(handle)}")
        value = plugin.get_string(handle)
        if value is None:
            print("⚠️  GetString 返回空")
            return
        print("✅ GetString:")
        for field in value.split("|"):
            print(f"   - {field}")
    finally:
        plugin.finalize(handle)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="运行一次 measure 并打印结果")
    parser.add_argument("--type", default="RecentHistory")
    parser.add_argument("--limit", type=int, default=6)
    parser.add_argument("--sqlite-path", default="")
    args = parser.parse_args()
    show_measure(args.type, args.limit, args.sqlite_path)
