"""
本文件用于定义插件统一的内部异常，便于各数据源在边界处统一转换为固定提示文本。
主要类:
- `SearchBarError`: 异常基类
- `QueryExecutionError`: 外部查询程序执行失败
- `FeedParseError`: RSS 内容无法解析
- `UnknownHandleError`: 宿主传入了不存在的 measure 句柄
"""

from typing import Union


class SearchBarError(Exception):
    """
    输入:
    - 错误信息

    输出:
    - 异常对象

    作用:
    - 作为插件内部异常基类；任何公开调用都不会把它抛给宿主
    """

    pass


class QueryExecutionError(SearchBarError):
    """查询程序无法启动或执行超时。"""

    pass


class FeedParseError(SearchBarError):
    pass


class UnknownHandleError(SearchBarError, KeyError):
    """
    输入:
    - 未注册的句柄

    输出:
    - 异常对象

    作用:
    - 标识句柄已释放或从未分配，HTTP 层将其转换为 404
    """

    def __init__(self, handle: Union[int, str]) -> None:
        super().__init__(handle)
        self.handle = handle

    def __str__(self) -> str:
        return f"未知的 measure 句柄: {self.handle}"
