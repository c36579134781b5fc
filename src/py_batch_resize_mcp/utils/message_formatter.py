"""消息格式化工具模块。

批量缩放过程中的日志、错误和进度消息，保证同类消息措辞一致。
"""

from pathlib import Path
from typing import Any


class MessageFormatter:
    """统一的消息格式化器"""

    @staticmethod
    def file_not_found(file_path: str | Path) -> str:
        return f"图片文件不存在: {file_path}"

    @staticmethod
    def directory_not_found(directory: str | Path) -> str:
        return f"输入目录不存在: {directory}"

    @staticmethod
    def path_not_directory(path: str | Path) -> str:
        return f"输入路径不是目录: {path}"

    @staticmethod
    def permission_error(path: str | Path, operation: str = "读取") -> str:
        return f"没有权限{operation}: {path}"

    @staticmethod
    def operation_failed(
        operation: str, target: str | Path, error: Exception | None = None
    ) -> str:
        """整批操作失败消息"""
        msg = f"{operation}失败: {target}"
        if error:
            msg += f" - {error}"
        return msg

    @staticmethod
    def validation_error(field: str, value: Any, reason: str | None = None) -> str:
        """参数不合法消息"""
        msg = f"参数 {field} 不合法: {value}"
        if reason:
            msg += f"，{reason}"
        return msg

    @staticmethod
    def item_error(stage: str, identifier: str, error: Exception) -> str:
        """单张图片在某一阶段失败的消息"""
        return f"{stage}失败 [{identifier}]: {error}"

    @staticmethod
    def batch_too_large(count: int, limit: int) -> str:
        return f"图片数量 {count} 超过单批上限 {limit}"

    @staticmethod
    def item_progress(completed: int, total: int, identifier: str | None) -> str:
        """单项进度消息"""
        percent = completed / total * 100 if total else 100.0
        return f"进度 {completed}/{total} ({percent:.0f}%) - {identifier or '-'}"

    @staticmethod
    def archive_written(path: str | Path, entry_count: int, size_bytes: int) -> str:
        return f"归档已写入: {path} ({entry_count} 个条目, {size_bytes} 字节)"
