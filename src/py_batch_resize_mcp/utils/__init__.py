"""工具模块包。

提供纯工具函数，不包含业务逻辑。
"""

# 从文件助手模块导入
from .file_helpers import (
    find_image_files,
    identifier_for,
    read_image_files,
)

# 从日志工具模块导入
from .logging_helpers import configure_logging, get_logger

# 从消息格式化模块导入
from .message_formatter import MessageFormatter

# 从命名助手模块导入
from .naming_helpers import (
    EntryNamingStrategy,
    PathResolver,
)


__all__ = [
    "EntryNamingStrategy",
    "MessageFormatter",
    "PathResolver",
    "configure_logging",
    "find_image_files",
    "get_logger",
    "identifier_for",
    "read_image_files",
]
