"""数据模型包。

定义批量缩放相关的数据结构和模型。
"""

from .constants import (
    ArchiveDefaults,
    ImageFormats,
    ValidationLimits,
    get_format_alias,
    get_mime_type,
    is_supported_extension,
)
from .resize_request import (
    PlannedDimensions,
    ResizeRequest,
    ResizeValidators,
    SourceImage,
)
from .resize_result import (
    BatchState,
    BatchStatus,
    CompletionSummary,
    ProgressEvent,
    ResizeBatchResult,
    TranscodeResult,
)


__all__ = [
    # 常量和工具
    "ArchiveDefaults",
    # 核心模型
    "BatchState",
    "BatchStatus",
    # 类型定义
    "CompletionSummary",
    "ImageFormats",
    "PlannedDimensions",
    "ProgressEvent",
    "ResizeBatchResult",
    "ResizeRequest",
    # 验证器
    "ResizeValidators",
    "SourceImage",
    "TranscodeResult",
    "ValidationLimits",
    "get_format_alias",
    "get_mime_type",
    "is_supported_extension",
]
