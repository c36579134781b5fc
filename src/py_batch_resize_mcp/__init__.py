"""批量图片缩放库。

把一批图片缩放到目标尺寸、统一编码为 JPEG 并打包为一个 ZIP 归档，基于 Pillow。
"""

__version__ = "0.1.0"
__author__ = "crper"
__description__ = "批量图片缩放与打包库，基于 Pillow"

# 核心功能导出
from .engine.pipeline import PipelineFacade, resize_images
from .models import ProgressEvent, ResizeBatchResult, SourceImage, TranscodeResult
from .resizer import BatchImageResizer, resize_path


__all__ = [
    "BatchImageResizer",
    "PipelineFacade",
    "ProgressEvent",
    "ResizeBatchResult",
    "SourceImage",
    "TranscodeResult",
    "get_version",
    "resize_images",
    "resize_path",
]


def get_version() -> str:
    """获取版本号。"""
    return __version__
