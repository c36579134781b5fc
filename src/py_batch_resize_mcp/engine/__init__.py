"""批量缩放处理引擎模块。

包含批处理编排、归档构建、请求构建和管线入口。
"""

from .archive import ArchiveBuilder
from .batch import BatchOrchestrator, BatchRun
from .config import RequestBuilder, build_request
from .pipeline import PipelineFacade, resize_images


__all__ = [
    "ArchiveBuilder",
    "BatchOrchestrator",
    "BatchRun",
    "PipelineFacade",
    "RequestBuilder",
    "build_request",
    "resize_images",
]
