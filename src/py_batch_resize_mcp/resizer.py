"""批量图片缩放器接口。

面向文件系统的调用方：查找并读取图片文件，交给内存管线处理，再把归档写到磁盘。
"""

import threading
from collections.abc import Sequence
from pathlib import Path

from .config import get_config
from .engine.batch import ProgressCallback
from .engine.config import RequestBuilder
from .engine.pipeline import PipelineFacade
from .exceptions import BatchTooLargeError, ValidationError
from .models import ResizeBatchResult
from .utils import (
    MessageFormatter,
    PathResolver,
    find_image_files,
    get_logger,
    read_image_files,
)


logger = get_logger()


class BatchImageResizer:
    """批量图片缩放器。

    负责缓冲区的获取和释放：读取文件、写出归档。缩放本身由 PipelineFacade 完成。
    """

    def __init__(
        self,
        max_workers: int | None = None,
        force_executor_type: str | None = None,
    ):
        """初始化缩放器。

        Args:
            max_workers: 最大并发数，默认读取配置
            force_executor_type: 强制指定执行器类型 ('thread'/'process'/None为自动选择)
        """
        if max_workers is not None and max_workers <= 0:
            raise ValidationError("max_workers 必须大于 0")

        if force_executor_type is not None and force_executor_type not in {
            "thread",
            "process",
        }:
            raise ValidationError(
                "force_executor_type 必须是 'thread', 'process' 或 None"
            )

        self.request_builder = RequestBuilder()
        self.pipeline = PipelineFacade(
            max_workers=max_workers,
            force_executor_type=force_executor_type,
            request_builder=self.request_builder,
        )
        self.max_batch_size = get_config().resize.MAX_BATCH_SIZE

        logger.debug("初始化批量图片缩放器")

    def resize_files(
        self,
        paths: Sequence[str | Path],
        output_path: str | Path | None = None,
        width: int | None = None,
        height: int | None = None,
        preserve_aspect_ratio: bool | None = None,
        progress_callback: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
        base_dir: Path | None = None,
    ) -> ResizeBatchResult:
        """缩放一组图片文件并写出归档。

        Args:
            paths: 图片文件路径，按提交顺序
            output_path: 归档路径或目录，默认写到第一张图片所在目录
            width: 目标宽度，默认 800
            height: 目标高度，默认 600
            preserve_aspect_ratio: 是否保持宽高比，默认保持
            progress_callback: 进度回调
            cancel_event: 取消信号
            base_dir: 计算图片标识的基准目录，默认使用文件名

        Returns:
            ResizeBatchResult: 带归档路径的处理结果

        Raises:
            BatchTooLargeError: 文件数量超过上限，不读取任何文件
            ValidationError: 路径不存在或参数不合法
            ArchiveError: 归档序列化失败

        Examples:
            >>> resizer = BatchImageResizer()
            >>> result = resizer.resize_files(["a.png", "b.png"], width=800, height=600)
            >>> print(result.archive_path)
        """
        files = [Path(p) for p in paths]
        self._check_admission(files)

        for file_path in files:
            if not file_path.is_file():
                raise ValidationError(MessageFormatter.file_not_found(file_path))

        defaults = get_config().resize
        width = width if width is not None else defaults.DEFAULT_WIDTH
        height = height if height is not None else defaults.DEFAULT_HEIGHT
        if preserve_aspect_ratio is None:
            preserve_aspect_ratio = defaults.PRESERVE_ASPECT_RATIO

        # 在读取文件之前验证参数
        self.request_builder.build(width, height, preserve_aspect_ratio)

        sources = self.request_builder.build_sources(read_image_files(files, base_dir))

        result = self.pipeline.resize_batch(
            sources,
            width,
            height,
            preserve_aspect_ratio=preserve_aspect_ratio,
            progress_callback=progress_callback,
            cancel_event=cancel_event,
        )

        default_dir = files[0].parent if files else Path.cwd()
        archive_path = PathResolver.resolve_archive_path(
            Path(output_path) if output_path else None,
            default_dir,
            result.archive_name,
        )
        archive_path.parent.mkdir(parents=True, exist_ok=True)
        archive_path.write_bytes(result.archive or b"")
        logger.info(
            MessageFormatter.archive_written(
                archive_path, result.succeeded, result.get_archive_size()
            )
        )

        return result.model_copy(update={"archive_path": archive_path})

    def resize_directory(
        self,
        input_dir: str | Path,
        output_path: str | Path | None = None,
        width: int | None = None,
        height: int | None = None,
        preserve_aspect_ratio: bool | None = None,
        recursive: bool = False,
        progress_callback: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ResizeBatchResult:
        """缩放目录中的所有图片并写出归档。

        Args:
            input_dir: 输入目录
            output_path: 归档路径或目录，默认写到输入目录
            width: 目标宽度
            height: 目标高度
            preserve_aspect_ratio: 是否保持宽高比
            recursive: 是否递归处理子目录
            progress_callback: 进度回调
            cancel_event: 取消信号

        Returns:
            ResizeBatchResult: 带归档路径的处理结果
        """
        input_dir = Path(input_dir)
        if not input_dir.is_dir():
            raise ValidationError(MessageFormatter.directory_not_found(input_dir))

        files = list(find_image_files(input_dir, recursive=recursive))
        if not files:
            logger.info(f"未找到图像文件: {input_dir}")

        return self.resize_files(
            files,
            output_path=output_path if output_path is not None else input_dir,
            width=width,
            height=height,
            preserve_aspect_ratio=preserve_aspect_ratio,
            progress_callback=progress_callback,
            cancel_event=cancel_event,
            base_dir=input_dir,
        )

    def _check_admission(self, files: list[Path]) -> None:
        """在读取任何文件之前检查数量上限"""
        if len(files) > self.max_batch_size:
            raise BatchTooLargeError(
                MessageFormatter.batch_too_large(len(files), self.max_batch_size)
            )


# 便捷函数


def resize_path(input_path: str | Path, **kwargs) -> ResizeBatchResult:
    """便捷的缩放函数，自动识别文件或目录

    Args:
        input_path: 输入路径（单个图片文件或目录）
        **kwargs: 传给 resize_files / resize_directory 的参数

    Returns:
        ResizeBatchResult: 带归档路径的处理结果
    """
    input_path = Path(input_path)
    resizer = BatchImageResizer()

    match input_path:
        case path if path.is_dir():
            return resizer.resize_directory(path, **kwargs)
        case path if path.is_file():
            kwargs.pop("recursive", None)
            return resizer.resize_files([path], **kwargs)
        case _:
            raise ValidationError(MessageFormatter.file_not_found(input_path))
