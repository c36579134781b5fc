"""批量缩放管线模块。

组合尺寸规划、转码、批处理编排和归档构建，是外部调用方的唯一入口。
所有输入输出都是内存中的字节，不做磁盘或网络 I/O。
"""

import threading
from collections.abc import Sequence

from ..config import get_config
from ..exceptions import ArchiveError
from ..models.resize_request import SourceImage
from ..models.resize_result import BatchStatus, ResizeBatchResult
from ..utils.logging_helpers import get_logger
from .archive import ArchiveBuilder
from .batch import BatchOrchestrator, ProgressCallback
from .config import RequestBuilder


logger = get_logger()


class PipelineFacade:
    """批量缩放管线

    每次调用拥有独立的批处理状态和归档构建器，调用之间不共享可变状态。
    """

    def __init__(
        self,
        max_workers: int | None = None,
        force_executor_type: str | None = None,
        orchestrator: BatchOrchestrator | None = None,
        request_builder: RequestBuilder | None = None,
    ):
        """初始化管线

        Args:
            max_workers: 最大并发数，默认顺序处理
            force_executor_type: 强制指定执行器类型 ('thread'/'process'/None为自动选择)
            orchestrator: 批处理编排器实例
            request_builder: 请求构建器实例
        """
        self.orchestrator = orchestrator or BatchOrchestrator(
            max_workers=max_workers, force_executor_type=force_executor_type
        )
        self.request_builder = request_builder or RequestBuilder()
        self.archive_name = get_config().resize.ARCHIVE_NAME
        self.entry_prefix = get_config().resize.ENTRY_PREFIX

    def resize_batch(
        self,
        items: Sequence[SourceImage],
        width: int,
        height: int,
        preserve_aspect_ratio: bool = True,
        progress_callback: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ResizeBatchResult:
        """批量缩放并打包为一个归档。

        Args:
            items: 按提交顺序的源图片
            width: 目标宽度
            height: 目标高度
            preserve_aspect_ratio: 是否保持原始宽高比
            progress_callback: 每项完成后调用的进度回调
            cancel_event: 取消信号，只在两项之间生效

        Returns:
            ResizeBatchResult: 归档字节和成功/失败统计

        Raises:
            ValidationError: 参数不合法或图片数量超过上限，未做任何处理
            ArchiveError: 归档序列化失败，不返回归档

        Examples:
            >>> pipeline = PipelineFacade()
            >>> result = pipeline.resize_batch(items, 800, 600)
            >>> print(result.get_summary())
        """
        request = self.request_builder.build(width, height, preserve_aspect_ratio)
        batch_run = self.orchestrator.run(
            items,
            request,
            progress_callback=progress_callback,
            cancel_event=cancel_event,
        )

        builder = ArchiveBuilder(entry_prefix=self.entry_prefix)
        all_results = []
        try:
            for result in batch_run:
                all_results.append(result)
                if result.success:
                    builder.add_result(result)

            archive = builder.finalize()
        except ArchiveError as e:
            batch_run.mark_failed(e.message)
            raise

        cancelled = batch_run.status == BatchStatus.CANCELLED
        batch_result = ResizeBatchResult(
            success=True,
            archive=archive,
            archive_name=self.archive_name,
            succeeded=len(batch_run.results),
            failed=len(batch_run.failures),
            failed_identifiers=batch_run.state.failed_identifiers,
            skipped=batch_run.skipped,
            cancelled=cancelled,
            results=all_results,
        )
        logger.info(batch_result.get_summary())
        return batch_result


def resize_images(
    items: Sequence[SourceImage],
    width: int,
    height: int,
    preserve_aspect_ratio: bool = True,
    progress_callback: ProgressCallback | None = None,
) -> ResizeBatchResult:
    """便捷的批量缩放函数

    使用默认配置的管线，顺序处理所有图片。
    """
    return PipelineFacade().resize_batch(
        items,
        width,
        height,
        preserve_aspect_ratio=preserve_aspect_ratio,
        progress_callback=progress_callback,
    )
