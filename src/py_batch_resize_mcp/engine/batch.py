"""批处理编排模块。

按提交顺序逐项缩放图片，记录批处理状态并在每项完成后报告进度。
"""

import threading
from collections.abc import Callable, Iterator, Sequence

from ..config import get_config
from ..core.transcoder import process_item
from ..exceptions import ProcessingError
from ..models.resize_request import ResizeRequest, ResizeValidators, SourceImage
from ..models.resize_result import (
    BatchState,
    BatchStatus,
    ProgressEvent,
    TranscodeResult,
)
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter
from .concurrent_executor import ConcurrentExecutor, TaskFunction


logger = get_logger()

ProgressCallback = Callable[[ProgressEvent], None]


class BatchRun:
    """一次批处理运行

    只能迭代一次，按提交顺序产出每一项的转码结果（包括失败项）。
    状态流转: idle → running → completed | failed | cancelled
    """

    def __init__(
        self,
        items: Sequence[SourceImage],
        request: ResizeRequest,
        executor: ConcurrentExecutor,
        task_function: TaskFunction = process_item,
        progress_callback: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ):
        self.items = tuple(items)
        self.request = request
        self.executor = executor
        self.task_function = task_function
        self.progress_callback = progress_callback
        self.cancel_event = cancel_event

        self.state = BatchState(total=len(self.items))
        self.status = BatchStatus.IDLE
        self.error: str | None = None

    @property
    def results(self) -> list[TranscodeResult]:
        """成功的结果，按提交顺序"""
        return self.state.results

    @property
    def failures(self) -> list[TranscodeResult]:
        """失败的结果，按提交顺序"""
        return self.state.failures

    @property
    def skipped(self) -> int:
        """取消后未处理的数量"""
        if self.status == BatchStatus.CANCELLED:
            return self.state.remaining
        return 0

    def mark_failed(self, reason: str) -> None:
        """标记整批失败（单项范围之外的错误，例如归档失败）"""
        self.status = BatchStatus.FAILED
        self.error = reason
        logger.error(f"批处理失败: {reason}")

    def __iter__(self) -> Iterator[TranscodeResult]:
        if self.status != BatchStatus.IDLE:
            raise ProcessingError(f"批处理已经执行过，当前状态: {self.status.value}")

        self.status = BatchStatus.RUNNING
        return self._iterate()

    def _iterate(self) -> Iterator[TranscodeResult]:
        total = self.state.total
        logger.info(f"开始批量缩放: {total} 张图片")

        results = self.executor.execute_ordered(
            self.items, self.request, self.task_function, self.cancel_event
        )
        try:
            if total == 0:
                # 空批次只发出一次 1.0
                self._emit(ProgressEvent.for_step(0, 0))

            for result in results:
                self.state.record(result)
                self._emit(
                    ProgressEvent.for_step(
                        self.state.completed, total, result.identifier, result.success
                    )
                )
                yield result

        except Exception as e:
            self.mark_failed(str(e))
            raise

        finally:
            # 调用方提前停止迭代时也要关闭执行器并进入终态
            results.close()
            if self.status == BatchStatus.RUNNING:
                self._finish()

    def _finish(self) -> None:
        total = self.state.total
        if self.state.completed < total:
            self.status = BatchStatus.CANCELLED
            logger.info(
                f"批量缩放已取消: 完成 {self.state.completed}/{total}，"
                f"跳过 {self.state.remaining} 张"
            )
            return

        self.status = BatchStatus.COMPLETED
        logger.info(
            f"批量缩放完成: 成功 {len(self.state.results)}，"
            f"失败 {len(self.state.failures)}"
        )

    def _emit(self, event: ProgressEvent) -> None:
        logger.debug(
            MessageFormatter.item_progress(
                event.completed, event.total, event.identifier
            )
        )
        if self.progress_callback is not None:
            self.progress_callback(event)


class BatchOrchestrator:
    """批处理编排器

    在入口处检查批量上限，超限时不处理任何图片。
    """

    def __init__(
        self,
        max_workers: int | None = None,
        force_executor_type: str | None = None,
        max_batch_size: int | None = None,
        task_function: TaskFunction = process_item,
    ):
        """初始化批处理编排器

        Args:
            max_workers: 最大并发数，默认读取配置（1 为顺序处理）
            force_executor_type: 强制指定执行器类型 ('thread'/'process'/None为自动选择)
            max_batch_size: 单批上限，默认读取配置
            task_function: 单项任务函数
        """
        app_config = get_config()
        self.max_workers = max_workers or app_config.processing.MAX_WORKERS
        self.max_batch_size = max_batch_size or app_config.resize.MAX_BATCH_SIZE
        self.task_function = task_function
        self.executor = ConcurrentExecutor(self.max_workers, force_executor_type)

    def run(
        self,
        items: Sequence[SourceImage],
        request: ResizeRequest,
        progress_callback: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> BatchRun:
        """创建一次批处理运行

        Args:
            items: 按提交顺序的源图片
            request: 缩放请求
            progress_callback: 每项完成后调用的进度回调
            cancel_event: 取消信号，只在两项之间生效

        Returns:
            BatchRun: 可迭代一次的批处理运行

        Raises:
            BatchTooLargeError: 图片数量超过上限
            ValidationError: 图片标识重复
        """
        items = list(items)
        ResizeValidators.validate_batch(items, self.max_batch_size)

        return BatchRun(
            items=items,
            request=request,
            executor=self.executor,
            task_function=self.task_function,
            progress_callback=progress_callback,
            cancel_event=cancel_event,
        )
