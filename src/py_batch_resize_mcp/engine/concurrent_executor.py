"""并发执行器模块。

按提交顺序产出结果的任务执行器：单工作者时顺序执行，多工作者时使用
有界线程池或进程池，结果在返回调用方之前按提交顺序重新排序。
"""

import logging
import threading
from collections.abc import Callable, Iterator, Sequence
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor

from ..config import get_config
from ..exceptions import ErrorHandler
from ..models.resize_request import ResizeRequest, SourceImage
from ..models.resize_result import TranscodeResult


logger = logging.getLogger(__name__)

TaskFunction = Callable[[SourceImage, ResizeRequest], TranscodeResult]


class ConcurrentExecutor:
    """有序并发执行器

    无论使用何种执行器，产出顺序始终与提交顺序一致。
    取消只在两项之间生效，正在执行的单项不会被中断。
    """

    def __init__(self, max_workers: int = 1, force_executor_type: str | None = None):
        """初始化并发执行器

        Args:
            max_workers: 最大并发数，1 表示顺序执行
            force_executor_type: 强制指定执行器类型 ('thread'/'process'/None为自动选择)
        """
        self.max_workers = max_workers
        self.force_executor_type = force_executor_type

    def execute_ordered(
        self,
        sources: Sequence[SourceImage],
        request: ResizeRequest,
        task_function: TaskFunction,
        cancel_event: threading.Event | None = None,
    ) -> Iterator[TranscodeResult]:
        """按提交顺序执行任务并逐个产出结果

        Args:
            sources: 源图片列表
            request: 缩放请求
            task_function: 单项任务函数（进程池时必须可序列化）
            cancel_event: 取消信号

        Yields:
            TranscodeResult: 按提交顺序的单项结果
        """
        if not sources:
            return

        if self.max_workers <= 1:
            yield from self._execute_sequential(
                sources, request, task_function, cancel_event
            )
            return

        yield from self._execute_pooled(sources, request, task_function, cancel_event)

    def _execute_sequential(
        self,
        sources: Sequence[SourceImage],
        request: ResizeRequest,
        task_function: TaskFunction,
        cancel_event: threading.Event | None,
    ) -> Iterator[TranscodeResult]:
        """顺序执行，每次只处理一项"""
        for source in sources:
            if cancel_event is not None and cancel_event.is_set():
                return
            yield task_function(source, request)

    def _execute_pooled(
        self,
        sources: Sequence[SourceImage],
        request: ResizeRequest,
        task_function: TaskFunction,
        cancel_event: threading.Event | None,
    ) -> Iterator[TranscodeResult]:
        """线程池/进程池执行，按提交顺序收集结果"""
        executor_class = self._choose_executor(sources)

        with executor_class(max_workers=self.max_workers) as executor:
            futures = self._submit_tasks(executor, sources, request, task_function)

            try:
                for source, future in zip(sources, futures, strict=True):
                    if cancel_event is not None and cancel_event.is_set():
                        return
                    yield self._collect_result(source, future)
            finally:
                # 提前退出（取消或调用方停止迭代）时丢弃尚未开始的任务
                for future in futures:
                    future.cancel()

    def _submit_tasks(
        self,
        executor: Executor,
        sources: Sequence[SourceImage],
        request: ResizeRequest,
        task_function: TaskFunction,
    ) -> list[Future[TranscodeResult]]:
        """提交任务到执行器，保持提交顺序"""
        return [executor.submit(task_function, source, request) for source in sources]

    def _collect_result(
        self, source: SourceImage, future: Future[TranscodeResult]
    ) -> TranscodeResult:
        """收集单项执行结果"""
        try:
            result = future.result()
        except Exception as e:
            # 任务函数本身不抛异常，这里只会是执行器层面的失败
            return ErrorHandler.handle_with_context(
                e,
                source.identifier,
                "并发任务处理",
                log_level="error",
                original_size=source.size_bytes,
            )

        if result.success:
            logger.debug(f"处理成功: {source.identifier} - {result.get_summary()}")
        else:
            logger.debug(f"处理失败: {source.identifier} - {result.error}")
        return result

    def _choose_executor(self, sources: Sequence[SourceImage]) -> type[Executor]:
        """根据任务特征选择合适的执行器

        Args:
            sources: 源图片列表

        Returns:
            执行器类 (ThreadPoolExecutor 或 ProcessPoolExecutor)
        """
        if self.force_executor_type == "thread":
            return ThreadPoolExecutor
        if self.force_executor_type == "process":
            return ProcessPoolExecutor

        total_bytes = sum(source.size_bytes for source in sources)
        executor_type = get_config().get_executor_type(len(sources), total_bytes)

        logger.debug(
            f"使用{executor_type}执行器: 任务数={len(sources)}, "
            f"总大小={total_bytes / 1024 / 1024:.1f}MB"
        )
        if executor_type == "process":
            return ProcessPoolExecutor
        return ThreadPoolExecutor
