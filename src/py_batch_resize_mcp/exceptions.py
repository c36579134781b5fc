"""批量缩放异常处理模块。

定义统一的异常类和错误处理机制，包含异常处理装饰器。
"""

from collections.abc import Callable
from functools import wraps
from typing import TypeVar

from PIL.Image import DecompressionBombError, UnidentifiedImageError

from .models.resize_result import TranscodeResult
from .utils.logging_helpers import get_logger
from .utils.message_formatter import MessageFormatter


logger = get_logger()
T = TypeVar("T")


# 统一的异常类型
class ResizeError(Exception):
    """缩放相关错误基类"""

    def __init__(self, message: str, identifier: str | None = None):
        super().__init__(message)
        self.message = message
        self.identifier = identifier


class ValidationError(ResizeError):
    """参数验证错误 - 在任何处理开始前抛出"""

    pass


class BatchTooLargeError(ValidationError):
    """批量图片数量超过上限"""

    pass


class ProcessingError(ResizeError):
    """处理过程错误"""

    pass


class DecodeError(ProcessingError):
    """源图片无法解码（损坏或截断）"""

    pass


class UnsupportedFormatError(DecodeError):
    """不在支持集合内的图片格式"""

    pass


class EncodeError(ProcessingError):
    """已解码图片的重采样或编码失败"""

    pass


class ArchiveError(ResizeError):
    """归档构建或序列化失败，对整批致命"""

    pass


# 异常处理装饰器
def handle_image_errors(
    operation_name: str = "图像处理",
    error_cls: type[ProcessingError] = ProcessingError,
):
    """统一的图像处理异常处理装饰器

    将 Pillow 和系统异常转换为当前阶段对应的领域异常。

    Args:
        operation_name: 操作名称，用于日志记录
        error_cls: 当前阶段的异常类型
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except ResizeError:
                raise
            except UnidentifiedImageError as e:
                logger.debug(f"{operation_name} - 无法识别图像格式: {e}")
                raise UnsupportedFormatError(f"不支持的图像格式: {e}") from e
            except DecompressionBombError as e:
                logger.debug(f"{operation_name} - 图像过大: {e}")
                raise error_cls(f"图像像素过多，可能存在安全风险: {e}") from e
            except MemoryError as e:
                logger.debug(f"{operation_name} - 内存不足")
                raise error_cls(f"{operation_name}内存不足") from e
            except Exception as e:
                logger.debug(f"{operation_name} - 失败: {e}")
                raise error_cls(f"{operation_name}失败: {e}") from e

        return wrapper

    return decorator


class ErrorHandler:
    """统一错误处理器

    提供标准化的错误处理和日志记录功能。
    """

    @staticmethod
    def _log_error(
        operation: str, identifier: str, error: Exception, level: str = "error"
    ) -> None:
        """标准化的错误日志记录

        Args:
            operation: 操作名称（如"图片解码"、"图片编码"等）
            identifier: 相关图片标识
            error: 异常对象
            level: 日志级别 ("error", "warning", "debug")
        """
        log_msg = MessageFormatter.item_error(operation, identifier, error)
        getattr(logger, level, logger.error)(log_msg)

    @staticmethod
    def _create_error_result(
        identifier: str,
        error: Exception,
        error_msg: str,
        original_size: int = 0,
        original_dimensions: tuple[int, int] | None = None,
    ) -> TranscodeResult:
        """创建标准化的失败结果"""
        return TranscodeResult(
            identifier=identifier,
            success=False,
            error=error_msg,
            error_type=type(error).__name__,
            original_size=original_size,
            original_dimensions=original_dimensions,
        )

    @staticmethod
    def handle_with_context(
        error: Exception,
        identifier: str,
        operation: str = "未知操作",
        log_level: str = "error",
        original_size: int = 0,
        original_dimensions: tuple[int, int] | None = None,
    ) -> TranscodeResult:
        """带上下文的错误处理

        Args:
            error: 异常对象
            identifier: 图片标识
            operation: 操作名称
            log_level: 日志级别 ("error", "warning", "debug")
            original_size: 原始字节数
            original_dimensions: 原始尺寸

        Returns:
            TranscodeResult: 标准化的失败结果
        """
        ErrorHandler._log_error(operation, identifier, error, log_level)
        message = error.message if isinstance(error, ResizeError) else str(error)
        return ErrorHandler._create_error_result(
            identifier=identifier,
            error=error,
            error_msg=f"{operation}: {message}",
            original_size=original_size,
            original_dimensions=original_dimensions,
        )

    @staticmethod
    def handle_item_error(
        error: Exception,
        identifier: str,
        original_size: int = 0,
        original_dimensions: tuple[int, int] | None = None,
    ) -> TranscodeResult:
        """单张图片失败的统一处理，按异常类型分发"""
        context = {
            "original_size": original_size,
            "original_dimensions": original_dimensions,
        }
        match error:
            case UnsupportedFormatError() as ufe:
                return ErrorHandler.handle_with_context(
                    ufe, identifier, "格式识别", log_level="warning", **context
                )
            case DecodeError() as de:
                return ErrorHandler.handle_with_context(
                    de, identifier, "图片解码", log_level="warning", **context
                )
            case EncodeError() as ee:
                return ErrorHandler.handle_with_context(
                    ee, identifier, "图片编码", log_level="warning", **context
                )
            case ValidationError() as ve:
                return ErrorHandler.handle_with_context(
                    ve, identifier, "参数验证", log_level="warning", **context
                )
            case _:
                return ErrorHandler.handle_with_context(
                    error, identifier, "图片处理", log_level="error", **context
                )
