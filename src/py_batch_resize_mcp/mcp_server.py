"""批量图片缩放 MCP 服务器。

把本地图片批量缩放并打包为 ZIP 归档。
"""

from pathlib import Path
from typing import Any

from fastmcp import FastMCP

from .config import get_config
from .core.dimensions import plan_dimensions as plan_output_dimensions
from .engine.config import build_request
from .exceptions import (
    ArchiveError,
    BatchTooLargeError,
    ResizeError,
    ValidationError,
)
from .models import ArchiveDefaults, ResizeBatchResult, get_mime_type
from .resizer import resize_path
from .utils import MessageFormatter, configure_logging, get_logger


# MCP 服务器响应类型定义
MCPResizeResponse = dict[str, Any]
MCPPlanResponse = dict[str, Any]


class MCPResponseBuilder:
    """MCP 服务器响应构建器，专门用于构建符合 MCP 协议的响应格式。"""

    @staticmethod
    def error(
        message: str,
        error_type: str = "general",
        details: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """构建错误结果。

        Args:
            message: 错误消息
            error_type: 错误类型
            details: 额外的错误详情

        Returns:
            dict: 标准化的错误响应
        """
        result = {
            "success": False,
            "error": message,
            "error_type": error_type,
        }

        if details:
            result["details"] = details

        return result

    @staticmethod
    def validation_error(message: str, field: str | None = None) -> dict[str, Any]:
        """构建验证错误结果。"""
        details = {"field": field} if field else None
        return MCPResponseBuilder.error(
            message=message,
            error_type="validation",
            details=details,
        )

    @staticmethod
    def file_error(message: str, file_path: str | None = None) -> dict[str, Any]:
        """构建文件相关错误结果。"""
        details = {"file_path": file_path} if file_path else None
        return MCPResponseBuilder.error(
            message=message,
            error_type="file",
            details=details,
        )

    @staticmethod
    def processing_error(message: str, operation: str | None = None) -> dict[str, Any]:
        """构建处理错误结果。"""
        details = {"operation": operation} if operation else None
        return MCPResponseBuilder.error(
            message=message,
            error_type="processing",
            details=details,
        )


logger = get_logger(__name__)

# 创建MCP应用
mcp: FastMCP[Any] = FastMCP("批量图片缩放服务")


# ============================================================================
# 核心工具
# ============================================================================


@mcp.tool()
def resize_images(
    input_path: str,
    output_path: str | None = None,
    width: int = 800,
    height: int = 600,
    preserve_aspect_ratio: bool = True,
    recursive: bool = False,
) -> MCPResizeResponse:
    """批量缩放图片并打包为 ZIP 归档

    每张图片缩放到目标框内（或拉伸到目标框），统一编码为 JPEG，
    归档条目名为 "resized-" + 原文件名。单批最多 30 张。

    Args:
        input_path: 输入路径（单个图片文件或目录）
        output_path: 归档输出路径或目录（可选，默认写到输入目录）
        width: 目标宽度 100-2000 像素
        height: 目标高度 100-2000 像素
        preserve_aspect_ratio: 是否保持原始宽高比
        recursive: 目录处理时是否递归子目录

    Returns:
        dict: 归档路径、成功/失败统计和每张图片的结果
    """
    input_path_obj = Path(input_path)
    if not input_path_obj.exists():
        return MCPResponseBuilder.file_error(
            MessageFormatter.file_not_found(input_path), input_path
        )

    try:
        result = resize_path(
            input_path_obj,
            output_path=output_path,
            width=width,
            height=height,
            preserve_aspect_ratio=preserve_aspect_ratio,
            recursive=recursive,
        )
        return _format_batch_result(result)

    except BatchTooLargeError as e:
        logger.warning(MessageFormatter.operation_failed("批量准入", input_path, e))
        return MCPResponseBuilder.validation_error(e.message, "input_path")
    except ValidationError as e:
        logger.warning(MessageFormatter.operation_failed("参数验证", input_path, e))
        return MCPResponseBuilder.validation_error(e.message)
    except ArchiveError as e:
        logger.error(MessageFormatter.operation_failed("归档构建", input_path, e))
        return MCPResponseBuilder.processing_error(e.message, "归档构建")
    except (ResizeError, OSError) as e:
        logger.error(MessageFormatter.operation_failed("批量缩放", input_path, e))
        return MCPResponseBuilder.processing_error(str(e), "批量缩放")


@mcp.tool()
def plan_dimensions(
    original_width: int,
    original_height: int,
    width: int = 800,
    height: int = 600,
    preserve_aspect_ratio: bool = True,
) -> MCPPlanResponse:
    """计算一张图片缩放后的输出尺寸，不处理任何文件

    Args:
        original_width: 原始宽度
        original_height: 原始高度
        width: 目标宽度 100-2000 像素
        height: 目标高度 100-2000 像素
        preserve_aspect_ratio: 是否保持原始宽高比

    Returns:
        dict: 输出宽度和高度
    """
    try:
        request = build_request(width, height, preserve_aspect_ratio)
        planned = plan_output_dimensions(original_width, original_height, request)
    except ValidationError as e:
        return MCPResponseBuilder.validation_error(e.message)

    return {
        "success": True,
        "width": planned.width,
        "height": planned.height,
        "preserve_aspect_ratio": preserve_aspect_ratio,
    }


def _format_batch_result(result: ResizeBatchResult) -> dict[str, Any]:
    """格式化批量结果为MCP响应格式"""
    return {
        "success": result.success,
        "archive_path": str(result.archive_path) if result.archive_path else None,
        "archive_name": result.archive_name,
        "archive_mime_type": ArchiveDefaults.ARCHIVE_MIME_TYPE,
        "archive_size": result.get_archive_size(),
        "archive_size_human": result.format_size(result.get_archive_size()),
        "succeeded": result.succeeded,
        "failed": result.failed,
        "failed_identifiers": result.failed_identifiers,
        "success_rate": result.get_success_rate(),
        "summary": result.get_summary(),
        "results": [
            {
                "identifier": r.identifier,
                "success": r.success,
                "original_dimensions": r.original_dimensions,
                "final_dimensions": r.final_dimensions,
                "output_size": r.output_size,
                "mime_type": get_mime_type(r.format_used) if r.format_used else None,
                "error": r.error,
                "error_type": r.error_type,
            }
            for r in result.results
        ],
        "error": result.error,
    }


# ============================================================================
# 应用入口
# ============================================================================


def main() -> None:
    """启动 MCP 服务器"""
    configure_logging(get_config().logging)
    logger.info("启动批量图片缩放 MCP 服务器")
    mcp.run()


if __name__ == "__main__":
    main()
