"""缩放结果模型。

定义单张图片转码、批处理状态、进度事件和最终归档的结果数据结构。
"""

from enum import Enum
from pathlib import Path
from typing import TypedDict

from humanize import naturalsize
from pydantic import BaseModel, ConfigDict, Field, model_validator


class BaseResult(BaseModel):
    """结果基类，包含通用字段和方法"""

    success: bool = Field(description="是否成功")
    error: str | None = Field(None, description="错误信息")

    def is_successful(self) -> bool:
        """检查是否成功"""
        return self.success and self.error is None

    @staticmethod
    def format_size(size_bytes: int) -> str:
        """格式化文件大小为人类可读格式"""
        return naturalsize(size_bytes, binary=True)


class TranscodeResult(BaseResult):
    """单张图片转码结果，失败时 data 为空"""

    identifier: str = Field(description="源图片标识")
    data: bytes | None = Field(None, repr=False, description="编码后的图片字节")
    error_type: str | None = Field(None, description="错误类型名")

    format_used: str | None = Field(None, description="输出格式")
    quality_used: int | None = Field(None, description="输出质量")

    original_size: int = Field(0, ge=0, description="原始字节数")
    output_size: int = Field(0, ge=0, description="输出字节数")
    original_dimensions: tuple[int, int] | None = Field(None, description="原始尺寸")
    final_dimensions: tuple[int, int] | None = Field(None, description="最终尺寸")

    @model_validator(mode="after")
    def validate_payload(self) -> "TranscodeResult":
        if self.success and self.data is None:
            raise ValueError("成功的转码结果必须包含输出数据")
        if not self.success and self.data is not None:
            raise ValueError("失败的转码结果不能包含输出数据")
        return self

    def get_summary(self) -> str:
        """转码结果摘要"""
        if not self.success:
            return f"失败: {self.error}"

        dims = self.final_dimensions or (0, 0)
        return (
            f"{self.format_size(self.original_size)} → "
            f"{self.format_size(self.output_size)} "
            f"({dims[0]}x{dims[1]})"
        )


class BatchStatus(str, Enum):
    """批处理状态"""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in {BatchStatus.COMPLETED, BatchStatus.FAILED, BatchStatus.CANCELLED}


class ProgressEvent(BaseModel):
    """单项完成后的进度通知"""

    model_config = ConfigDict(frozen=True)

    completed: int = Field(ge=0, description="已完成数量")
    total: int = Field(ge=0, description="总数量")
    ratio: float = Field(ge=0.0, le=1.0, description="完成比例")
    identifier: str | None = Field(None, description="刚完成的图片标识")
    success: bool | None = Field(None, description="刚完成的图片是否成功")

    @classmethod
    def for_step(
        cls,
        completed: int,
        total: int,
        identifier: str | None = None,
        success: bool | None = None,
    ) -> "ProgressEvent":
        """按完成数量构建进度事件，空批次视为全部完成"""
        ratio = completed / total if total > 0 else 1.0
        return cls(
            completed=completed,
            total=total,
            ratio=ratio,
            identifier=identifier,
            success=success,
        )

    @property
    def percent(self) -> int:
        """四舍五入后的百分比，供界面直接显示"""
        return round(self.ratio * 100)


class BatchState(BaseModel):
    """批处理状态，只由批处理编排器修改"""

    total: int = Field(ge=0, description="总数量")
    completed: int = Field(0, ge=0, description="已完成数量")
    results: list[TranscodeResult] = Field(
        default_factory=list, description="成功结果，按提交顺序"
    )
    failures: list[TranscodeResult] = Field(
        default_factory=list, description="失败结果，按提交顺序"
    )

    @model_validator(mode="after")
    def validate_counts(self) -> "BatchState":
        if self.completed > self.total:
            raise ValueError(f"已完成数量 {self.completed} 超过总数 {self.total}")
        return self

    def record(self, result: TranscodeResult) -> None:
        """记录一项完成的结果"""
        if self.completed >= self.total:
            from ..exceptions import ProcessingError

            raise ProcessingError(
                f"已完成数量超过总数 {self.total}", result.identifier
            )

        if result.success:
            self.results.append(result)
        else:
            self.failures.append(result)
        self.completed += 1

    @property
    def remaining(self) -> int:
        return self.total - self.completed

    @property
    def ratio(self) -> float:
        return self.completed / self.total if self.total > 0 else 1.0

    @property
    def failed_identifiers(self) -> list[str]:
        return [r.identifier for r in self.failures]


class ResizeBatchResult(BaseResult):
    """一次批量缩放的最终结果"""

    archive: bytes | None = Field(None, repr=False, description="归档字节")
    archive_name: str = Field(description="归档文件名")
    archive_path: Path | None = Field(None, description="归档写入路径")

    succeeded: int = Field(0, ge=0, description="成功数量")
    failed: int = Field(0, ge=0, description="失败数量")
    failed_identifiers: list[str] = Field(
        default_factory=list, description="失败图片标识，按提交顺序"
    )
    skipped: int = Field(0, ge=0, description="取消后未处理的数量")
    cancelled: bool = Field(False, description="是否被取消")

    results: list[TranscodeResult] = Field(
        default_factory=list, repr=False, description="所有单项结果"
    )

    def get_total_count(self) -> int:
        """获取总数量"""
        return self.succeeded + self.failed + self.skipped

    def get_success_rate(self) -> float:
        """获取成功率（百分比）"""
        processed = self.succeeded + self.failed
        if processed == 0:
            return 0.0
        return (self.succeeded / processed) * 100

    def get_archive_size(self) -> int:
        """归档字节数"""
        return len(self.archive) if self.archive else 0

    def get_summary(self) -> str:
        """批量处理摘要"""
        if not self.success:
            return f"批量缩放失败: {self.error}"

        summary = (
            f"处理 {self.succeeded}/{self.get_total_count()} 张图片 "
            f"(成功率 {self.get_success_rate():.1f}%), "
            f"归档 {self.archive_name} {self.format_size(self.get_archive_size())}"
        )
        if self.cancelled:
            summary += f", 已取消 {self.skipped} 张未处理"
        return summary

    def to_summary_dict(self) -> "CompletionSummary":
        """完成摘要，供调用方报告部分成功"""
        return {
            "succeeded": self.succeeded,
            "failed": self.failed,
            "failed_identifiers": list(self.failed_identifiers),
        }


# ============================================================================
# 类型定义
# ============================================================================


class CompletionSummary(TypedDict):
    """完成摘要类型定义"""

    succeeded: int
    failed: int
    failed_identifiers: list[str]
