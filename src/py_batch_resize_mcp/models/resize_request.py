"""缩放请求模型。

定义批量缩放的输入数据结构：源图片、缩放请求和规划尺寸。
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import ValidationLimits


class SourceImage(BaseModel):
    """待处理的源图片，进入批次后不可变"""

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(min_length=1, description="唯一的显示名称")
    data: bytes = Field(repr=False, description="原始图片字节")
    original_width: int | None = Field(None, gt=0, description="原始宽度")
    original_height: int | None = Field(None, gt=0, description="原始高度")

    @field_validator("identifier")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("图片标识不能为空白")
        return v

    @classmethod
    def from_bytes(cls, identifier: str, data: bytes) -> "SourceImage":
        """从字节创建源图片，读取文件头获取原始尺寸

        文件头无法识别时尺寸留空，图片仍进入批次，在解码阶段按单项失败处理。
        """
        from ..core.formats import probe_dimensions

        dimensions = probe_dimensions(data)
        if dimensions is None:
            return cls(identifier=identifier, data=data)

        width, height = dimensions
        return cls(
            identifier=identifier,
            data=data,
            original_width=width,
            original_height=height,
        )

    @property
    def original_dimensions(self) -> tuple[int, int] | None:
        """原始尺寸，未知时为 None"""
        if self.original_width is None or self.original_height is None:
            return None
        return (self.original_width, self.original_height)

    @property
    def size_bytes(self) -> int:
        """原始字节数"""
        return len(self.data)


class ResizeRequest(BaseModel):
    """缩放请求，在一次批处理内对所有图片只读共享"""

    model_config = ConfigDict(frozen=True)

    target_width: int = Field(
        ge=ValidationLimits.MIN_DIMENSION,
        le=ValidationLimits.MAX_DIMENSION,
        description="目标宽度",
    )
    target_height: int = Field(
        ge=ValidationLimits.MIN_DIMENSION,
        le=ValidationLimits.MAX_DIMENSION,
        description="目标高度",
    )
    preserve_aspect_ratio: bool = Field(True, description="保持原始宽高比")

    @property
    def target_size(self) -> tuple[int, int]:
        return (self.target_width, self.target_height)


class PlannedDimensions(BaseModel):
    """单张图片的最终输出尺寸"""

    model_config = ConfigDict(frozen=True)

    width: int = Field(gt=0, description="输出宽度")
    height: int = Field(gt=0, description="输出高度")

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)


# ============================================================================
# 验证器类 - 集中的参数验证逻辑
# ============================================================================


class ResizeValidators:
    """缩放相关的验证器集合"""

    @staticmethod
    def validate_dimension(name: str, value: int) -> int:
        """验证目标尺寸参数

        Raises:
            ValidationError: 尺寸不是整数或超出允许范围时
        """
        from ..exceptions import ValidationError
        from ..utils.message_formatter import MessageFormatter

        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(
                MessageFormatter.validation_error(name, repr(value), "必须是整数")
            )

        low, high = ValidationLimits.MIN_DIMENSION, ValidationLimits.MAX_DIMENSION
        if not (low <= value <= high):
            raise ValidationError(
                MessageFormatter.validation_error(name, value, f"必须在 {low}-{high} 之间")
            )

        return value

    @staticmethod
    def validate_batch(items: list[SourceImage], limit: int) -> None:
        """验证批量大小和标识唯一性

        Raises:
            BatchTooLargeError: 图片数量超过上限时
            ValidationError: 标识重复时
        """
        from ..exceptions import BatchTooLargeError, ValidationError
        from ..utils.message_formatter import MessageFormatter

        if len(items) > limit:
            raise BatchTooLargeError(
                MessageFormatter.batch_too_large(len(items), limit)
            )

        seen: set[str] = set()
        for item in items:
            if item.identifier in seen:
                raise ValidationError(
                    f"图片标识重复: {item.identifier}", item.identifier
                )
            seen.add(item.identifier)
