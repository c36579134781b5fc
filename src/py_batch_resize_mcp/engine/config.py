"""请求构建器模块。

统一的缩放请求构建逻辑，集成参数验证功能。
"""

from collections.abc import Iterable

from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError as CustomValidationError
from ..models.resize_request import ResizeRequest, ResizeValidators, SourceImage


class RequestBuilder:
    """缩放请求构建器

    所有参数错误统一转换为 ValidationError，在任何处理开始前抛出。
    """

    def build(
        self,
        width: int,
        height: int,
        preserve_aspect_ratio: bool = True,
    ) -> ResizeRequest:
        """验证参数并构建缩放请求

        Args:
            width: 目标宽度
            height: 目标高度
            preserve_aspect_ratio: 是否保持原始宽高比

        Returns:
            ResizeRequest: 构建的请求对象

        Raises:
            CustomValidationError: 参数验证失败
        """
        ResizeValidators.validate_dimension("width", width)
        ResizeValidators.validate_dimension("height", height)

        try:
            return ResizeRequest(
                target_width=width,
                target_height=height,
                preserve_aspect_ratio=preserve_aspect_ratio,
            )
        except PydanticValidationError as e:
            raise CustomValidationError(self._format_validation_error(e)) from e

    def build_sources(self, items: Iterable[tuple[str, bytes]]) -> list[SourceImage]:
        """由 (标识, 字节) 序列构建源图片列表

        Raises:
            CustomValidationError: 标识为空等参数错误
        """
        sources = []
        for identifier, data in items:
            try:
                sources.append(SourceImage.from_bytes(identifier, data))
            except PydanticValidationError as e:
                raise CustomValidationError(
                    self._format_validation_error(e), identifier
                ) from e
        return sources

    def _format_validation_error(self, error: PydanticValidationError) -> str:
        """格式化验证错误"""
        messages = []
        for err in error.errors():
            field = ".".join(str(loc) for loc in err["loc"])
            msg = err["msg"]
            if field:
                messages.append(f"{field}: {msg}")
            else:
                messages.append(msg)
        return "; ".join(messages)


# 全局请求构建器实例
_default_builder = RequestBuilder()


def build_request(
    width: int, height: int, preserve_aspect_ratio: bool = True
) -> ResizeRequest:
    """便捷的请求构建函数"""
    return _default_builder.build(width, height, preserve_aspect_ratio)
