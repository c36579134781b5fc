"""图片转码模块。

解码 → 重采样 → 编码，单张图片要么得到完整的输出字节，要么抛出异常。
"""

from io import BytesIO

from PIL import Image

from ..exceptions import (
    DecodeError,
    EncodeError,
    ErrorHandler,
    UnsupportedFormatError,
    handle_image_errors,
)
from ..models.resize_request import PlannedDimensions, ResizeRequest, SourceImage
from ..models.resize_result import TranscodeResult
from ..utils.logging_helpers import get_logger
from .dimensions import DimensionPlanner
from .formats import FormatProcessor, get_save_parameters


logger = get_logger()

# 面积类高质量滤镜，完整缩放整张图，不裁剪
DEFAULT_RESAMPLE = Image.Resampling.LANCZOS


class ImageTranscoder:
    """单张图片转码器

    输出编码和质量在构造时固定，不随单张图片变化。
    """

    def __init__(
        self,
        format_processor: FormatProcessor | None = None,
        resample: Image.Resampling = DEFAULT_RESAMPLE,
    ):
        self.format_processor = format_processor or FormatProcessor()
        self.resample_filter = resample
        self.save_params = get_save_parameters()

    @property
    def output_format(self) -> str:
        return self.save_params["format"]

    @property
    def quality(self) -> int:
        return self.save_params["quality"]

    @handle_image_errors("图片解码", DecodeError)
    def decode(self, source_bytes: bytes) -> Image.Image:
        """解码为内存中的像素数据

        Raises:
            UnsupportedFormatError: 无法识别或不在支持集合内的格式
            DecodeError: 数据损坏或截断
        """
        img = Image.open(BytesIO(source_bytes))
        try:
            if not self.format_processor.is_supported(img.format):
                raise UnsupportedFormatError(f"不支持的图像格式: {img.format}")
            img.load()
        except Exception:
            img.close()
            raise
        return img

    @handle_image_errors("图片重采样", EncodeError)
    def resample(self, img: Image.Image, planned: PlannedDimensions) -> Image.Image:
        """把整张图缩放到规划尺寸"""
        prepared = self.format_processor.prepare_for_output(img)
        return prepared.resize(planned.size, self.resample_filter)

    @handle_image_errors("图片编码", EncodeError)
    def encode(self, img: Image.Image) -> bytes:
        """编码为输出格式，只在保存完成后返回字节"""
        buffer = BytesIO()
        img.save(buffer, **self.save_params)
        data = buffer.getvalue()
        if not data:
            raise EncodeError("编码结果为空")
        return data

    def transcode(self, source_bytes: bytes, planned: PlannedDimensions) -> bytes:
        """解码、缩放并编码单张图片

        Args:
            source_bytes: 源图片字节
            planned: 规划好的输出尺寸

        Returns:
            bytes: 完整的编码输出
        """
        with self.decode(source_bytes) as img:
            resized = self.resample(img, planned)
        return self.encode(resized)

    def transcode_source(
        self,
        source: SourceImage,
        request: ResizeRequest,
        planner: DimensionPlanner | None = None,
    ) -> TranscodeResult:
        """规划尺寸并转码一张源图片

        源图片未携带尺寸时使用解码后的实际尺寸。
        """
        planner = planner or DimensionPlanner()

        with self.decode(source.data) as img:
            original = source.original_dimensions or img.size
            if original != img.size:
                logger.debug(
                    f"{source.identifier} 声明尺寸 {original} 与解码尺寸 {img.size} 不一致"
                )
            planned = planner.plan(original[0], original[1], request)
            resized = self.resample(img, planned)

        data = self.encode(resized)

        return TranscodeResult(
            identifier=source.identifier,
            success=True,
            data=data,
            format_used=self.output_format,
            quality_used=self.quality,
            original_size=source.size_bytes,
            output_size=len(data),
            original_dimensions=original,
            final_dimensions=resized.size,
        )


def process_item(source: SourceImage, request: ResizeRequest) -> TranscodeResult:
    """处理单张图片。

    统一的单项处理入口，适用于顺序执行、线程池和进程池。
    单项失败转换为失败结果，不向外抛出。

    Args:
        source: 源图片
        request: 缩放请求

    Returns:
        TranscodeResult: 转码结果
    """
    try:
        return ImageTranscoder().transcode_source(source, request)

    except Exception as e:
        # 统一的异常处理，确保总是返回 TranscodeResult
        return ErrorHandler.handle_item_error(
            e,
            source.identifier,
            original_size=source.size_bytes,
            original_dimensions=source.original_dimensions,
        )
