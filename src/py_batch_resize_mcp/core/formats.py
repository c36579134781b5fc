"""格式处理器模块。

输入格式识别、色彩模式转换和输出编码参数。
"""

import logging
from io import BytesIO
from typing import Any

from PIL import Image

from ..config import get_config
from ..models.constants import ImageFormats


logger = logging.getLogger(__name__)

# 透明区域合成使用的背景色
BACKGROUND_COLOR: tuple[int, int, int] = (255, 255, 255)


def probe_dimensions(data: bytes) -> tuple[int, int] | None:
    """只读取文件头获取尺寸，无法识别时返回 None"""
    try:
        with Image.open(BytesIO(data)) as img:
            width, height = img.size
    except Exception as e:
        logger.debug(f"读取图片尺寸失败: {e}")
        return None

    if width <= 0 or height <= 0:
        return None
    return (width, height)


def get_save_parameters() -> dict[str, Any]:
    """获取输出编码的保存参数

    不传递 EXIF 和 ICC 数据，相同像素始终得到相同字节。
    """
    return get_config().resize.get_save_parameters()


class FormatProcessor:
    """格式处理器

    输入只接受封闭集合内的格式，输出固定为配置中的单一编码。
    """

    def __init__(self) -> None:
        """初始化格式处理器"""
        self.output_format = get_config().resize.OUTPUT_FORMAT

    def is_supported(self, format_name: str | None) -> bool:
        """检查解码出的格式是否受支持"""
        return ImageFormats.is_supported_input(format_name)

    def prepare_for_output(self, img: Image.Image) -> Image.Image:
        """为输出编码准备图片

        在重采样之前转换色彩模式：调色板和二值图像无法使用高质量滤镜。

        Args:
            img: PIL图片对象

        Returns:
            Image.Image: 处理后的图片对象
        """
        match self.output_format:
            case "JPEG":
                return self._prepare_for_jpeg(img)
            case _:
                return img

    def _prepare_for_jpeg(self, img: Image.Image) -> Image.Image:
        """为JPEG格式准备图片"""
        # 调色板模式：有透明色时按 RGBA 处理
        if img.mode == "P":
            if "transparency" in img.info:
                img = img.convert("RGBA")
            else:
                return img.convert("RGB")

        # JPEG不支持透明度，合成到背景上
        if img.mode in ImageFormats.ALPHA_MODES:
            rgba = img.convert("RGBA")
            background = Image.new("RGB", rgba.size, BACKGROUND_COLOR)
            background.paste(rgba, mask=rgba.getchannel("A"))
            return background

        if img.mode.startswith("I;16"):
            img = img.convert("I")

        if img.mode == "I":
            # 16 位灰度缩放到 8 位
            return img.point(lambda v: v * (1 / 256)).convert("L").convert("RGB")

        if img.mode == "F":
            return img.convert("L").convert("RGB")

        if img.mode != "RGB":
            # CMYK、灰度、二值等模式直接转换
            return img.convert("RGB")

        return img
