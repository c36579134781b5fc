"""图像处理相关常量定义。

输入格式是一个封闭集合：只处理这里列出的编码，其他一律视为不支持。
"""

from typing import Final

from PIL import Image


class ImageFormats:
    """支持的输入输出格式"""

    # 用户友好的别名
    ALIASES: Final[dict[str, str]] = {
        "JPG": "JPEG",
        "TIF": "TIFF",
    }

    # 可解码的输入格式（Pillow 格式名）
    # MPO 是部分相机输出的多帧 JPEG，Pillow 以 MPO 打开
    SUPPORTED_INPUT_FORMATS: Final[frozenset[str]] = frozenset(
        {"JPEG", "MPO", "PNG", "WEBP", "GIF", "BMP", "TIFF"}
    )

    # 输入文件扩展名
    SUPPORTED_EXTENSIONS: Final[frozenset[str]] = frozenset(
        {
            ".jpg",
            ".jpeg",
            ".jpe",
            ".png",
            ".webp",
            ".gif",
            ".bmp",
            ".tif",
            ".tiff",
        }
    )

    # 需要先合成到背景上的带透明通道模式
    ALPHA_MODES: Final[frozenset[str]] = frozenset({"RGBA", "LA", "PA", "RGBa", "La"})

    @classmethod
    def is_supported_input(cls, format_name: str | None) -> bool:
        """检查解码出的格式是否在支持集合内"""
        if not format_name:
            return False
        return get_format_alias(format_name) in cls.SUPPORTED_INPUT_FORMATS

    @classmethod
    def get_mime_type(cls, format_name: str) -> str:
        """获取 MIME 类型"""
        mime = Image.MIME.get(format_name.upper())
        return mime or f"image/{format_name.lower()}"


class ValidationLimits:
    """验证相关限制"""

    # 目标尺寸范围（像素）
    MIN_DIMENSION: Final[int] = 100
    MAX_DIMENSION: Final[int] = 2000


class ArchiveDefaults:
    """归档相关常量"""

    ENTRY_PREFIX: Final[str] = "resized-"
    ARCHIVE_NAME: Final[str] = "resized-images.zip"
    ARCHIVE_MIME_TYPE: Final[str] = "application/zip"

    # ZIP 不支持 1980 年之前的时间戳，固定时间戳保证输出可复现
    ENTRY_TIMESTAMP: Final[tuple[int, int, int, int, int, int]] = (1980, 1, 1, 0, 0, 0)
    # 普通文件 0o644
    ENTRY_EXTERNAL_ATTR: Final[int] = 0o100644 << 16


# 便捷访问函数
def get_format_alias(format_str: str) -> str:
    """获取格式的标准名称"""
    format_upper = format_str.upper()
    return ImageFormats.ALIASES.get(format_upper, format_upper)


def get_mime_type(format_str: str) -> str:
    """获取格式的MIME类型"""
    return ImageFormats.get_mime_type(get_format_alias(format_str))


def is_supported_extension(suffix: str) -> bool:
    """检查文件扩展名是否受支持"""
    return suffix.lower() in ImageFormats.SUPPORTED_EXTENSIONS
