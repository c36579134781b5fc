"""测试配置文件。

提供测试所需的fixtures和配置。所有测试图片都在内存中生成。
"""

import tempfile
from collections.abc import Callable
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image, ImageDraw

from py_batch_resize_mcp.config import reset_config
from py_batch_resize_mcp.models import SourceImage


ImageFactory = Callable[..., bytes]


def _draw_pattern(img: Image.Image) -> None:
    """画一些色块，避免纯色图片"""
    draw = ImageDraw.Draw(img)
    width, height = img.size
    for i in range(10):
        x, y = (i * 37) % width, (i * 23) % height
        color = (i * 25 % 256, i * 60 % 256, i * 90 % 256)
        if img.mode in ("RGBA", "LA"):
            color = (*color, 128 + i * 10)
        if img.mode in ("L", "LA"):
            color = color[0] if img.mode == "L" else (color[0], color[-1])
        draw.rectangle([x, y, x + width // 5, y + height // 5], fill=color)


def make_image_bytes(
    size: tuple[int, int] = (400, 300),
    mode: str = "RGB",
    format: str = "PNG",
    color: str | tuple[int, ...] = "white",
) -> bytes:
    """生成指定尺寸、模式和格式的图片字节"""
    img = Image.new(mode, size, color=color)
    if mode in ("RGB", "RGBA", "L", "LA"):
        _draw_pattern(img)
    buffer = BytesIO()
    img.save(buffer, format=format)
    return buffer.getvalue()


@pytest.fixture
def make_image() -> ImageFactory:
    """图片字节生成器fixture"""
    return make_image_bytes


@pytest.fixture
def make_source(make_image: ImageFactory) -> Callable[..., SourceImage]:
    """源图片生成器fixture"""

    def factory(identifier: str, size: tuple[int, int] = (400, 300), **kwargs):
        return SourceImage.from_bytes(identifier, make_image(size, **kwargs))

    return factory


@pytest.fixture
def sample_sources(make_source) -> list[SourceImage]:
    """两张 400x300 的 PNG 图片"""
    return [make_source("a.png"), make_source("b.png")]


@pytest.fixture
def corrupt_source() -> SourceImage:
    """无法识别的图片字节"""
    return SourceImage(
        identifier="broken.jpg",
        data=b"this is not an image at all",
        original_width=640,
        original_height=480,
    )


@pytest.fixture
def temp_dir():
    """临时目录fixture"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def image_dir(temp_dir: Path, make_image: ImageFactory) -> Path:
    """包含三张图片和一个非图片文件的目录"""
    (temp_dir / "one.png").write_bytes(make_image((400, 300)))
    (temp_dir / "two.jpg").write_bytes(make_image((300, 600), format="JPEG"))
    (temp_dir / "three.webp").write_bytes(make_image((500, 500), format="WEBP"))
    (temp_dir / "notes.txt").write_text("not an image")
    return temp_dir


@pytest.fixture
def app_env():
    """隔离的环境变量，结束后重置全局配置"""
    with pytest.MonkeyPatch.context() as mp:
        yield mp
    reset_config()
