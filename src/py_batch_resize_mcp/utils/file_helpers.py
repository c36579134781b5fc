"""工具函数模块。

提供图片文件查找和读取等实用工具函数。
"""

from collections.abc import Iterable, Iterator
from pathlib import Path

from ..models.constants import is_supported_extension
from .logging_helpers import get_logger
from .message_formatter import MessageFormatter


logger = get_logger()


def find_image_files(
    directory: str | Path,
    recursive: bool = False,
    exclude_dirs: list[str] | None = None,
) -> Iterator[Path]:
    """查找目录中的图像文件，按路径排序。

    Args:
        directory: 搜索目录
        recursive: 是否递归搜索子目录
        exclude_dirs: 要排除的目录名列表

    Yields:
        Path: 图像文件路径
    """
    directory = Path(directory)
    exclude_dirs = exclude_dirs or []

    if not directory.exists():
        logger.warning(MessageFormatter.directory_not_found(directory))
        return

    if not directory.is_dir():
        logger.warning(MessageFormatter.path_not_directory(directory))
        return

    # 选择搜索模式
    pattern = "**/*" if recursive else "*"

    try:
        candidates = sorted(directory.glob(pattern))
    except PermissionError:
        logger.error(MessageFormatter.permission_error(directory, "列出目录"))
        return

    for file_path in candidates:
        if (
            file_path.is_file()
            and is_supported_extension(file_path.suffix)
            and not any(
                exclude_dir in file_path.relative_to(directory).parts
                for exclude_dir in exclude_dirs
            )
        ):
            yield file_path


def identifier_for(file_path: Path, base_dir: Path | None = None) -> str:
    """生成图片标识：相对目录的 POSIX 路径，无目录时为文件名"""
    if base_dir is not None:
        try:
            return file_path.relative_to(base_dir).as_posix()
        except ValueError:
            pass
    return file_path.name


def read_image_files(
    files: Iterable[Path], base_dir: Path | None = None
) -> Iterator[tuple[str, bytes]]:
    """按顺序读取图片文件内容

    Yields:
        tuple[str, bytes]: 图片标识和文件字节
    """
    for file_path in files:
        yield identifier_for(file_path, base_dir), file_path.read_bytes()
