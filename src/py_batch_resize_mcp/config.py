"""统一配置管理模块。

提供应用程序的全局配置管理，包括默认值、环境变量支持等。
"""

import os
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ResizeDefaults:
    """缩放和编码相关的默认配置"""

    # 输出编码 - 固定格式，不按单张图片配置
    OUTPUT_FORMAT: str = "JPEG"
    JPEG_QUALITY: int = 85  # 约等于 0-1 刻度上的 0.85

    # 批量上限
    MAX_BATCH_SIZE: int = 30

    # 默认目标框
    DEFAULT_WIDTH: int = 800
    DEFAULT_HEIGHT: int = 600
    PRESERVE_ASPECT_RATIO: bool = True

    # 归档命名
    ENTRY_PREFIX: str = "resized-"
    ARCHIVE_NAME: str = "resized-images.zip"

    def get_save_parameters(self) -> dict[str, Any]:
        """获取输出编码的保存参数"""
        return {
            "format": self.OUTPUT_FORMAT,
            "quality": self.JPEG_QUALITY,
            "optimize": True,
            "progressive": False,
        }


@dataclass(frozen=True)
class ProcessingDefaults:
    """处理相关的默认配置"""

    # 并发设置 - 默认顺序处理
    MAX_WORKERS: int = 1
    EXECUTOR_TYPE: str | None = None  # 'thread' / 'process' / None 为自动选择

    # 自动切换到进程池的阈值
    PROCESS_POOL_MIN_ITEMS: int = 20
    PROCESS_POOL_MIN_AVG_BYTES: int = 5 * 1024 * 1024


@dataclass(frozen=True)
class LoggingDefaults:
    """日志相关的默认配置"""

    # 日志级别
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # 文件日志
    ENABLE_FILE_LOGGING: bool = False
    LOG_FILE_PATH: str = "py_batch_resize.log"
    LOG_FILE_MAX_SIZE: int = 10 * 1024 * 1024  # 10MB
    LOG_FILE_BACKUP_COUNT: int = 5


class AppConfig:
    """应用程序配置管理器

    支持环境变量覆盖默认配置
    """

    def __init__(self):
        self.resize = ResizeDefaults()
        self.processing = ProcessingDefaults()
        self.logging = LoggingDefaults()

        # 从环境变量加载配置
        self._load_from_env()

    def _load_from_env(self):
        """从环境变量加载配置"""
        # 编码配置
        if jpeg_quality := os.getenv("BRZ_JPEG_QUALITY"):
            object.__setattr__(self.resize, "JPEG_QUALITY", int(jpeg_quality))

        # 并发配置
        if max_workers := os.getenv("BRZ_MAX_WORKERS"):
            object.__setattr__(self.processing, "MAX_WORKERS", int(max_workers))

        # 日志配置
        if log_level := os.getenv("BRZ_LOG_LEVEL"):
            object.__setattr__(self.logging, "LOG_LEVEL", log_level.upper())

        if enable_file_log := os.getenv("BRZ_ENABLE_FILE_LOGGING"):
            object.__setattr__(
                self.logging,
                "ENABLE_FILE_LOGGING",
                enable_file_log.lower() in ("true", "1", "yes"),
            )

        if log_file := os.getenv("BRZ_LOG_FILE"):
            object.__setattr__(self.logging, "LOG_FILE_PATH", log_file)

    def get_executor_type(self, item_count: int, total_bytes: int) -> str:
        """根据任务数量和数据量选择执行器类型"""
        if self.processing.EXECUTOR_TYPE:
            return self.processing.EXECUTOR_TYPE

        avg_bytes = total_bytes / item_count if item_count > 0 else 0
        if (
            item_count > self.processing.PROCESS_POOL_MIN_ITEMS
            or avg_bytes > self.processing.PROCESS_POOL_MIN_AVG_BYTES
        ):
            return "process"
        return "thread"


# 全局配置实例
config = AppConfig()


def get_config() -> AppConfig:
    """获取全局配置实例"""
    return config


def reset_config():
    """重置配置（主要用于测试）"""
    global config
    config = AppConfig()
