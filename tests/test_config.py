"""配置、请求构建和错误处理测试。"""

import logging

import pytest
from PIL import Image
from pydantic import ValidationError as PydanticValidationError

from py_batch_resize_mcp.config import get_config, reset_config
from py_batch_resize_mcp.core import ImageTranscoder, process_item
from py_batch_resize_mcp.engine import RequestBuilder, build_request
from py_batch_resize_mcp.exceptions import (
    DecodeError,
    EncodeError,
    ErrorHandler,
    ResizeError,
    UnsupportedFormatError,
    ValidationError,
    handle_image_errors,
)
from py_batch_resize_mcp.models import ResizeRequest
from py_batch_resize_mcp.utils import configure_logging


class TestAppConfig:
    """全局配置测试"""

    def test_defaults(self):
        config = get_config()

        assert config.resize.JPEG_QUALITY == 85
        assert config.resize.MAX_BATCH_SIZE == 30
        assert config.resize.ENTRY_PREFIX == "resized-"
        assert config.processing.MAX_WORKERS == 1

    def test_save_parameters(self):
        params = get_config().resize.get_save_parameters()

        assert params == {
            "format": "JPEG",
            "quality": 85,
            "optimize": True,
            "progressive": False,
        }

    def test_env_overrides(self, app_env):
        app_env.setenv("BRZ_JPEG_QUALITY", "70")
        app_env.setenv("BRZ_MAX_WORKERS", "4")
        app_env.setenv("BRZ_LOG_LEVEL", "debug")
        app_env.setenv("BRZ_ENABLE_FILE_LOGGING", "yes")
        reset_config()

        config = get_config()
        assert config.resize.JPEG_QUALITY == 70
        assert config.processing.MAX_WORKERS == 4
        assert config.logging.LOG_LEVEL == "DEBUG"
        assert config.logging.ENABLE_FILE_LOGGING is True

    def test_quality_applies_per_process(self, app_env, sample_sources):
        """质量由进程配置决定，所有图片使用同一质量"""
        app_env.setenv("BRZ_JPEG_QUALITY", "40")
        reset_config()

        request = ResizeRequest(target_width=200, target_height=200)
        results = [process_item(source, request) for source in sample_sources]

        assert {r.quality_used for r in results} == {40}
        assert ImageTranscoder().quality == 40

    @pytest.mark.parametrize(
        "item_count, total_bytes, expected",
        [
            (5, 1024, "thread"),
            (21, 1024, "process"),
            (2, 20 * 1024 * 1024, "process"),
            (0, 0, "thread"),
        ],
    )
    def test_executor_type(self, item_count, total_bytes, expected):
        assert get_config().get_executor_type(item_count, total_bytes) == expected


class TestConfigureLogging:
    """日志配置测试"""

    @pytest.fixture(autouse=True)
    def restore_logging(self):
        yield
        package_logger = logging.getLogger("py_batch_resize_mcp")
        for handler in list(package_logger.handlers):
            package_logger.removeHandler(handler)
            handler.close()
        package_logger.setLevel(logging.NOTSET)

    def test_repeated_calls_do_not_duplicate_handlers(self):
        configure_logging()
        package_logger = configure_logging()

        assert len(package_logger.handlers) == 1
        assert package_logger.level == logging.INFO

    def test_file_logging(self, app_env, temp_dir):
        log_file = temp_dir / "resize.log"
        app_env.setenv("BRZ_ENABLE_FILE_LOGGING", "true")
        app_env.setenv("BRZ_LOG_FILE", str(log_file))
        reset_config()

        package_logger = configure_logging()
        logging.getLogger("py_batch_resize_mcp.engine").warning("写入文件")
        for handler in package_logger.handlers:
            handler.flush()

        assert len(package_logger.handlers) == 2
        assert "写入文件" in log_file.read_text(encoding="utf-8")


class TestRequestBuilder:
    """请求构建器测试"""

    def test_build_valid_request(self):
        request = build_request(800, 600)

        assert request.target_size == (800, 600)
        assert request.preserve_aspect_ratio is True

    @pytest.mark.parametrize("width", [99, 2001, 0, -10])
    def test_out_of_range_width(self, width):
        with pytest.raises(ValidationError):
            build_request(width, 600)

    @pytest.mark.parametrize("height", [1.5, "600", None, True])
    def test_non_integer_height(self, height):
        with pytest.raises(ValidationError):
            build_request(800, height)

    def test_boundaries_accepted(self):
        assert build_request(100, 2000).target_size == (100, 2000)

    def test_request_is_immutable(self):
        request = build_request(800, 600)

        with pytest.raises(PydanticValidationError):
            request.target_width = 900

    def test_build_sources(self, make_image):
        sources = RequestBuilder().build_sources(
            [("a.png", make_image((321, 123))), ("b.bin", b"garbage")]
        )

        assert [s.identifier for s in sources] == ["a.png", "b.bin"]
        assert sources[0].original_dimensions == (321, 123)
        assert sources[1].original_dimensions is None

    def test_blank_identifier_rejected(self):
        with pytest.raises(ValidationError):
            RequestBuilder().build_sources([("   ", b"data")])


class TestErrorHandling:
    """错误处理测试"""

    def test_error_hierarchy(self):
        assert issubclass(UnsupportedFormatError, DecodeError)
        assert issubclass(ValidationError, ResizeError)
        assert issubclass(EncodeError, ResizeError)

    def test_decorator_wraps_unexpected_errors(self):
        @handle_image_errors("测试操作", EncodeError)
        def broken():
            raise RuntimeError("boom")

        with pytest.raises(EncodeError) as exc_info:
            broken()
        assert "测试操作" in exc_info.value.message

    def test_decorator_maps_unidentified_image(self):
        @handle_image_errors("测试操作", DecodeError)
        def unidentified():
            raise Image.UnidentifiedImageError("unknown")

        with pytest.raises(UnsupportedFormatError):
            unidentified()

    def test_decorator_passes_domain_errors(self):
        @handle_image_errors("测试操作", EncodeError)
        def invalid():
            raise ValidationError("参数错误")

        with pytest.raises(ValidationError):
            invalid()

    def test_item_error_becomes_failure_result(self):
        result = ErrorHandler.handle_item_error(
            EncodeError("编码失败"), "x.png", original_size=10
        )

        assert not result.success
        assert result.error_type == "EncodeError"
        assert "编码失败" in result.error
        assert result.original_size == 10
