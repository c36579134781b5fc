"""批量缩放管线测试。"""

import threading
import zipfile
from io import BytesIO

import pytest
from PIL import Image

from py_batch_resize_mcp import PipelineFacade, resize_images
from py_batch_resize_mcp.engine import ArchiveBuilder, BatchOrchestrator
from py_batch_resize_mcp.exceptions import (
    ArchiveError,
    BatchTooLargeError,
    ValidationError,
)
from py_batch_resize_mcp.models import BatchStatus


def _open_archive(archive: bytes) -> zipfile.ZipFile:
    return zipfile.ZipFile(BytesIO(archive))


class TestPipelineFacade:
    """管线入口测试"""

    def test_two_images_into_archive(self, sample_sources):
        """两张 400x300 图片缩放到 800x600 并打包"""
        events = []

        result = PipelineFacade().resize_batch(
            sample_sources, 800, 600, progress_callback=events.append
        )

        assert result.success
        assert result.succeeded == 2
        assert result.failed == 0
        assert result.archive_name == "resized-images.zip"
        with _open_archive(result.archive) as zf:
            assert zf.namelist() == ["resized-a.png", "resized-b.png"]
            for name in zf.namelist():
                img = Image.open(BytesIO(zf.read(name)))
                assert img.format == "JPEG"
                assert img.size == (800, 600)
        assert [e.ratio for e in events] == [0.5, 1.0]

    def test_corrupt_item_skipped(self, make_source, corrupt_source):
        """一张损坏图片不影响其余图片"""
        sources = [make_source("one.png"), corrupt_source, make_source("two.png")]

        result = PipelineFacade().resize_batch(sources, 800, 600)

        assert result.succeeded == 2
        assert result.failed == 1
        assert result.failed_identifiers == ["broken.jpg"]
        assert result.to_summary_dict() == {
            "succeeded": 2,
            "failed": 1,
            "failed_identifiers": ["broken.jpg"],
        }
        with _open_archive(result.archive) as zf:
            assert zf.namelist() == ["resized-one.png", "resized-two.png"]
        assert [r.success for r in result.results] == [True, False, True]

    def test_decompression_bomb_recorded_as_failure(self, make_source, monkeypatch):
        """像素过多的图片被跳过，其余图片照常处理"""
        sources = [
            make_source("small.png", (10, 10)),
            make_source("huge.png", (300, 300)),
        ]
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

        result = PipelineFacade().resize_batch(sources, 200, 200)

        assert result.succeeded == 1
        assert result.failed_identifiers == ["huge.png"]
        assert [r.error_type for r in result.results] == [None, "DecodeError"]

    def test_all_items_fail(self, corrupt_source):
        """全部失败时仍返回合法的空归档"""
        result = PipelineFacade().resize_batch([corrupt_source], 800, 600)

        assert result.succeeded == 0
        assert result.failed == 1
        with _open_archive(result.archive) as zf:
            assert zf.namelist() == []

    def test_archive_is_reproducible(self, make_source):
        """相同输入两次运行得到相同的归档字节"""

        def run() -> bytes:
            sources = [
                make_source("a.png", (640, 480)),
                make_source("b.jpg", (300, 900), format="JPEG"),
            ]
            return PipelineFacade().resize_batch(sources, 400, 400).archive

        assert run() == run()

    def test_thread_pool_matches_sequential(self, make_source):
        sources = [make_source(f"{i}.png", (200 + i * 50, 300)) for i in range(5)]

        sequential = PipelineFacade().resize_batch(sources, 300, 300)
        pooled = PipelineFacade(
            max_workers=3, force_executor_type="thread"
        ).resize_batch(sources, 300, 300)

        assert pooled.archive == sequential.archive

    def test_empty_batch(self):
        events = []

        result = PipelineFacade().resize_batch(
            [], 800, 600, progress_callback=events.append
        )

        assert result.succeeded == 0
        assert result.failed == 0
        assert [e.ratio for e in events] == [1.0]
        with _open_archive(result.archive) as zf:
            assert zf.namelist() == []

    def test_oversized_batch_rejected(self, make_source):
        """超过上限时不处理、不报告进度"""
        source = make_source("x.png", (100, 100))
        sources = [
            source.model_copy(update={"identifier": f"{i}.png"}) for i in range(31)
        ]
        events = []

        with pytest.raises(BatchTooLargeError):
            PipelineFacade().resize_batch(
                sources, 800, 600, progress_callback=events.append
            )
        assert events == []

    @pytest.mark.parametrize(
        "width, height", [(99, 600), (800, 2001), (0, 600), (800, -1)]
    )
    def test_out_of_range_dimensions_rejected(self, sample_sources, width, height):
        with pytest.raises(ValidationError):
            PipelineFacade().resize_batch(sample_sources, width, height)

    def test_stretch_mode(self, sample_sources):
        result = PipelineFacade().resize_batch(
            sample_sources, 1000, 100, preserve_aspect_ratio=False
        )

        assert [r.final_dimensions for r in result.results] == [(1000, 100)] * 2

    def test_cancellation_returns_partial_archive(self, make_source):
        cancel_event = threading.Event()
        sources = [make_source(f"{i}.png", (150, 150)) for i in range(4)]

        def cancel_after_first(event):
            cancel_event.set()

        result = PipelineFacade().resize_batch(
            sources,
            200,
            200,
            progress_callback=cancel_after_first,
            cancel_event=cancel_event,
        )

        assert result.cancelled
        assert result.succeeded == 1
        assert result.skipped == 3
        assert result.get_total_count() == 4
        with _open_archive(result.archive) as zf:
            assert zf.namelist() == ["resized-0.png"]

    def test_archive_failure_propagates(self, sample_sources, monkeypatch):
        """归档失败时整批失败，不返回部分结果"""

        def explode(self):
            raise OSError("磁盘已满")

        monkeypatch.setattr(ArchiveBuilder, "_serialize", explode)
        runs = []
        orchestrator = BatchOrchestrator()
        original_run = orchestrator.run

        def tracking_run(*args, **kwargs):
            batch_run = original_run(*args, **kwargs)
            runs.append(batch_run)
            return batch_run

        monkeypatch.setattr(orchestrator, "run", tracking_run)

        with pytest.raises(ArchiveError):
            PipelineFacade(orchestrator=orchestrator).resize_batch(
                sample_sources, 800, 600
            )
        assert runs[0].status == BatchStatus.FAILED
        assert runs[0].error

    def test_calls_do_not_share_state(self, sample_sources, make_source):
        pipeline = PipelineFacade()

        first = pipeline.resize_batch(sample_sources, 800, 600)
        second = pipeline.resize_batch([make_source("c.png")], 800, 600)

        with _open_archive(second.archive) as zf:
            assert zf.namelist() == ["resized-c.png"]
        assert first.succeeded == 2

    def test_summary(self, sample_sources):
        result = resize_images(sample_sources, 800, 600)

        assert result.is_successful()
        assert "2/2" in result.get_summary()
        assert result.get_success_rate() == 100.0
        assert result.get_archive_size() == len(result.archive)
