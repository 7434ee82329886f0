"""Unit tests for ExportPipeline."""
from __future__ import annotations

import asyncio
import re
import threading
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from backend.src.application.artifacts import ArtifactNamer
from backend.src.application.export_pipeline import ExportPipeline
from backend.src.core.entities.export_job import ExportState
from backend.src.core.entities.loaded_asset import LoadedAsset
from backend.src.core.exceptions import (
    ExportBusyError,
    ExportCancelledError,
    ExportFailedError,
    ExportSessionFailedError,
    FFmpegError,
    FFmpegNotAvailableError,
)
from backend.src.core.services.composition_builder import CompositionBuilder
from backend.src.core.value_objects.time_range import TimeRange
from backend.src.infrastructure.render_context import RenderContext

_ARTIFACT = re.compile(r"^video_trimmer_\d+\.mp4$")


@pytest.fixture
def composition(sample_asset: LoadedAsset):
    return CompositionBuilder().build(sample_asset, include_audio=True)


def _leftovers(directory: Path) -> list[Path]:
    return sorted(directory.glob("video_trimmer_*"))


class TestExportPipelineSuccess:

    @pytest.mark.asyncio
    async def test_returns_existing_non_empty_artifact(self, tmp_path, composition, mock_render_backend):
        pipeline = ExportPipeline(mock_render_backend, ArtifactNamer())
        result = await pipeline.export(composition, TimeRange(0, 3000), tmp_path)

        path = Path(result)
        assert path.parent == tmp_path
        assert _ARTIFACT.match(path.name)
        assert path.stat().st_size > 0
        assert pipeline.current_job.state == ExportState.COMPLETED
        assert pipeline.is_busy is False

    @pytest.mark.asyncio
    async def test_backend_receives_narrowed_composition(self, tmp_path, composition, mock_render_backend):
        pipeline = ExportPipeline(mock_render_backend, ArtifactNamer())
        window = TimeRange(2000, 5000)
        await pipeline.export(composition, window, tmp_path)

        narrowed, time_range, output_path, _callback = mock_render_backend.render.call_args.args
        assert narrowed.instruction.time_range == window
        assert time_range == window
        assert output_path.endswith(".mp4")

    @pytest.mark.asyncio
    async def test_progress_is_forwarded(self, tmp_path, composition, mock_render_backend):
        seen: list[float] = []
        pipeline = ExportPipeline(mock_render_backend, ArtifactNamer())
        await pipeline.export(composition, TimeRange(0, 3000), tmp_path, progress_callback=seen.append)
        assert seen == [0.5, 1.0]
        assert pipeline.current_job.progress == 1.0

    @pytest.mark.asyncio
    async def test_progress_from_bound_loop_arrives_on_caller_thread(
        self, tmp_path, composition, mock_render_backend, background_loop
    ):
        seen: list[float] = []
        threads: list[int] = []

        def _record(fraction: float) -> None:
            threads.append(threading.get_ident())
            seen.append(fraction)

        pipeline = ExportPipeline(
            mock_render_backend, ArtifactNamer(), render_context=RenderContext(background_loop)
        )
        await pipeline.export(composition, TimeRange(0, 3000), tmp_path, progress_callback=_record)

        assert seen == [0.5, 1.0]
        assert set(threads) == {threading.get_ident()}
        assert pipeline.current_job.state == ExportState.COMPLETED

    @pytest.mark.asyncio
    async def test_creates_missing_output_directory(self, tmp_path, composition, mock_render_backend):
        target = tmp_path / "nested" / "cache"
        pipeline = ExportPipeline(mock_render_backend, ArtifactNamer())
        result = await pipeline.export(composition, TimeRange(0, 1000), target)
        assert Path(result).parent == target

    @pytest.mark.asyncio
    async def test_consecutive_exports_get_distinct_names(
        self, tmp_path, composition, mock_render_backend, fixed_clock_namer
    ):
        pipeline = ExportPipeline(mock_render_backend, fixed_clock_namer)
        first = await pipeline.export(composition, TimeRange(0, 1000), tmp_path)
        second = await pipeline.export(composition, TimeRange(0, 1000), tmp_path)
        assert first != second
        assert Path(first).exists() and Path(second).exists()

    @pytest.mark.asyncio
    async def test_stale_file_with_colliding_name_is_replaced(self, tmp_path, composition, mock_render_backend):
        namer = ArtifactNamer(clock=lambda: 42)
        stale = tmp_path / "video_trimmer_42.mp4"
        stale.write_bytes(b"stale")

        pipeline = ExportPipeline(mock_render_backend, namer)
        result = await pipeline.export(composition, TimeRange(0, 1000), tmp_path)

        assert result == str(stale)
        assert stale.read_bytes() == b"fake-mp4-payload"


class TestExportPipelineFailures:

    @pytest.mark.asyncio
    async def test_backend_error_maps_to_export_failed(self, tmp_path, composition):
        async def _render(composition, time_range, output_path, progress_callback=None):
            Path(output_path).write_bytes(b"partial")
            raise FFmpegError("encoder exploded", returncode=1)

        backend = AsyncMock()
        backend.render.side_effect = _render
        pipeline = ExportPipeline(backend, ArtifactNamer())

        with pytest.raises(ExportFailedError) as exc_info:
            await pipeline.export(composition, TimeRange(0, 1000), tmp_path)

        assert "encoder exploded" in exc_info.value.message
        assert isinstance(exc_info.value.cause, FFmpegError)
        assert _leftovers(tmp_path) == []
        assert pipeline.current_job.state == ExportState.FAILED
        assert pipeline.is_busy is False

    @pytest.mark.asyncio
    async def test_missing_binary_maps_to_session_failed(self, tmp_path, composition):
        backend = AsyncMock()
        backend.render.side_effect = FFmpegNotAvailableError("Cannot start ffmpeg")
        pipeline = ExportPipeline(backend, ArtifactNamer())

        with pytest.raises(ExportSessionFailedError):
            await pipeline.export(composition, TimeRange(0, 1000), tmp_path)
        assert pipeline.is_busy is False

    @pytest.mark.asyncio
    async def test_empty_output_is_a_failure(self, tmp_path, composition):
        backend = AsyncMock()
        backend.render.return_value = None
        pipeline = ExportPipeline(backend, ArtifactNamer())

        with pytest.raises(ExportFailedError):
            await pipeline.export(composition, TimeRange(0, 1000), tmp_path)
        assert _leftovers(tmp_path) == []

    @pytest.mark.asyncio
    async def test_unexpected_error_maps_to_export_failed(self, tmp_path, composition):
        backend = AsyncMock()
        backend.render.side_effect = ValueError("bad frame")
        pipeline = ExportPipeline(backend, ArtifactNamer())

        with pytest.raises(ExportFailedError):
            await pipeline.export(composition, TimeRange(0, 1000), tmp_path)
        assert pipeline.is_busy is False

    @pytest.mark.asyncio
    async def test_unwritable_directory_is_session_failure(self, tmp_path, composition, mock_render_backend):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("file")
        pipeline = ExportPipeline(mock_render_backend, ArtifactNamer())

        with pytest.raises(ExportSessionFailedError):
            await pipeline.export(composition, TimeRange(0, 1000), blocker / "sub")
        mock_render_backend.render.assert_not_called()
        assert pipeline.current_job.state == ExportState.FAILED


class TestExportPipelineCancellation:

    @pytest.mark.asyncio
    async def test_cancel_mid_export_leaves_no_partial_file(self, tmp_path, composition, slow_render_backend):
        pipeline = ExportPipeline(slow_render_backend, ArtifactNamer())
        task = asyncio.create_task(pipeline.export(composition, TimeRange(0, 3000), tmp_path))
        await asyncio.wait_for(slow_render_backend.started.wait(), timeout=5)
        assert _leftovers(tmp_path) != []

        assert pipeline.cancel() is True
        with pytest.raises(ExportCancelledError):
            await task

        assert _leftovers(tmp_path) == []
        assert pipeline.current_job.state == ExportState.CANCELLED
        assert pipeline.is_busy is False

    @pytest.mark.asyncio
    async def test_cancel_without_export_returns_false(self, mock_render_backend):
        pipeline = ExportPipeline(mock_render_backend, ArtifactNamer())
        assert pipeline.cancel() is False

    @pytest.mark.asyncio
    async def test_cancel_after_completion_returns_false(self, tmp_path, composition, mock_render_backend):
        pipeline = ExportPipeline(mock_render_backend, ArtifactNamer())
        await pipeline.export(composition, TimeRange(0, 1000), tmp_path)
        assert pipeline.cancel() is False

    @pytest.mark.asyncio
    async def test_caller_task_cancellation_propagates(self, tmp_path, composition, slow_render_backend):
        pipeline = ExportPipeline(slow_render_backend, ArtifactNamer())
        task = asyncio.create_task(pipeline.export(composition, TimeRange(0, 3000), tmp_path))
        await asyncio.wait_for(slow_render_backend.started.wait(), timeout=5)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert _leftovers(tmp_path) == []
        assert pipeline.current_job.state == ExportState.CANCELLED

    @pytest.mark.asyncio
    async def test_second_export_while_busy_is_rejected(self, tmp_path, composition, slow_render_backend):
        pipeline = ExportPipeline(slow_render_backend, ArtifactNamer())
        task = asyncio.create_task(pipeline.export(composition, TimeRange(0, 3000), tmp_path))
        await asyncio.wait_for(slow_render_backend.started.wait(), timeout=5)

        assert pipeline.is_busy is True
        with pytest.raises(ExportBusyError):
            await pipeline.export(composition, TimeRange(0, 1000), tmp_path)

        pipeline.cancel()
        with pytest.raises(ExportCancelledError):
            await task
