"""
Trim export pipeline.

Drives the render backend through ``Preparing -> Composing -> Exporting``
and resolves to the output path, a typed failure, or a cancellation.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

from backend.src.application.artifacts import VIDEO_EXTENSION, ArtifactNamer
from backend.src.core.entities.composition import Composition
from backend.src.core.entities.export_job import ExportJob
from backend.src.core.exceptions import (
    ExportBusyError,
    ExportCancelledError,
    ExportFailedError,
    ExportSessionFailedError,
    FFmpegError,
    FFmpegNotAvailableError,
)
from backend.src.core.value_objects.time_range import TimeRange
from backend.src.infrastructure.render_context import RenderContext
from backend.src.ports.outbound.render_backend_port import ProgressCallback

logger = logging.getLogger(__name__)


class ExportPipeline:
    """Runs one export at a time; a second concurrent request is rejected."""

    def __init__(
        self,
        backend,  # RenderBackendPort
        namer: ArtifactNamer,
        render_context: Optional[RenderContext] = None,
        extension: str = VIDEO_EXTENSION,
    ) -> None:
        self._backend = backend
        self._namer = namer
        self._render_context = render_context or RenderContext()
        self._extension = extension
        self._job: Optional[ExportJob] = None

    @property
    def current_job(self) -> Optional[ExportJob]:
        return self._job

    @property
    def is_busy(self) -> bool:
        return self._job is not None and not self._job.is_terminal

    def cancel(self) -> bool:
        """Request cancellation of the in-flight export, if any."""
        if self._job is None:
            return False
        requested = self._job.request_cancel()
        if requested:
            logger.info("Cancellation requested for %s", self._job.output_path or "pending export")
        return requested

    async def export(
        self,
        composition: Composition,
        time_range: TimeRange,
        output_dir: str | Path,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> str:
        if self.is_busy:
            raise ExportBusyError()

        job = ExportJob()
        self._job = job
        try:
            return await self._run(job, composition, time_range, Path(output_dir), progress_callback)
        finally:
            if not job.is_terminal:
                job.fail("aborted")

    async def _run(
        self,
        job: ExportJob,
        composition: Composition,
        time_range: TimeRange,
        directory: Path,
        progress_callback: Optional[ProgressCallback],
    ) -> str:
        # -- Preparing ----------------------------------------------------------
        try:
            directory.mkdir(parents=True, exist_ok=True)
            output_path = self._namer.next_path(directory, self._extension)
            if output_path.exists():
                logger.warning("Removing stale artifact with colliding name: %s", output_path)
                output_path.unlink()
        except OSError as exc:
            job.fail(str(exc))
            raise ExportSessionFailedError(f"Cannot prepare output in {directory}: {exc}", cause=exc) from exc
        job.prepare(str(output_path))
        self._raise_if_cancel_requested(job, output_path)

        # -- Composing ----------------------------------------------------------
        narrowed = composition.narrowed_to(time_range)
        job.compose(time_range)
        self._raise_if_cancel_requested(job, output_path)

        # -- Exporting ----------------------------------------------------------
        job.start_exporting()
        logger.info(
            "Exporting %s [%dms, %dms) -> %s (audio=%s)",
            composition.source_path, time_range.start_ms, time_range.end_ms,
            output_path, narrowed.includes_audio,
        )

        caller_loop = asyncio.get_running_loop()

        def report(fraction: float) -> None:
            if job.is_terminal:
                return
            job.update_progress(fraction)
            if progress_callback is not None:
                progress_callback(job.progress)

        def on_progress(fraction: float) -> None:
            # job state and the caller's callback belong to the caller's loop
            try:
                current = asyncio.get_running_loop()
            except RuntimeError:
                current = None
            if current is caller_loop:
                report(fraction)
            else:
                caller_loop.call_soon_threadsafe(report, fraction)

        render_task = asyncio.create_task(
            self._render_context.run(
                lambda: self._backend.render(narrowed, time_range, str(output_path), on_progress)
            )
        )
        job.backend_handle = render_task

        try:
            await render_task
        except asyncio.CancelledError:
            self._discard(output_path)
            job.cancel()
            if job.cancel_requested:
                logger.info("Export cancelled: %s", output_path)
                raise ExportCancelledError() from None
            raise
        except FFmpegNotAvailableError as exc:
            self._fail(job, output_path, str(exc))
            raise ExportSessionFailedError(str(exc), cause=exc) from exc
        except FFmpegError as exc:
            self._fail(job, output_path, str(exc))
            raise ExportFailedError(str(exc), cause=exc) from exc
        except Exception as exc:
            self._fail(job, output_path, str(exc))
            raise ExportFailedError(str(exc) or None, cause=exc) from exc

        if not output_path.is_file() or output_path.stat().st_size == 0:
            self._fail(job, output_path, "empty output")
            raise ExportFailedError(f"Render backend produced no output at {output_path}")

        job.complete()
        logger.info("Export completed: %s (%d bytes)", output_path, output_path.stat().st_size)
        return str(output_path)

    # -- helpers ----------------------------------------------------------------

    def _raise_if_cancel_requested(self, job: ExportJob, output_path: Path) -> None:
        if job.cancel_requested:
            self._discard(output_path)
            job.cancel()
            raise ExportCancelledError()

    def _fail(self, job: ExportJob, output_path: Path, error: str) -> None:
        logger.error("Export failed for %s: %s", output_path, error)
        self._discard(output_path)
        job.fail(error)

    @staticmethod
    def _discard(output_path: Path) -> None:
        try:
            output_path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Failed to delete partial output %s: %s", output_path, exc)
