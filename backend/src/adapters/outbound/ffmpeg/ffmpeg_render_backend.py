"""FFmpeg adapter implementing the render backend for trim exports."""
from __future__ import annotations

import asyncio
import collections
import logging
from typing import Any, Optional

from backend.src.adapters.outbound.ffmpeg.ffmpeg_base import (
    get_ffmpeg_path,
    parse_progress_line,
    spawn,
    terminate,
)
from backend.src.core.entities.composition import Composition
from backend.src.core.exceptions import FFmpegError
from backend.src.core.services.orientation_resolver import OrientationResolver
from backend.src.core.value_objects.time_range import TimeRange
from backend.src.ports.outbound.render_backend_port import ProgressCallback

logger = logging.getLogger(__name__)

# Filters that bake a clockwise quarter-turn count into the pixels.
_ROTATION_FILTERS: dict[int, list[str]] = {
    0: [],
    1: ["transpose=clock"],
    2: ["hflip", "vflip"],
    3: ["transpose=cclock"],
}

_STDERR_TAIL_LINES = 40


class FFmpegRenderBackend:
    """Implements :class:`RenderBackendPort` using the FFmpeg CLI.

    Autorotation is disabled on input; the composition's render instruction
    is applied explicitly and the output is written with neutral rotation
    metadata, so players show it upright without a second correction.
    """

    def __init__(self, config: dict[str, Any], resolver: Optional[OrientationResolver] = None) -> None:
        self._ffmpeg = get_ffmpeg_path(config.get("ffmpeg_path", ""))
        self.codec: str = config.get("codec", "libx264")
        self.crf: int = config.get("crf", 18)
        self.preset: str = config.get("preset", "veryfast")
        self.audio_codec: str = config.get("audio_codec", "aac")
        self.audio_bitrate: str = config.get("audio_bitrate", "192k")
        self._resolver = resolver or OrientationResolver()

        logger.info(
            "FFmpegRenderBackend config: codec=%s, crf=%d, preset=%s, audio=%s@%s",
            self.codec, self.crf, self.preset, self.audio_codec, self.audio_bitrate,
        )

    # -- public (port) interface ------------------------------------------------

    async def render(
        self,
        composition: Composition,
        time_range: TimeRange,
        output_path: str,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> None:
        cmd = self.build_command(composition, time_range, output_path)
        proc = await spawn(cmd)

        stderr_tail: collections.deque[str] = collections.deque(maxlen=_STDERR_TAIL_LINES)

        async def read_stderr() -> None:
            assert proc.stderr is not None
            async for raw in proc.stderr:
                line = raw.decode("utf-8", errors="replace").strip()
                if line:
                    stderr_tail.append(line)

        stderr_task = asyncio.create_task(read_stderr())
        try:
            assert proc.stdout is not None
            async for raw_line in proc.stdout:
                position_ms = parse_progress_line(raw_line.decode("utf-8", errors="replace").strip())
                if position_ms is not None and progress_callback is not None:
                    progress_callback(min(position_ms / time_range.duration_ms, 1.0))
            await proc.wait()
            await stderr_task
        except BaseException as exc:
            # cancellation, or a raising progress callback: ffmpeg must not outlive us
            if proc.returncode is None:
                logger.info("Render aborted (%s); stopping ffmpeg pid %s", type(exc).__name__, proc.pid)
                await terminate(proc)
            stderr_task.cancel()
            raise

        if proc.returncode != 0:
            detail = "\n".join(stderr_tail)
            logger.error("FFmpeg error (rc=%s): %s", proc.returncode, detail)
            raise FFmpegError(
                f"FFmpeg failed (rc={proc.returncode}): {detail[-500:]}",
                returncode=proc.returncode,
            )

    # -- command construction ---------------------------------------------------

    def build_command(
        self, composition: Composition, time_range: TimeRange, output_path: str
    ) -> list[str]:
        instruction = composition.instruction
        cmd = [
            self._ffmpeg,
            "-y",
            "-hide_banner",
            "-nostdin",
            "-noautorotate",
            "-ss", f"{time_range.start_seconds:.3f}",
            "-i", composition.source_path,
            "-t", f"{time_range.duration_seconds:.3f}",
            "-map", f"0:{composition.video.track.index}",
        ]
        if composition.audio is not None:
            cmd.extend(["-map", f"0:{composition.audio.track.index}"])

        cmd.extend(["-vf", self._video_filter(composition)])
        cmd.extend([
            "-c:v", self.codec,
            "-crf", str(self.crf),
            "-preset", self.preset,
            "-pix_fmt", "yuv420p",
        ])
        if composition.audio is not None:
            cmd.extend(["-c:a", self.audio_codec, "-b:a", self.audio_bitrate])
        else:
            cmd.append("-an")

        cmd.extend([
            "-metadata:s:v:0", "rotate=0",
            "-movflags", "+faststart",
            "-progress", "pipe:1",
            "-nostats",
            output_path,
        ])
        logger.debug(
            "Render window %dms-%dms, render size %dx%d",
            instruction.time_range.start_ms, instruction.time_range.end_ms,
            instruction.render_size.width, instruction.render_size.height,
        )
        return cmd

    def _video_filter(self, composition: Composition) -> str:
        instruction = composition.instruction
        turns = self._resolver.quarter_turns(instruction.transform)
        filters = list(_ROTATION_FILTERS[turns])
        # yuv420p needs even dimensions
        width = instruction.render_size.width - instruction.render_size.width % 2
        height = instruction.render_size.height - instruction.render_size.height % 2
        filters.append(f"scale={width}:{height}")
        return ",".join(filters)
