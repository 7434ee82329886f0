"""
Shared FFmpeg path resolution and command execution utilities.
"""
from __future__ import annotations

import asyncio
import json
import logging
import os
import shutil
from typing import Optional

from backend.src.core.exceptions import FFmpegError, FFmpegNotAvailableError

logger = logging.getLogger(__name__)

# Common Windows FFmpeg install locations
_WINDOWS_FFMPEG_PATHS = [
    r"C:\Program Files\ffmpeg\bin\ffmpeg.exe",
    r"C:\ffmpeg\bin\ffmpeg.exe",
]


def get_ffmpeg_path(override: str = "") -> str:
    """Resolve ffmpeg executable path. Checks the override, PATH, then known locations."""
    if override:
        return override

    path = shutil.which("ffmpeg")
    if path:
        return path

    for candidate in _WINDOWS_FFMPEG_PATHS:
        if os.path.exists(candidate):
            logger.info("Found FFmpeg at: %s", candidate)
            return candidate

    return "ffmpeg"


def get_ffprobe_path(override: str = "", ffmpeg_path: str = "") -> str:
    """Resolve ffprobe executable path, preferring the one next to ffmpeg."""
    if override:
        return override
    ffmpeg = ffmpeg_path or get_ffmpeg_path()
    if "ffmpeg.exe" in ffmpeg:
        probe = ffmpeg.replace("ffmpeg.exe", "ffprobe.exe")
        if os.path.exists(probe):
            return probe
    probe = shutil.which("ffprobe")
    return probe or "ffprobe"


async def spawn(cmd: list[str]) -> asyncio.subprocess.Process:
    """Start *cmd* with piped stdout/stderr without blocking the event loop."""
    logger.debug("Running: %s", " ".join(cmd))
    try:
        return await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise FFmpegNotAvailableError(f"Cannot start {cmd[0]}: {exc}") from exc


async def terminate(proc: asyncio.subprocess.Process, grace_seconds: float = 5.0) -> None:
    """Stop a running process, escalating to kill after *grace_seconds*."""
    if proc.returncode is not None:
        return
    proc.terminate()
    try:
        await asyncio.wait_for(proc.wait(), timeout=grace_seconds)
    except asyncio.TimeoutError:
        logger.warning("FFmpeg pid %s ignored terminate; killing", proc.pid)
        proc.kill()
        await proc.wait()


async def run_ffprobe_json(ffprobe_path: str, video_path: str, *, timeout: int = 30) -> dict:
    """Return ffprobe's ``-show_format -show_streams`` output as a dict."""
    cmd = [
        ffprobe_path,
        "-v", "error",
        "-print_format", "json",
        "-show_format",
        "-show_streams",
        video_path,
    ]
    proc = await spawn(cmd)
    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError as exc:
        await terminate(proc)
        raise FFmpegError(f"FFprobe timed out after {timeout}s") from exc
    except asyncio.CancelledError:
        await terminate(proc)
        raise

    if proc.returncode != 0:
        raise FFmpegError(
            f"FFprobe failed: {stderr.decode('utf-8', errors='replace')[:500]}",
            returncode=proc.returncode,
        )
    try:
        return json.loads(stdout.decode("utf-8", errors="replace") or "{}")
    except json.JSONDecodeError as exc:
        raise FFmpegError(f"FFprobe returned invalid JSON: {exc}") from exc


def parse_progress_line(line: str) -> Optional[int]:
    """Return the encoded position in milliseconds from a ``-progress`` line."""
    if not line.startswith("out_time_us="):
        return None
    try:
        return int(line.split("=", 1)[1]) // 1000
    except ValueError:
        # ffmpeg prints "N/A" before the first frame is muxed
        return None
