"""Shared test fixtures for all tests."""
from __future__ import annotations

import asyncio
import threading
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image

from backend.src.application.artifacts import ArtifactNamer
from backend.src.core.entities.loaded_asset import AssetTrack, LoadedAsset, MediaType
from backend.src.core.value_objects.affine_transform import AffineTransform
from backend.src.core.value_objects.size import Size


# ── Asset Fixtures ─────────────────────────────────────────────────────────

@pytest.fixture
def sample_video_file(tmp_path: Path) -> Path:
    """A file on disk; its contents are never decoded by the unit tests."""
    path = tmp_path / "source.mp4"
    path.write_bytes(b"\x00\x00\x00\x18ftypmp42")
    return path


@pytest.fixture
def sample_asset(sample_video_file: Path) -> LoadedAsset:
    return LoadedAsset(
        path=str(sample_video_file),
        tracks=[
            AssetTrack(index=0, media_type=MediaType.VIDEO, codec="h264"),
            AssetTrack(index=1, media_type=MediaType.AUDIO, codec="aac"),
        ],
        duration_ms=10_000,
        natural_size=Size(1920, 1080),
        preferred_transform=AffineTransform.identity(),
    )


@pytest.fixture
def portrait_asset(sample_video_file: Path) -> LoadedAsset:
    """A phone recording stored landscape with a 90 degree display matrix."""
    return LoadedAsset(
        path=str(sample_video_file),
        tracks=[
            AssetTrack(index=0, media_type=MediaType.VIDEO, codec="hevc"),
            AssetTrack(index=1, media_type=MediaType.AUDIO, codec="aac"),
        ],
        duration_ms=10_000,
        natural_size=Size(1920, 1080),
        preferred_transform=AffineTransform.rotation(90),
    )


@pytest.fixture
def silent_asset(sample_video_file: Path) -> LoadedAsset:
    return LoadedAsset(
        path=str(sample_video_file),
        tracks=[AssetTrack(index=0, media_type=MediaType.VIDEO, codec="h264")],
        duration_ms=4_000,
        natural_size=Size(640, 480),
    )


@pytest.fixture
def sample_frame() -> Image.Image:
    return Image.new("RGB", (64, 36), color=(200, 40, 40))


# ── Naming Fixtures ────────────────────────────────────────────────────────

@pytest.fixture
def fixed_clock_namer() -> ArtifactNamer:
    """Namer whose clock never advances, so tokens only grow by collision bumps."""
    return ArtifactNamer(clock=lambda: 1_700_000_000_000)


# ── Mock Port Fixtures ─────────────────────────────────────────────────────

@pytest.fixture
def mock_asset_probe(sample_asset: LoadedAsset) -> AsyncMock:
    mock = AsyncMock()
    mock.probe.return_value = sample_asset
    return mock


@pytest.fixture
def mock_render_backend() -> AsyncMock:
    """Backend that writes a small payload and reports progress in two steps."""

    async def _render(composition, time_range, output_path, progress_callback=None):
        if progress_callback is not None:
            progress_callback(0.5)
        Path(output_path).write_bytes(b"fake-mp4-payload")
        if progress_callback is not None:
            progress_callback(1.0)

    mock = AsyncMock()
    mock.render.side_effect = _render
    return mock


@pytest.fixture
def slow_render_backend() -> AsyncMock:
    """Backend that writes a partial file, then blocks until cancelled."""
    started = asyncio.Event()

    async def _render(composition, time_range, output_path, progress_callback=None):
        Path(output_path).write_bytes(b"partial")
        started.set()
        await asyncio.sleep(3600)

    mock = AsyncMock()
    mock.render.side_effect = _render
    mock.started = started
    return mock


@pytest.fixture
def mock_frame_grabber(sample_frame: Image.Image) -> MagicMock:
    mock = MagicMock()
    mock.grab_frame.return_value = sample_frame
    return mock


@pytest.fixture
def mock_thumbnail_encoder() -> MagicMock:
    def _encode(image, output_path, quarter_turns=0, target_size=None, quality=80):
        Path(output_path).write_bytes(b"\xff\xd8\xff\xd9")
        return str(output_path)

    mock = MagicMock()
    mock.encode.side_effect = _encode
    return mock


# ── Event Loop Fixtures ────────────────────────────────────────────────────

@pytest.fixture
def background_loop():
    """A second event loop running on its own daemon thread."""
    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()
    yield loop
    loop.call_soon_threadsafe(loop.stop)
    thread.join(timeout=5)
    loop.close()
