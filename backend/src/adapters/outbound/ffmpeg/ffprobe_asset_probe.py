"""FFprobe adapter that resolves source container metadata."""
from __future__ import annotations

import logging
from typing import Any, Optional

from backend.src.adapters.outbound.ffmpeg.ffmpeg_base import get_ffprobe_path, run_ffprobe_json
from backend.src.core.entities.loaded_asset import AssetTrack, LoadedAsset, MediaType
from backend.src.core.value_objects.affine_transform import AffineTransform
from backend.src.core.value_objects.size import Size

logger = logging.getLogger(__name__)

# Sample-entry tags used by CENC / FairPlay protected tracks.
_PROTECTED_CODEC_TAGS = frozenset({"encv", "enca", "drms", "drmi"})
_UNUSABLE_CODECS = frozenset({"", "none", "unknown"})


class FFprobeAssetProbe:
    """Implements :class:`AssetProbePort` by parsing ffprobe JSON."""

    def __init__(self, ffprobe_path: str = "", timeout: int = 30) -> None:
        self._ffprobe = get_ffprobe_path(ffprobe_path)
        self._timeout = timeout

    async def probe(self, video_path: str) -> LoadedAsset:
        info = await run_ffprobe_json(self._ffprobe, video_path, timeout=self._timeout)
        asset = parse_probe_output(video_path, info)
        logger.info(
            "Probed %s: %s, %dms, %d track(s), rotation=%.0f, protected=%s",
            video_path, asset.resolution_str, asset.duration_ms, len(asset.tracks),
            asset.preferred_transform.rotation_degrees, asset.is_protected,
        )
        return asset


def parse_probe_output(video_path: str, info: dict[str, Any]) -> LoadedAsset:
    """Build a :class:`LoadedAsset` from ffprobe's JSON document."""
    streams: list[dict[str, Any]] = info.get("streams", [])
    tracks: list[AssetTrack] = []
    video_stream: Optional[dict[str, Any]] = None

    for stream in streams:
        codec_type = stream.get("codec_type")
        if codec_type == "video":
            # cover art in MP4/M4A shows up as a single-frame video stream
            if stream.get("disposition", {}).get("attached_pic") == 1:
                continue
            media_type = MediaType.VIDEO
            if video_stream is None:
                video_stream = stream
        elif codec_type == "audio":
            media_type = MediaType.AUDIO
        else:
            continue
        tracks.append(AssetTrack(
            index=int(stream.get("index", len(tracks))),
            media_type=media_type,
            codec=stream.get("codec_name", "") or "",
        ))

    duration_ms = _duration_ms(info.get("format", {}), video_stream)
    natural_size = Size(0, 0)
    transform = AffineTransform.identity()
    if video_stream is not None:
        natural_size = Size(int(video_stream.get("width", 0)), int(video_stream.get("height", 0)))
        transform = AffineTransform.rotation(clockwise_rotation(video_stream))

    protected = any(_is_protected(s) for s in streams)
    exportable = (
        video_stream is not None
        and (video_stream.get("codec_name") or "").lower() not in _UNUSABLE_CODECS
        and duration_ms > 0
        and not natural_size.is_empty
    )

    return LoadedAsset(
        path=video_path,
        tracks=tracks,
        duration_ms=duration_ms,
        is_protected=protected,
        natural_size=natural_size,
        preferred_transform=transform,
        is_exportable=exportable,
    )


def clockwise_rotation(stream: dict[str, Any]) -> float:
    """Display rotation in clockwise degrees, normalised to (-180, 180].

    Older ffprobe builds expose ``tags.rotate`` (clockwise); newer ones only
    report the display-matrix side data, whose ``rotation`` is
    counter-clockwise.
    """
    degrees = 0.0
    rotate_tag = stream.get("tags", {}).get("rotate")
    if rotate_tag is not None:
        try:
            degrees = float(rotate_tag)
        except ValueError:
            logger.warning("Ignoring malformed rotate tag %r", rotate_tag)
    else:
        for side_data in stream.get("side_data_list", []):
            if "rotation" in side_data:
                degrees = -float(side_data["rotation"])
                break

    degrees = degrees % 360
    if degrees > 180:
        degrees -= 360
    return degrees


def _duration_ms(fmt: dict[str, Any], video_stream: Optional[dict[str, Any]]) -> int:
    for source in (fmt, video_stream or {}):
        raw = source.get("duration")
        if raw in (None, "", "N/A"):
            continue
        try:
            return int(round(float(raw) * 1000))
        except ValueError:
            continue
    return 0


def _is_protected(stream: dict[str, Any]) -> bool:
    if (stream.get("codec_tag_string") or "").lower() in _PROTECTED_CODEC_TAGS:
        return True
    return any(
        "encryption" in (side_data.get("side_data_type") or "").lower()
        for side_data in stream.get("side_data_list", [])
    )
