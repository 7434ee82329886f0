"""Method-call bridge between a host transport and the engine.

A host (plugin channel, RPC layer, CLI) forwards ``(method, arguments)``
pairs; every outcome comes back as a :class:`MethodResult` carrying either
a value or a stable error code.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from backend.src.core.exceptions import VideoTrimmerError

logger = logging.getLogger(__name__)

INVALID_ARGUMENT = "INVALID_ARGUMENT"
NOT_IMPLEMENTED = "NOT_IMPLEMENTED"


class _Args(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class LoadVideoArgs(_Args):
    path: str


class TrimVideoArgs(_Args):
    start_ms: int = Field(alias="startTimeMs")
    end_ms: int = Field(alias="endTimeMs")
    include_audio: bool = Field(default=True, alias="includeAudio")


class GenerateThumbnailArgs(_Args):
    position_ms: int = Field(alias="positionMs")
    width: Optional[int] = Field(default=None, gt=0)
    height: Optional[int] = Field(default=None, gt=0)
    quality: int = Field(default=80, ge=0, le=100)


@dataclass
class MethodResult:
    success: bool
    value: Any = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def ok(cls, value: Any = None) -> MethodResult:
        return cls(success=True, value=value)

    @classmethod
    def error(cls, code: str, message: str) -> MethodResult:
        return cls(success=False, error_code=code, error_message=message)


class MethodChannelHandler:
    """Dispatches transport calls onto a :class:`VideoTrimmerUseCase`."""

    def __init__(self, engine) -> None:  # VideoTrimmerUseCase
        self._engine = engine
        self._handlers: dict[str, Callable[[dict], Awaitable[Any]]] = {
            "loadVideo": self._load_video,
            "trimVideo": self._trim_video,
            "generateThumbnail": self._generate_thumbnail,
            "clearCache": self._clear_cache,
            "cancelTrim": self._cancel_trim,
            "release": self._release,
        }

    @property
    def methods(self) -> list[str]:
        return sorted(self._handlers)

    async def handle(self, method: str, arguments: Optional[dict] = None) -> MethodResult:
        handler = self._handlers.get(method)
        if handler is None:
            return MethodResult.error(NOT_IMPLEMENTED, f"Unknown method: {method}")

        try:
            return MethodResult.ok(await handler(arguments or {}))
        except ValidationError as exc:
            return MethodResult.error(INVALID_ARGUMENT, str(exc))
        except VideoTrimmerError as exc:
            logger.info("%s failed with %s: %s", method, exc.code, exc.message)
            return MethodResult.error(exc.code, exc.message)

    # -- handlers ---------------------------------------------------------------

    async def _load_video(self, arguments: dict) -> None:
        args = LoadVideoArgs.model_validate(arguments)
        await self._engine.load_video(args.path)

    async def _trim_video(self, arguments: dict) -> str:
        args = TrimVideoArgs.model_validate(arguments)
        return await self._engine.trim_video(args.start_ms, args.end_ms, args.include_audio)

    async def _generate_thumbnail(self, arguments: dict) -> str:
        args = GenerateThumbnailArgs.model_validate(arguments)
        return await self._engine.generate_thumbnail(
            args.position_ms, width=args.width, height=args.height, quality=args.quality
        )

    async def _clear_cache(self, arguments: dict) -> None:
        self._engine.clear_cache()

    async def _cancel_trim(self, arguments: dict) -> bool:
        return self._engine.cancel_trim()

    async def _release(self, arguments: dict) -> None:
        self._engine.release()
