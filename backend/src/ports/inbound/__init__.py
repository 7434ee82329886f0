from backend.src.ports.inbound.video_trimmer_use_case import VideoTrimmerUseCase

__all__ = ["VideoTrimmerUseCase"]
