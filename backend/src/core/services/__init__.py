from backend.src.core.services.composition_builder import CompositionBuilder
from backend.src.core.services.orientation_resolver import OrientationResolver
from backend.src.core.services.trim_validator import TrimValidator

__all__ = [
    "CompositionBuilder",
    "OrientationResolver",
    "TrimValidator",
]
