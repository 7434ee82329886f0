from backend.src.core.value_objects.affine_transform import AffineTransform
from backend.src.core.value_objects.size import Size
from backend.src.core.value_objects.time_range import TimeRange

__all__ = ["TimeRange", "Size", "AffineTransform"]
