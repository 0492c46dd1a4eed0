import numbers
from dataclasses import dataclass, field
from typing import List, Tuple, Optional, Dict, Any
import numpy as np

HSV = Tuple[int, int, int]

@dataclass(frozen=True)
class ColorRange:
    """
    Inclusive HSV bounds in OpenCV units (H: 0-179, S and V: 0-255).
    """
    lower: HSV
    upper: HSV
    name: str = "custom"

    def __post_init__(self):
        try:
            lower, upper = tuple(self.lower), tuple(self.upper)
        except TypeError:
            raise ValueError("Color range bounds must be sequences of three integers") from None
        if len(lower) != 3 or len(upper) != 3:
            raise ValueError("Color range bounds must have exactly three channels")
        for channel, (lo, hi) in enumerate(zip(lower, upper)):
            if not all(isinstance(v, numbers.Integral) and not isinstance(v, bool) for v in (lo, hi)):
                raise ValueError(f"Channel {channel} bounds must be integers")
            if not (0 <= lo <= 255 and 0 <= hi <= 255):
                raise ValueError(f"Channel {channel} bounds must lie within 0..255")
            if lo > hi:
                raise ValueError(f"Channel {channel} lower bound {lo} exceeds upper bound {hi}")
        # Normalise to plain int tuples so the value is hashable and immutable
        object.__setattr__(self, "lower", tuple(int(v) for v in lower))
        object.__setattr__(self, "upper", tuple(int(v) for v in upper))

YELLOW_RANGE = ColorRange((15, 62, 139), (40, 255, 255), name="yellow")
BLUE_RANGE = ColorRange((110, 91, 45), (134, 194, 96), name="blue")

@dataclass(frozen=True)
class BoundingBox:
    x: int
    y: int
    w: int
    h: int

    @property
    def area(self) -> int:
        return self.w * self.h

    @property
    def center(self) -> Tuple[int, int]:
        return (self.x + self.w // 2, self.y + self.h // 2)

    def as_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h}

# Horizon and the car's own wiring in a 640x480 track frame
TRACK_BLACKOUT_REGIONS = (
    BoundingBox(x=0, y=0, w=640, h=216),
    BoundingBox(x=160, y=390, w=335, h=89),
)

@dataclass(frozen=True)
class DetectorConfig:
    yellow_range: ColorRange = YELLOW_RANGE
    blue_range: ColorRange = BLUE_RANGE
    area_threshold: float = 5.0
    kernel_size: int = 5
    blackout_regions: Tuple[BoundingBox, ...] = ()

    def __post_init__(self):
        if self.area_threshold < 0:
            raise ValueError("Area threshold must be non-negative")
        if self.kernel_size < 1 or self.kernel_size % 2 == 0:
            raise ValueError("Kernel size must be a positive odd integer")
        if self.yellow_range.name == self.blue_range.name:
            raise ValueError("Yellow and blue color ranges need distinct names")
        object.__setattr__(self, "blackout_regions", tuple(self.blackout_regions))

    @classmethod
    def for_track(cls, area_threshold: float = 5.0, kernel_size: int = 5) -> "DetectorConfig":
        return cls(
            area_threshold=area_threshold,
            kernel_size=kernel_size,
            blackout_regions=TRACK_BLACKOUT_REGIONS,
        )

    @property
    def color_ranges(self) -> List[ColorRange]:
        return [self.yellow_range, self.blue_range]

@dataclass
class DetectionResult:
    bounding_boxes: List[BoundingBox]
    color_name: Optional[str]
    area_threshold: float
    regions_found: int
    processing_time_ms: float
    annotated: Optional[np.ndarray] = field(default=None, repr=False)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "color": self.color_name,
            "bounding_boxes": [b.as_dict() for b in self.bounding_boxes],
            "area_threshold": self.area_threshold,
            "regions_found": self.regions_found,
            "processing_time_ms": self.processing_time_ms,
        }
