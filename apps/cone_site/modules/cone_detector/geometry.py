import math
import numpy as np
from typing import Iterable, Tuple
from .schemas import BoundingBox

def passes_area_threshold(area: float, threshold: float) -> bool:
    # Strictly greater: a region exactly at the threshold is dropped
    return area > threshold

def apply_blackout(frame: np.ndarray, regions: Iterable[BoundingBox]) -> np.ndarray:
    """
    Return a copy of the frame with each region filled black.
    Regions are clipped to the frame; ones lying fully outside are ignored.
    """
    result = frame.copy()
    h_img, w_img = result.shape[:2]

    for region in regions:
        x1 = max(0, region.x)
        y1 = max(0, region.y)
        x2 = min(w_img, region.x + region.w)
        y2 = min(h_img, region.y + region.h)

        if x1 >= x2 or y1 >= y2:
            continue

        result[y1:y2, x1:x2] = 0

    return result

def calculate_distance(p1: Tuple[int, int], p2: Tuple[int, int]) -> float:
    return math.hypot(p2[0] - p1[0], p2[1] - p1[1])

def boxes_overlap(a: BoundingBox, b: BoundingBox, margin: int = 0) -> bool:
    """
    Check if two boxes share any pixel once each is grown by `margin` pixels.
    """
    return (a.x < b.x + b.w + margin and a.x + a.w + margin > b.x and
            a.y < b.y + b.h + margin and a.y + a.h + margin > b.y)
