import cv2
import numpy as np
from .schemas import BoundingBox
from .geometry import calculate_distance
from typing import List, Tuple

RED = (0, 0, 255)

# Midpoint of the car's bonnet in a 640x480 track frame
CAR_CENTER = ((495 - 160) // 2 + 160, (479 - 390) // 2 + 390)

def create_overlay_image(
    original_image: np.ndarray,
    boxes: List[BoundingBox],
    color: Tuple[int, int, int] = RED,
    thickness: int = 2
) -> np.ndarray:
    """
    Draws bounding boxes on a copy of the original image.
    """
    overlay = original_image.copy()

    for box in boxes:
        cv2.rectangle(overlay, (box.x, box.y), (box.x + box.w, box.y + box.h), color, thickness)

    return overlay

def draw_centers(
    original_image: np.ndarray,
    boxes: List[BoundingBox],
    car_center: Tuple[int, int] = CAR_CENTER
) -> Tuple[np.ndarray, List[Tuple[Tuple[int, int], float]]]:
    """
    Marks the car center and each box center, joined by a line.
    Returns the annotated copy and (center, distance to car) for every box.
    """
    overlay = original_image.copy()
    cv2.circle(overlay, car_center, 2, RED, -1)

    centers = []
    for box in boxes:
        center = box.center
        cv2.circle(overlay, center, 2, RED, -1)
        cv2.line(overlay, center, car_center, RED, 2)
        centers.append((center, calculate_distance(car_center, center)))

    return overlay, centers
