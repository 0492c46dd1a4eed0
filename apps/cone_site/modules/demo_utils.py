import random
import cv2
import numpy as np
from .cone_detector.schemas import BoundingBox
from .cone_detector.geometry import boxes_overlap

# BGR fills that land well inside the default yellow and blue HSV ranges
CONE_COLORS = {
    'yellow': (0, 255, 255),
    'blue': (80, 40, 30),
}

def hex_to_bgr(color_hex):
    return tuple(int(color_hex.lstrip('#')[i:i+2], 16) for i in (4, 2, 0))

def create_sample_frame(width, height, num_cones, min_size=10, max_size=40, bg_color_hex='#000000', colors=('yellow', 'blue'), seed=None):
    """
    Generate a synthetic track frame with non-overlapping rectangular cones.
    Cones alternate between the requested colors. Returns the BGR image and
    a list of the drawn cones as dicts (x, y, w, h, color).
    """
    for color in colors:
        if color not in CONE_COLORS:
            raise ValueError(f"Unknown cone color: {color}")
    if min_size < 1 or max_size < min_size:
        raise ValueError("Cone sizes must satisfy 1 <= min_size <= max_size")

    rng = random.Random(seed)
    image = np.full((height, width, 3), hex_to_bgr(bg_color_hex), dtype=np.uint8)

    cones = []
    placed = []
    attempts = 0
    max_attempts = num_cones * 20

    while len(cones) < num_cones and attempts < max_attempts:
        attempts += 1

        w = rng.randint(min_size, max_size)
        h = rng.randint(min_size, max_size)

        # Random position (ensure it fits)
        if w >= width - 4 or h >= height - 4:
            continue
        x = rng.randint(2, width - w - 2)
        y = rng.randint(2, height - h - 2)

        box = BoundingBox(x=x, y=y, w=w, h=h)
        # Keep enough gap that the opening never merges two cones
        if any(boxes_overlap(box, other, margin=6) for other in placed):
            continue

        color = colors[len(cones) % len(colors)]
        # Filled rectangle covering exactly w x h pixels
        cv2.rectangle(image, (x, y), (x + w - 1, y + h - 1), CONE_COLORS[color], -1)

        placed.append(box)
        cones.append({'x': x, 'y': y, 'w': w, 'h': h, 'color': color})

    return image, cones
