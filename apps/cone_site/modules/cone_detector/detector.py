import cv2
import numpy as np
import time
from typing import Dict, List, Optional, Sequence
from .schemas import BoundingBox, ColorRange, DetectionResult, DetectorConfig
from .color import to_bgr, filter_image
from .geometry import passes_area_threshold, apply_blackout
from .overlay import create_overlay_image
from ...logging_setup import get_logger

logger = get_logger(__name__)

def to_binary_mask(frame: np.ndarray) -> np.ndarray:
    """
    Grayscale the frame and mark every non-black pixel as foreground.

    Args:
        frame: BGR(A) image, usually the output of the color filter

    Returns:
        Single-channel 0/255 mask
    """
    gray = cv2.cvtColor(to_bgr(frame), cv2.COLOR_BGR2GRAY)

    # Threshold at zero: the color filter already did the selecting
    _, binary = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY)

    return binary

def apply_opening(mask: np.ndarray, kernel_size: int = 5) -> np.ndarray:
    """
    Erode then dilate with an elliptical kernel to drop speckle noise
    and smooth region outlines.
    """
    if kernel_size < 1 or kernel_size % 2 == 0:
        raise ValueError("Kernel size must be a positive odd integer")
    kernel = cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (kernel_size, kernel_size))
    eroded = cv2.erode(mask, kernel)
    return cv2.dilate(eroded, kernel)

def find_regions(mask: np.ndarray) -> Sequence[np.ndarray]:
    # Hierarchy is discarded: holes and solid regions are treated alike
    contours, _ = cv2.findContours(mask, cv2.RETR_TREE, cv2.CHAIN_APPROX_SIMPLE)
    return contours

def detect_cones(
    filtered: np.ndarray,
    area_threshold: float = 5.0,
    kernel_size: int = 5,
    annotate: bool = False,
    color_name: Optional[str] = None
) -> DetectionResult:
    """
    Find the bounding boxes of the salient regions in a color-filtered frame.

    Args:
        filtered: Color-filtered BGR(A) frame (non-matching pixels are black)
        area_threshold: Regions whose contour area does not exceed this are dropped
        kernel_size: Diameter of the elliptical opening kernel
        annotate: Also return a copy of the frame with the boxes drawn on it
        color_name: Label carried through to the result

    Returns:
        DetectionResult with one box per surviving region, in contour order
    """
    if area_threshold < 0:
        raise ValueError("Area threshold must be non-negative")

    start_time = time.time()

    binary = to_binary_mask(filtered)
    morphed = apply_opening(binary, kernel_size)
    regions = find_regions(morphed)

    boxes = []
    for region in regions:
        area = cv2.contourArea(region)
        if not passes_area_threshold(area, area_threshold):
            continue

        x, y, w, h = cv2.boundingRect(region)
        boxes.append(BoundingBox(x=x, y=y, w=w, h=h))

    annotated = None
    if annotate:
        annotated = create_overlay_image(to_bgr(filtered), boxes)

    processing_time = (time.time() - start_time) * 1000

    logger.debug(
        "cones_detected",
        color=color_name,
        regions=len(regions),
        boxes=len(boxes),
        area_threshold=area_threshold,
    )

    return DetectionResult(
        bounding_boxes=boxes,
        color_name=color_name,
        area_threshold=area_threshold,
        regions_found=len(regions),
        processing_time_ms=processing_time,
        annotated=annotated
    )

def detect_colored_cones(
    frame: np.ndarray,
    color_range: ColorRange,
    config: DetectorConfig,
    annotate: bool = False
) -> DetectionResult:
    filtered = filter_image(frame, color_range)
    return detect_cones(
        filtered,
        area_threshold=config.area_threshold,
        kernel_size=config.kernel_size,
        annotate=annotate,
        color_name=color_range.name
    )

def detect_all_cones(frame: np.ndarray, config: DetectorConfig) -> Dict[str, DetectionResult]:
    """
    Black out the configured regions, then run the detector once per color range.
    Results are keyed by color range name.
    """
    bgr = to_bgr(frame)
    if config.blackout_regions:
        bgr = apply_blackout(bgr, config.blackout_regions)

    return {
        color_range.name: detect_colored_cones(bgr, color_range, config)
        for color_range in config.color_ranges
    }

def detect_cones_in_image(image_path: str, config: DetectorConfig) -> Dict[str, DetectionResult]:
    bgr_image = cv2.imread(image_path)
    if bgr_image is None:
        raise ValueError("Could not load image")

    return detect_all_cones(bgr_image, config)

def all_boxes(results: Dict[str, DetectionResult]) -> List[BoundingBox]:
    boxes = []
    for result in results.values():
        boxes.extend(result.bounding_boxes)
    return boxes
