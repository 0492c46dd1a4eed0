import numpy as np
import cv2
from .schemas import ColorRange

def to_bgr(frame: np.ndarray) -> np.ndarray:
    """
    Validate a frame and return it as a 3-channel BGR image.
    Frames read from the camera's shared memory arrive as BGRA; the alpha
    channel carries nothing useful for color selection and is dropped.
    A 3-channel frame is returned as is (not copied).
    """
    if frame is None:
        raise ValueError("Frame is required")
    if not isinstance(frame, np.ndarray):
        raise ValueError("Frame must be a numpy array")
    if frame.ndim != 3 or frame.shape[2] not in (3, 4):
        raise ValueError(f"Frame must have 3 or 4 channels, got shape {frame.shape}")
    if frame.shape[0] == 0 or frame.shape[1] == 0:
        raise ValueError("Frame dimensions must be non-zero")
    if frame.dtype != np.uint8:
        raise ValueError(f"Frame must be 8-bit, got {frame.dtype}")

    if frame.shape[2] == 4:
        return cv2.cvtColor(frame, cv2.COLOR_BGRA2BGR)
    return frame

def bgr_to_hsv(frame: np.ndarray) -> np.ndarray:
    """
    Convert a BGR(A) frame to HSV.
    OpenCV scales hue to 0..179 so it fits in 8 bits; S and V stay 0..255.
    """
    return cv2.cvtColor(to_bgr(frame), cv2.COLOR_BGR2HSV)

def color_mask(frame: np.ndarray, color_range: ColorRange) -> np.ndarray:
    """
    Single-channel 0/255 mask of the pixels whose HSV value lies inside the
    inclusive range on every channel.
    """
    hsv = bgr_to_hsv(frame)
    lower = np.array(color_range.lower, dtype=np.uint8)
    upper = np.array(color_range.upper, dtype=np.uint8)
    return cv2.inRange(hsv, lower, upper)

def filter_image(frame: np.ndarray, color_range: ColorRange) -> np.ndarray:
    """
    Keep the pixels inside the color range and black out everything else.
    Always returns a new image; the input frame is left untouched.
    """
    bgr = to_bgr(frame)
    mask = color_mask(bgr, color_range)
    return cv2.bitwise_and(bgr, bgr, mask=mask)
