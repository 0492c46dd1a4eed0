import os
import cv2
import numpy as np
import requests

# Configuration
BASE_URL = os.environ.get("TEST_BASE_URL", "http://127.0.0.1:8000/cone_site")

YELLOW_BGR = (0, 255, 255)
BLUE_BGR = (80, 40, 30)
RED_BGR = (0, 0, 255)

def server_available():
    """Checks whether a py4web server is serving the app."""
    try:
        requests.get(f"{BASE_URL}/index", timeout=2)
    except requests.RequestException:
        return False
    return True

def make_frame(width=640, height=480, rects=(), channels=3):
    """
    Black frame with filled rectangles.
    rects: iterable of (x, y, w, h, bgr) covering exactly w x h pixels.
    """
    img = np.zeros((height, width, 3), dtype=np.uint8)
    for x, y, w, h, color in rects:
        cv2.rectangle(img, (x, y), (x + w - 1, y + h - 1), color, -1)
    if channels == 4:
        img = cv2.cvtColor(img, cv2.COLOR_BGR2BGRA)
    return img

def create_test_image(filename, width=640, height=480, color=YELLOW_BGR):
    """Creates a test frame with a single cone below the horizon."""
    cv2.imwrite(filename, make_frame(width, height, [(100, 250, 30, 40, color)]))
    return filename

def remove_test_image(filename):
    """Removes the test image if it exists."""
    if os.path.exists(filename):
        os.remove(filename)

def create_dummy_text_file(filename, content="dummy content"):
    """Creates a dummy text file."""
    with open(filename, 'w') as f:
        f.write(content)
    return filename

def assert_box_close(testcase, box, expected, tolerance=2):
    x, y, w, h = expected
    testcase.assertLessEqual(abs(box.x - x), tolerance)
    testcase.assertLessEqual(abs(box.y - y), tolerance)
    testcase.assertLessEqual(abs((box.x + box.w) - (x + w)), tolerance)
    testcase.assertLessEqual(abs((box.y + box.h) - (y + h)), tolerance)
