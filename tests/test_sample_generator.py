import unittest
import requests
import threading
import sys
import os

# Add apps to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from apps.cone_site.modules.demo_utils import create_sample_frame, hex_to_bgr
from apps.cone_site.modules.cone_detector.schemas import DetectorConfig
from apps.cone_site.modules.cone_detector.detector import detect_all_cones
from tests.utils import BASE_URL, server_available

class TestCreateSampleFrame(unittest.TestCase):

    def test_shape_and_background(self):
        image, cones = create_sample_frame(320, 240, 0, bg_color_hex='#102030')
        self.assertEqual(image.shape, (240, 320, 3))
        self.assertEqual(cones, [])
        self.assertEqual(tuple(image[0, 0]), (0x30, 0x20, 0x10))
        self.assertEqual(hex_to_bgr('#ff0000'), (0, 0, 255))

    def test_same_seed_same_frame(self):
        first, first_cones = create_sample_frame(640, 480, 6, seed=7)
        second, second_cones = create_sample_frame(640, 480, 6, seed=7)
        self.assertEqual(first_cones, second_cones)
        self.assertTrue((first == second).all())

    def test_detector_recovers_generated_cones(self):
        image, cones = create_sample_frame(640, 480, 8, seed=3)
        self.assertGreater(len(cones), 0)

        results = detect_all_cones(image, DetectorConfig())
        for color in ('yellow', 'blue'):
            expected = sorted((c['x'], c['y'], c['w'], c['h']) for c in cones if c['color'] == color)
            found = sorted((b.x, b.y, b.w, b.h) for b in results[color].bounding_boxes)
            self.assertEqual(len(found), len(expected))
            for (fx, fy, fw, fh), (ex, ey, ew, eh) in zip(found, expected):
                self.assertLessEqual(abs(fx - ex), 2)
                self.assertLessEqual(abs(fy - ey), 2)
                self.assertLessEqual(abs(fw - ew), 4)
                self.assertLessEqual(abs(fh - eh), 4)

    def test_single_color(self):
        _, cones = create_sample_frame(640, 480, 3, colors=('blue',), seed=1)
        self.assertTrue(all(c['color'] == 'blue' for c in cones))

    def test_invalid_arguments(self):
        with self.assertRaises(ValueError):
            create_sample_frame(640, 480, 3, colors=('red',))
        with self.assertRaises(ValueError):
            create_sample_frame(640, 480, 3, min_size=30, max_size=10)

@unittest.skipUnless(server_available(), "cone_site server is not running")
class TestSampleGeneratorEndpoint(unittest.TestCase):
    def setUp(self):
        self.session = requests.Session()
        self.url = f"{BASE_URL}/sample_generator"

    def test_get_page(self):
        """Test page load."""
        response = self.session.get(self.url)
        self.assertEqual(response.status_code, 200)
        self.assertIn('history', response.json())

    def test_generate_basic(self):
        """Test generating with default parameters."""
        response = self.session.post(self.url, data={})
        self.assertEqual(response.status_code, 200)
        result = response.json()
        self.assertIsNone(result['error'])
        self.assertTrue(result['image_filename'].startswith('sample_'))

    def test_generate_invalid_params(self):
        """Test with invalid numerical parameters."""
        response = self.session.post(self.url, data={'img_width': 'invalid', 'num_cones': 5})
        self.assertEqual(response.status_code, 200)
        self.assertIn("invalid literal for int", response.json()['error'])

    def test_concurrent_generation(self):
        """Test concurrent generation of samples."""
        results = []

        def generate_sample(idx):
            session = requests.Session()
            try:
                response = session.post(self.url, data={'img_width': 200, 'img_height': 200, 'num_cones': 3})
                if response.status_code == 200 and response.json().get('image_filename'):
                    results.append(idx)
            except requests.RequestException:
                pass

        threads = [threading.Thread(target=generate_sample, args=(i,)) for i in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(len(results), 5)

if __name__ == '__main__':
    unittest.main()
