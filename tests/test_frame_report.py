import unittest
import threading
import sys
import os

# Add apps to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from apps.cone_site.modules.frame_report import allowed_deviation, within_tolerance, FrameReport
from apps.cone_site.modules.signals import SignalBoard, SignalSnapshot

class TestTolerance(unittest.TestCase):

    def test_allowed_deviation(self):
        self.assertAlmostEqual(allowed_deviation(0.0), 0.05)
        self.assertAlmostEqual(allowed_deviation(0.2), 0.06)
        self.assertAlmostEqual(allowed_deviation(-0.2), 0.06)

    def test_within_tolerance(self):
        self.assertTrue(within_tolerance(0.0, 0.04))
        self.assertTrue(within_tolerance(0.0, -0.04))
        self.assertFalse(within_tolerance(0.0, 0.06))
        self.assertTrue(within_tolerance(0.1, 0.12))
        self.assertFalse(within_tolerance(0.1, 0.14))
        self.assertTrue(within_tolerance(-0.1, -0.08))

class TestFrameReport(unittest.TestCase):

    def test_empty_report(self):
        report = FrameReport()
        self.assertEqual(report.total_frames, 0)
        self.assertEqual(report.accuracy, 0.0)

    def test_record_tallies(self):
        report = FrameReport()
        verdict = report.record(0.0, 0.0)
        self.assertTrue(verdict.passed)
        self.assertAlmostEqual(verdict.lower_bound, -0.05)
        self.assertAlmostEqual(verdict.upper_bound, 0.05)

        self.assertFalse(report.record(0.2, -0.2).passed)
        self.assertEqual(report.total_frames, 2)
        self.assertEqual(report.correct_frames, 1)
        self.assertAlmostEqual(report.accuracy, 50.0)

class TestSignalBoard(unittest.TestCase):

    def test_defaults(self):
        self.assertEqual(SignalBoard().snapshot(), SignalSnapshot())

    def test_voltage_routing_by_sender(self):
        signals = SignalBoard()
        signals.on_voltage_reading(1, 0.11)
        signals.on_voltage_reading(3, 0.33)
        signals.on_voltage_reading(2, 9.99)
        snapshot = signals.snapshot()
        self.assertEqual(snapshot.left_voltage, 0.11)
        self.assertEqual(snapshot.right_voltage, 0.33)

    def test_last_write_wins(self):
        signals = SignalBoard()
        signals.on_ground_steering(0.1)
        signals.on_ground_steering(-0.2)
        signals.on_angular_velocity(12.5)
        snapshot = signals.snapshot()
        self.assertEqual(snapshot.ground_steering, -0.2)
        self.assertEqual(snapshot.angular_velocity_z, 12.5)

    def test_concurrent_writers(self):
        signals = SignalBoard()
        values = [float(i) for i in range(50)]

        threads = [threading.Thread(target=signals.on_ground_steering, args=(v,)) for v in values]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertIn(signals.snapshot().ground_steering, values)

if __name__ == '__main__':
    unittest.main()
