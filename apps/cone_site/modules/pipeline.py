from dataclasses import dataclass
from typing import Optional
import numpy as np
from .cone_detector.schemas import DetectionResult, DetectorConfig
from .cone_detector.detector import detect_all_cones
from .cone_detector.overlay import create_overlay_image
from .cone_detector.color import to_bgr
from .steering import SteeringInputs, SteeringStrategy
from .signals import SignalBoard
from .frame_report import FrameReport, FrameVerdict

@dataclass
class ProcessedFrame:
    yellow: DetectionResult
    blue: DetectionResult
    steering: float
    verdict: FrameVerdict
    overlay: np.ndarray

class FrameProcessor:
    """
    Runs one frame through detection, steering estimation and reporting.
    The caller owns the frame; it is copied before anything is drawn on it.
    """

    def __init__(
        self,
        config: DetectorConfig,
        strategy: SteeringStrategy,
        signals: Optional[SignalBoard] = None,
        report: Optional[FrameReport] = None
    ):
        self.config = config
        self.strategy = strategy
        self.signals = signals or SignalBoard()
        self.report = report or FrameReport()

    def process(self, frame: np.ndarray) -> ProcessedFrame:
        base_image = to_bgr(frame).copy()

        results = detect_all_cones(base_image, self.config)
        yellow = results[self.config.yellow_range.name]
        blue = results[self.config.blue_range.name]

        snapshot = self.signals.snapshot()
        steering = self.strategy.calculate(SteeringInputs(
            left_voltage=snapshot.left_voltage,
            right_voltage=snapshot.right_voltage,
            angular_velocity_z=snapshot.angular_velocity_z,
            yellow_cones=yellow.bounding_boxes,
            blue_cones=blue.bounding_boxes,
        ))
        verdict = self.report.record(snapshot.ground_steering, steering)

        overlay = create_overlay_image(base_image, yellow.bounding_boxes + blue.bounding_boxes)

        return ProcessedFrame(
            yellow=yellow,
            blue=blue,
            steering=steering,
            verdict=verdict,
            overlay=overlay
        )
