from dataclasses import dataclass
from ..logging_setup import get_logger

ERROR_GROUND_ZERO = 0.05  # absolute deviation allowed when the ground truth is zero
ERROR_MULTI = 0.3  # relative deviation allowed otherwise

logger = get_logger(__name__)

def allowed_deviation(ground_steering: float) -> float:
    if ground_steering == 0:
        return ERROR_GROUND_ZERO
    return abs(ground_steering) * ERROR_MULTI

def within_tolerance(ground_steering: float, calculated_steering: float) -> bool:
    return abs(ground_steering - calculated_steering) < allowed_deviation(ground_steering)

@dataclass(frozen=True)
class FrameVerdict:
    ground_steering: float
    calculated_steering: float
    lower_bound: float
    upper_bound: float
    passed: bool

class FrameReport:
    """
    Running pass/fail tally of calculated steering against the ground truth.
    """

    def __init__(self):
        self.total_frames = 0
        self.correct_frames = 0

    @property
    def accuracy(self) -> float:
        if self.total_frames == 0:
            return 0.0
        return 100.0 * self.correct_frames / self.total_frames

    def record(self, ground_steering: float, calculated_steering: float) -> FrameVerdict:
        deviation = allowed_deviation(ground_steering)
        passed = within_tolerance(ground_steering, calculated_steering)

        self.total_frames += 1
        if passed:
            self.correct_frames += 1

        verdict = FrameVerdict(
            ground_steering=ground_steering,
            calculated_steering=calculated_steering,
            lower_bound=ground_steering - deviation,
            upper_bound=ground_steering + deviation,
            passed=passed,
        )

        logger.info(
            "frame_report",
            ground=ground_steering,
            allowed=[verdict.lower_bound, verdict.upper_bound],
            calculated=calculated_steering,
            result="SUCCESS" if passed else "FAILURE",
            accuracy=round(self.accuracy, 2),
        )
        return verdict
