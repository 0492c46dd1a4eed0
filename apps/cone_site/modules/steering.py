"""
Steering estimators.

Several incompatible formulas exist for turning sensor readings into a
steering value; none of them is validated against the ground truth, so each
one is a separate strategy and the choice is left to configuration.
"""
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Type
from .cone_detector.schemas import BoundingBox

@dataclass(frozen=True)
class SteeringInputs:
    left_voltage: float = 0.0
    right_voltage: float = 0.0
    angular_velocity_z: float = 0.0
    yellow_cones: List[BoundingBox] = field(default_factory=list)
    blue_cones: List[BoundingBox] = field(default_factory=list)

class SteeringStrategy(ABC):
    name = "base"

    @abstractmethod
    def calculate(self, inputs: SteeringInputs) -> float:
        raise NotImplementedError

class ZeroSteering(SteeringStrategy):
    """Always steers straight ahead."""
    name = "zero"

    def calculate(self, inputs: SteeringInputs) -> float:
        return 0.0

class VoltageSigmoidSteering(SteeringStrategy):
    """
    Squashes the difference between the reciprocal left and right IR sensor
    voltages through a logistic curve into [-0.3, 0.3].
    """
    name = "voltage"

    def __init__(self, squish_factor: float = 0.002, amplitude: float = 0.3):
        self.squish_factor = squish_factor
        self.amplitude = amplitude

    def calculate(self, inputs: SteeringInputs) -> float:
        if inputs.left_voltage == 0 or inputs.right_voltage == 0:
            raise ValueError("Sensor voltages must be non-zero")

        leftness = 1.0 / inputs.left_voltage
        rightness = 1.0 / inputs.right_voltage
        metric = leftness - rightness
        return 2 * self.amplitude / (1 + math.exp(-self.squish_factor * metric)) - self.amplitude

class AngularVelocitySteering(SteeringStrategy):
    """
    Piecewise-linear map from yaw rate (deg/s) to steering.
    Turns right saturate at -78 deg/s; small left turns are treated as 1 deg/s.
    """
    name = "angular_velocity"

    MIN_RATE = -78.0

    def calculate(self, inputs: SteeringInputs) -> float:
        rate = inputs.angular_velocity_z

        if rate <= 0:
            rate = max(rate, self.MIN_RATE)
            return (rate - self.MIN_RATE) / -self.MIN_RATE * 0.3 - 0.3

        if rate < 2:
            rate = 1.0
        return (rate - 1) / 100 * 0.3

STRATEGIES: Dict[str, Type[SteeringStrategy]] = {
    ZeroSteering.name: ZeroSteering,
    VoltageSigmoidSteering.name: VoltageSigmoidSteering,
    AngularVelocitySteering.name: AngularVelocitySteering,
}

def get_strategy(name: str) -> SteeringStrategy:
    try:
        return STRATEGIES[name]()
    except KeyError:
        raise ValueError(f"Unknown steering strategy: {name}") from None
