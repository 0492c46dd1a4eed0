"""
Latest sensor values delivered by asynchronous message callbacks.

Each field has its own lock; writers replace the value (last write wins) and
readers see the most recently completed write.
"""
import threading
from dataclasses import dataclass

LEFT_SENDER_STAMP = 1
RIGHT_SENDER_STAMP = 3

@dataclass(frozen=True)
class SignalSnapshot:
    ground_steering: float = 0.0
    left_voltage: float = 0.0
    right_voltage: float = 0.0
    angular_velocity_z: float = 0.0

class _Latest:
    def __init__(self, value: float = 0.0):
        self._lock = threading.Lock()
        self._value = value

    def set(self, value: float) -> None:
        with self._lock:
            self._value = value

    def get(self) -> float:
        with self._lock:
            return self._value

class SignalBoard:
    def __init__(self):
        self._ground_steering = _Latest()
        self._left_voltage = _Latest()
        self._right_voltage = _Latest()
        self._angular_velocity_z = _Latest()

    def on_ground_steering(self, value: float) -> None:
        self._ground_steering.set(value)

    def on_voltage_reading(self, sender_stamp: int, voltage: float) -> None:
        # Only the left and right IR sensors are of interest
        if sender_stamp == LEFT_SENDER_STAMP:
            self._left_voltage.set(voltage)
        elif sender_stamp == RIGHT_SENDER_STAMP:
            self._right_voltage.set(voltage)

    def on_angular_velocity(self, angular_velocity_z: float) -> None:
        self._angular_velocity_z.set(angular_velocity_z)

    def snapshot(self) -> SignalSnapshot:
        return SignalSnapshot(
            ground_steering=self._ground_steering.get(),
            left_voltage=self._left_voltage.get(),
            right_voltage=self._right_voltage.get(),
            angular_velocity_z=self._angular_velocity_z.get(),
        )
