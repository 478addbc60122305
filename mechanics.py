from __future__ import annotations

from typing import Optional

from config import TRACK_WIDTH
from geometry import DiskGeometry, normalize_angle


# Relative float slack on the one-tick alignment window
ANGLE_EPSILON = 1e-6


# ------------------------------
# Pure angle helpers
# ------------------------------
def arc_distance(a1: float, a2: float) -> float:
    """Shortest distance between two angles on the circle."""
    v = abs(a1 - a2)
    if v > 180.0:
        v = 360.0 - v
    return v


def is_aligned(angle: float, target: float, rotate_speed: float) -> bool:
    """True once ``angle`` sits strictly within one tick of rotation of ``target``.

    A target exactly one tick away is left for the next tick; the epsilon keeps
    accumulated float error from firing a tick early. It scales with the speed
    so the window never closes for very slow platters.
    """
    return arc_distance(angle, target) < rotate_speed * (1.0 - ANGLE_EPSILON)


def rotate_target(block_angle: float, half_width: float) -> float:
    """Leading edge of the sector: where rotation ends and transfer begins."""
    return normalize_angle(block_angle - half_width)


def transfer_target(block_angle: float, half_width: float) -> float:
    """Trailing edge of the sector: where transfer completes."""
    return normalize_angle(block_angle + half_width)


class ArmController:
    """Radial arm: one head, moves at a fixed speed between track positions."""

    def __init__(self, geometry: DiskGeometry, speed: float, track: int = 0) -> None:
        self.geometry = geometry
        self.base_speed = float(speed)
        self.speed = float(speed)
        self.track = int(track)
        self.x1 = geometry.seek_position(self.track)
        self.target: Optional[int] = None
        self.target_x1 = self.x1

    @property
    def x2(self) -> float:
        return self.x1 + TRACK_WIDTH

    @property
    def seeking(self) -> bool:
        return self.target is not None

    def plan_seek(self, track: int) -> bool:
        """Aim the arm at ``track``; returns True when no movement is needed."""
        if track == self.track:
            self.target = None
            return True
        self.target = int(track)
        self.target_x1 = self.geometry.seek_position(track)
        self.speed = self.base_speed if self.target_x1 >= self.x1 else -self.base_speed
        return False

    def tick(self) -> bool:
        """Move one tick; returns True on arrival (position snapped to target)."""
        if not self.seeking:
            return True
        self.x1 += self.speed
        if (self.speed > 0.0 and self.x1 >= self.target_x1) or (
            self.speed < 0.0 and self.x1 <= self.target_x1
        ):
            self.track = self.target
            self.x1 = self.target_x1
            self.target = None
            return True
        return False

    def seek_estimate(self, track: int) -> float:
        return abs(self.geometry.seek_position(track) - self.x1) / self.base_speed


class RotationController:
    """The single platter shared by every request."""

    def __init__(self, speed: float, angle: float = 0.0) -> None:
        self.speed = float(speed)
        self.angle = normalize_angle(float(angle))

    def tick(self) -> float:
        self.angle += self.speed
        while self.angle >= 360.0:
            self.angle -= 360.0
        return self.angle

    def angle_after(self, ticks: float) -> float:
        return (self.angle + ticks * self.speed) % 360.0

    def done_with_rotation(self, block_angle: float, half_width: float) -> bool:
        return is_aligned(self.angle, rotate_target(block_angle, half_width), self.speed)

    def done_with_transfer(self, block_angle: float, half_width: float) -> bool:
        return is_aligned(self.angle, transfer_target(block_angle, half_width), self.speed)
