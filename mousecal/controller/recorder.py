"""
recorder.py - Motion accumulators and the recording gate

Two policies:

- ToggleRecorder: starting a recording zeroes the sums, stopping freezes them.
- BaselineRecorder: the sums integrate from process start; a recording shows
  live minus the baseline taken at start, stopping freezes that lap.
"""

import math
from dataclasses import dataclass


@dataclass
class MotionAccumulator:
    x_motion: float = 0.0
    abs_motion: float = 0.0

    def add(self, dx: float, dy: float) -> bool:
        """Add one motion delta. Non-finite deltas are dropped and False is returned."""
        if not (math.isfinite(dx) and math.isfinite(dy)):
            return False
        self.x_motion += dx
        self.abs_motion += math.hypot(dx, dy)
        return True

    def zero(self):
        self.x_motion = 0.0
        self.abs_motion = 0.0

    def snapshot(self) -> "MotionAccumulator":
        return MotionAccumulator(self.x_motion, self.abs_motion)


class ToggleRecorder:
    policy = "toggle"

    def __init__(self, log=None):
        self.log = log
        self.recording = False
        self.acc = MotionAccumulator()

    @property
    def x_motion(self) -> float:
        return self.acc.x_motion

    @property
    def abs_motion(self) -> float:
        return self.acc.abs_motion

    def feed(self, dx: float, dy: float):
        if self.recording:
            self.acc.add(dx, dy)

    def toggle(self):
        if not self.recording:
            self.acc.zero()
        self.recording = not self.recording
        if self.log:
            self.log.info(f"[REC] {'started' if self.recording else 'stopped'}"
                          f" x={self.x_motion:.1f} abs={self.abs_motion:.1f}")

    def reset_x(self):
        self.acc.x_motion = 0.0

    def reset_abs(self):
        self.acc.abs_motion = 0.0


class BaselineRecorder:
    policy = "baseline"

    def __init__(self, log=None):
        self.log = log
        self.recording = False
        self.live = MotionAccumulator()
        self.base = MotionAccumulator()
        self.frozen = MotionAccumulator()

    @property
    def x_motion(self) -> float:
        if self.recording:
            return self.live.x_motion - self.base.x_motion
        return self.frozen.x_motion

    @property
    def abs_motion(self) -> float:
        if self.recording:
            return self.live.abs_motion - self.base.abs_motion
        return self.frozen.abs_motion

    def feed(self, dx: float, dy: float):
        self.live.add(dx, dy)

    def toggle(self):
        if self.recording:
            self.frozen = MotionAccumulator(self.x_motion, self.abs_motion)
            self.recording = False
        else:
            self.base = self.live.snapshot()
            self.recording = True
        if self.log:
            self.log.info(f"[REC] {'started' if self.recording else 'stopped'}"
                          f" x={self.x_motion:.1f} abs={self.abs_motion:.1f}")

    def reset_x(self):
        self.base.x_motion = self.live.x_motion
        self.frozen.x_motion = 0.0

    def reset_abs(self):
        self.base.abs_motion = self.live.abs_motion
        self.frozen.abs_motion = 0.0


RECORDERS = {
    ToggleRecorder.policy: ToggleRecorder,
    BaselineRecorder.policy: BaselineRecorder,
}


def make_recorder(policy: str, log=None):
    try:
        return RECORDERS[policy](log)
    except KeyError:
        raise ValueError(f"unknown recording policy {policy!r} (expected one of {', '.join(RECORDERS)})")
