"""
calculator.py - Calibration metrics from accumulated motion and measured inputs

Missing values are NaN. Each metric is computed on its own, so a missing input
only blanks the metrics that actually depend on it. Zero divisors and
non-finite intermediate results come out as NaN as well; nothing here raises.
"""

import math
from dataclasses import dataclass, fields

CM_PER_INCH = 2.54
MISSING = math.nan


def is_missing(value) -> bool:
    return value is None or not math.isfinite(value)


def as_input(value) -> float:
    """Normalize a user value: None, non-numbers and non-finite numbers become NaN."""
    if value is None or isinstance(value, bool):
        return MISSING
    try:
        value = float(value)
    except (TypeError, ValueError):
        return MISSING
    return value if math.isfinite(value) else MISSING


def as_measurement(value) -> float:
    """A user-entered quantity: like as_input, with negatives clamped to 0."""
    value = as_input(value)
    return value if is_missing(value) else max(0.0, value)


def _div(a: float, b: float) -> float:
    if is_missing(a) or is_missing(b) or b == 0:
        return MISSING
    q = a / b
    return q if math.isfinite(q) else MISSING


def _mul(a: float, b: float) -> float:
    q = a * b
    return q if math.isfinite(q) else MISSING


@dataclass
class CalibrationInputs:
    configured_dpi: float = MISSING
    current_sensitivity: float = MISSING
    revolutions: float = MISSING
    target_rpi: float = MISSING
    distance_moved: float = MISSING
    distance_is_inch: bool = False

    def __post_init__(self):
        self.normalize()

    def normalize(self):
        for f in fields(self):
            if f.name != "distance_is_inch":
                setattr(self, f.name, as_measurement(getattr(self, f.name)))
        self.distance_is_inch = bool(self.distance_is_inch)

    def set(self, name: str, value):
        if name == "distance_is_inch":
            self.distance_is_inch = bool(value)
            return
        if name not in {f.name for f in fields(self)}:
            raise AttributeError(name)
        setattr(self, name, as_measurement(value))

    @classmethod
    def from_ini(cls, cfg):
        return cls(
            configured_dpi=cfg.get_float("calibration", "dpi"),
            current_sensitivity=cfg.get_float("calibration", "sensitivity"),
            revolutions=cfg.get_float("calibration", "revolutions"),
            target_rpi=cfg.get_float("calibration", "target_rpi"),
            distance_moved=cfg.get_float("calibration", "distance"),
            distance_is_inch=cfg.get_choice("calibration", "distance_unit", ("cm", "inch"), "cm") == "inch",
        )


@dataclass
class CalibrationOutputs:
    horizontal_motion: float = MISSING
    absolute_motion: float = MISSING
    physical_distance_cm: float = MISSING
    inch_equivalent: float = MISSING
    current_rpi: float = MISSING
    revolutions_per_dot: float = MISSING
    revolutions_per_dot_at_unit_sensitivity: float = MISSING
    sensitivity_adjustment_ratio: float = MISSING
    adjusted_sensitivity: float = MISSING
    computed_dpi: float = MISSING

    def rows(self):
        """(label, value) pairs in display order."""
        return [(OUTPUT_LABELS[f.name], getattr(self, f.name))
                for f in fields(self) if f.name in OUTPUT_LABELS]


OUTPUT_LABELS = {
    "horizontal_motion": "horizontal motion",
    "absolute_motion": "absolute motion",
    "physical_distance_cm": "physical distance (cm)",
    "inch_equivalent": "inch equivalent",
    "current_rpi": "revolutions per inch",
    "revolutions_per_dot": "revolutions per dot",
    "revolutions_per_dot_at_unit_sensitivity": "revolutions per dot at sensitivity=1",
    "adjusted_sensitivity": "adjusted sensitivity",
    "sensitivity_adjustment_ratio": "sensitivity adjustment",
    "computed_dpi": "computed dpi",
}


def physical_distance_cm(distance_moved: float, distance_is_inch: bool) -> float:
    return _mul(as_measurement(distance_moved), CM_PER_INCH if distance_is_inch else 1.0)


def compute(x_motion: float, abs_motion: float, inputs: CalibrationInputs) -> CalibrationOutputs:
    x_motion = as_input(x_motion)
    abs_motion = as_input(abs_motion)
    revs = inputs.revolutions
    sens = inputs.current_sensitivity

    distance_cm = physical_distance_cm(inputs.distance_moved, inputs.distance_is_inch)
    inch = _div(x_motion, inputs.configured_dpi)
    rpi = abs(_div(revs, inch))
    rpd = abs(_div(revs, x_motion))
    ratio = _div(inputs.target_rpi, rpi)

    return CalibrationOutputs(
        horizontal_motion=x_motion,
        absolute_motion=abs_motion,
        physical_distance_cm=distance_cm,
        inch_equivalent=inch,
        current_rpi=rpi,
        revolutions_per_dot=rpd,
        revolutions_per_dot_at_unit_sensitivity=_div(rpd, sens),
        sensitivity_adjustment_ratio=ratio,
        adjusted_sensitivity=_mul(sens, ratio),
        computed_dpi=_div(abs_motion, _div(distance_cm, CM_PER_INCH)),
    )
