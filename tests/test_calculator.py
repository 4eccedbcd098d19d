import math

import pytest

from mousecal.calibration.calculator import (
    CalibrationInputs,
    as_input,
    compute,
    is_missing,
    physical_distance_cm,
)
from mousecal.file.inireader import IniReader


def full_inputs(**kw):
    values = dict(
        configured_dpi=1000,
        current_sensitivity=2.0,
        revolutions=2,
        target_rpi=0.8,
        distance_moved=12.7,
        distance_is_inch=False,
    )
    values.update(kw)
    return CalibrationInputs(**values)


def test_end_to_end_numbers():
    out = compute(5000.0, 6000.0, full_inputs())
    assert out.inch_equivalent == pytest.approx(5.0)
    assert out.current_rpi == pytest.approx(0.4)
    assert out.revolutions_per_dot == pytest.approx(2 / 5000)
    assert out.revolutions_per_dot_at_unit_sensitivity == pytest.approx(2 / 5000 / 2.0)
    assert out.sensitivity_adjustment_ratio == pytest.approx(2.0)
    assert out.adjusted_sensitivity == pytest.approx(4.0)
    # 12.7 cm == 5 inch
    assert out.computed_dpi == pytest.approx(1200.0)


def test_unit_conversion():
    assert physical_distance_cm(10, True) == pytest.approx(25.4)
    assert physical_distance_cm(10, False) == pytest.approx(10.0)
    out = compute(0.0, 5080.0, full_inputs(distance_moved=2, distance_is_inch=True))
    assert out.physical_distance_cm == pytest.approx(5.08)
    assert out.computed_dpi == pytest.approx(2540.0)


def test_missing_dpi_only_blanks_dependent_metrics():
    out = compute(5000.0, 6000.0, full_inputs(configured_dpi=math.nan))
    assert is_missing(out.inch_equivalent)
    assert is_missing(out.current_rpi)
    assert is_missing(out.sensitivity_adjustment_ratio)
    assert is_missing(out.adjusted_sensitivity)
    assert out.computed_dpi == pytest.approx(1200.0)
    assert out.revolutions_per_dot == pytest.approx(2 / 5000)
    assert out.physical_distance_cm == pytest.approx(12.7)


def test_zero_motion_and_zero_inputs_do_not_raise():
    out = compute(0.0, 0.0, full_inputs(distance_moved=0, current_sensitivity=0))
    assert out.inch_equivalent == 0.0
    assert is_missing(out.current_rpi)
    assert is_missing(out.revolutions_per_dot)
    assert is_missing(out.revolutions_per_dot_at_unit_sensitivity)
    assert is_missing(out.computed_dpi)
    assert out.horizontal_motion == 0.0


def test_negative_motion_gives_positive_rates():
    out = compute(-5000.0, 5000.0, full_inputs())
    assert out.inch_equivalent == pytest.approx(-5.0)
    assert out.current_rpi == pytest.approx(0.4)
    assert out.revolutions_per_dot > 0


def test_all_missing_inputs():
    out = compute(100.0, 100.0, CalibrationInputs())
    for label, value in out.rows():
        if label in ("horizontal motion", "absolute motion"):
            assert value == 100.0
        else:
            assert is_missing(value), label


def test_inputs_normalize_garbage_to_missing():
    inputs = CalibrationInputs(configured_dpi=None, revolutions=math.inf, target_rpi="abc")
    assert is_missing(inputs.configured_dpi)
    assert is_missing(inputs.revolutions)
    assert is_missing(inputs.target_rpi)
    inputs.set("configured_dpi", "800")
    assert inputs.configured_dpi == 800.0
    inputs.set("configured_dpi", "")
    assert is_missing(inputs.configured_dpi)
    assert is_missing(as_input(True))
    with pytest.raises(AttributeError):
        inputs.set("bogus", 1)


def test_negative_inputs_clamp_to_zero():
    inputs = CalibrationInputs(configured_dpi=-1000, revolutions=2, distance_moved=-12.7, target_rpi=-1)
    assert inputs.configured_dpi == 0.0
    assert inputs.distance_moved == 0.0
    inputs.set("current_sensitivity", "-2")
    assert inputs.current_sensitivity == 0.0

    out = compute(5000.0, 6000.0, inputs)
    assert is_missing(out.inch_equivalent)
    assert is_missing(out.computed_dpi)
    assert out.physical_distance_cm == 0.0
    assert physical_distance_cm(-10, True) == 0.0
    for _, value in out.rows():
        assert is_missing(value) or value >= 0


def test_inputs_from_ini(tmp_path):
    path = tmp_path / "cal.ini"
    path.write_text(
        "[calibration]\n"
        "dpi = 800 ; sensor\n"
        "sensitivity = 1.5\n"
        "revolutions =\n"
        "target_rpi = nope\n"
        "distance = 10\n"
        "distance_unit = inch\n",
        encoding="utf-8",
    )
    inputs = CalibrationInputs.from_ini(IniReader(str(path)))
    assert inputs.configured_dpi == 800.0
    assert inputs.current_sensitivity == 1.5
    assert is_missing(inputs.revolutions)
    assert is_missing(inputs.target_rpi)
    assert inputs.distance_is_inch is True
