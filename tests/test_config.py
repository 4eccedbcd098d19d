import logging
import math

import pytest
from colorama import Fore

from fakes import MOUSE, OTHER_MOUSE, ScriptedSource, motion

import main
from main import build_calibrator, run_main, select_config_file
from mousecal.controller.bindings import BindState
from mousecal.controller.recorder import BaselineRecorder, ToggleRecorder
from mousecal.file.inireader import IniReader
from mousecal.logger.logger import ColorFormatter, setup_logger


class PointerSource(ScriptedSource):
    def __init__(self, *batches, pointers=(MOUSE,)):
        super().__init__(*batches)
        self.pointers = list(pointers)
        self.closed = False

    def pointer_devices(self):
        return self.pointers

    def close(self):
        self.closed = True


def write_ini(tmp_path, text):
    path = tmp_path / "mousecal.ini"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_ini_reader_typed_getters(tmp_path):
    cfg = IniReader(write_ini(tmp_path, (
        "[display]\n"
        "fps = 60 # frames\n"
        "width = wide\n"
        "[recording]\n"
        "policy = Baseline\n"
    )))
    assert cfg.get_int("display", "fps", 0) == 60
    assert cfg.get_int("display", "width", 760) == 760
    assert cfg.get_int("display", "height", 560) == 560
    assert math.isnan(cfg.get_float("display", "missing"))
    assert cfg.get_choice("recording", "policy", ("toggle", "baseline"), "toggle") == "baseline"
    assert cfg.get_optional_int("display", "width") is None


def test_build_calibrator_from_config(tmp_path, log):
    cfg = IniReader(write_ini(tmp_path, (
        "[calibration]\n"
        "dpi = 800\n"
        "[recording]\n"
        "policy = baseline\n"
        "[binds]\n"
        "toggle_recording = 57\n"
    )))
    cal = build_calibrator(log, cfg, PointerSource())
    assert isinstance(cal.recorder, BaselineRecorder)
    assert cal.inputs.configured_dpi == 800.0
    assert cal.binds["toggle_recording"].state is BindState.BOUND
    assert cal.registry.devices() == [MOUSE]
    assert cal.registry.active() is None


def test_build_calibrator_defaults(log):
    cal = build_calibrator(log, IniReader(), PointerSource())
    assert isinstance(cal.recorder, ToggleRecorder)
    assert math.isnan(cal.inputs.configured_dpi)


def test_select_config_file(tmp_path, monkeypatch, log):
    monkeypatch.chdir(tmp_path)
    assert select_config_file(None, log) is None
    write_ini(tmp_path, "[calibration]\n")
    assert select_config_file(None, log) == "mousecal.ini"
    with pytest.raises(SystemExit):
        select_config_file("other.ini", log)


def test_setup_logger_writes_file(tmp_path):
    logfile = tmp_path / "logs" / "run.log"
    log = setup_logger("mousecal.test.file", logfile=str(logfile), console=False)
    log.debug("[REC] hello")
    for h in log.handlers:
        h.flush()
    assert "[REC] hello" in logfile.read_text(encoding="utf-8")
    assert setup_logger("mousecal.test.file", logfile=str(logfile)) is log
    assert len(log.handlers) == 1


def test_listed_device_does_not_steal_the_auto_pick(log):
    source = PointerSource(pointers=(OTHER_MOUSE, MOUSE))
    cal = build_calibrator(log, IniReader(), source)
    assert cal.registry.devices() == [OTHER_MOUSE, MOUSE]

    cal.toggle_recording()
    source.push(motion(100, device=MOUSE))
    cal.tick()
    assert cal.registry.active() == MOUSE
    assert cal.recorder.x_motion == 100
    assert cal.registry.devices() == [MOUSE, OTHER_MOUSE]


def test_listed_device_can_be_picked_by_hand(log):
    source = PointerSource(pointers=(OTHER_MOUSE, MOUSE))
    cal = build_calibrator(log, IniReader(), source)
    cal.select_device(OTHER_MOUSE)
    assert cal.registry.active() == OTHER_MOUSE
    assert OTHER_MOUSE in cal.registry


def test_source_closed_when_window_fails(monkeypatch, log):
    from mousecal.view import window

    source = PointerSource()
    monkeypatch.setattr(main.InputDetector, "open", classmethod(lambda cls, log, name_filter=None: source))

    def no_display(*args, **kwargs):
        raise RuntimeError("no display")

    monkeypatch.setattr(window, "CalibratorWindow", no_display)
    with pytest.raises(RuntimeError):
        run_main(log, IniReader())
    assert source.closed


def test_console_lines_are_colored_by_level():
    fmt = ColorFormatter("%(message)s")
    record = logging.LogRecord("mousecal", logging.WARNING, __file__, 1, "[REC] stopped", None, None)
    assert fmt.format(record).startswith(Fore.YELLOW + "[REC] stopped")
