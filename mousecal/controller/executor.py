#!/usr/bin/env python3
"""
executor.py - Applies input events to the calibrator state, once per tick

A tick is: poll the source, route every event (motion to the recorder when it
comes from the active device, key presses to the binds), then fire whatever
bound actions were triggered. Outputs are derived afterwards from the state
the whole tick produced.
"""

from mousecal.calibration.calculator import CalibrationInputs, compute
from mousecal.controller.bindings import BindSet
from mousecal.controller.detector import KeyEvent, KeyState, PointerMotion
from mousecal.controller.recorder import ToggleRecorder
from mousecal.controller.registry import DeviceRegistry


class Calibrator:
    def __init__(self, log, source, *, registry=None, binds=None, recorder=None, inputs=None):
        self.log = log
        self.source = source
        self.registry = registry if registry is not None else DeviceRegistry(log)
        self.binds = binds if binds is not None else BindSet(log=log)
        self.recorder = recorder if recorder is not None else ToggleRecorder(log)
        self.inputs = inputs if inputs is not None else CalibrationInputs()

        self.actions = {
            "toggle_recording": self.toggle_recording,
            "reset_x": self.reset_x,
            "reset_abs": self.reset_abs,
        }

    # ---------------------------------------------------------------
    # Tick
    # ---------------------------------------------------------------
    def tick(self):
        """Poll and apply one batch of events. InputSourceError from the poll propagates."""
        events = self.source.poll()
        for ev in events:
            self.handle_event(ev)
        self.update()
        return len(events)

    def handle_event(self, ev):
        if isinstance(ev, PointerMotion):
            self.registry.observe(ev.device)
            if ev.device == self.registry.active():
                self.recorder.feed(ev.dx, ev.dy)

        elif isinstance(ev, KeyEvent) and ev.state is KeyState.PRESSED:
            self.binds.handle_press(ev.key_code)

    def update(self):
        """Fire the actions whose bound key was pressed since the last tick."""
        for kb in self.binds:
            if kb.poll_triggered():
                self.log.debug(f"[BIND] key {kb.key_code} fired {kb.action}")
                action = self.actions.get(kb.action)
                if action is not None:
                    action()

    # ---------------------------------------------------------------
    # User actions
    # ---------------------------------------------------------------
    @property
    def recording(self) -> bool:
        return self.recorder.recording

    def toggle_recording(self):
        self.recorder.toggle()

    def reset_x(self):
        self.recorder.reset_x()
        self.log.info("[REC] horizontal motion reset")

    def reset_abs(self):
        self.recorder.reset_abs()
        self.log.info("[REC] absolute motion reset")

    def select_device(self, device):
        self.registry.select(device)

    def outputs(self):
        return compute(self.recorder.x_motion, self.recorder.abs_motion, self.inputs)
