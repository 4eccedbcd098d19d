#!/usr/bin/env python3
"""
detector.py - Polls evdev input devices and produces motion / key events

Every poll drains whatever the kernel has queued on each opened device without
blocking, then returns one list ordered by kernel timestamp:

- REL_X / REL_Y deltas of one device are collected until SYN_REPORT and
  emitted as a single PointerMotion (one libinput-style motion frame).
- Keyboard EV_KEY press/release become KeyEvents. Auto-repeat (value 2) and
  mouse-button codes are dropped.

Anything else in the stream is ignored.
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

import evdev
from evdev import ecodes


class InputSourceError(Exception):
    """The input source could not be opened or polled. Fatal for the session."""


@dataclass(frozen=True)
class Device:
    path: str
    name: str
    sysname: str

    @classmethod
    def from_evdev(cls, dev):
        return cls(dev.path, dev.name, os.path.basename(dev.path))

    @property
    def label(self) -> str:
        return f"{self.name}, {self.sysname}"


class KeyState(Enum):
    PRESSED = "pressed"
    RELEASED = "released"


@dataclass(frozen=True)
class PointerMotion:
    device: Device
    dx: float
    dy: float


@dataclass(frozen=True)
class KeyEvent:
    device: Device
    key_code: int
    state: KeyState


def _is_mouse_button(code: int) -> bool:
    # BTN_MISC..BTN_GEAR_UP and the trigger-happy block are buttons, not keys
    return ecodes.BTN_MISC <= code < ecodes.KEY_OK or code >= ecodes.BTN_TRIGGER_HAPPY


def is_pointer(dev) -> bool:
    rel = dev.capabilities().get(ecodes.EV_REL, [])
    return ecodes.REL_X in rel and ecodes.REL_Y in rel


def is_keyboard(dev) -> bool:
    return ecodes.KEY_A in dev.capabilities().get(ecodes.EV_KEY, [])


class InputDetector:
    def __init__(self, log, handles):
        self.log = log
        self.handles = list(handles)
        self.devices: Dict[str, Device] = {}
        # pending (dx, dy) per device path, flushed on SYN_REPORT
        self._pending: Dict[str, Tuple[float, float]] = {}

        for h in self.handles:
            dev = Device.from_evdev(h)
            self.devices[h.path] = dev
            kind = "+".join(k for k, ok in (("pointer", is_pointer(h)), ("keyboard", is_keyboard(h))) if ok)
            self.log.info(f"[DEVICE] {dev.label} ({kind or 'other'}) at {dev.path}")

    # ------------------------------------------------------------------
    # Open / close
    # ------------------------------------------------------------------
    @classmethod
    def open(cls, log, name_filter: Optional[str] = None):
        """Open every readable pointer or keyboard device. Raises InputSourceError if none."""
        try:
            paths = evdev.list_devices()
        except OSError as e:
            raise InputSourceError(f"cannot enumerate input devices: {e}") from e

        handles = []
        denied = 0
        for path in paths:
            try:
                h = evdev.InputDevice(path)
            except PermissionError:
                denied += 1
                continue
            except OSError as e:
                log.debug(f"[DEVICE] skipping {path}: {e}")
                continue
            if name_filter and name_filter.lower() not in h.name.lower():
                h.close()
                continue
            if is_pointer(h) or is_keyboard(h):
                handles.append(h)
            else:
                h.close()

        if not handles:
            hint = f" ({denied} not readable, check permissions / 'input' group)" if denied else ""
            raise InputSourceError(f"no pointer or keyboard devices available{hint}")
        return cls(log, handles)

    def pointer_devices(self) -> List[Device]:
        return [self.devices[h.path] for h in self.handles if is_pointer(h)]

    def close(self):
        for h in self.handles:
            try:
                h.close()
            except OSError as e:
                self.log.debug(f"[DEVICE] close failed for {h.path}: {e}")
        self.handles = []

    # ------------------------------------------------------------------
    # Poll
    # ------------------------------------------------------------------
    def _read(self, h):
        try:
            return list(h.read())
        except BlockingIOError:
            return []
        except OSError as e:
            raise InputSourceError(f"reading {h.path} failed: {e}") from e

    def _translate(self, dev: Device, ev):
        """Return a PointerMotion/KeyEvent for a raw event, or None."""
        if ev.type == ecodes.EV_REL:
            dx, dy = self._pending.get(dev.path, (0.0, 0.0))
            if ev.code == ecodes.REL_X:
                self._pending[dev.path] = (dx + ev.value, dy)
            elif ev.code == ecodes.REL_Y:
                self._pending[dev.path] = (dx, dy + ev.value)
            return None

        if ev.type == ecodes.EV_SYN and ev.code == ecodes.SYN_REPORT:
            pending = self._pending.pop(dev.path, None)
            if pending is None:
                return None
            return PointerMotion(dev, float(pending[0]), float(pending[1]))

        if ev.type == ecodes.EV_KEY and not _is_mouse_button(ev.code):
            if ev.value == 1:
                return KeyEvent(dev, ev.code, KeyState.PRESSED)
            if ev.value == 0:
                return KeyEvent(dev, ev.code, KeyState.RELEASED)
        return None

    def poll(self):
        """Drain all queued events from every device, ordered by kernel timestamp."""
        stamped = []
        seq = 0
        for h in self.handles:
            dev = self.devices[h.path]
            for ev in self._read(h):
                out = self._translate(dev, ev)
                if out is not None:
                    stamped.append((ev.timestamp(), seq, out))
                    seq += 1
        stamped.sort(key=lambda t: (t[0], t[1]))
        return [out for _, _, out in stamped]
