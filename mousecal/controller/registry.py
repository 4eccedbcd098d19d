"""Known input devices and the one selected for measurement."""

from typing import Dict, List, Optional

from mousecal.controller.detector import Device


class DeviceRegistry:
    def __init__(self, log=None):
        self.log = log
        # dict keeps first-observed order for the auto-pick and the device list
        self._known: Dict[Device, None] = {}
        # opened but not moved yet: listed in the picker, never auto-picked
        self._available: Dict[Device, None] = {}
        self._active: Optional[Device] = None

    def __contains__(self, device) -> bool:
        return device in self._known

    def __len__(self) -> int:
        return len(self._known)

    def observe(self, device: Device):
        if device in self._known:
            return
        self._known[device] = None
        self._available.pop(device, None)
        if self.log:
            self.log.info(f"[DEVICE] observed {device.label}")

    def offer(self, device: Device):
        """List a device for manual selection without making it a candidate for the auto-pick."""
        if device not in self._known:
            self._available[device] = None

    def devices(self) -> List[Device]:
        """Devices seen moving, then the ones only offered."""
        return list(self._known) + list(self._available)

    def active(self) -> Optional[Device]:
        """Current selection. Picks the first observed device once while nothing is selected."""
        if self._active is None and self._known:
            self._active = next(iter(self._known))
            if self.log:
                self.log.info(f"[DEVICE] auto-selected {self._active.label}")
        return self._active

    def select(self, device: Device):
        if device in self._available:
            self.observe(device)
        if device not in self._known:
            if self.log:
                self.log.debug(f"[DEVICE] ignoring selection of unknown device {device!r}")
            return
        if device != self._active and self.log:
            self.log.info(f"[DEVICE] selected {device.label}")
        self._active = device

    def clear(self):
        self._active = None
