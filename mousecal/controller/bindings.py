"""
bindings.py - Key-bind capture for the calibrator's actions

Each action owns one KeyBind:

    Unbound --click_bind--> Binding --next key press--> Bound(k)
    Binding --cancel--> Unbound
    Bound(k) --click_bind / rebind--> Binding
    Bound(k) --press of k--> Bound(k, triggered)

``poll_triggered`` reads and clears the triggered edge. Key presses are offered
to the binds in BIND_ORDER and the first bind that is armed swallows the press,
so one key can never be captured by two actions at once.
"""

from enum import Enum
from typing import Dict, Iterator, Optional, Tuple

# Priority when several actions are armed at the same time: first wins.
BIND_ORDER = ("toggle_recording", "reset_x", "reset_abs")


class BindState(Enum):
    UNBOUND = "unbound"
    BINDING = "binding"
    BOUND = "bound"


class KeyBind:
    def __init__(self, action: str, log=None):
        self.action = action
        self.log = log
        self.state = BindState.UNBOUND
        self.key_code: Optional[int] = None
        self.triggered = False

    def __repr__(self):
        if self.state is BindState.BOUND:
            return f"KeyBind({self.action!r}, bound={self.key_code}, triggered={self.triggered})"
        return f"KeyBind({self.action!r}, {self.state.value})"

    def _debug(self, msg):
        if self.log:
            self.log.debug(f"[BIND] {self.action}: {msg}")

    # ---------------------------------------------------------------
    # Click-driven transitions
    # ---------------------------------------------------------------
    def click_bind(self):
        if self.state is BindState.BINDING:
            self._debug("already waiting for a key")
            return
        self.state = BindState.BINDING
        self.key_code = None
        self.triggered = False
        self._debug("waiting for next key press")

    def rebind(self):
        if self.state is BindState.BOUND:
            self.click_bind()

    def cancel(self):
        if self.state is not BindState.BINDING:
            return
        self.state = BindState.UNBOUND
        self._debug("binding cancelled")

    def bind_to(self, key_code: int):
        self.state = BindState.BOUND
        self.key_code = key_code
        self.triggered = False

    # ---------------------------------------------------------------
    # Event-driven transitions
    # ---------------------------------------------------------------
    def handle_press(self, key_code: int) -> bool:
        """Apply a key press. Returns True when the press was captured as the new binding."""
        if self.state is BindState.BINDING:
            self.bind_to(key_code)
            if self.log:
                self.log.info(f"[BIND] {self.action} -> key {key_code}")
            return True
        if self.state is BindState.BOUND and key_code == self.key_code:
            self.triggered = True
        return False

    def poll_triggered(self) -> bool:
        if self.state is not BindState.BOUND or not self.triggered:
            return False
        self.triggered = False
        return True


class BindSet:
    """The ordered collection of KeyBinds, one per action."""

    def __init__(self, actions: Tuple[str, ...] = BIND_ORDER, log=None):
        self.log = log
        self._binds: Dict[str, KeyBind] = {a: KeyBind(a, log) for a in actions}

    def __getitem__(self, action: str) -> KeyBind:
        return self._binds[action]

    def __iter__(self) -> Iterator[KeyBind]:
        return iter(self._binds.values())

    def __len__(self):
        return len(self._binds)

    def handle_press(self, key_code: int) -> Optional[KeyBind]:
        """Offer a press to every bind in order; stop at the first one that captures it."""
        for kb in self._binds.values():
            if kb.handle_press(key_code):
                return kb
        return None

    @classmethod
    def from_ini(cls, cfg, log=None, actions: Tuple[str, ...] = BIND_ORDER):
        """Preload keys from the [binds] section (evdev key codes)."""
        binds = cls(actions, log)
        for action in actions:
            if not cfg.has("binds", action):
                continue
            raw = cfg.get_str("binds", action)
            if not raw:
                continue
            code = cfg.get_optional_int("binds", action)
            if code is None or code < 0:
                if log:
                    log.warning(f"[BIND] ignoring invalid key code for {action}: {raw!r}")
                continue
            binds[action].bind_to(code)
            if log:
                log.info(f"[BIND] {action} preloaded -> key {code}")
        return binds
