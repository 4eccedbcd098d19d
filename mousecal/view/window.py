#!/usr/bin/env python3
"""
window.py - pygame front end for the calibrator

Draws the device picker, the recording/reset buttons with their key-bind
controls, the editable inputs and the derived outputs. Clicking an input starts
editing it (type a number, Enter to commit, Esc to cancel); the mouse wheel
nudges it. Anything that does not parse as a number clears the input.
"""

import pygame

from mousecal.calibration.calculator import is_missing
from mousecal.controller.bindings import BindState

BG = (30, 32, 36)
FG = (220, 220, 220)
DIM = (130, 130, 130)
BUTTON = (60, 64, 72)
BUTTON_ACTIVE = (90, 60, 60)
EDIT = (50, 70, 100)

ROW_H = 30
LABEL_W = 300
VALUE_W = 200

# (field, label, wheel step)
INPUT_ROWS = (
    ("configured_dpi", "mouse dpi", 10.0),
    ("current_sensitivity", "current sensitivity", 0.02),
    ("revolutions", "number of revolutions", 1.0),
    ("target_rpi", "target revolutions per inch", 0.02),
    ("distance_moved", "physical distance", 0.1),
)

# Characters accepted while typing an input; inputs are never negative
EDIT_CHARS = "0123456789."

ACTION_LABELS = {
    "reset_x": "reset horizontal",
    "reset_abs": "reset absolute",
}


def format_value(value) -> str:
    return "missing input" if is_missing(value) else f"{value:.3f}"


def format_input(value) -> str:
    return "---" if is_missing(value) else f"{value:g}"


def clipboard_text(value):
    """Full-precision text for the clipboard, None for a missing value."""
    return None if is_missing(value) else repr(float(value))


def bind_caption(kb) -> str:
    if kb.state is BindState.BINDING:
        return "cancel"
    if kb.state is BindState.BOUND:
        return f"key {kb.key_code}"
    return "bind"


class CalibratorWindow:
    def __init__(self, log, calibrator, *, width=760, height=560, fps=0):
        self.log = log
        self.cal = calibrator
        self.fps = fps

        pygame.init()
        pygame.display.set_caption("Mouse Calibrator")
        self.screen = pygame.display.set_mode((width, height))
        # scrap needs a display; the copy buttons stay disabled without it
        try:
            pygame.scrap.init()
            self.clipboard = True
        except pygame.error as e:
            self.log.warning(f"[VIEW] clipboard unavailable: {e}")
            self.clipboard = False
        self.font = pygame.font.SysFont(None, 24)
        self.clock = pygame.time.Clock()

        # rect -> callback, rebuilt every frame
        self._hits = []
        self._wheel = []
        self.editing = None
        self.edit_text = ""

    # ---------------------------------------------------------------
    # Drawing helpers
    # ---------------------------------------------------------------
    def _text(self, text, x, y, color=FG):
        self.screen.blit(self.font.render(text, True, color), (x, y + 6))

    def _button(self, text, x, y, callback, color=BUTTON):
        w = self.font.size(text)[0] + 16
        rect = pygame.Rect(x, y + 2, w, ROW_H - 4)
        pygame.draw.rect(self.screen, color, rect, border_radius=4)
        self._text(text, x + 8, y)
        self._hits.append((rect, callback))
        return x + w + 8

    def _bind_control(self, kb, x, y):
        if kb.state is BindState.BINDING:
            return self._button(bind_caption(kb), x, y, kb.cancel, BUTTON_ACTIVE)
        return self._button(bind_caption(kb), x, y, kb.click_bind)

    # ---------------------------------------------------------------
    # Sections
    # ---------------------------------------------------------------
    def _draw_header(self, y):
        reg = self.cal.registry
        active = reg.active()
        x = self._button(active.label if active else "Select Mouse", 10, y, self._next_device)
        self._text("recording:", x, y, DIM)
        x += 90
        x = self._button("stop" if self.cal.recording else "start", x, y, self.cal.toggle_recording,
                         BUTTON_ACTIVE if self.cal.recording else BUTTON)
        self._bind_control(self.cal.binds["toggle_recording"], x, y)

        y += ROW_H
        x = 10
        for action, label in ACTION_LABELS.items():
            x = self._button(label, x, y, self.cal.actions[action])
            x = self._bind_control(self.cal.binds[action], x, y) + 16
        return y + ROW_H + 10

    def _draw_inputs(self, y):
        self._text("inputs", 10, y)
        y += ROW_H
        for name, label, step in INPUT_ROWS:
            self._text(label, 20, y, DIM)
            rect = pygame.Rect(LABEL_W, y + 2, VALUE_W, ROW_H - 4)
            editing = self.editing == name
            pygame.draw.rect(self.screen, EDIT if editing else BUTTON, rect, border_radius=4)
            shown = self.edit_text + "|" if editing else format_input(getattr(self.cal.inputs, name))
            self._text(shown, LABEL_W + 8, y)
            self._hits.append((rect, lambda n=name: self._start_edit(n)))
            self._wheel.append((rect, name, step))
            if name == "distance_moved":
                unit = "inch" if self.cal.inputs.distance_is_inch else "cm"
                self._button(unit, LABEL_W + VALUE_W + 10, y, self._toggle_unit)
            y += ROW_H
        return y + 10

    def _draw_outputs(self, y, outputs):
        self._text("outputs", 10, y)
        y += ROW_H
        mouse = pygame.mouse.get_pos()
        for label, value in outputs.rows():
            self._text(label, 20, y, DIM)
            cell = pygame.Rect(LABEL_W, y, VALUE_W, ROW_H)
            full = clipboard_text(value)
            # hovering shows the unrounded value
            shown = full if full and cell.collidepoint(mouse) else format_value(value)
            self._text(shown, LABEL_W + 8, y, DIM if full is None else FG)
            if full is not None and self.clipboard:
                self._button("copy", LABEL_W + VALUE_W + 10, y, lambda t=full: self._copy(t))
            y += ROW_H
        return y

    # ---------------------------------------------------------------
    # User input
    # ---------------------------------------------------------------
    def _next_device(self):
        devices = self.cal.registry.devices()
        if not devices:
            return
        active = self.cal.registry.active()
        idx = devices.index(active) + 1 if active in devices else 0
        self.cal.select_device(devices[idx % len(devices)])

    def _copy(self, text):
        try:
            pygame.scrap.put_text(text)
        except pygame.error as e:
            self.log.warning(f"[VIEW] copy failed: {e}")
            return
        self.log.debug(f"[VIEW] copied {text}")

    def _toggle_unit(self):
        self.cal.inputs.set("distance_is_inch", not self.cal.inputs.distance_is_inch)

    def _start_edit(self, name):
        self._commit_edit()
        self.editing = name
        value = getattr(self.cal.inputs, name)
        self.edit_text = "" if is_missing(value) else f"{value:f}".rstrip("0").rstrip(".")

    def _commit_edit(self):
        if self.editing is None:
            return
        self.cal.inputs.set(self.editing, self.edit_text.strip())
        self.log.debug(f"[INPUT] {self.editing} = {getattr(self.cal.inputs, self.editing)}")
        self.editing = None

    def _nudge(self, name, step, direction):
        value = getattr(self.cal.inputs, name)
        value = 1.0 if is_missing(value) else max(0.0, value + direction * step)
        self.cal.inputs.set(name, value)

    def _handle(self, event):
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            for rect, callback in self._hits:
                if rect.collidepoint(event.pos):
                    self._commit_edit()
                    callback()
                    break
            else:
                self._commit_edit()
        elif event.type == pygame.MOUSEWHEEL:
            pos = pygame.mouse.get_pos()
            for rect, name, step in self._wheel:
                if rect.collidepoint(pos) and self.editing != name:
                    self._nudge(name, step, event.y)
        elif event.type == pygame.KEYDOWN and self.editing:
            if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                self._commit_edit()
            elif event.key == pygame.K_ESCAPE:
                self.editing = None
            elif event.key == pygame.K_BACKSPACE:
                self.edit_text = self.edit_text[:-1]
            elif event.unicode and event.unicode in EDIT_CHARS:
                self.edit_text += event.unicode
        return True

    # ---------------------------------------------------------------
    # Frame
    # ---------------------------------------------------------------
    def frame(self) -> bool:
        """Handle window events, run one calibrator tick and draw. False once the window closes."""
        for event in pygame.event.get():
            if not self._handle(event):
                return False

        self.cal.tick()
        outputs = self.cal.outputs()

        self._hits = []
        self._wheel = []
        self.screen.fill(BG)
        y = self._draw_header(10)
        y = self._draw_inputs(y)
        self._draw_outputs(y, outputs)
        pygame.display.flip()
        self.clock.tick(self.fps)
        return True

    def close(self):
        pygame.quit()
