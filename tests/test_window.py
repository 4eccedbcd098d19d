import math

from mousecal.view.window import EDIT_CHARS, clipboard_text, format_value


def test_typed_inputs_cannot_be_negative():
    assert "-" not in EDIT_CHARS
    assert set("0123456789.") <= set(EDIT_CHARS)


def test_clipboard_text_keeps_full_precision():
    assert clipboard_text(1 / 3) == repr(1 / 3)
    assert clipboard_text(5) == "5.0"
    assert clipboard_text(math.nan) is None
    assert format_value(1 / 3) == "0.333"
    assert format_value(math.nan) == "missing input"
