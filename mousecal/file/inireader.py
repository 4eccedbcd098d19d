import configparser
import math


class IniReader:
    """Thin configparser wrapper: inline comments, case-preserving keys, typed getters with fallbacks."""

    def __init__(self, path=None):
        self.cfg = configparser.ConfigParser(inline_comment_prefixes=(";", "#"))
        self.cfg.optionxform = str  # preserve case
        self.path = path
        self.loaded = []
        if path is not None:
            self.loaded = self.cfg.read(path, encoding="utf-8")

    def _clean(self, val: str) -> str:
        if val is None:
            return ""
        # cut at first ; or #
        for sep in (";", "#"):
            if sep in val:
                val = val.split(sep, 1)[0]
        return val.strip()

    def has(self, section: str, option: str) -> bool:
        return self.cfg.has_option(section, option)

    def get_str(self, section: str, option: str, fallback: str = "") -> str:
        if self.cfg.has_option(section, option):
            raw = self.cfg.get(section, option, fallback=fallback)
            return self._clean(raw)
        return fallback

    def get_int(self, section: str, option: str, fallback: int = 0) -> int:
        try:
            return int(self.get_str(section, option, str(fallback)))
        except ValueError:
            return fallback

    def get_optional_int(self, section: str, option: str) -> int | None:
        """Integer value, or None when the option is absent, empty or not a number."""
        val = self.get_str(section, option)
        if not val:
            return None
        try:
            return int(val)
        except ValueError:
            return None

    def get_float(self, section: str, option: str, fallback: float = math.nan) -> float:
        """Float value; empty, absent and unparseable values give ``fallback`` (NaN = missing)."""
        val = self.get_str(section, option)
        if not val:
            return fallback
        try:
            return float(val)
        except ValueError:
            return fallback

    def get_bool(self, section: str, option: str, fallback: bool = False) -> bool:
        val = self.get_str(section, option, str(fallback))
        return val.lower() in ("1", "yes", "true", "on")

    def get_choice(self, section: str, option: str, choices, fallback: str) -> str:
        val = self.get_str(section, option, fallback).lower()
        return val if val in choices else fallback
