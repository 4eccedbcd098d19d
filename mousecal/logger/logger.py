#!/usr/bin/env python3
"""
logger.py - Logging for the calibrator

Two sinks: a short colored line on stdout for the person watching the window,
and a timestamped per-run file (truncated at startup) that keeps DEBUG detail
such as every captured key bind and recording toggle.
"""

import logging
import sys
from pathlib import Path

from colorama import Fore, Style, init as colorama_init

CONSOLE_FORMAT = "%(asctime)s.%(msecs)03d [%(levelname)-5s] %(message)s"
FILE_FORMAT = "%(asctime)s.%(msecs)03d [%(levelname)-8s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColorFormatter(logging.Formatter):
    LEVEL_COLORS = {
        logging.DEBUG: Fore.BLUE,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED + Style.BRIGHT,
    }

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno, "")
        return f"{color}{super().format(record)}{Style.RESET_ALL}"


def file_handler(logfile, level) -> logging.Handler:
    path = Path(logfile)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    handler.setLevel(level)
    return handler


def console_handler(level, color) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    if color:
        colorama_init()
        handler.setFormatter(ColorFormatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    handler.setLevel(level)
    return handler


def setup_logger(
        name: str = "mousecal",
        logfile: str | None = "mousecal.log",
        *,
        console: bool = True,
        console_level: int = logging.INFO,
        file_level: int = logging.DEBUG,
        color_console: bool = True,
) -> logging.Logger:
    """Configure and return the named logger. A second call returns it unchanged."""
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(min(console_level, file_level))
    if logfile:
        logger.addHandler(file_handler(logfile, file_level))
    if console:
        logger.addHandler(console_handler(console_level, color_console))
    return logger
