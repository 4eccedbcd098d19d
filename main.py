#!/usr/bin/env python3
"""
main.py - Entry point for the Mouse Calibrator
"""

import argparse
import logging
from pathlib import Path

from mousecal.calibration.calculator import CalibrationInputs
from mousecal.controller.bindings import BindSet
from mousecal.controller.detector import InputDetector, InputSourceError
from mousecal.controller.executor import Calibrator
from mousecal.controller.recorder import RECORDERS, make_recorder
from mousecal.controller.registry import DeviceRegistry
from mousecal.file.inireader import IniReader
from mousecal.logger.logger import setup_logger


# ----------------------------------------------------------------------
# Config selector
# ----------------------------------------------------------------------
def select_config_file(explicit: str | None, log):
    if explicit:
        if not Path(explicit).is_file():
            log.error(f"Config file not found: {explicit}")
            raise SystemExit(1)
        return explicit

    # Look for *.ini files in current directory
    ini_files = sorted(Path(".").glob("*.ini"))
    if not ini_files:
        log.warning("No INI configuration file found, using defaults.")
        return None

    if len(ini_files) == 1:
        log.info(f"Found only one config: {ini_files[0]}")
        return str(ini_files[0])

    # Multiple INIs → let user choose
    print("\nAvailable config files:")
    for idx, f in enumerate(ini_files, start=1):
        print(f"  {idx}. {f.name}")
    while True:
        try:
            choice = int(input("Select config file [1-{}]: ".format(len(ini_files))))
            if 1 <= choice <= len(ini_files):
                return str(ini_files[choice - 1])
        except ValueError:
            pass
        print("Invalid choice, try again.")


def build_calibrator(log, cfg, source):
    policy = cfg.get_choice("recording", "policy", tuple(RECORDERS), "toggle")
    registry = DeviceRegistry(log)
    # Listed in the picker up front; only motion makes a device the auto-pick
    for dev in source.pointer_devices():
        registry.offer(dev)

    cal = Calibrator(
        log,
        source,
        registry=registry,
        binds=BindSet.from_ini(cfg, log),
        recorder=make_recorder(policy, log),
        inputs=CalibrationInputs.from_ini(cfg),
    )
    log.info(f"[REC] recording policy: {policy}")
    return cal


# ----------------------------------------------------------------------
# Main runner
# ----------------------------------------------------------------------
def run_main(log, cfg, list_only=False):
    try:
        source = InputDetector.open(log, cfg.get_str("input", "device_filter") or None)
    except InputSourceError as e:
        log.error(f"[INPUT] {e}")
        raise SystemExit(1)

    if list_only:
        source.close()
        return

    # pygame is only needed once there is something to show
    from mousecal.view.window import CalibratorWindow

    window = None
    try:
        cal = build_calibrator(log, cfg, source)
        window = CalibratorWindow(
            log,
            cal,
            width=cfg.get_int("display", "width", 760),
            height=cfg.get_int("display", "height", 560),
            fps=cfg.get_int("display", "fps", 0),
        )
        while window.frame():
            pass
    except InputSourceError as e:
        log.critical(f"[INPUT] {e}")
        raise SystemExit(1)
    finally:
        if window is not None:
            window.close()
        source.close()
    log.info("Window closed, exiting")


def main():
    parser = argparse.ArgumentParser(description="Mouse Calibrator")
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="INI config file (default: ask user if multiple exist)",
    )
    parser.add_argument(
        "--list-devices",
        action="store_true",
        help="log the usable input devices and exit",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="console logging level (default: INFO)",
    )
    parser.add_argument("--logfile", default="mousecal.log", help="log file, overwritten each run")
    args = parser.parse_args()

    log = setup_logger("mousecal", logfile=args.logfile,
                       console_level=getattr(logging, args.log_level))
    log.info("Starting Mouse Calibrator")

    cfgfile = select_config_file(args.config, log)
    run_main(log, IniReader(cfgfile), list_only=args.list_devices)


if __name__ == "__main__":
    main()
