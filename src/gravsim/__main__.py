"""Run a simulation headless and log diagnostics as snapshots arrive."""

from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path

from . import __version__
from .app.sim_controller import SimulationController
from .io.presets import preset_names
from .io.units import label_for


log = logging.getLogger("gravsim")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gravsim", description=__doc__)
    parser.add_argument("scenario", type=Path, nargs="?", default=None)
    parser.add_argument("--preset", choices=preset_names(), default="two_body")
    parser.add_argument("--duration", type=float, default=5.0, help="wall-clock seconds")
    parser.add_argument("--report-every", type=float, default=1.0, help="seconds between reports")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--version", action="version", version=f"gravsim {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s  %(levelname)-7s  %(message)s",
        datefmt="%H:%M:%S",
    )

    controller = SimulationController()
    if args.scenario is not None:
        controller.load_scenario(args.scenario)
        log.info("scenario: %s", args.scenario)
    else:
        controller.load_preset(args.preset)
        log.info("preset: %s", args.preset)

    energy_label = label_for("energy", controller.units)
    momentum_label = label_for("momentum", controller.units)
    length_label = label_for("length", controller.units)
    controller.start()
    deadline = time.monotonic() + args.duration
    next_report = time.monotonic()
    try:
        while time.monotonic() < deadline:
            controller.poll()
            if time.monotonic() >= next_report:
                info = controller.diagnostics()
                log.info(
                    "snapshots=%s energy=%.6e %s |p|=%.3e %s extent=%.4g %s",
                    info.get("snapshots"),
                    info.get("energy", float("nan")),
                    energy_label,
                    info.get("momentum", float("nan")),
                    momentum_label,
                    info.get("extent", float("nan")),
                    length_label,
                )
                next_report += args.report_every
            time.sleep(0.016)
    except KeyboardInterrupt:
        log.info("interrupted")
    finally:
        controller.stop()

    info = controller.diagnostics()
    print(f"iterations: {info.get('iterations', 0)}")
    print(f"snapshots: {info.get('snapshots', 0)} (dropped {info.get('dropped', 0)})")
    if controller.latest is not None:
        print(controller.latest)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
