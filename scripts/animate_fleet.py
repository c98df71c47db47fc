#!/usr/bin/env python3
"""Animate a fleet dataset headlessly and report where every vehicle ends up.

Loads trajectories from the vehicle endpoint (``--url``, default from
``FLEET_VEHICLES_URL``) or from a JSON/GeoJSON file (``--file``), runs
the animation for ``--seconds``, stops it and prints the rest positions
as JSON.

With ``--replay`` the animation runs on a manual frame clock instead of
wall-clock time, so a long session replays instantly and reproducibly.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyfleet import (  # noqa: E402
    DisplayedPosition,
    FleetClient,
    FleetConfig,
    FleetConfigError,
    InMemoryRenderer,
    ManualFrameClock,
)

_logger = logging.getLogger("animate_fleet")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--url", help="Vehicle endpoint URL (overrides FLEET_VEHICLES_URL)")
    source.add_argument("--file", type=Path, help="Static JSON/GeoJSON dataset")
    parser.add_argument("--seconds", type=float, default=10.0, help="How long to animate (default: 10)")
    parser.add_argument("--segment-ms", type=float, help="Segment duration in milliseconds")
    parser.add_argument("--refine", action="store_true", help="Snap routes to roads (needs FLEET_ROADS_API_KEY)")
    parser.add_argument("--replay", action="store_true", help="Use a manual frame clock instead of wall time")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every marker update")
    return parser.parse_args(argv)


def _build_config(args: argparse.Namespace) -> FleetConfig:
    overrides: dict[str, Any] = {}
    if args.url:
        overrides["vehicles_url"] = args.url
    if args.segment_ms is not None:
        overrides["segment_duration_ms"] = args.segment_ms
    if args.refine:
        overrides["route_refinement_enabled"] = True
    return FleetConfig.from_env(**overrides)


def _log_move(position: DisplayedPosition) -> None:
    _logger.debug(
        "%s -> (%.6f, %.6f) %s [%s]",
        position.vehicle_id,
        position.latitude,
        position.longitude,
        position.status_text,
        position.tier,
    )


async def _run(args: argparse.Namespace) -> int:
    try:
        config = _build_config(args)
    except FleetConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    renderer = InMemoryRenderer(on_move=_log_move)
    clock = ManualFrameClock() if args.replay else None

    async with FleetClient(config, renderer=renderer, clock=clock) as client:
        if args.file is not None:
            count = client.load_file(args.file)
        else:
            count = await client.refresh()
        if count == 0:
            print("No vehicles loaded", file=sys.stderr)
            return 1

        started = await client.start()
        _logger.info("Animating %d of %d vehicles for %.1fs", started, count, args.seconds)

        if isinstance(clock, ManualFrameClock):
            clock.run(args.seconds * 1000.0, config.frame_interval_ms)
        else:
            await asyncio.sleep(args.seconds)

        updates = {vehicle_id: marker.update_count for vehicle_id, marker in renderer.markers.items()}
        client.stop()

        report = {
            vehicle_id: {
                "latitude": position.latitude,
                "longitude": position.longitude,
                "tier": str(position.tier),
                "status": position.status,
                "frames": updates.get(vehicle_id, 0),
            }
            for vehicle_id, position in renderer.positions().items()
            if position is not None
        }
    print(json.dumps(report, indent=2, sort_keys=True))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
