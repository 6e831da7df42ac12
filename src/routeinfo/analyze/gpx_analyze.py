#!/usr/bin/env python3
"""
routeinfo-analyze: summarize GPX tracks (distance, gain/loss, slope histogram).
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from routeinfo.analyze.analyzer import TrackAnalysis, analyze_track
from routeinfo.analyze.models import SteepnessCategory
from routeinfo.config import load_config
from routeinfo.errors import RouteInfoError
from routeinfo.util.logging import configure_logging, utc_now_iso
from routeinfo.visualize.plot import plot_slope_histogram

logger = logging.getLogger("routeinfo.cli")

TSV_HEADER = "file\tpoints\tthinned_points\tdistance_km\tascent_m\tdescent_m\tavg_elevation_m"


def print_report(result: TrackAnalysis, *, tsv: bool) -> None:
    s = result.summary
    if tsv:
        print(
            f"{result.path}\t"
            f"{result.points}\t"
            f"{result.thinned_points}\t"
            f"{s.distance_km:.3f}\t"
            f"{s.ascent_m:.1f}\t"
            f"{s.descent_m:.1f}\t"
            f"{s.average_elevation_m}"
        )
        return

    print(f"\n{result.path}")
    print(f"  points          : {result.points} ({result.thinned_points} after thinning)")
    print(f"  distance (km)   : {s.distance_km:.3f}")
    print(f"  ascent (m)      : {s.ascent_m:.1f}")
    print(f"  descent (m)     : {s.descent_m:.1f}")
    print(f"  avg elevation m : {s.average_elevation_m}")
    print("  grade %   ascent (n / m)       descent (n / m)")
    for c in SteepnessCategory:
        a = s.ascent_segments[c]
        d = s.descent_segments[c]
        print(
            f"  {c.label:<7} {a.count:>4} / {a.total_length_m:>10.1f}"
            f"   {d.count:>4} / {d.total_length_m:>10.1f}"
        )


def _as_json(result: TrackAnalysis) -> dict:
    return {
        "file": str(result.path),
        "points": result.points,
        "thinned_points": result.thinned_points,
        "summary": result.summary.to_dict(),
    }


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="routeinfo: Analyze GPX file(s).")
    ap.add_argument("gpx", nargs="*",
                    help="One or more GPX files. If omitted, analyze every GPX under the work root.")
    ap.add_argument("--work-root", default=None,
                    help="Working root (default: from config or ~/GPS/_work)")
    ap.add_argument("--distance-threshold", type=float, default=None,
                    help="Minimum point spacing in meters for thinning.")
    ap.add_argument("--slope-section-threshold", type=float, default=None,
                    help="Distance in meters after which a slope segment is closed.")
    ap.add_argument("--elevation-distance-threshold", type=float, default=None,
                    help="Distance in meters before elevation change is counted.")
    out = ap.add_mutually_exclusive_group()
    out.add_argument("--tsv", action="store_true",
                     help="Print tab-separated output (good for piping).")
    out.add_argument("--json", action="store_true",
                     help="Print a JSON document.")
    ap.add_argument("--plot-dir", default=None,
                    help="Write a slope histogram PNG per file into this directory.")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        cfg = load_config()
        analyzer_cfg = dataclasses.replace(
            cfg.analyzer,
            **{
                name: value
                for name, value in (
                    ("distance_threshold", args.distance_threshold),
                    ("distance_slope_section_threshold", args.slope_section_threshold),
                    ("elevation_distance_threshold", args.elevation_distance_threshold),
                )
                if value is not None
            },
        )
    except RouteInfoError as e:
        logger.error("configuration: %s", e)
        return 2

    if args.gpx:
        selected = [Path(p).expanduser() for p in args.gpx]
    else:
        work_root = Path(args.work_root).expanduser() if args.work_root else cfg.paths.work_root
        selected = sorted(work_root.rglob("*.gpx"))
        if not selected:
            logger.error("No GPX files found under %s", work_root)
            return 1

    plot_dir = Path(args.plot_dir).expanduser() if args.plot_dir else None

    if args.tsv:
        print(TSV_HEADER)

    results: list[TrackAnalysis] = []
    failed = 0
    for path in selected:
        if not path.is_file():
            logger.warning("Skipping (not a file): %s", path)
            failed += 1
            continue
        try:
            result = analyze_track(path, analyzer_cfg)
        except (RouteInfoError, OSError) as e:
            logger.error("%s: %s", path, e)
            failed += 1
            continue

        results.append(result)
        if plot_dir is not None:
            plot_slope_histogram(
                result.summary, title=path.stem, out_path=plot_dir / f"{path.stem}_slopes.png"
            )
        if not args.json:
            print_report(result, tsv=args.tsv)

    if args.json:
        doc = {
            "generated_at": utc_now_iso(),
            "config": dataclasses.asdict(analyzer_cfg),
            "tracks": [_as_json(r) for r in results],
        }
        json.dump(doc, sys.stdout, indent=2)
        print()

    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
