#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from geointel.app.presentation import build_report_response
from geointel.app.scoring import analyze_location
from geointel.app.validation import CoordinateValidationError, parse_coordinates

EXIT_INVALID_ARGS = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a territory analysis report for a coordinate pair."
    )
    # Kept as text so bad input gets the same messages as the API.
    parser.add_argument("--lat", type=str, required=True, help="Latitude in decimal degrees.")
    parser.add_argument("--lon", type=str, required=True, help="Longitude in decimal degrees.")
    parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Output JSON file path. Defaults to scripts/out/analysis_<lat>_<lon>.json",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Pretty-print output JSON with indentation.",
    )
    return parser


def default_output_path(lat: float, lon: float) -> Path:
    return Path("scripts/out") / f"analysis_{lat:.6f}_{lon:.6f}.json"


def write_output(payload: dict[str, object], output_path: Path, pretty: bool) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        if pretty:
            json.dump(payload, f, indent=2, ensure_ascii=True)
            f.write("\n")
        else:
            json.dump(payload, f, ensure_ascii=True)


def print_summary(payload: dict[str, object], output_path: Path) -> None:
    analysis = payload["analysis"]
    assert isinstance(analysis, dict)
    climate = payload["climate_forecast"]
    assert isinstance(climate, dict)
    labels = payload["land_cost_labels"]
    assert isinstance(labels, dict)

    print(f"Saved: {output_path}")
    print(f"Location: {analysis['latitude']}, {analysis['longitude']}")
    print("")
    print(f"- Air quality index: {analysis['aqi']} ({payload['aqi_status']})")
    print(f"- Ground stability: {analysis['ground_stability']}")
    print(
        "- Risks: "
        f"flood {analysis['flood_risk']}, earthquake {analysis['earthquake_risk']}, "
        f"tsunami {analysis['tsunami_risk']}, landslide {analysis['landslide_risk']}"
    )
    print(f"- Land cost: {labels['full']}")
    print(
        f"- Climate: {climate['avg_temperature']}C, {climate['avg_humidity']}% humidity, "
        f"{climate['disaster_trend'].lower()}"
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        coordinate = parse_coordinates(args.lat, args.lon)
    except CoordinateValidationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INVALID_ARGS

    report = analyze_location(coordinate.latitude, coordinate.longitude)
    payload = build_report_response(report).model_dump(mode="json")

    output_path = args.out or default_output_path(coordinate.latitude, coordinate.longitude)
    write_output(payload, output_path, pretty=args.pretty)
    print_summary(payload, output_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
