"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import functools
import http.server
import json
import sys
from pathlib import Path

import requests
from pydantic import ValidationError

from herring_forecast import __version__
from herring_forecast.analysis.normalize import InputDataError
from herring_forecast.analysis.pipeline import ForecastRun, run_forecast
from herring_forecast.analysis.serialization import (
    config_to_dict,
    predictions_to_dict,
    report_to_dict,
)
from herring_forecast.config import get_settings
from herring_forecast.datasources.spawn_index import read_spawn_csv
from herring_forecast.flows.build import SITE_DIR, build_all
from herring_forecast.flows.fetch import fetch_all


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="herring-forecast",
        description="Location-level herring spawn summaries and next-season forecasts",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show application info")

    # 'forecast' command - run the pipeline on a local CSV
    forecast_parser = subparsers.add_parser("forecast", help="Forecast from a spawn index CSV")
    forecast_parser.add_argument("csv", type=Path, help="Path to the spawn index CSV")
    _add_config_arguments(forecast_parser)
    forecast_parser.add_argument(
        "--min-measured",
        type=int,
        default=None,
        help="Minimum measured events per location (default: 2)",
    )
    forecast_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write predictions JSON to this path",
    )
    forecast_parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Number of top locations to print (default: 10)",
    )

    # 'refresh' command - fetch data and build site
    refresh_parser = subparsers.add_parser("refresh", help="Fetch data and build site")
    refresh_parser.add_argument(
        "--csv",
        type=Path,
        default=None,
        help="Import a local spawn index CSV instead of downloading",
    )
    refresh_parser.add_argument(
        "--force",
        action="store_true",
        help="Download even if the stored copy is fresh",
    )
    _add_config_arguments(refresh_parser)

    # 'serve' command - serve built site locally
    serve_parser = subparsers.add_parser("serve", help="Serve site locally")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to serve on (default: api_port from settings)",
    )

    return parser


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--target-year",
        type=int,
        default=None,
        help="Year to forecast (default: current year)",
    )
    parser.add_argument("--window-start", type=int, default=None, help="First analysis year")
    parser.add_argument("--window-end", type=int, default=None, help="Last analysis year")


def _print_top(run: ForecastRun, limit: int) -> None:
    ranked = sorted(run.predictions, key=lambda p: (-p.spawn_probability, p.location_code))
    if not ranked or limit <= 0:
        return
    print(f"\nTop {min(limit, len(ranked))} locations for {run.config.target_year}:")
    for p in ranked[:limit]:
        print(
            f"  {p.location_code:>6}  {p.location_name[:32]:<32}  "
            f"{p.spawn_probability * 100:5.1f}%  "
            f"{p.predicted_date.strftime('%b %d')}  "
            f"{p.predicted_biomass:8.1f} t"
        )


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    config = settings.forecast_config()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Debug: {settings.debug}")
    print(f"Target year: {config.target_year}")
    print(f"Analysis window: {config.window_label}")
    print(f"Source URL: {settings.source_url or '(not set)'}")
    return 0


def cmd_forecast(args: argparse.Namespace) -> int:
    """Handle the 'forecast' command: run the pipeline on a local CSV."""
    settings = get_settings()
    try:
        config = settings.forecast_config(
            args.target_year,
            window_start_year=args.window_start,
            window_end_year=args.window_end,
            min_measured_events=args.min_measured,
        )
        rows = read_spawn_csv(args.csv)
        run = run_forecast(rows, config)
    except (InputDataError, ValidationError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.debug:
        print(f"Debug mode enabled. Config: {config_to_dict(config)}")

    print(f"Forecast {config.target_year} from {config.window_label} ({args.csv})")
    for line in run.report.summary_lines():
        print(line)
    _print_top(run, args.limit)

    if args.output is not None:
        payload = {
            "config": config_to_dict(config),
            "report": report_to_dict(run.report),
            "predictions": predictions_to_dict(run.predictions),
        }
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"\nPredictions written to {args.output}")
    return 0


def cmd_refresh(args: argparse.Namespace) -> int:
    """Handle the 'refresh' command: fetch data then build site."""
    settings = get_settings()
    try:
        config = settings.forecast_config(
            args.target_year,
            window_start_year=args.window_start,
            window_end_year=args.window_end,
        )
        print("Fetching spawn index...")
        fetch_all(source_url=settings.source_url, csv_path=args.csv, force=args.force)

        print("Building site...")
        result = build_all(config)
    except (ValueError, OSError, requests.RequestException) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if "error" in result:
        print(f"Error: {result['error']}", file=sys.stderr)
        return 1

    print("Done.")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Handle the 'serve' command: serve the built site locally."""
    settings = get_settings()
    port = args.port if args.port is not None else settings.api_port
    site_dir = SITE_DIR

    if not site_dir.exists():
        print("No site directory found. Run 'herring-forecast refresh' first.", file=sys.stderr)
        return 1

    handler = functools.partial(http.server.SimpleHTTPRequestHandler, directory=str(site_dir))

    with http.server.HTTPServer(("", port), handler) as server:
        print(f"Serving site on http://localhost:{port}/ (Ctrl+C to stop)")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            print("\nServer stopped.")

    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "info": cmd_info,
        "forecast": cmd_forecast,
        "refresh": cmd_refresh,
        "serve": cmd_serve,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
