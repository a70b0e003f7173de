#!/usr/bin/env python3
"""
availmap - shared availability calendar

A CLI and web server for collecting which days people are free and
showing the group heatmap.

Usage:
    python -m availmap [options]
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from availmap.config.loader import load_config, get_database_path
from availmap.engine.aggregation import aggregate, heatmap_cells
from availmap.engine.calendar import CalendarUniverse
from availmap.errors import ValidationError
from availmap.models.queries import read_document, write_document
from availmap.models.schema import get_connection, ensure_database

logger = logging.getLogger("availmap")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all CLI flags."""
    parser = argparse.ArgumentParser(
        prog='availmap',
        description='Shared availability calendar'
    )

    views = parser.add_mutually_exclusive_group()
    views.add_argument('--heatmap', action='store_true',
                       help='Show month grids with availability counts (default)')
    views.add_argument('--participants', action='store_true',
                       help='List participants')
    views.add_argument('--submit', metavar='NAME',
                       help='Register or update NAME with --dates')

    parser.add_argument('--dates', nargs='+', metavar='DATE', default=[],
                        help='Dates (YYYY-MM-DD) for --submit')

    # Output options
    parser.add_argument('--json', action='store_true',
                        help='Output as JSON')
    parser.add_argument('--no-color', action='store_true',
                        help='Disable colors')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose output')

    # Web server
    parser.add_argument('--serve', action='store_true',
                        help='Start web server')
    parser.add_argument('--port', type=int, default=8080,
                        help='Port for web server (default: 8080)')
    parser.add_argument('--host', default='0.0.0.0',
                        help='Host for web server (default: 0.0.0.0)')
    parser.add_argument('--no-browser', action='store_true',
                        help='Don\'t open browser on serve')

    return parser


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config()
    color_enabled = not args.no_color and config["display"].get("color_enabled", True)

    if args.serve:
        _run_serve(config, args)
        return

    universe = CalendarUniverse.from_config(config)
    conn = get_connection(get_database_path(config))
    ensure_database(conn)

    try:
        if args.submit is not None:
            code = _run_submit(conn, universe, args)
            if code:
                sys.exit(code)
            return

        mapping = read_document(conn)

        if args.participants:
            if args.json:
                print(json.dumps({"participants": list(mapping)}, ensure_ascii=False, indent=2))
            else:
                from availmap.reports.schedule import generate_participants
                print(generate_participants(mapping, universe, color_enabled))
            return

        if args.json:
            heatmap = aggregate(mapping, universe)
            print(json.dumps({"cells": heatmap_cells(heatmap)}, indent=2))
        else:
            from availmap.reports.schedule import generate_heatmap
            print(generate_heatmap(mapping, universe, config, color_enabled))
    finally:
        conn.close()


def _run_submit(conn, universe: CalendarUniverse, args) -> int:
    """Submit from the command line. Returns the exit code."""
    from availmap.engine.session import build_submission

    invalid = [d for d in args.dates if not universe.is_valid_date(d)]
    if invalid:
        print(f"Error: dates outside the calendar window: {', '.join(invalid)}")
        return 2

    mapping = read_document(conn)
    try:
        updated = build_submission(args.submit, args.dates, mapping, universe)
    except ValidationError as e:
        print(f"Error: {e}")
        return 2

    write_document(conn, updated)
    name = args.submit.strip()
    verb = "updated" if name in mapping else "registered"
    logger.info("Wrote %d date(s) for %r", len(updated[name]), name)
    print(f"{name}: availability {verb} ({len(updated[name])} days).")
    return 0


def _run_serve(config, args):
    """Start the web server."""
    try:
        import uvicorn
    except ImportError:
        print("Error: The web server requires additional dependencies.")
        print("Install them with: python -m pip install fastapi uvicorn[standard] aiosqlite pydantic")
        sys.exit(1)

    from availmap.server.app import create_app
    app = create_app(config=config)

    url = f"http://{args.host}:{args.port}"
    print(f"\nStarting availmap at {url}")
    print("Press Ctrl+C to stop\n")

    if not args.no_browser:
        import webbrowser
        import threading
        threading.Timer(1.0, webbrowser.open, args=[f"{url}/docs"]).start()

    uvicorn.run(app, host=args.host, port=args.port, log_level="info")


if __name__ == '__main__':
    main()
