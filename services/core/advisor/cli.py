"""
Command-line entry point for the strategy advisor.

Usage:
    python -m advisor.cli report snapshot.json
    python -m advisor.cli report - --explain --symbol 600519 < snapshot.json
    python -m advisor.cli serve --port 8080
"""

import argparse
import json
import logging
import sys

from .config import get_settings
from .signals.engine import analyze_payload, render_report
from .signals.snapshot import InvalidSnapshotError

logger = logging.getLogger(__name__)

EXIT_INVALID_INPUT = 2


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="advisor",
        description="Strategy signal and advice engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  advisor report snapshot.json
  advisor report - --explain < snapshot.json
  advisor serve --host 127.0.0.1 --port 8080
        """
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    report = subparsers.add_parser("report", help="Print the advice report for one snapshot as JSON")
    report.add_argument(
        "source",
        help="Path to a JSON indicator snapshot, or - for stdin"
    )
    report.add_argument(
        "--symbol",
        default=None,
        help="Instrument label carried into the report"
    )
    report.add_argument(
        "--explain",
        action="store_true",
        help="Include structured explanation (drivers, risks, notes)"
    )
    report.add_argument(
        "--debug",
        action="store_true",
        help="Include full debug trace"
    )

    serve = subparsers.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default=None, help="Bind host (default: from settings)")
    serve.add_argument("--port", type=int, default=None, help="Bind port (default: from settings)")
    serve.add_argument("--reload", action="store_true", help="Enable auto-reload")

    return parser.parse_args(argv)


def _read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    with open(source, "r", encoding="utf-8") as f:
        return f.read()


def run_report(args) -> int:
    try:
        payload = json.loads(_read_source(args.source))
    except OSError as e:
        print(f"ERROR: cannot read {args.source}: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    except UnicodeDecodeError as e:
        print(f"ERROR: {args.source} is not valid UTF-8: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    except json.JSONDecodeError as e:
        print(f"ERROR: {args.source} is not valid JSON: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    try:
        report = analyze_payload(payload, symbol=args.symbol)
    except InvalidSnapshotError as e:
        print("ERROR: invalid indicator snapshot", file=sys.stderr)
        for error in e.errors:
            print(f"  - {error}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    result = render_report(report, explain=args.explain, debug=args.debug)
    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


def run_serve(args) -> int:
    import uvicorn

    settings = get_settings()
    host = args.host or settings.host
    port = args.port or settings.port

    logger.info(f"Starting advisor API on {host}:{port}")
    uvicorn.run(
        "advisor.main:app",
        host=host,
        port=port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=get_settings().get_log_level(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.command == "report":
        return run_report(args)
    return run_serve(args)


if __name__ == "__main__":
    sys.exit(main())
