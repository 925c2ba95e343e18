"""Console entry point for the study dashboard core."""
from __future__ import annotations

import argparse
import json
import sys
from datetime import date
from typing import List, Optional

from core.auth import AuthContext
from core.errors import DashboardError
from core.log import get_logger
from core.settings import DASHBOARD
from storage.db import init_db


log = get_logger("cli")


def _parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected YYYY-MM-DD, got {value!r}") from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="study-dashboard", description=__doc__ or "")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create tables and apply pending migrations")

    summary = sub.add_parser("summary", help="Print the merged dashboard as JSON")
    summary.add_argument("--owner", required=True, help="Owner e-mail address")
    summary.add_argument("--token", help="Classroom OAuth access token")
    summary.add_argument(
        "--demo",
        action="store_true",
        default=DASHBOARD.demo_mode,
        help="Use the demo assignment set instead of Classroom",
    )
    summary.add_argument("--today", type=_parse_day, default=None, help="Override today's date")

    colors = sub.add_parser("colors", help="List stored course colors")
    colors.add_argument("--owner", required=True, help="Owner e-mail address")
    return parser


def _context(args) -> AuthContext:
    if args.demo:
        log.info("Using demo assignments for %s", args.owner)
        return AuthContext(owner_email=args.owner, demo=True)
    return AuthContext.from_access_token(args.owner, args.token)


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.command == "summary" and not (args.demo or args.token):
        parser.error("summary needs --token, or --demo for the demo assignments")
    try:
        version = init_db()
        if args.command == "init-db":
            print(f"Database ready (schema version {version}).")
            return 0

        from services.api import DashboardService

        service = DashboardService()
        if args.command == "summary":
            payload = service.dashboard(_context(args), args.today or date.today())
        else:
            payload = service.get_course_colors(AuthContext(owner_email=args.owner))
        print(json.dumps(payload, ensure_ascii=False, indent=2, default=str))
        return 0
    except DashboardError as exc:
        log.error("%s failed: %s", args.command, exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
