# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from flightcover.app import (
    list_policies,
    lookup_flight,
    pool_status,
    reconcile_policies,
    resolve_policy_id,
)
from flightcover.config import ConfigurationError, configure_logging
from flightcover.domain.model import format_sui

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from flightcover.domain.policy_sync import ReconciliationReport

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage flight delay insurance policies")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug output, including every identifier check",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("policies", help="List locally cached policies")

    reconcile = subparsers.add_parser(
        "reconcile", help="Reconcile the local policy cache with the insurance pool"
    )
    reconcile.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the repair plan without writing the local cache",
    )

    resolve = subparsers.add_parser(
        "resolve", help="Recommend the policy id to use for a claim"
    )
    resolve.add_argument(
        "policy_id",
        nargs="?",
        default=None,
        help="Policy id you intend to claim against (optional)",
    )

    subparsers.add_parser("pool", help="Show insurance pool membership and balance")

    flight = subparsers.add_parser("flight", help="Look up a flight to prefill a policy")
    flight.add_argument("code", help="IATA flight code, e.g. AA100")

    return parser.parse_args(list(argv))


def _print_report(report: ReconciliationReport, *, dry_run: bool) -> None:
    if report.error is not None:
        print(f"Reconciliation skipped: {report.error}")
        return
    plan = report.plan
    for label, total in plan.counts().items():
        if total:
            print(f"{label}: {total}")
    if plan.is_empty:
        print("Cache and pool are in sync")
    elif dry_run:
        print(f"Would add {len(plan.to_add)} and remove {len(plan.to_remove)} cached policies")
    else:
        print(f"Added {len(plan.to_add)} and removed {len(plan.to_remove)} cached policies")
    for policy_id in plan.ghosts:
        print(f"ghost (live but not in pool): {policy_id}")
    for policy_id in sorted(plan.corrupted_for_cleanup):
        print(f"corrupted pool entry: {policy_id}")


def _run(args: argparse.Namespace) -> None:
    if args.command == "policies":
        records = list_policies()
        if not records:
            print("No cached policies")
        for record in records:
            print(
                f"{record.policy_id}  {record.status:<8} {record.flight_number} "
                f"({record.airline}) departs {record.departure_time}"
            )
    elif args.command == "reconcile":
        report = reconcile_policies(apply=not args.dry_run)
        _print_report(report, dry_run=args.dry_run)
    elif args.command == "resolve":
        resolution = resolve_policy_id(args.policy_id)
        print(resolution.recommended or "-")
        print(f"{resolution.rationale}: {resolution.describe()}")
    elif args.command == "pool":
        snapshot = pool_status()
        print(f"Pool {snapshot.pool_id}")
        print(f"Members: {len(snapshot.member_ids)}")
        print(f"Balance: {format_sui(snapshot.balance_mist)} SUI")
    elif args.command == "flight":
        info = lookup_flight(args.code)
        if info is None:
            print(f"No flight information for {args.code}")
            return
        print(f"{info.flight_number} {info.airline}".strip())
        if info.departure_airport or info.arrival_airport:
            print(f"{info.departure_airport or '?'} -> {info.arrival_airport or '?'}")
        if info.scheduled_departure is not None:
            print(f"Scheduled departure: {info.scheduled_departure.isoformat()}")
        if info.departure_delay_minutes is not None:
            print(f"Departure delay: {info.departure_delay_minutes} min")
        if info.status:
            print(f"Status: {info.status}")
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        _run(parsed_args)
    except (ConfigurationError, ValueError):
        log.exception("CLI validation error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point: load ``.env`` and install the SIGINT handler."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
