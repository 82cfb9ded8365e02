"""Practice pay command line interface.

Reads a JSON snapshot file (practices, entries, cheques, directDeposits,
eTransfers, payments) and prints results as JSON.

Usage:
    python -m practice_pay.cli balances snapshot.json --today 2024-04-10
    python -m practice_pay.cli balances snapshot.json --practice-id p1
    python -m practice_pay.cli pay snapshot.json --practice-id p1 --start 2024-03-01 --end 2024-03-31
    python -m practice_pay.cli pay snapshot.json --practice-id p1 --month 2024-03
    python -m practice_pay.cli compare snapshot.json --start 2024-01-01 --end 2024-06-30
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any, Callable, TextIO

from practice_pay.calculators import calculate_month_pay, compute_period_pay
from practice_pay.clock import Clock, SystemClock
from practice_pay.config import get_settings
from practice_pay.logging_config import configure_logging
from practice_pay.models import PracticeNotFoundError, Snapshot, SnapshotError, load_snapshot
from practice_pay.models.entries import falls_within
from practice_pay.services.metrics import ComparisonOptions, calculate_contributions, compare_metrics
from practice_pay.services.reconciliation import BalanceReconciler

logger = logging.getLogger(__name__)


def parse_date(s: str) -> date:
    """Parse an ISO calendar date."""
    try:
        return date.fromisoformat(s)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date: {s!r} (expected YYYY-MM-DD)")


def parse_month(s: str) -> tuple[int, int]:
    """Parse YYYY-MM."""
    try:
        year, month = (int(part) for part in s.split("-"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid month: {s!r} (expected YYYY-MM)")
    if not 1 <= month <= 12:
        raise argparse.ArgumentTypeError(f"invalid month: {s!r}")
    return year, month


class PracticePayCli:
    """Practice pay command line interface."""

    def __init__(self, clock: Clock | None = None, out: TextIO | None = None) -> None:
        self.clock = clock or SystemClock()
        self.out = out or sys.stdout
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="python -m practice_pay.cli",
            description="Practice pay calculation and reconciliation",
        )
        parser.add_argument(
            "--log-level",
            default=None,
            help="Logging level (default: LOG_LEVEL setting)",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        # balances command
        balances = subparsers.add_parser(
            "balances",
            help="Reconcile balances owed by practices",
        )
        balances.add_argument("snapshot", type=Path, help="JSON snapshot file")
        balances.add_argument(
            "--today",
            type=parse_date,
            help="Reference day (default: today, UTC)",
        )
        balances.add_argument(
            "--practice-id",
            help="Reconcile a single practice, even if nothing is owed",
        )

        # pay command
        pay = subparsers.add_parser(
            "pay",
            help="Calculate pay for one practice",
        )
        pay.add_argument("snapshot", type=Path, help="JSON snapshot file")
        pay.add_argument("--practice-id", required=True, help="Practice to calculate")
        window = pay.add_mutually_exclusive_group(required=True)
        window.add_argument(
            "--month",
            type=parse_month,
            help="Calendar month YYYY-MM, split by the practice's pay cycle",
        )
        window.add_argument(
            "--start",
            type=parse_date,
            help="First day of a single pay period (requires --end)",
        )
        pay.add_argument("--end", type=parse_date, help="Last day of the pay period")

        # compare command
        compare = subparsers.add_parser(
            "compare",
            help="Compare performance across practices",
        )
        compare.add_argument("snapshot", type=Path, help="JSON snapshot file")
        compare.add_argument("--start", type=parse_date, help="Window start (inclusive)")
        compare.add_argument("--end", type=parse_date, help="Window end (inclusive)")
        compare.add_argument(
            "--practice-ids",
            type=str,
            help="Comma-separated practice IDs (default: all)",
        )
        compare.add_argument(
            "--include-archived",
            action="store_true",
            help="Include archived practices",
        )

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        configure_logging(parsed.log_level or get_settings().log_level)

        if not parsed.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        handlers: dict[str, Callable[..., int]] = {
            "balances": self._cmd_balances,
            "pay": self._cmd_pay,
            "compare": self._cmd_compare,
        }

        handler = handlers.get(parsed.command)
        if handler is None:
            print(f"Unknown command: {parsed.command}", file=sys.stderr)
            return 1

        try:
            return handler(parsed)
        except (SnapshotError, PracticeNotFoundError) as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

    def _load(self, path: Path) -> Snapshot:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise SnapshotError(f"Cannot read {path}: {e}") from e
        except UnicodeDecodeError as e:
            raise SnapshotError(f"{path} is not valid UTF-8: {e}") from e
        except json.JSONDecodeError as e:
            raise SnapshotError(f"{path} is not valid JSON: {e}") from e
        return load_snapshot(data)

    def _emit(self, payload: Any) -> None:
        json.dump(payload, self.out, indent=2)
        self.out.write("\n")

    def _cmd_balances(self, args: argparse.Namespace) -> int:
        """Reconcile balances."""
        snapshot = self._load(args.snapshot)
        today = args.today or self.clock.today()
        reconciler = BalanceReconciler(get_settings())

        if args.practice_id is not None:
            practice = snapshot.find_practice(args.practice_id)

            def owned(records):
                return [r for r in records if str(r.practice_id) == str(practice.id)]

            record = reconciler.reconcile(
                practice,
                owned(snapshot.entries),
                owned(snapshot.cheques),
                owned(snapshot.direct_deposits),
                owned(snapshot.e_transfers),
                today,
            )
            self._emit({"today": today.isoformat(), "balance": record.to_dict()})
            return 0

        records = reconciler.calculate_practice_balances(
            snapshot.practices,
            snapshot.entries,
            snapshot.cheques,
            snapshot.direct_deposits,
            snapshot.e_transfers,
            today,
        )
        logger.info("Reconciled %d reportable practice(s) as of %s", len(records), today)
        self._emit({"today": today.isoformat(), "items": [r.to_dict() for r in records]})
        return 0

    def _cmd_pay(self, args: argparse.Namespace) -> int:
        """Calculate pay for a period or a month."""
        snapshot = self._load(args.snapshot)
        practice = snapshot.find_practice(args.practice_id)
        entries = [e for e in snapshot.entries if str(e.practice_id) == str(practice.id)]

        if args.month is not None:
            year, month = args.month
            in_month = [
                e for e in entries if (e.anchor_date.year, e.anchor_date.month) == (year, month)
            ]
            result = calculate_month_pay(practice, in_month, year, month)
            self._emit(
                {
                    "practiceId": practice.id,
                    "month": f"{year:04d}-{month:02d}",
                    "calculatedPay": str(result.calculated_pay),
                    "basePayOwed": str(result.base_pay_owed),
                    "productionPayComponent": str(result.production_pay_component),
                    "productionTotal": str(result.production_total),
                    "payStructure": result.pay_structure,
                    "payPeriods": [
                        {
                            **detail.period.to_dict(),
                            "base": str(detail.base),
                            "production": str(detail.production),
                            "final": str(detail.final),
                        }
                        for detail in result.pay_periods
                    ],
                }
            )
            return 0

        if args.end is None:
            print("ERROR: --start requires --end", file=sys.stderr)
            return 1
        if args.end < args.start:
            print("ERROR: --end is before --start", file=sys.stderr)
            return 1

        in_period = [e for e in entries if falls_within(e, args.start, args.end)]
        result = compute_period_pay(practice, in_period)
        self._emit(
            {
                "practiceId": practice.id,
                "period": {"start": args.start.isoformat(), "end": args.end.isoformat()},
                **result.to_dict(),
            }
        )
        return 0

    def _cmd_compare(self, args: argparse.Namespace) -> int:
        """Compare practices."""
        snapshot = self._load(args.snapshot)
        practice_ids = None
        if args.practice_ids is not None:
            practice_ids = [pid.strip() for pid in args.practice_ids.split(",") if pid.strip()]

        result = compare_metrics(
            snapshot.practices,
            snapshot.entries,
            snapshot.payments,
            ComparisonOptions(
                start_date=args.start,
                end_date=args.end,
                practice_ids=practice_ids,
                active_only=not args.include_archived,
            ),
            outstanding_threshold=get_settings().outstanding_insight_threshold,
        )
        payload = result.to_dict()
        payload["contributions"] = [
            {
                "practiceId": m.practice_id,
                "payContribution": str(m.pay_contribution),
                "productionContribution": str(m.production_contribution),
            }
            for m in calculate_contributions(result.metrics)
        ]
        self._emit(payload)
        return 0


def main() -> int:
    """CLI entry point."""
    cli = PracticePayCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
