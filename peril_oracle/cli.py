"""Command-line entry point.

Usage:
    peril-oracle analyze --station ST001 --date 2025-08-15 --lookback 30 [--table]
    peril-oracle snapshot --station ST001
    peril-oracle alerts [--limit 10]
    peril-oracle check --station ST001 --policies policies.json [--date 2025-08-15]

Output is JSON on stdout. Values are printed exactly as computed (no unit
conversion, no rounding), except in the human-readable ``--table`` view.
Errors are printed as a structured error payload and exit with status 1.
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError
from tabulate import tabulate

from peril_oracle.core.config import settings
from peril_oracle.core.errors import InvalidPolicyConfigurationError, PerilOracleError
from peril_oracle.models.analysis import WeatherAnalysis
from peril_oracle.models.policy import InsurancePolicy
from peril_oracle.services.observation_source import ObservationSource
from peril_oracle.services.payout_check import check_station_payouts
from peril_oracle.services.policy_store import InMemoryPolicyRepository
from peril_oracle.services.risk_snapshot import station_risk_report, weather_alerts
from peril_oracle.services.weather_analysis import analyze, utc_today
from peril_oracle.services.weatherxm_client import WeatherXMClient

logger = logging.getLogger(__name__)

_policies_adapter = TypeAdapter(list[InsurancePolicy])


def load_policies(path: Path) -> list[InsurancePolicy]:
    try:
        return _policies_adapter.validate_json(path.read_bytes())
    except OSError as exc:
        raise InvalidPolicyConfigurationError(
            f"Cannot read policy file {path}: {exc.strerror}", path=str(path)
        ) from exc
    except ValidationError as exc:
        raise InvalidPolicyConfigurationError(
            f"Policy file {path} failed validation with {exc.error_count()} errors",
            path=str(path),
            errors=[
                {"loc": [str(p) for p in err["loc"]], "msg": err["msg"]} for err in exc.errors()
            ],
        ) from exc


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


def _print_event_table(analysis: WeatherAnalysis) -> None:
    scores = analysis.risk_scores
    print(f"Station {analysis.station_id} | {analysis.period} ending {analysis.analysis_date}")
    print(
        f"Risk: drought={scores.drought} flood={scores.flood} "
        f"wind={scores.wind} hail={scores.hail}\n"
    )
    if not analysis.trigger_events:
        print("No trigger events.")
        return

    headers = ["Peril", "Severity", "Start", "End", "Days", "Peak", "Average", "Radius (m)"]
    rows = [
        [
            e.event_type.value, e.severity.value, e.start_date, e.end_date,
            e.duration, f"{e.peak_value:.2f}", f"{e.average_value:.2f}", e.affected_area,
        ]
        for e in analysis.trigger_events
    ]
    print(tabulate(rows, headers=headers, tablefmt="github"))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="peril-oracle",
        description="Weather peril detection and parametric payout evaluation",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_analyze = sub.add_parser("analyze", help="Historical peril analysis for a station")
    p_analyze.add_argument("--station", required=True, help="Station ID")
    p_analyze.add_argument("--date", type=date.fromisoformat, default=None,
                           help="Analysis date (YYYY-MM-DD), exclusive end of window; default today (UTC)")
    p_analyze.add_argument("--lookback", type=_positive_int, default=settings.default_lookback_days,
                           help="Lookback window in days")
    p_analyze.add_argument("--table", action="store_true", help="Print events as a table")

    p_snapshot = sub.add_parser("snapshot", help="Risk snapshot of a station's latest reading")
    p_snapshot.add_argument("--station", required=True, help="Station ID")

    p_alerts = sub.add_parser("alerts", help="Alert feed across the station directory")
    p_alerts.add_argument("--limit", type=_positive_int, default=settings.alert_station_limit,
                          help="Maximum number of stations to scan")

    p_check = sub.add_parser("check", help="Evaluate active policies on a station")
    p_check.add_argument("--station", required=True, help="Station ID")
    p_check.add_argument("--policies", type=Path, required=True,
                         help="JSON file holding a list of policies")
    p_check.add_argument("--date", type=date.fromisoformat, default=None,
                         help="Evaluation date (YYYY-MM-DD); default today (UTC)")

    return parser


async def run(args: argparse.Namespace, source: ObservationSource) -> int:
    """Execute one parsed command against ``source``. Returns the exit code."""
    try:
        if args.command == "analyze":
            analysis = await analyze(
                args.station, args.date or utc_today(), args.lookback, source=source
            )
            if args.table:
                _print_event_table(analysis)
            else:
                _print_json(analysis.to_payload())

        elif args.command == "snapshot":
            report = await station_risk_report(args.station, source)
            _print_json(report.model_dump(mode="json"))

        elif args.command == "alerts":
            alerts = await weather_alerts(source, limit=args.limit)
            _print_json({
                "alert_count": len(alerts),
                "alerts": [a.model_dump(mode="json") for a in alerts],
            })

        elif args.command == "check":
            repository = InMemoryPolicyRepository(load_policies(args.policies))
            recommendations = await check_station_payouts(
                args.station, repository, source, today=args.date
            )
            _print_json([r.model_dump(mode="json") for r in recommendations])

    except PerilOracleError as exc:
        logger.error("%s failed: %s", args.command, exc)
        _print_json(exc.to_dict())
        return 1

    return 0


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        stream=sys.stderr,
    )
    args = build_parser().parse_args(argv)
    return asyncio.run(run(args, WeatherXMClient()))


if __name__ == "__main__":
    sys.exit(main())
