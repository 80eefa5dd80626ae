"""
Command-line interface for FinForecast.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import warnings

from finforecast import __version__
from finforecast.core.config import Config, load_config, load_mapping
from finforecast.core.context import RequestContext
from finforecast.core.errors import FinForecastError
from finforecast.core.service import ProjectionRequest, ProjectionService
from finforecast.core.utils import coerce_date
from finforecast.kpi import summary
from finforecast.providers.memory import (
    InMemoryAccountProvider,
    InMemoryRecurringExpenseProvider,
)
from finforecast.sensitivity import Sweep, run_sensitivity

logger = logging.getLogger("finforecast.cli")


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy scalars/arrays, dates and pandas objects."""

    def default(self, obj):
        import numpy as np
        import pandas as pd

        if isinstance(obj, np.ndarray):
            return obj.tolist()
        elif isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.datetime64):
            return str(obj)
        elif isinstance(obj, pd.DataFrame):
            return obj.to_dict("records")
        elif isinstance(obj, pd.Series):
            return obj.to_dict()
        elif hasattr(obj, "isoformat"):
            return obj.isoformat()
        return super().default(obj)


def _save_json(path: str, data: dict) -> None:
    """Save data as JSON to file path ('-' for stdout)."""
    if path == "-":
        json.dump(data, sys.stdout, indent=2, cls=NumpyEncoder)
        sys.stdout.write("\n")
        return
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, cls=NumpyEncoder)


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def _load_config(args) -> Config:
    config = load_config(args.config)
    if getattr(args, "start", None):
        start = coerce_date(args.start, "--start")
        config = Config.from_dict({**config.to_dict(), "start_date": start.isoformat()})
    return config


def _service(args) -> ProjectionService:
    """Providers over the snapshot file, or the config file's ``snapshot`` section."""
    if args.snapshot:
        data = load_mapping(args.snapshot)
    else:
        data = load_mapping(args.config).get("snapshot") or {}
    return ProjectionService(
        InMemoryAccountProvider(data), InMemoryRecurringExpenseProvider(data)
    )


def cmd_example(_) -> int:
    """Print a minimal config and snapshot."""
    example = {
        "config": {
            "time_horizon_years": 5,
            "inflation_rate": 0.02,
            "annual_salary": 75000,
            "annual_salary_growth": 0.03,
            "monthly_expenses": 3000,
            "annual_expense_growth": 0.02,
            "monthly_savings_rate": 0.2,
            "federal_tax_brackets": [
                {"up_to_income": 50000, "rate": 0.15},
                {"up_to_income": 100000, "rate": 0.20},
                {"up_to_income": 0, "rate": 0.26},
            ],
            "regional_tax_brackets": [
                {"up_to_income": 45000, "rate": 0.0505},
                {"up_to_income": 90000, "rate": 0.0915},
                {"up_to_income": 0, "rate": 0.1116},
            ],
            "investment_returns": {"tfsa": 0.07, "rrsp": 0.07},
            "asset_appreciation": {"real_estate": 0.03},
            "savings_allocation": {"tfsa": 0.6, "rrsp": 0.4},
            "events": [
                {
                    "id": "bonus",
                    "type": "one_time_income",
                    "date": "2027-03-01",
                    "parameters": {"amount": 5000},
                    "recurrence": {"frequency": "annually"},
                }
            ],
        },
        "snapshot": {
            "accounts": [
                {"id": "tfsa", "type": "tfsa", "is_asset": True, "balance": 25000},
                {"id": "rrsp", "type": "rrsp", "is_asset": True, "balance": 40000},
                {"id": "mortgage", "type": "mortgage", "is_asset": False,
                 "balance": -400000},
            ],
            "debts": [
                {"account_id": "mortgage", "kind": "mortgage", "annual_rate": 0.03,
                 "amortization_months": 300, "payment_amount": 1896,
                 "payment_frequency": "monthly"}
            ],
            "recurring_expenses": [
                {"id": "phone", "amount": 60, "frequency": "monthly"}
            ],
        },
    }
    json.dump(example, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


def cmd_run(args) -> int:
    """Run a projection and export JSON results."""
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("default")
            config = _load_config(args)
        service = _service(args)
        result = service.calculate_projection(
            RequestContext(args.user), ProjectionRequest(config)
        )

        payload = result.to_dict()
        payload["summary"] = summary(result, config.inflation_rate)
        _save_json(args.output, payload)

        if args.csv:
            result.to_frame().to_csv(args.csv)

        for w in result.warnings:
            print(f"Warning [{w.code}]: {w.message}", file=sys.stderr)
        if args.output != "-":
            print(f"Results saved to {args.output}")
        return 0

    except (FinForecastError, OSError, ValueError) as e:
        print(f"Error running projection: {e}", file=sys.stderr)
        return 1


def cmd_validate(args) -> int:
    """Validate a config file."""
    try:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            config = load_config(args.input)
        notes = [str(w.message) for w in caught]
    except (FinForecastError, OSError, ValueError) as e:
        if args.format == "json":
            json.dump({"is_valid": False, "error": str(e)}, sys.stdout, indent=2)
            sys.stdout.write("\n")
        else:
            print(f"Validation failed: {e}", file=sys.stderr)
        return 1

    if args.format == "json":
        report = {
            "is_valid": True,
            "warnings": notes,
            "time_horizon_years": config.time_horizon_years,
            "events": len(config.events),
        }
        json.dump(report, sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        print(
            f"Config is valid: {config.time_horizon_years} years, "
            f"{len(config.events)} events"
        )
        for note in notes:
            print(f"Warning: {note}")
    return 0


def cmd_sensitivity(args) -> int:
    """Sweep one parameter and export the outcome table."""
    try:
        config = _load_config(args)
        snapshot = _service(args).load_snapshot(RequestContext(args.user))
        values = args.values
        if values is None and args.min is not None and args.max is not None:
            values = Sweep(args.min, args.max, args.step or 0.0).values()
        df = run_sensitivity(config, snapshot, args.parameter, values)
    except (FinForecastError, OSError, ValueError) as e:
        print(f"Error running sensitivity analysis: {e}", file=sys.stderr)
        return 1

    if args.output == "-":
        print(df.to_string(index=False))
    elif args.output.endswith(".csv"):
        df.to_csv(args.output, index=False)
    else:
        _save_json(args.output, {"parameter": args.parameter, "rows": df})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="finforecast", description="FinForecast - Net worth projection engine"
    )
    parser.add_argument(
        "--version", action="version", version=f"FinForecast {__version__}"
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="-v for INFO, -vv for DEBUG"
    )

    subparsers = parser.add_subparsers(
        dest="cmd", required=True, help="Available commands"
    )

    # Example command
    example_parser = subparsers.add_parser(
        "example", help="Print a minimal config and snapshot"
    )
    example_parser.set_defaults(func=cmd_example)

    # Run command
    run_parser = subparsers.add_parser(
        "run", help="Run a projection and export JSON results"
    )
    run_parser.add_argument(
        "-c", "--config", required=True, help="Config file (YAML or JSON)"
    )
    run_parser.add_argument(
        "-s", "--snapshot", help="Accounts/debts/recurring expenses file (YAML or JSON)"
    )
    run_parser.add_argument(
        "-o", "--output", default="-", help="Output results JSON file ('-' = stdout)"
    )
    run_parser.add_argument("--csv", help="Also write the monthly frame as CSV")
    run_parser.add_argument("--start", help="Override start date (YYYY-MM-DD)")
    run_parser.add_argument("--user", default="cli", help="User id for the request")
    run_parser.set_defaults(func=cmd_run)

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a config file")
    validate_parser.add_argument(
        "-i", "--input", required=True, help="Config file (YAML or JSON)"
    )
    validate_parser.add_argument(
        "--format", choices=["human", "json"], default="human", help="Output format"
    )
    validate_parser.set_defaults(func=cmd_validate)

    # Sensitivity command
    sens_parser = subparsers.add_parser(
        "sensitivity", help="Sweep one config parameter"
    )
    sens_parser.add_argument(
        "-c", "--config", required=True, help="Config file (YAML or JSON)"
    )
    sens_parser.add_argument("-s", "--snapshot", help="Snapshot file (YAML or JSON)")
    sens_parser.add_argument(
        "-p",
        "--parameter",
        required=True,
        help="Parameter name or map path, e.g. investment_returns.tfsa",
    )
    sens_parser.add_argument("--values", type=float, nargs="+", help="Values to test")
    sens_parser.add_argument("--min", type=float, help="Sweep minimum")
    sens_parser.add_argument("--max", type=float, help="Sweep maximum")
    sens_parser.add_argument("--step", type=float, help="Sweep step")
    sens_parser.add_argument(
        "-o", "--output", default="-", help="Output file (.csv or .json, '-' = stdout)"
    )
    sens_parser.add_argument("--start", help="Override start date (YYYY-MM-DD)")
    sens_parser.add_argument("--user", default="cli", help="User id for the request")
    sens_parser.set_defaults(func=cmd_sensitivity)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
