"""CLI entry point for the labor forecast engine.

Usage::

    labor-forecast forecast HVAC_COMMERCIAL [--weeks 13] [--buffer 10]
    labor-forecast deficits PLUMBING_COMMERCIAL [--threshold 40]
    labor-forecast shortages
    labor-forecast hiring-plan HVAC_CUSTOM [--horizon 12]

Each command opens an async database engine from settings, runs the
corresponding service call, and prints the result as JSON to stdout.
"""

from __future__ import annotations

import argparse
import asyncio
import enum
import json
import logging
import sys
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from typing import Any

from labor_forecast.core.config import get_settings
from labor_forecast.core.database import create_engine
from labor_forecast.core.models import Division
from labor_forecast.forecast.errors import ForecastConfigError, ForecastError
from labor_forecast.forecast.service import LaborForecastService

logger = logging.getLogger(__name__)

_DIVISIONS = [d.value for d in Division]


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="labor-forecast",
        description="Forecast labor demand, supply and staffing gaps per division.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: from settings).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    forecast = sub.add_parser("forecast", help="Generate a fresh forecast.")
    forecast.add_argument("division", choices=_DIVISIONS)
    forecast.add_argument("--start", type=date.fromisoformat, default=None, help="Start date (YYYY-MM-DD).")
    forecast.add_argument("--weeks", type=int, default=None, help="Number of weeks to forecast (1-52).")
    forecast.add_argument("--buffer", type=float, default=None, help="Safety buffer percentage.")
    forecast.add_argument(
        "--exclude-quoted",
        action="store_true",
        default=False,
        help="Ignore phases of projects that are only quoted.",
    )

    deficits = sub.add_parser("deficits", help="List weeks with a labor deficit.")
    deficits.add_argument("division", choices=_DIVISIONS)
    deficits.add_argument("--threshold", type=float, default=0.0, help="Minimum deficit hours.")

    sub.add_parser("shortages", help="List HIGH/CRITICAL weeks across all divisions.")

    hiring = sub.add_parser("hiring-plan", help="Recommend hires for a division.")
    hiring.add_argument("division", choices=_DIVISIONS)
    hiring.add_argument("--horizon", type=int, default=None, help="Planning horizon in weeks.")

    return parser.parse_args(argv)


def _to_jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return _to_jsonable(asdict(value))
    if isinstance(value, dict):
        return {k: _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_to_jsonable(v) for v in value]
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, datetime | date):
        return value.isoformat()
    return value


def _config_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.weeks is not None:
        overrides["forecast_weeks"] = args.weeks
    if args.buffer is not None:
        overrides["buffer_percentage"] = args.buffer
    if args.exclude_quoted:
        overrides["include_quoted_projects"] = False
    return overrides


async def _dispatch(service: LaborForecastService, args: argparse.Namespace) -> Any:
    if args.command == "forecast":
        return await service.generate_forecast(args.division, args.start, _config_overrides(args))
    if args.command == "deficits":
        return await service.get_deficits(args.division, args.threshold)
    if args.command == "shortages":
        return await service.get_critical_shortages()
    return await service.generate_hiring_plan(args.division, args.horizon)


async def _run(args: argparse.Namespace) -> int:
    """Create dependencies and execute the requested command."""
    settings = get_settings()
    engine, session_factory = create_engine(settings)
    service = LaborForecastService.from_session_factory(session_factory, settings=settings)
    try:
        result = await _dispatch(service, args)
    except ForecastConfigError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2
    except ForecastError as exc:
        logger.error("Forecast command %s failed: %s", args.command, exc)
        return 1
    finally:
        await engine.dispose()

    print(json.dumps(_to_jsonable(result), indent=2))
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args = _parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level or get_settings().log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    exit_code = asyncio.run(_run(args))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
