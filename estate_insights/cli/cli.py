"""
estate-insights CLI - similar properties, heatmap cells and investment comparison.

Usage:
    estate-insights similar --dataset.source houses.csv --price 650000 \\
        --bedrooms 3 --bathrooms 2 --living-area 1800 --grade 7 \\
        --lat 51.05 --lng -114.07
    estate-insights similar --dataset.source houses.csv --property-id 6762810635
    estate-insights heatmap --dataset.source houses.csv --min-price 300000 \\
        --max-price 900000 --grade-tier premium
    estate-insights invest --dataset.source houses.csv --property-id 6762810635 \\
        --rate 7.5 --tenure 20 --down-payment 20 --rent 3000

All commands print JSON to stdout. Logs go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from ..data import GRADE_TIERS, filter_properties, get_by_id
from ..investment import FinancingParams, InvestmentError
from ..pipeline import ValuationPipeline
from ..similarity import TargetFeatureVector, rank
from ..spatial import SpatialError, aggregate
from .config import (
    add_args,
    build_pipeline_config,
    check_config,
    config_to_dict,
    load_env,
    setup_logging,
)

logger = logging.getLogger(__name__)


class CLIError(Exception):
    """Raised for user-facing CLI failures."""

    pass


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


async def _load(pipeline: ValuationPipeline):
    dataset = await pipeline.loader.get()
    if pipeline.loader.last_error is not None:
        raise CLIError(f"Cannot load dataset: {pipeline.loader.last_error}")
    return dataset


def _resolve_target(args: argparse.Namespace, dataset) -> TargetFeatureVector:
    """Build the target from --property-id or the explicit feature flags."""
    if args.property_id:
        record = get_by_id(dataset, args.property_id)
        if record is None:
            raise CLIError(f"Property not found: {args.property_id}")
        return TargetFeatureVector.from_record(record)

    required = ("price", "bedrooms", "bathrooms", "living_area", "grade", "lat", "lng")
    missing = [name for name in required if getattr(args, name) is None]
    if missing:
        flags = ", ".join(f"--{m.replace('_', '-')}" for m in missing)
        raise CLIError(f"Missing target features: {flags} (or pass --property-id)")

    return TargetFeatureVector(
        price=args.price,
        bedrooms=args.bedrooms,
        bathrooms=args.bathrooms,
        living_area=args.living_area,
        grade=args.grade,
        latitude=args.lat,
        longitude=args.lng,
        condition=args.condition or 0,
    )


def _financing_from_args(args: argparse.Namespace) -> FinancingParams:
    params = FinancingParams(
        annual_rate_percent=args.rate,
        tenure_years=args.tenure,
        down_payment_percent=args.down_payment,
        appreciation_percent=args.appreciation,
        monthly_rent=args.rent,
    )
    params.validate()
    return params


async def cmd_similar(args: argparse.Namespace, pipeline: ValuationPipeline) -> int:
    """Execute the similar command."""
    dataset = await _load(pipeline)
    target = _resolve_target(args, dataset)
    exclude = (args.property_id,) if args.property_id else ()

    ranked = rank(dataset.records, target, k=args.top_k, exclude_ids=exclude)
    _print_json([c.to_dict() for c in ranked])
    return 0


async def cmd_heatmap(args: argparse.Namespace, pipeline: ValuationPipeline) -> int:
    """Execute the heatmap command."""
    dataset = await _load(pipeline)

    price_range = None
    if args.min_price is not None or args.max_price is not None:
        price_range = (
            args.min_price if args.min_price is not None else 0.0,
            args.max_price if args.max_price is not None else float("inf"),
        )

    points = filter_properties(dataset, price_range, args.grade_tier)
    cells = aggregate(points, cell_size=args.cell_size)
    _print_json(
        {
            "property_count": len(points),
            "cells": [c.to_dict() for c in cells],
        }
    )
    return 0


async def cmd_invest(args: argparse.Namespace, pipeline: ValuationPipeline) -> int:
    """Execute the invest command."""
    financing = _financing_from_args(args)
    dataset = await _load(pipeline)
    target = _resolve_target(args, dataset)

    result = await pipeline.run(
        target,
        k=args.top_k,
        financing=financing,
        estimate_rent=args.estimate_rent,
        exclude_ids=(args.property_id,) if args.property_id else (),
    )
    _print_json([c.to_dict() for c in result.comparisons])
    return 0


def _add_target_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--property-id",
        dest="property_id",
        default=None,
        metavar="ID",
        help="Use an existing dataset record as the target",
    )
    parser.add_argument("--price", type=float, default=None)
    parser.add_argument("--bedrooms", type=float, default=None)
    parser.add_argument("--bathrooms", type=float, default=None)
    parser.add_argument("--living-area", dest="living_area", type=float, default=None)
    parser.add_argument("--grade", type=float, default=None)
    parser.add_argument("--condition", type=float, default=None)
    parser.add_argument("--lat", type=float, default=None)
    parser.add_argument("--lng", type=float, default=None)


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    load_env()

    parser = argparse.ArgumentParser(
        prog="estate-insights",
        description="Similar-property ranking, heatmap zones and investment comparison",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    similar_parser = subparsers.add_parser(
        "similar",
        help="Rank the most similar properties",
    )
    add_args(similar_parser)
    _add_target_args(similar_parser)

    heatmap_parser = subparsers.add_parser(
        "heatmap",
        help="Aggregate properties into heatmap grid cells",
    )
    add_args(heatmap_parser)
    heatmap_parser.add_argument("--min-price", dest="min_price", type=float, default=None)
    heatmap_parser.add_argument("--max-price", dest="max_price", type=float, default=None)
    heatmap_parser.add_argument(
        "--grade-tier",
        dest="grade_tier",
        choices=list(GRADE_TIERS),
        default="all",
    )

    invest_parser = subparsers.add_parser(
        "invest",
        help="Compare similar properties as investments",
    )
    add_args(invest_parser)
    _add_target_args(invest_parser)
    defaults = FinancingParams()
    invest_parser.add_argument(
        "--rate", type=float, default=defaults.annual_rate_percent, help="Annual interest rate (%%)"
    )
    invest_parser.add_argument(
        "--tenure", type=int, default=defaults.tenure_years, help="Loan tenure (years)"
    )
    invest_parser.add_argument(
        "--down-payment",
        dest="down_payment",
        type=float,
        default=defaults.down_payment_percent,
        help="Down payment (%% of price)",
    )
    invest_parser.add_argument(
        "--appreciation",
        type=float,
        default=defaults.appreciation_percent,
        help="Expected yearly appreciation (%%)",
    )
    invest_parser.add_argument(
        "--rent", type=float, default=defaults.monthly_rent, help="Expected monthly rent"
    )
    invest_parser.add_argument(
        "--estimate-rent",
        dest="estimate_rent",
        action="store_true",
        help="Estimate rent per property instead of using --rent",
    )

    return parser.parse_args(args)


COMMANDS = {
    "similar": cmd_similar,
    "heatmap": cmd_heatmap,
    "invest": cmd_invest,
}


def main(args: list[str] | None = None) -> int:
    """CLI entry point."""
    config = parse_args(args)
    setup_logging(config.log_level)

    try:
        check_config(config)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    logger.debug(f"Config: {config_to_dict(config)}")

    command = COMMANDS.get(config.command)
    if command is None:
        print(f"ERROR: Unknown command: {config.command}", file=sys.stderr)
        return 2

    pipeline = ValuationPipeline.create(build_pipeline_config(config))

    try:
        return asyncio.run(command(config, pipeline))
    except (CLIError, InvestmentError, SpatialError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
