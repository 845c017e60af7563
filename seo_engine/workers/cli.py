"""Command-line entrypoint for fetching data and running opportunity analysis."""

from __future__ import annotations

import argparse
import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence

from seo_engine.config import settings
from seo_engine.core.database import close_db, get_session_context, init_db
from seo_engine.core.exceptions import SEOEngineError
from seo_engine.core.logging import setup_logging
from seo_engine.integrations.search_console import SearchConsoleClient
from seo_engine.integrations.shopify import ShopifyCatalogClient
from seo_engine.models.opportunity import OPPORTUNITY_STATUSES
from seo_engine.repositories.opportunity_repository import OpportunityRepository
from seo_engine.services.ingestion import fetch_search_data, sync_catalog
from seo_engine.services.opportunity_analysis import AnalysisOptions, OpportunityAnalysisService

logger = logging.getLogger(__name__)

Command = Callable[[argparse.Namespace], Awaitable[None]]


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(prog="seo-engine", description=__doc__)
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch = subparsers.add_parser("fetch", help="Fetch Search Console data into the store.")
    fetch.add_argument(
        "--days",
        type=int,
        default=settings.analysis_window_days,
        help="Trailing window in days.",
    )
    fetch.add_argument(
        "--country",
        default=settings.default_country,
        help="Country code to filter on, or 'all'.",
    )

    subparsers.add_parser("sync", help="Sync the product catalog from Shopify.")

    analyze = subparsers.add_parser("analyze", help="Analyze stored data for opportunities.")
    analyze.add_argument(
        "--min-impressions",
        type=int,
        default=settings.default_min_impressions,
        help="Minimum total impressions per query.",
    )
    analyze.add_argument(
        "--max-position",
        type=float,
        default=settings.default_max_position,
        help="Maximum average position per query.",
    )
    analyze.add_argument(
        "--days",
        type=int,
        default=settings.analysis_window_days,
        help="Trailing window in days.",
    )
    analyze.add_argument(
        "--country",
        default=None,
        help="Only analyze rows stored for this country.",
    )

    list_parser = subparsers.add_parser("list", help="List stored opportunities.")
    list_parser.add_argument("--status", choices=OPPORTUNITY_STATUSES, default=None)
    list_parser.add_argument("--limit", type=int, default=20)
    list_parser.add_argument("--sort", choices=["inserted", "score"], default="score")

    set_status = subparsers.add_parser("set-status", help="Move an opportunity to a new status.")
    set_status.add_argument("opportunity_id", type=int)
    set_status.add_argument("status", choices=OPPORTUNITY_STATUSES)

    subparsers.add_parser("init-db", help="Create database tables.")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)


async def run_fetch(args: argparse.Namespace) -> None:
    async with SearchConsoleClient() as client, get_session_context() as session:
        result = await fetch_search_data(session, client, days=args.days, country=args.country)

    print(f"Stored {result.rows_stored} query rows")
    for row in result.top_queries:
        print(
            f"  {row.query}: {row.total_impressions} impressions, "
            f"{row.total_clicks} clicks, position {row.avg_position:.1f}"
        )


async def run_sync(args: argparse.Namespace) -> None:
    async with ShopifyCatalogClient() as client, get_session_context() as session:
        products = await sync_catalog(session, client)
    print(f"Synced {len(products)} products")


async def run_analyze(args: argparse.Namespace) -> None:
    options = AnalysisOptions(
        min_impressions=args.min_impressions,
        max_position=args.max_position,
        window_days=args.days,
        country=args.country,
    )
    async with get_session_context() as session:
        result = await OpportunityAnalysisService(session).run(options)

    print(
        f"Found {result.clusters_found} clusters, "
        f"wrote {result.opportunities_written} opportunities"
    )
    for candidate in result.opportunities[:10]:
        print(
            f"  {candidate.opportunity_score:5.1f}  {candidate.keyword} "
            f"({candidate.impressions_30d} impressions, {len(candidate.cluster_keywords)} queries)"
        )


async def run_list(args: argparse.Namespace) -> None:
    async with get_session_context() as session:
        opportunities = await OpportunityRepository(session).list_opportunities(
            status=args.status,
            limit=args.limit,
            order_by=args.sort,
        )

    if not opportunities:
        print("No opportunities found")
        return
    for item in opportunities:
        print(
            f"{item.id:>5}  {item.opportunity_score:5.1f}  {item.status:<11}  {item.keyword}"
        )


async def run_set_status(args: argparse.Namespace) -> None:
    async with get_session_context() as session:
        opportunity = await OpportunityRepository(session).set_status(
            args.opportunity_id,
            args.status,
        )
    print(f"Opportunity {opportunity.id} is now {opportunity.status}")


async def run_init_db(args: argparse.Namespace) -> None:
    await init_db()
    print("Database initialized")


COMMANDS: dict[str, Command] = {
    "fetch": run_fetch,
    "sync": run_sync,
    "analyze": run_analyze,
    "list": run_list,
    "set-status": run_set_status,
    "init-db": run_init_db,
}


async def run_command(args: argparse.Namespace) -> None:
    """Dispatch to the selected subcommand and release connections afterwards."""
    try:
        await COMMANDS[args.command](args)
    finally:
        await close_db()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI."""
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else None)
    try:
        asyncio.run(run_command(args))
    except SEOEngineError as e:
        logger.error("Command failed", extra={"command": args.command, "error": e.message})
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
