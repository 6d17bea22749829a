"""Command-line entrypoint for fleet patrimony maintenance."""

import argparse
import logging
import sys
from typing import Optional

from patrimony.app_context import AppContext
from patrimony.config import get_settings, setup_logging
from patrimony.core.exceptions import AppError
from patrimony.core.formatters import format_brl
from patrimony.domain.views import PatrimonyReport, RefreshSummary
from patrimony.repositories.sqlalchemy import init_db

logger = logging.getLogger(__name__)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="fleet-patrimony",
        description="Valuate fractionally owned vehicles against reference prices",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("init-db", help="Create the database tables")
    subparsers.add_parser("refresh", help="Refresh the reference price of every asset")
    subparsers.add_parser("report", help="Print the full patrimony report")
    return parser.parse_args(argv)


def print_refresh_summary(summary: RefreshSummary) -> None:
    print("Refresh Summary")
    print("===============")
    print(f"Assets: {summary.total}")
    print(f"Updated: {summary.updated_count}")
    print(f"Failed: {summary.failed_count}")
    for asset_id in summary.failed_asset_ids:
        print(f"- {asset_id}")


def print_report(report: PatrimonyReport) -> None:
    print("Patrimony Report")
    print("================")
    print(f"Assets: {report.asset_count}")
    print(f"Grand total: {format_brl(report.grand_total)}")
    print(f"Individual assets: {format_brl(report.individual_value)}")
    print(f"Collective assets: {format_brl(report.collective.total_value)}")

    print("\nStakeholders:")
    for patrimony in report.stakeholders:
        print(f"- {patrimony.name} ({patrimony.role.value}): {format_brl(patrimony.total)}")

    for role, group in report.groups.items():
        print(f"\n{role.value} group: {format_brl(group.total)} "
              f"(average {format_brl(group.average)}, {group.member_count} members)")

    if report.unpriced_asset_ids:
        print("\nUnpriced assets:")
        for asset_id in report.unpriced_asset_ids:
            print(f"- {asset_id}")


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    settings = get_settings()
    setup_logging(settings)
    logger.debug("%s %s: %s", settings.app_name, settings.app_version, args.command)

    if args.command == "init-db":
        init_db()
        logger.info("Database ready at %s", settings.get_database_url())
        return 0

    context = AppContext(settings=settings)
    try:
        if args.command == "refresh":
            summary = context.scheduler.refresh_all()
            print_refresh_summary(summary)
            return 0 if summary.failed_count == 0 else 1
        print_report(context.aggregator.full_report())
        return 0
    except AppError as e:
        logger.error("%s: %s", e.code, e.message)
        return 2
    finally:
        context.close()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
