#!/usr/bin/env python3
"""
CLI for the Asset Reporting API

Commands:
    summary         - Headline asset/SRB counts
    distribution    - SRB records by amount range
    categories      - SRB records by Asset_Code
    count-active    - Active assets in a building
    serve           - Run the development server

Usage:
    python cli.py summary
    python cli.py distribution --pretty
    python cli.py categories --top 10
    python cli.py count-active --building "Computer Center"
    python cli.py serve --port 3001

Every report command fetches fresh data from NocoBase (no cache is shared
with a running server).
"""

import json
import logging
import sys

import click

from services.cache import TTLCache
from services.nocobase_client import NocoBaseClient, NocoBaseError
from services.report_service import BuildingNotFoundError, ReportService


def get_report_service() -> ReportService:
    """Report service with a throwaway cache for one CLI invocation."""
    return ReportService(client=NocoBaseClient(), cache=TTLCache())


def _echo_json(data, pretty: bool) -> None:
    click.echo(json.dumps(data, indent=2 if pretty else None, default=str))


def _run_report(compute, pretty: bool) -> None:
    try:
        result = compute()
    except NocoBaseError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    _echo_json(result, pretty)


@click.group()
@click.version_option(version="1.0.0", prog_name="asset-reports")
@click.option("--verbose", "-v", is_flag=True, help="Log each upstream page fetch")
def cli(verbose):
    """Asset Reporting CLI - Aggregated NocoBase asset and SRB statistics."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


@cli.command("summary")
@click.option("--pretty", is_flag=True, help="Indent JSON output")
def summary(pretty):
    """Headline counts: assets, buildings, instances, SRB totals."""
    _run_report(get_report_service().get_summary, pretty)


@cli.command("distribution")
@click.option("--pretty", is_flag=True, help="Indent JSON output")
@click.option("--counts-only", is_flag=True, help="Omit per-range item lists")
def distribution(pretty, counts_only):
    """SRB records bucketed by amount range (Lakh / Crore)."""
    def compute():
        result = get_report_service().get_amount_distribution()
        if counts_only:
            result = {
                **result,
                "ranges": {
                    name: {"count": r["count"], "total": r["total"]}
                    for name, r in result["ranges"].items()
                },
            }
        return result

    _run_report(compute, pretty)


@cli.command("categories")
@click.option("--pretty", is_flag=True, help="Indent JSON output")
@click.option("--top", type=click.IntRange(min=1), default=None, help="Only the N largest categories")
def categories(pretty, top):
    """SRB records grouped by Asset_Code, largest first."""
    def compute():
        result = get_report_service().get_asset_by_category()
        if top is not None:
            result = {**result, "categories": result["categories"][:top]}
        return result

    _run_report(compute, pretty)


@cli.command("count-active")
@click.option("--building", "-b", default="Computer Center", show_default=True,
              help="Building display name (case-insensitive)")
def count_active(building):
    """Count active assets in a building."""
    try:
        result = get_report_service().count_active_assets_in_building(building)
    except BuildingNotFoundError as e:
        click.secho(str(e), fg="yellow", err=True)
        sys.exit(2)
    except NocoBaseError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    click.echo(result["message"])


@cli.command("serve")
@click.option("--host", default="0.0.0.0", show_default=True)
@click.option("--port", type=int, default=None, help="Defaults to PORT env var (3001)")
@click.option("--debug", is_flag=True, help="Enable Flask debug mode")
def serve(host, port, debug):
    """Run the Flask development server."""
    from app import create_app

    app = create_app()
    app.run(host=host, port=port or app.config.get("PORT", 3001), debug=debug, threaded=True)


if __name__ == "__main__":
    cli()
