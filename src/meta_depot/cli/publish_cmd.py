"""Publish CLI commands for syncing listings with the depot."""

import asyncio

import typer
from loguru import logger

from meta_depot.core.config import ConfigurationError


def publish(
    full_resync: bool = typer.Option(
        False,
        "--full-resync",
        help="Upload every listing if the depot has no index yet",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="List uploaded listings"),
) -> None:
    """Compile all listings and upload the ones that changed."""
    asyncio.run(_publish(full_resync=full_resync, verbose=verbose))


async def _publish(*, full_resync: bool = False, verbose: bool = False) -> None:
    """Async implementation of the publish command."""
    from meta_depot.core.config import get_settings
    from meta_depot.lib.depot.base import DepotError
    from meta_depot.lib.listing.sync import MissingDepotIndexError
    from meta_depot.lib.meta_api.client import MetaApiError
    from meta_depot.services.publish_service import publish_listings

    settings = get_settings()

    try:
        result = await publish_listings(settings, full_resync=full_resync)
    except MissingDepotIndexError as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=1) from exc
    except ConfigurationError as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=1) from exc
    except (DepotError, MetaApiError) as exc:
        logger.error("Publish failed: {}", exc)
        typer.echo(f"Error: Publish failed — {exc}")
        raise typer.Exit(code=1) from exc

    typer.echo(f"Compiled {result.listing_count} listings")
    typer.echo(f"Uploaded: {len(result.uploaded)}, unchanged: {len(result.skipped)}")
    if verbose:
        for name in result.uploaded:
            typer.echo(f"  {name}")
    if result.unsafe_versions:
        typer.echo(f"Skipped unsafe versions: {', '.join(result.unsafe_versions)}")
    typer.echo(f"Duration: {result.duration_seconds:.1f}s")


def status() -> None:
    """Show the listings recorded in the published depot index."""
    asyncio.run(_status())


async def _status() -> None:
    """Async implementation of the status command."""
    from meta_depot.core.config import get_settings
    from meta_depot.lib.depot.factory import create_depot
    from meta_depot.lib.depot.webdav import WebDAVDepot
    from meta_depot.lib.listing.sync import fetch_depot_index

    settings = get_settings()

    try:
        depot = create_depot(settings)
    except ConfigurationError as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=1) from exc

    try:
        index = await fetch_depot_index(depot)
    except Exception as exc:
        typer.echo(f"Error: Failed to fetch depot index: {exc}")
        raise typer.Exit(code=1) from exc
    finally:
        if isinstance(depot, WebDAVDepot):
            await depot.aclose()

    if index is None:
        typer.echo("No listings have been published yet.")
        return

    typer.echo(f"Published listings ({len(index)}):")
    typer.echo("─" * 60)
    for listing in index:
        size_kb = listing.size / 1024
        typer.echo(f"  {listing.name:40s}  {size_kb:>8.1f} KB  {listing.last_modified}")
        typer.echo(f"    {depot.public_url(listing.url)}")
