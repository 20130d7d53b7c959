"""CLI tools for directory administration."""

import logging
from uuid import UUID

import click

from tajneed.core.config import settings
from tajneed.db.session import SessionLocal
from tajneed.services import hierarchy_service, jamaat_mapping_service
from tajneed.services.errors import DirectoryError


@click.group()
def cli():
    """Tajneed directory CLI tools."""
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@cli.command()
def mapping_stats():
    """
    Show how many jamaats are mapped to a muqam.

    Example:
        python -m tajneed.cli mapping-stats
    """
    db = SessionLocal()
    try:
        stats = jamaat_mapping_service.get_mapping_stats(db)
        click.echo(f"Total jamaats: {stats.total}")
        click.echo(f"  Mapped:   {stats.mapped}")
        click.echo(f"  Unmapped: {stats.unmapped}")
        click.echo(f"  Coverage: {stats.mapping_percentage:.2f}%")
    finally:
        db.close()


@cli.command()
@click.option("--unmapped", is_flag=True, help="Only list jamaats without a muqam")
def list_jamaats(unmapped: bool):
    """List jamaats with their muqam."""
    db = SessionLocal()
    try:
        jamaats = jamaat_mapping_service.list_jamaats(db, only_unmapped=unmapped)
        if not jamaats:
            click.echo("No jamaats found")
            return
        for jamaat in jamaats:
            muqam = jamaat.muqam_name or "(unmapped)"
            click.echo(f"{jamaat.jamaat_id:>6}  {jamaat.name}  →  {muqam}  [{jamaat.id}]")
    finally:
        db.close()


@cli.command()
@click.option("--jamaat-id", required=True, type=click.UUID, help="Jamaat ID (internal UUID)")
@click.option("--muqam-id", required=True, type=click.UUID, help="Muqam ID")
def map_jamaat(jamaat_id: UUID, muqam_id: UUID):
    """
    Map a jamaat to a muqam (removes it from its previous muqam).

    Example:
        python -m tajneed.cli map-jamaat --jamaat-id <uuid> --muqam-id <uuid>
    """
    db = SessionLocal()
    try:
        result = jamaat_mapping_service.map_jamaat_to_muqam(db, jamaat_id, muqam_id)
        if not result.succeeded:
            click.echo(f"❌ {result.message}")
            return
        click.echo(f"✓ {result.message}")
    except DirectoryError as e:
        click.echo(f"❌ Error: {e}")
    finally:
        db.close()


@cli.command()
@click.option("--jamaat-id", required=True, type=click.UUID, help="Jamaat ID (internal UUID)")
def unmap_jamaat(jamaat_id: UUID):
    """
    Unmap a jamaat from its current muqam.

    Example:
        python -m tajneed.cli unmap-jamaat --jamaat-id <uuid>
    """
    db = SessionLocal()
    try:
        result = jamaat_mapping_service.unmap_jamaat(db, jamaat_id)
        if not result.succeeded:
            click.echo(f"❌ {result.message}")
            return
        click.echo(f"✓ {result.message}")
    except DirectoryError as e:
        click.echo(f"❌ Error: {e}")
    finally:
        db.close()


@cli.command()
@click.option("--chanda-no", required=True, help="Membership number")
def resolve_member(chanda_no: str):
    """Show the muqam/dila/zone chain a member resolves to."""
    db = SessionLocal()
    try:
        context = hierarchy_service.resolve_member_hierarchy(db, chanda_no)
        if context is None:
            click.echo(f"❌ Member with membership number '{chanda_no}' not found")
            return
        level = context.organization_level.value if context.organization_level else "none"
        click.echo(f"Member {chanda_no}")
        click.echo(f"  Muqam: {context.muqam_id or '-'}")
        click.echo(f"  Dila:  {context.dila_id or '-'}")
        click.echo(f"  Zone:  {context.zone_id or '-'}")
        click.echo(f"  Level: {level}")
    finally:
        db.close()


@cli.command()
def stats():
    """Show directory-wide counts."""
    db = SessionLocal()
    try:
        statistics = hierarchy_service.get_directory_statistics(db)
        click.echo(f"Zones:   {statistics.total_zones}")
        click.echo(f"Dilas:   {statistics.total_dilas} ({statistics.unassigned_dilas} without zone)")
        click.echo(f"Muqams:  {statistics.total_muqams} ({statistics.unassigned_muqams} without dila)")
        click.echo(f"Jamaats: {statistics.total_jamaats}")
        click.echo(f"Members: {statistics.total_members}")
    finally:
        db.close()


if __name__ == "__main__":
    cli()
