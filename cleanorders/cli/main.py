"""
Core CLI implementation for the cleanorders package.
"""

import click
from pathlib import Path

from .config import Config
from .logging import setup_logging, get_logger
from ..commands import (
    CreateOrderCommand,
    EditOrderCommand,
    ExportOrdersCommand,
    ListOrdersCommand,
    MergeSnapshotCommand,
    ReadyTodayCommand,
    SearchOrdersCommand,
    SetStatusCommand,
    ShowOrderCommand
)
from ..orders.order import OrderStatus

STATUS_CHOICES = click.Choice([status.value for status in OrderStatus], case_sensitive=False)

@click.group()
@click.option('--debug', is_flag=True, help='Enable detailed debug output')
@click.pass_context
def cli(ctx, debug: bool):
    """Carpet-cleaning order tracker"""
    # Store debug flag in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    # Initialize config and store in context
    try:
        config = Config.from_env()
        config.validate()
        ctx.obj['config'] = config
    except Exception as e:
        click.echo(f"Error initializing configuration: {str(e)}", err=True)
        ctx.exit(1)

    setup_logging(debug=debug, level=config.log_level, log_dir=config.log_dir)

    logger = get_logger('cli')
    if debug:
        logger.debug(f"Using database: {config.database_url} (slot '{config.storage_key}')")

@cli.command()
@click.option('--name', 'client_name', required=True, help='Client name')
@click.option('--phone', 'client_phone', required=True, help='Client phone number')
@click.option('--client-code', default='', help='Optional client reference')
@click.option('--rate', 'pay_rate', default='0', help='Price per square metre')
@click.option('--area', 'pay_area', default='0', help='Area in square metres')
@click.option('--notes', default='', help='Free-text notes')
@click.pass_context
def create(ctx, client_name: str, client_phone: str, client_code: str, pay_rate: str, pay_area: str, notes: str):
    """Register a new order for a client."""
    command = CreateOrderCommand(
        ctx.obj['config'], client_name, client_phone, client_code, pay_rate, pay_area, notes
    )
    command.execute()

@cli.command()
@click.argument('ref')
@click.argument('status', type=STATUS_CHOICES)
@click.pass_context
def status(ctx, ref: str, status: str):
    """Move order REF (id or code) to STATUS."""
    SetStatusCommand(ctx.obj['config'], ref, status).execute()

@cli.command()
@click.argument('ref')
@click.argument('assignments', nargs=-1, required=True)
@click.pass_context
def edit(ctx, ref: str, assignments):
    """Edit fields of order REF, e.g. notes="2 rugs" payRate=2.5 flags.noShow=true"""
    EditOrderCommand(ctx.obj['config'], ref, assignments).execute()

@cli.command()
@click.argument('ref')
@click.pass_context
def show(ctx, ref: str):
    """Print order REF (id or code) as JSON."""
    ShowOrderCommand(ctx.obj['config'], ref).execute()

@cli.command()
@click.argument('query', nargs=-1, required=True)
@click.pass_context
def search(ctx, query):
    """Search orders by client name, phone or code."""
    SearchOrdersCommand(ctx.obj['config'], ' '.join(query)).execute()

@cli.command('list')
@click.argument('status', type=STATUS_CHOICES)
@click.pass_context
def list_orders(ctx, status: str):
    """List orders in STATUS (no-shows excluded)."""
    ListOrdersCommand(ctx.obj['config'], status).execute()

@cli.command('ready-today')
@click.pass_context
def ready_today(ctx):
    """List ready orders flagged for pickup today."""
    ReadyTodayCommand(ctx.obj['config']).execute()

@cli.command('merge-snapshot')
@click.argument('snapshot', type=click.Path(dir_okay=False, path_type=Path))
@click.option('--push', is_flag=True, help='Write the merged collection back to the snapshot')
@click.pass_context
def merge_snapshot(ctx, snapshot: Path, push: bool):
    """Sync the local orders with a JSON snapshot file."""
    MergeSnapshotCommand(ctx.obj['config'], snapshot, push).execute()

@cli.command()
@click.argument('output', type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def export(ctx, output: Path):
    """Export all orders to a CSV file."""
    ExportOrdersCommand(ctx.obj['config'], output).execute()

if __name__ == '__main__':
    cli()
