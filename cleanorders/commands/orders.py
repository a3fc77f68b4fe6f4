"""
Order commands for the CLI.
Each command drives one operation of the order service.
"""

import json
import click
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..cli.base import BaseCommand, command_error_handler
from ..cli.config import Config
from ..exceptions import ClientLimitExceeded
from ..orders.order import Order
from ..orders.schema import SchemaError, decode_payload, encode_order, encode_payload
from ..service import OrderService
from ..utils.normalization import normalize_code
from ..utils.report import orders_to_frame

def resolve_order(service: OrderService, ref: str) -> Optional[Order]:
    """Find an order by id, or by code when no id matches."""
    order = service.get_by_id(ref)
    if order is not None:
        return order
    wanted = normalize_code(ref)
    for candidate in service.orders():
        if candidate.code and normalize_code(candidate.code) == wanted:
            return candidate
    return None

def parse_assignment(assignment: str) -> tuple:
    """Split 'key=value'; values are read as JSON when possible."""
    if '=' not in assignment:
        raise click.BadParameter(f"Expected key=value, got {assignment!r}")
    key, raw = assignment.split('=', 1)
    try:
        value = json.loads(raw)
    except ValueError:
        value = raw
    return key.strip(), value

class CreateOrderCommand(BaseCommand):
    """Command to register a new order at intake."""

    def __init__(self, config: Config, client_name: str, client_phone: str, client_code: str = '',
                 pay_rate: str = '0', pay_area: str = '0', notes: str = ''):
        super().__init__(config)
        self.fields = {
            'client_name': client_name,
            'client_phone': client_phone,
            'client_code': client_code,
            'pay_rate': pay_rate,
            'pay_area': pay_area,
            'notes': notes,
        }

    @command_error_handler
    def execute(self) -> None:
        """Execute the command."""
        try:
            order = self.service.create_order(**self.fields)
        except ClientLimitExceeded as e:
            click.secho(f"Error: {e}", fg='red')
            raise click.Abort()

        click.secho(f"Created order {order.code}", fg='green')
        click.echo(f"  id: {order.id}")
        click.echo(f"  total: {order.pay_total:.2f}")

class SetStatusCommand(BaseCommand):
    """Command to move an order to another status."""

    def __init__(self, config: Config, ref: str, status: str):
        super().__init__(config)
        self.ref = ref
        self.status = status

    @command_error_handler
    def execute(self) -> None:
        """Execute the command."""
        order = resolve_order(self.service, self.ref)
        if order is None:
            click.echo(f"No order found for {self.ref}")
            return
        self.service.set_status(order.id, self.status)
        current = self.service.get_by_id(order.id)
        click.echo(f"Order {current.code} is {current.status}")

class EditOrderCommand(BaseCommand):
    """Command to edit order fields without changing status."""

    def __init__(self, config: Config, ref: str, assignments: Sequence[str]):
        super().__init__(config)
        self.ref = ref
        self.assignments = list(assignments)

    def build_edits(self, order: Order) -> Dict[str, Any]:
        """Turn key=value pairs into a persisted-key edit mapping.

        Keys of the form 'flags.<name>' update a single flag.
        """
        edits: Dict[str, Any] = {}
        for assignment in self.assignments:
            key, value = parse_assignment(assignment)
            if key.startswith('flags.'):
                flags = edits.setdefault('flags', dict(encode_order(order)['flags']))
                flags[key[len('flags.'):]] = value
            else:
                edits[key] = value
        return edits

    @command_error_handler
    def execute(self) -> None:
        """Execute the command."""
        order = resolve_order(self.service, self.ref)
        if order is None:
            click.echo(f"No order found for {self.ref}")
            return
        edits = self.build_edits(order)
        if 'status' in edits:
            click.secho("Ignoring 'status': use the status command to change it", fg='yellow')
        self.service.apply_edits(order.id, edits)
        click.echo(f"Order {order.code} updated")

class ShowOrderCommand(BaseCommand):
    """Command to print a single order."""

    def __init__(self, config: Config, ref: str):
        super().__init__(config)
        self.ref = ref

    @command_error_handler
    def execute(self) -> None:
        """Execute the command."""
        order = resolve_order(self.service, self.ref)
        if order is None:
            click.echo(f"No order found for {self.ref}")
            return
        click.echo(json.dumps(encode_order(order), indent=2, ensure_ascii=False))

class SearchOrdersCommand(BaseCommand):
    """Command to search orders by name, phone or code."""

    def __init__(self, config: Config, query: str):
        super().__init__(config)
        self.query = query

    @command_error_handler
    def execute(self) -> None:
        """Execute the command."""
        self.echo_orders(self.service.search(self.query), f"Results for '{self.query}'")

class ListOrdersCommand(BaseCommand):
    """Command to list orders in a status."""

    def __init__(self, config: Config, status: str):
        super().__init__(config)
        self.status = status

    @command_error_handler
    def execute(self) -> None:
        """Execute the command."""
        self.echo_orders(self.service.list_by_status(self.status), f"Orders {self.status}")

class ReadyTodayCommand(BaseCommand):
    """Command to list ready orders to be picked up today."""

    @command_error_handler
    def execute(self) -> None:
        """Execute the command."""
        self.echo_orders(self.service.list_ready_today(), "Ready for pickup today")

class MergeSnapshotCommand(BaseCommand):
    """Command to sync against a JSON snapshot file used as the remote."""

    def __init__(self, config: Config, snapshot: Path, push: bool = False):
        super().__init__(config)
        self.snapshot = snapshot
        self.push = push

    async def fetch_snapshot(self) -> List[Order]:
        """Read the snapshot; a missing or unreadable file counts as empty."""
        if not self.snapshot.exists():
            return []
        try:
            orders, _ = decode_payload(self.snapshot.read_text(encoding='utf-8'), self.error_tracker)
        except SchemaError as e:
            self.logger.warning(f"Ignoring snapshot {self.snapshot}: {e}")
            return []
        return orders

    async def push_snapshot(self, orders: List[Order]) -> None:
        if self.push:
            self.snapshot.write_text(encode_payload(orders), encoding='utf-8')
            self.logger.info(f"Wrote {len(orders)} orders back to {self.snapshot}")

    def build_service(self) -> OrderService:
        return OrderService(
            self.config,
            fetch_remote=self.fetch_snapshot,
            push_remote=self.push_snapshot,
            error_tracker=self.error_tracker
        )

    @command_error_handler
    def execute(self) -> None:
        """Execute the command."""
        merged = self.service.sync_now()
        click.secho(f"Merged snapshot: {len(merged)} orders stored", fg='green')

class ExportOrdersCommand(BaseCommand):
    """Command to export all orders as CSV."""

    def __init__(self, config: Config, output_file: Path):
        super().__init__(config)
        self.output_file = output_file

    @command_error_handler
    def execute(self) -> None:
        """Execute the command."""
        frame = orders_to_frame(self.service.orders())
        frame.to_csv(self.output_file, index=False)
        click.echo(f"Exported {len(frame)} orders to {self.output_file}")
