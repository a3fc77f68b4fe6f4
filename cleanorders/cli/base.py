"""
Base command infrastructure for the order CLI.
Provides common functionality and utilities for all commands.
"""

import json
import click
import logging
import time
from abc import ABC, abstractmethod
from typing import List, Optional

from .config import Config

from ..orders.order import Order
from ..orders.schema import encode_order
from ..processors.error_tracker import ErrorTracker
from ..service import OrderService
from ..utils.clock import format_ms
from ..utils.report import orders_to_frame

class BaseCommand(ABC):
    """Base class for all CLI commands."""

    def __init__(self, config: Config):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)
        self.error_tracker = ErrorTracker()
        self._service = None

        # Get debug status from click context
        ctx = click.get_current_context(silent=True)
        self.debug = bool(ctx and ctx.obj and ctx.obj.get('debug'))
        if self.debug:
            self.logger.debug(f"Debug mode enabled for {self.__class__.__name__}")

    @property
    def service(self) -> OrderService:
        """Get or create the order service, migrated and ready."""
        if self._service is None:
            if self.debug:
                self.logger.debug(f"Opening order store at {self.config.database_url}")
            self._service = self.build_service()
            self._service.open()
        return self._service

    def build_service(self) -> OrderService:
        """Construct the service; commands with remote collaborators override this."""
        return OrderService(self.config, error_tracker=self.error_tracker)

    @abstractmethod
    def execute(self) -> None:
        """Execute the command. Must be implemented by subclasses."""
        pass

    def validate(self) -> bool:
        """Validate command configuration and requirements.

        Returns:
            bool: True if validation passes, False otherwise
        """
        if self.debug:
            self.logger.debug("Validating command configuration")
        try:
            return self.config.validate()
        except ValueError as e:
            self.logger.error(f"Invalid configuration: {e}")
            return False

    def echo_orders(self, orders: List[Order], title: Optional[str] = None) -> None:
        """Print orders in the configured output format."""
        if self.config.output_format == 'json':
            click.echo(json.dumps([encode_order(o) for o in orders], indent=2, ensure_ascii=False))
            return
        if self.config.output_format == 'csv':
            click.echo(orders_to_frame(orders).to_csv(index=False), nl=False)
            return

        if title:
            click.echo(f"\n{title} ({len(orders)}):")
        if not orders:
            click.echo("  No orders found")
            return
        for order in orders:
            click.echo(
                f"  - {order.code:<6} {order.status:<10} {order.client_name} "
                f"{order.client_phone}  {order.pay_total:.2f}  [{format_ms(order.updated_at)}]"
            )

    def finish(self) -> None:
        """Report anomalies recovered while the command ran."""
        if self.debug:
            self.error_tracker.log_summary(self.logger)

def command_error_handler(f):
    """Decorator to handle command execution errors consistently."""
    def wrapper(self, *args, **kwargs):
        start = time.time()
        try:
            if self.debug:
                self.logger.debug(f"Starting command execution: {f.__name__}")

            if not self.validate():
                raise click.Abort()

            result = f(self, *args, **kwargs)

            if self.debug:
                self.logger.debug(f"Command completed in {time.time() - start:.3f}s")

            return result

        except (click.Abort, click.ClickException):
            raise
        except Exception as e:
            self.error_tracker.add_error(
                'COMMAND_EXECUTION_ERROR',
                f"Command failed: {str(e)}",
                {
                    'command': self.__class__.__name__,
                    'error': str(e)
                }
            )
            self.logger.error(f"Command failed: {e}", exc_info=self.debug)
            raise click.Abort()
        finally:
            self.finish()
    return wrapper
