"""
CLI module for the cleanorders package.
Provides command-line interface functionality and utilities.
The click group lives in ``cleanorders.cli.main``.
"""

from .base import BaseCommand
from .config import Config
from .logging import setup_logging, get_logger

__all__ = ['BaseCommand', 'Config', 'setup_logging', 'get_logger']
