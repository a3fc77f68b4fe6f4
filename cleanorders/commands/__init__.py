"""
Command implementations for the order CLI.
Each command class drives one order service operation.
"""

from .orders import (
    CreateOrderCommand,
    EditOrderCommand,
    ExportOrdersCommand,
    ListOrdersCommand,
    MergeSnapshotCommand,
    ReadyTodayCommand,
    SearchOrdersCommand,
    SetStatusCommand,
    ShowOrderCommand,
)

__all__ = [
    'CreateOrderCommand',
    'EditOrderCommand',
    'ExportOrdersCommand',
    'ListOrdersCommand',
    'MergeSnapshotCommand',
    'ReadyTodayCommand',
    'SearchOrdersCommand',
    'SetStatusCommand',
    'ShowOrderCommand'
]
