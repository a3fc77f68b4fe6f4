"""Tabular views of the order collection."""

from typing import Iterable

import pandas as pd

from ..orders.order import Order
from .clock import format_ms

REPORT_COLUMNS = [
    'code',
    'status',
    'client_name',
    'client_phone',
    'client_code',
    'pay_rate',
    'pay_area',
    'pay_total',
    'pieces',
    'ready_today',
    'no_show',
    'created_at',
    'updated_at',
    'notes',
    'id',
]


def orders_to_frame(orders: Iterable[Order]) -> pd.DataFrame:
    """Build a DataFrame with one row per order.

    Flags are flattened into columns, pieces are reported as a count and
    timestamps as local ISO strings.
    """
    rows = [{
        'code': order.code,
        'status': order.status,
        'client_name': order.client_name,
        'client_phone': order.client_phone,
        'client_code': order.client_code,
        'pay_rate': order.pay_rate,
        'pay_area': order.pay_area,
        'pay_total': order.pay_total,
        'pieces': len(order.pieces),
        'ready_today': order.flags.ready_today,
        'no_show': order.flags.no_show,
        'created_at': format_ms(order.created_at),
        'updated_at': format_ms(order.updated_at),
        'notes': order.notes,
        'id': order.id,
    } for order in orders]
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)
