"""Utility functions and helpers."""

from .clock import now_ms, format_ms
from .normalization import (
    client_key,
    code_number,
    fold_name,
    format_code,
    normalize_code,
    normalize_phone,
    round2,
    to_number,
)
from .uuid import generate_order_id

__all__ = [
    'now_ms',
    'format_ms',
    'client_key',
    'code_number',
    'fold_name',
    'format_code',
    'normalize_code',
    'normalize_phone',
    'round2',
    'to_number',
    'generate_order_id'
]
