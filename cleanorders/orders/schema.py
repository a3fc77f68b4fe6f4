"""Versioned on-disk schema for the order collection.

The durable slot holds a JSON envelope::

    {"schemaVersion": 2, "orders": [{...}, ...]}

A bare JSON list is the legacy (version 1) shape and is still accepted.
Decoding repairs record shape rather than rejecting it: malformed numbers
become 0, missing collections become empty, and keys this package does not
own are carried in ``Order.extra`` so they are written back verbatim.
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..processors.error_tracker import ErrorTracker
from ..utils.normalization import parse_number
from .order import Order, OrderFlags

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 2
LEGACY_SCHEMA_VERSION = 1

# Persisted key -> Order attribute
TEXT_FIELDS = {
    'code': 'code',
    'status': 'status',
    'clientName': 'client_name',
    'clientPhone': 'client_phone',
    'clientCode': 'client_code',
    'notes': 'notes',
}
NUMERIC_FIELDS = {
    'payRate': 'pay_rate',
    'payArea': 'pay_area',
    'payTotal': 'pay_total',
}
TIMESTAMP_FIELDS = {
    'createdAt': 'created_at',
    'updatedAt': 'updated_at',
}
KNOWN_KEYS = (
    {'id', 'pieces', 'flags'}
    | set(TEXT_FIELDS) | set(NUMERIC_FIELDS) | set(TIMESTAMP_FIELDS)
)

# Legacy snake_case key -> current key
LEGACY_KEYS = {
    'ts': 'createdAt',
    'client_name': 'clientName',
    'client_phone': 'clientPhone',
    'client_code': 'clientCode',
    'pay_rate': 'payRate',
    'pay_m2': 'payArea',
    'pay_euro': 'payTotal',
}

FLAG_KEYS = {
    'readyToday': 'ready_today',
    'noShow': 'no_show',
}


class SchemaError(ValueError):
    """Raised when a stored payload cannot be interpreted at all."""


def upgrade_keys(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Rename legacy keys; the current key wins when both are present."""
    data = dict(raw)
    for legacy, current in LEGACY_KEYS.items():
        if legacy in data:
            value = data.pop(legacy)
            data.setdefault(current, value)
    return data


def _decode_timestamp(value: Any) -> Optional[int]:
    number = parse_number(value) if value not in (None, '') else None
    if number is None:
        return None
    return int(number)


def _decode_flags(raw: Any) -> OrderFlags:
    if not isinstance(raw, Mapping):
        return OrderFlags()
    flags = OrderFlags()
    for key, value in raw.items():
        if key in FLAG_KEYS:
            setattr(flags, FLAG_KEYS[key], bool(value))
        else:
            flags.extra[key] = value
    return flags


def decode_order(raw: Any, tracker: Optional[ErrorTracker] = None) -> Optional[Order]:
    """Decode one persisted record into an Order.

    Args:
        raw: Decoded JSON value for a single record
        tracker: Optional tracker for absorbed anomalies

    Returns:
        The repaired Order, or None if the value is not a usable record
    """
    if not isinstance(raw, Mapping):
        if tracker:
            tracker.add_error('INVALID_RECORD', 'Record is not an object', {'value': repr(raw)[:80]})
        return None

    data = upgrade_keys(raw)
    order_id = data.get('id')
    if order_id is None or str(order_id).strip() == '':
        if tracker:
            tracker.add_error('INVALID_RECORD', 'Record has no id', {'code': data.get('code')})
        return None

    order = Order(id=str(order_id))

    for key, attr in TEXT_FIELDS.items():
        value = data.get(key)
        if value is not None:
            setattr(order, attr, str(value))

    for key, attr in NUMERIC_FIELDS.items():
        number = parse_number(data.get(key))
        if number is None:
            logger.debug(f"Order {order.id}: malformed {key} {data.get(key)!r}, using 0")
            if tracker:
                tracker.add_error(
                    'MALFORMED_NUMERIC_INPUT',
                    f"{key} is not a number",
                    {'id': order.id, 'value': repr(data.get(key))}
                )
            number = 0.0
        setattr(order, attr, number)

    for key, attr in TIMESTAMP_FIELDS.items():
        setattr(order, attr, _decode_timestamp(data.get(key)))

    pieces = data.get('pieces')
    order.pieces = list(pieces) if isinstance(pieces, list) else []
    order.flags = _decode_flags(data.get('flags'))
    order.extra = {key: value for key, value in data.items() if key not in KNOWN_KEYS}
    return order


def encode_order(order: Order) -> Dict[str, Any]:
    """Encode an Order into its persisted mapping."""
    data: Dict[str, Any] = dict(order.extra)
    data['id'] = order.id
    for key, attr in TEXT_FIELDS.items():
        data[key] = getattr(order, attr)
    for key, attr in TIMESTAMP_FIELDS.items():
        value = getattr(order, attr)
        if value is not None:
            data[key] = value
    for key, attr in NUMERIC_FIELDS.items():
        data[key] = getattr(order, attr)
    data['pieces'] = list(order.pieces)
    flags = dict(order.flags.extra)
    flags['readyToday'] = order.flags.ready_today
    flags['noShow'] = order.flags.no_show
    data['flags'] = flags
    return data


def decode_orders(items: List[Any], tracker: Optional[ErrorTracker] = None) -> List[Order]:
    """Decode a list of persisted records, dropping unusable ones."""
    orders = []
    for raw in items:
        order = decode_order(raw, tracker)
        if order is not None:
            orders.append(order)
    return orders


def decode_payload(text: Optional[str], tracker: Optional[ErrorTracker] = None) -> Tuple[List[Order], int]:
    """Decode the stored slot content.

    Args:
        text: Raw slot content, None when the slot has never been written
        tracker: Optional tracker for absorbed anomalies

    Returns:
        Tuple of (orders, schema_version)

    Raises:
        SchemaError: If the content is not JSON or has no order list
    """
    if text is None or not text.strip():
        return [], SCHEMA_VERSION

    try:
        payload = json.loads(text)
    except ValueError as e:
        raise SchemaError(f"Stored orders are not valid JSON: {e}")

    if isinstance(payload, list):
        return decode_orders(payload, tracker), LEGACY_SCHEMA_VERSION

    if isinstance(payload, Mapping) and isinstance(payload.get('orders'), list):
        version = _decode_timestamp(payload.get('schemaVersion')) or LEGACY_SCHEMA_VERSION
        return decode_orders(payload['orders'], tracker), version

    raise SchemaError(f"Stored orders have unexpected shape: {type(payload).__name__}")


def encode_payload(orders: List[Order]) -> str:
    """Encode the order collection as the current envelope."""
    return json.dumps(
        {'schemaVersion': SCHEMA_VERSION, 'orders': [encode_order(o) for o in orders]},
        ensure_ascii=False
    )
