"""Tests for decoding and encoding the stored order collection."""

import json
import pytest

from ..orders.order import Order, OrderFlags
from ..orders.schema import (
    LEGACY_SCHEMA_VERSION,
    SCHEMA_VERSION,
    SchemaError,
    decode_order,
    decode_payload,
    encode_order,
    encode_payload,
)
from ..processors.error_tracker import ErrorTracker

def test_decode_legacy_record():
    """Test legacy snake_case keys are mapped onto the current fields."""
    order = decode_order({
        'id': 'ord_a',
        'code': 'X004',
        'status': 'Ready',
        'ts': 1000,
        'client_name': 'Agim Berisha',
        'client_phone': '044123456',
        'pay_rate': '2.5',
        'pay_m2': 4,
        'pay_euro': 10,
        'flags': {'readyToday': 1, 'noShow': 0},
    })

    assert order.id == 'ord_a'
    assert order.created_at == 1000
    assert order.updated_at is None
    assert order.client_name == 'Agim Berisha'
    assert order.pay_rate == 2.5
    assert order.pay_area == 4.0
    assert order.pay_total == 10.0
    assert order.status == 'Ready'  # case is fixed by the migration pass
    assert order.flags.ready_today is True
    assert order.flags.no_show is False
    assert order.extra == {}

def test_current_key_wins_over_legacy_key():
    """Test a record carrying both key styles keeps the current one."""
    order = decode_order({'id': 'ord_a', 'clientName': 'New', 'client_name': 'Old'})
    assert order.client_name == 'New'

def test_unknown_fields_are_preserved():
    """Test keys owned by other components survive a decode/encode cycle."""
    raw = {
        'id': 'ord_a',
        'status': 'received',
        'updatedAt': 5,
        'pieces': [{'m2': 3.2, 'qty': 1}],
        'paidUpfront': 12.5,
        'flags': {'readyToday': False, 'noShow': False, 'vip': True},
    }
    encoded = encode_order(decode_order(raw))

    assert encoded['paidUpfront'] == 12.5
    assert encoded['pieces'] == [{'m2': 3.2, 'qty': 1}]
    assert encoded['flags']['vip'] is True
    assert encoded['updatedAt'] == 5

def test_malformed_values_are_repaired():
    """Test bad numbers become 0 and bad collections become empty."""
    tracker = ErrorTracker()
    order = decode_order({
        'id': 'ord_a',
        'payRate': 'abc',
        'payArea': None,
        'updatedAt': 'yesterday',
        'pieces': 'two rugs',
        'flags': 'none',
        'notes': None,
    }, tracker)

    assert order.pay_rate == 0.0
    assert order.pay_area == 0.0
    assert order.updated_at is None
    assert order.pieces == []
    assert order.flags == OrderFlags()
    assert order.notes == ''
    assert tracker.count('MALFORMED_NUMERIC_INPUT') == 1

@pytest.mark.parametrize('raw', [None, 'text', 42, [], {'code': 'X001'}, {'id': ''}])
def test_unusable_records_are_dropped(raw):
    """Test records that are not objects or lack an id decode to None."""
    tracker = ErrorTracker()
    assert decode_order(raw, tracker) is None
    assert tracker.count('INVALID_RECORD') == 1

def test_decode_payload_shapes():
    """Test envelope, legacy list and empty slot content."""
    envelope = json.dumps({'schemaVersion': 2, 'orders': [{'id': 'a'}, 'junk']})
    orders, version = decode_payload(envelope)
    assert [o.id for o in orders] == ['a']
    assert version == SCHEMA_VERSION

    orders, version = decode_payload(json.dumps([{'id': 'a'}, {'id': 'b'}]))
    assert [o.id for o in orders] == ['a', 'b']
    assert version == LEGACY_SCHEMA_VERSION

    assert decode_payload(None) == ([], SCHEMA_VERSION)
    assert decode_payload('  ') == ([], SCHEMA_VERSION)

@pytest.mark.parametrize('text', ['{not json', '42', '"orders"', '{"orders": {}}', '{"items": []}'])
def test_decode_payload_rejects_unusable_content(text):
    """Test content with no order list raises SchemaError."""
    with pytest.raises(SchemaError):
        decode_payload(text)

def test_encode_payload_writes_current_envelope():
    """Test encoding always produces the versioned envelope."""
    text = encode_payload([Order(id='a', client_name='Agë')])
    payload = json.loads(text)

    assert payload['schemaVersion'] == SCHEMA_VERSION
    assert payload['orders'][0]['clientName'] == 'Agë'
    assert 'updatedAt' not in payload['orders'][0]
