"""Tests for the per-client active order limit."""

import pytest

from ..exceptions import ClientLimitExceeded
from ..orders.order import OrderFlags
from ..processors.limiter import ClientActivityLimiter
from .conftest import make_order

def client_order(order_id, status, name='Agim Berisha', phone='044123456', **fields):
    return make_order(order_id, status=status, client_name=name, client_phone=phone, **fields)

def test_active_count_matches_normalized_client():
    """Test name case, accents and phone formatting do not matter."""
    limiter = ClientActivityLimiter()
    orders = [
        client_order('a', 'received', name='agim berisha '),
        client_order('b', 'cleaning', phone='044 123 456'),
        client_order('c', 'ready', name='Agïm Berisha'),
        client_order('d', 'delivered'),
        client_order('e', 'received', phone='049999999'),
    ]

    assert limiter.active_count_for(orders, 'Agim Berisha', '044-123-456') == 3

def test_no_show_still_counts_as_active():
    """Test the no-show flag only affects display lists."""
    limiter = ClientActivityLimiter()
    orders = [client_order('a', 'ready', flags=OrderFlags(no_show=True))]

    assert limiter.active_count_for(orders, 'Agim Berisha', '044123456') == 1

def test_second_active_order_is_rejected():
    """Test the default limit of one active order per client."""
    limiter = ClientActivityLimiter(max_active=1)
    orders = [client_order('a', 'cleaning')]

    with pytest.raises(ClientLimitExceeded) as exc_info:
        limiter.enforce_limit(orders, 'AGIM BERISHA', '+044 123 456')

    assert exc_info.value.count == 1
    assert exc_info.value.maximum == 1

def test_delivered_orders_do_not_count():
    """Test a client whose orders are all delivered may order again."""
    limiter = ClientActivityLimiter(max_active=1)
    limiter.enforce_limit([client_order('a', 'delivered')], 'Agim Berisha', '044123456')

def test_missing_name_or_phone_skips_enforcement():
    """Test an indeterminate client key is never blocked."""
    limiter = ClientActivityLimiter(max_active=1)
    orders = [client_order('a', 'received', name='', phone='')]

    limiter.enforce_limit(orders, '', '')
    limiter.enforce_limit(orders, 'Agim Berisha', '  ')
    limiter.enforce_limit(orders, None, '044123456')

def test_higher_limit_allows_more_orders():
    """Test the limit is configurable."""
    limiter = ClientActivityLimiter(max_active=2)
    orders = [client_order('a', 'received')]

    limiter.enforce_limit(orders, 'Agim Berisha', '044123456')
    with pytest.raises(ClientLimitExceeded):
        limiter.enforce_limit(orders + [client_order('b', 'ready')], 'Agim Berisha', '044123456')
