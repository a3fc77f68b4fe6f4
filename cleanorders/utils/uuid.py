"""UUID generation utilities."""

import uuid


def generate_order_id() -> str:
    """Generate a new order id.

    Returns:
        'ord_' followed by the hex form of a UUID4
    """
    return f"ord_{uuid.uuid4().hex}"
