"""Payload builders shared by the relay tests."""

from __future__ import annotations

import base64
from typing import Any, Dict, List, Optional


def make_sku(product_code: str, license_key: str) -> str:
    return base64.b64encode(f"{product_code};{license_key}".encode()).decode()


def paypal_order(
    items: Optional[List[Dict[str, Any]]] = None,
    **overrides: Any,
) -> Dict[str, Any]:
    """A completed PayPal order with one purchase unit."""
    order: Dict[str, Any] = {
        "id": "5O190127TN364715T",
        "status": "COMPLETED",
        "create_time": "2026-10-19T08:15:30Z",
        "payer": {
            "email_address": "a@b.com",
            "name": {"given_name": "Ada", "surname": "Lovelace"},
        },
        "purchase_units": [
            {
                "reference_id": "ref42",
                "items": items if items is not None else [{"name": "Demo", "sku": make_sku("DEMO", "ABC123")}],
            }
        ],
    }
    order.update(overrides)
    return order
