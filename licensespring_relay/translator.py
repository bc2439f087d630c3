"""
translator.py — PayPal order validation and translation

Turns the raw PayPal order document into a LicenseSpringOrder.

Validation runs in a fixed order and stops at the first problem. A failed
check is returned as an OrderValidationError value, never raised, so the
caller can hand it straight to the response formatter.

Translation groups the per-license PayPal items into one entry per product:
PayPal carries every license key as its own line item whose sku packs
"<product_code>;<license_key>" in base64.
"""

import base64
import binascii
import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from .models import (
    Customer,
    LicenseEntry,
    LicenseSpringOrder,
    OrderProduct,
    PayPalItem,
    PayPalOrder,
)

log = logging.getLogger(__name__)

MISSING_PAYPAL_ORDER_ID = "id"
CREATED_FORMAT = "%Y-%m-%d %H:%M:%S"


class ValidationErrorKind(str, Enum):
    MALFORMED_PAYLOAD = "malformed_payload"
    MISSING_PURCHASE_UNITS = "missing_purchase_units"
    EMPTY_PURCHASE_UNITS = "empty_purchase_units"
    MISSING_ITEMS = "missing_items"


@dataclass(frozen=True)
class OrderValidationError:
    """A rejected PayPal payload. `message` is shown to the caller as-is."""
    kind: ValidationErrorKind
    message: str

    success = False


def validate_payload(payload: Union[str, bytes]) -> Union[PayPalOrder, OrderValidationError]:
    """
    Checks the PayPal payload and parses it into a PayPalOrder.

    Checks, in order:
        1. The payload is valid JSON.
        2. The top-level object has 'purchase_units'.
        3. 'purchase_units' is a non-empty array.
        4. The first purchase unit has 'items'.
        5. The remaining fields have the types the order model expects.

    Args:
        payload (str | bytes): The JSON document received from PayPal.

    Returns:
        PayPalOrder | OrderValidationError: The parsed order, or the first failed check.
    """
    try:
        data = json.loads(payload)
    except (ValueError, TypeError):
        return OrderValidationError(
            ValidationErrorKind.MALFORMED_PAYLOAD,
            "PayPal response has invalid JSON format.",
        )

    if not isinstance(data, dict) or "purchase_units" not in data:
        return OrderValidationError(
            ValidationErrorKind.MISSING_PURCHASE_UNITS,
            "PayPal response missing 'purchase_units' object.",
        )

    purchase_units = data["purchase_units"]
    if not isinstance(purchase_units, list) or not purchase_units:
        return OrderValidationError(
            ValidationErrorKind.EMPTY_PURCHASE_UNITS,
            "PayPal response missing 'purchase_units' data.",
        )

    first_unit = purchase_units[0]
    if not isinstance(first_unit, dict) or "items" not in first_unit:
        return OrderValidationError(
            ValidationErrorKind.MISSING_ITEMS,
            "PayPal response missing 'items' object.",
        )

    # Only the first purchase unit is translated; later ones are not validated.
    data = dict(data, purchase_units=[first_unit])
    try:
        return PayPalOrder.model_validate(data)
    except ValidationError as e:
        log.warning(f"PayPal order rejected, unexpected field types: {e.error_count()} error(s)")
        return OrderValidationError(
            ValidationErrorKind.MALFORMED_PAYLOAD,
            "PayPal response has invalid order format.",
        )


def decode_sku(sku: Optional[str]) -> Optional[Tuple[str, str]]:
    """
    Decodes an item sku into (product_code, license_key).

    Missing "=" padding is restored before decoding. Returns None if the sku
    is absent, is not base64 text, or does not split into exactly two parts on ';'.
    """
    if not sku:
        return None
    padded = sku + "=" * (-len(sku) % 4)
    try:
        decoded = base64.b64decode(padded).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None

    parts = decoded.split(";")
    if len(parts) != 2:
        return None
    return parts[0], parts[1]


def group_licenses(items: List[PayPalItem]) -> Dict[str, List[LicenseEntry]]:
    """
    Merges single-license items into per-product license lists.

    Products keep the order in which they are first seen, licenses keep item order.
    Items without a usable sku are skipped.
    """
    products_licenses: Dict[str, List[LicenseEntry]] = {}
    for item in items:
        decoded = decode_sku(item.sku)
        if decoded is None:
            continue
        product_code, license_key = decoded
        products_licenses.setdefault(product_code, []).append(LicenseEntry(key=license_key))
    return products_licenses


def format_created(create_time: Optional[str]) -> str:
    """Reformats PayPal's ISO 8601 create_time as "YYYY-MM-DD HH:MM:SS" in UTC."""
    if not create_time:
        return ""
    try:
        created = datetime.fromisoformat(create_time)
    except ValueError:
        log.warning(f"Unparsable PayPal create_time '{create_time}', sending empty 'created'.")
        return ""
    if created.tzinfo is not None:
        created = created.astimezone(timezone.utc)
    return created.strftime(CREATED_FORMAT)


def translate_order(order: PayPalOrder) -> LicenseSpringOrder:
    """
    Builds the LicenseSpring order for a validated PayPal order.

    Args:
        order (PayPalOrder): Output of validate_payload.

    Returns:
        LicenseSpringOrder: The order body for the LicenseSpring webhook.
    """
    purchase_unit = order.purchase_units[0]

    paypal_order_id = order.id if order.id is not None else MISSING_PAYPAL_ORDER_ID
    order_reference = purchase_unit.reference_id
    if order_reference is None:
        order_reference = uuid.uuid4().hex

    customer = None
    payer = order.payer
    if payer is not None:
        customer = Customer(email=payer.email_address or "")
        if payer.name is not None:
            customer = Customer(
                email=customer.email,
                first_name=payer.name.given_name or "",
                last_name=payer.name.surname or "",
            )

    products = [
        OrderProduct(product_code=product_code, licenses=licenses)
        for product_code, licenses in group_licenses(purchase_unit.items).items()
    ]

    return LicenseSpringOrder(
        id=f"{order_reference}_paypal_{paypal_order_id}",
        created=format_created(order.create_time),
        append=True,
        customer=customer,
        items=products,
    )
