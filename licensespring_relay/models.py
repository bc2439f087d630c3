"""
models.py — Data Models for the PayPal → LicenseSpring relay

This module defines the data structures on both sides of the relay.
It uses Pydantic models so every optional field of the PayPal document is
an explicit Optional attribute rather than a key that has to be probed.

Models:
    - PayPalOrder and its parts: the inbound PayPal order (only the fields the relay reads).
    - LicenseSpringOrder and its parts: the order body sent to the LicenseSpring webhook.
    - DeliveryOutcome: result of one (or the last) delivery attempt.
    - FrontendResult: the only value handed back to callers.
"""

from pydantic import BaseModel, ConfigDict
from typing import List, Optional


# --- PayPal (inbound) ---
class PayPalName(BaseModel):
    given_name: Optional[str] = None
    surname: Optional[str] = None


class PayPalPayer(BaseModel):
    email_address: Optional[str] = None
    name: Optional[PayPalName] = None


class PayPalItem(BaseModel):
    """
    A single PayPal line item.

    Attributes:
        sku (str, optional): base64 of "<product_code>;<license_key>". Items without it carry no license.
    """
    sku: Optional[str] = None


class PurchaseUnit(BaseModel):
    reference_id: Optional[str] = None
    items: List[PayPalItem]


class PayPalOrder(BaseModel):
    """
    A completed PayPal order as returned by the PayPal Orders API.

    Unknown fields are ignored; only purchase_units[0].items is required.
    """
    id: Optional[str] = None
    create_time: Optional[str] = None
    payer: Optional[PayPalPayer] = None
    purchase_units: List[PurchaseUnit]


# --- LicenseSpring (outbound) ---
class LicenseEntry(BaseModel):
    key: str


class OrderProduct(BaseModel):
    product_code: str
    licenses: List[LicenseEntry]


class Customer(BaseModel):
    email: str = ""
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class LicenseSpringOrder(BaseModel):
    """
    Order body accepted by the LicenseSpring order webhook.

    Attributes:
        id (str): "<order_reference>_paypal_<paypal_order_id>".
        created (str): Order time as "YYYY-MM-DD HH:MM:SS", or "" if unknown.
        append (bool): Always True so a resent order adds to, not replaces, the existing one.
        customer (Customer, optional): Present only if PayPal reported a payer.
        items (List[OrderProduct]): One entry per product code, in first-seen order.
    """
    id: str
    created: str = ""
    append: bool = True
    customer: Optional[Customer] = None
    items: List[OrderProduct]

    def to_json(self) -> str:
        """Serializes the order for the wire, leaving out absent customer fields."""
        return self.model_dump_json(exclude_none=True)


# --- Results ---
class DeliveryOutcome(BaseModel):
    """
    Outcome of a delivery to the order webhook.

    Attributes:
        success (bool): True only for HTTP 201.
        error (str, optional): Transport error text, or the raw response body of a rejection.
        status_code (int, optional): HTTP status; None if no response was received.
        attempts (int): Number of attempts made to reach this outcome.
    """
    model_config = ConfigDict(frozen=True)

    success: bool
    error: Optional[str] = None
    status_code: Optional[int] = None
    attempts: int = 1


class FrontendResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    message: str
