"""
mock_licensespring.py — Mock Implementation of the LicenseSpring order webhook (REST API)

This module provides a simulated LicenseSpring API for testing the relay.
It exposes a simple FastAPI application that mimics the order webhook.

Simulation Scenarios:
    • Successful order (HTTP 201)
    • Bad or missing signature (HTTP 401)
    • Unknown product code, any code starting with "UNKNOWN" (HTTP 400)
    • Temporary outage, any code starting with "FLAKY" fails the first request for that order (HTTP 503)

Endpoints:
    POST /api/v3/webhook/order — Handles incoming order notifications.

Port:
    Default: 8002 (HTTP)
"""

from fastapi import FastAPI, Header
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import List, Optional
import logging
import os
import re

from licensespring_relay.signing import sign

app = FastAPI(title="Mock LicenseSpring API")
logging.basicConfig(level=logging.INFO)

MOCK_SECRET_KEY = os.environ.get("MOCK_LICENSESPRING_SECRET", "mock_secret")

AUTH_PATTERN = re.compile(r'(\w+)="([^"]*)"')

# Order ids whose simulated outage has not been retried yet.
_flaky_seen = set()


class License(BaseModel):
    key: str


class Product(BaseModel):
    product_code: str
    licenses: List[License]


class Customer(BaseModel):
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class OrderRequest(BaseModel):
    """
    Represents the order payload sent by the relay.

    Attributes:
        id (str): Order id, "<reference>_paypal_<paypal id>".
        created (str): Order creation time, may be empty.
        append (bool): Add licenses to an existing order with the same id.
        customer (Customer, optional): Buyer details.
        items (List[Product]): Licenses grouped per product.
    """
    id: str
    created: str
    append: bool
    customer: Optional[Customer] = None
    items: List[Product]


def _error(status_code: int, message: str, value: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"errors": [{"message": message, "value": value}]},
    )


@app.post("/api/v3/webhook/order")
def create_order(
        order: OrderRequest,
        date: str = Header(...),
        authorization: str = Header(...),
):
    """
        Processes an order notification.

        The Authorization header must carry a signature over the Date header
        made with MOCK_SECRET_KEY. The outcome then depends on the product codes:
            - Starts with "UNKNOWN" → Unknown product (HTTP 400)
            - Starts with "FLAKY" → First request per order fails (HTTP 503)
            - Anything else → Order created (HTTP 201)

        Returns:
            dict: The order id and the number of activated licenses (HTTP 201),
            or an `errors` list describing the problem.
    """
    fields = dict(AUTH_PATTERN.findall(authorization))
    if fields.get("signature") != sign(MOCK_SECRET_KEY, date):
        logging.warning(f"[LS] Invalid signature for order {order.id}.")
        return _error(401, "Invalid signature", fields.get("apiKey", ""))

    for product in order.items:
        if product.product_code.startswith("UNKNOWN"):
            logging.warning(f"[LS] Order {order.id} references unknown product {product.product_code}.")
            return _error(400, "Unknown product", product.product_code)
        if product.product_code.startswith("FLAKY") and order.id not in _flaky_seen:
            _flaky_seen.add(order.id)
            logging.warning(f"[LS] Simulating outage for order {order.id}.")
            return JSONResponse(status_code=503, content={"detail": "Service unavailable"})

    _flaky_seen.discard(order.id)
    license_count = sum(len(product.licenses) for product in order.items)
    logging.info(f"[LS] Order {order.id} created with {license_count} license(s).")
    return JSONResponse(status_code=201, content={"id": order.id, "licenses": license_count})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8002)
