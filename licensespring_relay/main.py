"""
main.py — FastAPI Entry Point for the License Relay

This module exposes the OrderWebhook over HTTP. A shop frontend posts the
completed PayPal order here after checkout and receives the result message
to show to the buyer.

Responsibilities:
    • Accept completed PayPal orders via HTTP API
    • Run each relay in the worker thread pool, so one order's retry backoff
      never blocks the event loop or other orders
    • Provide system health information
"""

from functools import lru_cache

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool

from .config import WebhookConfig
from .logging_config import get_logger, setup_logging
from .models import FrontendResult
from .workflow import OrderWebhook

# Initialization
setup_logging()
log = get_logger(__name__)
app = FastAPI(title="PayPal LicenseSpring Relay")


@lru_cache(maxsize=1)
def get_order_webhook() -> OrderWebhook:
    """
    Returns the process-wide OrderWebhook, built from environment variables at startup.

    Raises:
        ConfigurationError: If the LicenseSpring credentials are not set.
    """
    log.info("Building OrderWebhook from environment.")
    return OrderWebhook(WebhookConfig.from_env())


# Startup Event: fail at boot if the credentials are missing
@app.on_event("startup")
def on_startup():
    """
    FastAPI startup event handler.

    Builds the OrderWebhook up front so that missing LicenseSpring credentials
    stop the service at boot instead of failing the first order with a 500.

    Raises:
        ConfigurationError: If the LicenseSpring credentials are not set.
    """
    log.info("License relay starting...")
    get_order_webhook()
    log.info("OrderWebhook ready.")


@app.on_event("shutdown")
def on_shutdown():
    if get_order_webhook.cache_info().currsize:
        get_order_webhook().close()


# API Endpoint: Shop → Relay
@app.post("/v1/paypal/orders", response_model=FrontendResult)
async def submit_paypal_order(
        request: Request,
        webhook: OrderWebhook = Depends(get_order_webhook),
):
    """
    Receives a completed PayPal order and relays it to LicenseSpring.

    The body is the PayPal order JSON exactly as returned by PayPal. It is read
    raw rather than through a Pydantic model so that malformed payloads get the
    relay's own validation messages.

    Returns:
        FrontendResult: success flag and message. Always HTTP 200; failures are
        reported through `success`.
    """
    payload = await request.body()
    log.info(f"PayPal order received ({len(payload)} bytes).")
    return await run_in_threadpool(webhook.create_order, payload)


# Health Check Endpoint
@app.get("/health")
def health_check():
    """
    Simple health check endpoint.

    Returns:
        dict: A basic JSON object indicating service availability.
    """
    return {"status": "ok"}
