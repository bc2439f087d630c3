"""
workflow.py — Core Orchestration Logic for the PayPal → LicenseSpring relay

This module contains the OrderWebhook, which relays one completed PayPal order
to the LicenseSpring order webhook.

Workflow Overview:
1. Validate the PayPal payload and translate it into a LicenseSpring order
2. Serialize the order and sign the Date header with the shared secret
3. Deliver the order with bounded retry
4. Map the outcome onto a FrontendResult
"""

import logging
import time
from datetime import datetime, timezone

import httpx

from .clients import LicenseSpringClient, RetryingDelivery
from .config import WebhookConfig
from .models import FrontendResult
from .responses import format_response
from .signing import build_authorization_header, format_date_header, sign
from .translator import OrderValidationError, translate_order, validate_payload

log = logging.getLogger(__name__)


class OrderWebhook:
    """
    Relays PayPal orders to LicenseSpring.

    An instance only holds read-only configuration and the HTTP client, so one
    instance can serve concurrent create_order calls from several threads.

    Usage::

        webhook = OrderWebhook(WebhookConfig(api_key="...", secret_key="..."))
        result = webhook.create_order(paypal_order_json)
    """

    def __init__(self, config: WebhookConfig, http_client: httpx.Client = None,
                 sleep=time.sleep, clock=None):
        """
        Args:
            config (WebhookConfig): Credentials, endpoint and backoff settings.
            http_client (httpx.Client, optional): Injected HTTP client (tests, custom transports).
            sleep (callable): Blocking wait used between delivery attempts.
            clock (callable, optional): Returns the current UTC datetime for the Date header.
        """
        self.config = config
        self.client = LicenseSpringClient(config, http_client)
        self.delivery = RetryingDelivery.from_config(self.client, config, sleep=sleep)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def close(self):
        self.client.close()

    def build_headers(self) -> dict:
        """Returns the Date, Authorization and Content-Type headers for one request."""
        date_header = format_date_header(self._clock())
        signature = sign(self.config.secret_key, date_header)
        return {
            "Date": date_header,
            "Authorization": build_authorization_header(self.config.api_key, signature),
            "Content-Type": "application/json",
        }

    def create_order(self, payload) -> FrontendResult:
        """
        Relays one PayPal order to LicenseSpring.

        Args:
            payload (str | bytes): The PayPal order JSON, as received.

        Returns:
            FrontendResult: success flag and a user-facing message. Invalid payloads
            are answered without any network call; delivery problems are retried
            and only the final outcome is reported.
        """
        paypal_order = validate_payload(payload)
        if isinstance(paypal_order, OrderValidationError):
            log.warning(f"PayPal order rejected ({paypal_order.kind.value}): {paypal_order.message}")
            return format_response(paypal_order, custom_message=paypal_order.message)

        order = translate_order(paypal_order)
        log_prefix = f"[Order: {order.id}]"
        log.info(f"{log_prefix} Relaying {len(order.items)} product(s) to LicenseSpring.")

        outcome = self.delivery.deliver_with_retry(
            self.config.order_endpoint, order.to_json(), self.build_headers()
        )
        if outcome.success:
            log.info(f"{log_prefix} License keys activated (attempts: {outcome.attempts}).")
        else:
            log.error(f"{log_prefix} Relay failed after {outcome.attempts} attempt(s): {outcome.error}")

        return format_response(
            outcome,
            success_message=self.config.success_message,
            error_message=self.config.error_message,
        )
