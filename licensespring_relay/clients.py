"""
This module provides the communication client for the LicenseSpring API:
- LicenseSpringClient: a single signed POST against the order webhook (REST)
- RetryingDelivery: bounded, linearly growing backoff around that client
Failures never leave this module as exceptions; they are reported as DeliveryOutcome values.
"""

import logging
import time

import httpx

from .config import WebhookConfig
from .models import DeliveryOutcome

log = logging.getLogger(__name__)


# --- LicenseSpring Client (REST) ---
class LicenseSpringClient:
    """
    Client for the LicenseSpring API (REST).
    Performs exactly one network attempt per call and classifies the result.
    """
    def __init__(self, config: WebhookConfig, http_client: httpx.Client = None):
        """
        Initializes the HTTP client with the configured timeouts.

        Args:
            config (WebhookConfig): Host and timeout settings.
            http_client (httpx.Client, optional): Pre-built client, e.g. with a mock transport.
                A client passed in here is not closed by close().
        """
        self.api_host = config.api_host.rstrip("/")
        self._owns_client = http_client is None
        if http_client is None:
            timeout_config = httpx.Timeout(config.connect_timeout, read=config.read_timeout)
            http_client = httpx.Client(timeout=timeout_config)
        self.client = http_client

    def close(self):
        """Closes the HTTP client session if this instance created it."""
        if self._owns_client:
            self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def post(self, endpoint: str, body: str, headers: dict) -> DeliveryOutcome:
        """
        Sends one POST request to the LicenseSpring API.
        Args:
            endpoint (str): Path below the API host, e.g. '/api/v3/webhook/order'.
            body (str): JSON encoded request body.
            headers (dict): Date, Authorization and Content-Type headers.
        Returns:
            DeliveryOutcome: success for HTTP 201. Otherwise the transport error text
            (status_code None) or the raw response body (status_code set).
        """
        url = self.api_host + endpoint
        try:
            response = self.client.post(url, content=body.encode("utf-8"), headers=headers)
        except httpx.RequestError as e:
            log.error(f"LicenseSpring not reachable ({type(e).__name__}): {e}")
            return DeliveryOutcome(success=False, error=str(e) or type(e).__name__)

        if response.status_code != 201:
            log.warning(f"LicenseSpring rejected request (HTTP {response.status_code}).")
            return DeliveryOutcome(
                success=False,
                error=response.text,
                status_code=response.status_code,
            )

        return DeliveryOutcome(success=True, status_code=response.status_code)


# --- Retry wrapper ---
class RetryingDelivery:
    """
    Retries a LicenseSpringClient until it succeeds or the attempts run out.

    The wait after failed attempt N is N * backoff_wait_ms milliseconds, so the
    waits grow linearly (100ms, 200ms, ... with the default step). Waiting
    blocks the calling thread only.
    """
    def __init__(self, client: LicenseSpringClient, backoff_steps: int = 10,
                 backoff_wait_ms: int = 100, sleep=time.sleep):
        self.client = client
        self.backoff_steps = backoff_steps
        self.backoff_wait_ms = backoff_wait_ms
        self._sleep = sleep

    @classmethod
    def from_config(cls, client: LicenseSpringClient, config: WebhookConfig, sleep=time.sleep):
        return cls(client, config.backoff_steps, config.backoff_wait_ms, sleep=sleep)

    def deliver_with_retry(self, endpoint: str, body: str, headers: dict) -> DeliveryOutcome:
        """
        Posts to the endpoint, retrying failed attempts with backoff.
        Returns:
            DeliveryOutcome: The first successful outcome, or the outcome of the last attempt.
        """
        outcome = None
        for attempt in range(1, self.backoff_steps + 1):
            outcome = self.client.post(endpoint, body, headers)
            outcome = outcome.model_copy(update={"attempts": attempt})
            if outcome.success:
                if attempt > 1:
                    log.info(f"Delivery succeeded on attempt {attempt}/{self.backoff_steps}.")
                return outcome
            if attempt < self.backoff_steps:
                delay = attempt * self.backoff_wait_ms / 1000
                log.warning(f"Attempt {attempt}/{self.backoff_steps} failed, retrying in {delay:.1f}s.")
                self._sleep(delay)

        log.error(f"Delivery failed after {self.backoff_steps} attempts, giving up.")
        return outcome
