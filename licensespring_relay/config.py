"""
config.py — Immutable configuration for the LicenseSpring order webhook.

Host, endpoint path, backoff parameters and the fixed user-facing messages
live in one frozen object that is handed to the orchestrator at construction.
Credentials can be supplied directly or read from the environment.
"""

import os

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_API_HOST = "https://api.licensespring.com"
ORDER_ENDPOINT = "/api/v3/webhook/order"

ORDER_SUCCESSFUL_MSG = "License keys successfuly activated."
ORDER_ERROR_MSG = "There was a problem activating your license keys. Please contact LicenseSpring."


class ConfigurationError(Exception):
    """Raised when required credentials are missing from the environment."""


class WebhookConfig(BaseModel):
    """
    Read-only settings shared by every create_order call.

    Attributes:
        api_key (str): Public LicenseSpring API key, sent in the Authorization header.
        secret_key (str): Shared HMAC key. Never shown in repr or logs.
        api_host (str): Scheme and host of the LicenseSpring API.
        order_endpoint (str): Path of the order webhook.
        backoff_steps (int): Maximum number of delivery attempts.
        backoff_wait_ms (int): Wait step in milliseconds; the wait after attempt N is N steps.
        connect_timeout (float): Per-attempt connect timeout in seconds.
        read_timeout (float): Per-attempt read timeout in seconds.
        success_message (str): Message returned when the licenses were activated.
        error_message (str): Generic message for failures without a usable remote error.
    """
    model_config = ConfigDict(frozen=True)

    api_key: str
    secret_key: str = Field(repr=False)
    api_host: str = DEFAULT_API_HOST
    order_endpoint: str = ORDER_ENDPOINT
    backoff_steps: int = Field(10, ge=1)
    backoff_wait_ms: int = Field(100, ge=0)
    connect_timeout: float = 5.0
    read_timeout: float = 8.0
    success_message: str = ORDER_SUCCESSFUL_MSG
    error_message: str = ORDER_ERROR_MSG

    @classmethod
    def from_env(cls, environ=None) -> "WebhookConfig":
        """
        Builds the configuration from environment variables.

        Reads LICENSESPRING_API_KEY and LICENSESPRING_SECRET_KEY (required) and
        LICENSESPRING_API_HOST (optional).

        Raises:
            ConfigurationError: If one of the credentials is missing or empty.
        """
        env = os.environ if environ is None else environ

        api_key = env.get("LICENSESPRING_API_KEY", "")
        secret_key = env.get("LICENSESPRING_SECRET_KEY", "")
        missing = [
            name for name, value in (
                ("LICENSESPRING_API_KEY", api_key),
                ("LICENSESPRING_SECRET_KEY", secret_key),
            ) if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing environment variables: {', '.join(missing)}")

        return cls(
            api_key=api_key,
            secret_key=secret_key,
            api_host=env.get("LICENSESPRING_API_HOST", DEFAULT_API_HOST),
        )
