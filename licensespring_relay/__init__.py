"""Relays completed PayPal orders to the LicenseSpring order webhook."""

from .config import ConfigurationError, WebhookConfig
from .models import DeliveryOutcome, FrontendResult, LicenseSpringOrder, PayPalOrder
from .translator import OrderValidationError, ValidationErrorKind
from .workflow import OrderWebhook

__all__ = [
    "ConfigurationError",
    "DeliveryOutcome",
    "FrontendResult",
    "LicenseSpringOrder",
    "OrderValidationError",
    "OrderWebhook",
    "PayPalOrder",
    "ValidationErrorKind",
    "WebhookConfig",
]
