"""
responses.py — Caller-facing result messages

Maps a delivery outcome or a validation failure onto a FrontendResult.
Only responses actually received from LicenseSpring are searched for a
structured error; transport error text is never parsed.
"""

import json
from typing import Optional, Union

from .config import ORDER_ERROR_MSG, ORDER_SUCCESSFUL_MSG
from .models import DeliveryOutcome, FrontendResult
from .translator import OrderValidationError


def extract_remote_error(body: Optional[str]) -> Optional[str]:
    """
    Pulls "<message>: <value>" out of a LicenseSpring error body.

    Expected shape: {"errors": [{"message": "...", "value": "..."}, ...]}.
    Returns None if the body is not JSON or does not have that shape.
    """
    if not body:
        return None
    try:
        data = json.loads(body)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None

    errors = data.get("errors")
    if not isinstance(errors, list) or not errors:
        return None
    first = errors[0]
    if not isinstance(first, dict) or "message" not in first or "value" not in first:
        return None

    value = first["value"]
    return f"{first['message']}: {'' if value is None else value}"


def format_response(
        outcome: Union[DeliveryOutcome, OrderValidationError],
        custom_message: Optional[str] = None,
        success_message: str = ORDER_SUCCESSFUL_MSG,
        error_message: str = ORDER_ERROR_MSG,
) -> FrontendResult:
    """
    Builds the result returned to the caller.

    Args:
        outcome: The delivery outcome, or the validation failure that stopped the order.
        custom_message (str, optional): Overrides any other message when given.
        success_message (str): Message for a successful delivery.
        error_message (str): Message for failures without a usable LicenseSpring error.

    Returns:
        FrontendResult: success flag and message.
    """
    if custom_message is not None:
        return FrontendResult(success=outcome.success, message=custom_message)

    if outcome.success:
        return FrontendResult(success=True, message=success_message)

    message = None
    if isinstance(outcome, DeliveryOutcome) and outcome.status_code is not None:
        message = extract_remote_error(outcome.error)
    return FrontendResult(success=False, message=message or error_message)
