"""Shared fixtures for the relay tests."""

from __future__ import annotations

import json

import pytest

from licensespring_relay.config import WebhookConfig
from tests.helpers import paypal_order


@pytest.fixture
def config() -> WebhookConfig:
    return WebhookConfig(api_key="test_api_key", secret_key="mock_secret")


@pytest.fixture
def payload() -> str:
    return json.dumps(paypal_order())
