"""
Tests for PayPal payload validation and translation into LicenseSpring orders.

Covers:
- validation order and error kinds/messages
- sku decoding and per-product license grouping
- order id, created timestamp, customer block
"""

from __future__ import annotations

import base64
import json

import pytest

from licensespring_relay.models import PayPalOrder
from licensespring_relay.translator import (
    OrderValidationError,
    ValidationErrorKind,
    decode_sku,
    format_created,
    translate_order,
    validate_payload,
)
from tests.helpers import make_sku, paypal_order


def _translate(order: dict):
    parsed = validate_payload(json.dumps(order))
    assert isinstance(parsed, PayPalOrder)
    return translate_order(parsed)


# ---------------------------------------------------------------------------
# validate_payload()
# ---------------------------------------------------------------------------

class TestValidatePayload:

    def test_valid_payload(self, payload):
        assert isinstance(validate_payload(payload), PayPalOrder)

    def test_accepts_bytes(self, payload):
        assert isinstance(validate_payload(payload.encode()), PayPalOrder)

    def test_invalid_json(self):
        result = validate_payload("{not json")
        assert isinstance(result, OrderValidationError)
        assert result.kind == ValidationErrorKind.MALFORMED_PAYLOAD
        assert result.message == "PayPal response has invalid JSON format."

    def test_missing_purchase_units(self):
        result = validate_payload(json.dumps({"id": "X"}))
        assert result.kind == ValidationErrorKind.MISSING_PURCHASE_UNITS
        assert result.message == "PayPal response missing 'purchase_units' object."

    def test_non_object_payload(self):
        result = validate_payload("[1, 2]")
        assert result.kind == ValidationErrorKind.MISSING_PURCHASE_UNITS

    def test_empty_purchase_units(self):
        result = validate_payload(json.dumps({"purchase_units": []}))
        assert result.kind == ValidationErrorKind.EMPTY_PURCHASE_UNITS
        assert result.message == "PayPal response missing 'purchase_units' data."

    def test_missing_items(self):
        result = validate_payload(json.dumps({"purchase_units": [{"reference_id": "r"}]}))
        assert result.kind == ValidationErrorKind.MISSING_ITEMS
        assert result.message == "PayPal response missing 'items' object."

    def test_purchase_units_reported_before_items(self):
        # no purchase_units and no items anywhere: the purchase_units check wins
        result = validate_payload(json.dumps({"items": []}))
        assert result.kind == ValidationErrorKind.MISSING_PURCHASE_UNITS

    def test_items_reported_before_bad_skus(self):
        result = validate_payload(json.dumps({"purchase_units": [{"skus": ["!!"]}]}))
        assert result.kind == ValidationErrorKind.MISSING_ITEMS

    def test_wrong_field_types(self):
        result = validate_payload(json.dumps(paypal_order(payer="someone")))
        assert isinstance(result, OrderValidationError)
        assert result.kind == ValidationErrorKind.MALFORMED_PAYLOAD
        assert result.message == "PayPal response has invalid order format."

    def test_later_purchase_units_are_ignored(self):
        order = paypal_order()
        order["purchase_units"].append({"unexpected": True})
        parsed = validate_payload(json.dumps(order))
        assert isinstance(parsed, PayPalOrder)
        assert len(parsed.purchase_units) == 1

    def test_validation_error_is_not_success(self):
        assert OrderValidationError(ValidationErrorKind.MISSING_ITEMS, "x").success is False


# ---------------------------------------------------------------------------
# decode_sku()
# ---------------------------------------------------------------------------

class TestDecodeSku:

    def test_pair(self):
        assert decode_sku(make_sku("DEMO", "ABC123")) == ("DEMO", "ABC123")

    def test_absent(self):
        assert decode_sku(None) is None
        assert decode_sku("") is None

    def test_single_token(self):
        assert decode_sku(base64.b64encode(b"DEMO").decode()) is None

    def test_three_parts(self):
        assert decode_sku(base64.b64encode(b"A;B;C").decode()) is None

    def test_unpadded(self):
        assert decode_sku("REVNTztBQkMxMg") == ("DEMO", "ABC12")

    def test_unpadded_single_pad_char(self):
        sku = make_sku("DEMO", "ABC123")
        assert sku.endswith("=") and not sku.endswith("==")
        sku = sku.rstrip("=")
        assert decode_sku(sku) == ("DEMO", "ABC123")

    def test_not_base64(self):
        assert decode_sku("a") is None

    def test_not_utf8(self):
        assert decode_sku(base64.b64encode(b"\xff\xfe;\xff").decode()) is None


# ---------------------------------------------------------------------------
# translate_order()
# ---------------------------------------------------------------------------

class TestTranslateOrder:

    def test_end_to_end_demo_order(self):
        order = _translate(paypal_order())
        assert [p.model_dump() for p in order.items] == [
            {"product_code": "DEMO", "licenses": [{"key": "ABC123"}]}
        ]
        assert order.customer.email == "a@b.com"
        assert order.append is True

    def test_merges_licenses_per_product(self):
        items = [
            {"sku": make_sku("PROD-A", "KEY1")},
            {"sku": make_sku("PROD-B", "KEY2")},
            {"sku": make_sku("PROD-A", "KEY3")},
        ]
        order = _translate(paypal_order(items=items))
        assert [p.product_code for p in order.items] == ["PROD-A", "PROD-B"]
        assert [lic.key for lic in order.items[0].licenses] == ["KEY1", "KEY3"]
        assert [lic.key for lic in order.items[1].licenses] == ["KEY2"]

    def test_skips_unusable_skus(self):
        items = [
            {"name": "no sku"},
            {"sku": base64.b64encode(b"LONELY").decode()},
            {"sku": make_sku("DEMO", "K1")},
        ]
        order = _translate(paypal_order(items=items))
        assert [p.product_code for p in order.items] == ["DEMO"]

    def test_no_items(self):
        assert _translate(paypal_order(items=[])).items == []

    def test_order_id(self):
        assert _translate(paypal_order()).id == "ref42_paypal_5O190127TN364715T"

    def test_missing_paypal_id_uses_literal(self):
        order = paypal_order()
        del order["id"]
        assert _translate(order).id == "ref42_paypal_id"

    def test_missing_reference_generates_fresh_token(self):
        order = paypal_order()
        del order["purchase_units"][0]["reference_id"]
        first = _translate(order).id
        second = _translate(order).id
        assert first.endswith("_paypal_5O190127TN364715T")
        assert first != second
        reference = first.split("_paypal_")[0]
        int(reference, 16)

    def test_null_ids_are_treated_as_absent(self):
        order = paypal_order(id=None)
        order["purchase_units"][0]["reference_id"] = None
        order_id = _translate(order).id
        reference, paypal_id = order_id.split("_paypal_")
        assert paypal_id == "id"
        assert len(reference) == 32
        int(reference, 16)

    def test_created_reformatted(self):
        assert _translate(paypal_order()).created == "2026-10-19 08:15:30"

    def test_created_missing(self):
        order = paypal_order()
        del order["create_time"]
        assert _translate(order).created == ""

    def test_customer_with_name(self):
        customer = _translate(paypal_order()).customer
        assert customer.first_name == "Ada"
        assert customer.last_name == "Lovelace"

    def test_customer_partial_name(self):
        order = paypal_order(payer={"name": {"given_name": "Ada"}})
        customer = _translate(order).customer
        assert customer.email == ""
        assert customer.first_name == "Ada"
        assert customer.last_name == ""

    def test_customer_without_name(self):
        order = _translate(paypal_order(payer={"email_address": "a@b.com"}))
        body = json.loads(order.to_json())
        assert body["customer"] == {"email": "a@b.com"}

    def test_no_payer(self):
        order = paypal_order()
        del order["payer"]
        body = json.loads(_translate(order).to_json())
        assert "customer" not in body
        assert body["append"] is True


# ---------------------------------------------------------------------------
# format_created()
# ---------------------------------------------------------------------------

class TestFormatCreated:

    @pytest.mark.parametrize(
        "create_time, expected",
        [
            ("2026-01-05T03:04:05Z", "2026-01-05 03:04:05"),
            ("2026-01-05T03:04:05+02:00", "2026-01-05 01:04:05"),
            ("2026-01-05T03:04:05", "2026-01-05 03:04:05"),
            (None, ""),
            ("yesterday", ""),
        ],
    )
    def test_formats(self, create_time, expected):
        assert format_created(create_time) == expected
