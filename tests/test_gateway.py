import re
from datetime import datetime

import pytest

from models import DonationStatus
from services.gateway import compute_signature, generate_order_id, map_gateway_status, verify_signature


@pytest.mark.parametrize("transaction_status, expected", [
    ("capture", DonationStatus.PAID),
    ("settlement", DonationStatus.PAID),
    ("pending", DonationStatus.PENDING),
    ("deny", DonationStatus.FAILED),
    ("cancel", DonationStatus.FAILED),
    ("failure", DonationStatus.FAILED),
    ("expire", DonationStatus.EXPIRED),
    ("SETTLEMENT", DonationStatus.PAID),
    ("refund", None),
    ("", None),
    (None, None),
])
def test_map_gateway_status(transaction_status, expected):
    assert map_gateway_status(transaction_status) == expected


def test_verify_signature():
    payload = {"order_id": "DPF-1", "status_code": "200", "gross_amount": "10000.00"}
    payload["signature_key"] = compute_signature("DPF-1", "200", "10000.00", "secret")

    assert verify_signature(payload, "secret") is True
    assert verify_signature(payload, "other-secret") is False
    assert verify_signature(dict(payload, gross_amount="1.00"), "secret") is False


def test_generate_order_id():
    order_id = generate_order_id(datetime(2026, 10, 16, 9, 30, 0))

    assert re.fullmatch(r"DPF-20261016093000-[A-Za-z0-9]{5}", order_id)
    assert generate_order_id() != generate_order_id()
